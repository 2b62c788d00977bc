from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from functools import total_ordering


class LengthUnit(float, Enum):
    """
    Supported distance units; the value is the number of meters in one unit.
    """

    METER = 1.0
    KILOMETER = 1000.0
    FOOT = 0.3048
    MILE = 1609.34


@total_ordering
@dataclass(frozen=True, eq=False, init=False, repr=False)
class Length:
    """
    A distance stored in meters.

    Equality, hashing and ordering only look at the meter value, so
    `Length(1, LengthUnit.KILOMETER) == Length(1000, LengthUnit.METER)`.
    """

    _meters: float

    def __init__(self, value: float, unit: LengthUnit = LengthUnit.METER) -> None:
        object.__setattr__(self, "_meters", float(value) * float(unit.value))

    @classmethod
    def from_meters(cls, m: float) -> "Length":
        return cls(m, LengthUnit.METER)

    @classmethod
    def from_kilometers(cls, km: float) -> "Length":
        return cls(km, LengthUnit.KILOMETER)

    @classmethod
    def from_feet(cls, ft: float) -> "Length":
        return cls(ft, LengthUnit.FOOT)

    @classmethod
    def from_miles(cls, mi: float) -> "Length":
        return cls(mi, LengthUnit.MILE)

    @property
    def meters(self) -> float:
        return self._meters

    @property
    def kilometers(self) -> float:
        return self.to(LengthUnit.KILOMETER)

    @property
    def feet(self) -> float:
        return self.to(LengthUnit.FOOT)

    @property
    def miles(self) -> float:
        return self.to(LengthUnit.MILE)

    def to(self, unit: LengthUnit) -> float:
        return self._meters / float(unit.value)

    def __add__(self, other: "Length") -> "Length":
        if not isinstance(other, Length):
            return NotImplemented
        return Length(self._meters + other._meters)

    def __sub__(self, other: "Length") -> "Length":
        if not isinstance(other, Length):
            return NotImplemented
        return Length(self._meters - other._meters)

    def __mul__(self, factor: float) -> "Length":
        if isinstance(factor, Length):
            return NotImplemented
        return Length(self._meters * float(factor))

    __rmul__ = __mul__

    def __truediv__(self, divisor):
        # Length / Length is a plain ratio.
        if isinstance(divisor, Length):
            return self._meters / divisor._meters
        return Length(self._meters / float(divisor))

    def __neg__(self) -> "Length":
        return Length(-self._meters)

    def __abs__(self) -> "Length":
        return Length(abs(self._meters))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Length):
            return NotImplemented
        return self._meters == other._meters

    def __lt__(self, other: "Length") -> bool:
        if not isinstance(other, Length):
            return NotImplemented
        return self._meters < other._meters

    def __hash__(self) -> int:
        return hash(self._meters)

    def __repr__(self) -> str:
        return f"Length({self._meters!r} m)"


def meters(value: float) -> Length:
    return Length(value, LengthUnit.METER)


def kilometers(value: float) -> Length:
    return Length(value, LengthUnit.KILOMETER)


def feet(value: float) -> Length:
    return Length(value, LengthUnit.FOOT)


def miles(value: float) -> Length:
    return Length(value, LengthUnit.MILE)
