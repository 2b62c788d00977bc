from __future__ import annotations

import math
from collections.abc import Hashable
from dataclasses import dataclass
from enum import Enum
from typing import TypeAlias


# Opaque host handle; two values that compare equal are the same marker.
MarkerId: TypeAlias = Hashable


@dataclass(frozen=True)
class ScreenPoint:
    x: float
    y: float

    def distance_to(self, other: "ScreenPoint") -> float:
        return math.hypot(other.x - self.x, other.y - self.y)


@dataclass(frozen=True)
class ScreenRect:
    """
    Axis-aligned screen rectangle in device-independent pixels.

    Convention: y grows downwards, so top <= bottom for a well-formed rect.
    """

    left: float
    top: float
    right: float
    bottom: float

    @classmethod
    def around(cls, center: ScreenPoint, half_width: float) -> "ScreenRect":
        return cls(
            left=center.x - half_width,
            top=center.y - half_width,
            right=center.x + half_width,
            bottom=center.y + half_width,
        )

    @property
    def width(self) -> float:
        return self.right - self.left

    @property
    def height(self) -> float:
        return self.bottom - self.top

    @property
    def is_empty(self) -> bool:
        return self.left >= self.right or self.top >= self.bottom

    def normalized(self) -> "ScreenRect":
        return ScreenRect(
            left=min(self.left, self.right),
            top=min(self.top, self.bottom),
            right=max(self.left, self.right),
            bottom=max(self.top, self.bottom),
        )

    def intersects(self, other: "ScreenRect") -> bool:
        # Strict: rects that only share an edge do not intersect.
        return (
            self.left < other.right
            and other.left < self.right
            and self.top < other.bottom
            and other.top < self.bottom
        )

    def contains_point(self, p: ScreenPoint) -> bool:
        return self.left <= p.x < self.right and self.top <= p.y < self.bottom

    def as_tuple(self) -> tuple[float, float, float, float]:
        return (self.left, self.top, self.right, self.bottom)


@dataclass(frozen=True)
class LabelCandidate:
    id: MarkerId
    rect: ScreenRect
    is_priority: bool = False


@dataclass(frozen=True)
class TouchCandidate:
    id: MarkerId
    hit_rect: ScreenRect
    screen_position: ScreenPoint


class MarkerViewState(str, Enum):
    """
    How a marker is presented. Only the rendering layer acts on this; the core
    just decides which state each marker should be in.
    """

    PIN_ONLY = "pin_only"
    PIN_AND_LABEL = "pin_and_label"
    EXPANDED_WITH_LABEL = "expanded_with_label"

    @property
    def z_index(self) -> float:
        return _Z_INDEX[self]

    @property
    def shows_label(self) -> bool:
        return self is not MarkerViewState.PIN_ONLY


_Z_INDEX: dict[MarkerViewState, float] = {
    MarkerViewState.PIN_ONLY: 0.0,
    MarkerViewState.PIN_AND_LABEL: 1.0,
    MarkerViewState.EXPANDED_WITH_LABEL: 2.0,
}
