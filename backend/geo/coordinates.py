from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache

from pyproj import Geod

from geo.units import Length


@dataclass(frozen=True)
class GeoCoordinate:
    """
    WGS84 position in degrees.

    Convention used throughout this repo: latitude first, longitude second
    (the camera/marker APIs speak lat/lon, unlike the GeoJSON-style lon/lat tuples).
    """

    latitude: float
    longitude: float

    def normalized(self) -> "GeoCoordinate":
        lat = max(-90.0, min(90.0, float(self.latitude)))
        lon = (float(self.longitude) + 180.0) % 360.0 - 180.0
        return GeoCoordinate(latitude=lat, longitude=lon)

    def offset(self, d_lat: float, d_lon: float) -> "GeoCoordinate":
        return GeoCoordinate(
            latitude=self.latitude + d_lat, longitude=self.longitude + d_lon
        )

    def distance_to(self, other: "GeoCoordinate") -> Length:
        """
        Geodesic distance on the WGS84 ellipsoid.
        """
        _az12, _az21, dist_m = wgs84_geod().inv(
            self.longitude, self.latitude, other.longitude, other.latitude
        )
        return Length.from_meters(float(dist_m))


@lru_cache(maxsize=1)
def wgs84_geod() -> Geod:
    return Geod(ellps="WGS84")
