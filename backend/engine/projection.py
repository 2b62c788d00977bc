from __future__ import annotations

import math
from dataclasses import dataclass, field
from functools import lru_cache

from pyproj import Transformer

from engine.config import get_config
from engine.types import ViewportSize
from geo.bounds import CameraPose, clamp_zoom
from geo.coordinates import GeoCoordinate
from markers.types import ScreenPoint

_MAX_MERCATOR_LAT = 85.05112878
# Half the EPSG:3857 world width, in meters.
_WEB_MERCATOR_HALF_WORLD_M = math.pi * 6378137.0


@lru_cache(maxsize=1)
def transformer_4326_to_3857() -> Transformer:
    return Transformer.from_crs("EPSG:4326", "EPSG:3857", always_xy=True)


@lru_cache(maxsize=1)
def transformer_3857_to_4326() -> Transformer:
    return Transformer.from_crs("EPSG:3857", "EPSG:4326", always_xy=True)


@dataclass
class WebMercatorProjection:
    """
    Minimal stand-in for a renderer's projection service.

    Geospatial note:
    - Positions are projected to EPSG:3857 and scaled so that zoom 0 is one tile.
    - Bearing rotates the map around the viewport center; tilt is ignored.

    Holds the renderer's current camera, which the host updates via `move_to`.
    """

    pose: CameraPose = field(
        default_factory=lambda: CameraPose(target=GeoCoordinate(0.0, 0.0), zoom=1.0)
    )
    tile_size_dp: float | None = None

    def current_camera_pose(self) -> CameraPose:
        return self.pose

    def move_to(self, pose: CameraPose) -> None:
        self.pose = pose

    def screen_point_of(
        self,
        coordinate: GeoCoordinate,
        pose: CameraPose,
        viewport: ViewportSize,
        *,
        clip_to_viewport: bool = True,
    ) -> ScreenPoint | None:
        if abs(coordinate.latitude) > _MAX_MERCATOR_LAT:
            return None

        t = transformer_4326_to_3857()
        x, y = t.transform(coordinate.longitude, coordinate.latitude)
        cx, cy = t.transform(pose.target.longitude, _clamp_lat(pose.target.latitude))
        scale = self._dp_per_meter(pose.zoom)

        dx = _wrap_x(x - cx) * scale
        dy = -(y - cy) * scale  # screen y grows downwards

        theta = math.radians(pose.bearing)
        sx = dx * math.cos(theta) + dy * math.sin(theta)
        sy = -dx * math.sin(theta) + dy * math.cos(theta)

        center = viewport.center
        p = ScreenPoint(x=center.x + sx, y=center.y + sy)
        if clip_to_viewport and not viewport.contains(p):
            return None
        return p

    def geo_coordinate_of(
        self, point: ScreenPoint, pose: CameraPose, viewport: ViewportSize
    ) -> GeoCoordinate | None:
        center = viewport.center
        sx = point.x - center.x
        sy = point.y - center.y

        theta = math.radians(pose.bearing)
        dx = sx * math.cos(theta) - sy * math.sin(theta)
        dy = sx * math.sin(theta) + sy * math.cos(theta)

        scale = self._dp_per_meter(pose.zoom)
        t_fwd = transformer_4326_to_3857()
        cx, cy = t_fwd.transform(pose.target.longitude, _clamp_lat(pose.target.latitude))
        x = cx + dx / scale
        y = cy - dy / scale
        if abs(y) > _WEB_MERCATOR_HALF_WORLD_M:
            return None

        lon, lat = transformer_3857_to_4326().transform(_wrap_x(x), y)
        if not (math.isfinite(lon) and math.isfinite(lat)):
            return None
        return GeoCoordinate(latitude=float(lat), longitude=float(lon))

    def _dp_per_meter(self, zoom: float) -> float:
        tile = self.tile_size_dp or get_config().base_tile_size_dp
        world_dp = tile * (2.0 ** clamp_zoom(zoom))
        return world_dp / (2.0 * _WEB_MERCATOR_HALF_WORLD_M)


def _clamp_lat(lat: float) -> float:
    return max(-_MAX_MERCATOR_LAT, min(_MAX_MERCATOR_LAT, float(lat)))


def _wrap_x(x: float) -> float:
    # Take the short way around the antimeridian.
    world = 2.0 * _WEB_MERCATOR_HALF_WORLD_M
    return (x + _WEB_MERCATOR_HALF_WORLD_M) % world - _WEB_MERCATOR_HALF_WORLD_M
