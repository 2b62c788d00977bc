from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace
from enum import Enum
from typing import TypeVar

from engine.config import EngineConfig, get_config
from geo.coordinates import GeoCoordinate
from geo.mercator import (
    clip,
    distance_for_zoom,
    distance_offset_to_lat_lon,
    lat_from_distance,
    long_from_distance,
    zoom_for_distance,
)
from geo.units import Length, kilometers

logger = logging.getLogger(__name__)

T = TypeVar("T", Length, float)

DEFAULT_RADIUS = kilometers(7.5)
DEFAULT_BEARING = 0.0
DEFAULT_TILT = 0.0
MAX_TILT = 90.0

# Padding that hides (nearly) a whole axis still has to leave something to divide by.
_MIN_VISIBLE_PROPORTION = 1e-6
_MIN_VIEWPORT_DP = 1.0


class ScaleStrategy(str, Enum):
    """
    Which of the two radii (and zoom levels) wins when the region's aspect ratio
    doesn't match the viewport's.
    """

    WIDTH = "width"
    HEIGHT = "height"
    FIT = "fit"  # contain: the whole region stays visible
    FILL = "fill"  # cover: the region fills the viewport

    def pick(self, x: T, y: T) -> T:
        if self is ScaleStrategy.WIDTH:
            return x
        if self is ScaleStrategy.HEIGHT:
            return y
        if self is ScaleStrategy.FIT:
            return min(x, y)
        return max(x, y)


@dataclass(frozen=True)
class Padding:
    """
    Proportion of the viewport covered by overlaid UI on each edge.

    Ex. 0.05 is 5% of the respective width/height. Values are not validated;
    the visible proportions are clamped instead.
    """

    top: float = 0.0
    bottom: float = 0.0
    left: float = 0.0
    right: float = 0.0

    @classmethod
    def uniform(cls, value: float) -> "Padding":
        return cls(top=value, bottom=value, left=value, right=value)

    @property
    def visible_x(self) -> float:
        return clip(1.0 - self.left - self.right, 0.0, 1.0)

    @property
    def visible_y(self) -> float:
        return clip(1.0 - self.top - self.bottom, 0.0, 1.0)

    @property
    def midpoint_shift_x(self) -> float:
        # Offset of the visible region's midpoint from the screen midpoint, as a
        # proportion of the screen width.
        return (1.0 + self.left - self.right) / 2.0 - 0.5

    @property
    def midpoint_shift_y(self) -> float:
        return (1.0 + self.top - self.bottom) / 2.0 - 0.5


NO_PADDING = Padding()
DEFAULT_PADDING_PROPORTION = 0.05
DEFAULT_PADDING = Padding.uniform(DEFAULT_PADDING_PROPORTION)


@dataclass(frozen=True)
class CameraPose:
    """
    Renderer-level camera: what the projection service consumes and reports.
    """

    target: GeoCoordinate
    zoom: float
    bearing: float = DEFAULT_BEARING
    tilt: float = DEFAULT_TILT


@dataclass(frozen=True)
class MapBounds:
    """
    A semantic description of the map region that should be visible.

    - center: geographic center of the region
    - radius_x / radius_y: horizontal / vertical half-extent of the region
    - bearing: rotation in degrees, normalized to [0, 360)
    - tilt: camera tilt in degrees, [0, 90]
    - padding: viewport proportions hidden by overlaid UI
    - scale_strategy: how the two radii resolve into one zoom level
    """

    center: GeoCoordinate
    radius_x: Length
    radius_y: Length
    bearing: float = DEFAULT_BEARING
    tilt: float = DEFAULT_TILT
    padding: Padding = DEFAULT_PADDING
    scale_strategy: ScaleStrategy = ScaleStrategy.FIT

    @classmethod
    def from_center(
        cls,
        center: GeoCoordinate,
        radius: Length = DEFAULT_RADIUS,
        bearing: float = DEFAULT_BEARING,
        tilt: float = DEFAULT_TILT,
        padding: Padding = DEFAULT_PADDING,
        scale_strategy: ScaleStrategy = ScaleStrategy.FIT,
    ) -> "MapBounds":
        return cls(
            center=center,
            radius_x=radius,
            radius_y=radius,
            bearing=normalize_bearing(bearing),
            tilt=normalize_tilt(tilt),
            padding=padding,
            scale_strategy=scale_strategy,
        )

    @classmethod
    def from_camera_pose(
        cls, pose: CameraPose, viewport_width_dp: float, viewport_height_dp: float
    ) -> "MapBounds":
        return from_camera_pose(pose, viewport_width_dp, viewport_height_dp)

    @classmethod
    def from_camera_pose_excluding_padding(
        cls,
        pose: CameraPose,
        scale_strategy: ScaleStrategy,
        padding: Padding,
        viewport_width_dp: float,
        viewport_height_dp: float,
    ) -> "MapBounds":
        return from_camera_pose_excluding_padding(
            pose, scale_strategy, padding, viewport_width_dp, viewport_height_dp
        )

    @property
    def radius(self) -> Length:
        return self.scale_strategy.pick(self.radius_x, self.radius_y)

    @property
    def corners(self) -> tuple[GeoCoordinate, GeoCoordinate]:
        """
        North-west and south-east corners of the region.

        Bearing is ignored: this is an axis-aligned approximation and only exact
        for non-rotated bounds.
        """
        r = self.radius
        d_lat = lat_from_distance(r)
        d_lon = long_from_distance(r)
        north = self.center.latitude + d_lat
        south = self.center.latitude - d_lat
        east = self.center.longitude + d_lon
        west = self.center.longitude - d_lon
        return GeoCoordinate(north, west), GeoCoordinate(south, east)

    def with_center(self, center: GeoCoordinate) -> "MapBounds":
        return replace(self, center=center)

    def with_radius(self, radius: Length) -> "MapBounds":
        return replace(self, radius_x=radius, radius_y=radius)

    def with_bearing(self, bearing: float) -> "MapBounds":
        return replace(self, bearing=normalize_bearing(bearing))

    def with_tilt(self, tilt: float) -> "MapBounds":
        return replace(self, tilt=normalize_tilt(tilt))

    def with_padding(self, padding: Padding) -> "MapBounds":
        return replace(self, padding=padding)

    def with_scale_strategy(self, scale_strategy: ScaleStrategy) -> "MapBounds":
        return replace(self, scale_strategy=scale_strategy)

    def to_camera_pose(
        self,
        viewport_width_dp: float,
        viewport_height_dp: float,
        *,
        config: EngineConfig | None = None,
    ) -> CameraPose:
        return to_camera_pose(
            self, viewport_width_dp, viewport_height_dp, config=config
        )


def normalize_bearing(bearing: float) -> float:
    b = float(bearing) % 360.0
    # -1e-17 % 360.0 rounds to 360.0
    return 0.0 if b >= 360.0 else b


def normalize_tilt(tilt: float) -> float:
    return clip(float(tilt), 0.0, MAX_TILT)


def clamp_zoom(zoom: float, config: EngineConfig | None = None) -> float:
    """
    Bring a renderer-reported zoom into the configured range; NaN reads as `min_zoom`.
    """
    cfg = config or get_config()
    z = float(zoom)
    if math.isnan(z):
        return float(cfg.min_zoom)
    return float(clip(z, cfg.min_zoom, cfg.max_zoom))


def to_camera_pose(
    bounds: MapBounds,
    viewport_width_dp: float,
    viewport_height_dp: float,
    *,
    config: EngineConfig | None = None,
) -> CameraPose:
    """
    Camera pose that shows `bounds` inside the padded viewport.

    The zoom is always clamped to the configured [min_zoom, max_zoom].
    """
    cfg = config or get_config()
    w, h = _viewport_dims(viewport_width_dp, viewport_height_dp)

    target, radius_x, radius_y = _padding_transform(bounds, w, h)

    zoom_x = zoom_for_distance(
        target.latitude, w, radius_x * 2.0, base_tile_size_dp=cfg.base_tile_size_dp
    )
    zoom_y = zoom_for_distance(
        target.latitude, h, radius_y * 2.0, base_tile_size_dp=cfg.base_tile_size_dp
    )
    raw_zoom = bounds.scale_strategy.pick(zoom_x, zoom_y)
    zoom = clip(raw_zoom, cfg.min_zoom, cfg.max_zoom)
    if zoom != raw_zoom:
        logger.debug("zoom %.3f clamped to %.3f", raw_zoom, zoom)

    return CameraPose(
        target=target, zoom=float(zoom), bearing=bounds.bearing, tilt=bounds.tilt
    )


def from_camera_pose(
    pose: CameraPose,
    viewport_width_dp: float,
    viewport_height_dp: float,
    *,
    config: EngineConfig | None = None,
) -> MapBounds:
    """
    The region a camera pose currently shows, ignoring any padding.
    """
    return _unpadded_bounds(
        pose,
        viewport_width_dp,
        viewport_height_dp,
        padding=NO_PADDING,
        config=config,
    )


def from_camera_pose_excluding_padding(
    pose: CameraPose,
    scale_strategy: ScaleStrategy,
    padding: Padding,
    viewport_width_dp: float,
    viewport_height_dp: float,
    *,
    config: EngineConfig | None = None,
) -> MapBounds:
    """
    The region a camera pose shows once `padding` is cropped away.

    Used to capture "what the user sees outside the bottom sheet" before a
    padding change; feeding the result back into `to_camera_pose` reproduces `pose`.
    """
    w, h = _viewport_dims(viewport_width_dp, viewport_height_dp)
    unpadded = _unpadded_bounds(pose, w, h, padding=padding, config=config)
    target, radius_x, radius_y = _padding_transform(unpadded, w, h, inverse=True)
    return MapBounds(
        center=target,
        radius_x=radius_x,
        radius_y=radius_y,
        bearing=pose.bearing,
        tilt=pose.tilt,
        padding=padding,
        scale_strategy=scale_strategy,
    )


def _unpadded_bounds(
    pose: CameraPose,
    viewport_width_dp: float,
    viewport_height_dp: float,
    *,
    padding: Padding,
    config: EngineConfig | None,
) -> MapBounds:
    cfg = config or get_config()
    w, h = _viewport_dims(viewport_width_dp, viewport_height_dp)
    lat = pose.target.latitude
    tile = cfg.base_tile_size_dp
    zoom = clamp_zoom(pose.zoom, cfg)
    if zoom != pose.zoom:
        logger.debug("pose zoom %r read as %.3f", pose.zoom, zoom)
    return MapBounds(
        center=pose.target,
        radius_x=distance_for_zoom(lat, w, zoom, base_tile_size_dp=tile) / 2.0,
        radius_y=distance_for_zoom(lat, h, zoom, base_tile_size_dp=tile) / 2.0,
        bearing=pose.bearing,
        tilt=pose.tilt,
        padding=padding,
        scale_strategy=ScaleStrategy.FIT,
    )


def _padding_transform(
    bounds: MapBounds, w: float, h: float, *, inverse: bool = False
) -> tuple[GeoCoordinate, Length, Length]:
    """
    Move between the requested (visible) region and the full-viewport region.

    Forward: the full region is the visible one inflated by 1/visible and shifted
    so the target lands in the middle of the unpadded area.
    Inverse: shrink by the visible proportion and shift back.
    """
    padding = bounds.padding
    vis_x = max(padding.visible_x, _MIN_VISIBLE_PROPORTION)
    vis_y = max(padding.visible_y, _MIN_VISIBLE_PROPORTION)

    if inverse:
        radius_x = bounds.radius_x * vis_x
        radius_y = bounds.radius_y * vis_y
        screen_rx, screen_ry = bounds.radius_x, bounds.radius_y
    else:
        radius = bounds.radius
        radius_x = radius / vis_x
        radius_y = radius / vis_y
        screen_rx, screen_ry = radius_x, radius_y

    # Distance spanned by the whole screen along each axis, derived from the axis
    # that ends up governing the zoom level.
    axis = _limiting_axis(bounds.scale_strategy, w * vis_x, h * vis_y)
    if axis is ScaleStrategy.WIDTH:
        x_screen_distance = screen_rx * 2.0
        y_screen_distance = screen_rx * 2.0 * (h / w)
    else:
        x_screen_distance = screen_ry * 2.0 * (w / h)
        y_screen_distance = screen_ry * 2.0

    x_shift = x_screen_distance * padding.midpoint_shift_x
    y_shift = y_screen_distance * padding.midpoint_shift_y
    d_lat, d_lon = distance_offset_to_lat_lon(bounds.bearing, x_shift, y_shift)

    if inverse:
        target = bounds.center.offset(-d_lat, -d_lon)
    else:
        target = bounds.center.offset(d_lat, d_lon)
    return target.normalized(), radius_x, radius_y


def _limiting_axis(
    strategy: ScaleStrategy, x_screen_dp: float, y_screen_dp: float
) -> ScaleStrategy:
    if strategy in (ScaleStrategy.WIDTH, ScaleStrategy.HEIGHT):
        return strategy
    narrow = ScaleStrategy.WIDTH if x_screen_dp < y_screen_dp else ScaleStrategy.HEIGHT
    if strategy is ScaleStrategy.FIT:
        return narrow
    # FILL zooms to the wider axis.
    return ScaleStrategy.HEIGHT if narrow is ScaleStrategy.WIDTH else ScaleStrategy.WIDTH


def _viewport_dims(width_dp: float, height_dp: float) -> tuple[float, float]:
    w = float(width_dp)
    h = float(height_dp)
    # `not x >= 1` also catches NaN.
    if not w >= _MIN_VIEWPORT_DP or math.isinf(w):
        w = _MIN_VIEWPORT_DP
    if not h >= _MIN_VIEWPORT_DP or math.isinf(h):
        h = _MIN_VIEWPORT_DP
    return w, h
