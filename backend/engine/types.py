from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from geo.bounds import CameraPose
from geo.coordinates import GeoCoordinate
from markers.types import ScreenPoint


@dataclass(frozen=True)
class ViewportSize:
    """
    Size of the on-screen map, in device-independent pixels.
    """

    width_dp: float
    height_dp: float

    @property
    def center(self) -> ScreenPoint:
        return ScreenPoint(x=self.width_dp / 2.0, y=self.height_dp / 2.0)

    def contains(self, p: ScreenPoint) -> bool:
        return 0.0 <= p.x <= self.width_dp and 0.0 <= p.y <= self.height_dp


class ProjectionService(Protocol):
    """
    Supplied by the map renderer; the core only consumes it.

    Screen points are in dp, relative to the top-left corner of the viewport.
    """

    def screen_point_of(
        self, coordinate: GeoCoordinate, pose: CameraPose, viewport: ViewportSize
    ) -> ScreenPoint | None: ...

    def geo_coordinate_of(
        self, point: ScreenPoint, pose: CameraPose, viewport: ViewportSize
    ) -> GeoCoordinate | None: ...

    def current_camera_pose(self) -> CameraPose: ...
