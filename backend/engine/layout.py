from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from engine.types import ProjectionService, ViewportSize
from geo.bounds import CameraPose
from geo.coordinates import GeoCoordinate
from markers.geometry import label_bounds, pin_bounds
from markers.types import LabelCandidate, MarkerId, ScreenPoint, TouchCandidate


@dataclass(frozen=True)
class MapMarker:
    """
    What the host knows about a marker: where it is and how big its bitmaps are.

    Sizes are in physical pixels, as produced by the rendering layer.
    `label_size_px` is None for markers without a label.
    """

    id: MarkerId
    position: GeoCoordinate
    icon_size_px: tuple[float, float]
    label_size_px: tuple[float, float] | None = None
    # Size of the last frame of an animated icon; None for static icons.
    expanded_icon_size_px: tuple[float, float] | None = None


def label_candidates(
    markers: Iterable[MapMarker],
    projection: ProjectionService,
    pose: CameraPose,
    viewport: ViewportSize,
    *,
    density: float = 1.0,
    priority_id: MarkerId | None = None,
) -> list[LabelCandidate]:
    """
    Label rects for every labelled marker the projection can place on screen.
    """
    out: list[LabelCandidate] = []
    for m in markers:
        if m.label_size_px is None:
            continue
        anchor = projection.screen_point_of(m.position, pose, viewport)
        if anchor is None:
            continue
        out.append(
            LabelCandidate(
                id=m.id,
                rect=label_bounds(_to_px(anchor, density), m.label_size_px, density),
                is_priority=priority_id is not None and m.id == priority_id,
            )
        )
    return out


def touch_candidates(
    markers: Iterable[MapMarker],
    projection: ProjectionService,
    pose: CameraPose,
    viewport: ViewportSize,
    *,
    density: float = 1.0,
    expanded_id: MarkerId | None = None,
) -> list[TouchCandidate]:
    """
    Pin hit rects for every marker on screen; the expanded marker uses its
    expanded icon size.
    """
    out: list[TouchCandidate] = []
    for m in markers:
        anchor = projection.screen_point_of(m.position, pose, viewport)
        if anchor is None:
            continue
        size = m.icon_size_px
        if expanded_id is not None and m.id == expanded_id and m.expanded_icon_size_px:
            size = m.expanded_icon_size_px
        out.append(
            TouchCandidate(
                id=m.id,
                hit_rect=pin_bounds(_to_px(anchor, density), size, density),
                screen_position=anchor,
            )
        )
    return out


def _to_px(point_dp: ScreenPoint, density: float) -> ScreenPoint:
    d = density if density > 0 else 1.0
    return ScreenPoint(x=point_dp.x * d, y=point_dp.y * d)
