from __future__ import annotations

from typing import Iterable

from markers.geometry import point_to_dp, px_to_dp
from markers.types import ScreenPoint, ScreenRect, TouchCandidate


def touch_box(tap_px: ScreenPoint, *, density: float, threshold_px: float) -> ScreenRect:
    """
    Square tap region (in dp) centered on the tap, `threshold_px` physical pixels
    in each direction.
    """
    return ScreenRect.around(
        point_to_dp(tap_px, density), px_to_dp(threshold_px, density)
    )


def rank_touch_candidates(
    tap_dp: ScreenPoint,
    candidates: Iterable[TouchCandidate],
    box: ScreenRect,
) -> list[TouchCandidate]:
    """
    Candidates whose hit rect overlaps the tap region, nearest marker first.

    Ties keep the host's order (stable sort).
    """
    hits = [c for c in candidates if c.hit_rect.normalized().intersects(box)]
    hits.sort(key=lambda c: tap_dp.distance_to(c.screen_position))
    return hits
