from __future__ import annotations

from markers.types import ScreenPoint, ScreenRect


def px_to_dp(value: float, density: float) -> float:
    """
    Physical pixels -> device-independent pixels. A non-positive density is
    treated as 1 (mdpi).
    """
    d = float(density)
    if not d > 0.0:
        d = 1.0
    return float(value) / d


def point_to_dp(point_px: ScreenPoint, density: float) -> ScreenPoint:
    return ScreenPoint(x=px_to_dp(point_px.x, density), y=px_to_dp(point_px.y, density))


def pin_bounds(
    anchor_px: ScreenPoint, icon_size_px: tuple[float, float], density: float
) -> ScreenRect:
    """
    Hit rect of a pin whose anchor is the bottom-center of its icon.
    """
    w, h = icon_size_px
    return ScreenRect(
        left=px_to_dp(anchor_px.x - w / 2.0, density),
        top=px_to_dp(anchor_px.y - h, density),
        right=px_to_dp(anchor_px.x + w / 2.0, density),
        bottom=px_to_dp(anchor_px.y, density),
    )


def label_bounds(
    anchor_px: ScreenPoint, label_size_px: tuple[float, float], density: float
) -> ScreenRect:
    """
    Rect of a label drawn directly below the marker anchor, centered horizontally.
    """
    w, h = label_size_px
    return ScreenRect(
        left=px_to_dp(anchor_px.x - w / 2.0, density),
        top=px_to_dp(anchor_px.y, density),
        right=px_to_dp(anchor_px.x + w / 2.0, density),
        bottom=px_to_dp(anchor_px.y + h, density),
    )
