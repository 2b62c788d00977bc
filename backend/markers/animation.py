from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import Callable

from markers.types import MarkerViewState

FRAME_RATE = 60
_MS_PER_SECOND = 1000

Interpolator = Callable[[float], float]


def anticipate_overshoot(t: float, tension: float = 2.0) -> float:
    """
    Back-then-overshoot easing: dips below 0 at the start and past 1 near the end.

    Same curve as Android's AnticipateOvershootInterpolator (effective tension is
    1.5x the given one).
    """
    s = tension * 1.5
    if t < 0.5:
        u = t * 2.0
        return 0.5 * (u * u * ((s + 1.0) * u - s))
    u = t * 2.0 - 2.0
    return 0.5 * (u * u * ((s + 1.0) * u + s) + 2.0)


def frame_interval_ms(frame_rate: int = FRAME_RATE) -> int:
    return _MS_PER_SECOND // max(1, int(frame_rate))


def frame_progressions(
    duration_ms: int,
    *,
    frame_rate: int = FRAME_RATE,
    interpolator: Interpolator = anticipate_overshoot,
) -> list[float]:
    """
    Interpolated progress values, one per frame, for a frame generator to render.

    There are `duration_ms // interval + 1` frames; the first is progress 0 and the
    last progress 1 (before interpolation).
    """
    steps = int(duration_ms) // frame_interval_ms(frame_rate)
    if steps <= 0:
        return [interpolator(1.0)]
    return [interpolator(step / steps) for step in range(steps + 1)]


@dataclass(frozen=True)
class IconAnimation:
    """
    Playback state of an animated marker icon.

    A pure value: the rendering layer polls `frame_at(now_ms)` instead of a timer
    pushing frames. Expanding plays frames forward, collapsing plays them backward.
    """

    frame_count: int
    frame_rate: int = FRAME_RATE
    expanded: bool = False
    started_at_ms: float | None = None

    def expanding(self, now_ms: float) -> "IconAnimation":
        return replace(self, expanded=True, started_at_ms=float(now_ms))

    def collapsing(self, now_ms: float) -> "IconAnimation":
        return replace(self, expanded=False, started_at_ms=float(now_ms))

    def step_at(self, now_ms: float) -> int:
        last = max(1, self.frame_count) - 1
        if self.started_at_ms is None:
            return last
        elapsed = float(now_ms) - self.started_at_ms
        if elapsed <= 0.0:
            return 0
        step = int(math.floor(elapsed / frame_interval_ms(self.frame_rate)))
        return min(step, last)

    def frame_at(self, now_ms: float) -> int:
        last = max(1, self.frame_count) - 1
        step = self.step_at(now_ms)
        return step if self.expanded else last - step

    def is_finished(self, now_ms: float) -> bool:
        last = max(1, self.frame_count) - 1
        return self.step_at(now_ms) >= last


def transition_needs_animation(old: MarkerViewState, new: MarkerViewState) -> bool:
    if old is new:
        return False
    return MarkerViewState.EXPANDED_WITH_LABEL in (old, new)
