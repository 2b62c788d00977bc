from __future__ import annotations

import logging
from typing import Iterable, Sequence

from engine.config import get_config
from markers.geometry import point_to_dp
from markers.types import MarkerId, ScreenPoint, TouchCandidate
from selection.touch import rank_touch_candidates, touch_box

logger = logging.getLogger(__name__)


class SelectionDisambiguator:
    """
    Turns a tap over several stacked markers into one selected marker.

    Tapping the same cluster again cycles through its markers, nearest first;
    tapping a materially different cluster starts over with its nearest marker.

    Holds history between taps, so each map session needs its own instance. Not
    thread-safe; callers serialize taps.
    """

    def __init__(
        self,
        *,
        similarity_threshold: float | None = None,
        touch_threshold_px: float | None = None,
    ) -> None:
        cfg = get_config()
        self.similarity_threshold = (
            cfg.selection_similarity_threshold
            if similarity_threshold is None
            else float(similarity_threshold)
        )
        self.touch_threshold_px = (
            cfg.touch_threshold_px if touch_threshold_px is None else float(touch_threshold_px)
        )
        self._previous_touched: list[MarkerId] = []
        self._toggled: set[MarkerId] = set()

    @property
    def previous_touched(self) -> tuple[MarkerId, ...]:
        return tuple(self._previous_touched)

    @property
    def toggled(self) -> frozenset[MarkerId]:
        return frozenset(self._toggled)

    def reset(self) -> None:
        """
        Forget cycling history (e.g. after the host replaced its marker set).
        """
        self._previous_touched = []
        self._toggled = set()

    def similarity(self, touched: Sequence[MarkerId]) -> float:
        """
        Share of `touched` that was also under the finger on the previous tap.
        """
        if not touched:
            return 0.0
        previous = set(self._previous_touched)
        shared = sum(1 for mid in touched if mid in previous)
        return shared / len(touched)

    def select(self, ranked_ids: Iterable[MarkerId]) -> MarkerId | None:
        """
        Choose a marker from the ids under the tap, ordered nearest first.

        An empty tap returns None and leaves the cycling state alone.
        """
        touched = _unique(ranked_ids)
        if not touched:
            return None

        nearest = touched[0]
        if self.similarity(touched) > self.similarity_threshold:
            selected = next((mid for mid in touched if mid not in self._toggled), None)
            if selected is None:
                logger.debug("all %d stacked markers visited; restarting cycle", len(touched))
                self._toggled = {nearest}
                selected = nearest
            else:
                self._toggled.add(selected)
        else:
            self._toggled = {nearest}
            selected = nearest

        self._previous_touched = touched
        return selected

    def select_marker(
        self,
        tap_point_px: ScreenPoint,
        candidates: Iterable[TouchCandidate],
        *,
        density: float = 1.0,
    ) -> MarkerId | None:
        """
        Tap entry point: keep candidates inside the tap region, rank them by
        distance from the tap and select one.
        """
        box = touch_box(tap_point_px, density=density, threshold_px=self.touch_threshold_px)
        ranked = rank_touch_candidates(point_to_dp(tap_point_px, density), candidates, box)
        return self.select([c.id for c in ranked])


def _unique(ids: Iterable[MarkerId]) -> list[MarkerId]:
    seen: set[MarkerId] = set()
    out: list[MarkerId] = []
    for mid in ids:
        if mid in seen:
            continue
        seen.add(mid)
        out.append(mid)
    return out
