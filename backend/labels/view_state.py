from __future__ import annotations

from typing import Iterable

from markers.types import MarkerId, MarkerViewState


def assign_view_states(
    marker_ids: Iterable[MarkerId],
    visible_label_ids: set[MarkerId],
    selected_id: MarkerId | None = None,
) -> dict[MarkerId, MarkerViewState]:
    """
    Map the overlap resolver's output onto per-marker view states.

    The selected marker is always expanded; the rest show their label only if it
    survived overlap resolution.
    """
    out: dict[MarkerId, MarkerViewState] = {}
    for mid in marker_ids:
        if selected_id is not None and mid == selected_id:
            out[mid] = MarkerViewState.EXPANDED_WITH_LABEL
        elif mid in visible_label_ids:
            out[mid] = MarkerViewState.PIN_AND_LABEL
        else:
            out[mid] = MarkerViewState.PIN_ONLY
    return out


def changed_view_states(
    previous: dict[MarkerId, MarkerViewState],
    current: dict[MarkerId, MarkerViewState],
) -> dict[MarkerId, MarkerViewState]:
    """
    Only the markers whose state differs from last time (new markers included),
    so the rendering layer touches as few markers as possible.
    """
    return {mid: state for mid, state in current.items() if previous.get(mid) is not state}
