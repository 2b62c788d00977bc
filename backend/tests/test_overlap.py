from __future__ import annotations

import random

from labels.overlap import build_overlap_graph, resolve_visible_labels
from markers.types import LabelCandidate, ScreenRect


def _label(mid, left, top, width=40.0, height=10.0, *, priority=False) -> LabelCandidate:
    return LabelCandidate(
        id=mid,
        rect=ScreenRect(left=left, top=top, right=left + width, bottom=top + height),
        is_priority=priority,
    )


def _assert_independent(candidates: list[LabelCandidate], visible: set) -> None:
    rects = {c.id: c.rect for c in candidates}
    shown = sorted(visible, key=str)
    for i, a in enumerate(shown):
        for b in shown[i + 1 :]:
            assert not rects[a].intersects(rects[b]), (a, b)


def test_empty_input_shows_nothing():
    assert resolve_visible_labels([]) == set()


def test_non_overlapping_labels_are_all_visible():
    labels = [_label("a", 0, 0), _label("b", 100, 0), _label("c", 0, 100)]
    assert resolve_visible_labels(labels) == {"a", "b", "c"}


def test_labels_sharing_an_edge_do_not_overlap():
    labels = [_label("a", 0, 0), _label("b", 40, 0), _label("c", 0, 10)]
    graph = build_overlap_graph(labels)
    assert graph.edge_count == 0
    assert resolve_visible_labels(labels) == {"a", "b", "c"}


def test_chain_keeps_both_ends():
    # a-b and b-c overlap, a and c don't: a path colors cleanly.
    labels = [_label("a", 0, 0), _label("b", 30, 0), _label("c", 60, 0)]
    graph = build_overlap_graph(labels)
    assert graph.neighbors("b") == ["a", "c"]
    assert graph.edge_count == 2
    assert resolve_visible_labels(labels) == {"a", "c"}


def test_bipartite_component_keeps_non_root_nodes():
    # Star: the hub collides with every leaf, leaves are far from each other.
    labels = [
        _label("hub", 0, 0, width=200, height=200),
        _label("n", 80, -5),
        _label("s", 80, 195),
        _label("w", -35, 100),
        _label("e", 195, 100),
    ]
    assert resolve_visible_labels(labels) == {"n", "s", "w", "e"}


def test_odd_cycle_evicts_conflicting_endpoints():
    # Three labels piled on each other: only one can be shown.
    labels = [_label("a", 0, 0), _label("b", 5, 2), _label("c", 10, 4)]
    visible = resolve_visible_labels(labels)
    assert visible == {"a"}


def test_tie_goes_to_first_candidate():
    labels = [_label("first", 0, 0), _label("second", 10, 0)]
    assert resolve_visible_labels(labels) == {"first"}

    swapped = [labels[1], labels[0]]
    assert resolve_visible_labels(swapped) == {"second"}


def test_priority_label_wins_and_hides_its_neighbors():
    labels = [_label("a", 0, 0), _label("b", 30, 0), _label("c", 60, 0)]
    assert resolve_visible_labels(labels, priority_id="b") == {"b"}


def test_priority_flag_is_used_without_explicit_id():
    labels = [_label("a", 0, 0), _label("b", 30, 0, priority=True), _label("c", 60, 0)]
    assert resolve_visible_labels(labels) == {"b"}


def test_priority_only_affects_its_own_component():
    labels = [
        _label("a", 0, 0),
        _label("b", 30, 0),
        _label("x", 0, 500),
        _label("y", 10, 500),
    ]
    assert resolve_visible_labels(labels, priority_id="b") == {"b", "x"}


def test_unknown_priority_is_ignored():
    labels = [_label("a", 0, 0), _label("b", 30, 0), _label("c", 60, 0)]
    assert resolve_visible_labels(labels, priority_id="nope") == resolve_visible_labels(labels)


def test_duplicate_ids_keep_first_rect():
    labels = [_label("a", 0, 0), _label("b", 100, 0), _label("a", 90, 0)]
    graph = build_overlap_graph(labels)
    assert graph.nodes == ["a", "b"]
    assert resolve_visible_labels(labels) == {"a", "b"}


def test_inverted_rects_are_normalized():
    flipped = LabelCandidate(id="f", rect=ScreenRect(left=40, top=10, right=0, bottom=0))
    labels = [_label("a", 20, 5), flipped]
    assert build_overlap_graph(labels).edge_count == 1


def test_result_is_independent_and_deterministic_for_dense_layouts():
    rnd = random.Random(7)
    labels = [
        _label(f"m{i}", rnd.uniform(0, 300), rnd.uniform(0, 600), width=rnd.uniform(30, 90))
        for i in range(120)
    ]
    visible = resolve_visible_labels(labels)
    assert visible
    _assert_independent(labels, visible)
    assert resolve_visible_labels(labels) == visible

    for priority in ("m0", "m17", "m99"):
        with_priority = resolve_visible_labels(labels, priority_id=priority)
        assert priority in with_priority
        _assert_independent(labels, with_priority)
