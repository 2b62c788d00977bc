from __future__ import annotations

from engine.config import clear_config_cache
from markers.types import ScreenPoint, ScreenRect, TouchCandidate
from selection.disambiguator import SelectionDisambiguator
from selection.touch import rank_touch_candidates, touch_box


def _candidate(mid: str, x: float, y: float, half: float = 10.0) -> TouchCandidate:
    p = ScreenPoint(x=x, y=y)
    return TouchCandidate(id=mid, hit_rect=ScreenRect.around(p, half), screen_position=p)


def test_repeated_taps_on_a_stack_cycle_nearest_first():
    d = SelectionDisambiguator()
    stack = ["a", "b", "c"]
    picks = [d.select(stack) for _ in range(5)]
    assert picks == ["a", "b", "c", "a", "b"]


def test_tapping_a_different_cluster_starts_over():
    d = SelectionDisambiguator()
    assert d.select(["a", "b", "c"]) == "a"
    assert d.select(["a", "b", "c"]) == "b"
    assert d.select(["d", "e"]) == "d"
    assert d.toggled == frozenset({"d"})
    # Coming back to the first cluster is a fresh selection too.
    assert d.select(["a", "b", "c"]) == "a"


def test_similarity_threshold_is_strict():
    d = SelectionDisambiguator(similarity_threshold=0.8)
    assert d.select([1, 2, 3, 4, 5]) == 1
    # 4 of 5 touched markers were there before: exactly 0.8 is not "similar".
    assert d.similarity([1, 2, 3, 4, 6]) == 0.8
    assert d.select([1, 2, 3, 4, 6]) == 1

    d = SelectionDisambiguator(similarity_threshold=0.8)
    assert d.select([1, 2, 3, 4, 5]) == 1
    # 5 of 6 is above the threshold: keep cycling.
    assert d.select([1, 2, 3, 4, 5, 6]) == 2


def test_empty_tap_keeps_state():
    d = SelectionDisambiguator()
    assert d.select(["a", "b"]) == "a"
    assert d.select([]) is None
    assert d.previous_touched == ("a", "b")
    assert d.toggled == frozenset({"a"})
    assert d.select(["a", "b"]) == "b"


def test_reset_forgets_history():
    d = SelectionDisambiguator()
    d.select(["a", "b"])
    d.select(["a", "b"])
    d.reset()
    assert d.previous_touched == ()
    assert d.toggled == frozenset()
    assert d.select(["a", "b"]) == "a"


def test_duplicate_ids_count_once():
    d = SelectionDisambiguator()
    assert d.select(["a", "a", "b"]) == "a"
    assert d.previous_touched == ("a", "b")
    assert d.select(["a", "b", "b"]) == "b"


def test_touch_box_converts_threshold_to_dp():
    box = touch_box(ScreenPoint(x=200.0, y=100.0), density=2.0, threshold_px=35.0)
    assert box == ScreenRect(left=82.5, top=32.5, right=117.5, bottom=67.5)


def test_rank_touch_candidates_filters_and_sorts_by_distance():
    tap = ScreenPoint(x=100.0, y=100.0)
    box = ScreenRect.around(tap, 20.0)
    far = _candidate("far", 500.0, 500.0)
    second = _candidate("second", 110.0, 100.0)
    first = _candidate("first", 101.0, 99.0)
    tied = _candidate("tied", 110.0, 100.0)
    # Hit rect ends exactly where the tap region starts.
    grazing = TouchCandidate(
        id="grazing",
        hit_rect=ScreenRect(left=120.0, top=90.0, right=140.0, bottom=110.0),
        screen_position=ScreenPoint(x=130.0, y=100.0),
    )
    ranked = rank_touch_candidates(tap, [far, second, first, tied, grazing], box)
    assert [c.id for c in ranked] == ["first", "second", "tied"]


def test_rank_uses_euclidean_distance():
    tap = ScreenPoint(x=0.0, y=0.0)
    box = ScreenRect.around(tap, 50.0)
    # Far on x, near on y vs. moderately near on both.
    a = _candidate("a", 30.0, 1.0)
    b = _candidate("b", 10.0, 10.0)
    assert [c.id for c in rank_touch_candidates(tap, [a, b], box)] == ["b", "a"]


def test_select_marker_uses_tap_region_and_density():
    d = SelectionDisambiguator(touch_threshold_px=35.0)
    # Density 2: the tap at (200, 200)px is (100, 100)dp.
    candidates = [
        _candidate("near", 100.0, 100.0),
        _candidate("next", 112.0, 100.0),
        _candidate("outside", 300.0, 300.0),
    ]
    tap = ScreenPoint(x=200.0, y=200.0)
    picks = [d.select_marker(tap, candidates, density=2.0) for _ in range(3)]
    assert picks == ["near", "next", "near"]
    assert d.select_marker(ScreenPoint(x=1000.0, y=1000.0), candidates, density=2.0) is None


def test_defaults_come_from_config(monkeypatch):
    monkeypatch.setenv("KATMAPS_SIMILARITY_THRESHOLD", "0.5")
    monkeypatch.setenv("KATMAPS_TOUCH_THRESHOLD_PX", "10")
    clear_config_cache()
    d = SelectionDisambiguator()
    assert d.similarity_threshold == 0.5
    assert d.touch_threshold_px == 10.0


def test_tap_region_shrinks_in_dp_on_denser_screens():
    # 30dp right of the tap: inside 35px at density 1, outside 17.5dp at density 2.
    candidates = [_candidate("m", 130.0, 100.0, half=1.0)]
    assert SelectionDisambiguator().select_marker(
        ScreenPoint(x=100.0, y=100.0), candidates, density=1.0
    ) == "m"
    assert SelectionDisambiguator().select_marker(
        ScreenPoint(x=200.0, y=200.0), candidates, density=2.0
    ) is None
