from __future__ import annotations

import pytest

from markers.animation import (
    IconAnimation,
    anticipate_overshoot,
    frame_interval_ms,
    frame_progressions,
)


def test_anticipate_overshoot_shape():
    assert anticipate_overshoot(0.0) == 0.0
    assert anticipate_overshoot(1.0) == pytest.approx(1.0)
    assert anticipate_overshoot(0.5) == pytest.approx(0.5)
    # Anticipates below 0 early, overshoots past 1 late.
    assert anticipate_overshoot(0.1) < 0.0
    assert anticipate_overshoot(0.9) > 1.0


def test_frame_progressions_cover_the_duration():
    assert frame_interval_ms(60) == 16
    values = frame_progressions(160)
    assert len(values) == 11
    assert values[0] == 0.0
    assert values[-1] == pytest.approx(1.0)

    linear = frame_progressions(32, interpolator=lambda t: t)
    assert linear == [0.0, 0.5, 1.0]


def test_frame_progressions_shorter_than_one_frame_jump_to_the_end():
    assert frame_progressions(5) == [pytest.approx(1.0)]


def test_expanding_plays_forward_and_stops_on_last_frame():
    anim = IconAnimation(frame_count=10).expanding(now_ms=1000.0)
    assert anim.frame_at(1000.0) == 0
    assert anim.frame_at(1000.0 + 16 * 3) == 3
    assert not anim.is_finished(1000.0 + 16 * 3)
    assert anim.frame_at(5000.0) == 9
    assert anim.is_finished(5000.0)


def test_collapsing_plays_backward():
    anim = IconAnimation(frame_count=10, expanded=True).collapsing(now_ms=0.0)
    assert anim.frame_at(0.0) == 9
    assert anim.frame_at(16.0 * 4) == 5
    assert anim.frame_at(10_000.0) == 0


def test_idle_animation_rests_on_its_end_frame():
    assert IconAnimation(frame_count=10).frame_at(123.0) == 0
    assert IconAnimation(frame_count=10, expanded=True).frame_at(123.0) == 9
    assert IconAnimation(frame_count=1).expanding(0.0).is_finished(0.0)
