from __future__ import annotations

from api.sessions import SessionRegistry, get_session_registry
from engine.config import clear_config_cache
from markers.types import ScreenPoint, ScreenRect, TouchCandidate


def _stack() -> list[TouchCandidate]:
    p = ScreenPoint(x=50.0, y=50.0)
    return [
        TouchCandidate(id=mid, hit_rect=ScreenRect.around(p, 10.0), screen_position=p)
        for mid in ("a", "b")
    ]


def test_sessions_keep_separate_histories():
    reg = SessionRegistry(max_sessions=10)
    tap = ScreenPoint(x=50.0, y=50.0)
    assert reg.select("one", tap, _stack()) == "a"
    assert reg.select("one", tap, _stack()) == "b"
    assert reg.select("two", tap, _stack()) == "a"
    assert len(reg) == 2


def test_oldest_session_is_evicted():
    reg = SessionRegistry(max_sessions=2)
    reg.get("one")
    reg.get("two")
    reg.get("three")
    assert "one" not in reg
    assert "two" in reg and "three" in reg


def test_drop_reports_whether_session_existed():
    reg = SessionRegistry(max_sessions=2)
    reg.get("one")
    assert reg.drop("one")
    assert not reg.drop("one")


def test_registry_size_comes_from_config(monkeypatch):
    monkeypatch.setenv("KATMAPS_MAX_SESSIONS", "7")
    clear_config_cache()
    assert get_session_registry().max_sessions == 7
    assert get_session_registry() is get_session_registry()
