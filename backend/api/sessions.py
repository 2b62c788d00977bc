from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Iterable

from engine.config import get_config
from markers.types import MarkerId, ScreenPoint, TouchCandidate
from selection.disambiguator import SelectionDisambiguator

logger = logging.getLogger(__name__)


@dataclass
class SessionRegistry:
    """
    One selection disambiguator per map session.

    Bounded: once `max_sessions` is exceeded the oldest session is dropped (its
    next tap simply starts a fresh cycle).
    """

    max_sessions: int
    _sessions: dict[str, SelectionDisambiguator] = field(default_factory=dict, repr=False)
    _lock: threading.RLock = field(default_factory=threading.RLock, repr=False)

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        with self._lock:
            return session_id in self._sessions

    def get(self, session_id: str) -> SelectionDisambiguator:
        with self._lock:
            existing = self._sessions.get(session_id)
            if existing is not None:
                return existing
            created = SelectionDisambiguator()
            self._sessions[session_id] = created
            logger.info("created selection session %s", session_id)
            self._evict_oldest()
            return created

    def select(
        self,
        session_id: str,
        tap_point_px: ScreenPoint,
        candidates: Iterable[TouchCandidate],
        *,
        density: float = 1.0,
    ) -> MarkerId | None:
        # Taps for one session must be serialized; the disambiguator keeps history.
        with self._lock:
            return self.get(session_id).select_marker(
                tap_point_px, candidates, density=density
            )

    def drop(self, session_id: str) -> bool:
        with self._lock:
            return self._sessions.pop(session_id, None) is not None

    def _evict_oldest(self) -> None:
        while len(self._sessions) > self.max_sessions:
            oldest = next(iter(self._sessions.keys()))
            self._sessions.pop(oldest, None)
            logger.info("evicted selection session %s", oldest)


_REGISTRY: SessionRegistry | None = None
_REGISTRY_LOCK = threading.RLock()


def get_session_registry() -> SessionRegistry:
    global _REGISTRY
    with _REGISTRY_LOCK:
        if _REGISTRY is None:
            _REGISTRY = SessionRegistry(max_sessions=get_config().max_sessions)
        return _REGISTRY


def reset_session_registry() -> None:
    global _REGISTRY
    with _REGISTRY_LOCK:
        _REGISTRY = None
