import sys
from pathlib import Path

import pytest


# Ensure `backend/` is on sys.path so tests can import local modules
# like `geo.*`, `labels.*`, and `main`.
BACKEND_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(BACKEND_ROOT))


@pytest.fixture(autouse=True)
def _fresh_engine_state(monkeypatch):
    # Config and session registry are process-wide singletons.
    from api.sessions import reset_session_registry
    from engine.config import clear_config_cache

    for name in (
        "KATMAPS_CONFIG",
        "KATMAPS_MIN_ZOOM",
        "KATMAPS_MAX_ZOOM",
        "KATMAPS_TOUCH_THRESHOLD_PX",
        "KATMAPS_SIMILARITY_THRESHOLD",
        "KATMAPS_MAX_SESSIONS",
    ):
        monkeypatch.delenv(name, raising=False)
    clear_config_cache()
    reset_session_registry()
    yield
    clear_config_cache()
    reset_session_registry()
