from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, model_validator

from geo.mercator import BASE_TILE_SIZE_DP, DEFAULT_MAX_ZOOM, DEFAULT_MIN_ZOOM


class EngineConfig(BaseModel):
    """
    Engine-wide tuning knobs.

    Defaults mirror what Google-style map renderers expose; a YAML file and/or
    environment variables can override them (see `get_config`).
    """

    min_zoom: float = Field(default=DEFAULT_MIN_ZOOM, ge=0.0, le=30.0)
    max_zoom: float = Field(default=DEFAULT_MAX_ZOOM, ge=0.0, le=30.0)
    base_tile_size_dp: float = Field(default=BASE_TILE_SIZE_DP, gt=0.0)

    # Half-width of the square tap region, in physical pixels: the tap box is
    # `touch_threshold_px / density` dp wide on each side, so it shrinks in dp on
    # denser screens.
    touch_threshold_px: float = Field(default=35.0, ge=0.0)
    selection_similarity_threshold: float = Field(default=0.8, ge=0.0, le=1.0)

    default_padding: float = Field(default=0.05, ge=0.0, lt=0.5)
    default_radius_m: float = Field(default=7_500.0, gt=0.0)

    # HTTP host: how many map sessions keep their own selection history.
    max_sessions: int = Field(default=256, ge=1, le=100_000)

    @model_validator(mode="after")
    def _zoom_range_is_ordered(self) -> "EngineConfig":
        if self.min_zoom > self.max_zoom:
            raise ValueError(
                f"min_zoom ({self.min_zoom}) must not exceed max_zoom ({self.max_zoom})"
            )
        return self


_ENV_OVERRIDES: dict[str, str] = {
    "KATMAPS_MIN_ZOOM": "min_zoom",
    "KATMAPS_MAX_ZOOM": "max_zoom",
    "KATMAPS_TOUCH_THRESHOLD_PX": "touch_threshold_px",
    "KATMAPS_SIMILARITY_THRESHOLD": "selection_similarity_threshold",
    "KATMAPS_MAX_SESSIONS": "max_sessions",
}


def config_path() -> Path | None:
    raw = (os.getenv("KATMAPS_CONFIG") or "").strip()
    return Path(raw) if raw else None


def _load_yaml(path: Path) -> dict[str, Any]:
    raw = path.read_text(encoding="utf-8")
    data = yaml.safe_load(raw) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid engine config yaml root: {path}")
    return data


def _env_values() -> dict[str, str]:
    out: dict[str, str] = {}
    for env_name, field_name in _ENV_OVERRIDES.items():
        v = (os.getenv(env_name) or "").strip()
        if v:
            out[field_name] = v
    return out


def load_config(path: Path | None = None) -> EngineConfig:
    """
    Build a config from defaults, then the YAML file (if any), then env overrides.
    """
    data: dict[str, Any] = {}
    if path is not None:
        data.update(_load_yaml(path))
    data.update(_env_values())
    return EngineConfig.model_validate(data)


@lru_cache(maxsize=1)
def get_config() -> EngineConfig:
    return load_config(config_path())


def clear_config_cache() -> None:
    """
    Drop the cached config so env/YAML changes are picked up (tests, dev reloads).
    """
    get_config.cache_clear()
