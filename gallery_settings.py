from __future__ import annotations

import os
from dataclasses import dataclass

from gallery_errors import ConfigError
from stack_layout import (
    DEFAULT_CONTAINER_HEIGHT as DEFAULT_HEIGHT,
    DEFAULT_CONTAINER_WIDTH as DEFAULT_WIDTH,
    DEFAULT_IMAGE_SIZE,
    DEFAULT_MAX_ITEMS,
)

_TRUTHY = {"1", "true", "yes", "y", "on"}


def _get_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigError(f"Env var {name} must be an integer, got {raw!r}") from None


def _get_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigError(f"Env var {name} must be a number, got {raw!r}") from None


@dataclass(frozen=True)
class Settings:
    # Container
    width: int
    height: int

    # Layout
    max_items: int
    image_size: float

    # Assets
    assets_dir: str | None

    # Logging
    log_level: str
    log_json: bool


def load_settings() -> Settings:
    json_raw = os.getenv("GALLERY_LOG_JSON", "false").lower().strip()

    return Settings(
        width=_get_int("GALLERY_WIDTH", DEFAULT_WIDTH),
        height=_get_int("GALLERY_HEIGHT", DEFAULT_HEIGHT),
        max_items=_get_int("GALLERY_MAX_ITEMS", DEFAULT_MAX_ITEMS),
        image_size=_get_float("GALLERY_IMAGE_SIZE", DEFAULT_IMAGE_SIZE),
        assets_dir=os.getenv("GALLERY_ASSETS_DIR") or None,
        log_level=os.getenv("GALLERY_LOG_LEVEL", "INFO").upper(),
        log_json=json_raw in _TRUTHY,
    )
