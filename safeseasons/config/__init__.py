# SafeSeasons
# Copyright (c) 2025 Kevin Wyjad
# Licensed under the Pythia Non-Commercial Public License v1.0.
# See the LICENSE file in the project root for details.

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict

import yaml


def _default_config_path() -> Path:
    env_path = os.getenv("SAFESEASONS_CONFIG_PATH")
    if env_path:
        return Path(env_path).expanduser().resolve()
    return Path(__file__).resolve().parent.parent / "config.yaml"


@lru_cache(maxsize=1)
def load() -> Dict[str, Any]:
    """Load the application configuration from YAML."""

    path = _default_config_path()
    if not path.exists():
        return {}
    with path.open("r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh) or {}
    if not isinstance(data, dict):
        return {}
    return data


def section(name: str) -> Dict[str, Any]:
    """Return one top-level mapping from the config, or ``{}``."""

    value = load().get(name)
    return value if isinstance(value, dict) else {}


def env_str(name: str, default: str) -> str:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip()


def env_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)) or default)
    except Exception:
        return default


def env_float(name: str, default: float) -> float:
    try:
        return float(os.getenv(name, str(default)) or default)
    except Exception:
        return default


def env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def stream_word_delay() -> float:
    """Seconds to wait between replayed words."""

    cfg_ms = section("ask").get("stream_word_delay_ms", 50)
    try:
        cfg_ms = int(cfg_ms)
    except (TypeError, ValueError):
        cfg_ms = 50
    return max(0, env_int("SAFESEASONS_STREAM_WORD_DELAY_MS", cfg_ms)) / 1000.0


def default_region() -> str:
    cfg = str(section("app").get("default_region") or "")
    return env_str("SAFESEASONS_DEFAULT_REGION", cfg).upper()
