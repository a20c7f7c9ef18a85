"""
SignalCraft
Copyright (c) 2026 Chris Menendez.
All Rights Reserved.
See LICENSE for permitted use.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env file into environment
load_dotenv()

logger = logging.getLogger(__name__)

REPO_ROOT = Path(__file__).resolve().parents[2]

DEFAULT_DATASET_BASE_URL = (
    "https://huggingface.co/datasets/Anthropic/EconomicIndex/resolve/main/release_2025_03_27"
)
SUPPORTED_SOURCE_MODES = {"live", "snapshot", "auto"}


def _get_int_env(name: str, default: int) -> int:
    value = os.environ.get(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        logger.warning("Invalid %s=%r; using default=%d", name, value, default)
        return default


def _get_float_env(name: str, default: float) -> float:
    value = os.environ.get(name)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        logger.warning("Invalid %s=%r; using default=%s", name, value, default)
        return default


def _get_source_mode(default: str = "auto") -> str:
    mode = (os.environ.get("TXENGINE_SOURCE_MODE") or default).strip().lower()
    if mode not in SUPPORTED_SOURCE_MODES:
        logger.warning("Unsupported TXENGINE_SOURCE_MODE=%r; using default=%s", mode, default)
        return default
    return mode


DATA_DIR = Path(os.environ.get("TXENGINE_DATA_DIR") or REPO_ROOT / "data")
STATE_DIR = Path(os.environ.get("TXENGINE_STATE_DIR") or REPO_ROOT / "state")
SOURCE_CACHE_DIR = STATE_DIR / "source_cache"

DATASET_BASE_URL = (os.environ.get("TXENGINE_DATASET_BASE_URL") or DEFAULT_DATASET_BASE_URL).rstrip("/")
SOURCE_MODE = _get_source_mode()

# 0 disables expiry; entries then live until cleared.
SOURCE_CACHE_TTL_S = _get_float_env("TXENGINE_SOURCE_CACHE_TTL_S", 0.0)
FETCH_TIMEOUT_S = _get_float_env("TXENGINE_FETCH_TIMEOUT_S", 30.0)
FETCH_MAX_ATTEMPTS = _get_int_env("TXENGINE_FETCH_MAX_ATTEMPTS", 3)
FETCH_BACKOFF_BASE_S = _get_float_env("TXENGINE_FETCH_BACKOFF_BASE", 0.5)
FETCH_BACKOFF_MAX_S = _get_float_env("TXENGINE_FETCH_BACKOFF_MAX", 3.0)
LOADER_MAX_WORKERS = _get_int_env("TXENGINE_LOADER_MAX_WORKERS", 4)

USER_AGENT = os.environ.get("TXENGINE_USER_AGENT", "task-exposure-engine/0.1 (+dataset-fetch)")
