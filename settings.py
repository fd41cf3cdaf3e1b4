from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import date
from functools import lru_cache
from typing import Optional


_DATA_PATH_ENV = "AIRQ_DATA_PATH"
_REFERENCE_DATE_ENV = "AIRQ_REFERENCE_DATE"
_WINDOW_START_ENV = "AIRQ_WINDOW_START"
_RANDOM_SEED_ENV = "AIRQ_RANDOM_SEED"
_COLOR_ENV = "AIRQ_COLOR"
_LOG_LEVEL_ENV = "LOG_LEVEL"

DEFAULT_DATA_PATH = "./data/malaysia_api_1month_daily.txt"
DEFAULT_REFERENCE_DATE = "2025-11-29"
DEFAULT_WINDOW_START = "2025-10-29"


@dataclass(frozen=True)
class Settings:
    data_path: str
    reference_date: str
    window_start: str
    random_seed: Optional[int]
    color: bool
    log_level: str


def _read_str_env(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or default


def _read_date_env(name: str, default: str) -> str:
    candidate = _read_str_env(name, default)
    try:
        date.fromisoformat(candidate)
    except ValueError:
        return default
    return candidate


def _read_seed(default: Optional[int]) -> Optional[int]:
    value = os.getenv(_RANDOM_SEED_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        return int(candidate)
    except ValueError:
        return default


def _read_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip().lower()
    if not candidate:
        return default
    if candidate in {"1", "true", "yes", "on"}:
        return True
    if candidate in {"0", "false", "no", "off"}:
        return False
    return default


def _read_log_level(default: str) -> str:
    value = os.getenv(_LOG_LEVEL_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    return candidate.upper()


@lru_cache
def get_settings() -> Settings:
    return Settings(
        data_path=_read_str_env(_DATA_PATH_ENV, DEFAULT_DATA_PATH),
        reference_date=_read_date_env(_REFERENCE_DATE_ENV, DEFAULT_REFERENCE_DATE),
        window_start=_read_date_env(_WINDOW_START_ENV, DEFAULT_WINDOW_START),
        random_seed=_read_seed(None),
        color=_read_flag(_COLOR_ENV, True),
        log_level=_read_log_level("INFO"),
    )
