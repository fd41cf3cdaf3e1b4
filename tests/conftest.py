from __future__ import annotations

from typing import Iterable

import pytest

from models.records import Reading
from services.aggregator import DatasetWindow
from services.router import IntentRouter, build_default_router
from settings import get_settings
from storage.record_store import RecordStore, build_default_store


def make_reading(
    district: str,
    state: str,
    api_value: int,
    day: str,
    status: str | None = None,
) -> Reading:
    """Build a reading whose stored status follows the usual thresholds."""
    if status is None:
        if api_value <= 50:
            status = "Good"
        elif api_value <= 100:
            status = "Moderate"
        else:
            status = "Unhealthy"
    return Reading(district=district, state=state, api_value=api_value, status=status, date=day)


def make_router(readings: Iterable[Reading], **kwargs) -> IntentRouter:
    kwargs.setdefault("seed", 7)
    return IntentRouter(
        store=RecordStore(readings),
        window=DatasetWindow(start="2025-10-29", end="2025-11-29"),
        **kwargs,
    )


@pytest.fixture()
def window() -> DatasetWindow:
    return DatasetWindow(start="2025-10-29", end="2025-11-29")


@pytest.fixture()
def sample_readings() -> list[Reading]:
    return [
        make_reading("Kuala Lumpur", "Wilayah Persekutuan", 40, "2025-11-27"),
        make_reading("Kuala Lumpur", "Wilayah Persekutuan", 60, "2025-11-28"),
        make_reading("Kuala Lumpur", "Wilayah Persekutuan", 120, "2025-11-29"),
        make_reading("Shah Alam", "Selangor", 30, "2025-11-28"),
        make_reading("Shah Alam", "Selangor", 35, "2025-11-29"),
        make_reading("Johor Bahru", "Johor", 90, "2025-11-28"),
        make_reading("Johor Bahru", "Johor", 80, "2025-11-29"),
        make_reading("Bandaraya Melaka", "Malacca", 45, "2025-11-29"),
        make_reading("Ipoh", "Perak", 55, "2025-11-01"),
        make_reading("Ipoh", "Perak", 65, "2025-11-02"),
    ]


@pytest.fixture()
def store(sample_readings: list[Reading]) -> RecordStore:
    return RecordStore(sample_readings)


@pytest.fixture()
def router(sample_readings: list[Reading]) -> IntentRouter:
    return make_router(sample_readings)


@pytest.fixture(autouse=True)
def _isolate_caches(monkeypatch):
    monkeypatch.setattr("cli.app.configure_logging", lambda *args, **kwargs: None)
    caches = (get_settings, build_default_store, build_default_router)
    for cache in caches:
        cache.cache_clear()
    yield
    for cache in caches:
        cache.cache_clear()
