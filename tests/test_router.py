from __future__ import annotations

import logging
from pathlib import Path

import pytest

from conftest import make_reading, make_router
from models.intents import IntentKind
from services.knowledge import DEFAULT_FALLBACK_RESPONSES
from services.router import EMPTY_POOL_REPLY, IntentRouter, build_default_router


def test_kl_today_reports_reading_and_trend(router: IntentRouter) -> None:
    response = router.respond("KL today")

    assert "Air Quality in Kuala Lumpur, Wilayah Persekutuan on 2025-11-29:" in response
    assert "API Reading: 120" in response
    assert "Status: Unhealthy" in response
    assert "worsened by 60 points" in response


def test_rank_with_worst_prefers_polluted_ranking(router: IntentRouter) -> None:
    intent = router.resolve("rank the worst areas")

    assert intent.kind is IntentKind.polluted_ranking
    assert "MOST POLLUTED" in router.respond("rank the worst areas")


def test_ranking_runs_before_superlatives(router: IntentRouter) -> None:
    assert router.resolve("best day").kind is IntentKind.cleanest_ranking


def test_health_question_without_location_asks_for_area(router: IntentRouter) -> None:
    response = router.respond("Can I go out today?")

    assert "which area you're in" in response


def test_health_advisory_for_location(router: IntentRouter) -> None:
    response = router.respond("is it safe to jog in KL?")

    assert "Health Advisory for kl" in response
    assert "API: 120 (Unhealthy)" in response
    assert "UNHEALTHY CONDITIONS" in response
    assert "General Tips" in response


def test_date_queries(router: IntentRouter) -> None:
    full_day = router.respond("29 Nov")
    missing_day = router.respond("show me 15 nov")

    assert "Air Quality Data for 2025-11-29:" in full_day
    assert "Areas monitored: 4" in full_day
    assert missing_day == "No data available for 2025-11-15"


def test_area_only_query_returns_history(router: IntentRouter) -> None:
    response = router.respond("How is Shah Alam doing?")

    assert response.startswith("Air Quality History for Shah Alam, Selangor:")
    assert "Trend: worsened by 5 points from previous day" in response
    assert "Advice: Air quality is satisfactory." in response


def test_trend_history_month_and_compare(router: IntentRouter) -> None:
    assert "remained relatively stable" in router.respond("show the trend")
    assert "Total records: 10" in router.respond("history")
    months = router.respond("october and november")
    assert "No October data available." in months
    assert "Average API: 62.0" in months
    assert router.respond("compare areas").startswith("Area Comparison")


def test_listing_and_statistics(router: IntentRouter) -> None:
    listing = router.respond("show all areas")
    stats = router.respond("stat")

    assert listing.startswith("All monitored areas (latest readings):")
    assert "Highest API: 120" in stats
    assert "Unhealthy: 1 readings" in stats


def test_knowledge_base_and_farewell(router: IntentRouter) -> None:
    assert router.respond("hello").startswith("Hello! I am Malaysia Air Pollutant AI")
    assert "Breathe easy" in router.respond("quit")
    assert "Stay safe" in router.respond("exit")


def test_fallback_uses_injected_chooser(sample_readings) -> None:
    router = make_router(sample_readings, chooser=lambda pool: pool[-1])

    intent = router.resolve("xyz")

    assert intent.kind is IntentKind.fallback
    assert intent.param("reply") == DEFAULT_FALLBACK_RESPONSES[-1]


def test_fallback_is_deterministic_for_a_seed(sample_readings) -> None:
    first = make_router(sample_readings, seed=3)
    second = make_router(sample_readings, seed=3)

    replies = [first.respond("xyz") for _ in range(5)]

    assert replies == [second.respond("xyz") for _ in range(5)]
    assert set(replies) <= set(DEFAULT_FALLBACK_RESPONSES)


def test_injected_tables_replace_defaults(sample_readings) -> None:
    router = make_router(
        sample_readings,
        knowledge_base={"ping": "pong"},
        fallback_responses=[],
    )

    assert router.respond("ping") == "pong"
    assert router.respond("hello") == EMPTY_POOL_REPLY


@pytest.mark.parametrize(
    "utterance",
    ["cleanest areas", "top 10", "stat", "How is Kuala Lumpur?", "trend", "compare", "history"],
)
def test_empty_store_degrades_gracefully(utterance: str) -> None:
    router = make_router([])

    response = router.respond(utterance)

    assert response
    assert any(
        marker in response
        for marker in ("No data available", "couldn't find data", "Not enough data")
    )


def test_empty_store_date_queries() -> None:
    router = make_router([])

    assert router.respond("KL today") == "No data available for 2025-11-29"


def test_mismatched_stored_status_is_shown_verbatim() -> None:
    router = make_router([make_reading("Ipoh", "Perak", 150, "2025-11-29", status="Good")])

    response = router.respond("Ipoh on 29 nov")

    assert "Status: Good" in response
    full_ranking = router.respond("top")
    assert "(Unhealthy)" in full_ranking


def test_build_default_router_reads_settings(monkeypatch, tmp_path: Path) -> None:
    path = tmp_path / "readings.txt"
    path.write_text("Ipoh,Perak,40,Good,2025-11-29\n", encoding="utf-8")
    monkeypatch.setenv("AIRQ_DATA_PATH", str(path))
    monkeypatch.setenv("AIRQ_REFERENCE_DATE", "2025-11-29")

    router = build_default_router()

    assert len(router.store) == 1
    assert router.window.end == "2025-11-29"
    assert "API Reading: 40" in router.respond("ipoh today")


def test_statistics_matches_stat_utterance(router: IntentRouter) -> None:
    direct = router.statistics()

    assert direct.kind is IntentKind.statistics
    assert router.formatter.render(direct) == router.respond("stat")


def test_greeting_with_unmonitored_place_still_greets(router: IntentRouter) -> None:
    assert router.respond("hello from puchong").startswith("Hello! I am Malaysia Air Pollutant AI")


def test_unmonitored_known_place_reports_not_found(router: IntentRouter) -> None:
    intent = router.resolve("how is puchong")

    assert intent.kind is IntentKind.area_history
    assert router.respond("how is puchong") == "Sorry, I couldn't find data for puchong"


def test_detected_location_and_date_are_logged(router: IntentRouter, caplog) -> None:
    caplog.set_level(logging.DEBUG, logger="services.detectors")

    router.resolve("is it safe to jog in KL?")
    router.resolve("show me 15 nov")

    locations = [getattr(record, "location", None) for record in caplog.records]
    dates = [getattr(record, "date", None) for record in caplog.records]
    assert "kl" in locations
    assert "2025-11-15" in dates


def test_build_default_router_warns_on_empty_dataset(monkeypatch, tmp_path: Path, caplog) -> None:
    path = tmp_path / "readings.txt"
    path.write_text("# header only\n", encoding="utf-8")
    monkeypatch.setenv("AIRQ_DATA_PATH", str(path))

    with caplog.at_level(logging.WARNING, logger="services.router"):
        router = build_default_router()

    assert router.store.is_empty()
    assert any(getattr(record, "source", None) == str(path) for record in caplog.records)
