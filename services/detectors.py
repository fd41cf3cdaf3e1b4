"""Intent detectors tried by the router in priority order.

Each detector inspects the raw utterance and either returns a
``ResolvedIntent`` carrying the aggregated data the answer needs, or ``None``
so the router moves on to the next detector.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from datetime import date, timedelta
from typing import List, Mapping, Optional

from models.intents import IntentKind, ResolvedIntent
from services import lexicon
from services.aggregator import (
    AreaTrend,
    Aggregator,
    DatasetWindow,
    previous_date,
)
from storage.record_store import RecordStore

logger = logging.getLogger(__name__)

HISTORY_LENGTH = 5
FILTERED_RANKING_LIMIT = 10
SUPERLATIVE_LIMIT = 5
COMPARISON_LIMIT = 5
TREND_THRESHOLD = 5.0
TREND_SPAN_DAYS = 3


class Detector(ABC):
    """One entry in the router's cascade."""

    name = "detector"

    def __init__(self, aggregator: Optional[Aggregator] = None) -> None:
        self.aggregator = aggregator or Aggregator()

    @abstractmethod
    def detect(self, utterance: str, store: RecordStore) -> Optional[ResolvedIntent]:
        raise NotImplementedError


class RankingDetector(Detector):
    name = "ranking"

    POLLUTED_KEYWORDS = ("most polluted", "worst", "dirtiest")
    CLEANEST_KEYWORDS = ("cleanest", "best")
    FULL_KEYWORDS = ("ranking", "top", "list")
    GENERIC_KEYWORD = "rank"

    def detect(self, utterance: str, store: RecordStore) -> Optional[ResolvedIntent]:
        if lexicon.contains_any(utterance, self.POLLUTED_KEYWORDS):
            return self._ranking(store, IntentKind.polluted_ranking, True, FILTERED_RANKING_LIMIT)
        if lexicon.contains_any(utterance, self.CLEANEST_KEYWORDS):
            return self._ranking(store, IntentKind.cleanest_ranking, False, FILTERED_RANKING_LIMIT)
        if lexicon.contains_any(utterance, self.FULL_KEYWORDS):
            return self._ranking(store, IntentKind.full_ranking, False, None)
        if lexicon.contains_keyword(utterance, self.GENERIC_KEYWORD):
            return self._ranking(store, IntentKind.cleanest_ranking, False, FILTERED_RANKING_LIMIT)
        return None

    def _ranking(
        self,
        store: RecordStore,
        kind: IntentKind,
        descending: bool,
        limit: Optional[int],
    ) -> ResolvedIntent:
        entries = self.aggregator.ranked_areas(store, descending=descending, limit=limit)
        return ResolvedIntent(kind=kind, parameters={"entries": entries})


class HealthAdvisoryDetector(Detector):
    name = "health_advisory"

    KEYWORDS = (
        "go out",
        "go outside",
        "outdoor",
        "exercise",
        "workout",
        "jog",
        "run",
        "walk",
        "healthy",
        "safe",
        "haze",
    )

    def __init__(self, window: DatasetWindow, aggregator: Optional[Aggregator] = None) -> None:
        super().__init__(aggregator)
        self.window = window

    def detect(self, utterance: str, store: RecordStore) -> Optional[ResolvedIntent]:
        if not lexicon.contains_any(utterance, self.KEYWORDS):
            return None

        location = lexicon.detect_location(utterance)
        if not location:
            return ResolvedIntent(kind=IntentKind.location_prompt)

        today = self.window.end
        readings = [
            reading
            for reading in store.for_date(today)
            if lexicon.matches_location(location, reading.district, reading.state)
        ]
        logger.debug(
            "Health advisory lookup",
            extra={"location": location, "date": today, "record_count": len(readings)},
        )
        return ResolvedIntent(
            kind=IntentKind.health_advisory,
            parameters={"location": location, "date": today, "readings": readings},
        )


class DateQueryDetector(Detector):
    """Answers questions that name a date, optionally narrowed to one area."""

    name = "date_query"

    def __init__(self, window: DatasetWindow, aggregator: Optional[Aggregator] = None) -> None:
        super().__init__(aggregator)
        self.window = window

    def detect(self, utterance: str, store: RecordStore) -> Optional[ResolvedIntent]:
        day = lexicon.extract_date(utterance, self.window.end)
        if not day:
            return None
        logger.debug("Date mentioned in question", extra={"date": day})
        return self.resolve_for_date(utterance, store, day)

    def resolve_for_date(self, utterance: str, store: RecordStore, day: str) -> ResolvedIntent:
        for reading in store:
            if lexicon.matches_area(utterance, reading.district, reading.state):
                return self._area_on_date(store, reading.district, day)

        report = self.aggregator.for_date(store, day)
        return ResolvedIntent(
            kind=IntentKind.date_report,
            parameters={"date": day, "report": report},
        )

    def _area_on_date(self, store: RecordStore, area: str, day: str) -> ResolvedIntent:
        reading = self.aggregator.reading_for_area_on(store, area, day)
        trend: Optional[AreaTrend] = None
        if reading is not None:
            prior_day = previous_date(day, self.window)
            if prior_day:
                prior = self.aggregator.reading_for(
                    store, reading.district, reading.state, prior_day
                )
                if prior is not None:
                    trend = AreaTrend.between(reading.api_value, prior.api_value)

        return ResolvedIntent(
            kind=IntentKind.area_date_report,
            parameters={"area": area, "date": day, "reading": reading, "trend": trend},
        )


class TodayAirQualityDetector(DateQueryDetector):
    name = "today_air_quality"

    AIR_QUALITY_KEYWORDS = ("api", "air quality")

    def detect(self, utterance: str, store: RecordStore) -> Optional[ResolvedIntent]:
        if not lexicon.contains_keyword(utterance, "today"):
            return None
        if not lexicon.contains_any(utterance, self.AIR_QUALITY_KEYWORDS):
            return None
        return self.resolve_for_date(utterance, store, self.window.end)


class TrendDetector(Detector):
    """Trend, history, per-month and comparison questions."""

    name = "trend"

    MONTH_KEYWORDS = (("october", 10), ("november", 11))

    def __init__(self, window: DatasetWindow, aggregator: Optional[Aggregator] = None) -> None:
        super().__init__(aggregator)
        self.window = window

    def detect(self, utterance: str, store: RecordStore) -> Optional[ResolvedIntent]:
        if lexicon.contains_keyword(utterance, "trend"):
            return self._trend(store)
        if lexicon.contains_any(utterance, ("history", "historical")):
            return ResolvedIntent(
                kind=IntentKind.history_summary,
                parameters={
                    "coverage": self.aggregator.coverage(store.readings),
                    "window": self.window,
                },
            )
        if lexicon.contains_any(utterance, (month for month, _ in self.MONTH_KEYWORDS)):
            return self._months(utterance, store)
        if lexicon.contains_keyword(utterance, "compare"):
            entries = self.aggregator.ranked_areas(store, descending=True, limit=COMPARISON_LIMIT)
            return ResolvedIntent(kind=IntentKind.area_comparison, parameters={"entries": entries})
        return None

    def _trend(self, store: RecordStore) -> ResolvedIntent:
        reference = date.fromisoformat(self.window.end)
        early_days = [
            reference.replace(day=offset + 1).isoformat() for offset in range(TREND_SPAN_DAYS)
        ]
        late_days = [
            (reference - timedelta(days=offset)).isoformat()
            for offset in reversed(range(TREND_SPAN_DAYS))
        ]
        early = self.aggregator.mean_for_dates(store, early_days)
        late = self.aggregator.mean_for_dates(store, late_days)

        direction = None
        if early is not None and late is not None:
            change = late[0] - early[0]
            if change > TREND_THRESHOLD:
                direction = "worsened"
            elif change < -TREND_THRESHOLD:
                direction = "improved"
            else:
                direction = "stable"

        return ResolvedIntent(
            kind=IntentKind.trend,
            parameters={
                "month": reference.strftime("%B"),
                "early_days": early_days,
                "late_days": late_days,
                "early": early,
                "late": late,
                "direction": direction,
            },
        )

    def _months(self, utterance: str, store: RecordStore) -> ResolvedIntent:
        year = date.fromisoformat(self.window.end).year
        months = []
        for keyword, number in self.MONTH_KEYWORDS:
            if not lexicon.contains_keyword(utterance, keyword):
                continue
            period = f"{year}-{number:02d}"
            months.append(
                {
                    "name": keyword.capitalize(),
                    "year": year,
                    "period": period,
                    "summary": self.aggregator.month_summary(store, period),
                }
            )
        return ResolvedIntent(kind=IntentKind.month_summary, parameters={"months": months})


class SuperlativeDetector(Detector):
    name = "superlative"

    DAY_KEYWORDS = ("day", "date")

    def detect(self, utterance: str, store: RecordStore) -> Optional[ResolvedIntent]:
        if lexicon.contains_keyword(utterance, "worst"):
            return self._resolve(utterance, store, descending=True)
        if lexicon.contains_keyword(utterance, "best"):
            return self._resolve(utterance, store, descending=False)
        return None

    def _resolve(self, utterance: str, store: RecordStore, descending: bool) -> ResolvedIntent:
        if lexicon.contains_any(utterance, self.DAY_KEYWORDS):
            kind = IntentKind.worst_days if descending else IntentKind.best_days
            readings = self.aggregator.superlative_readings(
                store, descending=descending, limit=SUPERLATIVE_LIMIT
            )
        else:
            kind = IntentKind.worst_areas if descending else IntentKind.best_areas
            latest = self.aggregator.latest_by_district(store)
            ordered = sorted(latest)
            readings = self.aggregator.superlative_readings(
                (latest[district] for district in ordered),
                descending=descending,
                limit=SUPERLATIVE_LIMIT,
            )
        return ResolvedIntent(kind=kind, parameters={"readings": readings})


class ListingDetector(Detector):
    name = "listing"

    def __init__(self, window: DatasetWindow, aggregator: Optional[Aggregator] = None) -> None:
        super().__init__(aggregator)
        self.window = window

    def detect(self, utterance: str, store: RecordStore) -> Optional[ResolvedIntent]:
        if lexicon.contains_any(utterance, ("list", "all")):
            latest = self.aggregator.latest_by_district(store)
            readings = [latest[district] for district in sorted(latest)]
            return ResolvedIntent(kind=IntentKind.area_listing, parameters={"readings": readings})
        if lexicon.contains_keyword(utterance, "stat"):
            return ResolvedIntent(
                kind=IntentKind.statistics,
                parameters={
                    "statistics": self.aggregator.statistics(store),
                    "window": self.window,
                },
            )
        return None


class AreaDetector(Detector):
    name = "area"

    def detect(self, utterance: str, store: RecordStore) -> Optional[ResolvedIntent]:
        for reading in store:
            if lexicon.matches_area(utterance, reading.district, reading.state):
                return self._history(store, reading.district, reading.state)
        return None

    def _history(self, store: RecordStore, district: str, state: str) -> ResolvedIntent:
        history = self.aggregator.history_for_area(store, district, state)
        return ResolvedIntent(
            kind=IntentKind.area_history,
            parameters={
                "district": district,
                "state": state,
                "latest": history[0] if history else None,
                "trend": self.aggregator.trend_from_history(history),
                "recent": history[:HISTORY_LENGTH],
            },
        )


class KnowledgeBaseDetector(Detector):
    name = "knowledge_base"

    def __init__(self, table: Mapping[str, str], aggregator: Optional[Aggregator] = None) -> None:
        super().__init__(aggregator)
        self.table = dict(table)

    def detect(self, utterance: str, store: RecordStore) -> Optional[ResolvedIntent]:
        for phrase, reply in self.table.items():
            if lexicon.contains_keyword(utterance, phrase):
                return ResolvedIntent(
                    kind=IntentKind.knowledge,
                    parameters={"phrase": phrase, "reply": reply},
                )
        return None


class MissingLocationDetector(Detector):
    """Answers "not found" for a known place name the data has no readings for.

    Runs after the knowledge base so greetings and canned topics still win.
    """

    name = "missing_location"

    def detect(self, utterance: str, store: RecordStore) -> Optional[ResolvedIntent]:
        location = lexicon.detect_location(utterance)
        if not location:
            return None
        logger.debug("Known location has no readings", extra={"location": location})
        return ResolvedIntent(
            kind=IntentKind.area_history,
            parameters={"district": location, "state": "", "latest": None, "recent": []},
        )


def default_detectors(
    window: DatasetWindow, aggregator: Optional[Aggregator] = None
) -> List[Detector]:
    """Data-driven detectors in priority order, ahead of the knowledge base."""
    shared = aggregator or Aggregator()
    return [
        RankingDetector(shared),
        HealthAdvisoryDetector(window, shared),
        DateQueryDetector(window, shared),
        TodayAirQualityDetector(window, shared),
        TrendDetector(window, shared),
        SuperlativeDetector(shared),
        ListingDetector(window, shared),
        AreaDetector(shared),
    ]

