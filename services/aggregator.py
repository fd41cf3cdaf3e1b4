"""Aggregation logic for daily API readings."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from models.records import (
    STATUS_GOOD,
    STATUS_LABELS,
    STATUS_MODERATE,
    STATUS_UNHEALTHY,
    Reading,
)

GOOD_THRESHOLD = 50
MODERATE_THRESHOLD = 100


def status_from_api(value: float) -> str:
    """Label derived from a numeric reading, independent of stored labels."""
    if value <= GOOD_THRESHOLD:
        return STATUS_GOOD
    if value <= MODERATE_THRESHOLD:
        return STATUS_MODERATE
    return STATUS_UNHEALTHY


@dataclass(frozen=True)
class DatasetWindow:
    """Inclusive range of dates the dataset covers."""

    start: str
    end: str

    def contains(self, value: str) -> bool:
        return self.start <= value <= self.end


def previous_date(value: str, window: DatasetWindow) -> str:
    """Return the day before ``value``, or "" when that falls outside the window."""
    if not window.contains(value):
        return ""
    try:
        current = date.fromisoformat(value)
    except ValueError:
        return ""
    candidate = (current - timedelta(days=1)).isoformat()
    return candidate if window.contains(candidate) else ""


@dataclass
class DateSummary:
    count: int = 0
    mean_value: float | None = None
    worst: Reading | None = None
    best: Reading | None = None


@dataclass
class DateReport:
    date: str
    by_state: Dict[str, List[Reading]] = field(default_factory=dict)
    summary: DateSummary = field(default_factory=DateSummary)


@dataclass
class DatasetStatistics:
    row_count: int = 0
    area_count: int = 0
    mean_value: float | None = None
    max_value: int | None = None
    min_value: int | None = None
    per_status_count: Dict[str, int] = field(default_factory=dict)


@dataclass
class DatasetCoverage:
    row_count: int = 0
    area_count: int = 0
    day_count: int = 0
    readings_per_area: int = 0


@dataclass(frozen=True)
class RankedArea:
    area: str
    average: float
    status: str


@dataclass
class AreaTrend:
    direction: str
    change: int

    @classmethod
    def between(cls, current: int, previous: int) -> "AreaTrend":
        delta = current - previous
        if delta > 0:
            direction = "worsened"
        elif delta < 0:
            direction = "improved"
        else:
            direction = "stable"
        return cls(direction=direction, change=abs(delta))


class Aggregator:
    """Pure aggregation component that can be unit tested in isolation."""

    def average_by_area(self, readings: Iterable[Reading]) -> List[Tuple[str, float]]:
        """Mean API per area in first-seen order; callers sort as needed."""
        totals: Dict[str, List[int]] = {}
        for reading in readings:
            bucket = totals.setdefault(reading.area_key, [0, 0])
            bucket[0] += reading.api_value
            bucket[1] += 1
        return [(key, total / count) for key, (total, count) in totals.items() if count]

    def latest_by_district(self, readings: Iterable[Reading]) -> Dict[str, Reading]:
        latest: Dict[str, Reading] = {}
        for reading in readings:
            current = latest.get(reading.district)
            if current is None or reading.date >= current.date:
                latest[reading.district] = reading
        return latest

    def for_date(self, readings: Iterable[Reading], day: str) -> DateReport | None:
        matching = [reading for reading in readings if reading.date == day]
        if not matching:
            return None

        by_state: Dict[str, List[Reading]] = {}
        for reading in matching:
            by_state.setdefault(reading.state, []).append(reading)

        summary = DateSummary(count=len(matching))
        total = 0
        for reading in matching:
            total += reading.api_value
            if summary.worst is None or reading.api_value > summary.worst.api_value:
                summary.worst = reading
            if summary.best is None or reading.api_value < summary.best.api_value:
                summary.best = reading
        summary.mean_value = total / summary.count

        return DateReport(
            date=day,
            by_state={state: by_state[state] for state in sorted(by_state)},
            summary=summary,
        )

    def history_for_area(
        self, readings: Iterable[Reading], district: str, state: str
    ) -> List[Reading]:
        history = [
            reading
            for reading in readings
            if reading.district == district and reading.state == state
        ]
        return sorted(history, key=lambda reading: reading.date, reverse=True)

    def trend_from_history(self, history: Sequence[Reading]) -> AreaTrend | None:
        if len(history) < 2:
            return None
        return AreaTrend.between(history[0].api_value, history[1].api_value)

    def reading_for_area_on(
        self, readings: Iterable[Reading], area: str, day: str
    ) -> Reading | None:
        """First reading on ``day`` whose district or state contains ``area``."""
        needle = area.lower()
        for reading in readings:
            if reading.date != day:
                continue
            if needle in reading.district.lower() or needle in reading.state.lower():
                return reading
        return None

    def reading_for(
        self, readings: Iterable[Reading], district: str, state: str, day: str
    ) -> Reading | None:
        for reading in readings:
            if reading.district == district and reading.state == state and reading.date == day:
                return reading
        return None

    def mean_for_dates(
        self, readings: Iterable[Reading], days: Iterable[str]
    ) -> Tuple[float, int] | None:
        wanted = set(days)
        values = [reading.api_value for reading in readings if reading.date in wanted]
        if not values:
            return None
        return sum(values) / len(values), len(values)

    def month_summary(
        self, readings: Iterable[Reading], month_prefix: str
    ) -> Tuple[float, int] | None:
        values = [
            reading.api_value for reading in readings if reading.date.startswith(month_prefix)
        ]
        if not values:
            return None
        return sum(values) / len(values), len(values)

    def statistics(self, readings: Iterable[Reading]) -> DatasetStatistics | None:
        stats = DatasetStatistics(
            per_status_count=dict.fromkeys(STATUS_LABELS, 0)
        )
        areas: set[str] = set()
        total = 0

        for reading in readings:
            stats.row_count += 1
            value = reading.api_value
            total += value
            areas.add(reading.area_key)

            if stats.min_value is None or value < stats.min_value:
                stats.min_value = value
            if stats.max_value is None or value > stats.max_value:
                stats.max_value = value

            if reading.status in stats.per_status_count:
                stats.per_status_count[reading.status] += 1

        if not stats.row_count:
            return None

        stats.area_count = len(areas)
        stats.mean_value = total / stats.row_count
        return stats

    def coverage(self, readings: Sequence[Reading]) -> DatasetCoverage | None:
        if not readings:
            return None
        areas = {reading.area_key for reading in readings}
        days = {reading.date for reading in readings}
        return DatasetCoverage(
            row_count=len(readings),
            area_count=len(areas),
            day_count=len(days),
            readings_per_area=len(readings) // len(areas),
        )

    def superlative_readings(
        self, readings: Iterable[Reading], descending: bool, limit: int = 5
    ) -> List[Reading]:
        ordered = sorted(readings, key=lambda reading: reading.api_value, reverse=descending)
        return ordered[:limit]

    def ranked_areas(
        self, readings: Iterable[Reading], descending: bool, limit: Optional[int] = None
    ) -> List[RankedArea]:
        ordered = sorted(
            self.average_by_area(readings), key=lambda item: item[1], reverse=descending
        )
        if limit is not None:
            ordered = ordered[:limit]
        return [
            RankedArea(area=area, average=average, status=status_from_api(average))
            for area, average in ordered
        ]
