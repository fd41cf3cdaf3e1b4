"""Render resolved intents as human-readable text blocks."""

from __future__ import annotations

from datetime import date
from typing import Callable, Dict, List, Optional, Sequence

from models.intents import IntentKind, ResolvedIntent
from models.records import STATUS_GOOD, STATUS_MODERATE, STATUS_UNHEALTHY, Reading
from services.aggregator import DatasetWindow, RankedArea, status_from_api

NO_DATA = "No data available."

LOCATION_PROMPT = (
    "🤔 I'd be happy to advise you about going out! But first, could you tell me which "
    "area you're in? For example: 'Kuala Lumpur', 'Selangor', 'Penang', etc. This will "
    "help me give you more accurate advice based on local air quality."
)

STATUS_ADVICE = {
    STATUS_GOOD: "Air quality is satisfactory. Enjoy outdoor activities!",
    STATUS_MODERATE: (
        "Air quality is acceptable. Sensitive people should reduce prolonged outdoor exertion."
    ),
    STATUS_UNHEALTHY: "Everyone may experience health effects. Reduce outdoor activities.",
}
DEFAULT_ADVICE = "No specific advice available."

ADVISORY_TIERS = {
    STATUS_GOOD: (
        "✅ EXCELLENT CONDITIONS - GO OUTSIDE! 🌞",
        (
            "Perfect for all outdoor activities",
            "Great day for exercise, sports, and recreation",
            "Enjoy the fresh air safely",
        ),
    ),
    STATUS_MODERATE: (
        "⚠️ MODERATE CONDITIONS - PROCEED WITH CAUTION",
        (
            "Generally acceptable for most people",
            "Unusually sensitive individuals should reduce prolonged outdoor exertion",
            "Good for light activities like walking",
            "Consider shorter outdoor sessions",
        ),
    ),
    STATUS_UNHEALTHY: (
        "❌ UNHEALTHY CONDITIONS - LIMIT OUTDOOR TIME",
        (
            "Everyone may begin to experience health effects",
            "Sensitive groups should avoid outdoor activities",
            "If you must go out, keep it brief",
            "Avoid strenuous exercise outdoors",
            "Consider indoor alternatives",
        ),
    ),
}

GENERAL_TIPS = (
    "Check air quality before planning outdoor activities",
    "Sensitive groups include children, elderly, and people with respiratory conditions",
    "Use air purifiers indoors if air quality is poor",
    "Stay hydrated and listen to your body",
)

CLEANEST_MARKERS = ("🥇 ", "🥈 ", "🥉 ")
POLLUTED_MARKERS = ("🔴 ", "🟠 ", "🟡 ")

StatusDecorator = Callable[[str], str]


def advice_for_status(status: str) -> str:
    return STATUS_ADVICE.get(status, DEFAULT_ADVICE)


def position_marker(index: int, markers: Sequence[str]) -> str:
    if index < len(markers):
        return markers[index]
    return f"{index + 1}. "


def _short_date(value: str) -> str:
    try:
        parsed = date.fromisoformat(value)
    except ValueError:
        return value
    return f"{parsed.strftime('%b')} {parsed.day}"


def _long_date(value: str) -> str:
    try:
        parsed = date.fromisoformat(value)
    except ValueError:
        return value
    return f"{parsed.day} {parsed.strftime('%b')} {parsed.year}"


def _ordinal(day: int) -> str:
    if 10 <= day % 100 <= 20:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(day % 10, "th")
    return f"{day}{suffix}"


class ResponseFormatter:
    """Turns a ``ResolvedIntent`` into the text shown to the user.

    ``decorate_status`` wraps status labels for display (terminal colour, for
    example). Without it labels are rendered as plain text.
    """

    def __init__(self, decorate_status: Optional[StatusDecorator] = None) -> None:
        self._decorate = decorate_status or (lambda status: status)
        self._renderers: Dict[IntentKind, Callable[[ResolvedIntent], str]] = {
            IntentKind.cleanest_ranking: self._cleanest_ranking,
            IntentKind.polluted_ranking: self._polluted_ranking,
            IntentKind.full_ranking: self._full_ranking,
            IntentKind.location_prompt: lambda _intent: LOCATION_PROMPT,
            IntentKind.health_advisory: self._health_advisory,
            IntentKind.area_date_report: self._area_date_report,
            IntentKind.date_report: self._date_report,
            IntentKind.trend: self._trend,
            IntentKind.history_summary: self._history_summary,
            IntentKind.month_summary: self._month_summary,
            IntentKind.area_comparison: self._area_comparison,
            IntentKind.worst_days: self._superlative_days,
            IntentKind.best_days: self._superlative_days,
            IntentKind.worst_areas: self._superlative_areas,
            IntentKind.best_areas: self._superlative_areas,
            IntentKind.area_listing: self._area_listing,
            IntentKind.statistics: self._statistics,
            IntentKind.area_history: self._area_history,
            IntentKind.knowledge: self._reply,
            IntentKind.fallback: self._reply,
        }

    def render(self, intent: ResolvedIntent) -> str:
        return self._renderers[intent.kind](intent)

    def status(self, label: str) -> str:
        return self._decorate(label)

    # Rankings

    def _cleanest_ranking(self, intent: ResolvedIntent) -> str:
        return self._ranking(
            intent.param("entries", []),
            "🏆 CLEANEST AREAS RANKING (Average API - Lower is Better):",
            "=" * 45,
            CLEANEST_MARKERS,
        )

    def _polluted_ranking(self, intent: ResolvedIntent) -> str:
        return self._ranking(
            intent.param("entries", []),
            "⚠️ MOST POLLUTED AREAS RANKING (Average API - Higher is Worse):",
            "=" * 49,
            POLLUTED_MARKERS,
        )

    def _ranking(
        self,
        entries: Sequence[RankedArea],
        title: str,
        rule: str,
        markers: Sequence[str],
    ) -> str:
        if not entries:
            return NO_DATA
        lines = [title, rule]
        for index, entry in enumerate(entries):
            lines.append(
                f"{position_marker(index, markers)}{entry.area} - API: {entry.average:.1f}"
            )
        return "\n".join(lines) + "\n"

    def _full_ranking(self, intent: ResolvedIntent) -> str:
        entries: Sequence[RankedArea] = intent.param("entries", [])
        if not entries:
            return NO_DATA
        lines = ["📊 COMPLETE AIR QUALITY RANKING:", "=" * 31]
        for index, entry in enumerate(entries):
            lines.append(
                f"{position_marker(index, CLEANEST_MARKERS)}{entry.area} - API: "
                f"{entry.average:.1f} ({self.status(entry.status)})"
            )
        return "\n".join(lines) + "\n"

    # Health advisory

    def _health_advisory(self, intent: ResolvedIntent) -> str:
        location = intent.param("location", "")
        readings: Sequence[Reading] = intent.param("readings", [])
        if not readings:
            return (
                f"I couldn't find specific air quality data for {location} today. "
                "You can check the overall Malaysia air quality or try asking about a "
                "nearby major city."
            )

        today = _long_date(intent.param("date", ""))
        lines = [
            f"📍 Health Advisory for {location} (Today - {today}):",
            "=" * 32,
            "",
        ]
        for reading in readings:
            heading, bullets = ADVISORY_TIERS[status_from_api(reading.api_value)]
            lines.append(f"🏙️  {reading.district}, {reading.state}")
            lines.append(f"📊 API: {reading.api_value} ({self.status(reading.status)})")
            lines.append("")
            lines.append(heading)
            lines.extend(f"• {bullet}" for bullet in bullets)
            lines.append("")

        lines.append("💡 General Tips:")
        lines.extend(f"• {tip}" for tip in GENERAL_TIPS)
        return "\n".join(lines) + "\n"

    # Date scoped

    def _area_date_report(self, intent: ResolvedIntent) -> str:
        area = intent.param("area", "")
        day = intent.param("date", "")
        reading: Optional[Reading] = intent.param("reading")
        if reading is None:
            return f"No data found for {area} on {day}"

        lines = [
            f"Air Quality in {reading.district}, {reading.state} on {day}:",
            f"• API Reading: {reading.api_value}",
            f"• Status: {self.status(reading.status)}",
            f"• Advice: {advice_for_status(reading.status)}",
        ]
        trend = intent.param("trend")
        if trend is not None:
            lines.append(
                f"• Change from previous day: {trend.direction} by {trend.change} points"
            )
        return "\n".join(lines) + "\n"

    def _date_report(self, intent: ResolvedIntent) -> str:
        day = intent.param("date", "")
        report = intent.param("report")
        if report is None:
            return f"No data available for {day}"

        lines = [f"Air Quality Data for {day}:", "=" * 32]
        for state, readings in report.by_state.items():
            lines.append("")
            lines.append(f"{state}:")
            for reading in readings:
                lines.append(
                    f"  • {reading.district} - API: {reading.api_value} "
                    f"({self.status(reading.status)})"
                )

        summary = report.summary
        lines.extend(
            [
                "",
                f"Summary for {day}:",
                f"• Average API: {summary.mean_value:.1f}",
                f"• Worst: {summary.worst.area_key} (API: {summary.worst.api_value})",
                f"• Best: {summary.best.area_key} (API: {summary.best.api_value})",
                f"• Areas monitored: {summary.count}",
            ]
        )
        return "\n".join(lines) + "\n"

    # Trends, history, months, comparison

    def _trend(self, intent: ResolvedIntent) -> str:
        early = intent.param("early")
        late = intent.param("late")
        if early is None or late is None:
            return "Not enough data for trend analysis."

        month = intent.param("month", "")
        abbrev = month[:3]
        early_days: List[str] = intent.param("early_days", [])
        late_days: List[str] = intent.param("late_days", [])
        early_span = self._day_span(early_days)
        late_span = self._day_span(late_days)

        lines = [
            f"Air Quality Trend Analysis (Early vs Late {month}):",
            f"• Early {abbrev} ({early_span}): Average API {early[0]:.1f}",
            f"• Late {abbrev} ({late_span}): Average API {late[0]:.1f}",
        ]
        direction = intent.param("direction")
        if direction == "worsened":
            lines.append("• Overall: Air quality has worsened")
        elif direction == "improved":
            lines.append("• Overall: Air quality has improved")
        else:
            lines.append("• Overall: Air quality remained relatively stable")
        return "\n".join(lines) + "\n"

    @staticmethod
    def _day_span(days: Sequence[str]) -> str:
        if not days:
            return ""
        first = date.fromisoformat(days[0]).day
        last = date.fromisoformat(days[-1]).day
        return f"{_ordinal(first)}-{_ordinal(last)}"

    def _history_summary(self, intent: ResolvedIntent) -> str:
        coverage = intent.param("coverage")
        if coverage is None:
            return NO_DATA
        window: DatasetWindow = intent.param("window")
        lines = [
            f"Historical Data Summary ({self._window_label(window)}):",
            f"• Total records: {coverage.row_count}",
            f"• Monitoring period: {coverage.day_count} days",
            f"• Districts covered: {coverage.area_count}",
            f"• Data points per district: {coverage.readings_per_area}",
            "",
            "Ask me about specific dates, trends, or comparisons!",
        ]
        return "\n".join(lines)

    @staticmethod
    def _window_label(window: Optional[DatasetWindow]) -> str:
        if window is None:
            return "all dates"
        end = date.fromisoformat(window.end)
        return f"{_short_date(window.start)} - {_short_date(window.end)}, {end.year}"

    def _month_summary(self, intent: ResolvedIntent) -> str:
        months = intent.param("months", [])
        lines: List[str] = []
        for month in months:
            summary = month["summary"]
            if summary is None:
                lines.append(f"No {month['name']} data available.")
                continue
            mean_value, count = summary
            lines.extend(
                [
                    f"{month['name']} {month['year']} Analysis:",
                    f"• Average API: {mean_value:.1f}",
                    f"• Days recorded: {count}",
                ]
            )
        if not lines:
            return NO_DATA
        return "\n".join(lines) + "\n"

    def _area_comparison(self, intent: ResolvedIntent) -> str:
        entries: Sequence[RankedArea] = intent.param("entries", [])
        if not entries:
            return NO_DATA
        lines = ["Area Comparison (Average API):"]
        lines.extend(f"• {entry.area}: {entry.average:.1f}" for entry in entries)
        return "\n".join(lines) + "\n"

    # Superlatives and listings

    def _superlative_days(self, intent: ResolvedIntent) -> str:
        readings: Sequence[Reading] = intent.param("readings", [])
        if not readings:
            return NO_DATA
        label = "Worst" if intent.kind is IntentKind.worst_days else "Best"
        lines = [f"{label} air quality days recorded:"]
        lines.extend(
            f"• {reading.date} - {reading.area_key} - API: {reading.api_value} "
            f"({self.status(reading.status)})"
            for reading in readings
        )
        return "\n".join(lines) + "\n"

    def _superlative_areas(self, intent: ResolvedIntent) -> str:
        readings: Sequence[Reading] = intent.param("readings", [])
        if not readings:
            return NO_DATA
        label = "worst" if intent.kind is IntentKind.worst_areas else "best"
        return self._latest_lines(f"Current {label} air quality areas:", readings)

    def _area_listing(self, intent: ResolvedIntent) -> str:
        readings: Sequence[Reading] = intent.param("readings", [])
        if not readings:
            return NO_DATA
        return self._latest_lines("All monitored areas (latest readings):", readings)

    def _latest_lines(self, title: str, readings: Sequence[Reading]) -> str:
        lines = [title]
        lines.extend(
            f"• {reading.area_key} - API: {reading.api_value} "
            f"({self.status(reading.status)}) on {reading.date}"
            for reading in readings
        )
        return "\n".join(lines) + "\n"

    def _statistics(self, intent: ResolvedIntent) -> str:
        stats = intent.param("statistics")
        if stats is None:
            return NO_DATA
        window = intent.param("window")
        counts = stats.per_status_count
        lines = [
            f"Malaysia Air Quality Statistics ({self._window_label(window)}):",
            f"• Total records: {stats.row_count}",
            f"• Districts monitored: {stats.area_count}",
            f"• Average API: {stats.mean_value:.1f}",
            f"• Highest API: {stats.max_value}",
            f"• Lowest API: {stats.min_value}",
            f"• {STATUS_GOOD}: {counts.get(STATUS_GOOD, 0)} readings",
            f"• {STATUS_MODERATE}: {counts.get(STATUS_MODERATE, 0)} readings",
            f"• {STATUS_UNHEALTHY}: {counts.get(STATUS_UNHEALTHY, 0)} readings",
        ]
        return "\n".join(lines)

    # Per-area history

    def _area_history(self, intent: ResolvedIntent) -> str:
        district = intent.param("district", "")
        state = intent.param("state", "")
        latest: Optional[Reading] = intent.param("latest")
        if latest is None:
            name = f"{district}, {state}" if state else district
            return f"Sorry, I couldn't find data for {name}"

        lines = [
            f"Air Quality History for {district}, {state}:",
            f"Latest ({latest.date}): API {latest.api_value} ({self.status(latest.status)})",
            "",
        ]
        trend = intent.param("trend")
        if trend is not None:
            lines.append(f"Trend: {trend.direction} by {trend.change} points from previous day")
            lines.append("")

        lines.append("Last 5 days:")
        lines.extend(
            f"• {reading.date} - API: {reading.api_value} ({self.status(reading.status)})"
            for reading in intent.param("recent", [])
        )
        lines.append("")
        lines.append(f"Advice: {advice_for_status(latest.status)}")
        return "\n".join(lines)

    @staticmethod
    def _reply(intent: ResolvedIntent) -> str:
        return intent.param("reply", "")
