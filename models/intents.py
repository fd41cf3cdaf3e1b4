"""Intermediate values produced by intent detection."""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field


class IntentKind(str, Enum):
    """Every response family the router can produce."""

    cleanest_ranking = "cleanest_ranking"
    polluted_ranking = "polluted_ranking"
    full_ranking = "full_ranking"
    location_prompt = "location_prompt"
    health_advisory = "health_advisory"
    area_date_report = "area_date_report"
    date_report = "date_report"
    trend = "trend"
    history_summary = "history_summary"
    month_summary = "month_summary"
    area_comparison = "area_comparison"
    worst_days = "worst_days"
    best_days = "best_days"
    worst_areas = "worst_areas"
    best_areas = "best_areas"
    area_listing = "area_listing"
    statistics = "statistics"
    area_history = "area_history"
    knowledge = "knowledge"
    fallback = "fallback"


class ResolvedIntent(BaseModel):
    """A classified utterance together with the data needed to answer it."""

    model_config = ConfigDict(frozen=True)

    kind: IntentKind
    parameters: Dict[str, Any] = Field(default_factory=dict)

    def param(self, name: str, default: Any = None) -> Any:
        return self.parameters.get(name, default)
