"""Route free-text questions through the detector cascade."""

from __future__ import annotations

import logging
import random
from functools import lru_cache
from typing import Callable, List, Mapping, Optional, Sequence

from models.intents import IntentKind, ResolvedIntent
from services.aggregator import Aggregator, DatasetWindow
from services.detectors import (
    Detector,
    KnowledgeBaseDetector,
    MissingLocationDetector,
    default_detectors,
)
from services.formatter import ResponseFormatter, StatusDecorator
from services.knowledge import DEFAULT_FALLBACK_RESPONSES, DEFAULT_KNOWLEDGE_BASE
from settings import get_settings
from storage.record_store import RecordStore, build_default_store

logger = logging.getLogger(__name__)

Chooser = Callable[[Sequence[str]], str]

EMPTY_POOL_REPLY = "I'm not sure how to answer that. Try asking about an area or a date."


class IntentRouter:
    """Resolves an utterance to the first matching intent and renders it.

    Detectors run in order, then the knowledge base, then a "not found" reply
    for known place names with no readings. A reply from the fallback pool is
    used when nothing matches.
    """

    def __init__(
        self,
        store: RecordStore,
        window: DatasetWindow,
        detectors: Optional[Sequence[Detector]] = None,
        knowledge_base: Optional[Mapping[str, str]] = None,
        fallback_responses: Optional[Sequence[str]] = None,
        chooser: Optional[Chooser] = None,
        formatter: Optional[ResponseFormatter] = None,
        seed: Optional[int] = None,
    ) -> None:
        self.store = store
        self.window = window
        table = DEFAULT_KNOWLEDGE_BASE if knowledge_base is None else knowledge_base
        cascade: List[Detector] = list(
            default_detectors(window, Aggregator()) if detectors is None else detectors
        )
        cascade.append(KnowledgeBaseDetector(table))
        cascade.append(MissingLocationDetector())
        self.detectors = cascade
        self.fallback_responses = tuple(
            DEFAULT_FALLBACK_RESPONSES if fallback_responses is None else fallback_responses
        )
        self._chooser = chooser or random.Random(seed).choice
        self.formatter = formatter or ResponseFormatter()

    def resolve(self, utterance: str) -> ResolvedIntent:
        for detector in self.detectors:
            intent = detector.detect(utterance, self.store)
            if intent is not None:
                logger.debug(
                    "Resolved utterance",
                    extra={"intent": intent.kind.value, "detector": detector.name},
                )
                return intent

        if self.fallback_responses:
            reply = self._chooser(self.fallback_responses)
        else:
            reply = EMPTY_POOL_REPLY
        logger.debug("No detector matched", extra={"intent": IntentKind.fallback.value})
        return ResolvedIntent(kind=IntentKind.fallback, parameters={"reply": reply})

    def respond(self, utterance: str) -> str:
        return self.formatter.render(self.resolve(utterance))

    def statistics(self) -> ResolvedIntent:
        """Dataset-wide statistics, independent of any utterance."""
        return ResolvedIntent(
            kind=IntentKind.statistics,
            parameters={
                "statistics": Aggregator().statistics(self.store),
                "window": self.window,
            },
        )


@lru_cache
def build_default_router(
    data_path: Optional[str] = None,
    seed: Optional[int] = None,
    decorate_status: Optional[StatusDecorator] = None,
) -> IntentRouter:
    """Factory that wires the router with the configured dataset."""
    settings = get_settings()
    store = build_default_store(data_path)
    if store.is_empty():
        logger.warning(
            "Dataset has no readings; answers will report missing data",
            extra={"source": store.source},
        )
    window = DatasetWindow(start=settings.window_start, end=settings.reference_date)
    return IntentRouter(
        store=store,
        window=window,
        formatter=ResponseFormatter(decorate_status),
        seed=settings.random_seed if seed is None else seed,
    )
