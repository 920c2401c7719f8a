"""Coordination of reading ingestion, history, and on-demand analysis."""

from __future__ import annotations

import logging
import time
from functools import lru_cache
from typing import Any, Optional

from datastore.history import ReadingHistory, build_default_history
from models.records import Reading
from services.errors import GeneratorUnavailableError, InvalidInputError, NoDataError
from services.normalizer import Rejected, normalize_reading
from services.summary import (
    AnalysisResult,
    SummaryGenerator,
    build_default_generator,
    build_prompt,
    parse_analysis,
)
from settings import get_settings

logger = logging.getLogger(__name__)


class MonitorService:
    """Owns the reading history and the summary generator it feeds."""

    def __init__(
        self,
        history: ReadingHistory,
        generator: SummaryGenerator,
        default_window: int = 10,
    ) -> None:
        self.history = history
        self.generator = generator
        self.default_window = default_window

    def submit_reading(self, raw: Any) -> Reading:
        """Normalize ``raw`` and store it, or raise without storing anything."""
        result = normalize_reading(raw)
        if isinstance(result, Rejected):
            logger.warning(
                "Rejected reading without usable measurements.",
                extra={"reason": result.reason, "invalid_fields": result.invalid_fields},
            )
            raise InvalidInputError(result.reason, result.invalid_fields)

        reading = result.reading
        self.history.insert(reading)
        logger.info(
            "Stored reading.",
            extra={"reading_id": reading.id, "history_size": len(self.history)},
        )
        return reading

    def list_readings(self) -> list[Reading]:
        return self.history.list_all()

    def latest_reading(self) -> Optional[Reading]:
        return self.history.latest()

    def analyze(self, window_size: Optional[int] = None) -> AnalysisResult:
        """Summarize the most recent readings through the generator.

        Raises ``NoDataError`` before any external call when the history is
        empty. Generator failures propagate as ``GeneratorUnavailableError``
        and leave the history untouched.
        """
        size = window_size if window_size is not None else self.default_window
        size = min(max(size, 1), self.history.capacity)
        window = self.history.window(size)
        if not window:
            raise NoDataError("No data to analyze.")

        prompt = build_prompt(window)
        start = time.perf_counter()
        try:
            text = self.generator.generate(prompt)
        except GeneratorUnavailableError as exc:
            logger.error(
                "Summary generator unavailable.",
                extra={"reason": str(exc), "window_size": len(window)},
            )
            raise
        finally:
            elapsed_ms = int((time.perf_counter() - start) * 1000)
            logger.info(
                "Summary generator call finished.",
                extra={"window_size": len(window), "elapsed_ms": elapsed_ms},
            )
        return parse_analysis(text)

    def shutdown(self) -> None:
        close = getattr(self.generator, "close", None)
        if callable(close):
            close()


@lru_cache
def build_default_monitor() -> MonitorService:
    """Factory that wires the monitor with the configured collaborators."""
    settings = get_settings()
    return MonitorService(
        history=build_default_history(),
        generator=build_default_generator(),
        default_window=settings.analysis_window_size,
    )
