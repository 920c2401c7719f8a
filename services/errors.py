"""Error types raised by the monitor service."""

from __future__ import annotations

from typing import Sequence


class MonitorError(Exception):
    """Base class for failures surfaced to callers of the monitor."""


class InvalidInputError(MonitorError):
    """A submitted reading carried no usable measurement; nothing was stored."""

    def __init__(self, reason: str, invalid_fields: Sequence[str] = ()) -> None:
        super().__init__(reason)
        self.reason = reason
        self.invalid_fields = tuple(invalid_fields)


class NoDataError(MonitorError):
    """Analysis was requested while the history is empty."""


class GeneratorUnavailableError(MonitorError):
    """The summary generator timed out, failed, or answered with an error."""
