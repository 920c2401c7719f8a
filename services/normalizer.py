"""Validation and coercion of raw sensor payloads into canonical readings."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Mapping, Optional, Tuple, Union

from models.records import Reading, next_reading_id

MISSING_DATA_REASON = "missing required data"

_LIGHT_KEYS = ("value", "lightLevel")

_DECIMAL = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


@dataclass(frozen=True)
class Accepted:
    reading: Reading


@dataclass(frozen=True)
class Rejected:
    reason: str
    invalid_fields: Tuple[str, ...] = field(default_factory=tuple)


NormalizationResult = Union[Accepted, Rejected]


def _parse_float(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        candidate = value.strip()
        if not _DECIMAL.fullmatch(candidate):
            return None
        value = candidate
    elif not isinstance(value, (int, float)):
        return None
    try:
        parsed = float(value)
    except OverflowError:
        return None
    return parsed if math.isfinite(parsed) else None


def _parse_int(value: Any) -> Optional[int]:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    parsed = _parse_float(value)
    if parsed is None:
        return None
    return int(parsed)


def _read_field(
    raw: Mapping[str, Any],
    keys: Tuple[str, ...],
    parser: Callable[[Any], Optional[Any]],
    invalid: list[str],
) -> Optional[Any]:
    for key in keys:
        if key not in raw or raw[key] is None:
            continue
        parsed = parser(raw[key])
        if parsed is None:
            invalid.append(key)
        return parsed
    return None


def normalize_reading(
    raw: Any,
    now: Optional[Callable[[], datetime]] = None,
) -> NormalizationResult:
    """Coerce ``raw`` into a :class:`Reading` or explain why it was rejected.

    Fields that are present but unparseable are treated as absent. The
    timestamp is always taken from the receiving clock, never from ``raw``.
    """
    if not isinstance(raw, Mapping):
        return Rejected(reason=MISSING_DATA_REASON)

    invalid: list[str] = []
    light_level = _read_field(raw, _LIGHT_KEYS, _parse_int, invalid)
    temperature = _read_field(raw, ("temperature",), _parse_float, invalid)
    humidity = _read_field(raw, ("humidity",), _parse_float, invalid)
    voltage = _read_field(raw, ("voltage",), _parse_float, invalid)

    if light_level is None and temperature is None and humidity is None and voltage is None:
        return Rejected(reason=MISSING_DATA_REASON, invalid_fields=tuple(invalid))

    clock = now or (lambda: datetime.now(timezone.utc))
    reading = Reading(
        id=next_reading_id(),
        timestamp=clock(),
        light_level=light_level,
        temperature=temperature,
        humidity=humidity,
        voltage=voltage,
    )
    return Accepted(reading=reading)
