"""Unit tests for raw reading normalization."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from services.normalizer import (
    MISSING_DATA_REASON,
    Accepted,
    Rejected,
    normalize_reading,
)

_FIXED_NOW = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)


def _accept(raw) -> Accepted:
    result = normalize_reading(raw, now=lambda: _FIXED_NOW)
    assert isinstance(result, Accepted), result
    return result


def test_light_value_maps_to_light_level_only() -> None:
    reading = _accept({"value": 250}).reading

    assert reading.light_level == 250
    assert reading.temperature is None
    assert reading.humidity is None
    assert reading.voltage is None
    assert reading.timestamp == _FIXED_NOW


def test_numeric_strings_are_coerced() -> None:
    reading = _accept(
        {"value": "1024", "temperature": "21.5", "humidity": " 48 ", "voltage": "3.31"}
    ).reading

    assert reading.light_level == 1024
    assert reading.temperature == 21.5
    assert reading.humidity == 48.0
    assert reading.voltage == 3.31


def test_fractional_light_level_is_truncated() -> None:
    assert _accept({"value": "812.9"}).reading.light_level == 812


def test_light_level_alias_is_used_when_value_missing() -> None:
    assert _accept({"lightLevel": 900}).reading.light_level == 900


def test_zero_is_a_measurement() -> None:
    reading = _accept({"temperature": 0}).reading

    assert reading.temperature == 0.0


def test_unparseable_fields_are_dropped_not_zeroed() -> None:
    reading = _accept({"temperature": "warm", "humidity": 55}).reading

    assert reading.temperature is None
    assert reading.humidity == 55.0


def test_caller_timestamp_and_id_are_ignored() -> None:
    reading = _accept(
        {"value": 300, "timestamp": "1999-01-01T00:00:00Z", "id": "mine"}
    ).reading

    assert reading.timestamp == _FIXED_NOW
    assert reading.id != "mine"


def test_ids_are_unique_and_ordered() -> None:
    ids = [_accept({"value": i}).reading.id for i in range(50)]

    assert len(set(ids)) == 50
    assert ids == sorted(ids)


@pytest.mark.parametrize(
    "raw",
    [
        {},
        {"timestamp": "2024-01-01T00:00:00Z"},
        {"value": None, "temperature": None},
        {"value": "dark", "temperature": "", "humidity": "nan", "voltage": "inf"},
        {"value": True, "voltage": [3.3]},
        [250],
        "value=250",
        None,
    ],
)
def test_readings_without_usable_measurement_are_rejected(raw) -> None:
    result = normalize_reading(raw)

    assert isinstance(result, Rejected)
    assert result.reason == MISSING_DATA_REASON


def test_rejection_lists_invalid_fields() -> None:
    result = normalize_reading({"value": "dark", "humidity": "wet"})

    assert isinstance(result, Rejected)
    assert result.invalid_fields == ("value", "humidity")


@pytest.mark.parametrize("text", ["1_000", "１２３", "0x10", "1e999", "3.3V", "+"])
def test_non_decimal_strings_are_not_measurements(text: str) -> None:
    result = normalize_reading({"value": text, "voltage": text})

    assert isinstance(result, Rejected)
    assert result.invalid_fields == ("value", "voltage")


def test_signed_and_exponent_strings_are_accepted() -> None:
    reading = _accept({"temperature": "-4.5", "humidity": "4.5e1", "voltage": ".33e1"}).reading

    assert reading.temperature == -4.5
    assert reading.humidity == 45.0
    assert reading.voltage == 3.3
