"""Unit tests for threshold classification."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from app.schemas import MetricStatus
from models.records import Reading
from services.classifier import (
    classify,
    classify_reading,
    describe_bands,
    describe_light_level,
)

N, W, C = MetricStatus.normal, MetricStatus.warning, MetricStatus.critical


@pytest.mark.parametrize(
    ("metric", "value", "expected"),
    [
        ("voltage", 3.3, N),
        ("voltage", 5.0, N),
        ("voltage", 3.2999, W),
        ("voltage", 3.0, W),
        ("voltage", 2.99, C),
        ("lightLevel", 500, N),
        ("lightLevel", 3500, N),
        ("lightLevel", 3501, W),
        ("lightLevel", 3800, W),
        ("lightLevel", 3801, C),
        ("lightLevel", 250, W),
        ("lightLevel", 200, W),
        ("lightLevel", 199, C),
        ("lightLevel", -5, C),
        ("lightLevel", 4095, C),
        ("temperature", 18, N),
        ("temperature", 30, N),
        ("temperature", 15, W),
        ("temperature", 35, W),
        ("temperature", 14.9, C),
        ("temperature", 35.1, C),
        ("humidity", 40, N),
        ("humidity", 60, N),
        ("humidity", 39.9, W),
        ("humidity", 70, W),
        ("humidity", 29.9, C),
        ("humidity", 70.5, C),
    ],
)
def test_classify_boundaries(metric: str, value: float, expected: MetricStatus) -> None:
    assert classify(metric, value) is expected


def test_unknown_metric_raises() -> None:
    with pytest.raises(KeyError):
        classify("pressure", 1013.0)


def test_classify_reading_covers_present_metrics_only() -> None:
    reading = Reading(
        id="r-1",
        timestamp=datetime(2024, 1, 1, tzinfo=timezone.utc),
        light_level=250,
        voltage=3.4,
    )

    assert classify_reading(reading) == {"lightLevel": W, "voltage": N}


def test_describe_bands_matches_table() -> None:
    text = describe_bands()

    assert "- Light level: 500-3500 (critical: <200 or >3800)" in text
    assert "- Temperature: 18-30°C (critical: <15°C or >35°C)" in text
    assert "- Humidity: 40-60% (critical: <30% or >70%)" in text
    assert "- Voltage: >=3.3V (critical: <3V)" in text


@pytest.mark.parametrize(
    ("value", "label"),
    [(100, "very dark"), (500, "dark"), (2000, "medium"), (3000, "bright")],
)
def test_describe_light_level(value: int, label: str) -> None:
    assert describe_light_level(value) == label
