"""Threshold classification of sensor measurements."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, Mapping, Optional

from app.schemas import MetricStatus
from models.records import Reading


@dataclass(frozen=True)
class MetricBands:
    """Band boundaries for one metric.

    ``normal_low..normal_high`` is Normal (inclusive). Values strictly below
    ``critical_low`` or strictly above ``critical_high`` are Critical.
    Everything in between is Warning. A ``None`` upper bound means the band
    is open-ended.
    """

    label: str
    unit: str
    normal_low: float
    normal_high: Optional[float]
    critical_low: float
    critical_high: Optional[float]

    def classify(self, value: float) -> MetricStatus:
        above_normal = self.normal_high is not None and value > self.normal_high
        if value >= self.normal_low and not above_normal:
            return MetricStatus.normal
        if value < self.critical_low:
            return MetricStatus.critical
        if self.critical_high is not None and value > self.critical_high:
            return MetricStatus.critical
        return MetricStatus.warning


BANDS: Mapping[str, MetricBands] = MappingProxyType(
    {
        "lightLevel": MetricBands(
            label="Light level",
            unit="",
            normal_low=500,
            normal_high=3500,
            critical_low=200,
            critical_high=3800,
        ),
        "temperature": MetricBands(
            label="Temperature",
            unit="°C",
            normal_low=18,
            normal_high=30,
            critical_low=15,
            critical_high=35,
        ),
        "humidity": MetricBands(
            label="Humidity",
            unit="%",
            normal_low=40,
            normal_high=60,
            critical_low=30,
            critical_high=70,
        ),
        "voltage": MetricBands(
            label="Voltage",
            unit="V",
            normal_low=3.3,
            normal_high=None,
            critical_low=3.0,
            critical_high=None,
        ),
    }
)


def classify(metric: str, value: float) -> MetricStatus:
    """Map a metric value onto Normal, Warning or Critical."""
    try:
        bands = BANDS[metric]
    except KeyError:
        raise KeyError(f"Unknown metric {metric!r}.") from None
    return bands.classify(value)


def classify_reading(reading: Reading) -> Dict[str, MetricStatus]:
    return {
        metric: classify(metric, value)
        for metric, value in reading.measurements().items()
    }


def _fmt(value: float, unit: str) -> str:
    return f"{value:g}{unit}"


def describe_bands() -> str:
    """Render the band table as the text embedded in analysis prompts."""
    lines = []
    for bands in BANDS.values():
        unit = bands.unit
        if bands.normal_high is None:
            normal = f">={_fmt(bands.normal_low, unit)}"
        else:
            normal = f"{bands.normal_low:g}-{_fmt(bands.normal_high, unit)}"
        critical = [f"<{_fmt(bands.critical_low, unit)}"]
        if bands.critical_high is not None:
            critical.append(f">{_fmt(bands.critical_high, unit)}")
        lines.append(
            f"- {bands.label}: {normal} (critical: {' or '.join(critical)})"
        )
    return "\n".join(lines)


def describe_light_level(value: int) -> str:
    """Coarse ambient-light label shown next to raw ADC values."""
    if value < 500:
        return "very dark"
    if value < 1500:
        return "dark"
    if value < 3000:
        return "medium"
    return "bright"
