from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Optional

import typer

from app.schemas import MetricStatus
from services.classifier import classify, describe_light_level

_STATUS_COLORS = {
    MetricStatus.normal: typer.colors.GREEN,
    MetricStatus.warning: typer.colors.YELLOW,
    MetricStatus.critical: typer.colors.RED,
}

_UNITS = {"lightLevel": "", "temperature": "°C", "humidity": "%", "voltage": "V"}


def echo_heading(text: str) -> None:
    typer.secho(text, bold=True)


def echo_key_values(pairs: Iterable[tuple[str, Any]]) -> None:
    for key, value in pairs:
        typer.echo(f"{key}: {value}")


def _echo_metric(metric: str, value: Any, status: Optional[MetricStatus]) -> None:
    if value is None:
        typer.echo(f"  {metric}: -")
        return
    label = f"{value}{_UNITS[metric]}"
    if metric == "lightLevel":
        label = f"{label} ({describe_light_level(int(value))})"
    if status is None:
        typer.echo(f"  {metric}: {label}")
        return
    typer.echo(f"  {metric}: {label} ", nl=False)
    typer.secho(f"[{status.value}]", fg=_STATUS_COLORS[status])


def render_reading(
    reading: Dict[str, Any],
    status: Optional[Mapping[str, str]] = None,
) -> None:
    """Print a reading; ``status`` is the server's classification when known."""
    echo_key_values(
        [
            ("id", reading.get("id")),
            ("timestamp", reading.get("timestamp")),
        ]
    )
    for metric in _UNITS:
        value = reading.get(metric)
        if status is not None:
            level = MetricStatus(status[metric]) if metric in status else None
        elif value is not None:
            level = classify(metric, value)
        else:
            level = None
        _echo_metric(metric, value, level)


def render_readings(readings: List[Dict[str, Any]]) -> None:
    echo_heading(f"Readings ({len(readings)})")
    if not readings:
        typer.echo("No readings stored yet.")
        return
    for reading in readings:
        typer.echo()
        render_reading(reading)


def render_analysis(payload: Dict[str, Any]) -> None:
    analysis = payload.get("analysis") or {}
    echo_heading("Summary")
    typer.echo(analysis.get("summary", ""))
    if not payload.get("structured", True):
        typer.secho("(unstructured reply from the generator)", dim=True)

    for title, key, empty in (
        ("Recommendations", "recommendations", "No recommendations."),
        ("Alerts", "alerts", "No alerts."),
    ):
        typer.echo()
        echo_heading(title)
        items = analysis.get(key) or []
        if not items:
            typer.echo(empty)
        for item in items:
            typer.echo(f"  - {item}")
