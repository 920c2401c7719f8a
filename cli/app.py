from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

import typer
import uvicorn

from cli.client import ApiClient
from cli.config import CLIConfig, load_config
from cli.render import render_analysis, render_reading, render_readings


@dataclass
class CLIState:
    config: CLIConfig
    client: ApiClient


app = typer.Typer(
    help="Utilities for interacting with the sensor monitor service.",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _get_state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    if not isinstance(state, CLIState):
        raise typer.Exit(code=1, message="CLI state is uninitialized.")
    return state


@app.callback()
def main(
    ctx: typer.Context,
    base_url: Optional[str] = typer.Option(
        None,
        "--base-url",
        "-b",
        help="Monitor API base URL (defaults to API_BASE_URL env or http://localhost:8000).",
    ),
    timeout: Optional[float] = typer.Option(
        None,
        "--timeout",
        help="Seconds to wait for each HTTP request.",
    ),
) -> None:
    """Entry point for the CLI."""
    config = load_config(base_url=base_url, timeout=timeout)
    client = ApiClient(config)
    ctx.obj = CLIState(config=config, client=client)
    ctx.call_on_close(client.close)


@app.command("submit")
def submit_command(
    ctx: typer.Context,
    light: Optional[int] = typer.Option(None, "--light", help="Raw light level (0-4095)."),
    temperature: Optional[float] = typer.Option(None, "--temperature", help="Degrees Celsius."),
    humidity: Optional[float] = typer.Option(None, "--humidity", help="Relative humidity %."),
    voltage: Optional[float] = typer.Option(None, "--voltage", help="Supply voltage."),
) -> None:
    """Submit one reading."""
    payload: Dict[str, Any] = {
        key: value
        for key, value in (
            ("value", light),
            ("temperature", temperature),
            ("humidity", humidity),
            ("voltage", voltage),
        )
        if value is not None
    }
    if not payload:
        raise typer.BadParameter("Provide at least one measurement.")

    state = _get_state(ctx)
    reading = state.client.submit_reading(payload)
    typer.secho(f"Reading stored. id={reading.get('id')}", fg=typer.colors.GREEN)
    render_reading(reading)


@app.command("list")
def list_command(
    ctx: typer.Context,
    limit: Optional[int] = typer.Option(None, "--limit", "-n", min=1, help="Show at most N readings."),
) -> None:
    """List stored readings, newest first."""
    state = _get_state(ctx)
    readings = state.client.list_readings()
    if limit is not None:
        readings = readings[:limit]
    render_readings(readings)


@app.command("latest")
def latest_command(ctx: typer.Context) -> None:
    """Show the most recent reading and its status."""
    state = _get_state(ctx)
    payload = state.client.latest()
    if payload is None:
        typer.echo("No readings stored yet.")
        return
    render_reading(payload["reading"], status=payload.get("status") or {})


@app.command("analyze")
def analyze_command(
    ctx: typer.Context,
    window: Optional[int] = typer.Option(None, "--window", "-w", min=1, help="Number of recent readings to analyze."),
) -> None:
    """Ask the service for a summary of recent readings."""
    state = _get_state(ctx)
    payload = state.client.analyze(window)
    render_analysis(payload)


@app.command("serve")
def serve_command(
    host: str = typer.Option("127.0.0.1", "--host", help="Interface to bind."),
    port: int = typer.Option(8000, "--port", "-p", min=1, max=65535, help="Port to listen on."),
    reload: bool = typer.Option(False, "--reload/--no-reload", help="Restart on code changes."),
) -> None:
    """Run the monitor API server."""
    typer.echo(f"Serving sensor monitor on http://{host}:{port} ...")
    uvicorn.run("app.main:app", host=host, port=port, reload=reload)
