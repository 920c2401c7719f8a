from __future__ import annotations

from typing import Any, Dict, List, NoReturn, Optional

import httpx
import typer

from cli.config import CLIConfig


class ApiClient:
    """Minimal HTTP client for the sensor monitor service."""

    def __init__(self, config: CLIConfig) -> None:
        self._config = config
        self._client = httpx.Client(base_url=config.base_url, timeout=config.timeout)

    def close(self) -> None:
        self._client.close()

    def submit_reading(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        response = self._request("POST", "/api/sensor-data", json=payload)
        data = response.json().get("data")
        if not isinstance(data, dict):
            raise typer.BadParameter("Unexpected response payload when submitting reading.")
        return data

    def list_readings(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/api/sensor-data").json()

    def latest(self) -> Optional[Dict[str, Any]]:
        try:
            response = self._client.get("/api/sensor-data/latest")
            if response.status_code == 404:
                return None
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            self._handle_http_error(exc)
        except httpx.HTTPError as exc:
            self._handle_transport_error(exc)
        return response.json()

    def analyze(self, window_size: Optional[int] = None) -> Dict[str, Any]:
        body = {"windowSize": window_size} if window_size is not None else None
        return self._request("POST", "/api/analyze", json=body).json()

    def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        try:
            response = self._client.request(method, url, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            self._handle_http_error(exc)
        except httpx.HTTPError as exc:
            self._handle_transport_error(exc)
        return response

    def _handle_transport_error(self, exc: httpx.HTTPError) -> NoReturn:
        typer.secho(
            f"Could not reach {self._config.base_url}: {exc}",
            fg=typer.colors.RED,
            err=True,
        )
        raise typer.Exit(code=1)

    @staticmethod
    def _handle_http_error(exc: httpx.HTTPStatusError) -> NoReturn:
        detail: str | None = None
        try:
            data = exc.response.json()
            detail = data.get("detail")
        except Exception:  # noqa: BLE001 - best effort parsing
            detail = exc.response.text.strip()
        message = (
            f"Request failed with status {exc.response.status_code}: {detail or 'no detail provided.'}"
        )
        typer.secho(message, fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
