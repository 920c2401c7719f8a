"""Prompt construction, generator client, and reply parsing for analyses."""

from __future__ import annotations

import json
import logging
import re
import time
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any, List, Optional, Protocol, Sequence, Union

import httpx

from models.records import Reading
from services.classifier import describe_bands
from services.errors import GeneratorUnavailableError
from settings import get_settings

logger = logging.getLogger(__name__)

_FENCE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL | re.IGNORECASE)


class SummaryGenerator(Protocol):
    def generate(self, prompt: str) -> str:
        ...


@dataclass(frozen=True)
class StructuredAnalysis:
    summary: str
    recommendations: List[str] = field(default_factory=list)
    alerts: List[str] = field(default_factory=list)
    structured: bool = field(default=True, init=False)


@dataclass(frozen=True)
class RawFallbackAnalysis:
    """Generator reply that could not be parsed; kept verbatim as the summary."""

    summary: str
    recommendations: List[str] = field(default_factory=list, init=False)
    alerts: List[str] = field(default_factory=list, init=False)
    structured: bool = field(default=False, init=False)


AnalysisResult = Union[StructuredAnalysis, RawFallbackAnalysis]


def build_prompt(window: Sequence[Reading]) -> str:
    data = [
        {
            "lightLevel": reading.light_level,
            "temperature": reading.temperature,
            "humidity": reading.humidity,
            "voltage": reading.voltage,
            "timestamp": reading.to_dict()["timestamp"],
        }
        for reading in window
    ]
    return f"""Analyze the following IoT sensor readings from an ESP32 (newest first):

{json.dumps(data, indent=2)}

The sensors are:
- LDR light sensor (lightLevel): ambient light in raw ADC units (0-4095, 0=dark, 4095=very bright)
- Temperature: degrees Celsius (when available)
- Humidity: relative humidity percentage (when available)
- Voltage: supply voltage in volts (when available)

Please provide:
1. A summary of the overall state of the sensors
2. Specific recommendations based on the data
3. Alerts for any values outside normal ranges

Normal ranges:
{describe_bands()}

Reply in JSON with this structure:
{{
  "summary": "overall summary including light patterns and other sensors",
  "recommendations": ["recommendation 1", "recommendation 2"],
  "alerts": ["alert 1", "alert 2"]
}}
"""


def _string_list(value: Any) -> Optional[List[str]]:
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        return None
    return list(value)


def parse_analysis(text: str) -> AnalysisResult:
    """Interpret a generator reply, falling back to the raw text when needed."""
    candidate = text.strip()
    fenced = _FENCE.match(candidate)
    if fenced:
        candidate = fenced.group(1)

    try:
        payload = json.loads(candidate)
    except (ValueError, RecursionError):
        payload = None

    if isinstance(payload, dict) and isinstance(payload.get("summary"), str):
        recommendations = _string_list(payload.get("recommendations"))
        alerts = _string_list(payload.get("alerts"))
        if recommendations is not None and alerts is not None:
            return StructuredAnalysis(
                summary=payload["summary"],
                recommendations=recommendations,
                alerts=alerts,
            )

    logger.warning(
        "Generator reply was not a structured analysis; using raw text.",
        extra={"reason": "unparseable reply"},
    )
    return RawFallbackAnalysis(summary=text)


class HttpSummaryGenerator:
    """Client for an OpenAI-compatible chat completions endpoint."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        model: str,
        temperature: float = 0.3,
        timeout: float = 30.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.model = model
        self.temperature = temperature
        self.timeout = timeout
        headers = {"Authorization": f"Bearer {api_key}"} if api_key else {}
        self._client = httpx.Client(
            base_url=base_url,
            timeout=timeout,
            headers=headers,
            transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    def generate(self, prompt: str) -> str:
        body = {
            "model": self.model,
            "temperature": self.temperature,
            "messages": [{"role": "user", "content": prompt}],
        }
        # httpx read timeouts restart on every chunk; bound the whole exchange.
        deadline = time.monotonic() + self.timeout
        try:
            with self._client.stream("POST", "/chat/completions", json=body) as response:
                response.raise_for_status()
                chunks: List[bytes] = []
                for chunk in response.iter_bytes():
                    chunks.append(chunk)
                    if time.monotonic() > deadline:
                        raise GeneratorUnavailableError("Summary generator timed out.")
        except httpx.TimeoutException as exc:
            raise GeneratorUnavailableError("Summary generator timed out.") from exc
        except httpx.HTTPStatusError as exc:
            logger.error(
                "Summary generator returned an error response.",
                extra={"status_code": exc.response.status_code},
            )
            raise GeneratorUnavailableError(
                f"Summary generator responded with status {exc.response.status_code}."
            ) from exc
        except httpx.HTTPError as exc:
            raise GeneratorUnavailableError(
                f"Summary generator request failed: {exc}"
            ) from exc

        try:
            content = json.loads(b"".join(chunks))["choices"][0]["message"]["content"]
        except (ValueError, RecursionError, KeyError, IndexError, TypeError) as exc:
            raise GeneratorUnavailableError(
                "Summary generator response did not contain completion text."
            ) from exc
        if not isinstance(content, str):
            raise GeneratorUnavailableError(
                "Summary generator response did not contain completion text."
            )
        return content


@lru_cache
def build_default_generator() -> HttpSummaryGenerator:
    settings = get_settings()
    return HttpSummaryGenerator(
        base_url=settings.summary_base_url,
        api_key=settings.summary_api_key,
        model=settings.summary_model,
        temperature=settings.summary_temperature,
        timeout=settings.summary_timeout,
    )
