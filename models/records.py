"""Domain models shared across services."""

from __future__ import annotations

import itertools
import time
from dataclasses import dataclass
from datetime import datetime
from threading import Lock
from typing import Any, Dict, Optional

METRICS = ("lightLevel", "temperature", "humidity", "voltage")

_sequence = itertools.count(1)
_sequence_lock = Lock()


def next_reading_id() -> str:
    """Return a process-unique id that sorts in creation order."""
    with _sequence_lock:
        seq = next(_sequence)
    return f"{time.time_ns() // 1_000_000}-{seq:06d}"


@dataclass(frozen=True, slots=True)
class Reading:
    """A canonical sensor sample; at least one measurement is present."""

    id: str
    timestamp: datetime
    light_level: Optional[int] = None
    temperature: Optional[float] = None
    humidity: Optional[float] = None
    voltage: Optional[float] = None

    def measurements(self) -> Dict[str, float | int]:
        """Present measurements keyed by their wire name."""
        values = {
            "lightLevel": self.light_level,
            "temperature": self.temperature,
            "humidity": self.humidity,
            "voltage": self.voltage,
        }
        return {name: value for name, value in values.items() if value is not None}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "lightLevel": self.light_level,
            "temperature": self.temperature,
            "humidity": self.humidity,
            "voltage": self.voltage,
            "timestamp": self.timestamp.isoformat().replace("+00:00", "Z"),
        }
