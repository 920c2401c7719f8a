from __future__ import annotations

from collections import deque
from functools import lru_cache
from threading import Lock
from typing import Deque, Optional

from models.records import Reading
from settings import get_settings

MAX_CAPACITY = 100


class ReadingHistory:
    """Newest-first, fixed-capacity buffer of readings.

    Inserts evict the oldest entry once ``capacity`` is exceeded. Reads never
    reorder or evict anything.
    """

    def __init__(self, capacity: int = MAX_CAPACITY) -> None:
        if capacity <= 0:
            raise ValueError("History capacity must be positive.")
        self._capacity = capacity
        self._items: Deque[Reading] = deque()
        self._lock = Lock()

    @property
    def capacity(self) -> int:
        return self._capacity

    def insert(self, reading: Reading) -> None:
        with self._lock:
            self._items.appendleft(reading)
            while len(self._items) > self._capacity:
                self._items.pop()

    def list_all(self) -> list[Reading]:
        with self._lock:
            return list(self._items)

    def latest(self) -> Optional[Reading]:
        with self._lock:
            return self._items[0] if self._items else None

    def window(self, size: int) -> list[Reading]:
        if size <= 0:
            return []
        with self._lock:
            return list(self._items)[:size]

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)


@lru_cache
def build_default_history(capacity: Optional[int] = None) -> ReadingHistory:
    settings = get_settings()
    size = settings.history_capacity if capacity is None else capacity
    return ReadingHistory(capacity=size)
