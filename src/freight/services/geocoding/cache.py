"""Time-bounded coordinate cache keyed by normalized postal code."""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Callable

from ...config import settings
from ...models.domain import Coordinates


@dataclass(frozen=True, slots=True)
class CacheEntry:
    coordinates: Coordinates
    resolved_at: float


class CoordinateCache:
    """Postal code -> coordinates with a fixed time-to-live.

    Expired entries read as misses and stay in place until the next
    successful resolution overwrites them.
    """

    def __init__(
        self,
        ttl_seconds: float | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.ttl_seconds = ttl_seconds if ttl_seconds is not None else settings.coordinate_cache_ttl_seconds
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Coordinates | None:
        with self._lock:
            entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() - entry.resolved_at >= self.ttl_seconds:
            return None
        return entry.coordinates

    def set(self, key: str, coordinates: Coordinates) -> None:
        entry = CacheEntry(coordinates=coordinates, resolved_at=self._clock())
        with self._lock:
            self._entries[key] = entry

    def clear(self) -> int:
        with self._lock:
            count = len(self._entries)
            self._entries.clear()
        return count

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
