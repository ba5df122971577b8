"""In-memory cache of analysis results.

Entries are keyed by a cheap content fingerprint of the dataset and expire
after a fixed TTL. The cache is an ordinary object: callers own it and pass
it where it is needed.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from dataclasses import dataclass

from pydantic import BaseModel

from kowalski.analysis.statistics.models import AnalysisResult
from kowalski.core.logging import get_logger
from kowalski.core.models.dataset import DataSet

logger = get_logger(__name__)

DEFAULT_TTL_SECONDS = 300.0


def _cells(row: list | None) -> str:
    if not row:
        return ""
    return ",".join("" if v is None else str(v) for v in row[:3])


def generate_fingerprint(dataset: DataSet) -> str:
    """Name, columns, row count and the first three cells of the first and last rows."""
    rows = dataset.rows
    parts = [
        dataset.name,
        ",".join(dataset.columns),
        str(len(rows)),
        _cells(rows[0] if rows else None),
        _cells(rows[-1] if rows else None),
    ]
    return "|".join(parts)


@dataclass
class _Entry:
    stored_at: float
    result: AnalysisResult


class CacheEntryInfo(BaseModel):
    fingerprint: str
    age_seconds: float


class CacheStats(BaseModel):
    size: int
    entries: list[CacheEntryInfo]


class AnalysisCache:
    """Fingerprint-keyed AnalysisResult cache with TTL expiry.

    Entries only leave through expiry or ``clear``. Safe to share between
    threads.
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[str, _Entry] = {}
        self._lock = threading.Lock()

    def get(self, dataset: DataSet) -> AnalysisResult | None:
        """Cached result for this dataset, or None if absent or expired."""
        key = generate_fingerprint(dataset)
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if self._clock() - entry.stored_at > self.ttl_seconds:
                del self._entries[key]
                logger.debug("cache_expired", dataset=dataset.name)
                return None
            return entry.result

    def set(self, dataset: DataSet, result: AnalysisResult) -> None:
        key = generate_fingerprint(dataset)
        with self._lock:
            self._entries[key] = _Entry(stored_at=self._clock(), result=result)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def stats(self) -> CacheStats:
        now = self._clock()
        with self._lock:
            entries = [
                CacheEntryInfo(fingerprint=key, age_seconds=now - entry.stored_at)
                for key, entry in self._entries.items()
            ]
        return CacheStats(size=len(entries), entries=entries)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
