import time
from dataclasses import dataclass
from typing import Callable

from .models import RiskSummary


@dataclass(frozen=True)
class CacheEntry:
    summary: RiskSummary
    computed_at: float


class RiskSummaryCache:
    """
    Single in-process slot for the last computed summary.

    The clock is injectable so tests can move time without sleeping. Nothing
    is persisted; a restart starts cold.
    """

    def __init__(self, ttl_seconds: float, clock: Callable[[], float] = time.time) -> None:
        self.ttl_seconds = max(float(ttl_seconds), 0.0)
        self._clock = clock
        self._entry: CacheEntry | None = None

    def now(self) -> float:
        return self._clock()

    def get(self) -> CacheEntry | None:
        return self._entry

    def set(self, summary: RiskSummary, computed_at: float | None = None) -> CacheEntry:
        entry = CacheEntry(
            summary=summary,
            computed_at=self.now() if computed_at is None else computed_at,
        )
        self._entry = entry
        return entry

    def clear(self) -> None:
        self._entry = None

    def is_fresh(self, entry: CacheEntry, now: float | None = None) -> bool:
        now = self.now() if now is None else now
        return now - entry.computed_at < self.ttl_seconds

    def remaining_seconds(self, entry: CacheEntry, now: float | None = None) -> int:
        now = self.now() if now is None else now
        return max(int(self.ttl_seconds - (now - entry.computed_at)), 0)
