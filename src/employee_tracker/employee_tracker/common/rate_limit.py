from __future__ import annotations

import math
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict


@dataclass
class _Window:
    count: int
    started_at: float


@dataclass(frozen=True)
class RateDecision:
    allowed: bool
    retry_after_seconds: int = 0

    @property
    def retry_after_minutes(self) -> int:
        return max(1, math.ceil(self.retry_after_seconds / 60))


class AttemptLimiter:
    """Fixed-window attempt counter keyed by client address.

    Process-local: state lives in a dict and is lost on restart. Expired
    windows are dropped on access, and ``hit()`` sweeps the whole map once
    per window, so it only holds addresses seen in the last two windows.
    ``cleanup()`` runs the same sweep on demand.
    """

    def __init__(self, *, max_attempts: int, window_seconds: float, clock: Callable[[], float] = time.monotonic):
        self._max = int(max_attempts)
        self._window = float(window_seconds)
        self._clock = clock
        self._entries: Dict[str, _Window] = {}
        self._lock = threading.Lock()
        self._last_sweep = clock()

    def _live(self, key: str, now: float) -> _Window | None:
        entry = self._entries.get(key)
        if entry and now - entry.started_at >= self._window:
            del self._entries[key]
            return None
        return entry

    def check(self, key: str) -> RateDecision:
        now = self._clock()
        with self._lock:
            entry = self._live(key, now)
            if entry is None or entry.count < self._max:
                return RateDecision(True)
            return RateDecision(False, int(math.ceil(self._window - (now - entry.started_at))))

    def hit(self, key: str) -> RateDecision:
        """Count one attempt and report whether it was within budget."""

        now = self._clock()
        with self._lock:
            if now - self._last_sweep >= self._window:
                self._sweep(now)
            entry = self._live(key, now)
            if entry is None:
                self._entries[key] = _Window(count=1, started_at=now)
                return RateDecision(True)
            entry.count += 1
            if entry.count <= self._max:
                return RateDecision(True)
            return RateDecision(False, int(math.ceil(self._window - (now - entry.started_at))))

    def reset(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def _sweep(self, now: float) -> int:
        expired = [k for k, e in self._entries.items() if now - e.started_at >= self._window]
        for k in expired:
            del self._entries[k]
        self._last_sweep = now
        return len(expired)

    def cleanup(self) -> int:
        now = self._clock()
        with self._lock:
            return self._sweep(now)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
