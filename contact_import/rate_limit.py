"""Pacing for store upserts: a minimum interval between calls plus a fixed pause after each."""
from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

from .models import BatchOutcome, ContactRecord

LOGGER = logging.getLogger(__name__)

Sleep = Callable[[float], None]


@dataclass
class DelayPolicy:
    """Fixed pause taken after every batch the store accepts."""

    delay_seconds: float = 0.0

    def pause(self, sleep: Sleep) -> None:
        if self.delay_seconds > 0:
            sleep(self.delay_seconds)


class RateLimiter:
    """Spaces calls at least ``60 / calls_per_minute`` seconds apart."""

    def __init__(
        self,
        calls_per_minute: Optional[float],
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Sleep = time.sleep,
    ) -> None:
        self._interval = 60.0 / float(calls_per_minute) if calls_per_minute else 0.0
        self._clock = clock
        self._sleep = sleep
        self._lock = threading.Lock()
        self._next_available = 0.0

    @property
    def interval(self) -> float:
        return self._interval

    def acquire(self) -> None:
        if self._interval <= 0:
            return
        with self._lock:
            now = self._clock()
            wait = self._next_available - now
            if wait > 0:
                LOGGER.debug("Rate limit reached; waiting %.2fs before the next batch", wait)
                self._sleep(wait)
                now = self._clock()
            self._next_available = now + self._interval


class RateLimitedContactStore:
    """Contact store wrapper that paces ``upsert_contacts`` calls.

    ``sleep`` is used for the delay pause and, unless a ``rate_limiter`` is
    given, for the limiter's waits as well.
    """

    def __init__(
        self,
        store,
        *,
        display_name: Optional[str] = None,
        delay_policy: Optional[DelayPolicy] = None,
        rate_limiter: Optional[RateLimiter] = None,
        sleep: Sleep = time.sleep,
    ) -> None:
        self._store = store
        self._display_name = display_name
        self._delay_policy = delay_policy or DelayPolicy()
        self._rate_limiter = rate_limiter or RateLimiter(None, sleep=sleep)
        self._sleep = sleep

    @property
    def name(self) -> str:
        return self._display_name or getattr(self._store, "name", type(self._store).__name__)

    @property
    def wrapped(self):
        return self._store

    def upsert_contacts(
        self,
        store_id: str,
        admin_user_id: str,
        contacts: Sequence[ContactRecord],
    ) -> BatchOutcome:
        self._rate_limiter.acquire()
        outcome = self._store.upsert_contacts(store_id, admin_user_id, contacts)
        self._delay_policy.pause(self._sleep)
        return outcome

    def __getattr__(self, item):  # pragma: no cover - simple delegation
        return getattr(self._store, item)
