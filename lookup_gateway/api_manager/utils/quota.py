from __future__ import annotations

import random
import time
from typing import Callable, Optional

from ..base import ClientQuotaRecord, InMemoryQuotaStore, QuotaDecision, QuotaStore
from .logger import get_logger, log_event


DAY_SECONDS = 24 * 60 * 60


class QuotaTracker:
    """Fixed-window daily quota per client key.

    Every call to ``check`` consumes one request. There is no separate
    consume step, so a denied request still counts against the window.

    The read-modify-write on a record is not atomic. Two concurrent checks
    for the same key may both read the same count, letting a client exceed
    the limit by a small margin. The gateway accepts that inaccuracy.
    """

    def __init__(
        self,
        store: Optional[QuotaStore] = None,
        limit: int = 100,
        window_seconds: float = DAY_SECONDS,
        eviction_rate: float = 0.01,
        clock: Callable[[], float] = time.time,
        rand: Callable[[], float] = random.random,
    ) -> None:
        if limit < 0:
            raise ValueError("limit must be >= 0")
        if window_seconds <= 0:
            raise ValueError("window_seconds must be > 0")
        self.store = store if store is not None else InMemoryQuotaStore()
        self.limit = int(limit)
        self.window = float(window_seconds)
        self.eviction_rate = float(eviction_rate)
        self.logger = get_logger("gateway.quota")
        self._clock = clock
        self._rand = rand

    def check(self, client_key: str) -> QuotaDecision:
        """Consume one request for ``client_key`` and report whether it is allowed."""

        now = self._clock()
        record = self.store.get(client_key)

        if record is None or now > record.window_reset_at:
            record = ClientQuotaRecord(
                client_key=client_key,
                count=0,
                window_reset_at=now + self.window,
            )

        record.count += 1
        self.store.put(record)

        if self._rand() < self.eviction_rate:
            self.evict_stale(now)

        allowed = record.count <= self.limit
        remaining = max(0, self.limit - record.count)

        if not allowed:
            log_event(
                self.logger,
                level=30,
                message="Quota exceeded",
                extra={"client": client_key[:12], "count": record.count, "limit": self.limit},
            )

        return QuotaDecision(allowed=allowed, remaining=remaining)

    def usage(self, client_key: str) -> int:
        """Return the count in the client's active window without consuming."""

        record = self.store.get(client_key)
        if record is None or self._clock() > record.window_reset_at:
            return 0
        return record.count

    def evict_stale(self, now: Optional[float] = None) -> int:
        """Drop records whose window expired more than one full window ago."""

        now = self._clock() if now is None else now
        evicted = 0
        for record in self.store.records():
            if record.window_reset_at + self.window < now:
                self.store.delete(record.client_key)
                evicted += 1
        if evicted:
            log_event(self.logger, level=10, message="Evicted stale quota records", extra={"count": evicted})
        return evicted
