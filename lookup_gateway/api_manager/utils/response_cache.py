from __future__ import annotations

import copy
import threading
import time
from typing import Any, Callable, Dict, Optional, Tuple


class ResponseCache:
    """Short-lived in-memory cache of successful upstream JSON bodies.

    Keyed by request URL. Entries expire after ``ttl_seconds``; expired
    entries are dropped lazily on read and when the cache is full.
    Lookups run on worker threads, so every access holds the lock.
    """

    def __init__(
        self,
        ttl_seconds: float = 300,
        max_entries: int = 1024,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.ttl = float(ttl_seconds)
        self.max_entries = int(max_entries)
        self._clock = clock
        self._entries: Dict[str, Tuple[float, Any]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            expires_at, value = entry
            if self._clock() >= expires_at:
                self._entries.pop(key, None)
                return None
        return copy.deepcopy(value)

    def set(self, key: str, value: Any) -> None:
        if self.ttl <= 0:
            return
        value = copy.deepcopy(value)
        with self._lock:
            now = self._clock()
            if len(self._entries) >= self.max_entries:
                self._purge(now)
                if len(self._entries) >= self.max_entries:
                    oldest = min(self._entries, key=lambda k: self._entries[k][0])
                    self._entries.pop(oldest, None)
            self._entries[key] = (now + self.ttl, value)

    def _purge(self, now: float) -> None:
        # caller holds the lock
        for key in [k for k, (exp, _) in self._entries.items() if now >= exp]:
            self._entries.pop(key, None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
