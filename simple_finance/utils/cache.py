# simple_finance/utils/cache.py
"""
Thread-safe in-memory cache with per-entry expiry.

Used by the exchange rate provider to reuse fetched rates (1 hour for the
current rate, 24 hours for historical ones). Entries are evicted when they
expire or, once `maxsize` is reached, oldest-inserted first.
"""

import threading
import time
from collections import OrderedDict
from typing import Any, Callable, Hashable


class TTLCache:
    """
    Bounded cache whose entries expire after a fixed number of seconds.

    Example:
        cache = TTLCache(ttl_seconds=3600)
        cache.set("current", rate)
        cache.get("current")  # rate, or None after an hour
    """

    def __init__(
            self,
            ttl_seconds: float,
            maxsize: int = 1024,
            clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """
        Args:
            ttl_seconds: Lifetime of each entry (0 disables caching)
            maxsize: Maximum number of entries kept
            clock: Time source in seconds (overridable in tests)
        """
        self._ttl = ttl_seconds
        self._maxsize = maxsize
        self._clock = clock
        self._entries: OrderedDict[Hashable, tuple[float, Any]] = OrderedDict()
        self._lock = threading.Lock()

    def get(self, key: Hashable) -> Any | None:
        """Return the cached value, or None if absent or expired."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            expires_at, value = entry
            if self._clock() >= expires_at:
                del self._entries[key]
                return None
            return value

    def set(self, key: Hashable, value: Any) -> None:
        """Store a value, evicting the oldest entry when full."""
        if self._ttl <= 0:
            return
        with self._lock:
            if key in self._entries:
                del self._entries[key]
            elif len(self._entries) >= self._maxsize:
                self._entries.popitem(last=False)
            self._entries[key] = (self._clock() + self._ttl, value)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
