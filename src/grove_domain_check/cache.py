"""
In-memory TTL cache

Memoizes verification results so repeated and bulk queries don't burn
through DoH/RDAP rate limits. Entries expire lazily: nothing sweeps the
cache, an expired entry is dropped the next time someone reads it.
"""

import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable, Generic, Optional, TypeVar

T = TypeVar("T")


@dataclass
class CacheEntry(Generic[T]):
    """A cached value and the clock reading after which it is stale."""
    data: T
    expires_at: float


class TTLCache(Generic[T]):
    """
    Key -> value store with per-entry expiry.

    Safe to share between coroutines and threads. With ``max_entries`` set,
    inserting past the cap evicts the least recently used entry; without it
    the cache is unbounded.
    """

    def __init__(
        self,
        max_entries: Optional[int] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        if max_entries is not None and max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self.max_entries = max_entries
        self._clock = clock
        self._entries: "OrderedDict[str, CacheEntry[T]]" = OrderedDict()
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[T]:
        """Return the value for key, or None if missing or expired."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if self._clock() > entry.expires_at:
                del self._entries[key]
                return None
            self._entries.move_to_end(key)
            return entry.data

    def set(self, key: str, value: T, ttl: float) -> None:
        """Store value under key for ttl seconds, replacing any existing entry."""
        with self._lock:
            self._entries[key] = CacheEntry(data=value, expires_at=self._clock() + ttl)
            self._entries.move_to_end(key)
            if self.max_entries is not None:
                while len(self._entries) > self.max_entries:
                    self._entries.popitem(last=False)

    def delete(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None

    def __len__(self) -> int:
        # Counts expired entries that haven't been read yet
        return len(self._entries)
