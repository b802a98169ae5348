"""
ResponseCache — explicit cache for REST responses, keyed by (kind, id).

Eviction policy is chosen by the owner: ``ttl`` expires entries after a
number of seconds, ``max_entries`` evicts the least recently used entry.
Both None keeps entries for the lifetime of the cache.
"""

import collections
import threading
import time
from typing import Any, Callable, Optional


class ResponseCache:
    def __init__(
        self,
        ttl: Optional[float] = None,
        max_entries: Optional[int] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._ttl = ttl
        self._max_entries = max_entries
        self._clock = clock
        self._entries: collections.OrderedDict[tuple[str, str], tuple[float, Any]] = collections.OrderedDict()
        self._lock = threading.Lock()

    def get(self, kind: str, key: str) -> Optional[Any]:
        with self._lock:
            entry = self._entries.get((kind, key))
            if entry is None:
                return None
            stored_at, value = entry
            if self._ttl is not None and self._clock() - stored_at >= self._ttl:
                del self._entries[(kind, key)]
                return None
            self._entries.move_to_end((kind, key))
            return value

    def set(self, kind: str, key: str, value: Any) -> None:
        with self._lock:
            self._entries[(kind, key)] = (self._clock(), value)
            self._entries.move_to_end((kind, key))
            if self._max_entries is not None:
                while len(self._entries) > self._max_entries:
                    self._entries.popitem(last=False)

    def invalidate(self, kind: str, key: str) -> None:
        with self._lock:
            self._entries.pop((kind, key), None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
