"""Response cache: avoids re-running the detector for texts seen recently."""
from __future__ import annotations

import logging
import threading
from collections import OrderedDict
from typing import Any, Dict, Generic, Hashable, Optional, TypeVar

logger = logging.getLogger(__name__)

V = TypeVar("V")


class LRUCache(Generic[V]):
    """Bounded LRU map. No time-based expiry; ``max_size <= 0`` disables storage.

    Reads refresh recency, writes (including overwrites) make the key the most
    recent, and inserting past capacity drops exactly one least-recent entry.
    A lock serialises access so recency order stays intact when callers run in
    worker threads.
    """

    def __init__(self, max_size: int = 5000) -> None:
        self._max_size = max_size
        self._store: OrderedDict[Hashable, V] = OrderedDict()
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0
        self.evictions = 0

    @property
    def max_size(self) -> int:
        return self._max_size

    @property
    def enabled(self) -> bool:
        return self._max_size > 0

    def get(self, key: Hashable) -> Optional[V]:
        with self._lock:
            try:
                value = self._store[key]
            except KeyError:
                self.misses += 1
                return None
            self._store.move_to_end(key)
            self.hits += 1
            return value

    def set(self, key: Hashable, value: V) -> None:
        if self._max_size <= 0:
            return
        with self._lock:
            self._store.pop(key, None)
            self._store[key] = value
            if len(self._store) > self._max_size:
                evicted, _ = self._store.popitem(last=False)
                self.evictions += 1
                logger.debug("LRUCache: evicted %r", _preview(evicted))

    def clear(self) -> None:
        with self._lock:
            self._store.clear()

    def stats(self) -> Dict[str, Any]:
        with self._lock:
            return {
                "size": len(self._store),
                "max_size": self._max_size,
                "hits": self.hits,
                "misses": self.misses,
                "evictions": self.evictions,
            }

    @property
    def size(self) -> int:
        return len(self._store)

    def __len__(self) -> int:
        return len(self._store)

    def __contains__(self, key: object) -> bool:
        # Membership test only; does not refresh recency.
        return key in self._store


def _preview(key: Hashable, limit: int = 40) -> str:
    text = str(key).replace("\x00", "|")
    return text if len(text) <= limit else text[:limit] + "..."
