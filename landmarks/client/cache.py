"""In-memory TTL cache for landmark details.

Details are re-fetched after the TTL (5 minutes by default); the cache is
bounded so a long browsing session does not grow it without limit.
"""

import time
from collections import OrderedDict
from typing import Callable, Generic, Hashable, Optional, Tuple, TypeVar

V = TypeVar("V")


class TTLCache(Generic[V]):
    def __init__(self, ttl_seconds: float = 300, max_size: int = 256, clock: Callable[[], float] = time.monotonic):
        self._cache: "OrderedDict[Hashable, Tuple[float, V]]" = OrderedDict()
        self._ttl = ttl_seconds
        self._max_size = max_size
        self._clock = clock

    def __len__(self) -> int:
        return len(self._cache)

    def get(self, key: Hashable) -> Optional[V]:
        if key not in self._cache:
            return None
        stored_at, value = self._cache[key]
        if self._clock() - stored_at >= self._ttl:
            del self._cache[key]
            return None
        self._cache.move_to_end(key)
        return value

    def set(self, key: Hashable, value: V) -> None:
        if key in self._cache:
            self._cache.move_to_end(key)
        self._cache[key] = (self._clock(), value)
        if len(self._cache) > self._max_size:
            self._cache.popitem(last=False)

    def clear(self) -> None:
        self._cache.clear()
