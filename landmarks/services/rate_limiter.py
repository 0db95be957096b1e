import math
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Optional

import structlog

from landmarks.core.config import settings
from landmarks.core.exceptions import RateLimitError

logger = structlog.get_logger(__name__)


@dataclass
class RateLimitEntry:
    client_key: str
    count: int
    window_reset_at: float  # epoch seconds


class RateLimiter:
    """
    In-memory fixed-window limiter keyed by client identifier.

    Best-effort only: counters live in process memory and are lost on restart.
    The store is bounded; expired entries are swept periodically and the
    least recently seen client is evicted once max_clients is reached.
    """

    def __init__(
        self,
        max_requests: int = settings.RATE_LIMIT_MAX_REQUESTS,
        window_seconds: float = settings.RATE_LIMIT_WINDOW_SECONDS,
        max_clients: int = settings.RATE_LIMIT_MAX_CLIENTS,
        sweep_interval: float = settings.RATE_LIMIT_SWEEP_SECONDS,
    ):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.max_clients = max_clients
        self.sweep_interval = sweep_interval
        self._entries: "OrderedDict[str, RateLimitEntry]" = OrderedDict()
        self._lock = threading.Lock()
        self._next_sweep_at = 0.0

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, client_key: str) -> Optional[RateLimitEntry]:
        return self._entries.get(client_key)

    def hit(self, client_key: str, now: Optional[float] = None) -> RateLimitEntry:
        """
        Count one request for client_key.

        Returns the updated entry when admitted.

        Raises:
            RateLimitError: when the client already used its quota in the current window.
        """
        now = time.time() if now is None else now
        with self._lock:
            self._maybe_sweep(now)

            entry = self._entries.get(client_key)
            if entry is None or now >= entry.window_reset_at:
                entry = RateLimitEntry(
                    client_key=client_key,
                    count=1,
                    window_reset_at=now + self.window_seconds,
                )
                self._entries[client_key] = entry
                self._entries.move_to_end(client_key)
                self._evict_overflow()
                return entry

            self._entries.move_to_end(client_key)
            if entry.count < self.max_requests:
                entry.count += 1
                return entry

            retry_after = max(1, math.ceil(entry.window_reset_at - now))
        logger.warning("rate_limited", client_key=client_key, retry_after=retry_after)
        raise RateLimitError(retry_after=retry_after)

    def remaining(self, entry: RateLimitEntry) -> int:
        return max(0, self.max_requests - entry.count)

    def sweep(self, now: Optional[float] = None) -> int:
        """Drop every entry whose window has expired. Returns the number removed."""
        now = time.time() if now is None else now
        with self._lock:
            return self._sweep(now)

    def _maybe_sweep(self, now: float) -> None:
        if now >= self._next_sweep_at:
            self._sweep(now)

    def _sweep(self, now: float) -> int:
        expired = [key for key, entry in self._entries.items() if now >= entry.window_reset_at]
        for key in expired:
            del self._entries[key]
        self._next_sweep_at = now + self.sweep_interval
        if expired:
            logger.debug("rate_limit_sweep", removed=len(expired), tracked=len(self._entries))
        return len(expired)

    def _evict_overflow(self) -> None:
        while len(self._entries) > self.max_clients:
            key, _ = self._entries.popitem(last=False)
            logger.debug("rate_limit_evicted", client_key=key)
