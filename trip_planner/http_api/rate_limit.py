from __future__ import annotations

import math
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict


class RateLimitExceeded(Exception):
    def __init__(self, retry_after_s: int) -> None:
        super().__init__("Route optimization rate limit exceeded. Please retry shortly.")
        self.retry_after_s = retry_after_s


@dataclass
class _Bucket:
    count: int
    reset_at: float


class FixedWindowRateLimiter:
    """Per-client request counter over fixed windows, kept in process memory."""

    def __init__(
        self,
        max_requests: int = 20,
        window_s: float = 60.0,
        *,
        clock: Callable[[], float] = time.monotonic,
        cleanup_threshold: int = 2000,
    ) -> None:
        self.max_requests = max_requests
        self.window_s = window_s
        self._clock = clock
        self._cleanup_threshold = cleanup_threshold
        self._buckets: Dict[str, _Bucket] = {}
        self._lock = threading.Lock()

    def hit(self, client_key: str) -> None:
        """Count one request for ``client_key``; raise once the window is exhausted."""
        now = self._clock()
        with self._lock:
            self._cleanup(now)
            bucket = self._buckets.get(client_key)
            if bucket is None or bucket.reset_at <= now:
                self._buckets[client_key] = _Bucket(count=1, reset_at=now + self.window_s)
                return

            bucket.count += 1
            if bucket.count > self.max_requests:
                raise RateLimitExceeded(max(1, math.ceil(bucket.reset_at - now)))

    def _cleanup(self, now: float) -> None:
        if len(self._buckets) < self._cleanup_threshold:
            return
        expired = [key for key, bucket in self._buckets.items() if bucket.reset_at <= now]
        for key in expired:
            del self._buckets[key]
