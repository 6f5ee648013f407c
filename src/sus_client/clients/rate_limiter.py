"""Token bucket admission control for outbound requests.

The bucket holds up to ``burst_size`` tokens and refills continuously at
``requests_per_second``. Each request consumes one token; when the bucket is
empty the caller sleeps until a token accrues. Token accounting happens under
a lock, the sleep happens outside it. There is no fairness guarantee between
waiting threads; only overall throughput is bounded.
"""

from __future__ import annotations

import threading
import time
from typing import Callable

from loguru import logger


class RateLimiter:
    """Thread-safe token bucket shared by every call of one client."""

    def __init__(
        self,
        requests_per_second: float,
        burst_size: int,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if requests_per_second <= 0:
            raise ValueError("requests_per_second must be positive")
        if burst_size < 1:
            raise ValueError("burst_size must be at least 1")
        self.rate = float(requests_per_second)
        self.capacity = float(burst_size)
        self._clock = clock
        self._sleep = sleep
        self._lock = threading.Lock()
        self._tokens = self.capacity
        self._last_refill = clock()

    def _refill(self) -> None:
        now = self._clock()
        elapsed = max(0.0, now - self._last_refill)
        self._tokens = min(self.capacity, self._tokens + elapsed * self.rate)
        self._last_refill = now

    @property
    def available_tokens(self) -> float:
        with self._lock:
            self._refill()
            return self._tokens

    def try_acquire(self) -> bool:
        """Consume a token if one is available, without waiting."""

        with self._lock:
            self._refill()
            if self._tokens >= 1:
                self._tokens -= 1
                return True
            return False

    def block_till_rate_limit_reset(self) -> float:
        """Wait for admission and consume one token. Returns seconds spent waiting."""

        waited = 0.0
        while True:
            with self._lock:
                self._refill()
                if self._tokens >= 1:
                    self._tokens -= 1
                    if waited:
                        logger.debug("Rate limit admission granted", waited=round(waited, 3))
                    return waited
                wait_time = (1 - self._tokens) / self.rate
            logger.debug("Rate limit reached, waiting", wait_seconds=round(wait_time, 3))
            self._sleep(wait_time)
            waited += wait_time
