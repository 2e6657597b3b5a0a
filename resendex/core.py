import asyncio
import logging
import math
import threading
import time
from collections import deque
from dataclasses import dataclass
from typing import Callable, Deque, Optional

from .config import DEFAULT_RATE_LIMIT, DEFAULT_RATE_LIMIT_WINDOW, ClientConfig
from .exceptions import RateLimitError
from .models import RateLimiterStats

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Permit:
    """
    Admission granted by :class:`RateLimiter`.

    Attributes:
        granted_at: Clock time of the slot the caller was admitted at
        waited: Seconds the caller had to wait for that slot
    """

    granted_at: float
    waited: float


class RateLimiter:
    """
    Request gate shared by every caller of one client.

    The limiter holds ``max_requests`` tokens. Each admission spends one, and
    a spent token comes back exactly ``time_window`` seconds after it was
    spent, so no half-open interval of ``time_window`` seconds ever contains
    more than ``max_requests`` admissions. The limiter never rejects, it only
    delays.

    Admission is a reservation: under a lock the caller is assigned the
    earliest free slot and that slot is recorded; the lock is released before
    waiting. One instance therefore serves asyncio tasks (:meth:`acquire`)
    and OS threads (:meth:`acquire_blocking`) alike, and callers are admitted
    in arrival order.

    For most use cases, let :class:`~resendex.client.Resend` create and own
    the limiter.
    """

    def __init__(
        self,
        max_requests: int = DEFAULT_RATE_LIMIT,
        time_window: float = DEFAULT_RATE_LIMIT_WINDOW,
        *,
        max_wait: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Args:
            max_requests: Admissions allowed per window (at least 1)
            time_window: Window length in seconds
            max_wait: Longest wait a caller accepts; longer waits raise
                :class:`RateLimitError` instead of queueing
            clock: Monotonic clock in seconds
        """
        if max_requests < 1:
            raise ValueError("max_requests must be at least 1")
        if time_window <= 0:
            raise ValueError("time_window must be positive")
        if max_wait is not None and max_wait < 0:
            raise ValueError("max_wait must not be negative")

        self.max_requests = max_requests
        self.time_window = time_window
        self.max_wait = max_wait
        self._clock = clock
        self._admissions: Deque[float] = deque()
        self._lock = threading.Lock()

        # Statistics
        self.total_requests: int = 0
        self.total_wait_time: float = 0.0
        self.max_wait_time: float = 0.0
        self.rate_limit_hits: int = 0
        self.last_rate_limit_hit: Optional[float] = None

    @classmethod
    def from_config(cls, config: ClientConfig) -> "RateLimiter":
        return cls(config.rate_limit, config.rate_limit_window)

    async def acquire(self) -> Permit:
        """
        Wait for admission without blocking the event loop.

        Raises:
            RateLimitError: If the clock is unusable or the wait exceeds ``max_wait``
        """
        permit = self._reserve()
        if permit.waited > 0:
            await asyncio.sleep(permit.waited)
        return permit

    def acquire_blocking(self) -> Permit:
        """
        Wait for admission, blocking the calling thread.

        Raises:
            RateLimitError: If the clock is unusable or the wait exceeds ``max_wait``
        """
        permit = self._reserve()
        if permit.waited > 0:
            time.sleep(permit.waited)
        return permit

    def reserve(self) -> float:
        """Claim the next slot without waiting for it; returns the delay in seconds."""
        return self._reserve().waited

    def _reserve(self) -> Permit:
        with self._lock:
            now = self._now()
            self._cleanup_old_admissions(now)
            slot = self._next_slot(now)
            wait_time = slot - now

            if self.max_wait is not None and wait_time > self.max_wait:
                raise RateLimitError(
                    f"Rate limiter would wait {wait_time:.2f}s, more than max_wait={self.max_wait}s",
                    retry_after=wait_time,
                )

            self._record_admission(slot, wait_time)

        if wait_time > 0:
            logger.debug(f"Rate limit reached, waiting for {wait_time:.2f} seconds")
        return Permit(granted_at=slot, waited=wait_time)

    def _now(self) -> float:
        try:
            now = float(self._clock())
        except (TypeError, ValueError, OSError) as exc:
            raise RateLimitError("Rate limiter clock is unavailable") from exc
        if not math.isfinite(now):
            raise RateLimitError("Rate limiter clock is unavailable")
        return now

    def _cleanup_old_admissions(self, now: float) -> None:
        """Forget admissions that no longer fall inside the window"""
        window_start = now - self.time_window
        while self._admissions and self._admissions[0] <= window_start:
            self._admissions.popleft()

    def _next_slot(self, now: float) -> float:
        """Earliest time at which one more admission keeps every window within budget"""
        if len(self._admissions) < self.max_requests:
            return now
        return max(now, self._admissions[-self.max_requests] + self.time_window)

    def _record_admission(self, slot: float, wait_time: float) -> None:
        self._admissions.append(slot)
        self.total_requests += 1
        self.total_wait_time += wait_time
        self.max_wait_time = max(self.max_wait_time, wait_time)

    def record_rate_limit_hit(self) -> None:
        """Record that the server rejected a request this limiter had admitted."""
        try:
            now: Optional[float] = self._now()
        except RateLimitError:
            # The hit still counts; only its timestamp is lost
            now = None
        with self._lock:
            self.rate_limit_hits += 1
            if now is not None:
                self.last_rate_limit_hit = now
        logger.info(
            f"Server reported a rate limit hit ({self.rate_limit_hits} so far) "
            f"despite local limit of {self.max_requests} per {self.time_window}s"
        )

    def get_stats(self) -> RateLimiterStats:
        """Get current rate limit statistics"""
        with self._lock:
            now = self._clock()
            window_start = now - self.time_window
            recent_requests = len([t for t in self._admissions if window_start < t <= now])

            stats = {
                "total_requests": self.total_requests,
                "total_wait_time": self.total_wait_time,
                "max_wait_time": self.max_wait_time,
                "current_rate": recent_requests / (self.time_window / 60),  # requests per minute
                "current_queue_size": len(self._admissions),
                "rate_limit_hits": self.rate_limit_hits,
            }

            if self.last_rate_limit_hit is not None:
                stats["last_rate_limit_hit"] = self.last_rate_limit_hit
                stats["time_since_last_rate_limit"] = now - self.last_rate_limit_hit

        return RateLimiterStats(**stats)
