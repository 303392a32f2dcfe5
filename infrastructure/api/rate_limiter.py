"""Rate limiter matching the PUBG API's per-key quota."""
import asyncio
import time
from collections import deque
from typing import Awaitable, Callable, Deque, Optional, Tuple
import logging

logger = logging.getLogger(__name__)

WINDOW_SECONDS = 60.0


class RateLimiter:
    """
    Process-wide pacing gate with two constraints:
      - Spacing : at least ``min_interval`` seconds between two requests
      - Window  : at most ``requests_per_minute`` requests in any trailing 60s

    The PUBG key allows 10 requests / minute; the default quota stays one
    below that. One instance is shared by every outbound call, retries and
    telemetry downloads included.
    """

    def __init__(
        self,
        requests_per_minute: int = 9,
        min_interval: Optional[float] = None,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        if requests_per_minute < 1:
            raise ValueError("requests_per_minute must be at least 1")
        self.requests_per_minute = requests_per_minute
        self.min_interval = (
            min_interval if min_interval is not None else WINDOW_SECONDS / requests_per_minute
        )
        self._base_interval = self.min_interval
        self._clock = clock
        self._sleep = sleep

        self._times: Deque[float] = deque()
        self._last_request_at: Optional[float] = None
        self._lock = asyncio.Lock()

    @property
    def last_request_at(self) -> Optional[float]:
        return self._last_request_at

    async def acquire(self) -> None:
        # asyncio.Lock wakes waiters in FIFO order
        async with self._lock:
            while True:
                now = self._clock()

                if self._last_request_at is not None:
                    gap = self._last_request_at + self.min_interval - now
                    if gap > 0:
                        logger.debug(f"Rate limit: spacing {gap:.2f}s")
                        await self._sleep(gap)
                        continue

                # clean 60-second window
                while self._times and now - self._times[0] >= WINDOW_SECONDS:
                    self._times.popleft()

                if len(self._times) < self.requests_per_minute:
                    self._times.append(now)
                    self._last_request_at = now
                    return

                wait = WINDOW_SECONDS - (now - self._times[0]) + 0.01
                logger.debug(f"Rate limit: window full, waiting {wait:.2f}s")
                await self._sleep(wait)

    def widen_interval(self, seconds: float) -> None:
        """Raise the minimum spacing; never lowers it."""
        if seconds > self.min_interval:
            logger.warning(f"Rate limit: widening request spacing to {seconds:.1f}s")
            self.min_interval = seconds

    def get_status(self) -> Tuple[int, int, float]:
        now = self._clock()
        used = sum(1 for t in self._times if now - t < WINDOW_SECONDS)
        return used, self.requests_per_minute, self.min_interval

    async def reset(self) -> None:
        async with self._lock:
            self._times.clear()
            self._last_request_at = None
            self.min_interval = self._base_interval
