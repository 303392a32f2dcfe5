"""Usage tracking for outbound PUBG API calls."""
from __future__ import annotations

import time
from collections import Counter, deque
from dataclasses import dataclass
from typing import Any, Callable, Deque, Dict, Optional

from core.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class ApiCall:
    timestamp: float
    endpoint: str
    method: str
    status: Optional[int]
    response_time_ms: float
    error: Optional[str] = None

    @property
    def failed(self) -> bool:
        return self.error is not None or (self.status is not None and self.status >= 400)


class ApiMonitor:
    """Keeps the most recent attempts and summarises them on demand.

    Recording never raises; a monitor problem must not change the outcome of
    the call being recorded.
    """

    def __init__(
        self,
        *,
        max_calls: int = 1000,
        warning_threshold: int = 8,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.warning_threshold = warning_threshold
        self._calls: Deque[ApiCall] = deque(maxlen=max_calls)
        self._error_counts: Counter[str] = Counter()
        self._clock = clock
        self._started_at = clock()

    def record_call(
        self,
        endpoint: str,
        method: str,
        status: Optional[int],
        response_time_ms: float,
        error: Optional[str] = None,
    ) -> None:
        now = self._clock()
        self._calls.append(ApiCall(now, endpoint, method, status, response_time_ms, error))
        if error is not None:
            self._error_counts[error] += 1
        elif status is not None and status >= 400:
            self._error_counts[f"http_{status}"] += 1

        last_minute = self._count_since(now - 60)
        if last_minute >= self.warning_threshold:
            logger.warning(
                lambda: f"rate-limit-warning {last_minute} requests in the last minute",
                endpoint=endpoint,
            )

    def _count_since(self, cutoff: float) -> int:
        return sum(1 for call in self._calls if call.timestamp > cutoff)

    def stats(self) -> Dict[str, Any]:
        now = self._clock()
        recent = [call for call in self._calls if call.timestamp > now - 86400]
        endpoints = Counter(f"{call.method} {call.endpoint}" for call in recent)
        avg = sum(call.response_time_ms for call in recent) / len(recent) if recent else 0.0
        return {
            "total_calls": len(self._calls),
            "calls_24h": len(recent),
            "calls_last_hour": self._count_since(now - 3600),
            "calls_last_minute": self._count_since(now - 60),
            "avg_response_time_ms": round(avg, 1),
            "errors_24h": sum(1 for call in recent if call.failed),
            "error_counts": dict(self._error_counts),
            "top_endpoints": endpoints.most_common(5),
            "uptime_minutes": int((now - self._started_at) // 60),
        }

    def reset(self) -> None:
        self._calls.clear()
        self._error_counts.clear()
