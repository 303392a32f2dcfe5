from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

import httpx

from domain.exceptions import FailureCategory, RateLimitedError


class RetryAction(Enum):
    RETRY = "retry"
    RAISE = "raise"


@dataclass(frozen=True, slots=True)
class RetryDecision:
    action: RetryAction
    delay: float = 0.0
    category: FailureCategory = FailureCategory.GENERIC

    @property
    def should_retry(self) -> bool:
        return self.action is RetryAction.RETRY


def categorize(error: BaseException) -> Optional[FailureCategory]:
    """Map an attempt failure to its transient category, ``None`` if terminal."""
    if isinstance(error, RateLimitedError):
        return FailureCategory.RATE_LIMIT
    if isinstance(error, httpx.TimeoutException):
        return FailureCategory.TIMEOUT
    if isinstance(error, (httpx.NetworkError, httpx.RemoteProtocolError)):
        return FailureCategory.RESET
    return None


@dataclass(slots=True)
class RetryPolicy:
    """Decides whether a failed attempt is retried and how long to wait first.

    ``attempt`` is zero-based: the first retry after a transient failure waits
    ``backoff_base * backoff_factor ** 0`` seconds, a 429 waits
    ``Retry-After * rate_limit_factor ** 0``.
    """

    max_retries: int = 2
    backoff_base: float = 2.0
    backoff_factor: float = 2.0
    rate_limit_factor: float = 3.0
    rate_limit_fallback: float = 10.0

    @property
    def max_attempts(self) -> int:
        return self.max_retries + 1

    def backoff(self, attempt: int) -> float:
        return self.backoff_base * (self.backoff_factor ** attempt)

    def rate_limit_wait(self, attempt: int, retry_after: Optional[float]) -> float:
        base = retry_after if retry_after is not None and retry_after > 0 else self.rate_limit_fallback
        return base * (self.rate_limit_factor ** attempt)

    def decide(self, error: BaseException, attempt: int) -> RetryDecision:
        category = categorize(error)
        if category is None or attempt >= self.max_retries:
            return RetryDecision(RetryAction.RAISE, category=category or FailureCategory.GENERIC)
        if category is FailureCategory.RATE_LIMIT:
            delay = self.rate_limit_wait(attempt, getattr(error, "retry_after", None))
        else:
            delay = self.backoff(attempt)
        return RetryDecision(RetryAction.RETRY, delay=delay, category=category)
