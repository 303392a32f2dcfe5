"""Outbound HTTP with pacing, retry and 429 handling."""
import asyncio
import time
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, Optional
from urllib.parse import urlsplit

import httpx

from core.logging import get_logger
from domain.exceptions import (
    ClientError,
    FailureCategory,
    OperationCancelled,
    RateLimitedError,
    TransportExhausted,
    UpstreamError,
)
from .api_monitor import ApiMonitor
from .rate_limiter import RateLimiter
from .retry_policy import RetryPolicy, categorize

logger = get_logger(__name__)

TERMINAL_CLIENT_STATUSES = frozenset({400, 401, 403, 404})


@dataclass
class FetchRequest:
    url: str
    method: str = "GET"
    headers: Dict[str, str] = field(default_factory=dict)
    params: Optional[Dict[str, Any]] = None
    json: Any = None
    timeout: Optional[float] = None
    # label used by the monitor and logs; defaults to the URL path
    endpoint: Optional[str] = None

    @property
    def label(self) -> str:
        return self.endpoint or urlsplit(self.url).path or self.url


def _retry_after(response: httpx.Response) -> Optional[float]:
    raw = response.headers.get("Retry-After")
    if raw is None:
        return None
    try:
        return max(0.0, float(raw))
    except ValueError:
        return None


def _body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text


class ResilientFetchClient:
    """
    Every attempt goes through the shared ``RateLimiter`` first, retries
    included. Status handling:
      - 2xx                 : returned
      - 400/401/403/404     : ``ClientError``, no retry
      - 429                 : wait Retry-After (or fallback) scaled per attempt
      - other statuses      : ``UpstreamError``, no retry
    Timeouts, resets and protocol errors are retried with exponential backoff;
    when retries run out ``TransportExhausted`` names the failure category.
    """

    def __init__(
        self,
        rate_limiter: RateLimiter,
        retry_policy: Optional[RetryPolicy] = None,
        monitor: Optional[ApiMonitor] = None,
        *,
        timeout: float = 15.0,
        headers: Optional[Dict[str, str]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        low_remaining_threshold: int = 3,
        low_remaining_interval: float = 15.0,
    ):
        self.rate_limiter = rate_limiter
        self.retry_policy = retry_policy or RetryPolicy()
        self.monitor = monitor or ApiMonitor()
        self.timeout = timeout
        self.headers = dict(headers or {})
        self.session: Optional[httpx.AsyncClient] = None
        self.last_status_code: Optional[int] = None
        self._transport = transport
        self._sleep = sleep
        self._low_remaining_threshold = low_remaining_threshold
        self._low_remaining_interval = low_remaining_interval

    async def __aenter__(self):
        await self.open()
        return self

    async def __aexit__(self, *_):
        await self.aclose()

    async def open(self) -> None:
        if self.session is not None:
            return
        http2 = False
        if self._transport is None:
            try:
                import h2  # type: ignore  # noqa: F401
                http2 = True
            except ImportError:
                pass
        self.session = httpx.AsyncClient(
            timeout=self.timeout,
            headers=self.headers,
            http2=http2,
            transport=self._transport,
        )

    async def aclose(self) -> None:
        if self.session:
            await self.session.aclose()
            self.session = None

    async def call(
        self,
        request: FetchRequest,
        *,
        cancel: Optional[asyncio.Event] = None,
    ) -> httpx.Response:
        await self.open()
        policy = self.retry_policy

        for attempt in range(policy.max_attempts):
            self._check_cancel(cancel)
            await self.rate_limiter.acquire()
            self._check_cancel(cancel)

            started = time.perf_counter()
            try:
                response = await self.session.request(
                    request.method,
                    request.url,
                    headers=request.headers or None,
                    params=request.params,
                    json=request.json,
                    timeout=request.timeout if request.timeout is not None else self.timeout,
                )
            except httpx.HTTPError as exc:
                elapsed_ms = self._elapsed_ms(started)
                category = categorize(exc)
                self._record(request, None, elapsed_ms, (category or FailureCategory.GENERIC).value)
                logger.warning(
                    lambda: f"request-failed {type(exc).__name__}: {exc}",
                    endpoint=request.label, attempt=attempt + 1, elapsed_ms=elapsed_ms,
                )
                await self._handle_failure(exc, attempt, request, cancel)
                continue

            elapsed_ms = self._elapsed_ms(started)
            status = response.status_code
            self.last_status_code = status
            self._record(request, status, elapsed_ms, None)
            self._observe_quota(response)

            if 200 <= status < 300:
                logger.debug(
                    lambda: f"{request.method} {request.label} ok",
                    endpoint=request.label, status=status, attempt=attempt + 1, elapsed_ms=elapsed_ms,
                )
                return response

            if status in TERMINAL_CLIENT_STATUSES:
                level = logger.error if status == 401 else logger.debug
                level(lambda: f"HTTP {status} for {request.label}", endpoint=request.label, status=status)
                raise ClientError(status, _body(response), request.url)

            if status == 429:
                retry_after = _retry_after(response)
                if retry_after:
                    self.rate_limiter.widen_interval(retry_after / 2)
                logger.warning(
                    lambda: f"429 rate-limited, retry-after {retry_after}",
                    endpoint=request.label, status=status, attempt=attempt + 1,
                )
                await self._handle_failure(RateLimitedError(retry_after, request.url), attempt, request, cancel)
                continue

            logger.error(lambda: f"HTTP {status} for {request.label}", endpoint=request.label, status=status)
            raise UpstreamError(status, _body(response), request.url)

        # every loop iteration either returns, raises or retries
        raise AssertionError("unreachable")

    async def _handle_failure(
        self,
        error: BaseException,
        attempt: int,
        request: FetchRequest,
        cancel: Optional[asyncio.Event],
    ) -> None:
        decision = self.retry_policy.decide(error, attempt)
        if decision.should_retry:
            logger.info(
                lambda: f"retrying in {decision.delay:.1f}s ({decision.category.value})",
                endpoint=request.label, attempt=attempt + 1,
            )
            await self._pause(decision.delay, cancel)
            return
        if categorize(error) is None:
            raise error
        logger.error(
            lambda: f"retries exhausted ({decision.category.value})",
            endpoint=request.label, attempt=attempt + 1,
        )
        raise TransportExhausted(decision.category, attempt + 1, error, request.url) from error

    async def _pause(self, delay: float, cancel: Optional[asyncio.Event]) -> None:
        if cancel is None:
            await self._sleep(delay)
            return
        sleeper = asyncio.ensure_future(self._sleep(delay))
        waiter = asyncio.ensure_future(cancel.wait())
        try:
            await asyncio.wait({sleeper, waiter}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            for task in (sleeper, waiter):
                if not task.done():
                    task.cancel()
        self._check_cancel(cancel)

    @staticmethod
    def _check_cancel(cancel: Optional[asyncio.Event]) -> None:
        if cancel is not None and cancel.is_set():
            raise OperationCancelled("request cancelled")

    def _observe_quota(self, response: httpx.Response) -> None:
        remaining = response.headers.get("X-Ratelimit-Remaining")
        if remaining is None:
            return
        try:
            left = int(remaining)
        except ValueError:
            return
        if left < self._low_remaining_threshold:
            self.rate_limiter.widen_interval(self._low_remaining_interval)

    def _record(self, request: FetchRequest, status: Optional[int], elapsed_ms: float, error: Optional[str]) -> None:
        try:
            self.monitor.record_call(request.label, request.method, status, elapsed_ms, error)
        except Exception as exc:  # monitoring never changes the call outcome
            logger.debug(lambda: f"monitor-failed {exc}")

    @staticmethod
    def _elapsed_ms(started: float) -> float:
        return round((time.perf_counter() - started) * 1000.0, 2)
