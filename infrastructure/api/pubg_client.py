"""PUBG API client."""
import base64
import logging
from typing import Any, Dict, Optional
import asyncio

import httpx

from config import settings
from domain.enums import Platform
from domain.exceptions import ClientError, PubgAPIError, UpstreamError
from domain.interfaces import ICacheStore
from .http_client import FetchRequest, ResilientFetchClient

logger = logging.getLogger(__name__)

JSON_API = "application/vnd.api+json"


def player_name_key(platform: Platform, name: str) -> str:
    return f"player_name_{platform.value}_{name.lower()}"


def player_id_key(platform: Platform, account_id: str) -> str:
    return f"player_id_{platform.value}_{account_id}"


def match_key(platform: Platform, match_id: str) -> str:
    return f"match_{platform.value}_{match_id}"


def telemetry_key(url: str) -> str:
    return "telemetry_" + base64.urlsafe_b64encode(url.encode("utf-8")).decode("ascii")


def extract_telemetry_url(match_payload: Dict[str, Any]) -> Optional[str]:
    """URL of the first ``asset`` resource in a match document's ``included``."""
    for item in match_payload.get("included") or []:
        if item.get("type") == "asset":
            url = (item.get("attributes") or {}).get("URL")
            if url:
                return url
    return None


class PubgAPIClient:
    """
    Endpoint wrapper: cache check -> fetch -> cache write.

    When an upstream call fails for any reason other than a terminal 4xx, a
    still-valid cached copy is served instead of the error, even when the
    caller asked to bypass the cache read.
    """

    def __init__(
        self,
        fetcher: ResilientFetchClient,
        cache: Optional[ICacheStore] = None,
        *,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        player_ttl: Optional[int] = None,
        match_ttl: Optional[int] = None,
        telemetry_ttl: Optional[int] = None,
        telemetry_timeout: Optional[float] = None,
    ):
        self.fetcher = fetcher
        self.cache = cache
        self.api_key = api_key if api_key is not None else settings.PUBG_API_KEY
        self.base_url = (base_url or settings.PUBG_API_BASE_URL).rstrip("/")
        self.player_ttl = player_ttl if player_ttl is not None else settings.PLAYER_CACHE_TTL
        self.match_ttl = match_ttl if match_ttl is not None else settings.MATCH_CACHE_TTL
        self.telemetry_ttl = telemetry_ttl if telemetry_ttl is not None else settings.TELEMETRY_CACHE_TTL
        self.telemetry_timeout = (
            telemetry_timeout if telemetry_timeout is not None else settings.TELEMETRY_TIMEOUT
        )

    @classmethod
    def from_settings(cls, cache: Optional[ICacheStore] = None) -> "PubgAPIClient":
        """Build the client stack (limiter, retry policy, monitor, file cache) from settings."""
        from infrastructure.cache import FileCacheStore
        from .api_monitor import ApiMonitor
        from .rate_limiter import RateLimiter
        from .retry_policy import RetryPolicy

        limiter = RateLimiter(settings.REQUESTS_PER_MINUTE, settings.min_request_interval())
        policy = RetryPolicy(
            max_retries=settings.MAX_RETRIES,
            backoff_base=settings.RETRY_BACKOFF_BASE,
            backoff_factor=settings.RETRY_BACKOFF,
            rate_limit_factor=settings.RATE_LIMIT_BACKOFF,
            rate_limit_fallback=settings.RATE_LIMIT_FALLBACK_WAIT,
        )
        monitor = ApiMonitor(warning_threshold=max(1, int(settings.REQUESTS_PER_MINUTE * 0.8)))
        fetcher = ResilientFetchClient(
            limiter,
            policy,
            monitor,
            timeout=settings.REQUEST_TIMEOUT,
            low_remaining_threshold=settings.LOW_REMAINING_THRESHOLD,
            low_remaining_interval=settings.LOW_REMAINING_INTERVAL,
        )
        if cache is None and settings.CACHE_ENABLED:
            cache = FileCacheStore(settings.CACHE_DIR)
        return cls(fetcher, cache)

    async def __aenter__(self):
        await self.fetcher.open()
        return self

    async def __aexit__(self, *_):
        await self.fetcher.aclose()

    def _shard_url(self, platform: Platform, path: str) -> str:
        return f"{self.base_url}/shards/{platform.shard}{path}"

    def _auth_headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.api_key}", "Accept": JSON_API}

    async def _cached_fetch(
        self,
        key: str,
        ttl: int,
        request: FetchRequest,
        *,
        bypass_cache: bool = False,
        cancel: Optional[asyncio.Event] = None,
    ) -> Any:
        if self.cache is not None and not bypass_cache:
            cached = await self.cache.get(key)
            if cached is not None:
                logger.debug(f"cache hit {key}")
                return cached

        try:
            response = await self.fetcher.call(request, cancel=cancel)
            payload = self._decode(response, request)
        except ClientError:
            raise
        except PubgAPIError as exc:
            if self.cache is not None:
                cached = await self.cache.get(key)
                if cached is not None:
                    logger.warning(f"{request.label} failed ({exc}); serving cached copy of {key}")
                    return cached
            raise

        if self.cache is not None:
            await self.cache.set(key, payload, ttl)
        return payload

    @staticmethod
    def _decode(response: httpx.Response, request: FetchRequest) -> Any:
        """JSON body of a 2xx response; an unreadable body counts as an upstream failure."""
        try:
            return response.json()
        except ValueError as exc:
            raise UpstreamError(response.status_code, response.text[:200], request.url) from exc

    # ── Player API ─────────────────────────────────────────────────────

    async def get_player_by_name(
        self, platform: Platform, name: str, *, cancel: Optional[asyncio.Event] = None
    ) -> Dict[str, Any]:
        request = FetchRequest(
            url=self._shard_url(platform, "/players"),
            headers=self._auth_headers(),
            params={"filter[playerNames]": name},
            endpoint="players",
        )
        return await self._cached_fetch(
            player_name_key(platform, name), self.player_ttl, request, cancel=cancel
        )

    async def get_player_by_id(
        self, platform: Platform, account_id: str, *, cancel: Optional[asyncio.Event] = None
    ) -> Dict[str, Any]:
        request = FetchRequest(
            url=self._shard_url(platform, f"/players/{account_id}"),
            headers=self._auth_headers(),
            endpoint="players/{id}",
        )
        return await self._cached_fetch(
            player_id_key(platform, account_id), self.player_ttl, request, cancel=cancel
        )

    # ── Match API ──────────────────────────────────────────────────────

    async def get_match(
        self,
        platform: Platform,
        match_id: str,
        *,
        bypass_cache: bool = False,
        cancel: Optional[asyncio.Event] = None,
    ) -> Dict[str, Any]:
        request = FetchRequest(
            url=self._shard_url(platform, f"/matches/{match_id}"),
            headers=self._auth_headers(),
            endpoint="matches/{id}",
        )
        return await self._cached_fetch(
            match_key(platform, match_id), self.match_ttl, request,
            bypass_cache=bypass_cache, cancel=cancel,
        )

    # ── Telemetry ──────────────────────────────────────────────────────

    async def get_telemetry(self, url: str, *, cancel: Optional[asyncio.Event] = None) -> Any:
        # the telemetry CDN rejects the API bearer token
        request = FetchRequest(
            url=url,
            headers={"Accept": "application/json"},
            timeout=self.telemetry_timeout,
            endpoint="telemetry",
        )
        return await self._cached_fetch(telemetry_key(url), self.telemetry_ttl, request, cancel=cancel)
