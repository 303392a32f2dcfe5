"""Shared fixtures wired on top of a fake clock and a fake PUBG upstream."""
from __future__ import annotations

import pytest

from factories import BASE_URL, FakeClock, FakeUpstream
from infrastructure.api import ApiMonitor, PubgAPIClient, RateLimiter, ResilientFetchClient, RetryPolicy
from infrastructure.cache import MemoryCacheStore
from infrastructure.repositories import MatchRepository, PlayerRepository


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def upstream() -> FakeUpstream:
    return FakeUpstream()


@pytest.fixture
def limiter(clock: FakeClock) -> RateLimiter:
    return RateLimiter(600, min_interval=0.0, clock=clock, sleep=clock.sleep)


@pytest.fixture
def monitor() -> ApiMonitor:
    return ApiMonitor()


@pytest.fixture
def fetcher(limiter: RateLimiter, upstream: FakeUpstream, clock: FakeClock, monitor: ApiMonitor) -> ResilientFetchClient:
    return ResilientFetchClient(
        limiter,
        RetryPolicy(max_retries=2, backoff_base=1.0),
        monitor,
        transport=upstream.transport,
        sleep=clock.sleep,
    )


@pytest.fixture
def cache() -> MemoryCacheStore:
    return MemoryCacheStore()


@pytest.fixture
def api_client(fetcher: ResilientFetchClient, cache: MemoryCacheStore) -> PubgAPIClient:
    return PubgAPIClient(fetcher, cache, api_key="test-key", base_url=BASE_URL)


@pytest.fixture
def match_repo(api_client: PubgAPIClient) -> MatchRepository:
    return MatchRepository(api_client)


@pytest.fixture
def player_repo(api_client: PubgAPIClient) -> PlayerRepository:
    return PlayerRepository(api_client)


