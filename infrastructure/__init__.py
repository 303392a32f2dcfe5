"""Infrastructure layer - API clients, cache stores and repositories."""
from .api import ApiMonitor, FetchRequest, PubgAPIClient, RateLimiter, ResilientFetchClient, RetryPolicy
from .cache import FileCacheStore, MemoryCacheStore
from .repositories import MatchRepository, PlayerRepository

__all__ = [
    'ApiMonitor',
    'FetchRequest',
    'PubgAPIClient',
    'RateLimiter',
    'ResilientFetchClient',
    'RetryPolicy',
    'FileCacheStore',
    'MemoryCacheStore',
    'MatchRepository',
    'PlayerRepository',
]
