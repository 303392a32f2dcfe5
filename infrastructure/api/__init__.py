"""Infrastructure API module."""
from .api_monitor import ApiMonitor
from .http_client import FetchRequest, ResilientFetchClient
from .pubg_client import PubgAPIClient, extract_telemetry_url
from .rate_limiter import RateLimiter
from .retry_policy import RetryPolicy

__all__ = [
    'ApiMonitor',
    'FetchRequest',
    'ResilientFetchClient',
    'PubgAPIClient',
    'extract_telemetry_url',
    'RateLimiter',
    'RetryPolicy',
]
