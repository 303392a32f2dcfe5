"""Error taxonomy for the PUBG integration layer."""
from __future__ import annotations

from enum import Enum
from typing import Any, Optional


class FailureCategory(Enum):
    """Why an upstream call ultimately failed."""

    RESET = "reset"
    TIMEOUT = "timeout"
    RATE_LIMIT = "rate_limit"
    GENERIC = "generic"


class PubgAPIError(Exception):
    """Base error for upstream PUBG API failures."""

    @property
    def user_message(self) -> str:
        return str(self) or "The PUBG API request failed."


class ClientError(PubgAPIError):
    """Terminal 4xx response (400/401/403/404); never retried."""

    def __init__(self, status_code: int, body: Any = None, url: str = "") -> None:
        super().__init__(f"HTTP {status_code} from {url or 'PUBG API'}")
        self.status_code = status_code
        self.body = body
        self.url = url

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404

    @property
    def user_message(self) -> str:
        if self.status_code == 401:
            return "The PUBG API rejected the API key. Check PUBG_API_KEY and re-authenticate."
        if self.status_code == 403:
            return "The PUBG API key is not allowed to access this resource."
        if self.status_code == 404:
            return "Not found on the PUBG API."
        return f"The PUBG API rejected the request (HTTP {self.status_code})."


class RateLimitedError(PubgAPIError):
    """HTTP 429 for a single attempt; retried by the fetch client."""

    def __init__(self, retry_after: Optional[float] = None, url: str = "") -> None:
        super().__init__(f"HTTP 429 from {url or 'PUBG API'}")
        self.status_code = 429
        self.retry_after = retry_after
        self.url = url


class UpstreamError(PubgAPIError):
    """Unexpected HTTP status; raised without retry."""

    def __init__(self, status_code: int, body: Any = None, url: str = "") -> None:
        super().__init__(f"Unexpected HTTP {status_code} from {url or 'PUBG API'}")
        self.status_code = status_code
        self.body = body
        self.url = url

    @property
    def user_message(self) -> str:
        return f"The PUBG API returned an unexpected error (HTTP {self.status_code}). Try again later."


_EXHAUSTED_MESSAGES = {
    FailureCategory.RESET: "Connection reset by the PUBG API after {attempts} attempts. Please try again in a few moments.",
    FailureCategory.TIMEOUT: "The PUBG API timed out after {attempts} attempts. The service might be overloaded.",
    FailureCategory.RATE_LIMIT: "The PUBG API rate limit is still exceeded after {attempts} attempts. Wait a minute before retrying.",
    FailureCategory.GENERIC: "The PUBG API request failed after {attempts} attempts.",
}


class TransportExhausted(PubgAPIError):
    """All retry attempts were spent on transient failures."""

    def __init__(
        self,
        category: FailureCategory,
        attempts: int,
        last_error: Optional[BaseException] = None,
        url: str = "",
    ) -> None:
        super().__init__(_EXHAUSTED_MESSAGES[category].format(attempts=attempts))
        self.category = category
        self.attempts = attempts
        self.last_error = last_error
        self.url = url

    @property
    def user_message(self) -> str:
        return str(self)


class OperationCancelled(PubgAPIError):
    """The caller's cancel signal fired while a request was pending."""

    @property
    def user_message(self) -> str:
        return "The request was cancelled."


class TelemetryNotFound(PubgAPIError):
    """A match carries no telemetry asset."""

    def __init__(self, match_id: str) -> None:
        super().__init__(f"Telemetry URL not found for match {match_id}")
        self.match_id = match_id
