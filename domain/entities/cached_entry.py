"""Cache entry entity."""
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class CachedEntry:
    """A cached upstream payload with its expiry.

    Timestamps are epoch seconds. The on-disk form uses epoch milliseconds
    under the keys ``data``, ``timestamp`` and ``expires``.
    """

    key: str
    payload: Any
    stored_at: float
    expires_at: float

    @classmethod
    def create(cls, key: str, payload: Any, ttl_seconds: float, now: float) -> "CachedEntry":
        return cls(key=key, payload=payload, stored_at=now, expires_at=now + ttl_seconds)

    def is_expired(self, now: float) -> bool:
        return self.expires_at < now

    def to_json(self) -> dict:
        return {
            'data': self.payload,
            'timestamp': int(self.stored_at * 1000),
            'expires': int(self.expires_at * 1000),
        }

    @classmethod
    def from_json(cls, key: str, raw: dict) -> "CachedEntry":
        return cls(
            key=key,
            payload=raw['data'],
            stored_at=raw.get('timestamp', 0) / 1000.0,
            expires_at=raw['expires'] / 1000.0,
        )
