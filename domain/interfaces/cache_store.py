"""Cache store interface."""
from abc import ABC, abstractmethod
from typing import Any, Optional


class ICacheStore(ABC):
    """Best-effort key/value store with per-entry expiry.

    Implementations never raise on I/O failure: a failed read is a miss and a
    failed write is a no-op.
    """

    @abstractmethod
    async def get(self, key: str) -> Optional[Any]:
        """Return the payload, or ``None`` when missing, unreadable or expired."""
        pass

    @abstractmethod
    async def set(self, key: str, payload: Any, ttl_seconds: float) -> None:
        """Store ``payload`` for ``ttl_seconds``, replacing any existing entry."""
        pass

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove the entry if present."""
        pass
