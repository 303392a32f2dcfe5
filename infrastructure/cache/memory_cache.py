"""In-process cache store."""
from __future__ import annotations

import copy
import time
from typing import Any, Callable, Dict, Optional

from domain.entities import CachedEntry
from domain.interfaces import ICacheStore


class MemoryCacheStore(ICacheStore):
    """Dictionary-backed store with the same expiry semantics as the file store.

    Payloads are deep-copied on the way in and out so callers cannot mutate a
    cached entry.
    """

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self._entries: Dict[str, CachedEntry] = {}

    async def get(self, key: str) -> Optional[Any]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.is_expired(self._clock()):
            del self._entries[key]
            return None
        return copy.deepcopy(entry.payload)

    async def set(self, key: str, payload: Any, ttl_seconds: float) -> None:
        self._entries[key] = CachedEntry.create(key, copy.deepcopy(payload), ttl_seconds, self._clock())

    async def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)
