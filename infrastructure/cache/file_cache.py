"""File-backed cache store: one JSON document per key."""
from __future__ import annotations

import asyncio
import json
import logging
import re
import time
from pathlib import Path
from typing import Any, Callable, Optional

from domain.entities import CachedEntry
from domain.interfaces import ICacheStore

logger = logging.getLogger(__name__)

_UNSAFE = re.compile(r"[^A-Za-z0-9_-]")


def sanitize_key(key: str) -> str:
    """Replace every character outside ``[A-Za-z0-9_-]`` with ``_``."""
    return _UNSAFE.sub("_", key)


class FileCacheStore(ICacheStore):
    """
    Stores ``{"data", "timestamp", "expires"}`` documents under ``cache_dir``.

    Expired entries are evicted lazily when read; there is no background
    sweep. Every I/O failure degrades to a miss (read) or a no-op (write) so
    the upstream fetch path never depends on the disk.
    """

    def __init__(self, cache_dir: Path, clock: Callable[[], float] = time.time) -> None:
        self.cache_dir = Path(cache_dir)
        self._clock = clock

    def path_for(self, key: str) -> Path:
        return self.cache_dir / f"{sanitize_key(key)}.json"

    async def get(self, key: str) -> Optional[Any]:
        path = self.path_for(key)
        try:
            raw = await asyncio.to_thread(path.read_text, encoding="utf-8")
            entry = CachedEntry.from_json(key, json.loads(raw))
        except FileNotFoundError:
            return None
        except (OSError, ValueError, KeyError, TypeError) as exc:
            logger.debug(f"cache-read-failed {path.name}: {exc}")
            return None

        if entry.is_expired(self._clock()):
            logger.debug(f"cache-expired {path.name}")
            await self._unlink(path)
            return None
        return entry.payload

    async def set(self, key: str, payload: Any, ttl_seconds: float) -> None:
        entry = CachedEntry.create(key, payload, ttl_seconds, self._clock())
        path = self.path_for(key)
        try:
            document = json.dumps(entry.to_json(), separators=(",", ":"))
            await asyncio.to_thread(self._write, path, document)
        except (OSError, TypeError, ValueError) as exc:
            logger.warning(f"cache-write-failed {path.name}: {exc}")

    async def delete(self, key: str) -> None:
        await self._unlink(self.path_for(key))

    def _write(self, path: Path, document: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp = path.with_suffix(".tmp")
        tmp.write_text(document, encoding="utf-8")
        tmp.replace(path)

    async def _unlink(self, path: Path) -> None:
        try:
            await asyncio.to_thread(path.unlink, True)
        except OSError as exc:
            logger.debug(f"cache-unlink-failed {path.name}: {exc}")
