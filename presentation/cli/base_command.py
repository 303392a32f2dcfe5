from __future__ import annotations

import json
import sys
from typing import Any

from config import settings
from core.logging.logger import get_logger
from domain.exceptions import PubgAPIError
from infrastructure.api import PubgAPIClient
from application.use_cases import MatchSearchUseCase, build_match_search


class BaseCommand:
    """Shared plumbing: client lifecycle, JSON output and user-facing errors."""

    service = "cli"

    def __init__(self, api_client: PubgAPIClient | None = None, out=None, err=None) -> None:
        self._api_client = api_client
        self._out = out or sys.stdout
        self._err = err or sys.stderr
        self._log = get_logger(__name__, service=self.service)

    def _emit(self, payload: Any) -> None:
        json.dump(payload, self._out, indent=2, default=str)
        self._out.write("\n")

    def _fail(self, message: str, code: int = 1) -> int:
        print(f"error: {message}", file=self._err, flush=True)
        return code

    async def execute(self, use_case: MatchSearchUseCase) -> int:
        raise NotImplementedError

    async def run(self) -> int:
        if self._api_client is None:
            try:
                settings.validate()
            except ValueError as exc:
                return self._fail(str(exc), code=2)
            settings.create_directories()
            self._api_client = PubgAPIClient.from_settings()

        try:
            async with self._api_client as api:
                return await self.execute(build_match_search(api))
        except PubgAPIError as exc:
            self._log.error(lambda: f"{type(exc).__name__}: {exc}")
            return self._fail(exc.user_message)
        except ValueError as exc:
            return self._fail(str(exc), code=2)
