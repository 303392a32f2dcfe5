"""Telemetry download for a finished match."""
from __future__ import annotations

from typing import Any, Optional

from core.logging.logger import get_logger
from domain.enums import Platform
from domain.exceptions import TelemetryNotFound
from infrastructure.api import PubgAPIClient, extract_telemetry_url


class TelemetryService:
    """Fetches the opaque telemetry event stream of a match.

    Only the asset URL is looked at; the events themselves are returned as
    downloaded.
    """

    def __init__(self, api_client: PubgAPIClient) -> None:
        self.api_client = api_client
        self._log = get_logger(__name__, service="telemetry")

    async def find_url(self, platform: Platform, match_id: str) -> str:
        document = await self.api_client.get_match(platform, match_id)
        url = extract_telemetry_url(document)
        if not url:
            raise TelemetryNotFound(match_id)
        return url

    async def get_telemetry(
        self,
        platform: Platform,
        match_id: Optional[str] = None,
        telemetry_url: Optional[str] = None,
    ) -> Any:
        if not telemetry_url:
            if not match_id:
                raise ValueError("match_id or telemetry_url is required")
            telemetry_url = await self.find_url(platform, match_id)
        self._log.info(lambda: f"telemetry-fetch {match_id or telemetry_url}", endpoint="telemetry")
        return await self.api_client.get_telemetry(telemetry_url)
