from __future__ import annotations

from typing import Optional

from application.use_cases import MatchSearchUseCase
from .base_command import BaseCommand


class TelemetryCommand(BaseCommand):
    """Download a match's telemetry and print it (or a summary of it)."""

    service = "telemetry-cli"

    def __init__(
        self,
        match_id: Optional[str] = None,
        platform: str = "steam",
        url: Optional[str] = None,
        summary: bool = False,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self.match_id = match_id
        self.platform = platform
        self.url = url
        self.summary = summary

    async def execute(self, use_case: MatchSearchUseCase) -> int:
        events = await use_case.get_telemetry(
            match_id=self.match_id, telemetry_url=self.url, platform=self.platform
        )
        if self.summary and isinstance(events, list):
            self._emit({"match_id": self.match_id, "events": len(events)})
        else:
            self._emit(events)
        return 0
