from __future__ import annotations

from application.use_cases import MatchSearchUseCase
from .base_command import BaseCommand


class MatchCommand(BaseCommand):
    """Print one classified match."""

    service = "match-cli"

    def __init__(self, match_id: str, platform: str = "steam", bypass_cache: bool = False, **kwargs) -> None:
        super().__init__(**kwargs)
        self.match_id = match_id
        self.platform = platform
        self.bypass_cache = bypass_cache

    async def execute(self, use_case: MatchSearchUseCase) -> int:
        match = await use_case.get_match_details(self.match_id, self.platform, bypass_cache=self.bypass_cache)
        if match is None:
            return self._fail(f"Match {self.match_id} not found")
        self._emit(match.to_dict())
        return 0
