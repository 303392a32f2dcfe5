from __future__ import annotations

from typing import List

from application.use_cases import MatchSearchUseCase, SearchCriteria
from .base_command import BaseCommand


class SearchCommand(BaseCommand):
    """Search recent matches for one player, or shared matches for a roster."""

    service = "search-cli"

    def __init__(
        self,
        players: List[str],
        platform: str = "steam",
        time_range: str = "24h",
        custom_only: bool = True,
        game_mode: str = "all",
        map_name: str = "all",
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self.criteria = SearchCriteria(
            player_names=list(players),
            platform=platform,
            time_range=time_range,
            custom_match_only=custom_only,
            game_mode=game_mode,
            map_name=map_name,
        )

    async def execute(self, use_case: MatchSearchUseCase) -> int:
        self._log.info(lambda: f"search {', '.join(self.criteria.player_names)}")
        response = await use_case.search_matches(self.criteria)
        self._emit(response.to_dict())
        self._log.success(lambda: f"search done: {response.meta['count']} matches")
        return 0
