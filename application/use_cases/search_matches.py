"""Use case facade consumed by route handlers and the CLI."""
from __future__ import annotations

import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from application.services.match_classifier import MatchClassifier
from application.services.telemetry_service import TelemetryService
from config import settings
from core.logging import context
from core.logging.logger import get_logger
from domain.entities import MatchRecord, SearchResult
from domain.enums import Platform, TimeRange
from domain.interfaces import IMatchRepository
from .resolve_recent_matches import ALL, PlayerMatchResolver
from .search_by_roster import RosterSearchService


@dataclass
class SearchCriteria:
    player_name: Optional[str] = None
    player_names: List[str] = field(default_factory=list)
    platform: Union[str, Platform, None] = None
    time_range: Union[str, TimeRange, None] = None
    custom_match_only: bool = False
    game_mode: str = ALL
    map_name: str = ALL
    start: Optional[datetime] = None
    end: Optional[datetime] = None


@dataclass
class SearchResponse:
    data: List[Union[MatchRecord, SearchResult]]
    meta: Dict[str, Any]

    def to_dict(self) -> Dict[str, Any]:
        return {"data": [item.to_dict() for item in self.data], "meta": dict(self.meta)}


class MatchSearchUseCase:
    """Input validation and response shaping on top of the resolver, the
    roster search and the telemetry service."""

    def __init__(
        self,
        resolver: PlayerMatchResolver,
        roster_search: RosterSearchService,
        match_repo: IMatchRepository,
        telemetry: TelemetryService,
        classifier: Optional[MatchClassifier] = None,
        *,
        max_name_length: Optional[int] = None,
    ):
        self.resolver = resolver
        self.roster_search = roster_search
        self.match_repo = match_repo
        self.telemetry = telemetry
        self.classifier = classifier or resolver.classifier
        self.max_name_length = max_name_length or settings.MAX_PLAYER_NAME_LENGTH
        self._log = get_logger(__name__, service="match-search")

    def _clean_name(self, name: Optional[str]) -> str:
        return (name or "").strip()[: self.max_name_length]

    @staticmethod
    def _platform(value: Union[str, Platform, None]) -> Platform:
        if isinstance(value, Platform):
            return value
        return Platform.from_string(value, default=Platform.STEAM)

    @staticmethod
    def _time_range(value: Union[str, TimeRange, None]) -> TimeRange:
        if isinstance(value, TimeRange):
            return value
        return TimeRange.from_string(value, default=TimeRange.LAST_24H)

    async def search_matches(self, criteria: SearchCriteria) -> SearchResponse:
        names = [self._clean_name(n) for n in criteria.player_names]
        names = [n for n in names if n]
        single = self._clean_name(criteria.player_name)
        if single and not names:
            names = [single]
        if not names:
            raise ValueError("At least one player name is required")

        platform = self._platform(criteria.platform)
        time_range = self._time_range(criteria.time_range)
        filters = {
            "platform": platform.value,
            "time_range": time_range.value,
            "custom_match_only": criteria.custom_match_only,
            "game_mode": criteria.game_mode or ALL,
            "map_name": criteria.map_name or ALL,
        }

        started = time.perf_counter()
        with context(platform=platform.value):
            if len(names) == 1:
                matches = await self.resolver.resolve_recent_matches(
                    names[0], platform, time_range,
                    custom_match_only=criteria.custom_match_only,
                    game_mode=filters["game_mode"],
                    map_name=filters["map_name"],
                    start=criteria.start, end=criteria.end,
                )
                data: List[Union[MatchRecord, SearchResult]] = sorted(
                    matches, key=lambda m: m.created_at, reverse=True
                )
            else:
                data = list(await self.roster_search.search_by_roster(
                    names, platform, time_range, start=criteria.start, end=criteria.end,
                ))
        elapsed_ms = round((time.perf_counter() - started) * 1000.0, 2)

        meta: Dict[str, Any] = {
            "count": len(data),
            "players": names,
            "search_time_ms": elapsed_ms,
            "filters": filters,
        }
        if not data:
            meta["message"] = "No matches found"
        self._log.info(
            lambda: f"search {','.join(names)} -> {len(data)} matches",
            execution_time_ms=elapsed_ms,
        )
        return SearchResponse(data=data, meta=meta)

    async def get_match_details(
        self,
        match_id: str,
        platform: Union[str, Platform, None] = None,
        bypass_cache: bool = False,
    ) -> Optional[MatchRecord]:
        platform = self._platform(platform)
        with context(match_id=match_id, platform=platform.value):
            match = await self.match_repo.get_match(platform, match_id, bypass_cache=bypass_cache)
            if match is None:
                return None
            return self.classifier.annotate(match)

    async def get_telemetry(
        self,
        match_id: Optional[str] = None,
        telemetry_url: Optional[str] = None,
        platform: Union[str, Platform, None] = None,
    ) -> Any:
        platform = self._platform(platform)
        with context(match_id=match_id, platform=platform.value):
            return await self.telemetry.get_telemetry(platform, match_id=match_id, telemetry_url=telemetry_url)


def build_match_search(api_client) -> MatchSearchUseCase:
    """Wire the use case graph on top of one PUBG API client."""
    from infrastructure.repositories import MatchRepository, PlayerRepository

    classifier = MatchClassifier()
    match_repo = MatchRepository(api_client)
    resolver = PlayerMatchResolver(PlayerRepository(api_client), match_repo, classifier)
    return MatchSearchUseCase(
        resolver,
        RosterSearchService(resolver),
        match_repo,
        TelemetryService(api_client),
        classifier,
    )
