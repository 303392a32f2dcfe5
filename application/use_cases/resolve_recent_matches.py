"""Use case: a player's recent matches, fetched, classified and filtered."""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, List, Optional

from application.services.match_classifier import MatchClassifier
from config import settings
from core.logging import context, traceable
from domain.entities import MatchRecord
from domain.enums import MatchType, Platform, TimeRange
from domain.exceptions import OperationCancelled, PubgAPIError
from domain.interfaces import IMatchRepository, IPlayerRepository

logger = logging.getLogger(__name__)

ALL = "all"


class ResolutionStage(Enum):
    NAME_LOOKUP = "name_lookup"
    ACCOUNT_FOUND = "account_found"
    MATCH_LIST_FETCHED = "match_list_fetched"
    PER_MATCH_FETCH = "per_match_fetch"
    FILTERED_RESULT = "filtered_result"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PlayerMatchResolver:
    """
    Name -> account -> recent match ids -> bounded per-match fetch.

    Failures in the name lookup or the match list propagate to the caller.
    Once the match list is known each match is independent: one that cannot
    be fetched or parsed is logged and skipped.
    """

    def __init__(
        self,
        player_repo: IPlayerRepository,
        match_repo: IMatchRepository,
        classifier: Optional[MatchClassifier] = None,
        *,
        max_matches: Optional[int] = None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.player_repo = player_repo
        self.match_repo = match_repo
        self.classifier = classifier or MatchClassifier()
        self.max_matches = max_matches if max_matches is not None else settings.MAX_MATCHES_PER_PLAYER
        self._clock = clock
        self.stage: Optional[ResolutionStage] = None

    def _enter(self, stage: ResolutionStage) -> None:
        self.stage = stage
        logger.debug(f"resolver stage {stage.value}")

    @traceable
    async def resolve_recent_matches(
        self,
        player_name: str,
        platform: Platform,
        time_range: TimeRange = TimeRange.LAST_24H,
        *,
        custom_match_only: bool = False,
        game_mode: str = ALL,
        map_name: str = ALL,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> List[MatchRecord]:
        with context(player=player_name, platform=platform.value):
            self._enter(ResolutionStage.NAME_LOOKUP)
            player = await self.player_repo.find_by_name(platform, player_name)
            if player is None:
                return []

            self._enter(ResolutionStage.ACCOUNT_FOUND)
            match_ids = await self.player_repo.get_match_ids(player)
            self._enter(ResolutionStage.MATCH_LIST_FETCHED)
            if not match_ids:
                logger.info(f"No recent matches for {player_name}")
                return []

            window_start, window_end = time_range.window(self._clock(), start, end)
            selected = match_ids[: self.max_matches]
            logger.info(f"Fetching {len(selected)} of {len(match_ids)} matches for {player_name}")

            self._enter(ResolutionStage.PER_MATCH_FETCH)
            results: List[MatchRecord] = []
            for match_id in selected:
                match = await self._fetch_one(platform, match_id)
                if match is None:
                    continue
                if not window_start <= match.created_at <= window_end:
                    continue
                match = self.classifier.annotate(match)
                if self._keep(match, custom_match_only, game_mode, map_name):
                    results.append(match)

            self._enter(ResolutionStage.FILTERED_RESULT)
            logger.info(f"{len(results)} matches kept for {player_name}")
            return results

    async def _fetch_one(self, platform: Platform, match_id: str) -> Optional[MatchRecord]:
        try:
            return await self.match_repo.get_match(platform, match_id)
        except OperationCancelled:
            raise
        except (PubgAPIError, ValueError, KeyError, TypeError) as exc:
            logger.warning(f"Skipping match {match_id}: {exc}")
            return None

    @staticmethod
    def _keep(match: MatchRecord, custom_match_only: bool, game_mode: str, map_name: str) -> bool:
        if custom_match_only and match.classification is not MatchType.CUSTOM:
            return False
        if game_mode and game_mode != ALL and match.game_mode != game_mode:
            return False
        if map_name and map_name != ALL and match.map_name != map_name:
            return False
        return True
