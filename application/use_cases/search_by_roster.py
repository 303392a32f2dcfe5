"""Use case: find matches shared by a roster of players."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, List, Optional

from config import settings
from core.logging.logger import get_logger, traceable
from domain.entities import SearchResult
from domain.enums import MatchType, Platform, TimeRange
from domain.exceptions import OperationCancelled, PubgAPIError
from .resolve_recent_matches import PlayerMatchResolver


@dataclass(frozen=True, slots=True)
class ScoringWeights:
    custom_flag: int = 30
    custom_type: int = 50
    ranked_type: int = 20
    recent: int = 20
    recent_window: timedelta = timedelta(hours=24)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RosterSearchService:
    """
    Resolves every player of a roster (one at a time, custom matches only),
    merges the matches they share and ranks them.

    Priority = coverage % + 30 if the upstream flags a custom match
               + 50 CUSTOM | 20 RANKED + 20 if played in the last 24 h.
    """

    def __init__(
        self,
        resolver: PlayerMatchResolver,
        *,
        max_players: Optional[int] = None,
        weights: Optional[ScoringWeights] = None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.resolver = resolver
        self.max_players = max_players if max_players is not None else settings.MAX_ROSTER_PLAYERS
        self.weights = weights or ScoringWeights()
        self._clock = clock
        self._log = get_logger(__name__, service="roster-search")

    def _normalize(self, player_names: List[str]) -> List[str]:
        names: List[str] = []
        seen = set()
        for raw in player_names:
            name = (raw or "").strip()
            if name and name.lower() not in seen:
                seen.add(name.lower())
                names.append(name)
        if len(names) > self.max_players:
            self._log.warning(
                lambda: f"roster truncated from {len(names)} to {self.max_players} players"
            )
            names = names[: self.max_players]
        return names

    @traceable
    async def search_by_roster(
        self,
        player_names: List[str],
        platform: Platform,
        time_range: TimeRange = TimeRange.LAST_24H,
        *,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> List[SearchResult]:
        roster = self._normalize(player_names)
        if not roster:
            return []

        found: Dict[str, SearchResult] = {}
        for name in roster:
            try:
                matches = await self.resolver.resolve_recent_matches(
                    name, platform, time_range, custom_match_only=True, start=start, end=end,
                )
            except OperationCancelled:
                raise
            except (PubgAPIError, ValueError, KeyError, TypeError) as exc:
                self._log.warning(lambda: f"skipping player {name}: {exc}")
                continue

            for match in matches:
                result = found.get(match.match_id)
                if result is None:
                    result = found[match.match_id] = SearchResult(match=match)
                if name not in result.matched_player_names:
                    result.matched_player_names.append(name)

        now = self._clock()
        for result in found.values():
            result.player_coverage = round(len(result.matched_player_names) / len(roster) * 100)
            result.priority_score = self.score(result, now)

        ranked = sorted(found.values(), key=SearchResult.sort_key)
        self._log.info(lambda: f"roster search found {len(ranked)} unique matches")
        return ranked

    def score(self, result: SearchResult, now: datetime) -> int:
        w = self.weights
        match = result.match
        score = result.player_coverage
        if match.is_custom_match:
            score += w.custom_flag
        if match.classification is MatchType.CUSTOM:
            score += w.custom_type
        elif match.classification is MatchType.RANKED:
            score += w.ranked_type
        if now - match.created_at <= w.recent_window:
            score += w.recent
        return score
