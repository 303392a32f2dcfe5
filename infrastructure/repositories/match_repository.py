"""Match repository implementation."""
import logging
from typing import Any, Dict, List, Optional
from datetime import datetime, timezone

from domain.entities import MatchRecord, Participant, Roster
from domain.enums import Platform
from domain.exceptions import ClientError
from domain.interfaces import IMatchRepository
from infrastructure.api import PubgAPIClient, extract_telemetry_url

logger = logging.getLogger(__name__)


def parse_timestamp(value: Optional[str]) -> datetime:
    """Parse an upstream ISO-8601 timestamp (``Z`` suffix allowed) as aware UTC."""
    if not value:
        raise ValueError("missing createdAt")
    dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def _as_bool(value: Any) -> bool:
    # roster ``won`` arrives as the string "true"/"false"
    if isinstance(value, str):
        return value.strip().lower() == "true"
    return bool(value)


class MatchRepository(IMatchRepository):
    """Repository for match data using the PUBG API."""

    def __init__(self, api_client: PubgAPIClient):
        """
        Initialize match repository.

        Args:
            api_client: PUBG API client instance
        """
        self.api_client = api_client

    async def get_match(
        self,
        platform: Platform,
        match_id: str,
        bypass_cache: bool = False,
    ) -> Optional[MatchRecord]:
        """
        Get a single match by ID.

        Args:
            platform: Platform shard
            match_id: Match identifier
            bypass_cache: Skip the cache read (the cache still backs failures)

        Returns:
            MatchRecord (unclassified) or None if the upstream has no such match
        """
        try:
            match_data = await self.api_client.get_match(platform, match_id, bypass_cache=bypass_cache)
        except ClientError as exc:
            if exc.is_not_found:
                logger.warning(f"Match {match_id} not found in API")
                return None
            raise

        return self.parse_match(match_data)

    def parse_match(self, document: Dict[str, Any]) -> MatchRecord:
        """Parse a JSON:API match document into a MatchRecord."""
        data = document.get("data") or {}
        attrs = data.get("attributes") or {}
        included: List[Dict[str, Any]] = document.get("included") or []

        participants = tuple(
            self._parse_participant(item) for item in included if item.get("type") == "participant"
        )
        rosters = tuple(
            self._parse_roster(item) for item in included if item.get("type") == "roster"
        )

        player_count = attrs.get("playerCount")
        if not isinstance(player_count, int) or player_count <= 0:
            player_count = len(participants)

        return MatchRecord(
            match_id=data.get("id", ""),
            created_at=parse_timestamp(attrs.get("createdAt")),
            map_name=attrs.get("mapName") or "",
            game_mode=attrs.get("gameMode") or "",
            player_count=player_count,
            duration=int(attrs.get("duration") or 0),
            shard_id=attrs.get("shardId") or "",
            season_state=attrs.get("seasonState") or "",
            declared_type=attrs.get("matchType") or "",
            is_custom_match=bool(attrs.get("isCustomMatch")),
            is_ranked_flag=bool(attrs.get("isRanked")),
            rosters=rosters,
            participants=participants,
            telemetry_url=extract_telemetry_url(document),
        )

    def _parse_roster(self, item: Dict[str, Any]) -> Roster:
        attrs = item.get("attributes") or {}
        stats = attrs.get("stats") or {}
        members = ((item.get("relationships") or {}).get("participants") or {}).get("data") or []
        return Roster(
            team_ref_id=item.get("id", ""),
            participant_ids=tuple(m.get("id", "") for m in members),
            rank=int(stats.get("rank") or 0),
            team_id=stats.get("teamId"),
            won=_as_bool(attrs.get("won", False)),
        )

    def _parse_participant(self, item: Dict[str, Any]) -> Participant:
        stats = (item.get("attributes") or {}).get("stats") or {}
        return Participant(
            participant_id=item.get("id", ""),
            account_id=stats.get("playerId"),
            name=stats.get("name") or "",
            kills=int(stats.get("kills") or 0),
            damage_dealt=float(stats.get("damageDealt") or 0.0),
            win_place=int(stats.get("winPlace") or 0),
        )
