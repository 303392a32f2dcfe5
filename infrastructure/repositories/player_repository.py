"""Player repository implementation."""
import logging
from typing import Any, Dict, List, Optional

from domain.entities import PlayerRef
from domain.enums import Platform
from domain.exceptions import ClientError, UpstreamError
from domain.interfaces import IPlayerRepository
from infrastructure.api import PubgAPIClient

logger = logging.getLogger(__name__)


def _match_ids(player_resource: Dict[str, Any]) -> List[str]:
    matches = ((player_resource.get("relationships") or {}).get("matches") or {}).get("data") or []
    return [m["id"] for m in matches if m.get("id")]


class PlayerRepository(IPlayerRepository):
    """Repository for player data using the PUBG API.

    The name lookup already carries the player's recent match list, so it is
    remembered per account and reused by :meth:`get_match_ids`.
    """

    def __init__(self, api_client: PubgAPIClient):
        self.api_client = api_client
        self._match_ids: Dict[str, List[str]] = {}

    async def find_by_name(self, platform: Platform, name: str) -> Optional[PlayerRef]:
        try:
            document = await self.api_client.get_player_by_name(platform, name)
        except ClientError as exc:
            if exc.is_not_found:
                logger.info(f"Player {name!r} not found on {platform.value}")
                return None
            raise

        players = document.get("data") or []
        if not players:
            logger.info(f"Player {name!r} not found on {platform.value}")
            return None

        resource = players[0]
        if not isinstance(resource, dict) or not resource.get("id"):
            raise UpstreamError(200, resource, f"players?filter[playerNames]={name}")
        player = PlayerRef(
            name=(resource.get("attributes") or {}).get("name") or name,
            platform=platform,
        )
        player.resolve(resource["id"])
        self._match_ids[player.account_id] = _match_ids(resource)
        return player

    async def get_match_ids(self, player: PlayerRef) -> List[str]:
        if not player.is_resolved:
            raise ValueError(f"Player {player.name!r} has no account id")

        known = self._match_ids.get(player.account_id)
        if known is not None:
            return list(known)

        try:
            document = await self.api_client.get_player_by_id(player.platform, player.account_id)
        except ClientError as exc:
            if exc.is_not_found:
                return []
            raise
        ids = _match_ids(document.get("data") or {})
        self._match_ids[player.account_id] = ids
        return list(ids)
