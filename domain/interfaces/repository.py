"""Repository interfaces for data access."""
from abc import ABC, abstractmethod
from typing import List, Optional

from ..entities import MatchRecord, PlayerRef
from ..enums import Platform


class IMatchRepository(ABC):
    """Interface for match data repository."""

    @abstractmethod
    async def get_match(
        self,
        platform: Platform,
        match_id: str,
        bypass_cache: bool = False,
    ) -> Optional[MatchRecord]:
        """Get a single match by ID; ``None`` when the upstream has no such match."""
        pass


class IPlayerRepository(ABC):
    """Interface for player data repository."""

    @abstractmethod
    async def find_by_name(self, platform: Platform, name: str) -> Optional[PlayerRef]:
        """Resolve a player name to a resolved PlayerRef, or ``None`` if unknown."""
        pass

    @abstractmethod
    async def get_match_ids(self, player: PlayerRef) -> List[str]:
        """Get the player's recent match ids, most recent first."""
        pass
