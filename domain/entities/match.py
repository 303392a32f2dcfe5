"""Match entity representing a fetched PUBG match."""
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Optional

from .participant import Participant
from .roster import Roster
from ..enums import MatchType


@dataclass(frozen=True)
class MatchRecord:
    """Represents a finalized PUBG match.

    Matches never change once the server finalizes them, so the record is
    frozen. The classification is derived locally and attached with
    :meth:`with_classification`, which returns a new record.
    """

    # Identity
    match_id: str
    created_at: datetime

    # Attributes
    map_name: str = ""
    game_mode: str = ""
    player_count: int = 0
    duration: int = 0             # seconds
    shard_id: str = ""
    season_state: str = ""

    # Declared upstream signals (consumed by the classifier)
    declared_type: str = ""       # attributes.matchType
    is_custom_match: bool = False # attributes.isCustomMatch
    is_ranked_flag: bool = False  # attributes.isRanked

    rosters: tuple[Roster, ...] = field(default_factory=tuple)
    participants: tuple[Participant, ...] = field(default_factory=tuple)
    telemetry_url: Optional[str] = None

    classification: MatchType = MatchType.UNKNOWN

    @property
    def full_team_ratio(self) -> float:
        """Share of rosters that are full squads; 0.0 when there are none."""
        if not self.rosters:
            return 0.0
        full = sum(1 for r in self.rosters if r.is_full_squad)
        return full / len(self.rosters)

    def has_player(self, name: str) -> bool:
        wanted = name.strip().lower()
        return any(p.name.lower() == wanted for p in self.participants)

    def with_classification(self, match_type: MatchType) -> "MatchRecord":
        return replace(self, classification=match_type)

    def to_dict(self) -> dict[str, Any]:
        return {
            'match_id': self.match_id,
            'created_at': self.created_at.isoformat(),
            'map_name': self.map_name,
            'game_mode': self.game_mode,
            'player_count': self.player_count,
            'duration': self.duration,
            'shard_id': self.shard_id,
            'match_type': self.declared_type or None,
            'is_custom_match': self.is_custom_match,
            'classification': self.classification.value,
            'telemetry_url': self.telemetry_url,
            'rosters': [r.to_dict() for r in self.rosters],
            'participants': [p.to_dict() for p in self.participants],
        }
