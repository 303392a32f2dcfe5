"""Participant entity representing one player's slot in a match."""
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Participant:
    """A player inside a match (JSON:API ``participant`` resource)."""

    participant_id: str
    account_id: Optional[str] = None
    name: str = ""
    kills: int = 0
    damage_dealt: float = 0.0
    win_place: int = 0

    def to_dict(self) -> dict:
        return {
            'participant_id': self.participant_id,
            'account_id': self.account_id,
            'name': self.name,
            'kills': self.kills,
            'damage_dealt': round(self.damage_dealt, 2),
            'win_place': self.win_place,
        }
