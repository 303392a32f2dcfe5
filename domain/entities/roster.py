"""Roster entity representing a team inside a match."""
from dataclasses import dataclass, field
from typing import Optional

FULL_SQUAD_SIZE = 4


@dataclass(frozen=True)
class Roster:
    """A team in a match (JSON:API ``roster`` resource)."""

    team_ref_id: str
    participant_ids: tuple[str, ...] = field(default_factory=tuple)
    rank: int = 0
    team_id: Optional[int] = None
    won: bool = False

    @property
    def size(self) -> int:
        return len(self.participant_ids)

    @property
    def is_full_squad(self) -> bool:
        """A full squad has exactly four participants."""
        return self.size == FULL_SQUAD_SIZE

    def to_dict(self) -> dict:
        return {
            'team_ref_id': self.team_ref_id,
            'participant_ids': list(self.participant_ids),
            'rank': self.rank,
            'team_id': self.team_id,
            'won': self.won,
        }
