"""Search result entity produced by roster searches."""
from dataclasses import dataclass, field

from .match import MatchRecord


@dataclass
class SearchResult:
    """One unique match found while searching a roster of players."""

    match: MatchRecord
    matched_player_names: list[str] = field(default_factory=list)
    player_coverage: int = 0
    priority_score: int = 0

    @property
    def match_id(self) -> str:
        return self.match.match_id

    def sort_key(self) -> tuple:
        """Descending priority, then most recent first."""
        return (-self.priority_score, -self.match.created_at.timestamp())

    def to_dict(self) -> dict:
        return {
            'match': self.match.to_dict(),
            'matched_player_names': list(self.matched_player_names),
            'player_coverage': self.player_coverage,
            'priority_score': self.priority_score,
        }
