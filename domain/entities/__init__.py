"""Domain entities."""
from .participant import Participant
from .roster import Roster, FULL_SQUAD_SIZE
from .match import MatchRecord
from .player import PlayerRef
from .search_result import SearchResult
from .cached_entry import CachedEntry

__all__ = [
    'Participant',
    'Roster',
    'FULL_SQUAD_SIZE',
    'MatchRecord',
    'PlayerRef',
    'SearchResult',
    'CachedEntry',
]
