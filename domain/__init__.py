"""Domain layer - Business entities, enums, errors and interfaces."""
from .entities import MatchRecord, Roster, Participant, PlayerRef, SearchResult, CachedEntry
from .enums import Platform, MatchType, TimeRange
from .interfaces import IMatchRepository, IPlayerRepository, ICacheStore

__all__ = [
    # Entities
    'MatchRecord',
    'Roster',
    'Participant',
    'PlayerRef',
    'SearchResult',
    'CachedEntry',
    # Enums
    'Platform',
    'MatchType',
    'TimeRange',
    # Interfaces
    'IMatchRepository',
    'IPlayerRepository',
    'ICacheStore',
]
