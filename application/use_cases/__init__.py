"""Application use cases."""
from .resolve_recent_matches import PlayerMatchResolver, ResolutionStage
from .search_by_roster import RosterSearchService, ScoringWeights
from .search_matches import MatchSearchUseCase, SearchCriteria, SearchResponse, build_match_search

__all__ = [
    'PlayerMatchResolver',
    'ResolutionStage',
    'RosterSearchService',
    'ScoringWeights',
    'MatchSearchUseCase',
    'SearchCriteria',
    'SearchResponse',
    'build_match_search',
]
