"""Application layer - Services and use cases."""
from .services import MatchClassifier, TelemetryService
from .use_cases import MatchSearchUseCase, PlayerMatchResolver, RosterSearchService

__all__ = [
    'MatchClassifier',
    'TelemetryService',
    'MatchSearchUseCase',
    'PlayerMatchResolver',
    'RosterSearchService',
]
