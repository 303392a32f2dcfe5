"""Domain enumerations."""
from .platform import Platform
from .match_type import MatchType
from .time_range import TimeRange

__all__ = [
    'Platform',
    'MatchType',
    'TimeRange',
]
