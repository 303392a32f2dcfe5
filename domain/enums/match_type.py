"""Match type enumeration."""
from enum import Enum


class MatchType(Enum):
    """Derived classification of a match.

    The upstream API never states this directly; the classifier computes it.
    UNKNOWN marks a record that has not been classified yet.
    """

    RANKED = "RANKED"
    CUSTOM = "CUSTOM"
    PUBLIC = "PUBLIC"
    UNKNOWN = "UNKNOWN"

    @property
    def is_custom(self) -> bool:
        return self is MatchType.CUSTOM

    @property
    def is_ranked(self) -> bool:
        return self is MatchType.RANKED
