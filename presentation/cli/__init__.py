"""Presentation CLI exports."""
from .search_command import SearchCommand
from .match_command import MatchCommand
from .telemetry_command import TelemetryCommand

__all__ = [
    "SearchCommand",
    "MatchCommand",
    "TelemetryCommand",
]
