"""Presentation layer - User interfaces."""
from .cli import SearchCommand, MatchCommand, TelemetryCommand

__all__ = [
    "SearchCommand",
    "MatchCommand",
    "TelemetryCommand",
]
