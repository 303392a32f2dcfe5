"""Application services root exports."""
from .match_classifier import ClassifierConfig, MatchClassifier
from .telemetry_service import TelemetryService

__all__ = [
    "ClassifierConfig",
    "MatchClassifier",
    "TelemetryService",
]
