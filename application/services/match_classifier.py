"""Match type classification."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from domain.entities import MatchRecord
from domain.enums import MatchType


@dataclass(frozen=True, slots=True)
class ClassifierConfig:
    """Thresholds and weights used by the heuristic rules."""

    ranked_min_players: int = 60
    ranked_max_players: int = 64
    full_team_threshold: float = 0.6

    custom_modes: Tuple[str, ...] = ("squad-fpp", "competitive", "esports")
    custom_min_players: int = 60
    custom_max_players: int = 100
    tournament_maps: Tuple[str, ...] = ("Baltic_Main", "Erangel_Main", "Desert_Main", "Tiger_Main")

    mode_weight: int = 1
    player_count_weight: int = 1
    map_weight: int = 1
    full_teams_weight: int = 2
    custom_threshold: int = 3


Rule = Callable[[MatchRecord, ClassifierConfig], Optional[MatchType]]


def declared_type(match: MatchRecord, cfg: ClassifierConfig) -> Optional[MatchType]:
    if match.declared_type == "competitive":
        return MatchType.RANKED
    if match.declared_type == "custom" or match.is_custom_match:
        return MatchType.CUSTOM
    if match.declared_type == "official":
        return MatchType.PUBLIC
    return None


def _has_full_teams(match: MatchRecord, cfg: ClassifierConfig) -> bool:
    return match.full_team_ratio > cfg.full_team_threshold


def ranked_heuristic(match: MatchRecord, cfg: ClassifierConfig) -> Optional[MatchType]:
    if match.declared_type == "ranked" or match.is_ranked_flag:
        return MatchType.RANKED
    if "ranked" in match.game_mode.lower() or "rank" in match.season_state.lower():
        return MatchType.RANKED
    in_range = cfg.ranked_min_players <= match.player_count <= cfg.ranked_max_players
    if in_range and _has_full_teams(match, cfg):
        return MatchType.RANKED
    return None


def custom_score(match: MatchRecord, cfg: ClassifierConfig) -> int:
    score = 0
    if match.game_mode in cfg.custom_modes:
        score += cfg.mode_weight
    if cfg.custom_min_players <= match.player_count <= cfg.custom_max_players:
        score += cfg.player_count_weight
    if match.map_name in cfg.tournament_maps:
        score += cfg.map_weight
    if _has_full_teams(match, cfg):
        score += cfg.full_teams_weight
    return score


def custom_heuristic(match: MatchRecord, cfg: ClassifierConfig) -> Optional[MatchType]:
    if custom_score(match, cfg) >= cfg.custom_threshold:
        return MatchType.CUSTOM
    return None


def public_fallback(match: MatchRecord, cfg: ClassifierConfig) -> Optional[MatchType]:
    return MatchType.PUBLIC


DEFAULT_RULES: List[Tuple[str, Rule]] = [
    ("declared_type", declared_type),
    ("ranked_heuristic", ranked_heuristic),
    ("custom_score", custom_heuristic),
    ("public_fallback", public_fallback),
]


class MatchClassifier:
    """Labels a match RANKED, CUSTOM or PUBLIC.

    Rules run in order and the first verdict wins. Classification is a pure
    function of the record and the config.
    """

    def __init__(
        self,
        config: Optional[ClassifierConfig] = None,
        rules: Optional[List[Tuple[str, Rule]]] = None,
    ) -> None:
        self.config = config or ClassifierConfig()
        self.rules = list(rules or DEFAULT_RULES)

    def explain(self, match: MatchRecord) -> Tuple[MatchType, str]:
        """Return the verdict together with the name of the rule that decided it."""
        for name, rule in self.rules:
            verdict = rule(match, self.config)
            if verdict is not None:
                return verdict, name
        return MatchType.PUBLIC, "public_fallback"

    def classify(self, match: MatchRecord) -> MatchType:
        return self.explain(match)[0]

    def annotate(self, match: MatchRecord) -> MatchRecord:
        return match.with_classification(self.classify(match))
