"""Tests for match classification rules."""
import pytest

from application.services.match_classifier import ClassifierConfig, MatchClassifier, custom_score
from domain.entities import MatchRecord, Roster
from domain.enums import MatchType
from factories import recent


def rosters(full: int, partial: int = 0):
    teams = [Roster(f"f{i}", tuple(f"p{i}-{j}" for j in range(4))) for i in range(full)]
    teams += [Roster(f"s{i}", (f"solo{i}",)) for i in range(partial)]
    return tuple(teams)


def record(**overrides) -> MatchRecord:
    base = dict(
        match_id="m1",
        created_at=recent(1),
        map_name="Savage_Main",
        game_mode="squad",
        player_count=90,
        rosters=rosters(2, 20),
    )
    base.update(overrides)
    return MatchRecord(**base)


@pytest.fixture
def classifier() -> MatchClassifier:
    return MatchClassifier()


class TestDeclaredType:
    def test_competitive_is_ranked(self, classifier):
        assert classifier.explain(record(declared_type="competitive")) == (MatchType.RANKED, "declared_type")

    def test_custom_flag_wins_over_heuristics(self, classifier):
        match = record(is_custom_match=True, player_count=64, rosters=rosters(16))
        assert classifier.classify(match) is MatchType.CUSTOM

    def test_declared_custom(self, classifier):
        assert classifier.classify(record(declared_type="custom")) is MatchType.CUSTOM

    def test_official_is_public_even_with_tournament_shape(self, classifier):
        match = record(declared_type="official", map_name="Baltic_Main", rosters=rosters(20))
        assert classifier.explain(match) == (MatchType.PUBLIC, "declared_type")


class TestRankedHeuristic:
    def test_ranked_flag(self, classifier):
        assert classifier.classify(record(is_ranked_flag=True)) is MatchType.RANKED

    def test_ranked_game_mode(self, classifier):
        assert classifier.classify(record(game_mode="squad-fpp-ranked")) is MatchType.RANKED

    def test_ranked_season_state(self, classifier):
        assert classifier.classify(record(season_state="ranked-progress")) is MatchType.RANKED

    def test_full_64_player_lobby_is_ranked(self, classifier):
        match = record(player_count=64, rosters=rosters(16))
        assert classifier.explain(match) == (MatchType.RANKED, "ranked_heuristic")

    def test_ratio_must_exceed_threshold(self, classifier):
        # exactly 60% full squads is not enough
        match = record(player_count=62, rosters=rosters(6, 4))
        assert classifier.classify(match) is not MatchType.RANKED


class TestCustomScore:
    def test_score_components(self):
        cfg = ClassifierConfig()
        match = record(game_mode="esports", player_count=80, map_name="Erangel_Main", rosters=rosters(20))
        assert custom_score(match, cfg) == 5

    def test_tournament_lobby_is_custom(self, classifier):
        match = record(game_mode="squad-fpp", player_count=72, map_name="Baltic_Main", rosters=rosters(18))
        assert classifier.explain(match) == (MatchType.CUSTOM, "custom_score")

    def test_full_teams_plus_one_signal_is_custom(self, classifier):
        match = record(player_count=100, rosters=rosters(25))
        assert classifier.classify(match) is MatchType.CUSTOM

    def test_two_weak_signals_are_public(self, classifier):
        match = record(game_mode="squad-fpp", player_count=90, map_name="Savage_Main", rosters=rosters(2, 20))
        assert classifier.explain(match) == (MatchType.PUBLIC, "public_fallback")

    def test_no_rosters_means_no_full_teams(self, classifier):
        match = record(player_count=80, map_name="Baltic_Main", rosters=())
        assert match.full_team_ratio == 0.0
        assert classifier.classify(match) is MatchType.PUBLIC

    def test_threshold_is_configurable(self):
        strict = MatchClassifier(ClassifierConfig(custom_threshold=6))
        match = record(game_mode="esports", player_count=80, map_name="Erangel_Main", rosters=rosters(20))
        assert strict.classify(match) is MatchType.PUBLIC


class TestDeterminism:
    def test_same_record_same_verdict(self, classifier):
        match = record(player_count=72, map_name="Baltic_Main", rosters=rosters(18))
        assert {classifier.classify(match) for _ in range(10)} == {MatchType.CUSTOM}

    def test_annotate_returns_new_record(self, classifier):
        match = record(declared_type="custom")
        annotated = classifier.annotate(match)
        assert annotated.classification is MatchType.CUSTOM
        assert match.classification is MatchType.UNKNOWN
