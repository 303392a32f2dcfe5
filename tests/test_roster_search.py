"""Tests for roster search: fan-out, dedup, coverage and priority."""
from unittest.mock import AsyncMock

import httpx
import pytest

from application.use_cases import PlayerMatchResolver, RosterSearchService, ScoringWeights
from domain.entities import MatchRecord, SearchResult
from domain.enums import MatchType, Platform, TimeRange
from domain.exceptions import FailureCategory, OperationCancelled, TransportExhausted
from factories import NOW, custom_match_doc, player_doc, recent


def match_path(match_id: str) -> str:
    return f"/shards/steam/matches/{match_id}"


def players_for(upstream, roster):
    """Route the name lookup by the ``filter[playerNames]`` query value."""
    original = upstream.handler

    def handler(request):
        if request.url.path == "/shards/steam/players":
            upstream.requests.append(request)
            name = request.url.params["filter[playerNames]"]
            if name in roster:
                return httpx.Response(200, json=player_doc(name, f"account.{name}", roster[name]))
        return original(request)

    return handler


@pytest.fixture
def search(player_repo, match_repo) -> RosterSearchService:
    resolver = PlayerMatchResolver(player_repo, match_repo, clock=lambda: NOW)
    return RosterSearchService(resolver, clock=lambda: NOW)


@pytest.fixture
def routed_client(api_client, fetcher, upstream):
    def install(roster):
        fetcher._transport = httpx.MockTransport(players_for(upstream, roster))
        return api_client
    return install


class TestRosterSearch:
    @pytest.mark.asyncio
    async def test_two_player_scenario(self, search, routed_client, upstream):
        upstream.add(match_path("M1"), custom_match_doc("M1", recent(1), ["alice", "bob"]))
        upstream.add(match_path("M2"), custom_match_doc("M2", recent(20), ["alice"]))
        client = routed_client({"alice": ["M1", "M2"], "bob": ["M1"]})

        async with client:
            results = await search.search_by_roster(["alice", "bob"], Platform.STEAM, TimeRange.LAST_24H)

        assert [r.match_id for r in results] == ["M1", "M2"]
        top, second = results
        assert top.matched_player_names == ["alice", "bob"]
        assert top.player_coverage == 100
        assert second.matched_player_names == ["alice"]
        assert second.player_coverage == 50
        assert top.priority_score > second.priority_score

    @pytest.mark.asyncio
    async def test_shared_match_is_deduplicated(self, search, routed_client, upstream):
        upstream.add(match_path("M1"), custom_match_doc("M1", recent(2), ["a", "b", "c"]))
        client = routed_client({"a": ["M1"], "b": ["M1"], "c": ["M1"]})

        async with client:
            results = await search.search_by_roster(["a", "b", "c"], Platform.STEAM, TimeRange.LAST_24H)

        assert len(results) == 1
        assert results[0].matched_player_names == ["a", "b", "c"]
        assert results[0].player_coverage == 100
        # 100 coverage + 30 custom flag + 50 CUSTOM + 20 recent
        assert results[0].priority_score == 200
        assert upstream.calls(match_path("M1")) == 1

    @pytest.mark.asyncio
    async def test_failing_player_is_skipped(self, search, routed_client, upstream):
        upstream.add(match_path("M1"), custom_match_doc("M1", recent(2), ["a"]))
        client = routed_client({"a": ["M1"]})

        async with client:
            results = await search.search_by_roster(["a", "missing"], Platform.STEAM, TimeRange.LAST_24H)

        assert [r.match_id for r in results] == ["M1"]
        assert results[0].player_coverage == 50

    @pytest.mark.asyncio
    async def test_player_lookup_with_unreadable_body_is_skipped(self, search, routed_client, upstream):
        upstream.add(match_path("M1"), custom_match_doc("M1", recent(1), ["alice"]))
        upstream.add("/shards/steam/players", httpx.Response(200, text="<html>maintenance</html>"))
        client = routed_client({"alice": ["M1"]})

        async with client:
            results = await search.search_by_roster(["alice", "bob"], Platform.STEAM, TimeRange.LAST_24H)

        assert [r.match_id for r in results] == ["M1"]
        assert results[0].matched_player_names == ["alice"]

    @pytest.mark.asyncio
    async def test_player_resource_without_id_is_skipped(self, search, routed_client, upstream):
        upstream.add(match_path("M1"), custom_match_doc("M1", recent(1), ["alice"]))
        upstream.add(
            "/shards/steam/players",
            {"data": [{"type": "player", "attributes": {"name": "bob", "shardId": "steam"}}]},
        )
        client = routed_client({"alice": ["M1"]})

        async with client:
            results = await search.search_by_roster(["alice", "bob"], Platform.STEAM, TimeRange.LAST_24H)

        assert [r.match_id for r in results] == ["M1"]
        assert results[0].player_coverage == 50

    @pytest.mark.asyncio
    async def test_unexpected_lookup_error_of_one_player_does_not_abort(self):
        match = MatchRecord("M9", recent(3), is_custom_match=True, classification=MatchType.CUSTOM)
        resolver = AsyncMock(spec=PlayerMatchResolver)
        resolver.resolve_recent_matches.side_effect = [KeyError("id"), [match]]
        service = RosterSearchService(resolver, clock=lambda: NOW)

        results = await service.search_by_roster(["x", "y"], Platform.STEAM)
        assert [r.matched_player_names for r in results] == [["y"]]

    @pytest.mark.asyncio
    async def test_cancellation_is_not_swallowed(self):
        resolver = AsyncMock(spec=PlayerMatchResolver)
        resolver.resolve_recent_matches.side_effect = OperationCancelled("stop")
        service = RosterSearchService(resolver, clock=lambda: NOW)

        with pytest.raises(OperationCancelled):
            await service.search_by_roster(["x", "y"], Platform.STEAM)

    @pytest.mark.asyncio
    async def test_roster_is_capped_and_cleaned(self):
        resolver = AsyncMock(spec=PlayerMatchResolver)
        resolver.resolve_recent_matches.return_value = []
        service = RosterSearchService(resolver, max_players=5)

        names = ["p1", " ", "p2", "P1", "p3", "p4", "p5", "p6", "p7"]
        assert await service.search_by_roster(names, Platform.STEAM) == []

        called = [c.args[0] for c in resolver.resolve_recent_matches.await_args_list]
        assert called == ["p1", "p2", "p3", "p4", "p5"]
        assert all(c.kwargs["custom_match_only"] for c in resolver.resolve_recent_matches.await_args_list)

    @pytest.mark.asyncio
    async def test_transport_failure_of_one_player_does_not_abort(self):
        match = MatchRecord("M9", recent(3), is_custom_match=True, classification=MatchType.CUSTOM)
        resolver = AsyncMock(spec=PlayerMatchResolver)
        resolver.resolve_recent_matches.side_effect = [
            TransportExhausted(FailureCategory.RESET, 3),
            [match],
        ]
        service = RosterSearchService(resolver, clock=lambda: NOW)

        results = await service.search_by_roster(["x", "y"], Platform.STEAM)
        assert [r.match_id for r in results] == ["M9"]
        assert results[0].matched_player_names == ["y"]


class TestScoring:
    def _service(self, **weights):
        return RosterSearchService(AsyncMock(spec=PlayerMatchResolver), weights=ScoringWeights(**weights))

    def test_ranked_scores_lower_than_custom(self):
        service = self._service()
        old = recent(30)
        ranked = SearchResult(MatchRecord("r", old, classification=MatchType.RANKED), ["a"], 50)
        custom = SearchResult(MatchRecord("c", old, classification=MatchType.CUSTOM), ["a"], 50)
        assert service.score(ranked, NOW) == 70
        assert service.score(custom, NOW) == 100

    def test_ties_break_on_recency(self):
        newer = SearchResult(MatchRecord("n", recent(1)), priority_score=100)
        older = SearchResult(MatchRecord("o", recent(5)), priority_score=100)
        assert sorted([older, newer], key=SearchResult.sort_key) == [newer, older]
