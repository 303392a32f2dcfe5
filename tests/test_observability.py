"""Tests for the API monitor, structured logging and settings."""
import json
import logging

import pytest

from config import Settings
from core.logging import context, get_context, get_logger
from core.logging.formatter import JSONFormatter, mask_secrets
from factories import FakeClock
from infrastructure.api import ApiMonitor


class TestApiMonitor:
    def test_stats_windows_and_top_endpoints(self):
        clock = FakeClock(start=100_000.0)
        monitor = ApiMonitor(clock=clock)
        monitor.record_call("players", "GET", 200, 100.0)
        clock.now += 7200
        monitor.record_call("matches/{id}", "GET", 200, 300.0)
        monitor.record_call("matches/{id}", "GET", None, 50.0, error="timeout")

        stats = monitor.stats()
        assert stats["total_calls"] == 3
        assert stats["calls_last_minute"] == 2
        assert stats["calls_last_hour"] == 2
        assert stats["calls_24h"] == 3
        assert stats["avg_response_time_ms"] == 150.0
        assert stats["errors_24h"] == 1
        assert stats["error_counts"] == {"timeout": 1}
        assert stats["top_endpoints"][0] == ("GET matches/{id}", 2)
        assert stats["uptime_minutes"] == 120

    def test_keeps_last_calls_only(self):
        monitor = ApiMonitor(max_calls=10)
        for _ in range(25):
            monitor.record_call("players", "GET", 200, 1.0)
        assert monitor.stats()["total_calls"] == 10

    def test_warns_near_quota(self, caplog):
        clock = FakeClock()
        monitor = ApiMonitor(warning_threshold=3, clock=clock)
        with caplog.at_level(logging.WARNING, logger="infrastructure.api.api_monitor"):
            for _ in range(3):
                monitor.record_call("players", "GET", 200, 1.0)
        assert any("rate-limit-warning" in r.getMessage() for r in caplog.records)


class TestLogging:
    def test_mask_bearer_tokens(self):
        assert mask_secrets("Authorization: Bearer eyJ.abc-123") == "Authorization: Bearer ***"

    def test_context_is_scoped(self):
        with context(player="alice", platform="steam"):
            assert get_context() == {"player": "alice", "platform": "steam"}
            with context(match_id="m1"):
                assert get_context()["match_id"] == "m1"
            assert "match_id" not in get_context()
        assert get_context() == {}

    def test_json_formatter_includes_extras_and_context(self):
        record = logging.LogRecord("x", logging.INFO, __file__, 1, "fetched Bearer secret", None, None)
        record.endpoint = "players"
        record.status = 200
        record.log_context = {"player": "alice"}

        payload = json.loads(JSONFormatter().format(record))
        assert payload["message"] == "fetched Bearer ***"
        assert payload["endpoint"] == "players"
        assert payload["status"] == 200
        assert payload["context"] == {"player": "alice"}

    def test_lazy_message_not_built_when_disabled(self):
        log = get_logger("tests.lazy")
        logging.getLogger("tests.lazy").setLevel(logging.WARNING)
        built = []
        log.debug(lambda: built.append(1) or "expensive")
        assert built == []


class TestSettings:
    def test_interval_derived_from_quota(self, monkeypatch):
        monkeypatch.setattr(Settings, "MIN_REQUEST_INTERVAL", 0.0)
        monkeypatch.setattr(Settings, "REQUESTS_PER_MINUTE", 10)
        assert Settings.min_request_interval() == 6.0

    def test_explicit_interval_wins(self, monkeypatch):
        monkeypatch.setattr(Settings, "MIN_REQUEST_INTERVAL", 8.0)
        assert Settings.min_request_interval() == 8.0

    def test_validate_requires_key(self, monkeypatch):
        monkeypatch.setattr(Settings, "PUBG_API_KEY", "")
        with pytest.raises(ValueError):
            Settings.validate()
