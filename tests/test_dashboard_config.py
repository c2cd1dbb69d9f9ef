"""
Unit tests for the configuration entity.
"""

import pytest

from tickerboard.domain.entities.dashboard_config import DashboardConfig, MusicAuth


class TestDashboardConfig:
    def test_defaults(self):
        config = DashboardConfig()
        assert config.tickers == ("AAPL", "TSLA", "MSFT", "GOOGL")
        assert config.weather_location == "New York"
        assert config.refresh_interval == 15000
        assert config.music_auth == MusicAuth()

    def test_round_trip_preserves_unknown_keys(self):
        document = {
            "tickers": ["AAPL", "MSFT"],
            "weatherLocation": "Boston",
            "refreshInterval": 30000,
            "musicAuth": {"enabled": True, "accessToken": "tok"},
            "theme": "dark",
        }
        config = DashboardConfig.from_dict(document)
        assert config.tickers == ("AAPL", "MSFT")
        assert config.music_auth.access_token == "tok"
        dumped = config.to_dict()
        assert dumped["theme"] == "dark"
        assert dumped["musicAuth"]["enabled"] is True
        assert dumped["musicAuth"]["refreshToken"] is None

    def test_legacy_spotify_key_is_read_as_music_auth(self):
        config = DashboardConfig.from_dict({"spotify": {"accessToken": "legacy"}})
        assert config.music_auth.access_token == "legacy"
        assert "spotify" not in config.to_dict()

    def test_missing_fields_use_defaults(self):
        config = DashboardConfig.from_dict({"tickers": ["NVDA"]})
        assert config.weather_location == "New York"
        assert config.refresh_interval == 15000

    @pytest.mark.parametrize("document", [["AAPL"], {"tickers": "AAPL"}])
    def test_bad_shapes_are_rejected(self, document):
        with pytest.raises(ValueError):
            DashboardConfig.from_dict(document)

    def test_ticker_set_ignores_order_and_duplicates(self):
        config = DashboardConfig(tickers=("MSFT", "AAPL", "AAPL"))
        assert config.ticker_set == frozenset({"AAPL", "MSFT"})

    @pytest.mark.parametrize("interval, expected", [(0, 5000), (-100, 5000), (1_000_000, 60000), (30000, 30000)])
    def test_refresh_interval_is_clamped(self, interval, expected):
        assert DashboardConfig.from_dict({"refreshInterval": interval}).refresh_interval == expected

    @pytest.mark.parametrize("music", ["x", ["token"], 42])
    def test_non_object_music_auth_is_rejected(self, music):
        with pytest.raises(ValueError):
            DashboardConfig.from_dict({"musicAuth": music})
        with pytest.raises(ValueError):
            DashboardConfig.from_dict({"spotify": music})
