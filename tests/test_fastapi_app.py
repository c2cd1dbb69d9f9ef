"""
Integration tests for the FastAPI entry point, run against a context built
from fake ports.
"""

import time

import httpx
import pytest
from fastapi.testclient import TestClient

from fakes import MARKET_CLOSED_TIME, FakeConfigStore, FakeStockProvider, FakeWeatherProvider, MutableClock
from tickerboard.application.context import DashboardContext
from tickerboard.domain.entities.dashboard_config import DashboardConfig
from tickerboard.infrastructure.entrypoints.fastapi_app import create_app
from tickerboard.infrastructure.music.spotify_adapter import SpotifyMusicProvider
from tickerboard.infrastructure.settings import Settings


def _spotify_handler(request: httpx.Request) -> httpx.Response:
    if request.url.path == "/api/token":
        return httpx.Response(200, json={"access_token": "new-token", "refresh_token": "r", "expires_in": 3600})
    if request.headers.get("authorization") == "Bearer expired":
        return httpx.Response(401)
    if request.url.params["type"] == "track":
        return httpx.Response(200, json={"tracks": {"items": [{"id": "t1", "uri": "spotify:track:t1", "name": "Song"}]}})
    return httpx.Response(200, json={"playlists": {"items": []}})


@pytest.fixture
def app_store():
    return FakeConfigStore(DashboardConfig(tickers=("AAPL",)))


@pytest.fixture
def app_provider():
    return FakeStockProvider(prices={"AAPL": 190.0, "MSFT": 410.0})


@pytest.fixture
def context(app_store, app_provider):
    music = SpotifyMusicProvider(
        "cid",
        "secret",
        "http://localhost:3000/config.html",
        client=httpx.AsyncClient(transport=httpx.MockTransport(_spotify_handler)),
    )
    return DashboardContext(
        store=app_store,
        stock_provider=app_provider,
        weather_provider=FakeWeatherProvider(),
        music_provider=music,
        clock=MutableClock(MARKET_CLOSED_TIME),
        settle_delay=0,
    )


@pytest.fixture
def client(context):
    with TestClient(create_app(context, Settings(finnhub_api_key="k"))) as test_client:
        yield test_client


class TestHttpRoutes:
    def test_health(self, client):
        assert client.get("/health").json() == {"status": "ok", "connections": 0}

    def test_get_config(self, client):
        body = client.get("/api/config").json()
        assert body["tickers"] == ["AAPL"]
        assert body["refreshInterval"] == 15000

    def test_save_config_normalizes_and_persists(self, client, app_store):
        payload = {"tickers": [" msft ", "aapl"], "weatherLocation": "Boston", "refreshInterval": 30000, "theme": "dark"}
        response = client.post("/api/config", json=payload)

        assert response.status_code == 200
        assert response.json()["config"]["tickers"] == ["MSFT", "AAPL"]
        assert app_store.saved[-1].tickers == ("MSFT", "AAPL")
        assert app_store.saved[-1].extra == {"theme": "dark"}

    def test_save_config_rejects_out_of_range_interval(self, client, app_store):
        payload = {"tickers": ["AAPL"], "weatherLocation": "Boston", "refreshInterval": 100}
        assert client.post("/api/config", json=payload).status_code == 422
        assert app_store.saved == []

    def test_save_config_rejects_blank_symbol(self, client):
        payload = {"tickers": ["AAPL", "  "], "weatherLocation": "Boston", "refreshInterval": 15000}
        response = client.post("/api/config", json=payload)
        assert response.status_code == 400

    def test_stocks_report_cache_provenance(self, client):
        first = client.get("/api/stocks").json()
        second = client.get("/api/stocks").json()
        assert first["fromCache"] is False
        assert second["fromCache"] is True
        assert second["marketStatus"]["isOpen"] is False
        assert [s["symbol"] for s in second["stocks"]] == ["AAPL"]

    def test_weather(self, client):
        assert client.get("/api/weather").json()["location"] == "New York, United States"

    def test_market_status(self, client):
        assert client.get("/api/market-status").json()["message"] == "Market Closed"


class TestMusicRoutes:
    def test_auth_url(self, client):
        assert client.get("/api/music/auth-url").json()["authUrl"].startswith("https://accounts.spotify.com/authorize?")

    def test_callback_stores_tokens(self, client, app_store):
        response = client.post("/api/music/callback", json={"code": "abc"})
        assert response.json() == {"accessToken": "new-token"}
        assert app_store.config.music_auth.access_token == "new-token"
        assert app_store.config.music_auth.refresh_token == "r"

    def test_callback_requires_code(self, client):
        assert client.post("/api/music/callback", json={}).status_code == 400

    def test_search(self, client):
        response = client.get("/api/music/search", params={"q": "focus"}, headers={"Authorization": "Bearer ok"})
        assert [item["id"] for item in response.json()["items"]] == ["t1"]

    def test_search_requires_query_and_token(self, client):
        assert client.get("/api/music/search").status_code == 400
        assert client.get("/api/music/search", params={"q": "focus"}).status_code == 401

    def test_search_with_expired_token(self, client):
        response = client.get("/api/music/search", params={"q": "focus"}, headers={"Authorization": "Bearer expired"})
        assert response.status_code == 401

    def test_music_disabled(self, app_store, app_provider):
        context = DashboardContext(app_store, app_provider, FakeWeatherProvider(), clock=MutableClock(MARKET_CLOSED_TIME))
        with TestClient(create_app(context)) as client:
            assert client.get("/api/music/auth-url").status_code == 500


class TestWebSocket:
    def test_first_message_is_update(self, client):
        with client.websocket_connect("/ws") as ws:
            message = ws.receive_json()
            assert message["type"] == "update"
            assert message["data"]["stocks"][0]["symbol"] == "AAPL"
            assert message["data"]["marketStatus"]["isOpen"] is False
            assert client.get("/health").json()["connections"] == 1

    def test_request_update(self, client, app_provider):
        with client.websocket_connect("/ws") as ws:
            ws.receive_json()
            ws.send_json({"type": "requestUpdate"})
            assert ws.receive_json()["type"] == "update"
        assert app_provider.quote_calls("AAPL") == 2

    def test_client_config_changed_refetches(self, client, app_store, app_provider):
        with client.websocket_connect("/ws") as ws:
            ws.receive_json()
            app_store.set(tickers=("AAPL", "MSFT"))
            ws.send_json({"type": "configChanged"})
            update = ws.receive_json()
        assert [s["symbol"] for s in update["data"]["stocks"]] == ["AAPL", "MSFT"]

    def test_save_broadcasts_to_connected_clients(self, client):
        with client.websocket_connect("/ws") as ws:
            ws.receive_json()
            payload = {"tickers": ["MSFT"], "weatherLocation": "Boston", "refreshInterval": 15000}
            assert client.post("/api/config", json=payload).status_code == 200
            assert ws.receive_json() == {"type": "configChanged"}
            update = ws.receive_json()
        assert update["type"] == "update"
        assert [s["symbol"] for s in update["data"]["stocks"]] == ["MSFT"]
        assert update["data"]["weather"]["location"] == "Boston, United States"

    def test_unknown_messages_are_ignored(self, client):
        with client.websocket_connect("/ws") as ws:
            ws.receive_json()
            ws.send_text("not json")
            ws.send_json({"type": "bogus"})
            ws.send_json({"type": "requestUpdate"})
            assert ws.receive_json()["type"] == "update"

    def test_disconnect_unregisters(self, client, context):
        with client.websocket_connect("/ws") as ws:
            ws.receive_json()
        # The server notices the close on its next receive.
        for _ in range(50):
            if len(context.registry) == 0:
                break
            time.sleep(0.01)
        assert len(context.registry) == 0
