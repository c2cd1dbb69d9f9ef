"""
Unit tests for the Spotify music adapter.
"""

import asyncio
from urllib.parse import parse_qs, urlparse

import httpx
import pytest

from tickerboard.domain.errors import MusicAuthError, MusicNotConfiguredError, MusicProviderError
from tickerboard.infrastructure.music.spotify_adapter import SpotifyMusicProvider

REDIRECT = "http://localhost:3000/config.html"


def _run(handler, call, client_id="cid", client_secret="secret"):
    async def run():
        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        try:
            provider = SpotifyMusicProvider(client_id, client_secret, REDIRECT, client=client)
            return await call(provider)
        finally:
            await client.aclose()

    return asyncio.run(run())


class TestAuthorization:
    def test_authorization_url_carries_client_and_scopes(self):
        provider = SpotifyMusicProvider("cid", "secret", REDIRECT, client=httpx.AsyncClient())
        query = parse_qs(urlparse(provider.authorization_url()).query)
        assert query["client_id"] == ["cid"]
        assert query["redirect_uri"] == [REDIRECT]
        assert "streaming" in query["scope"][0].split()

    def test_authorization_url_requires_client_id(self):
        provider = SpotifyMusicProvider(None, None, REDIRECT, client=httpx.AsyncClient())
        with pytest.raises(MusicNotConfiguredError):
            provider.authorization_url()

    def test_exchange_code_posts_form_with_basic_auth(self):
        seen = {}

        def handler(request):
            seen["auth"] = request.headers["authorization"]
            seen["body"] = parse_qs(request.content.decode())
            return httpx.Response(200, json={"access_token": "a", "refresh_token": "r", "expires_in": 3600})

        tokens = _run(handler, lambda p: p.exchange_code("the-code"))
        assert tokens["access_token"] == "a"
        assert seen["auth"].startswith("Basic ")
        assert seen["body"]["code"] == ["the-code"]
        assert seen["body"]["grant_type"] == ["authorization_code"]

    def test_exchange_code_failure(self):
        with pytest.raises(MusicProviderError):
            _run(lambda request: httpx.Response(400, json={"error": "invalid_grant"}), lambda p: p.exchange_code("x"))


class TestSearch:
    def test_tracks_and_playlists_are_merged(self):
        def handler(request):
            if request.url.params["type"] == "track":
                return httpx.Response(200, json={"tracks": {"items": [
                    {"id": "t1", "uri": "spotify:track:t1", "name": "Song",
                     "artists": [{"name": "A"}, {"name": "B"}], "album": {"images": [{"url": "x"}]}},
                    {"id": None, "uri": None},
                ]}})
            return httpx.Response(200, json={"playlists": {"items": [
                None,
                {"id": "p1", "uri": "spotify:playlist:p1", "name": "Mix", "owner": {"display_name": "me"}},
            ]}})

        items = _run(handler, lambda p: p.search("focus", "token"))
        assert [i["type"] for i in items] == ["track", "playlist"]
        assert items[0]["artist"] == "A, B"
        assert items[1]["artist"] == "me"

    def test_rejected_token_raises(self):
        with pytest.raises(MusicAuthError):
            _run(lambda request: httpx.Response(401), lambda p: p.search("focus", "expired"))

    def test_other_failures_yield_empty_list(self):
        assert _run(lambda request: httpx.Response(500), lambda p: p.search("focus", "token")) == []
