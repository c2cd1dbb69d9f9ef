"""
Infrastructure adapter: Spotify Web API → IMusicProvider.

Handles the authorization-code OAuth flow and the combined track/playlist
search used by the config page. Playback control happens in the browser and
is not proxied.
"""

import asyncio
import logging
from typing import Optional
from urllib.parse import urlencode

import httpx

from tickerboard.domain.errors import MusicAuthError, MusicNotConfiguredError, MusicProviderError
from tickerboard.domain.ports.music_provider_port import IMusicProvider

logger = logging.getLogger(__name__)

SCOPES = (
    "user-read-playback-state",
    "user-modify-playback-state",
    "user-read-currently-playing",
    "streaming",
    "playlist-read-private",
    "playlist-read-collaborative",
)


class SpotifyMusicProvider(IMusicProvider):
    AUTHORIZE_URL = "https://accounts.spotify.com/authorize"
    TOKEN_URL = "https://accounts.spotify.com/api/token"
    SEARCH_URL = "https://api.spotify.com/v1/search"
    SEARCH_LIMIT = 10

    def __init__(
        self,
        client_id: Optional[str],
        client_secret: Optional[str],
        redirect_uri: str,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 10.0,
    ) -> None:
        self._client_id = client_id
        self._client_secret = client_secret
        self._redirect_uri = redirect_uri
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)

    def authorization_url(self) -> str:
        if not self._client_id:
            raise MusicNotConfiguredError("Spotify client ID not configured")
        query = urlencode(
            {
                "client_id": self._client_id,
                "response_type": "code",
                "redirect_uri": self._redirect_uri,
                "scope": " ".join(SCOPES),
            }
        )
        return f"{self.AUTHORIZE_URL}?{query}"

    async def exchange_code(self, code: str) -> dict:
        if not self._client_id or not self._client_secret:
            raise MusicNotConfiguredError("Spotify credentials not configured")
        try:
            response = await self._client.post(
                self.TOKEN_URL,
                data={
                    "grant_type": "authorization_code",
                    "code": code,
                    "redirect_uri": self._redirect_uri,
                },
                auth=(self._client_id, self._client_secret),
            )
            response.raise_for_status()
            tokens = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.error("Error exchanging Spotify code: %s", exc)
            raise MusicProviderError("Failed to exchange authorization code") from exc
        if "access_token" not in tokens:
            raise MusicProviderError("Token response did not include an access token")
        return tokens

    async def search(self, query: str, access_token: str) -> list[dict]:
        tracks, playlists = await asyncio.gather(
            self._search(query, "track", access_token),
            self._search(query, "playlist", access_token),
        )
        items = [_track_item(t) for t in tracks if t and t.get("id") and t.get("uri")]
        items += [_playlist_item(p) for p in playlists if p and p.get("id") and p.get("uri")]
        return items

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def _search(self, query: str, kind: str, access_token: str) -> list[dict]:
        """One search type. Any failure but a rejected token yields no items."""
        try:
            response = await self._client.get(
                self.SEARCH_URL,
                params={"q": query, "type": kind, "limit": self.SEARCH_LIMIT},
                headers={"Authorization": f"Bearer {access_token}"},
            )
        except httpx.HTTPError as exc:
            logger.warning("Spotify %s search failed: %s", kind, exc)
            return []
        if response.status_code == 401:
            raise MusicAuthError("Invalid or expired token")
        if response.status_code != 200:
            logger.warning("Spotify %s search answered HTTP %d", kind, response.status_code)
            return []
        try:
            return response.json().get(f"{kind}s", {}).get("items") or []
        except (ValueError, AttributeError):
            return []


def _track_item(track: dict) -> dict:
    artists = track.get("artists") or []
    return {
        "id": track["id"],
        "type": "track",
        "name": track.get("name") or "Unknown Track",
        "artist": ", ".join(a.get("name", "") for a in artists) or "Unknown Artist",
        "artists": artists,
        "uri": track["uri"],
        "images": (track.get("album") or {}).get("images") or [],
    }


def _playlist_item(playlist: dict) -> dict:
    owner = (playlist.get("owner") or {}).get("display_name") or "Spotify"
    return {
        "id": playlist["id"],
        "type": "playlist",
        "name": playlist.get("name") or "Unknown Playlist",
        "artist": owner,
        "artists": [{"name": owner}],
        "uri": playlist["uri"],
        "images": playlist.get("images") or [],
    }
