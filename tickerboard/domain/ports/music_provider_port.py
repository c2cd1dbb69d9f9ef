"""
Port (interface) for the music-streaming provider (OAuth + search).
Infrastructure adapters (e.g. SpotifyMusicProvider) must implement this interface.
"""

from abc import ABC, abstractmethod


class IMusicProvider(ABC):
    @abstractmethod
    def authorization_url(self) -> str:
        """Raises MusicNotConfiguredError when the client id is missing."""
        ...

    @abstractmethod
    async def exchange_code(self, code: str) -> dict:
        """Exchange an OAuth code for tokens.

        Returns a dict with access_token, refresh_token and expires_in.

        Raises:
            MusicNotConfiguredError: client credentials missing.
            MusicProviderError:      the token endpoint refused the exchange.
        """
        ...

    @abstractmethod
    async def search(self, query: str, access_token: str) -> list[dict]:
        """Search tracks and playlists.

        Raises:
            MusicAuthError: the provider rejected *access_token*.
        """
        ...

    async def aclose(self) -> None:
        """Release pooled connections. Default: nothing to release."""
