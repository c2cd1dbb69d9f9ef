"""Use-case: search the music provider for tracks and playlists."""

from typing import Optional

from tickerboard.domain.errors import MusicNotConfiguredError
from tickerboard.domain.ports.music_provider_port import IMusicProvider


class SearchMusicUseCase:
    def __init__(self, provider: Optional[IMusicProvider]) -> None:
        self._provider = provider

    async def execute(self, query: str, access_token: str) -> list[dict]:
        """
        Raises:
            ValueError: if *query* is blank.
            MusicAuthError: if the provider rejects *access_token*.
        """
        if not query or not query.strip():
            raise ValueError("Query parameter required")
        if self._provider is None:
            raise MusicNotConfiguredError("Music client ID not configured")
        return await self._provider.search(query.strip(), access_token)
