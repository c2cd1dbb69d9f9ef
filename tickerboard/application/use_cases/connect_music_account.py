"""
Use-cases: music-provider OAuth (authorization URL, code exchange).
The exchanged tokens are stored in the configuration's musicAuth block.
"""

import time
from typing import Optional

from tickerboard.domain.entities.dashboard_config import MusicAuth
from tickerboard.domain.errors import MusicNotConfiguredError
from tickerboard.domain.ports.config_store_port import IConfigStore
from tickerboard.domain.ports.music_provider_port import IMusicProvider


class GetMusicAuthUrlUseCase:
    def __init__(self, provider: Optional[IMusicProvider]) -> None:
        self._provider = provider

    def execute(self) -> str:
        if self._provider is None:
            raise MusicNotConfiguredError("Music client ID not configured")
        return self._provider.authorization_url()


class ExchangeMusicCodeUseCase:
    def __init__(self, provider: Optional[IMusicProvider], store: IConfigStore) -> None:
        self._provider = provider
        self._store = store

    async def execute(self, code: str) -> str:
        """Exchange *code* for tokens, persist them and return the access token.

        Raises:
            ValueError: if *code* is blank.
            MusicNotConfiguredError / MusicProviderError: from the provider.
        """
        if not code or not code.strip():
            raise ValueError("No authorization code provided")
        if self._provider is None:
            raise MusicNotConfiguredError("Music credentials not configured")

        tokens = await self._provider.exchange_code(code.strip())
        config = await self._store.load()
        previous = config.music_auth
        music_auth = MusicAuth(
            enabled=previous.enabled,
            access_token=tokens["access_token"],
            refresh_token=tokens.get("refresh_token") or previous.refresh_token,
            token_expires_at=int(time.time() * 1000) + int(tokens.get("expires_in", 3600)) * 1000,
            selected_item=previous.selected_item,
        )
        await self._store.save(config.with_music_auth(music_auth))
        return tokens["access_token"]
