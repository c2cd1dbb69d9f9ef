"""
Application service: decide whether the stored configuration really changed.

Change sources (file polling, save hooks) call check() or record_save(); the
detector compares content hashes so that touching or rewriting the file with
identical content never re-triggers a broadcast.
"""

import logging
from typing import Optional

from tickerboard.application.services.broadcast_dispatcher import BroadcastDispatcher
from tickerboard.domain.ports.config_store_port import IConfigStore

logger = logging.getLogger(__name__)


class ConfigChangeDetector:
    def __init__(self, store: IConfigStore, dispatcher: BroadcastDispatcher) -> None:
        self._store = store
        self._dispatcher = dispatcher
        self._last_hash: Optional[str] = None

    @property
    def last_hash(self) -> Optional[str]:
        return self._last_hash

    async def prime(self) -> None:
        """Record the current hash without broadcasting."""
        self._last_hash = await self._store.content_hash()

    async def check(self) -> bool:
        """Compare the stored content with the last seen hash.

        Returns:
            True if a broadcast was triggered.
        """
        current = await self._store.content_hash()
        if current is None:
            return False
        if self._last_hash is None:
            logger.info("Config file detected")
            self._last_hash = current
            return False
        if current == self._last_hash:
            return False

        logger.info("Config file changed - notifying all clients")
        self._last_hash = current
        self._dispatcher.trigger()
        return True

    async def record_save(self) -> None:
        """Direct trigger: adopt the just-written hash and broadcast now."""
        self._last_hash = await self._store.content_hash()
        logger.info("Config saved - notifying all clients")
        self._dispatcher.trigger()
