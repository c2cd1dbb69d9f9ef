"""
Infrastructure adapter: periodic file check → IConfigChangeSource.

Every interval the source looks at the file's modification time; only when
it moved does it ask the ConfigChangeDetector to compare content hashes. A
missing file is not an error: the source keeps waiting for it to appear.
"""

import asyncio
import contextlib
import logging
from typing import Optional

from tickerboard.application.services.change_detector import ConfigChangeDetector
from tickerboard.domain.ports.config_change_source_port import IConfigChangeSource
from tickerboard.domain.ports.config_store_port import IConfigStore

logger = logging.getLogger(__name__)


class PollingConfigChangeSource(IConfigChangeSource):
    def __init__(
        self,
        store: IConfigStore,
        detector: ConfigChangeDetector,
        interval: float = 1.0,
    ) -> None:
        self._store = store
        self._detector = detector
        self._interval = interval
        self._last_mtime: Optional[int] = None
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def start(self) -> None:
        if self.running:
            return
        self._last_mtime = self._store.modified_at()
        if self._last_mtime is None:
            logger.info("Config file not found yet - waiting for it to be created")
        else:
            logger.info("Config file watcher initialized (every %ss)", self._interval)
        self._task = asyncio.create_task(self._run(), name="tickerboard-config-poll")

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None

    async def poll_once(self) -> bool:
        """One check. Returns True if a broadcast was triggered."""
        mtime = self._store.modified_at()
        if mtime is None:
            self._last_mtime = None
            return False
        if mtime == self._last_mtime:
            return False
        self._last_mtime = mtime
        return await self._detector.check()

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            try:
                await self.poll_once()
            except Exception:
                logger.exception("Error checking config changes")
