"""
IConfigChangeSource that fires on explicit saves.

Writes go through save(); once the document is on disk the detector adopts
the new hash and broadcasts immediately, so the polling source will not
fire a second time for the same content.
"""

from tickerboard.application.services.change_detector import ConfigChangeDetector
from tickerboard.domain.entities.dashboard_config import DashboardConfig
from tickerboard.domain.ports.config_change_source_port import IConfigChangeSource
from tickerboard.domain.ports.config_store_port import IConfigStore


class SaveTriggeredChangeSource(IConfigChangeSource):
    def __init__(self, store: IConfigStore, detector: ConfigChangeDetector) -> None:
        self._store = store
        self._detector = detector
        self._active = False

    async def start(self) -> None:
        self._active = True

    async def stop(self) -> None:
        self._active = False

    async def save(self, config: DashboardConfig) -> None:
        await self._store.save(config)
        if self._active:
            await self._detector.record_save()
