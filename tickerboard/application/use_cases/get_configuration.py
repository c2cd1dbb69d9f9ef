"""
Use-case: read the current dashboard configuration.
Depends only on Domain ports and entities; no infrastructure imports.
"""

from tickerboard.domain.entities.dashboard_config import DashboardConfig
from tickerboard.domain.ports.config_store_port import IConfigStore


class GetConfigurationUseCase:
    def __init__(self, store: IConfigStore) -> None:
        self._store = store

    async def execute(self) -> DashboardConfig:
        return await self._store.load()
