"""
Port (interface) for the persisted dashboard configuration.
Infrastructure adapters (e.g. JsonFileConfigStore) must implement this interface.
"""

from abc import ABC, abstractmethod
from typing import Optional

from tickerboard.domain.entities.dashboard_config import DashboardConfig


class IConfigStore(ABC):
    @abstractmethod
    async def load(self) -> DashboardConfig:
        """Return the current configuration.

        A missing document is created with defaults; an unreadable one falls
        back to the last good configuration. Never raises for either case.
        """
        ...

    @abstractmethod
    async def save(self, config: DashboardConfig) -> None:
        """Replace the whole document.

        Raises:
            ConfigStoreError: if the document could not be written.
        """
        ...

    @abstractmethod
    async def content_hash(self) -> Optional[str]:
        """Hash of the canonical document content, or None if missing/unparseable."""
        ...

    @abstractmethod
    def modified_at(self) -> Optional[int]:
        """Modification marker (ns) of the stored document, or None if missing."""
        ...
