"""
Port (interface) for anything that can notice configuration changes.
Implementations: PollingConfigChangeSource (timer-based hash poll) and
SaveTriggeredChangeSource (direct trigger on save). Both feed the same
ConfigChangeDetector, so either can be swapped without touching dispatch.
"""

from abc import ABC, abstractmethod


class IConfigChangeSource(ABC):
    @abstractmethod
    async def start(self) -> None: ...

    @abstractmethod
    async def stop(self) -> None: ...
