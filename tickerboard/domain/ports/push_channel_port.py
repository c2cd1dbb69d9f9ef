"""
Port (interface) for a single client's push connection.
Infrastructure adapters (e.g. WebSocketPushChannel) must implement this interface.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional


class IPushChannel(ABC):
    @abstractmethod
    async def send(self, message_type: str, data: Optional[dict[str, Any]] = None) -> None:
        """Push one message of *message_type* to the client.

        Raises whatever the transport raises when the client has gone away;
        callers contain it.
        """
        ...
