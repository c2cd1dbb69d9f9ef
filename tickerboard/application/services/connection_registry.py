"""Live push connections keyed by connection id."""

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from tickerboard.application.services.connection import DashboardConnection


class ConnectionRegistry:
    def __init__(self) -> None:
        self._connections: dict[str, "DashboardConnection"] = {}

    def add(self, connection: "DashboardConnection") -> None:
        self._connections[connection.id] = connection

    def remove(self, connection_id: str) -> Optional["DashboardConnection"]:
        return self._connections.pop(connection_id, None)

    def snapshot(self) -> list["DashboardConnection"]:
        """Copy of the live connections, safe to iterate across awaits."""
        return list(self._connections.values())

    def __len__(self) -> int:
        return len(self._connections)

    def __contains__(self, connection_id: object) -> bool:
        return connection_id in self._connections
