"""
Application service: fan a configuration change out to every live connection.

dispatch() first tells every client "configChanged" (so the UI can show a
transient status), waits a short settling delay for the writer to finish,
then forces a fresh update on every connection still registered.
"""

import asyncio
import logging

from tickerboard.application.services.connection_registry import ConnectionRegistry

logger = logging.getLogger(__name__)


class BroadcastDispatcher:
    SETTLE_DELAY_SECONDS: float = 0.2

    def __init__(
        self,
        registry: ConnectionRegistry,
        settle_delay: float = SETTLE_DELAY_SECONDS,
    ) -> None:
        self._registry = registry
        self._settle_delay = settle_delay
        self._pending: set[asyncio.Task] = set()

    def trigger(self) -> asyncio.Task:
        """Schedule dispatch() in the background and return its task."""
        task = asyncio.create_task(self.dispatch(), name="tickerboard-broadcast")
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def dispatch(self) -> int:
        """Notify and force-refresh every live connection.

        Returns:
            Number of connections that received a fresh update.
        """
        connections = self._registry.snapshot()
        logger.info("Broadcasting config change to %d client(s)", len(connections))
        await asyncio.gather(*(c.notify_config_changed() for c in connections))

        await asyncio.sleep(self._settle_delay)

        # Connections may have left during the settling delay.
        live = self._registry.snapshot()
        results = await asyncio.gather(*(c.send_update(force_fresh=True) for c in live))
        return sum(1 for sent in results if sent)

    async def aclose(self) -> None:
        for task in list(self._pending):
            task.cancel()
        if self._pending:
            await asyncio.gather(*self._pending, return_exceptions=True)
