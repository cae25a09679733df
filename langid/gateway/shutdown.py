"""Graceful shutdown: drain the server, dispose the detector, exit."""
from __future__ import annotations

import asyncio
import logging
import signal
import sys
from typing import Awaitable, Callable, Iterable, Optional, Set

from langid.gateway.lifecycle import DetectorLifecycle

logger = logging.getLogger(__name__)

HANDLED_SIGNALS = (signal.SIGTERM, signal.SIGINT)


class ShutdownCoordinator:
    """Runs the termination sequence for a signal.

    Every trigger runs the full sequence; a second signal during shutdown
    drains again (a no-op once the server is stopped) and finds the detector
    already disposed. Disposal and drain errors are logged, never raised,
    so the process always reaches ``exit_process``.
    """

    def __init__(
        self,
        lifecycle: DetectorLifecycle,
        drain: Optional[Callable[[], Awaitable[None]]] = None,
        exit_process: Callable[[int], None] = sys.exit,
    ) -> None:
        self._lifecycle = lifecycle
        self._drain = drain
        self._exit = exit_process
        self._tasks: Set[asyncio.Task] = set()

    async def shutdown(self, signal_name: str) -> None:
        logger.info("shutting down", extra={"signal": signal_name})
        try:
            if self._drain is not None:
                await self._drain()
        except Exception as exc:
            logger.error("ShutdownCoordinator: drain failed: %s", exc, exc_info=True)
        finally:
            try:
                self._lifecycle.dispose()
            except Exception as exc:
                logger.warning("ShutdownCoordinator: dispose failed (ignored): %s", exc)
            self._exit(0)

    def trigger(self, signal_name: str) -> asyncio.Task:
        """Signal-handler entry point: schedule shutdown() on the running loop."""
        task = asyncio.get_running_loop().create_task(self.shutdown(signal_name))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def wait(self) -> None:
        """Wait for shutdown sequences that are still running."""
        pending = list(self._tasks)
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

    def install(
        self,
        loop: asyncio.AbstractEventLoop,
        signals: Iterable[signal.Signals] = HANDLED_SIGNALS,
    ) -> None:
        for sig in signals:
            loop.add_signal_handler(sig, self.trigger, sig.name)
