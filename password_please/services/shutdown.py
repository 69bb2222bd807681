"""Graceful shutdown coordinator.

Waits for a shutdown request, then writes the password counter to disk one
last time. When the service is run from the command line the coordinator owns
SIGINT/SIGTERM: the signal starts the flush, and on_terminate then tells
uvicorn to exit. Under any other ASGI server the lifespan shutdown requests it.

States::

    RUNNING --signal or request_shutdown()--> FLUSHING --flush done--> TERMINATED

Usage in the application lifespan::

    coordinator = ShutdownCoordinator(password_service, on_terminate=stop_server)
    coordinator.install_signal_handlers()
    task = asyncio.create_task(coordinator.run())
    ...
    coordinator.request_shutdown()
    await task
"""
import asyncio
import logging
import signal
from enum import Enum
from typing import Callable, Iterable, Optional

from password_please.services.password_service import PasswordService

logger = logging.getLogger(__name__)

DEFAULT_SIGNALS = (signal.SIGINT, signal.SIGTERM)


class ShutdownState(str, Enum):
    """Shutdown lifecycle state."""

    RUNNING = "running"
    FLUSHING = "flushing"
    TERMINATED = "terminated"


class ShutdownCoordinator:
    """Runs the final counter flush exactly once when shutdown is requested.

    on_terminate is called after the flush, e.g. to tell the HTTP server to exit.
    """

    def __init__(
        self,
        service: PasswordService,
        on_terminate: Optional[Callable[[], None]] = None,
    ) -> None:
        self._service = service
        self._on_terminate = on_terminate
        self._requested = asyncio.Event()
        self._state = ShutdownState.RUNNING
        self._signals: list[int] = []
        self.received_signal: Optional[int] = None

    @property
    def state(self) -> ShutdownState:
        return self._state

    @property
    def is_shutting_down(self) -> bool:
        return self._requested.is_set()

    def install_signal_handlers(self, signals: Iterable[int] = DEFAULT_SIGNALS) -> None:
        """Route the given signals to request_shutdown() on the running loop."""
        loop = asyncio.get_running_loop()
        for sig in signals:
            loop.add_signal_handler(sig, self.request_shutdown, sig)
            self._signals.append(sig)

    def remove_signal_handlers(self) -> None:
        """Restore default handling for the signals installed earlier."""
        loop = asyncio.get_running_loop()
        for sig in self._signals:
            loop.remove_signal_handler(sig)
        self._signals.clear()

    def request_shutdown(self, signum: Optional[int] = None) -> None:
        """Request shutdown. Only the first request has an effect."""
        if self._requested.is_set():
            return
        self.received_signal = signum
        if signum is not None:
            logger.info("Received %s, shutting down", signal.Signals(signum).name)
        else:
            logger.info("Shutdown requested")
        self._requested.set()

    async def wait(self) -> None:
        """Block until shutdown has been requested."""
        await self._requested.wait()

    async def run(self) -> None:
        """Wait for a shutdown request, then flush the counter."""
        await self.wait()
        self._state = ShutdownState.FLUSHING
        if self._service.store.enabled:
            logger.info("Saving counter value %d", self._service.counter)
            await self._service.flush_counter()
        self._state = ShutdownState.TERMINATED
        logger.info("Shutdown complete")
        if self._on_terminate is not None:
            self._on_terminate()
