"""
Service lifecycle guards

The hosting application starts and stops tool servers through these hooks.
Each service family (domain-check, general, image-gen, crypto-analysis)
gets one ServiceGuard, so at most one underlying server exists per family
no matter how many times or from how many tasks ensure() is called.

Only the domain-check family is implemented in this package; the others
are registered by whoever provides them via register_service().
"""

import asyncio
import logging
from typing import Awaitable, Callable, Dict, Optional

from .errors import UnknownServiceError
from .server import DomainCheckServer

logger = logging.getLogger(__name__)

SERVICE_FAMILIES = ("domain-check", "general", "image-gen", "crypto-analysis")


class ServiceGuard:
    """
    Idempotent start/stop wrapper around one service.

    ensure() propagates start failures and leaves the guard stopped so the
    next call can retry. shutdown() never raises; stop failures are logged.
    """

    def __init__(
        self,
        name: str,
        start: Callable[[], Awaitable[object]],
        stop: Callable[[], Awaitable[object]],
        probe: Optional[Callable[[], bool]] = None,
    ):
        """
        Args:
            name: Service family name, used in log messages
            start: Coroutine function that starts the service
            stop: Coroutine function that stops the service
            probe: Optional liveness check for a service started elsewhere
        """
        self.name = name
        self._start = start
        self._stop = stop
        self._probe = probe
        self._started = False
        self._lock: Optional[asyncio.Lock] = None
        self._lock_loop: Optional[asyncio.AbstractEventLoop] = None

    def _get_lock(self) -> asyncio.Lock:
        # Guards outlive event loops (one asyncio.run per CLI call); an
        # asyncio.Lock is bound to the loop it was contended on
        loop = asyncio.get_running_loop()
        if self._lock is None or self._lock_loop is not loop:
            self._lock = asyncio.Lock()
            self._lock_loop = loop
        return self._lock

    def is_running(self) -> bool:
        return self._started or (self._probe is not None and self._probe())

    async def ensure(self) -> None:
        """Start the service unless it is already running."""
        if self.is_running():
            return

        async with self._get_lock():
            # Another task may have started it while we waited
            if self.is_running():
                return

            try:
                await self._start()
            except Exception:
                logger.exception(f"[{self.name}] Failed to start")
                raise

            self._started = True
            logger.info(f"[{self.name}] Started")

    async def shutdown(self) -> None:
        """Stop the service if it is running. Never raises."""
        if not self.is_running():
            return

        async with self._get_lock():
            if not self.is_running():
                return

            try:
                await self._stop()
                logger.info(f"[{self.name}] Stopped")
            except Exception:
                logger.exception(f"[{self.name}] Failed to stop")
            finally:
                self._started = False

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r}, running={self.is_running()})"


# =============================================================================
# Registry
# =============================================================================

_services: Dict[str, ServiceGuard] = {}


def register_service(
    name: str,
    start: Callable[[], Awaitable[object]],
    stop: Callable[[], Awaitable[object]],
    probe: Optional[Callable[[], bool]] = None,
) -> ServiceGuard:
    """
    Register the guard for a service family.

    Registering the same family twice returns the existing guard so the
    one-server-per-family rule holds.

    Raises:
        UnknownServiceError: If name is not one of SERVICE_FAMILIES
    """
    if name not in SERVICE_FAMILIES:
        raise UnknownServiceError(
            f"Unknown service family: {name}. Valid options: {list(SERVICE_FAMILIES)}"
        )

    if name in _services:
        return _services[name]

    guard = ServiceGuard(name, start, stop, probe)
    _services[name] = guard
    return guard


def get_service(name: str) -> ServiceGuard:
    """
    Look up a registered service family.

    Raises:
        UnknownServiceError: If nothing is registered under name
    """
    try:
        return _services[name]
    except KeyError:
        raise UnknownServiceError(
            f"Unknown service: {name}. Registered: {sorted(_services)}"
        ) from None


# =============================================================================
# Domain-check family
# =============================================================================

domain_check_server = DomainCheckServer()

register_service(
    "domain-check",
    start=domain_check_server.start,
    stop=domain_check_server.stop,
    probe=lambda: domain_check_server.is_running,
)


async def ensure_domain_check_server() -> DomainCheckServer:
    """Start the domain-check server if not already running."""
    await get_service("domain-check").ensure()
    return domain_check_server


async def shutdown_domain_check_server() -> None:
    """Stop the domain-check server."""
    await get_service("domain-check").shutdown()


def is_domain_check_server_running() -> bool:
    """Check if the domain-check server is running."""
    return get_service("domain-check").is_running()
