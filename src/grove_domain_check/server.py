"""
Domain-check tool server

Owns the long-lived pieces behind the tool-invocation channel: one pooled
HTTP client for DoH/RDAP, the result cache, and the tool registry. The
channel itself (the transport carrying tool calls) lives outside this
package; it calls list_tools() and call_tool().
"""

import logging
from typing import Any, Dict, List, Optional

import httpx

from .cache import TTLCache
from .checker import AvailabilityResult, DomainVerifier
from .config import Config, config as default_config
from .errors import ServerNotRunningError, ToolNotFoundError
from .tools import TOOLS, ToolDefinition, ToolHandler

logger = logging.getLogger(__name__)

SERVER_NAME = "grove-domain-check"
SERVER_VERSION = "0.1.0"


class DomainCheckServer:
    """
    Tool server for domain availability checks.

    The cache outlives start/stop cycles so a restart doesn't throw away
    fresh results.
    """

    def __init__(
        self,
        config: Optional[Config] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize server (does not open any connections).

        Args:
            config: Configuration (defaults to the module singleton)
            transport: Optional httpx transport, used by tests to fake upstreams
        """
        self.config = config or default_config
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None
        self._verifier: Optional[DomainVerifier] = None
        self.cache: TTLCache[AvailabilityResult] = TTLCache(
            max_entries=self.config.cache.max_entries
        )
        self._tools: Dict[str, tuple[ToolDefinition, ToolHandler]] = {
            definition.name: (definition, handler) for definition, handler in TOOLS
        }

    @property
    def is_running(self) -> bool:
        return self._client is not None

    @property
    def verifier(self) -> DomainVerifier:
        if self._verifier is None:
            raise ServerNotRunningError(f"{SERVER_NAME} is not running")
        return self._verifier

    async def start(self) -> bool:
        """
        Open the HTTP client and get ready to serve calls.

        Returns:
            True if started, False if already running
        """
        if self._client is not None:
            return False

        self._client = httpx.AsyncClient(
            headers={"User-Agent": self.config.endpoints.user_agent},
            transport=self._transport,
        )
        self._verifier = DomainVerifier(client=self._client, cache=self.cache, config=self.config)
        logger.debug(f"{SERVER_NAME} {SERVER_VERSION} started")
        return True

    async def stop(self) -> None:
        """Close the HTTP client. Safe to call when not running."""
        client, self._client = self._client, None
        self._verifier = None
        if client is not None:
            await client.aclose()
            logger.debug(f"{SERVER_NAME} stopped")

    def list_tools(self) -> List[Dict[str, Any]]:
        """Descriptors for every registered tool."""
        return [definition.to_dict() for definition, _ in self._tools.values()]

    async def call_tool(self, name: str, arguments: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Dispatch a tool call.

        Raises:
            ToolNotFoundError: Unknown tool name
            ToolArgumentError: Malformed arguments
            ServerNotRunningError: Server not started
        """
        if name not in self._tools:
            raise ToolNotFoundError(f"Tool not found: {name}")

        _, handler = self._tools[name]
        return await handler(arguments or {}, self.verifier)
