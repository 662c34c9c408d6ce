# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#                github.com/dedalus-labs/mcpbase-python/LICENSE
# ==============================================================================

"""Abstract MCP server built on the reference SDK.

:class:`BaseMCPServer` wires configuration, transport selection and the tool
and resource registries into the SDK's low-level :class:`~mcp.server.lowlevel.Server`.
Concrete servers subclass it and declare their components in
:meth:`BaseMCPServer.register_components`::

    class GreetingsServer(BaseMCPServer):
        def register_components(self) -> None:
            self.register_tool("greet", {"input_schema": {"name": str}}, self.greet)

        def greet(self, params):
            return f"Hello, {params.name}!"

    server = GreetingsServer({"name": "greetings", "version": "1.0.0"})
    await server.start()
"""

from __future__ import annotations

from abc import ABC, abstractmethod
import base64
from collections.abc import Mapping
from dataclasses import dataclass
import enum
import logging
from typing import TYPE_CHECKING, Any

from mcp import types
from mcp.server.lowlevel.helper_types import ReadResourceContents
from mcp.server.lowlevel.server import NotificationOptions, Server, request_ctx
from mcp.shared.exceptions import McpError

from .services import ResourcesService, ToolsService
from .transports import BaseTransport, StdioTransport, StreamableHTTPTransport, select_transport
from ..config import ServerConfig, TransportMode, validate_config
from ..errors import TransportNotInitializedError
from ..metrics import MetricsSink, NullMetrics
from ..resource import ResourceHandler, ResourceOptions, ResourceSpec
from ..tool import ToolHandler, ToolOptions, ToolSpec
from ..utils import get_logger


if TYPE_CHECKING:  # pragma: no cover - typing only
    from mcp.server.models import InitializationOptions


class ServerState(str, enum.Enum):
    """Lifecycle states; transitions only ever move forward."""

    CONSTRUCTED = "constructed"
    REGISTERED = "registered"
    CONNECTED = "connected"


@dataclass(frozen=True, slots=True)
class ServerMetadata:
    """Read-only snapshot of the identity a server was configured with."""

    name: str
    version: str
    transport_mode: TransportMode
    host: str
    port: int

    @classmethod
    def from_config(cls, config: ServerConfig) -> ServerMetadata:
        return cls(
            name=config.name,
            version=config.version,
            transport_mode=config.transport_mode,
            host=config.host,
            port=config.port,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "version": self.version,
            "transportMode": self.transport_mode,
            "host": self.host,
            "port": self.port,
        }


class BaseMCPServer(Server[Any, Any], ABC):
    """Base class for configuration-driven MCP servers.

    Construction validates the configuration, installs the protocol handlers,
    selects exactly one transport and then calls :meth:`register_components`.
    The transport is fixed for the lifetime of the instance.

    Args:
        config: A :class:`~mcpbase.config.ServerConfig` or a mapping of its
            fields (``transportMode`` style keys are accepted).
        metrics: Sink receiving per-call measurements. Defaults to
            :class:`~mcpbase.metrics.NullMetrics`.
        logger: Logger for lifecycle and call events. Defaults to
            ``mcpbase.server.<name>``.
        **overrides: Individual config fields overriding *config*.

    Raises:
        ValidationError: If the configuration is invalid.
        TransportMismatchError: If ``strict_transport`` is set and the
            supplied transport does not fit the declared mode or already
            belongs to another server.
    """

    def __init__(
        self,
        config: ServerConfig | Mapping[str, Any] | None = None,
        *,
        metrics: MetricsSink | None = None,
        logger: logging.Logger | None = None,
        **overrides: Any,
    ) -> None:
        validated = validate_config(config, **overrides)
        super().__init__(validated.name, version=validated.version)

        self._config = validated
        self._logger = logger or get_logger(f"mcpbase.server.{validated.name}")
        self._metrics: MetricsSink = metrics or NullMetrics()
        self._state = ServerState.CONSTRUCTED
        self._pending_tools_changed = False
        self._pending_resources_changed = False

        self.tools: ToolsService = ToolsService(
            logger=self._logger, metrics=self._metrics, on_change=self._record_tools_mutation
        )
        self.resources: ResourcesService = ResourcesService(
            logger=self._logger, on_change=self._record_resources_mutation
        )
        self._install_handlers()

        transport = select_transport(validated, logger=self._logger)
        transport.bind(self)
        self._stdio_transport: StdioTransport | None = transport if isinstance(transport, StdioTransport) else None
        self._http_transport: StreamableHTTPTransport | None = (
            transport if isinstance(transport, StreamableHTTPTransport) else None
        )

        self.register_components()
        self._state = ServerState.REGISTERED

    # //////////////////////////////////////////////////////////////////
    # Extension point
    # //////////////////////////////////////////////////////////////////

    @abstractmethod
    def register_components(self) -> None:
        """Declare this server's tools and resources. Called once, during construction."""

    # //////////////////////////////////////////////////////////////////
    # Registration
    # //////////////////////////////////////////////////////////////////

    def register_tool(self, name: str, options: ToolOptions | None, handler: ToolHandler) -> ToolSpec:
        """Register a tool.

        Allowed at any time, including from inside another tool's handler.

        Raises:
            DuplicateNameError: If *name* is already registered.
            SchemaError: If a schema cannot be turned into a validator.
        """
        return self.tools.register(name, options, handler)

    def register_resource(
        self, name: str, uri: str, options: ResourceOptions | None, handler: ResourceHandler
    ) -> ResourceSpec:
        """Register a read-only resource.

        Raises:
            DuplicateNameError: If *name* or *uri* is already registered.
            ValidationError: If *uri* is not an absolute URI.
        """
        return self.resources.register(name, uri, options, handler)

    @property
    def tool_names(self) -> list[str]:
        return self.tools.tool_names

    @property
    def resource_names(self) -> list[str]:
        return self.resources.names

    async def invoke_tool(self, tool_name: str, /, **arguments: Any) -> types.CallToolResult:
        return await self.tools.call_tool(tool_name, arguments)

    async def invoke_resource(self, uri: str) -> types.ReadResourceResult:
        return await self.resources.read(uri)

    # //////////////////////////////////////////////////////////////////
    # Accessors
    # //////////////////////////////////////////////////////////////////

    @property
    def config(self) -> ServerConfig:
        return self._config

    @property
    def state(self) -> ServerState:
        return self._state

    @property
    def metrics(self) -> MetricsSink:
        return self._metrics

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    def get_stdio_transport(self) -> StdioTransport | None:
        return self._stdio_transport

    def get_http_transport(self) -> StreamableHTTPTransport | None:
        return self._http_transport

    def get_transport(self) -> BaseTransport:
        """Return the transport for the declared mode.

        Raises:
            TransportNotInitializedError: If that transport is absent.
        """
        if self._config.transport_mode == "streamable-http":
            transport: BaseTransport | None = self._http_transport
        else:
            transport = self._stdio_transport
        if transport is None:
            raise TransportNotInitializedError(
                f"No transport initialized for transport mode {self._config.transport_mode!r}"
            )
        return transport

    def get_metadata(self) -> ServerMetadata:
        return ServerMetadata.from_config(self._config)

    # //////////////////////////////////////////////////////////////////
    # Lifecycle
    # //////////////////////////////////////////////////////////////////

    async def connect(self) -> None:
        """Bind the selected transport to the protocol engine.

        For STDIO this serves until the peer closes ``stdin``; for Streamable
        HTTP it prepares the session manager and returns.  Calls after the
        first successful one do nothing.

        Raises:
            TransportNotInitializedError: If the declared mode has no transport.
        """
        if self._state is ServerState.CONNECTED:
            self._logger.debug("connect() called on %s while already connected; ignoring", self.name)
            return

        transport = self.get_transport()
        self._state = ServerState.CONNECTED
        try:
            await transport.connect(self)
        except BaseException:
            self._state = ServerState.REGISTERED
            raise

    async def start(self) -> None:
        """Announce the server and :meth:`connect`. Never binds a socket."""
        config = self._config
        if config.transport_mode == "streamable-http":
            self._logger.info("Starting %s v%s on http://%s:%s", config.name, config.version, config.host, config.port)
        else:
            self._logger.info("Starting %s v%s in stdio mode", config.name, config.version)
        await self.connect()

    # //////////////////////////////////////////////////////////////////
    # Notifications
    # //////////////////////////////////////////////////////////////////

    async def notify_tools_list_changed(self) -> None:
        self._pending_tools_changed = False
        await self._send_on_current_session(types.ToolListChangedNotification(params=None))

    async def notify_resources_list_changed(self) -> None:
        self._pending_resources_changed = False
        await self._send_on_current_session(types.ResourceListChangedNotification(params=None))

    async def flush_pending_notifications(self) -> None:
        """Send list-changed notifications for registrations made since connecting."""
        if self._pending_tools_changed:
            await self.notify_tools_list_changed()
        if self._pending_resources_changed:
            await self.notify_resources_list_changed()

    def _record_tools_mutation(self) -> None:
        if self._state is ServerState.CONNECTED:
            self._pending_tools_changed = True

    def _record_resources_mutation(self) -> None:
        if self._state is ServerState.CONNECTED:
            self._pending_resources_changed = True

    async def _send_on_current_session(
        self, notification: types.ToolListChangedNotification | types.ResourceListChangedNotification
    ) -> None:
        try:
            context = request_ctx.get()
        except LookupError:
            self._logger.debug("No active request; %s not sent", notification.method)
            return
        try:
            await context.session.send_notification(
                types.ServerNotification(notification), related_request_id=context.request_id
            )
        except Exception:
            self._logger.warning("Failed to send %s", notification.method, exc_info=True)

    # //////////////////////////////////////////////////////////////////
    # Initialization & capability negotiation
    # //////////////////////////////////////////////////////////////////

    def create_initialization_options(
        self,
        notification_options: NotificationOptions | None = None,
        experimental_capabilities: dict[str, dict[str, Any]] | None = None,
    ) -> InitializationOptions:
        return super().create_initialization_options(
            notification_options=notification_options
            or NotificationOptions(tools_changed=True, resources_changed=True),
            experimental_capabilities=experimental_capabilities or {},
        )

    # //////////////////////////////////////////////////////////////////
    # Protocol handlers
    # //////////////////////////////////////////////////////////////////

    def _install_handlers(self) -> None:
        @self.list_tools()
        async def _list_tools() -> list[types.Tool]:
            return await self.tools.list_tools()

        @self.call_tool(validate_input=False)
        async def _call_tool(
            name: str, arguments: dict[str, Any] | None
        ) -> tuple[list[types.ContentBlock], dict[str, Any] | None]:
            try:
                result = await self.tools.call_tool(name, arguments)
            finally:
                await self.flush_pending_notifications()

            if result.isError:
                message = "Tool execution failed"
                if result.content:
                    first = result.content[0]
                    if isinstance(first, types.TextContent) and first.text:
                        message = first.text
                raise McpError(types.ErrorData(code=types.INTERNAL_ERROR, message=message))

            return list(result.content), result.structuredContent

        @self.list_resources()
        async def _list_resources() -> list[types.Resource]:
            return await self.resources.list_resources()

        @self.read_resource()
        async def _read_resource(uri: types.AnyUrl) -> list[ReadResourceContents]:
            result = await self.resources.read(str(uri))
            converted: list[ReadResourceContents] = []
            for item in result.contents:
                if isinstance(item, types.TextResourceContents):
                    converted.append(ReadResourceContents(content=item.text, mime_type=item.mimeType))
                elif isinstance(item, types.BlobResourceContents):
                    data = base64.b64decode(item.blob)
                    converted.append(ReadResourceContents(content=data, mime_type=item.mimeType))
                else:  # pragma: no cover - defensive
                    raise TypeError(f"Unsupported resource content type: {type(item)!r}")
            return converted


__all__ = ["BaseMCPServer", "ServerMetadata", "ServerState"]
