# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#                github.com/dedalus-labs/mcpbase-python/LICENSE
# ==============================================================================

"""Streamable HTTP transport adapter.

Connecting builds the SDK's :class:`StreamableHTTPSessionManager` for the
owning server.  The manager only serves requests while :meth:`running` is
active, which an ASGI lifespan takes care of (see :mod:`mcpbase.http`).  No
socket is opened here; binding a listener is the web server's job.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any

from mcp.server.streamable_http_manager import StreamableHTTPSessionManager
from mcp.server.transport_security import TransportSecuritySettings

from .base import BaseTransport
from ...errors import TransportNotInitializedError


if TYPE_CHECKING:  # pragma: no cover - typing only
    from mcp.server.streamable_http import EventStore
    from starlette.types import Receive, Scope, Send

    from ..core import BaseMCPServer


class StreamableHTTPTransport(BaseTransport):
    """Serve a :class:`~mcpbase.server.BaseMCPServer` over Streamable HTTP.

    Args:
        stateless: When ``True`` (the default) no session identifiers are
            issued and every request gets a fresh protocol session.
        json_response: Answer with ``application/json`` bodies instead of SSE
            streams.
        security_settings: DNS-rebinding protection settings, or a mapping
            accepted by :class:`TransportSecuritySettings`.
        event_store: Optional resumability store for stateful sessions.
    """

    TRANSPORT = ("streamable-http", "Streamable HTTP", "shttp")

    def __init__(
        self,
        *,
        stateless: bool = True,
        json_response: bool = False,
        security_settings: TransportSecuritySettings | dict[str, Any] | None = None,
        event_store: EventStore | None = None,
    ) -> None:
        super().__init__()
        self._stateless = stateless
        self._json_response = json_response
        self._security_settings = security_settings
        self._event_store = event_store
        self._session_manager: StreamableHTTPSessionManager | None = None

    @property
    def stateless(self) -> bool:
        return self._stateless

    @property
    def json_response(self) -> bool:
        return self._json_response

    @property
    def security_settings(self) -> TransportSecuritySettings | None:
        security = self._security_settings
        if security is not None and not isinstance(security, TransportSecuritySettings):
            security = TransportSecuritySettings.model_validate(security)
        return security

    @property
    def session_manager(self) -> StreamableHTTPSessionManager:
        if self._session_manager is None:
            raise TransportNotInitializedError("Streamable HTTP transport is not connected; call server.connect() first")
        return self._session_manager

    async def connect(self, server: BaseMCPServer) -> None:
        self.bind(server)
        if self._session_manager is None:
            self._session_manager = self._build_session_manager(server)

    def _build_session_manager(self, server: BaseMCPServer) -> StreamableHTTPSessionManager:
        return StreamableHTTPSessionManager(
            app=server,
            event_store=self._event_store,
            json_response=self._json_response,
            stateless=self._stateless,
            security_settings=self.security_settings,
        )

    @asynccontextmanager
    async def running(self) -> AsyncIterator[None]:
        """Run the session manager's task group for the duration of the block."""
        async with self.session_manager.run():
            yield

    async def handle_request(self, scope: Scope, receive: Receive, send: Send) -> None:
        """Request-handling entry point for an ASGI route."""
        await self.session_manager.handle_request(scope, receive, send)


__all__ = ["StreamableHTTPTransport"]
