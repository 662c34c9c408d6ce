# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#                github.com/dedalus-labs/mcpbase-python/LICENSE
# ==============================================================================

"""Shared test helpers for MCP server tests."""

from __future__ import annotations

from collections.abc import Callable
from contextlib import asynccontextmanager
from itertools import count
from typing import Any

import anyio
from mcp import types
from mcp.server.lowlevel.server import request_ctx
from mcp.shared.context import RequestContext

from mcpbase import BaseMCPServer


_REQUEST_COUNTER = count(1)


class DemoServer(BaseMCPServer):
    """Concrete server whose components come from a callback."""

    def __init__(
        self,
        config: Any = None,
        *,
        setup: Callable[[BaseMCPServer], None] | None = None,
        **kwargs: Any,
    ) -> None:
        self._setup = setup
        self.register_calls = 0
        super().__init__(config if config is not None else {"name": "demo", "version": "1.0.0"}, **kwargs)

    def register_components(self) -> None:
        self.register_calls += 1
        if self._setup is not None:
            self._setup(self)


class RecordingMetrics:
    """Metrics sink that remembers every observation."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, float, bool]] = []

    def observe_tool_call(self, tool: str, duration_ms: float, *, error: bool) -> None:
        self.calls.append((tool, duration_ms, error))


class DummySession:
    """In-memory session used to capture server notifications."""

    def __init__(self, name: str = "session") -> None:
        self.name = name
        self.notifications: list[types.ServerNotification] = []

    async def send_notification(
        self, notification: types.ServerNotification, related_request_id: types.RequestId | None = None
    ) -> None:
        await anyio.lowlevel.checkpoint()
        self.notifications.append(notification)


class FailingSession(DummySession):
    """Session that raises when notified."""

    async def send_notification(
        self, notification: types.ServerNotification, related_request_id: types.RequestId | None = None
    ) -> None:
        raise RuntimeError("notification failure")


async def run_with_context(session: DummySession, func, *args):
    """Execute *func* with ``request_ctx`` bound to *session*."""
    ctx = RequestContext(
        request_id=next(_REQUEST_COUNTER),
        meta=None,
        session=session,  # type: ignore[arg-type]
        lifespan_context={},
    )
    token = request_ctx.set(ctx)
    try:
        return await func(*args)
    finally:
        request_ctx.reset(token)


def fake_stdio_server(calls: list[str]):
    """Stand-in for the SDK's ``stdio_server`` yielding placeholder streams."""

    @asynccontextmanager
    async def _stdio():
        calls.append("open")
        yield "read-stream", "write-stream"
        calls.append("close")

    return _stdio


async def call_tool_request(server: BaseMCPServer, name: str, arguments: dict[str, Any] | None = None):
    """Send a ``tools/call`` through the SDK request handler and return the result."""
    handler = server.request_handlers[types.CallToolRequest]
    request = types.CallToolRequest(
        method="tools/call", params=types.CallToolRequestParams(name=name, arguments=arguments or {})
    )
    response = await handler(request)
    return response.root


def first_text(result: types.CallToolResult) -> str:
    block = result.content[0]
    assert isinstance(block, types.TextContent)
    return block.text
