# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#                github.com/dedalus-labs/mcpbase-python/LICENSE
# ==============================================================================

"""STDIO transport adapter built on the reference MCP SDK.

Delegates to the SDK's ``stdio_server`` helper, which handles newline-delimited
JSON-RPC traffic over ``stdin``/``stdout``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from mcp.server.stdio import stdio_server

from .base import BaseTransport


if TYPE_CHECKING:  # pragma: no cover - import cycle guard
    from ..core import BaseMCPServer


def get_stdio_server():
    """Return the SDK's stdio context manager.

    Separated into a helper so tests can patch it with in-memory streams.
    """
    return stdio_server


class StdioTransport(BaseTransport):
    """Serve a :class:`~mcpbase.server.BaseMCPServer` over STDIO."""

    TRANSPORT = ("stdio", "STDIO", "Standard IO")

    def __init__(self, *, raise_exceptions: bool = False) -> None:
        super().__init__()
        self._raise_exceptions = raise_exceptions

    async def connect(self, server: BaseMCPServer) -> None:
        """Serve *server* until the peer closes ``stdin``."""
        self.bind(server)
        stdio_ctx = get_stdio_server()
        init_options = server.create_initialization_options()

        async with stdio_ctx() as (read_stream, write_stream):
            await server.run(read_stream, write_stream, init_options, raise_exceptions=self._raise_exceptions)


__all__ = ["StdioTransport", "get_stdio_server"]
