# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#                github.com/dedalus-labs/mcpbase-python/LICENSE
# ==============================================================================

"""Public server-side surface for mcpbase.

The heavy lifting lives in :mod:`mcpbase.server.core`; this module re-exports
the primitives that concrete servers are expected to import.
"""

from __future__ import annotations

from .core import BaseMCPServer, ServerMetadata, ServerState
from .transports import BaseTransport, StdioTransport, StreamableHTTPTransport, select_transport


__all__ = [
    "BaseMCPServer",
    "ServerMetadata",
    "ServerState",
    "BaseTransport",
    "StdioTransport",
    "StreamableHTTPTransport",
    "select_transport",
]
