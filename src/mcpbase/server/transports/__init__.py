# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#                github.com/dedalus-labs/mcpbase-python/LICENSE
# ==============================================================================

"""Transport adapters for mcpbase servers.

These thin wrappers isolate the reference SDK's transport primitives so the
server class only ever talks to :class:`BaseTransport`.
"""

from __future__ import annotations

from .base import BaseTransport
from .selection import select_transport
from .stdio import StdioTransport
from .streamable_http import StreamableHTTPTransport


__all__ = [
    "BaseTransport",
    "StdioTransport",
    "StreamableHTTPTransport",
    "select_transport",
]
