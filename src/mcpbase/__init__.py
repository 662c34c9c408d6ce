# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#                github.com/dedalus-labs/mcpbase-python/LICENSE
# ==============================================================================

"""mcpbase framework primitives."""

from __future__ import annotations

from .config import ServerConfig, validate_config
from .errors import (
    DuplicateNameError,
    HandlerError,
    MCPBaseError,
    TransportMismatchError,
    TransportNotInitializedError,
    ValidationError,
)
from .metrics import MetricsSink, NullMetrics, PrometheusMetrics
from .resource import ResourceOptions, ResourceSpec
from .server import (
    BaseMCPServer,
    ServerMetadata,
    ServerState,
    StdioTransport,
    StreamableHTTPTransport,
)
from .tool import ToolOptions, ToolSpec


__version__ = "0.1.0"

__all__ = [
    "BaseMCPServer",
    "ServerConfig",
    "ServerMetadata",
    "ServerState",
    "StdioTransport",
    "StreamableHTTPTransport",
    "validate_config",
    "ToolOptions",
    "ToolSpec",
    "ResourceOptions",
    "ResourceSpec",
    "MetricsSink",
    "NullMetrics",
    "PrometheusMetrics",
    "MCPBaseError",
    "ValidationError",
    "TransportNotInitializedError",
    "TransportMismatchError",
    "DuplicateNameError",
    "HandlerError",
]
