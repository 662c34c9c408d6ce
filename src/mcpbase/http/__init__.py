# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#                github.com/dedalus-labs/mcpbase-python/LICENSE
# ==============================================================================

"""HTTP hosting for mcpbase servers (Starlette + uvicorn)."""

from __future__ import annotations

from .app import DEFAULT_PATH, MCPEndpoint, create_app, serve_http
from .middleware import (
    ErrorReportingMiddleware,
    RateLimitMiddleware,
    RequestLoggingMiddleware,
    SecurityHeadersMiddleware,
)


__all__ = [
    "DEFAULT_PATH",
    "MCPEndpoint",
    "create_app",
    "serve_http",
    "ErrorReportingMiddleware",
    "RateLimitMiddleware",
    "RequestLoggingMiddleware",
    "SecurityHeadersMiddleware",
]
