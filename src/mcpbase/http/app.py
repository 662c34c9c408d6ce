# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#                github.com/dedalus-labs/mcpbase-python/LICENSE
# ==============================================================================

"""Mount a :class:`~mcpbase.server.BaseMCPServer` on Starlette.

The server never binds a socket itself.  :func:`create_app` builds the ASGI
application whose lifespan starts the server and runs the Streamable HTTP
session manager; :func:`serve_http` hands that application to uvicorn.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any

from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.middleware.cors import CORSMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.routing import Route
from uvicorn import Config, Server

from .middleware import (
    ErrorReportingMiddleware,
    RateLimitMiddleware,
    RequestLoggingMiddleware,
    SecurityHeadersMiddleware,
)
from ..metrics import PrometheusMetrics
from ..settings import AppSettings, load_settings
from ..utils import get_logger


if TYPE_CHECKING:  # pragma: no cover - typing only
    from starlette.types import Receive, Scope, Send

    from ..server import BaseMCPServer


DEFAULT_PATH = "/mcp"
MCP_METHODS = ("GET", "POST", "DELETE")


class MCPEndpoint:
    """ASGI endpoint delegating raw requests to the server's HTTP transport."""

    def __init__(self, server: BaseMCPServer) -> None:
        self.server = server

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        transport = self.server.get_http_transport()
        if transport is None:
            response = JSONResponse({"error": "HTTP transporter is not available"}, status_code=500)
            await response(scope, receive, send)
            return
        await transport.handle_request(scope, receive, send)


def _metrics_endpoint(metrics: PrometheusMetrics):
    async def _metrics(_request: Request) -> Response:
        return Response(metrics.render(), media_type=metrics.content_type)

    return _metrics


def create_app(server: BaseMCPServer, *, settings: AppSettings | None = None, path: str = DEFAULT_PATH) -> Starlette:
    """Build the Starlette application serving *server* at *path*."""
    settings = settings or load_settings()
    logger = get_logger("mcpbase.http")

    routes = [Route(path, MCPEndpoint(server), methods=list(MCP_METHODS))]
    if isinstance(server.metrics, PrometheusMetrics):
        routes.append(Route("/metrics", _metrics_endpoint(server.metrics), methods=["GET"]))

    middleware = [
        Middleware(SecurityHeadersMiddleware),
        Middleware(
            CORSMiddleware,
            allow_origins=list(settings.cors_origins),
            allow_methods=[*MCP_METHODS, "OPTIONS"],
            allow_headers=["*"],
            expose_headers=["Mcp-Session-Id"],
        ),
        Middleware(RateLimitMiddleware, limit=settings.rate_limit_per_minute, logger=logger),
        Middleware(RequestLoggingMiddleware, logger=logger),
        Middleware(ErrorReportingMiddleware, logger=logger),
    ]

    @asynccontextmanager
    async def lifespan(_app: Starlette) -> AsyncIterator[None]:
        transport = server.get_http_transport()
        if transport is None:
            logger.warning(
                "Server %s uses %s transport; %s will answer with errors",
                server.name,
                server.config.transport_mode,
                path,
            )
            yield
            return

        await server.start()
        async with transport.running():
            yield

    return Starlette(routes=routes, middleware=middleware, lifespan=lifespan)


async def serve_http(
    server: BaseMCPServer,
    *,
    settings: AppSettings | None = None,
    host: str | None = None,
    port: int | None = None,
    path: str = DEFAULT_PATH,
    log_level: str | None = None,
    **uvicorn_options: Any,
) -> None:
    """Serve *server* under uvicorn until interrupted.

    ``host`` and ``port`` default to the server's configuration.
    """
    settings = settings or load_settings()
    app = create_app(server, settings=settings, path=path)
    config = Config(
        app=app,
        host=host or server.config.host,
        port=port or server.config.port,
        log_level=log_level or settings.log_level,
        **uvicorn_options,
    )
    await Server(config).serve()


__all__ = ["DEFAULT_PATH", "MCPEndpoint", "create_app", "serve_http"]
