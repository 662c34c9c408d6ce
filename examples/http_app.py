# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#                github.com/dedalus-labs/mcpbase-python/LICENSE
# ==============================================================================

"""Serve the greetings server over Streamable HTTP.

Usage::

    PORT=3000 uv run python examples/http_app.py

Endpoints:

* ``POST/GET/DELETE /mcp`` - MCP Streamable HTTP
* ``GET /metrics`` - Prometheus exposition

Environment (a local ``.env`` is honoured): ``MCPBASE_ENV``, ``PORT``,
``CORS_ORIGINS``, ``MCPBASE_LOG_LEVEL``, ``RATE_LIMIT_PER_MINUTE``.
"""

from __future__ import annotations

import argparse
import asyncio

from dotenv import load_dotenv

load_dotenv()

from mcpbase.http import serve_http
from mcpbase.metrics import PrometheusMetrics
from mcpbase.servers import GreetingsServer
from mcpbase.settings import load_settings
from mcpbase.utils import setup_logger


async def main(host: str, notice: str | None = None) -> None:
    settings = load_settings()
    setup_logger(level=settings.log_level.upper())

    server = GreetingsServer(
        {
            "name": "Greetings MCP",
            "version": "1.0.0",
            "host": host,
            "port": settings.port,
            "transportMode": "streamable-http",
        },
        notice_path=notice,
        metrics=PrometheusMetrics(),
    )
    await serve_http(server, settings=settings)


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Serve the greetings MCP server over Streamable HTTP")
    parser.add_argument("--host", default="localhost")
    parser.add_argument("--notice", default=None, help="Text file served as the notice resource")
    args = parser.parse_args()

    asyncio.run(main(args.host, args.notice))
