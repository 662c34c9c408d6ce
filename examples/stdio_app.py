# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#                github.com/dedalus-labs/mcpbase-python/LICENSE
# ==============================================================================

"""Run one of the example servers over STDIO.

Usage::

    uv run python examples/stdio_app.py --server weather

Logs go to ``stderr``; ``stdout`` carries protocol frames only.
"""

from __future__ import annotations

import argparse
import asyncio

from dotenv import load_dotenv

load_dotenv()

from mcpbase.servers import CalculatorServer, GreetingsServer, WeatherServer
from mcpbase.utils import get_logger


def build_server(kind: str, *, notice: str | None = None, api_key: str | None = None):
    if kind == "greetings":
        return GreetingsServer({"name": "Greetings MCP", "version": "1.0.0"}, notice_path=notice)
    if kind == "weather":
        return WeatherServer({"name": "Weather MCP", "version": "1.0.0", "port": 3001}, api_key=api_key)
    return CalculatorServer({"name": "Calculator MCP", "version": "1.0.0", "port": 3002})


async def main(kind: str, *, notice: str | None = None, api_key: str | None = None) -> None:
    server = build_server(kind, notice=notice, api_key=api_key)
    get_logger("mcpbase.examples").debug("Server metadata: %s", server.get_metadata().to_dict())
    await server.start()


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Run an example MCP server over STDIO")
    parser.add_argument("--server", default="weather", choices=["greetings", "weather", "calculator"])
    parser.add_argument("--notice", default=None, help="Text file served as the greetings notice")
    parser.add_argument("--api-key", default=None, help="API key for the weather server")
    args = parser.parse_args()

    asyncio.run(main(args.server, notice=args.notice, api_key=args.api_key))
