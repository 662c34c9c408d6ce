# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#                github.com/dedalus-labs/mcpbase-python/LICENSE
# ==============================================================================

"""Example servers built on :class:`mcpbase.server.BaseMCPServer`."""

from __future__ import annotations

from .calculator import CalculatorServer
from .greetings import GreetingsServer
from .weather import WeatherServer


__all__ = ["CalculatorServer", "GreetingsServer", "WeatherServer"]
