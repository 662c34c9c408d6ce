# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#                github.com/dedalus-labs/mcpbase-python/LICENSE
# ==============================================================================

from __future__ import annotations

import httpx
import pytest

from mcpbase.servers import CalculatorServer, GreetingsServer, WeatherServer
from mcpbase.settings import AppSettings


@pytest.fixture(autouse=True)
def _quiet_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in ("MCPBASE_ENV", "MCPBASE_LOG_JSON", "MCPBASE_LOG_LEVEL", "PORT", "CORS_ORIGINS", "RATE_LIMIT_PER_MINUTE"):
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def greetings_server() -> GreetingsServer:
    return GreetingsServer({"name": "TS", "version": "1.0", "transportMode": "stdio"})


@pytest.fixture
def weather_server() -> WeatherServer:
    return WeatherServer({"name": "Weather MCP", "version": "2.0.0", "port": 3001}, api_key="secret")


@pytest.fixture
def calculator_server() -> CalculatorServer:
    return CalculatorServer({"name": "Calculator MCP", "version": "1.0.0", "port": 3002})


@pytest.fixture
def test_settings() -> AppSettings:
    return AppSettings(environment="test")


@pytest.fixture
def httpx_client_factory():
    def factory(app):
        transport = httpx.ASGITransport(app=app)
        return httpx.AsyncClient(transport=transport, base_url="http://testserver")

    return factory
