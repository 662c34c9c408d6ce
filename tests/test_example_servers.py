# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#                github.com/dedalus-labs/mcpbase-python/LICENSE
# ==============================================================================

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
import json
import math

from mcp import types
import pytest

from mcpbase.servers import CalculatorServer, GreetingsServer, WeatherServer
from mcpbase.servers.greetings import DEFAULT_NOTICE, NOTICE_URI
from mcpbase.servers.weather import ALERTS_URI
from tests.helpers import DummySession, call_tool_request, first_text, run_with_context


# ---------------------------------------------------------------------------
# Greetings
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_greet_mentions_server_identity(greetings_server: GreetingsServer) -> None:
    result = await greetings_server.invoke_tool("greet", name="Ada")

    assert not result.isError
    assert result.structuredContent == {"text": "Hello, Ada! Welcome to TS version 1.0."}
    assert first_text(result) == "Hello, Ada! Welcome to TS version 1.0."


@pytest.mark.asyncio
async def test_greet_rejects_short_names(greetings_server: GreetingsServer) -> None:
    result = await greetings_server.invoke_tool("greet", name="A")

    assert result.isError
    assert first_text(result).startswith("Invalid arguments: name:")


@pytest.mark.asyncio
async def test_custom_greeting_is_registered_at_call_time(greetings_server: GreetingsServer) -> None:
    assert "custom_greet" not in greetings_server.tool_names

    first = await greetings_server.invoke_tool("register_custom_greeting")
    assert first.structuredContent == {"text": "Custom greeting registered successfully!"}
    assert greetings_server.tool_names == ["greet", "register_custom_greeting", "custom_greet"]

    greeting = await greetings_server.invoke_tool("custom_greet", name="Ada", message="Nice hat.")
    assert greeting.structuredContent == {"text": "Hello, Ada! Nice hat."}

    second = await greetings_server.invoke_tool("register_custom_greeting")
    assert second.isError
    assert "'custom_greet' is already registered" in first_text(second)
    assert greetings_server.tool_names == ["greet", "register_custom_greeting", "custom_greet"]


@pytest.mark.asyncio
async def test_custom_greeting_over_protocol_notifies_session() -> None:
    server = GreetingsServer({"name": "TS", "version": "1.0", "transportMode": "streamable-http"})
    await server.connect()
    session = DummySession()

    result = await run_with_context(session, call_tool_request, server, "register_custom_greeting")

    assert not result.isError
    assert [notification.root.method for notification in session.notifications] == [
        "notifications/tools/list_changed"
    ]


@pytest.mark.asyncio
async def test_notice_defaults_without_a_file(greetings_server: GreetingsServer) -> None:
    result = await greetings_server.invoke_resource(NOTICE_URI)

    assert result.contents[0].text == DEFAULT_NOTICE
    assert result.contents[0].mimeType == "text/plain"


@pytest.mark.asyncio
async def test_notice_reads_configured_file(tmp_path) -> None:
    notice = tmp_path / "notice.txt"
    notice.write_text("Yoga day on Friday.", encoding="utf-8")
    server = GreetingsServer({"name": "Greetings MCP", "version": "1.0.0"}, notice_path=notice)

    result = await server.invoke_resource(NOTICE_URI)

    assert server.resource_names == ["notice.txt"]
    assert result.contents[0].text == "Yoga day on Friday."
    assert server.resources.get(NOTICE_URI).content == str(notice)


# ---------------------------------------------------------------------------
# Weather
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_weather_in_celsius_by_default(weather_server: WeatherServer) -> None:
    result = await weather_server.invoke_tool("get_weather", location="Pune")

    assert result.structuredContent == {
        "temperature": 22,
        "description": "Partly cloudy",
        "humidity": 65,
        "windSpeed": 10,
    }
    assert first_text(result) == "Current weather in Pune: 22° C, Partly cloudy"


@pytest.mark.asyncio
async def test_weather_in_fahrenheit(weather_server: WeatherServer) -> None:
    result = await weather_server.invoke_tool("get_weather", location="Austin", units="fahrenheit")

    assert result.structuredContent["temperature"] == 72
    assert first_text(result).endswith("72° F, Partly cloudy")


@pytest.mark.asyncio
async def test_weather_rejects_unknown_units(weather_server: WeatherServer) -> None:
    result = await weather_server.invoke_tool("get_weather", location="Oslo", units="kelvin")

    assert result.isError


@pytest.mark.asyncio
async def test_forecast_defaults_to_three_days(weather_server: WeatherServer) -> None:
    result = await weather_server.invoke_tool("get_forecast", location="Pune")

    forecasts = result.structuredContent["forecasts"]
    tomorrow = datetime.now(timezone.utc).date() + timedelta(days=1)
    assert [f["high"] for f in forecasts] == [25, 24, 23]
    assert [f["low"] for f in forecasts] == [15, 14, 13]
    assert [f["description"] for f in forecasts] == ["Sunny", "Partly cloudy", "Cloudy"]
    assert date.fromisoformat(forecasts[0]["date"]) == tomorrow
    assert first_text(result).startswith("3-day forecast for Pune:\n")


@pytest.mark.asyncio
async def test_forecast_cycles_descriptions(weather_server: WeatherServer) -> None:
    result = await weather_server.invoke_tool("get_forecast", location="Pune", days=7)

    descriptions = [f["description"] for f in result.structuredContent["forecasts"]]
    assert descriptions[3] == "Sunny"
    assert len(descriptions) == 7


@pytest.mark.asyncio
@pytest.mark.parametrize("days", [0, 8])
async def test_forecast_day_bounds(weather_server: WeatherServer, days: int) -> None:
    result = await weather_server.invoke_tool("get_forecast", location="Pune", days=days)

    assert result.isError


@pytest.mark.asyncio
async def test_weather_alerts_resource(weather_server: WeatherServer) -> None:
    result = await weather_server.invoke_resource(ALERTS_URI)

    content = result.contents[0]
    alerts = json.loads(content.text)
    assert content.mimeType == "application/json"
    assert alerts[0]["title"] == "Heavy Rain Warning"
    assert alerts[0]["severity"] == "moderate"
    assert alerts[0]["validUntil"].endswith("Z")

    spec = weather_server.resources.get(ALERTS_URI)
    assert spec.name == "weather_alerts.json"
    assert spec.metadata == {"updateFrequency": "15 minutes", "source": "National Weather Service"}


@pytest.mark.asyncio
async def test_weather_alerts_metadata_is_listed(weather_server: WeatherServer) -> None:
    response = await weather_server.request_handlers[types.ListResourcesRequest](
        types.ListResourcesRequest(method="resources/list")
    )

    (alerts,) = response.root.resources
    listed = alerts.model_dump(by_alias=True, exclude_none=True)
    assert listed["name"] == "weather_alerts.json"
    assert listed["mimeType"] == "application/json"
    assert listed["_meta"] == {"updateFrequency": "15 minutes", "source": "National Weather Service"}


def test_weather_keeps_api_key(weather_server: WeatherServer) -> None:
    assert weather_server.api_key == "secret"
    assert weather_server.get_metadata().port == 3001


# ---------------------------------------------------------------------------
# Calculator
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("operation", "a", "b", "result", "expression"),
    [
        ("add", 2, 3, 5, "2 + 3 = 5"),
        ("subtract", 2, 3, -1, "2 - 3 = -1"),
        ("multiply", 4, 2.5, 10, "4 × 2.5 = 10"),
        ("divide", 10, 4, 2.5, "10 ÷ 4 = 2.5"),
    ],
)
async def test_calculate(
    calculator_server: CalculatorServer, operation: str, a: float, b: float, result: float, expression: str
) -> None:
    output = await calculator_server.invoke_tool("calculate", operation=operation, a=a, b=b)

    assert not output.isError
    assert output.structuredContent == {"result": result, "expression": expression}
    assert first_text(output) == expression


@pytest.mark.asyncio
async def test_divide_by_zero_is_a_structured_error(calculator_server: CalculatorServer) -> None:
    output = await calculator_server.invoke_tool("calculate", operation="divide", a=10, b=0)

    assert not output.isError
    assert output.structuredContent == {"error": "Division by zero"}
    assert first_text(output) == "Error: Division by zero"


@pytest.mark.asyncio
async def test_divide_by_zero_over_protocol(calculator_server: CalculatorServer) -> None:
    output = await call_tool_request(calculator_server, "calculate", {"operation": "divide", "a": 10, "b": 0})

    assert not output.isError
    assert output.structuredContent == {"error": "Division by zero"}


@pytest.mark.asyncio
async def test_calculate_formats_large_results_compactly(calculator_server: CalculatorServer) -> None:
    output = await calculator_server.invoke_tool("calculate", operation="multiply", a=1e300, b=10)

    assert first_text(output) == "1e+300 × 10 = 1e+301"
    assert output.structuredContent["result"] == pytest.approx(1e301)


@pytest.mark.asyncio
async def test_calculate_overflow_is_a_structured_error(calculator_server: CalculatorServer) -> None:
    output = await calculator_server.invoke_tool("calculate", operation="multiply", a=1e308, b=10)

    assert not output.isError
    assert output.structuredContent == {"error": "Result out of range"}
    assert first_text(output) == "Error: Result out of range"


@pytest.mark.asyncio
async def test_calculate_rejects_unknown_operation(calculator_server: CalculatorServer) -> None:
    output = await calculator_server.invoke_tool("calculate", operation="modulo", a=1, b=2)

    assert output.isError


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("arguments", "expected"),
    [
        ({"operation": "sqrt", "value": 16}, 4),
        ({"operation": "pow", "value": 3}, 9),
        ({"operation": "pow", "value": 2, "exponent": 10}, 1024),
        ({"operation": "pow", "value": 5, "exponent": 0}, 1),
        ({"operation": "log", "value": math.e}, 1),
        ({"operation": "cos", "value": 0}, 1),
    ],
)
async def test_advanced_math(calculator_server: CalculatorServer, arguments: dict, expected: float) -> None:
    output = await calculator_server.invoke_tool("advanced_math", **arguments)

    assert not output.isError
    assert output.structuredContent["result"] == pytest.approx(expected)


@pytest.mark.asyncio
async def test_advanced_math_rejects_unknown_operation(calculator_server: CalculatorServer) -> None:
    output = await calculator_server.invoke_tool("advanced_math", operation="cbrt", value=8)

    assert not output.isError
    assert output.structuredContent == {"error": "Unknown operation"}
    assert first_text(output) == "Error: Unknown operation"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "arguments",
    [
        {"operation": "sqrt", "value": -1},
        {"operation": "log", "value": 0},
        {"operation": "pow", "value": 10, "exponent": 400},
    ],
)
async def test_math_domain_and_range_errors_are_structured(
    calculator_server: CalculatorServer, arguments: dict
) -> None:
    output = await calculator_server.invoke_tool("advanced_math", **arguments)

    assert not output.isError
    assert set(output.structuredContent) == {"error"}
    assert first_text(output).startswith("Error: ")
