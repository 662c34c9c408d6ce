# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#                github.com/dedalus-labs/mcpbase-python/LICENSE
# ==============================================================================

from __future__ import annotations

import asyncio
import logging

from mcp import types
from pydantic import BaseModel, Field
import pytest

from mcpbase.errors import DuplicateNameError
from mcpbase.utils.schema import SchemaError
from tests.helpers import DemoServer, RecordingMetrics, call_tool_request, first_text


class AddInput(BaseModel):
    a: int
    b: int


class AddOutput(BaseModel):
    result: int


def _add(params: AddInput) -> dict[str, int]:
    return {"result": params.a + params.b}


@pytest.mark.asyncio
async def test_registered_tool_is_invocable() -> None:
    server = DemoServer(
        setup=lambda s: s.register_tool(
            "add", {"description": "Adds two numbers", "input_schema": AddInput, "output_schema": AddOutput}, _add
        )
    )

    assert server.tool_names == ["add"]
    result = await server.invoke_tool("add", a=4, b=7)

    assert not result.isError
    assert result.structuredContent == {"result": 11}
    assert first_text(result) == '{"result": 11}'


@pytest.mark.asyncio
async def test_sync_and_async_handlers_are_accepted() -> None:
    async def slow_echo(params) -> str:
        await asyncio.sleep(0)
        return params.text

    def fast_echo(params) -> str:
        return params.text.upper()

    server = DemoServer()
    server.register_tool("slow", {"input_schema": {"text": str}}, slow_echo)
    server.register_tool("fast", {"input_schema": {"text": str}}, fast_echo)

    assert first_text(await server.invoke_tool("slow", text="hi")) == "hi"
    assert first_text(await server.invoke_tool("fast", text="hi")) == "HI"


@pytest.mark.asyncio
async def test_duplicate_tool_name_is_rejected() -> None:
    server = DemoServer()
    first = server.register_tool("echo", {"input_schema": {"text": str}}, lambda p: p.text)

    with pytest.raises(DuplicateNameError) as excinfo:
        server.register_tool("echo", {"input_schema": {"value": int}}, lambda p: p.value)

    assert excinfo.value.name == "echo"
    assert server.tool_names == ["echo"]
    assert server.tools.get("echo") is first
    assert first_text(await server.invoke_tool("echo", text="still here")) == "still here"


@pytest.mark.asyncio
async def test_distinct_tools_are_independently_invocable() -> None:
    server = DemoServer()
    server.register_tool("one", None, lambda _: "1")
    server.register_tool("two", None, lambda _: "2")

    assert first_text(await server.invoke_tool("one")) == "1"
    assert first_text(await server.invoke_tool("two")) == "2"


@pytest.mark.asyncio
async def test_invalid_arguments_produce_error_result() -> None:
    server = DemoServer()
    server.register_tool("add", {"input_schema": AddInput}, _add)

    result = await server.invoke_tool("add", a="one", b=2)

    assert result.isError
    assert first_text(result).startswith("Invalid arguments: a:")


@pytest.mark.asyncio
async def test_field_mapping_schema_applies_constraints_and_defaults() -> None:
    server = DemoServer()
    server.register_tool(
        "repeat",
        {"input_schema": {"text": str, "times": (int, Field(default=2, ge=1, le=3))}},
        lambda p: p.text * p.times,
    )

    assert first_text(await server.invoke_tool("repeat", text="ab")) == "abab"
    assert (await server.invoke_tool("repeat", text="ab", times=9)).isError


@pytest.mark.asyncio
async def test_handler_exception_becomes_error_result(caplog: pytest.LogCaptureFixture) -> None:
    def explode(_params) -> str:
        raise RuntimeError("boom")

    server = DemoServer()
    server.register_tool("explode", None, explode)
    server.register_tool("fine", None, lambda _: "ok")

    with caplog.at_level(logging.ERROR):
        result = await server.invoke_tool("explode")

    assert result.isError
    assert first_text(result) == "Tool 'explode' failed: boom"
    assert any(record.exc_info for record in caplog.records)
    assert server.tool_names == ["explode", "fine"]
    assert first_text(await server.invoke_tool("fine")) == "ok"


@pytest.mark.asyncio
async def test_unknown_tool_returns_error_result() -> None:
    result = await DemoServer().invoke_tool("nope")

    assert result.isError
    assert first_text(result) == 'Tool "nope" is not available'


@pytest.mark.asyncio
async def test_output_is_validated_against_output_schema() -> None:
    server = DemoServer()
    server.register_tool("bad", {"output_schema": AddOutput}, lambda _: {"result": "eleven"})

    result = await server.invoke_tool("bad")

    assert result.isError
    assert first_text(result).startswith("Output validation error:")


@pytest.mark.asyncio
async def test_output_schema_requires_structured_content() -> None:
    server = DemoServer()
    server.register_tool("plain", {"output_schema": {"text": str}}, lambda _: "just text")

    direct = await server.invoke_tool("plain")
    via_protocol = await call_tool_request(server, "plain", {})

    assert direct.isError
    assert first_text(direct) == "Output validation error: outputSchema defined but no structured output returned"
    assert via_protocol.isError
    assert "outputSchema defined but no structured output returned" in first_text(via_protocol)


@pytest.mark.asyncio
async def test_handler_may_register_tools_while_running() -> None:
    server = DemoServer()
    server.register_tool("keep", None, lambda _: "kept")

    def install(_params) -> str:
        server.register_tool("late", None, lambda _: "late")
        return "installed"

    server.register_tool("install", None, install)

    assert first_text(await server.invoke_tool("install")) == "installed"
    assert server.tool_names == ["keep", "install", "late"]
    assert first_text(await server.invoke_tool("late")) == "late"
    assert first_text(await server.invoke_tool("keep")) == "kept"


def test_unusable_schema_is_rejected() -> None:
    server = DemoServer()

    with pytest.raises(SchemaError):
        server.register_tool("bad", {"input_schema": 42}, lambda _: None)  # type: ignore[typeddict-item]
    with pytest.raises(SchemaError):
        server.register_tool("bad", {"input_schema": {"not valid": str}}, lambda _: None)

    assert server.tool_names == []


def test_handler_must_be_callable() -> None:
    with pytest.raises(TypeError):
        DemoServer().register_tool("bad", None, "not callable")  # type: ignore[arg-type]


@pytest.mark.asyncio
async def test_list_tools_reflects_insertion_order_and_schemas() -> None:
    server = DemoServer()
    server.register_tool("zeta", {"description": "last letter"}, lambda _: "z")
    server.register_tool("add", {"input_schema": AddInput, "output_schema": AddOutput}, _add)

    response = await server.request_handlers[types.ListToolsRequest](types.ListToolsRequest(method="tools/list"))
    tools = response.root.tools

    assert [tool.name for tool in tools] == ["zeta", "add"]
    assert tools[0].description == "last letter"
    assert tools[0].inputSchema == {"type": "object", "properties": {}}
    assert tools[0].outputSchema is None
    assert tools[1].inputSchema["required"] == ["a", "b"]
    assert tools[1].inputSchema["properties"]["a"] == {"type": "integer"}
    assert tools[1].outputSchema["properties"]["result"] == {"type": "integer"}


@pytest.mark.asyncio
async def test_protocol_call_returns_structured_content() -> None:
    server = DemoServer()
    server.register_tool("add", {"input_schema": AddInput, "output_schema": AddOutput}, _add)

    result = await call_tool_request(server, "add", {"a": 2, "b": 3})

    assert not result.isError
    assert result.structuredContent == {"result": 5}


@pytest.mark.asyncio
async def test_protocol_call_reports_failures_as_error_results() -> None:
    server = DemoServer()
    server.register_tool("explode", None, lambda _: 1 / 0)

    result = await call_tool_request(server, "explode")

    assert result.isError
    assert "division by zero" in first_text(result)


@pytest.mark.asyncio
async def test_tool_calls_are_reported_to_metrics() -> None:
    metrics = RecordingMetrics()
    server = DemoServer(metrics=metrics)
    server.register_tool("ok", None, lambda _: "fine")
    server.register_tool("bad", None, lambda _: 1 / 0)

    await server.invoke_tool("ok")
    await server.invoke_tool("bad")

    assert [(tool, error) for tool, _, error in metrics.calls] == [("ok", False), ("bad", True)]
    assert all(duration >= 0 for _, duration, _ in metrics.calls)
    assert server.metrics is metrics
