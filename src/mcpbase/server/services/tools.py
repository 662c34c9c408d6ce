# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#                github.com/dedalus-labs/mcpbase-python/LICENSE
# ==============================================================================

"""Tool capability service."""

from __future__ import annotations

from collections.abc import Callable
import logging
import time
from typing import Any

from mcp import types
from pydantic import ValidationError as PydanticValidationError

from ..adapters import error_result, normalize_tool_result
from ...errors import DuplicateNameError, HandlerError
from ...metrics import MetricsSink, NullMetrics
from ...tool import ToolHandler, ToolOptions, ToolSpec
from ...utils import maybe_await_with_args
from ...utils.schema import model_json_schema, resolve_model, schema_model_name


class ToolsService:
    """Owns the tool registry, builds ``tools/list`` entries and runs calls."""

    def __init__(
        self,
        *,
        logger: logging.Logger,
        metrics: MetricsSink | None = None,
        on_change: Callable[[], None] | None = None,
    ) -> None:
        self._logger = logger
        self._metrics: MetricsSink = metrics or NullMetrics()
        self._on_change = on_change
        self._tool_specs: dict[str, ToolSpec] = {}
        self._tool_defs: dict[str, types.Tool] = {}

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def tool_names(self) -> list[str]:
        return list(self._tool_specs)

    @property
    def definitions(self) -> dict[str, types.Tool]:
        return self._tool_defs

    def get(self, name: str) -> ToolSpec | None:
        return self._tool_specs.get(name)

    def register(self, name: str, options: ToolOptions | None, handler: ToolHandler) -> ToolSpec:
        """Add a tool; the registry is untouched if anything about it is invalid."""
        if name in self._tool_specs:
            raise DuplicateNameError("tool", name)
        if not callable(handler):
            raise TypeError(f"Handler for tool {name!r} must be callable")

        options = options or {}
        input_model = resolve_model(options.get("input_schema"), model_name=schema_model_name(name, "Input"))
        output_schema = options.get("output_schema")
        output_model = (
            resolve_model(output_schema, model_name=schema_model_name(name, "Output"))
            if output_schema is not None
            else None
        )

        spec = ToolSpec(
            name=name,
            handler=handler,
            input_model=input_model,
            output_model=output_model,
            description=options.get("description", ""),
            title=options.get("title"),
        )
        tool_def = types.Tool(
            name=spec.name,
            title=spec.title,
            description=spec.description or None,
            inputSchema=model_json_schema(input_model),
            outputSchema=model_json_schema(output_model, mode="serialization") if output_model else None,
        )

        self._tool_specs[name] = spec
        self._tool_defs[name] = tool_def
        self._logger.debug("Registered tool %s", name)
        if self._on_change is not None:
            self._on_change()
        return spec

    async def list_tools(self) -> list[types.Tool]:
        return list(self._tool_defs.values())

    async def call_tool(self, name: str, arguments: dict[str, Any] | None) -> types.CallToolResult:
        spec = self._tool_specs.get(name)
        if spec is None:
            return error_result(f'Tool "{name}" is not available')

        started = time.perf_counter()
        result = await self._execute(spec, arguments or {})
        duration_ms = (time.perf_counter() - started) * 1000
        failed = bool(result.isError)

        self._metrics.observe_tool_call(name, duration_ms, error=failed)
        self._logger.info(
            "Tool %s %s",
            name,
            "failed" if failed else "completed",
            extra={"duration_ms": duration_ms, "context": {"tool": name, "error": failed}},
        )
        return result

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _execute(self, spec: ToolSpec, arguments: dict[str, Any]) -> types.CallToolResult:
        try:
            params = spec.input_model.model_validate(arguments)
        except PydanticValidationError as exc:
            return error_result(f"Invalid arguments: {_describe(exc)}")

        try:
            value = await maybe_await_with_args(spec.handler, params)
        except Exception as exc:
            error = HandlerError("tool", spec.name, exc)
            self._logger.exception("%s", error)
            return error_result(str(error))

        if isinstance(value, types.ServerResult):
            raise RuntimeError("Tool returned types.ServerResult; return the nested CallToolResult instead.")

        result = normalize_tool_result(value)
        if result.isError or spec.output_model is None:
            return result
        if result.structuredContent is None:
            return error_result("Output validation error: outputSchema defined but no structured output returned")

        try:
            validated = spec.output_model.model_validate(result.structuredContent)
        except PydanticValidationError as exc:
            return error_result(f"Output validation error: {_describe(exc)}")

        structured = validated.model_dump(mode="json", exclude_none=True)
        return result.model_copy(update={"structuredContent": structured})


def _describe(exc: PydanticValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(item) for item in error.get("loc", ()))
        message = error.get("msg", "invalid value")
        parts.append(f"{location}: {message}" if location else message)
    return "; ".join(parts)


__all__ = ["ToolsService"]
