# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#                github.com/dedalus-labs/mcpbase-python/LICENSE
# ==============================================================================

"""Tool descriptors.

A :class:`ToolSpec` is built once by
:meth:`mcpbase.server.BaseMCPServer.register_tool` and never mutated.  The
handler receives the validated input model and may be sync or async.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, TypedDict

from pydantic import BaseModel

from .utils.schema import SchemaLike


ToolResult = Any
ToolHandler = Callable[[Any], ToolResult | Awaitable[ToolResult]]


class ToolOptions(TypedDict, total=False):
    """Options accepted by ``register_tool``."""

    description: str
    title: str
    input_schema: SchemaLike
    output_schema: SchemaLike


@dataclass(frozen=True, slots=True)
class ToolSpec:
    """In-memory representation of a registered tool."""

    name: str
    handler: ToolHandler
    input_model: type[BaseModel]
    output_model: type[BaseModel] | None = None
    description: str = ""
    title: str | None = None


__all__ = ["ToolHandler", "ToolOptions", "ToolResult", "ToolSpec"]
