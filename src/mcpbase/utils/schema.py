# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#                github.com/dedalus-labs/mcpbase-python/LICENSE
# ==============================================================================

"""Turn tool schemas into pydantic validators and MCP-ready JSON Schema.

A tool schema may be given either as a :class:`pydantic.BaseModel` subclass or
as a field mapping, the Python counterpart of a zod raw shape::

    {"name": str, "days": (int, Field(3, ge=1, le=7))}

A bare annotation marks a required field; a two-tuple is
``(annotation, default_or_FieldInfo)`` exactly as :func:`pydantic.create_model`
expects.  MCP requires tool input and output schemas to describe JSON objects,
which model schemas always do.
"""

from __future__ import annotations

from collections.abc import Mapping, MutableMapping
import inspect
import re
from typing import Any

from pydantic import BaseModel, create_model
from pydantic.json_schema import JsonSchemaMode, JsonSchemaValue

from ..errors import MCPBaseError


__all__ = [
    "JsonSchema",
    "SchemaError",
    "SchemaLike",
    "compress_schema",
    "model_json_schema",
    "resolve_model",
    "schema_model_name",
]


JsonSchema = JsonSchemaValue
SchemaLike = type[BaseModel] | Mapping[str, Any] | None


class SchemaError(MCPBaseError, TypeError):
    """Raised when a schema cannot be turned into a validator."""


def resolve_model(schema: SchemaLike, *, model_name: str) -> type[BaseModel]:
    """Return a pydantic model validating payloads described by *schema*.

    Args:
        schema: Model class, field mapping, or ``None`` for "no fields".
        model_name: Name given to models synthesized from a mapping.

    Raises:
        SchemaError: If *schema* is neither a model class nor a mapping, or if
            pydantic rejects the field definitions.
    """
    if schema is None:
        return create_model(model_name)

    if inspect.isclass(schema) and issubclass(schema, BaseModel):
        return schema

    if not isinstance(schema, Mapping):
        raise SchemaError(f"Expected a BaseModel subclass or a field mapping, got {type(schema).__name__}")

    fields: dict[str, Any] = {}
    for field_name, definition in schema.items():
        if not isinstance(field_name, str) or not field_name.isidentifier():
            raise SchemaError(f"Invalid field name {field_name!r} in schema {model_name}")
        if isinstance(definition, tuple):
            if len(definition) != 2:
                raise SchemaError(f"Field {field_name!r} must be (annotation, default), got {len(definition)} items")
            fields[field_name] = definition
        else:
            fields[field_name] = (definition, ...)

    try:
        return create_model(model_name, **fields)
    except Exception as exc:
        raise SchemaError(f"Unable to build schema {model_name}: {exc}") from exc


def model_json_schema(model: type[BaseModel], *, mode: JsonSchemaMode = "validation") -> JsonSchema:
    """Render *model* as a compact JSON Schema object."""
    try:
        schema = model.model_json_schema(mode=mode)
    except Exception as exc:  # pragma: no cover - surface the original failure
        raise SchemaError(f"Unable to derive JSON schema for {model.__name__}") from exc

    schema = compress_schema(schema)
    schema.setdefault("type", "object")
    schema.setdefault("properties", {})
    return schema


def schema_model_name(name: str, suffix: str) -> str:
    """Build a class-style model name such as ``GetWeatherInput`` from a tool name."""
    words = [part for part in re.split(r"[^0-9A-Za-z]+", name) if part]
    base = "".join(word[:1].upper() + word[1:] for word in words) or "Tool"
    if base[0].isdigit():
        base = f"Tool{base}"
    return f"{base}{suffix}"


def compress_schema(schema: JsonSchema) -> JsonSchema:
    """Return a copy of *schema* without cosmetic ``title`` keys.

    Property names are data, so a field literally called ``title`` survives.
    """
    clone = _clone_schema(schema)
    _strip_titles(clone)
    return clone


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _clone_schema(schema: Any) -> Any:
    if isinstance(schema, dict):
        return {key: _clone_schema(value) for key, value in schema.items()}
    if isinstance(schema, list):
        return [_clone_schema(item) for item in schema]
    return schema


def _strip_titles(node: Any) -> None:
    if isinstance(node, MutableMapping):
        if isinstance(node.get("title"), str):
            node.pop("title")
        for key, value in node.items():
            if key in ("properties", "$defs") and isinstance(value, MutableMapping):
                for child in value.values():
                    _strip_titles(child)
            else:
                _strip_titles(value)
    elif isinstance(node, list):
        for item in node:
            _strip_titles(item)
