# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#                github.com/dedalus-labs/mcpbase-python/LICENSE
# ==============================================================================

"""Normalization helpers for handler results.

Handlers may return the exact MCP records (``{"content": [...],
"structuredContent": {...}}`` for tools, ``{"contents": [...]}`` for
resources), the SDK models themselves, or plain Python values.  These helpers
coerce all of them into ``CallToolResult`` / ``ReadResourceResult``.
"""

from __future__ import annotations

import base64
from collections.abc import Iterable, Mapping
import json
from typing import Any

from mcp import types
from pydantic import BaseModel


__all__ = ["error_result", "normalize_resource_payload", "normalize_tool_result"]

_TOOL_RESULT_KEYS = ("content", "structuredContent", "isError", "_meta")


def error_result(message: str) -> types.CallToolResult:
    """Build a failed ``CallToolResult`` carrying *message* as text."""
    return types.CallToolResult(content=[types.TextContent(type="text", text=message)], isError=True)


def normalize_tool_result(value: Any) -> types.CallToolResult:
    """Coerce arbitrary tool handler output into ``CallToolResult``."""

    if isinstance(value, types.CallToolResult):
        return value

    if isinstance(value, Mapping) and any(key in value for key in _TOOL_RESULT_KEYS):
        return types.CallToolResult.model_validate(dict(value))

    structured: Any | None = None
    payload = value

    if isinstance(value, BaseModel):
        structured = value.model_dump(mode="json")
        payload = structured
    elif isinstance(value, tuple) and len(value) == 2:
        payload, structured = value
        if isinstance(structured, BaseModel):
            structured = structured.model_dump(mode="json")
    elif isinstance(value, Mapping):
        structured = dict(value)

    result_payload: dict[str, Any] = {"content": _coerce_content_blocks(payload)}
    if structured is not None:
        result_payload["structuredContent"] = structured
    return types.CallToolResult(**result_payload)


def _coerce_content_blocks(source: Any) -> list[types.ContentBlock]:
    if source is None:
        return []

    if isinstance(source, (types.TextContent, types.ImageContent, types.AudioContent, types.EmbeddedResource)):
        return [source]

    if isinstance(source, Mapping):
        block = _content_from_mapping(source)
        return [block] if block is not None else [_as_text_content(source)]

    if isinstance(source, (bytes, bytearray)):
        encoded = base64.b64encode(bytes(source)).decode("ascii")
        return [types.TextContent(type="text", text=encoded)]

    if isinstance(source, str):
        return [types.TextContent(type="text", text=source)]

    if isinstance(source, Iterable):
        blocks: list[types.ContentBlock] = []
        for item in source:
            blocks.extend(_coerce_content_blocks(item))
        return blocks

    return [_as_text_content(source)]


def _content_from_mapping(data: Mapping[str, Any]) -> types.ContentBlock | None:
    marker = data.get("type")
    if marker == "text":
        return types.TextContent.model_validate(dict(data))
    if marker == "image":
        return types.ImageContent.model_validate(dict(data))
    if marker == "audio":
        return types.AudioContent.model_validate(dict(data))
    if marker == "resource":
        return types.EmbeddedResource.model_validate(dict(data))
    return None


def _as_text_content(value: Any) -> types.TextContent:
    if isinstance(value, str):
        return types.TextContent(type="text", text=value)
    try:
        text = json.dumps(value, ensure_ascii=False)
    except (TypeError, ValueError):
        text = str(value)
    return types.TextContent(type="text", text=text)


def normalize_resource_payload(uri: str, declared_mime: str | None, payload: Any) -> types.ReadResourceResult:
    """Coerce resource handler output into ``ReadResourceResult``.

    Content entries that omit ``uri`` or ``mimeType`` inherit the resource's
    URI and declared MIME type.
    """

    if isinstance(payload, types.ReadResourceResult):
        return payload

    if isinstance(payload, (types.TextResourceContents, types.BlobResourceContents)):
        return types.ReadResourceResult(contents=[payload])

    if isinstance(payload, Mapping) and "contents" in payload:
        entries = payload["contents"]
        if isinstance(entries, (str, bytes, Mapping)) or not isinstance(entries, Iterable):
            entries = [entries]
        return types.ReadResourceResult(contents=[_resource_entry(uri, declared_mime, item) for item in entries])

    if isinstance(payload, Mapping):
        return types.ReadResourceResult(contents=[_resource_entry(uri, declared_mime, payload)])

    if isinstance(payload, list) and all(
        isinstance(item, (types.TextResourceContents, types.BlobResourceContents)) for item in payload
    ):
        return types.ReadResourceResult(contents=payload)

    return types.ReadResourceResult(contents=[_resource_entry(uri, declared_mime, payload)])


def _resource_entry(
    uri: str, declared_mime: str | None, item: Any
) -> types.TextResourceContents | types.BlobResourceContents:
    if isinstance(item, (types.TextResourceContents, types.BlobResourceContents)):
        return item

    if isinstance(item, Mapping):
        data = {"uri": uri, **dict(item)}
        if declared_mime is not None:
            data.setdefault("mimeType", declared_mime)
        if "blob" in data:
            return types.BlobResourceContents.model_validate(data)
        data.setdefault("mimeType", "text/plain")
        return types.TextResourceContents.model_validate(data)

    if isinstance(item, (bytes, bytearray)):
        mime = declared_mime or "application/octet-stream"
        encoded = base64.b64encode(bytes(item)).decode("ascii")
        return types.BlobResourceContents(uri=uri, mimeType=mime, blob=encoded)

    return types.TextResourceContents(uri=uri, mimeType=declared_mime or "text/plain", text=str(item))
