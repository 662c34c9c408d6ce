# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#                github.com/dedalus-labs/mcpbase-python/LICENSE
# ==============================================================================

"""Resource capability service."""

from __future__ import annotations

from collections.abc import Callable
import logging
from typing import Any

from mcp import types
from mcp.shared.exceptions import McpError
from pydantic import AnyUrl, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from ..adapters import normalize_resource_payload
from ...errors import DuplicateNameError, HandlerError, ValidationError
from ...resource import ResourceHandler, ResourceOptions, ResourceSpec
from ...utils import maybe_await


_URI_ADAPTER = TypeAdapter(AnyUrl)


def canonical_uri(uri: str) -> str:
    """Return *uri* the way it will come back from a ``resources/read`` request.

    Raises:
        ValidationError: If *uri* is not an absolute URI.
    """
    try:
        return str(_URI_ADAPTER.validate_python(uri))
    except PydanticValidationError as exc:
        raise ValidationError(
            f"Invalid resource URI {uri!r}", errors=[dict(error) for error in exc.errors(include_url=False)]
        ) from exc


class ResourcesService:
    """Owns the resource registry and serves ``resources/list`` and ``resources/read``."""

    def __init__(self, *, logger: logging.Logger, on_change: Callable[[], None] | None = None) -> None:
        self._logger = logger
        self._on_change = on_change
        self._by_name: dict[str, ResourceSpec] = {}
        self._by_uri: dict[str, ResourceSpec] = {}

    @property
    def names(self) -> list[str]:
        return list(self._by_name)

    def get(self, uri: str) -> ResourceSpec | None:
        try:
            return self._by_uri.get(canonical_uri(uri))
        except ValidationError:
            return None

    def register(self, name: str, uri: str, options: ResourceOptions | None, handler: ResourceHandler) -> ResourceSpec:
        if name in self._by_name:
            raise DuplicateNameError("resource", name)
        key = canonical_uri(uri)
        if key in self._by_uri:
            raise DuplicateNameError("resource", uri)
        if not callable(handler):
            raise TypeError(f"Handler for resource {name!r} must be callable")

        options = options or {}
        spec = ResourceSpec(
            name=name,
            uri=uri,
            handler=handler,
            description=options.get("description"),
            content=options.get("content"),
            metadata=dict(options.get("metadata") or {}),
            mime_type=options.get("mime_type"),
        )
        self._by_name[name] = spec
        self._by_uri[key] = spec
        self._logger.debug("Registered resource %s at %s", name, uri)
        if self._on_change is not None:
            self._on_change()
        return spec

    async def list_resources(self) -> list[types.Resource]:
        return [_as_listing(spec) for spec in self._by_name.values()]

    async def read(self, uri: str) -> types.ReadResourceResult:
        spec = self.get(uri)
        if spec is None:
            raise McpError(types.ErrorData(code=types.INVALID_PARAMS, message=f"Resource {uri} not found"))

        try:
            payload = await maybe_await(spec.handler)
            return normalize_resource_payload(spec.uri, spec.mime_type, payload)
        except Exception as exc:
            error = HandlerError("resource", spec.name, exc)
            self._logger.exception("%s", error)
            raise error from exc



def _as_listing(spec: ResourceSpec) -> types.Resource:
    """Listing entry; ``metadata`` and ``content`` travel in ``_meta``."""
    meta: dict[str, Any] = dict(spec.metadata)
    if spec.content is not None:
        meta.setdefault("content", spec.content)
    payload: dict[str, Any] = {
        "name": spec.name,
        "uri": spec.uri,
        "description": spec.description,
        "mimeType": spec.mime_type,
    }
    if meta:
        payload["_meta"] = meta
    return types.Resource.model_validate(payload)

__all__ = ["ResourcesService", "canonical_uri"]
