# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#                github.com/dedalus-labs/mcpbase-python/LICENSE
# ==============================================================================

"""Server configuration captured as data.

:class:`ServerConfig` is the single validated record every
:class:`~mcpbase.server.BaseMCPServer` is built from.  Callers may hand over a
ready model, a mapping (snake_case or the camelCase keys used by MCP tooling)
or plain keyword arguments; :func:`validate_config` normalizes all three and
converts pydantic's error into :class:`mcpbase.errors.ValidationError`.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Literal, get_args

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from .errors import ValidationError


if TYPE_CHECKING:  # pragma: no cover - import cycle guard
    from .server.transports.base import BaseTransport

TransportMode = Literal["stdio", "streamable-http"]
TRANSPORT_MODES: tuple[str, ...] = get_args(TransportMode)

DEFAULT_HOST = "localhost"
DEFAULT_PORT = 3000
DEFAULT_TRANSPORT_MODE: TransportMode = "stdio"


class ServerConfig(BaseModel):
    """Immutable startup parameters for an MCP server."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True, arbitrary_types_allowed=True)

    name: str = Field(min_length=2, max_length=100, strict=True)
    version: str = Field(min_length=1, max_length=10, strict=True)
    host: str = Field(default=DEFAULT_HOST, min_length=2, max_length=100, strict=True)
    port: int = Field(default=DEFAULT_PORT, ge=1, le=65535, strict=True)
    transport_mode: TransportMode = Field(default=DEFAULT_TRANSPORT_MODE, alias="transportMode")
    transport: Any = None
    strict_transport: bool = Field(default=False, alias="strictTransport")

    @field_validator("transport")
    @classmethod
    def _check_transport(cls, value: Any) -> BaseTransport | None:
        from .server.transports.base import BaseTransport

        if value is not None and not isinstance(value, BaseTransport):
            raise ValueError(f"transport must be a BaseTransport instance, got {type(value).__name__}")
        return value


def _format_errors(exc: PydanticValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(item) for item in error.get("loc", ())) or "config"
        parts.append(f"{location}: {error.get('msg', 'invalid value')}")
    return "; ".join(parts)


def _by_field_name(data: Mapping[str, Any]) -> dict[str, Any]:
    aliases = {info.alias: name for name, info in ServerConfig.model_fields.items() if info.alias}
    return {aliases.get(key, key): value for key, value in data.items()}


def validate_config(raw: ServerConfig | Mapping[str, Any] | None = None, **overrides: Any) -> ServerConfig:
    """Return a fully populated :class:`ServerConfig`.

    Args:
        raw: An existing config, a mapping of fields, or ``None``.
        **overrides: Individual fields that take precedence over *raw*.

    Raises:
        ValidationError: If any field is missing, out of bounds, of the wrong
            type, unknown, or if the transport mode is not recognized.
    """
    if isinstance(raw, ServerConfig) and not overrides:
        return raw

    payload: dict[str, Any] = {}
    if isinstance(raw, ServerConfig):
        payload.update({field: getattr(raw, field) for field in raw.model_fields_set})
    elif raw is not None:
        if not isinstance(raw, Mapping):
            raise ValidationError(f"Server configuration must be a mapping, got {type(raw).__name__}")
        payload.update(_by_field_name(raw))
    payload.update(_by_field_name(overrides))

    try:
        return ServerConfig.model_validate(payload)
    except PydanticValidationError as exc:
        raise ValidationError(
            f"Invalid server configuration: {_format_errors(exc)}",
            errors=[dict(error) for error in exc.errors(include_url=False)],
        ) from exc


__all__ = [
    "DEFAULT_HOST",
    "DEFAULT_PORT",
    "DEFAULT_TRANSPORT_MODE",
    "TRANSPORT_MODES",
    "ServerConfig",
    "TransportMode",
    "validate_config",
]
