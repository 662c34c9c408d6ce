# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#                github.com/dedalus-labs/mcpbase-python/LICENSE
# ==============================================================================

"""Exception taxonomy for mcpbase.

Configuration and transport errors are raised synchronously while a server is
being built or connected and are meant to abort startup.  ``HandlerError`` is
the only per-call failure: the registry wraps whatever a tool or resource
handler raised so that a single bad invocation never takes the server down.
"""

from __future__ import annotations

from typing import Any


class MCPBaseError(Exception):
    """Root of every error raised by mcpbase itself."""


class ValidationError(MCPBaseError, ValueError):
    """Raised when a server configuration or registration payload is malformed."""

    def __init__(self, message: str, *, errors: list[dict[str, Any]] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or []


class TransportNotInitializedError(MCPBaseError, RuntimeError):
    """Raised when the transport for the declared mode is missing or unbound."""


class TransportMismatchError(MCPBaseError, TypeError):
    """Raised in strict mode when a supplied transport does not fit the declared mode."""


class DuplicateNameError(MCPBaseError, ValueError):
    """Raised when a tool or resource is registered twice."""

    def __init__(self, kind: str, name: str) -> None:
        super().__init__(f"{kind.capitalize()} {name!r} is already registered")
        self.kind = kind
        self.name = name


class HandlerError(MCPBaseError, RuntimeError):
    """Opaque wrapper around an exception raised by a registered handler."""

    def __init__(self, kind: str, name: str, cause: BaseException) -> None:
        super().__init__(f"{kind.capitalize()} {name!r} failed: {cause}")
        self.kind = kind
        self.name = name


__all__ = [
    "MCPBaseError",
    "ValidationError",
    "TransportNotInitializedError",
    "TransportMismatchError",
    "DuplicateNameError",
    "HandlerError",
]
