# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#                github.com/dedalus-labs/mcpbase-python/LICENSE
# ==============================================================================

"""Pick the one transport a server will own."""

from __future__ import annotations

import logging

from .base import BaseTransport
from .stdio import StdioTransport
from .streamable_http import StreamableHTTPTransport
from ...config import ServerConfig
from ...errors import TransportMismatchError


_TRANSPORT_TYPES: dict[str, type[BaseTransport]] = {
    "stdio": StdioTransport,
    "streamable-http": StreamableHTTPTransport,
}


def select_transport(config: ServerConfig, *, logger: logging.Logger | None = None) -> BaseTransport:
    """Adopt ``config.transport`` when it fits ``config.transport_mode``, else build a default.

    The default Streamable HTTP transport is stateless (no session-id
    generator).  A supplied transport of the wrong kind, or one already bound
    to another server, is discarded with a warning, or rejected when
    ``config.strict_transport`` is set.

    Raises:
        TransportMismatchError: Strict mode only, on a kind mismatch or a
            transport owned by another server.
    """
    expected = _TRANSPORT_TYPES[config.transport_mode]
    supplied = config.transport

    if isinstance(supplied, expected) and not supplied.is_bound:
        return supplied

    if supplied is not None:
        if isinstance(supplied, expected):
            message = f"Supplied {type(supplied).__name__} is already bound to server {supplied.server.name!r}"
        else:
            message = (
                f"Supplied {type(supplied).__name__} does not match transport mode "
                f"{config.transport_mode!r}; expected {expected.__name__}"
            )
        if config.strict_transport:
            raise TransportMismatchError(message)
        (logger or logging.getLogger(__name__)).warning("%s. Falling back to a default transport.", message)

    return expected()


__all__ = ["select_transport"]
