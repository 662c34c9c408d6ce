# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#                github.com/dedalus-labs/mcpbase-python/LICENSE
# ==============================================================================

"""Shared transport primitives for :mod:`mcpbase.server`.

A transport can be built before the server that will own it (so callers may
pass a pre-configured handle in :class:`~mcpbase.config.ServerConfig`).  It is
attached to exactly one server when that server connects and stays with it
for the rest of its life.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, ClassVar

from ...errors import TransportNotInitializedError


if TYPE_CHECKING:  # pragma: no cover - import cycle guard
    from ..core import BaseMCPServer


class BaseTransport(ABC):
    """Common base for server transports.

    Subclasses implement :meth:`connect`, which receives the owning server and
    hands it to the SDK's protocol engine.  What "connected" means is up to the
    transport: STDIO serves until ``stdin`` closes, Streamable HTTP prepares a
    session manager that an ASGI application then drives.
    """

    TRANSPORT: ClassVar[tuple[str, ...]] = ()

    def __init__(self) -> None:
        self._server: BaseMCPServer | None = None

    @property
    def transport_name(self) -> str:
        return self.TRANSPORT[0] if self.TRANSPORT else type(self).__name__

    @property
    def transport_display_name(self) -> str:
        if len(self.TRANSPORT) > 1:
            return self.TRANSPORT[1]
        return self.transport_name

    @property
    def is_bound(self) -> bool:
        return self._server is not None

    @property
    def server(self) -> BaseMCPServer:
        """Return the owning server.

        Raises:
            TransportNotInitializedError: If the transport was never connected.
        """
        if self._server is None:
            raise TransportNotInitializedError(f"{self.transport_display_name} transport is not connected to a server")
        return self._server

    def bind(self, server: BaseMCPServer) -> None:
        """Attach this transport to *server*; a transport never changes owner."""
        if self._server is not None and self._server is not server:
            raise RuntimeError(f"{self.transport_display_name} transport is already bound to server {self._server.name!r}")
        self._server = server

    @abstractmethod
    async def connect(self, server: BaseMCPServer) -> None:
        """Bind *server* and hand it to the protocol engine."""


__all__ = ["BaseTransport"]
