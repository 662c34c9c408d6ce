# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#                github.com/dedalus-labs/mcpbase-python/LICENSE
# ==============================================================================

"""Resource descriptors.

Resources are addressed by URI on the wire but registered, and deduplicated,
by name as well.  Once registered a resource is read-only.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, TypedDict


ResourceHandler = Callable[[], Any | Awaitable[Any]]


class ResourceOptions(TypedDict, total=False):
    """Options accepted by ``register_resource``."""

    description: str
    content: str
    metadata: Mapping[str, Any]
    mime_type: str


@dataclass(frozen=True, slots=True)
class ResourceSpec:
    """In-memory representation of a registered resource."""

    name: str
    uri: str
    handler: ResourceHandler
    description: str | None = None
    content: str | None = None
    metadata: Mapping[str, Any] = field(default_factory=dict)
    mime_type: str | None = None


__all__ = ["ResourceHandler", "ResourceOptions", "ResourceSpec"]
