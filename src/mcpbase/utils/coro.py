# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#                github.com/dedalus-labs/mcpbase-python/LICENSE
# ==============================================================================

"""Helpers for treating sync and async callables uniformly.

Synchronous handlers run inline on the event loop, never in a worker thread,
so a handler that mutates the registry does so without racing other handlers.
"""

from __future__ import annotations

from collections.abc import Callable
import inspect
from typing import Any


async def maybe_await(value: Any) -> Any:
    """Resolve *value*: call it if callable, then await it if awaitable."""
    if callable(value) and not inspect.isawaitable(value):
        value = value()
    if inspect.isawaitable(value):
        return await value
    return value


async def maybe_await_with_args(fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
    """Call *fn* with the given arguments and await the result when needed.

    Non-callables (plain values, coroutine objects) are resolved as-is and the
    arguments are ignored.
    """
    if not callable(fn):
        return await maybe_await(fn)
    result = fn(*args, **kwargs)
    if inspect.isawaitable(result):
        return await result
    return result


__all__ = ["maybe_await", "maybe_await_with_args"]
