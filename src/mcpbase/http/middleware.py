# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#                github.com/dedalus-labs/mcpbase-python/LICENSE
# ==============================================================================

"""ASGI middleware for the HTTP surface.

Everything here is plain ASGI rather than ``BaseHTTPMiddleware`` so that SSE
responses stream through untouched.
"""

from __future__ import annotations

from collections import defaultdict, deque
from collections.abc import Callable
import logging
import time
from typing import TYPE_CHECKING

from starlette.responses import JSONResponse


if TYPE_CHECKING:  # pragma: no cover - typing only
    from starlette.types import ASGIApp, Message, Receive, Scope, Send


SECURITY_HEADERS: tuple[tuple[bytes, bytes], ...] = (
    (b"x-content-type-options", b"nosniff"),
    (b"x-frame-options", b"DENY"),
    (b"referrer-policy", b"no-referrer"),
    (b"x-dns-prefetch-control", b"off"),
)


def client_ip(scope: Scope) -> str:
    client = scope.get("client")
    if client:
        return str(client[0])
    return "unknown"


class SecurityHeadersMiddleware:
    """Add conservative security headers to every HTTP response."""

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        async def _send(message: Message) -> None:
            if message["type"] == "http.response.start":
                headers = list(message.get("headers") or [])
                present = {name.lower() for name, _ in headers}
                headers.extend(header for header in SECURITY_HEADERS if header[0] not in present)
                message["headers"] = headers
            await send(message)

        await self.app(scope, receive, _send)


class RateLimitMiddleware:
    """Sliding-window limit of ``limit`` requests per client IP per ``window`` seconds."""

    def __init__(
        self,
        app: ASGIApp,
        *,
        limit: int,
        window: float = 60.0,
        logger: logging.Logger | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.app = app
        self.limit = limit
        self.window = window
        self._logger = logger or logging.getLogger(__name__)
        self._clock = clock
        self._hits: defaultdict[str, deque[float]] = defaultdict(deque)
        self._last_sweep = clock()

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        ip = client_ip(scope)
        now = self._clock()
        if now - self._last_sweep >= self.window:
            self._sweep(now)
        hits = self._hits[ip]
        while hits and now - hits[0] >= self.window:
            hits.popleft()

        if len(hits) >= self.limit:
            self._logger.warning("Rate limit exceeded for %s", ip)
            response = JSONResponse(
                {"error": f"Too many requests. Max {self.limit} requests/minute."},
                status_code=429,
                headers={"Retry-After": str(int(self.window))},
            )
            await response(scope, receive, send)
            return

        hits.append(now)
        await self.app(scope, receive, send)

    def _sweep(self, now: float) -> None:
        """Forget clients whose most recent hit has left the window."""
        stale = [ip for ip, hits in self._hits.items() if not hits or now - hits[-1] >= self.window]
        for ip in stale:
            del self._hits[ip]
        self._last_sweep = now


class RequestLoggingMiddleware:
    """Log one line per request with method, path, status and latency."""

    def __init__(self, app: ASGIApp, *, logger: logging.Logger | None = None) -> None:
        self.app = app
        self._logger = logger or logging.getLogger(__name__)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        started = time.perf_counter()
        status_code: int | None = None

        async def _send(message: Message) -> None:
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = int(message.get("status", 0) or 0)
            await send(message)

        try:
            await self.app(scope, receive, _send)
        finally:
            duration_ms = (time.perf_counter() - started) * 1000
            method = scope.get("method", "-")
            path = scope.get("path", "-")
            self._logger.info(
                "%s %s %s",
                method,
                path,
                status_code if status_code is not None else "?",
                extra={
                    "duration_ms": duration_ms,
                    "context": {"method": method, "path": path, "status": status_code, "client": client_ip(scope)},
                },
            )


class ErrorReportingMiddleware:
    """Turn unhandled exceptions into ``500 {"error": message}`` and log them.

    Once a response has started streaming nothing can be rewritten, so the
    exception is logged and re-raised for the ASGI server to deal with.
    """

    def __init__(self, app: ASGIApp, *, logger: logging.Logger | None = None) -> None:
        self.app = app
        self._logger = logger or logging.getLogger(__name__)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        response_started = False

        async def _send(message: Message) -> None:
            nonlocal response_started
            if message["type"] == "http.response.start":
                response_started = True
            await send(message)

        try:
            await self.app(scope, receive, _send)
        except Exception as exc:
            self._logger.exception("Unhandled error on %s %s", scope.get("method", "-"), scope.get("path", "-"))
            if response_started:
                raise
            response = JSONResponse({"error": str(exc) or type(exc).__name__}, status_code=500)
            await response(scope, receive, send)


__all__ = [
    "ErrorReportingMiddleware",
    "RateLimitMiddleware",
    "RequestLoggingMiddleware",
    "SecurityHeadersMiddleware",
    "client_ip",
]
