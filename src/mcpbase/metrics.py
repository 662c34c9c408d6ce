# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#                github.com/dedalus-labs/mcpbase-python/LICENSE
# ==============================================================================

"""Tool-call metrics.

Servers receive a :class:`MetricsSink` at construction.  Metrics are a side
channel: a sink must never raise into the call path, and the default
:class:`NullMetrics` does nothing at all.  :class:`PrometheusMetrics` keeps its
collectors on a private :class:`~prometheus_client.CollectorRegistry` unless
one is passed in, so several servers (or tests) can coexist in one process.
"""

from __future__ import annotations

from typing import Final, Protocol, runtime_checkable

from prometheus_client import CONTENT_TYPE_LATEST, CollectorRegistry, Counter, Histogram, generate_latest


TOOL_LATENCY_BUCKETS_MS: Final[tuple[float, ...]] = (10, 50, 100, 300, 1000)


@runtime_checkable
class MetricsSink(Protocol):
    """Receiver for per-call measurements."""

    def observe_tool_call(self, tool: str, duration_ms: float, *, error: bool) -> None: ...


class NullMetrics:
    """Sink that discards every measurement."""

    def observe_tool_call(self, tool: str, duration_ms: float, *, error: bool) -> None:
        return None


class PrometheusMetrics:
    """Prometheus-backed sink exposing ``tool_calls_total`` and ``tool_latency_ms``."""

    content_type: Final[str] = CONTENT_TYPE_LATEST

    def __init__(self, registry: CollectorRegistry | None = None, *, namespace: str = "") -> None:
        self.registry = registry if registry is not None else CollectorRegistry()
        self.tool_calls = Counter(
            "tool_calls",
            "Count of tool calls",
            labelnames=("tool", "status"),
            namespace=namespace,
            registry=self.registry,
        )
        self.tool_latency = Histogram(
            "tool_latency_ms",
            "Tool latency in milliseconds",
            labelnames=("tool",),
            namespace=namespace,
            buckets=TOOL_LATENCY_BUCKETS_MS,
            registry=self.registry,
        )

    def observe_tool_call(self, tool: str, duration_ms: float, *, error: bool) -> None:
        status = "error" if error else "ok"
        self.tool_calls.labels(tool=tool, status=status).inc()
        self.tool_latency.labels(tool=tool).observe(duration_ms)

    def render(self) -> bytes:
        """Return the text exposition format for this sink's registry."""
        return generate_latest(self.registry)


__all__ = ["MetricsSink", "NullMetrics", "PrometheusMetrics", "TOOL_LATENCY_BUCKETS_MS"]
