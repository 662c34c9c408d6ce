# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#                github.com/dedalus-labs/mcpbase-python/LICENSE
# ==============================================================================

"""Logging setup for mcpbase servers.

Everything is plain :mod:`logging`.  One managed handler writes to ``stderr``
so a server running over STDIO never interleaves log lines with protocol
frames on ``stdout``.  Output is colored only for an interactive terminal
outside production; ``MCPBASE_LOG_JSON=1`` switches to one JSON object per
line for log shippers.
"""

from __future__ import annotations

from collections.abc import Callable
import json
import logging
import os
import sys
from typing import IO, Any, ClassVar, Final


RESET: Final[str] = "\033[0m"

DEBUG_COLOR: Final[str] = "\033[36m"
INFO_COLOR: Final[str] = "\033[32m"
WARNING_COLOR: Final[str] = "\033[33m"
ERROR_COLOR: Final[str] = "\033[1;31m"
CRITICAL_COLOR: Final[str] = "\033[1;35m"

TIMESTAMP_COLOR: Final[str] = "\033[90m"
LOGGER_COLOR: Final[str] = "\033[94m"
DURATION_COLOR: Final[str] = "\033[2m"

DEFAULT_LOGGER_NAME: Final[str] = "mcpbase"
ENV_LOG_LEVEL: Final[str] = "MCPBASE_LOG_LEVEL"
ENV_LOG_JSON: Final[str] = "MCPBASE_LOG_JSON"
ENV_ENVIRONMENT: Final[str] = "MCPBASE_ENV"
ENV_NO_COLOR: Final[str] = "NO_COLOR"
DEFAULT_FORMAT: Final[str] = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
DEFAULT_DATEFMT: Final[str] = "%H:%M:%S"

JsonSerializer = Callable[[dict[str, Any]], str]
PayloadTransformer = Callable[[dict[str, Any]], dict[str, Any]]

_BUILTIN_RECORD_KEYS: set[str] = {
    "name",
    "msg",
    "args",
    "levelname",
    "levelno",
    "pathname",
    "filename",
    "module",
    "exc_info",
    "exc_text",
    "stack_info",
    "lineno",
    "funcName",
    "created",
    "msecs",
    "relativeCreated",
    "thread",
    "threadName",
    "process",
    "processName",
    "task",
    "taskName",
    "context",
    "message",
    "asctime",
}


def _duration_suffix(record: logging.LogRecord) -> str | None:
    duration = getattr(record, "duration_ms", None)
    if not isinstance(duration, (int, float)):
        return None
    return f"[{duration:.2f} ms]"


class PlainFormatter(logging.Formatter):
    """Text formatter that appends ``[<n> ms]`` when a record carries ``duration_ms``."""

    def format(self, record: logging.LogRecord) -> str:
        result = super().format(record)
        suffix = _duration_suffix(record)
        return f"{result} {suffix}" if suffix else result


class ColoredFormatter(PlainFormatter):
    """Formatter that adds ANSI colors to log output.

    Override LEVEL_COLORS to customize colors for each log level.
    """

    LEVEL_COLORS: ClassVar[dict[str, str]] = {
        "DEBUG": DEBUG_COLOR,
        "INFO": INFO_COLOR,
        "WARNING": WARNING_COLOR,
        "ERROR": ERROR_COLOR,
        "CRITICAL": CRITICAL_COLOR,
    }

    def format(self, record: logging.LogRecord) -> str:
        levelname_color = self.LEVEL_COLORS.get(record.levelname, "")

        orig_levelname = record.levelname
        orig_name = record.name
        record.levelname = f"{levelname_color}{record.levelname}{RESET}"
        record.name = f"{LOGGER_COLOR}{record.name}{RESET}"
        try:
            result = logging.Formatter.format(self, record)
        finally:
            record.levelname = orig_levelname
            record.name = orig_name

        suffix = _duration_suffix(record)
        return f"{result} {DURATION_COLOR}{suffix}{RESET}" if suffix else result


class MCPBaseHandler(logging.StreamHandler):  # type: ignore[type-arg]
    """StreamHandler subclass managed by :func:`setup_logger`."""


class StructuredJSONFormatter(logging.Formatter):
    """Serialize log records into JSON using a user-provided serializer."""

    def __init__(
        self,
        serializer: JsonSerializer,
        *,
        datefmt: str | None = None,
        payload_transformer: PayloadTransformer | None = None,
    ) -> None:
        super().__init__(datefmt=datefmt)
        self._serializer = serializer
        self._transformer = payload_transformer or _default_payload_transformer

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
            "process": record.process,
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)

        extra: dict[str, Any] = {}
        for key, value in record.__dict__.items():
            if key == "context" and isinstance(value, dict):
                extra.update(value)
                continue
            if key in _BUILTIN_RECORD_KEYS or key.startswith("_"):
                continue
            extra.setdefault(key, value)
        if extra:
            payload["context"] = extra

        return self._serializer(self._transformer(payload))


def _default_json_serializer(payload: dict[str, Any]) -> str:
    return json.dumps(payload, ensure_ascii=False, default=str)


def _default_payload_transformer(payload: dict[str, Any]) -> dict[str, Any]:
    return payload


def _has_managed_handler(root: logging.Logger) -> bool:
    return any(isinstance(handler, MCPBaseHandler) for handler in root.handlers)


def _read_bool_env(key: str) -> bool:
    value = os.getenv(key)
    if value is None:
        return False
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _resolve_level(level: int | str | None) -> int:
    if level is None:
        override = os.getenv(ENV_LOG_LEVEL)
        if not override:
            return logging.INFO
        level = override

    if isinstance(level, int):
        return level

    resolved = logging.getLevelName(str(level).strip().upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def _wants_color(stream: IO[str]) -> bool:
    if os.getenv(ENV_NO_COLOR):
        return False
    if os.getenv(ENV_ENVIRONMENT, "").strip().lower() == "production":
        return False
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


def setup_logger(
    *,
    level: int | str | None = None,
    use_json: bool | None = None,
    use_color: bool | None = None,
    json_serializer: JsonSerializer | None = None,
    payload_transformer: PayloadTransformer | None = None,
    fmt: str | None = None,
    datefmt: str | None = DEFAULT_DATEFMT,
    stream: IO[str] | None = None,
    force: bool = False,
) -> None:
    """Configure the root logger.

    Args:
        level: Override the log level. Falls back to ``MCPBASE_LOG_LEVEL`` then
            ``logging.INFO``.
        use_json: Enable JSON output. Defaults to ``MCPBASE_LOG_JSON``.
        use_color: Force colors on or off. By default colors are used only when
            *stream* is a TTY, ``NO_COLOR`` is unset and ``MCPBASE_ENV`` is not
            ``production``.
        json_serializer: Callable turning the payload dict into a string.
        payload_transformer: Callable applied to the payload before
            serialization.
        fmt: Format string for plain-text logging.
        datefmt: Date format for plain-text logging.
        stream: Destination stream. Defaults to ``sys.stderr``.
        force: Replace a handler previously installed by this function.
    """
    root = logging.getLogger()

    if _has_managed_handler(root) and not force:
        return

    if force:
        for handler in list(root.handlers):
            if isinstance(handler, MCPBaseHandler):
                root.removeHandler(handler)
                handler.close()

    resolved_level = _resolve_level(level)
    root.setLevel(resolved_level)

    target = stream if stream is not None else sys.stderr
    resolved_use_json = use_json if use_json is not None else _read_bool_env(ENV_LOG_JSON)
    if use_color is not None:
        resolved_use_color = use_color
    else:
        resolved_use_color = not resolved_use_json and _wants_color(target)

    handler = MCPBaseHandler(target)
    handler.setLevel(resolved_level)

    formatter: logging.Formatter
    if resolved_use_json:
        serializer = json_serializer or _default_json_serializer
        formatter = StructuredJSONFormatter(serializer, datefmt=None, payload_transformer=payload_transformer)
    elif resolved_use_color:
        formatter = ColoredFormatter(fmt or DEFAULT_FORMAT, datefmt=datefmt)
    else:
        formatter = PlainFormatter(fmt or DEFAULT_FORMAT, datefmt=datefmt)

    handler.setFormatter(formatter)
    root.addHandler(handler)


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a logger, installing the default handler on first use."""
    root = logging.getLogger()
    if not _has_managed_handler(root):
        setup_logger()
    return logging.getLogger(name or DEFAULT_LOGGER_NAME)


__all__ = [
    "DEFAULT_LOGGER_NAME",
    "ColoredFormatter",
    "MCPBaseHandler",
    "PlainFormatter",
    "StructuredJSONFormatter",
    "get_logger",
    "setup_logger",
]
