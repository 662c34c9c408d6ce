# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#                github.com/dedalus-labs/mcpbase-python/LICENSE
# ==============================================================================

"""Process-level settings read from the environment.

Server identity lives in :class:`mcpbase.config.ServerConfig`; this module only
covers knobs owned by the hosting process (deployment environment, HTTP port,
CORS origins, rate limiting).  Entry points are expected to call
``dotenv.load_dotenv()`` before :func:`load_settings` so a local ``.env`` file
is honoured.
"""

from __future__ import annotations

from collections.abc import Mapping
import os
from typing import Any, Final, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from .errors import ValidationError


ENV_ENVIRONMENT: Final[str] = "MCPBASE_ENV"
ENV_PORT: Final[str] = "PORT"
ENV_CORS_ORIGINS: Final[str] = "CORS_ORIGINS"
ENV_LOG_LEVEL: Final[str] = "MCPBASE_LOG_LEVEL"
ENV_RATE_LIMIT: Final[str] = "RATE_LIMIT_PER_MINUTE"

DEFAULT_CORS_ORIGINS: Final[tuple[str, ...]] = ("http://localhost:6274", "http://127.0.0.1:6274")

Environment = Literal["development", "test", "production"]


class AppSettings(BaseModel):
    """Settings for the process hosting one or more MCP servers."""

    model_config = ConfigDict(frozen=True)

    environment: Environment = "development"
    port: int = Field(default=3000, ge=1, le=65535)
    cors_origins: tuple[str, ...] = DEFAULT_CORS_ORIGINS
    log_level: str = "info"
    rate_limit_per_minute: int = Field(default=120, ge=1)

    @field_validator("cors_origins", mode="before")
    @classmethod
    def _split_origins(cls, value: Any) -> Any:
        if isinstance(value, str):
            return tuple(origin.strip() for origin in value.split(",") if origin.strip())
        return value

    @field_validator("log_level")
    @classmethod
    def _normalize_level(cls, value: str) -> str:
        return value.strip().lower()

    @property
    def is_production(self) -> bool:
        return self.environment == "production"


def load_settings(environ: Mapping[str, str] | None = None) -> AppSettings:
    """Build :class:`AppSettings` from *environ* (defaults to ``os.environ``).

    Raises:
        ValidationError: If a variable is present but cannot be coerced.
    """
    source = os.environ if environ is None else environ
    mapping = {
        "environment": ENV_ENVIRONMENT,
        "port": ENV_PORT,
        "cors_origins": ENV_CORS_ORIGINS,
        "log_level": ENV_LOG_LEVEL,
        "rate_limit_per_minute": ENV_RATE_LIMIT,
    }
    payload = {field: source[key] for field, key in mapping.items() if source.get(key)}

    try:
        return AppSettings.model_validate(payload)
    except PydanticValidationError as exc:
        raise ValidationError(
            f"Invalid environment settings: {exc}", errors=[dict(error) for error in exc.errors(include_url=False)]
        ) from exc


__all__ = ["AppSettings", "Environment", "load_settings"]
