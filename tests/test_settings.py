# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#                github.com/dedalus-labs/mcpbase-python/LICENSE
# ==============================================================================

from __future__ import annotations

import pytest

from mcpbase.errors import ValidationError
from mcpbase.settings import DEFAULT_CORS_ORIGINS, AppSettings, load_settings


def test_defaults_without_environment() -> None:
    settings = load_settings({})

    assert settings == AppSettings()
    assert settings.environment == "development"
    assert settings.port == 3000
    assert settings.cors_origins == DEFAULT_CORS_ORIGINS
    assert settings.log_level == "info"
    assert settings.rate_limit_per_minute == 120
    assert not settings.is_production


def test_values_are_read_and_coerced() -> None:
    settings = load_settings(
        {
            "MCPBASE_ENV": "production",
            "PORT": "8080",
            "CORS_ORIGINS": "https://a.example, https://b.example ,",
            "MCPBASE_LOG_LEVEL": "DEBUG",
            "RATE_LIMIT_PER_MINUTE": "30",
        }
    )

    assert settings.is_production
    assert settings.port == 8080
    assert settings.cors_origins == ("https://a.example", "https://b.example")
    assert settings.log_level == "debug"
    assert settings.rate_limit_per_minute == 30


def test_empty_values_fall_back_to_defaults() -> None:
    assert load_settings({"PORT": "", "CORS_ORIGINS": ""}) == AppSettings()


def test_reads_process_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PORT", "4321")

    assert load_settings().port == 4321


@pytest.mark.parametrize(
    "environ",
    [
        {"PORT": "not-a-port"},
        {"PORT": "70000"},
        {"MCPBASE_ENV": "staging"},
        {"RATE_LIMIT_PER_MINUTE": "0"},
    ],
)
def test_invalid_values_raise(environ: dict[str, str]) -> None:
    with pytest.raises(ValidationError) as excinfo:
        load_settings(environ)

    assert excinfo.value.errors
