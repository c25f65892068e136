"""Configuration parsing tests."""

import pytest
from pydantic import ValidationError

from taxometer.core.config import Settings


def test_defaults(monkeypatch) -> None:
    """Unset environment falls back to development defaults."""
    for name in ("ENVIRONMENT", "DEBUG", "LOG_FORMAT", "DEFAULT_TAX_YEAR"):
        monkeypatch.delenv(name, raising=False)
    cfg = Settings(_env_file=None)
    assert cfg.environment == "development"
    assert cfg.debug is False
    assert cfg.log_format is None
    assert cfg.default_tax_year == 2025


def test_log_format_normalized(monkeypatch) -> None:
    """LOG_FORMAT is case-insensitive and blank means unset."""
    monkeypatch.setenv("LOG_FORMAT", " JSON ")
    assert Settings(_env_file=None).log_format == "json"

    monkeypatch.setenv("LOG_FORMAT", "")
    assert Settings(_env_file=None).log_format is None


def test_log_format_rejects_unknown(monkeypatch) -> None:
    """Invalid values fail with a clear validation error."""
    monkeypatch.setenv("LOG_FORMAT", "xml")
    with pytest.raises(ValidationError, match="LOG_FORMAT"):
        Settings(_env_file=None)


def test_default_tax_year_from_env(monkeypatch) -> None:
    monkeypatch.setenv("DEFAULT_TAX_YEAR", "2024")
    assert Settings(_env_file=None).default_tax_year == 2024


def test_default_tax_year_requires_profile(monkeypatch) -> None:
    """Years without a registered profile are rejected."""
    monkeypatch.setenv("DEFAULT_TAX_YEAR", "2019")
    with pytest.raises(ValidationError, match="Available years"):
        Settings(_env_file=None)
