"""Tests for settings loading."""

from pathlib import Path

from price_getter.config import Settings
from price_getter.products import SearchFilter


def test_defaults(monkeypatch: object):
    for name in ("KROGER_DEFAULT_SCOPE", "PORT", "PRODUCT_SEARCH_FILTER", "REQUEST_TIMEOUT"):
        monkeypatch.delenv(name, raising=False)
    settings = Settings(_env_file=None)
    assert settings.KROGER_DEFAULT_SCOPE == "product.compact"
    assert settings.PORT == 4000
    assert settings.REQUEST_TIMEOUT == 10.0
    assert settings.LOCATION_CACHE_TTL == 86400
    assert settings.TOKEN_EXPIRY_MARGIN == 60
    assert settings.PRODUCT_SEARCH_FILTER is SearchFilter.TERM
    assert settings.SINGLE_FLIGHT is False


def test_environment_overrides(monkeypatch: object):
    monkeypatch.setenv("KROGER_CLIENT_ID", "env-id")
    monkeypatch.setenv("KROGER_CLIENT_SECRET", "env-secret")
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("PRODUCT_SEARCH_FILTER", "upc")
    settings = Settings(_env_file=None)
    assert settings.KROGER_CLIENT_ID == "env-id"
    assert settings.PORT == 8080
    assert settings.PRODUCT_SEARCH_FILTER is SearchFilter.UPC
    assert settings.has_credentials


def test_empty_scope_falls_back_to_default(monkeypatch: object):
    monkeypatch.setenv("KROGER_DEFAULT_SCOPE", "")
    assert Settings(_env_file=None).KROGER_DEFAULT_SCOPE == "product.compact"


def test_reads_env_file(tmp_path: Path, monkeypatch: object):
    monkeypatch.delenv("KROGER_CLIENT_ID", raising=False)
    env_file = tmp_path / ".env"
    env_file.write_text("KROGER_CLIENT_ID=file-id\nPORT=5000\n")
    monkeypatch.delenv("PORT", raising=False)
    settings = Settings(_env_file=env_file)
    assert settings.KROGER_CLIENT_ID == "file-id"
    assert settings.PORT == 5000
