"""Tests for the CLI module."""

import json
import sys
from pathlib import Path

import pytest
import respx
from httpx import Response

from conftest import (
    LOCATIONS_URL,
    PRODUCTS_URL,
    TOKEN_URL,
    locations_payload,
    products_payload,
    token_payload,
)
from price_getter.cli import _lookup, _write_env, main


def test_write_env(tmp_path: Path, monkeypatch: object):
    env_file = tmp_path / ".env"
    monkeypatch.setattr("price_getter.cli.ENV_PATH", env_file)

    _write_env("cid", "csecret")

    content = env_file.read_text()
    assert "KROGER_CLIENT_ID=cid" in content
    assert "KROGER_CLIENT_SECRET=csecret" in content
    assert "KROGER_DEFAULT_SCOPE=product.compact" in content
    assert "PORT=4000" in content


def test_write_env_custom_scope_and_port(tmp_path: Path, monkeypatch: object):
    env_file = tmp_path / ".env"
    monkeypatch.setattr("price_getter.cli.ENV_PATH", env_file)

    _write_env("cid", "csecret", scope="product.full", port=8080)

    content = env_file.read_text()
    assert "KROGER_DEFAULT_SCOPE=product.full" in content
    assert "PORT=8080" in content


def test_main_without_command(monkeypatch: object, capsys):
    monkeypatch.setattr(sys, "argv", ["price-getter"])
    with pytest.raises(SystemExit) as exc_info:
        main()
    assert exc_info.value.code == 1
    assert "Usage" in capsys.readouterr().out


def test_main_lookup_requires_arguments(monkeypatch: object, capsys):
    monkeypatch.setattr(sys, "argv", ["price-getter", "lookup", "012345678905"])
    with pytest.raises(SystemExit):
        main()
    assert "lookup UPC ZIP" in capsys.readouterr().out


@respx.mock
async def test_lookup_prints_quote(settings, capsys):
    respx.post(TOKEN_URL).mock(return_value=Response(200, json=token_payload()))
    respx.get(LOCATIONS_URL).mock(return_value=Response(200, json=locations_payload("01400943")))
    respx.get(PRODUCTS_URL).mock(
        return_value=Response(200, json=products_payload(upc="012345678905"))
    )

    assert await _lookup(settings, "012345678905", "85016") == 0
    quote = json.loads(capsys.readouterr().out)
    assert quote["upc"] == "012345678905"
    assert quote["price"]["regular"] == 3.49


@respx.mock
async def test_lookup_reports_missing_store(settings, capsys):
    respx.post(TOKEN_URL).mock(return_value=Response(200, json=token_payload()))
    respx.get(LOCATIONS_URL).mock(return_value=Response(200, json={"data": []}))

    assert await _lookup(settings, "012345678905", "00000") == 2
    assert "No Kroger store found for ZIP code 00000." in capsys.readouterr().out


@respx.mock
async def test_lookup_reports_upstream_failure(settings, capsys):
    respx.post(TOKEN_URL).mock(return_value=Response(500, text="Server Error"))

    assert await _lookup(settings, "012345678905", "85016") == 1
    assert "Failed to retrieve data from Kroger" in capsys.readouterr().out
