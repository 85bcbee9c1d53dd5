"""CLI entry point for price-getter."""

from __future__ import annotations

import asyncio
import json
import sys
from pathlib import Path

from price_getter.auth import DEFAULT_SCOPE, get_client_token
from price_getter.config import Settings, get_settings
from price_getter.errors import NotFoundError, UpstreamError
from price_getter.logging import configure_logging
from price_getter.service import build_service

ENV_PATH = Path(".env")

USAGE = """\
Usage:
  price-getter init              Configure Kroger API credentials
  price-getter serve             Run the price API
  price-getter lookup UPC ZIP    Look up one price and print it"""


def main() -> None:
    """CLI entry point."""
    args = sys.argv[1:]
    if not args:
        print(USAGE)
        sys.exit(1)

    command = args[0]
    if command == "init":
        _run_init()
    elif command == "serve":
        _run_serve()
    elif command == "lookup" and len(args) == 3:
        sys.exit(_run_lookup(args[1], args[2]))
    else:
        print(USAGE)
        sys.exit(1)


def _run_init() -> None:
    """Run the interactive initialization wizard."""
    print()
    print("  priceGetter Setup")
    print("  =================")

    if ENV_PATH.exists():
        print()
        print("  .env already exists.")
        answer = input("  Overwrite? [y/N]: ").strip().lower()
        if answer != "y":
            print("  Aborted.")
            return

    client_id, client_secret = _prompt_credentials()
    scope = input(f"  Scope [{DEFAULT_SCOPE}]: ").strip() or DEFAULT_SCOPE

    print()
    print("  Verifying credentials...", end=" ", flush=True)
    try:
        asyncio.run(get_client_token(client_id, client_secret, scope))
        print("OK!")
    except UpstreamError as e:
        print("FAILED")
        print(f"  {e}")
        sys.exit(1)

    port = input("  Port [4000]: ").strip() or "4000"
    if not port.isdigit():
        print("  Error: Port must be a number.")
        sys.exit(1)

    _write_env(client_id, client_secret, scope, int(port))

    print()
    print("  Setup complete! Configuration saved to .env")
    print()


def _prompt_credentials() -> tuple[str, str]:
    print()
    print("  Kroger API Credentials")
    print()
    print("  You need a Kroger developer account.")
    print("  1. Go to https://developer.kroger.com")
    print("  2. Create a new application with the product.compact scope")
    print("  3. Note your Client ID and Client Secret")
    print()
    client_id = input("  Client ID: ").strip()
    client_secret = input("  Client Secret: ").strip()
    if not client_id or not client_secret:
        print("  Error: Both Client ID and Client Secret are required.")
        sys.exit(1)
    return client_id, client_secret


def _write_env(
    client_id: str,
    client_secret: str,
    scope: str = DEFAULT_SCOPE,
    port: int = 4000,
) -> None:
    """Write configuration to .env file."""
    content = (
        f"KROGER_CLIENT_ID={client_id}\n"
        f"KROGER_CLIENT_SECRET={client_secret}\n"
        f"KROGER_DEFAULT_SCOPE={scope}\n"
        f"PORT={port}\n"
    )
    ENV_PATH.write_text(content)


def _run_serve() -> None:
    import uvicorn

    settings = get_settings()
    configure_logging(settings.LOG_LEVEL)
    print(f"priceGetter service listening on port {settings.PORT}")
    uvicorn.run(
        "price_getter.api:create_app",
        factory=True,
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )


def _run_lookup(upc: str, zip_code: str) -> int:
    settings = get_settings()
    configure_logging(settings.LOG_LEVEL)
    return asyncio.run(_lookup(settings, upc, zip_code))


async def _lookup(settings: Settings, upc: str, zip_code: str) -> int:
    service = build_service(settings)
    try:
        quote = await service.get_price(upc, zip_code)
    except NotFoundError as e:
        print(f"Not found: {e}")
        return 2
    except UpstreamError as e:
        print(f"Failed to retrieve data from Kroger: {e}")
        return 1
    finally:
        await service.aclose()
    print(json.dumps(quote.model_dump(), indent=2))
    return 0
