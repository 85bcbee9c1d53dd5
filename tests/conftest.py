"""Shared test fixtures."""

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from price_getter.api import create_app
from price_getter.config import Settings
from price_getter.service import build_service

TOKEN_URL = "https://api.kroger.com/v1/connect/oauth2/token"
LOCATIONS_URL = "https://api.kroger.com/v1/locations"
PRODUCTS_URL = "https://api.kroger.com/v1/products"


class FakeClock:
    """Monotonic clock the tests advance by hand."""

    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def token_payload(access_token: str = "test-access-token", expires_in: int = 1800) -> dict:
    return {"access_token": access_token, "token_type": "bearer", "expires_in": expires_in}


def locations_payload(*location_ids: str) -> dict:
    return {
        "data": [
            {
                "locationId": location_id,
                "name": "Fry's - Camelback",
                "address": {
                    "addressLine1": "4724 N 20th St",
                    "city": "Phoenix",
                    "state": "AZ",
                    "zipCode": "85016",
                },
            }
            for location_id in location_ids
        ]
    }


def products_payload(
    upc: str = "0001234567890",
    brand: str | None = "Kroger",
    description: str = "Kroger Vitamin D Whole Milk",
    price: dict | None = None,
    items: list | None = None,
) -> dict:
    product: dict = {
        "productId": upc,
        "upc": upc,
        "description": description,
        "items": items if items is not None else [{"price": price or {"regular": 3.49, "promo": 0}}],
    }
    if brand is not None:
        product["brand"] = brand
    return {"data": [product]}


@pytest.fixture()
def client_id() -> str:
    return "test-client-id"


@pytest.fixture()
def client_secret() -> str:
    return "test-client-secret"


@pytest.fixture()
def access_token() -> str:
    return "test-access-token"


@pytest.fixture()
def location_id() -> str:
    return "01400943"


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def settings(client_id: str, client_secret: str) -> Settings:
    return Settings(
        _env_file=None,
        KROGER_CLIENT_ID=client_id,
        KROGER_CLIENT_SECRET=client_secret,
    )


@pytest_asyncio.fixture
async def http_client():
    async with httpx.AsyncClient(timeout=httpx.Timeout(10.0)) as client:
        yield client


@pytest.fixture()
def service(settings: Settings, http_client: httpx.AsyncClient, clock: FakeClock):
    return build_service(settings, client=http_client, clock=clock)


@pytest_asyncio.fixture
async def api_client(settings, service):
    app = create_app(settings, service)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
