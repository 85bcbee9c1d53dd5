"""Product search and price extraction against the Kroger catalog."""

from __future__ import annotations

import logging
from enum import Enum

import httpx
import pydantic

from price_getter.auth import TokenManager
from price_getter.client import KROGER_API_BASE_URL, response_details, send
from price_getter.errors import (
    UpstreamError,
    UpstreamProductError,
    UpstreamTimeoutError,
)
from price_getter.models import Price, PriceQuote

logger = logging.getLogger(__name__)


class SearchFilter(str, Enum):
    """Query parameter the product code is searched with.

    ``filter.upc`` rejects some valid codes (PRODUCT-2016), so the free-text
    term filter is the default.
    """

    TERM = "term"
    UPC = "upc"

    @property
    def param(self) -> str:
        return f"filter.{self.value}"


async def search_products(
    term: str,
    access_token: str,
    location_id: str,
    client: httpx.AsyncClient,
    search_filter: SearchFilter = SearchFilter.TERM,
    limit: int | None = None,
    base_url: str = KROGER_API_BASE_URL,
) -> list[dict]:
    """Search the catalog of one store and return the raw product records."""
    params: dict[str, str | int] = {
        search_filter.param: term,
        "filter.locationId": location_id,
    }
    if limit is not None:
        params["filter.limit"] = limit
    response = await send(
        client,
        "GET",
        f"{base_url}/products",
        UpstreamProductError,
        headers={
            "Authorization": f"Bearer {access_token}",
            "Accept": "application/json",
        },
        params=params,
    )
    if not response.is_success:
        raise UpstreamProductError(
            f"Product search failed: {response.status_code}",
            details=response_details(response),
        )
    try:
        return response.json().get("data") or []
    except (ValueError, AttributeError) as e:
        raise UpstreamProductError(
            "Product search returned an unreadable response", details=response.text
        ) from e


def parse_price_quote(product: dict, product_code: str) -> PriceQuote | None:
    """Build a quote from the first item of a product, or None without items."""
    items = product.get("items") or []
    if not items:
        return None
    price_data = items[0].get("price") or {}
    regular = price_data.get("regular")
    promo = price_data.get("promo")
    return PriceQuote(
        upc=product.get("upc") or product_code,
        brand=product.get("brand") or "N/A",
        description=product.get("description") or "",
        price=Price(regular=regular, promo=promo if promo is not None else 0),
    )


class PriceFetcher:
    """Looks up the current price of a product at one store. Never cached."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        tokens: TokenManager,
        search_filter: SearchFilter = SearchFilter.TERM,
        base_url: str = KROGER_API_BASE_URL,
    ) -> None:
        self._client = client
        self._tokens = tokens
        self._search_filter = search_filter
        self._base_url = base_url

    async def fetch_price(self, product_code: str, store_id: str) -> PriceQuote | None:
        try:
            access_token = await self._tokens.get_access_token()
            products = await search_products(
                product_code,
                access_token,
                store_id,
                self._client,
                search_filter=self._search_filter,
                base_url=self._base_url,
            )
        except UpstreamTimeoutError:
            logger.error(
                "Timed out fetching Kroger price for UPC %s at location %s",
                product_code,
                store_id,
            )
            raise
        except UpstreamError as e:
            logger.error(
                "Error fetching Kroger price for UPC %s at location %s: %s",
                product_code,
                store_id,
                e.details or e,
            )
            raise UpstreamProductError(
                f"Failed to fetch product data from Kroger for UPC {product_code}.",
                details=e.details if e.details is not None else str(e),
            ) from e

        if not products:
            logger.info("UPC %s not found at location %s", product_code, store_id)
            return None
        try:
            quote = parse_price_quote(products[0], product_code)
        except (pydantic.ValidationError, AttributeError, TypeError) as e:
            logger.error(
                "Unreadable Kroger product record for UPC %s at location %s: %s",
                product_code,
                store_id,
                e,
            )
            raise UpstreamProductError(
                f"Unreadable price data from Kroger for UPC {product_code}.",
                details=str(e),
            ) from e
        if quote is None:
            logger.info("UPC %s has no priced items at location %s", product_code, store_id)
        return quote
