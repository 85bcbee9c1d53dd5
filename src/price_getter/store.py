"""Store location resolution for Kroger."""

from __future__ import annotations

import logging

import httpx
import pydantic

from price_getter.auth import TokenManager
from price_getter.cache import LocationCache, SingleFlight
from price_getter.client import KROGER_API_BASE_URL, response_details, send
from price_getter.errors import (
    UpstreamError,
    UpstreamLocationError,
    UpstreamTimeoutError,
)
from price_getter.models import Store

logger = logging.getLogger(__name__)


async def find_stores(
    zip_code: str,
    access_token: str,
    client: httpx.AsyncClient,
    limit: int = 1,
    chain: str | None = None,
    base_url: str = KROGER_API_BASE_URL,
) -> list[Store]:
    """Find Kroger stores nearest to a ZIP code."""
    params: dict[str, str | int] = {
        "filter.zipCode.near": zip_code,
        "filter.limit": limit,
    }
    if chain:
        params["filter.chain"] = chain
    response = await send(
        client,
        "GET",
        f"{base_url}/locations",
        UpstreamLocationError,
        headers={
            "Authorization": f"Bearer {access_token}",
            "Accept": "application/json",
        },
        params=params,
    )
    if not response.is_success:
        raise UpstreamLocationError(
            f"Store lookup failed: {response.status_code}",
            details=response_details(response),
        )
    try:
        data = response.json().get("data") or []
    except (ValueError, AttributeError) as e:
        raise UpstreamLocationError(
            "Store lookup returned an unreadable response", details=response.text
        ) from e
    try:
        return [_parse_store(item) for item in data]
    except (AttributeError, TypeError, pydantic.ValidationError) as e:
        raise UpstreamLocationError(
            "Store lookup returned an unreadable location record",
            details=response_details(response),
        ) from e


def _parse_store(item: dict) -> Store:
    """Parse a raw Kroger API location into a Store model.

    Only ``locationId`` is required; missing or null display fields become
    empty strings.
    """
    address = item.get("address") or {}
    line1 = address.get("addressLine1") or ""
    city = address.get("city") or ""
    state = address.get("state") or ""
    location_id = item.get("locationId")
    return Store(
        location_id=str(location_id) if location_id is not None else "",
        name=item.get("name") or "",
        address=f"{line1}, {city}, {state}",
        zip_code=address.get("zipCode") or "",
    )


class LocationResolver:
    """Resolves a ZIP code to the nearest store id, caching successful lookups."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        tokens: TokenManager,
        cache: LocationCache,
        chain: str | None = None,
        base_url: str = KROGER_API_BASE_URL,
        single_flight: SingleFlight | None = None,
    ) -> None:
        self._client = client
        self._tokens = tokens
        self._cache = cache
        self._chain = chain
        self._base_url = base_url
        self._single_flight = single_flight or SingleFlight(enabled=False)

    async def resolve_location(self, zip_code: str) -> str | None:
        """Return the store id nearest ``zip_code``, or None if there is none.

        Only successful lookups are cached. Empty results and failures are
        retried against the locator on the next request.
        """
        cached = self._cache.get(zip_code)
        if cached is not None:
            logger.debug("Location cache hit for ZIP %s", zip_code)
            return cached
        return await self._single_flight.do(
            LocationCache.key(zip_code), lambda: self._lookup(zip_code)
        )

    async def _lookup(self, zip_code: str) -> str | None:
        try:
            access_token = await self._tokens.get_access_token()
            stores = await find_stores(
                zip_code,
                access_token,
                self._client,
                limit=1,
                chain=self._chain,
                base_url=self._base_url,
            )
        except UpstreamTimeoutError:
            logger.error("Timed out fetching Kroger location for ZIP %s", zip_code)
            raise
        except UpstreamError as e:
            logger.error(
                "Error fetching Kroger location for ZIP %s: %s", zip_code, e.details or e
            )
            raise UpstreamLocationError(
                f"Failed to fetch location data from Kroger for ZIP {zip_code}.",
                details=e.details if e.details is not None else str(e),
            ) from e

        if not stores or not stores[0].location_id:
            logger.info("No Kroger store near ZIP %s", zip_code)
            return None

        store_id = stores[0].location_id
        self._cache.set(zip_code, store_id)
        return store_id
