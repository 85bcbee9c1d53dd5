"""Service context wiring the caches, token manager, resolver and fetcher."""

from __future__ import annotations

import logging
import time

import httpx

from price_getter.auth import TokenManager
from price_getter.cache import Clock, LocationCache, SingleFlight, TokenCache
from price_getter.client import build_client
from price_getter.config import Settings
from price_getter.errors import NotFoundLocation, NotFoundProduct
from price_getter.models import PriceQuote
from price_getter.products import PriceFetcher
from price_getter.store import LocationResolver

logger = logging.getLogger(__name__)


class PriceService:
    """Owns the shared HTTP client and both caches for the life of the process.

    Locations are cached, prices are always fetched fresh.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        token_manager: TokenManager,
        resolver: LocationResolver,
        fetcher: PriceFetcher,
        token_cache: TokenCache,
        location_cache: LocationCache,
    ) -> None:
        self.client = client
        self.token_manager = token_manager
        self.resolver = resolver
        self.fetcher = fetcher
        self.token_cache = token_cache
        self.location_cache = location_cache

    async def get_price(self, product_code: str, zip_code: str) -> PriceQuote:
        """Resolve the store for ``zip_code`` and quote ``product_code`` there.

        Raises NotFoundLocation or NotFoundProduct for empty upstream results
        and an UpstreamError subclass when Kroger cannot be reached.
        """
        store_id = await self.resolver.resolve_location(zip_code)
        if store_id is None:
            raise NotFoundLocation(zip_code)

        quote = await self.fetcher.fetch_price(product_code, store_id)
        if quote is None:
            raise NotFoundProduct(product_code, store_id)
        return quote

    async def aclose(self) -> None:
        await self.client.aclose()


def build_service(
    settings: Settings,
    client: httpx.AsyncClient | None = None,
    clock: Clock = time.monotonic,
) -> PriceService:
    """Construct the service context from settings.

    ``client`` and ``clock`` can be injected for tests.
    """
    if client is None:
        client = build_client(settings.REQUEST_TIMEOUT)
    if not settings.has_credentials:
        logger.warning("KROGER_CLIENT_ID / KROGER_CLIENT_SECRET are not set")

    token_cache = TokenCache(expiry_margin=settings.TOKEN_EXPIRY_MARGIN, clock=clock)
    location_cache = LocationCache(ttl=settings.LOCATION_CACHE_TTL, clock=clock)
    single_flight = SingleFlight(enabled=settings.SINGLE_FLIGHT)
    base_url = settings.KROGER_API_BASE_URL.rstrip("/")

    token_manager = TokenManager(
        client,
        token_cache,
        settings.KROGER_CLIENT_ID,
        settings.KROGER_CLIENT_SECRET,
        scope=settings.KROGER_DEFAULT_SCOPE,
        base_url=base_url,
        single_flight=single_flight,
    )
    resolver = LocationResolver(
        client,
        token_manager,
        location_cache,
        chain=settings.KROGER_CHAIN,
        base_url=base_url,
        single_flight=single_flight,
    )
    fetcher = PriceFetcher(
        client,
        token_manager,
        search_filter=settings.PRODUCT_SEARCH_FILTER,
        base_url=base_url,
    )
    return PriceService(
        client, token_manager, resolver, fetcher, token_cache, location_cache
    )
