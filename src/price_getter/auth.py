"""Kroger OAuth2 client credentials authentication."""

from __future__ import annotations

import base64
import logging

import httpx
import pydantic

from price_getter.cache import TOKEN_CACHE_KEY, SingleFlight, TokenCache
from price_getter.client import (
    KROGER_API_BASE_URL,
    build_client,
    response_details,
    send,
)
from price_getter.errors import UpstreamAuthError
from price_getter.models import TokenResponse

logger = logging.getLogger(__name__)

DEFAULT_SCOPE = "product.compact"


def _basic_auth(client_id: str, client_secret: str) -> str:
    credentials = base64.b64encode(f"{client_id}:{client_secret}".encode()).decode()
    return f"Basic {credentials}"


async def get_client_token(
    client_id: str,
    client_secret: str,
    scope: str = DEFAULT_SCOPE,
    client: httpx.AsyncClient | None = None,
    base_url: str = KROGER_API_BASE_URL,
) -> TokenResponse:
    """Obtain a client credentials token (no user context)."""
    if client is None:
        async with build_client() as client:
            return await get_client_token(
                client_id, client_secret, scope, client=client, base_url=base_url
            )

    response = await send(
        client,
        "POST",
        f"{base_url}/connect/oauth2/token",
        UpstreamAuthError,
        headers={
            "Authorization": _basic_auth(client_id, client_secret),
            "Content-Type": "application/x-www-form-urlencoded",
        },
        data={
            "grant_type": "client_credentials",
            "scope": scope,
        },
    )
    if not response.is_success:
        raise UpstreamAuthError(
            f"Failed to get client token: {response.status_code}",
            details=response_details(response),
        )
    try:
        return TokenResponse.model_validate(response.json())
    except (ValueError, pydantic.ValidationError) as e:
        raise UpstreamAuthError(
            "Token endpoint returned an unreadable response",
            details=response.text,
        ) from e


class TokenManager:
    """Serves the cached access token, fetching a new one when it has expired."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        cache: TokenCache,
        client_id: str,
        client_secret: str,
        scope: str = DEFAULT_SCOPE,
        base_url: str = KROGER_API_BASE_URL,
        single_flight: SingleFlight | None = None,
    ) -> None:
        self._client = client
        self._cache = cache
        self._client_id = client_id
        self._client_secret = client_secret
        self._scope = scope
        self._base_url = base_url
        self._single_flight = single_flight or SingleFlight(enabled=False)

    async def get_access_token(self) -> str:
        token = self._cache.get()
        if token is not None:
            logger.debug("Access token cache hit")
            return token.value
        return await self._single_flight.do(TOKEN_CACHE_KEY, self._refresh)

    async def _refresh(self) -> str:
        logger.debug("Access token cache miss, requesting a new token")
        response = await get_client_token(
            self._client_id,
            self._client_secret,
            self._scope,
            client=self._client,
            base_url=self._base_url,
        )
        self._cache.set(response.access_token, response.expires_in)
        logger.info("Obtained Kroger access token (expires_in=%ss)", response.expires_in)
        return response.access_token

    def invalidate(self) -> None:
        self._cache.invalidate()
