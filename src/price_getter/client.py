"""Shared HTTP client for outbound Kroger API calls."""

from __future__ import annotations

import json
import logging

import httpx

from price_getter.errors import UpstreamError, UpstreamTimeoutError

logger = logging.getLogger(__name__)

KROGER_API_BASE_URL = "https://api.kroger.com/v1"
USER_AGENT = "priceGetter/1.0"
DEFAULT_TIMEOUT = 10.0


def build_client(timeout: float = DEFAULT_TIMEOUT) -> httpx.AsyncClient:
    """Create the process-wide client; every request is bounded by ``timeout``."""
    return httpx.AsyncClient(
        timeout=httpx.Timeout(timeout),
        headers={"User-Agent": USER_AGENT},
    )


async def send(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    error: type[UpstreamError],
    **kwargs,
) -> httpx.Response:
    """Send a request, mapping transport failures onto ``error``.

    Timeouts raise ``UpstreamTimeoutError`` regardless of ``error``. The
    response status is left for the caller to check.
    """
    try:
        return await client.request(method, url, **kwargs)
    except httpx.TimeoutException as e:
        raise UpstreamTimeoutError(_timeout_message(client.timeout, e)) from e
    except httpx.HTTPError as e:
        raise error(f"Request to Kroger failed: {e!r}") from e


def _timeout_message(timeout: httpx.Timeout, exc: httpx.TimeoutException) -> str:
    """Describe the timeout that fired using its configured limit."""
    if isinstance(exc, httpx.ConnectTimeout):
        seconds = timeout.connect
    elif isinstance(exc, httpx.WriteTimeout):
        seconds = timeout.write
    elif isinstance(exc, httpx.PoolTimeout):
        seconds = timeout.pool
    else:
        seconds = timeout.read
    if seconds is None:
        return "Request to Kroger timed out."
    return f"Request to Kroger timed out after {seconds:g}s."


def response_details(response: httpx.Response) -> object:
    """Return the decoded upstream body, or its text when it is not JSON."""
    try:
        return response.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return response.text


def serialize_details(details: object) -> str:
    if isinstance(details, str):
        return details
    return json.dumps(details)
