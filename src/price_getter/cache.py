"""In-memory TTL caches for access tokens and store locations."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from price_getter.models import AccessToken, LocationEntry

logger = logging.getLogger(__name__)

T = TypeVar("T")

Clock = Callable[[], float]

TOKEN_CACHE_KEY = "krogerAccessToken"
DEFAULT_TOKEN_EXPIRY_MARGIN = 60
DEFAULT_LOCATION_TTL = 86400


class TTLCache:
    """In-memory cache with per-entry expiry.

    Not guarded by a lock: all access happens on the event loop thread.
    """

    def __init__(self, default_ttl: float = 60, clock: Clock = time.monotonic):
        self._store: dict[str, tuple[Any, float]] = {}
        self._default_ttl = default_ttl
        self._clock = clock

    def get(self, key: str) -> Any | None:
        entry = self._store.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if self._clock() >= expires_at:
            del self._store[key]
            return None
        return value

    def set(self, key: str, value: Any, ttl: float | None = None) -> None:
        ttl = ttl if ttl is not None else self._default_ttl
        self._store[key] = (value, self._clock() + ttl)

    def delete(self, key: str) -> None:
        self._store.pop(key, None)

    def clear(self) -> None:
        self._store.clear()

    def __len__(self) -> int:
        now = self._clock()
        return sum(1 for _, expires_at in self._store.values() if now < expires_at)


class TokenCache:
    """Single-slot cache for the Kroger client credentials token.

    Tokens stop being served ``expiry_margin`` seconds before the lifetime
    the token endpoint advertised.
    """

    def __init__(
        self,
        expiry_margin: float = DEFAULT_TOKEN_EXPIRY_MARGIN,
        clock: Clock = time.monotonic,
    ) -> None:
        self._cache = TTLCache(clock=clock)
        self._clock = clock
        self._expiry_margin = expiry_margin

    def get(self) -> AccessToken | None:
        return self._cache.get(TOKEN_CACHE_KEY)

    def set(self, value: str, expires_in: float) -> AccessToken:
        ttl = max(0.0, expires_in - self._expiry_margin)
        token = AccessToken(value=value, expires_at=self._clock() + ttl)
        self._cache.set(TOKEN_CACHE_KEY, token, ttl=ttl)
        logger.debug("Token cached (expires_in=%ss, effective_ttl=%ss)", expires_in, ttl)
        return token

    def invalidate(self) -> None:
        self._cache.delete(TOKEN_CACHE_KEY)


class LocationCache:
    """Maps a ZIP code to the nearest store id for a fixed TTL (24h by default)."""

    def __init__(
        self,
        ttl: float = DEFAULT_LOCATION_TTL,
        clock: Clock = time.monotonic,
    ) -> None:
        self._cache = TTLCache(default_ttl=ttl, clock=clock)
        self._clock = clock

    @staticmethod
    def key(zip_code: str) -> str:
        return f"location-{zip_code}"

    def get(self, zip_code: str) -> str | None:
        entry: LocationEntry | None = self._cache.get(self.key(zip_code))
        return entry.store_id if entry else None

    def set(self, zip_code: str, store_id: str) -> None:
        entry = LocationEntry(zip_code=zip_code, store_id=store_id, cached_at=self._clock())
        self._cache.set(self.key(zip_code), entry)

    def clear(self) -> None:
        self._cache.clear()

    def __len__(self) -> int:
        return len(self._cache)


class SingleFlight:
    """Collapses concurrent calls for the same key into one awaited call.

    When disabled every caller runs its own call.
    """

    def __init__(self, enabled: bool = True) -> None:
        self.enabled = enabled
        self._inflight: dict[str, asyncio.Future] = {}

    async def do(self, key: str, fn: Callable[[], Awaitable[T]]) -> T:
        if not self.enabled:
            return await fn()

        existing = self._inflight.get(key)
        if existing is not None:
            return await asyncio.shield(existing)

        future: asyncio.Future = asyncio.get_running_loop().create_future()
        self._inflight[key] = future
        try:
            result = await fn()
        except asyncio.CancelledError:
            future.cancel()
            raise
        except Exception as exc:
            future.set_exception(exc)
            # Mark retrieved so an unawaited failure is not reported at GC.
            future.exception()
            raise
        else:
            future.set_result(result)
            return result
        finally:
            self._inflight.pop(key, None)
