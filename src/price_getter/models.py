"""Pydantic models for Kroger API responses and the price endpoint."""

from pydantic import BaseModel


class TokenResponse(BaseModel):
    """OAuth2 token response from the Kroger API."""

    access_token: str
    token_type: str = "Bearer"
    expires_in: int = 1800


class AccessToken(BaseModel):
    """A cached bearer token and the monotonic time it stops being served."""

    value: str
    expires_at: float


class Store(BaseModel):
    """A Kroger store location."""

    location_id: str
    name: str = ""
    address: str = ""
    zip_code: str = ""


class LocationEntry(BaseModel):
    """A ZIP code resolved to a store."""

    zip_code: str
    store_id: str
    cached_at: float


class Price(BaseModel):
    regular: float | None = None
    promo: float = 0


class PriceQuote(BaseModel):
    """Price payload returned by ``GET /api/price``."""

    upc: str
    brand: str = "N/A"
    description: str = ""
    price: Price


class ErrorResponse(BaseModel):
    error: str
    details: str | None = None
