"""Error taxonomy for the price lookup service."""

from __future__ import annotations


class PriceGetterError(Exception):
    """Base class for all service errors."""


class ValidationError(PriceGetterError):
    """Raised when a required request parameter is missing."""


class NotFoundError(PriceGetterError):
    """An upstream call succeeded but matched nothing."""


class NotFoundLocation(NotFoundError):
    def __init__(self, zip_code: str) -> None:
        self.zip_code = zip_code
        super().__init__(f"No Kroger store found for ZIP code {zip_code}.")


class NotFoundProduct(NotFoundError):
    def __init__(self, upc: str, location_id: str) -> None:
        self.upc = upc
        self.location_id = location_id
        super().__init__(
            f"Product with UPC {upc} not found at the determined Kroger store "
            f"(Location ID: {location_id})."
        )


class UpstreamError(PriceGetterError):
    """Raised when a call to the Kroger API fails.

    ``details`` holds the upstream response body when one was received.
    """

    def __init__(self, message: str, details: object = None) -> None:
        super().__init__(message)
        self.details = details


class UpstreamAuthError(UpstreamError):
    """Raised when the client credentials grant fails."""


class UpstreamLocationError(UpstreamError):
    """Raised when the store locator call fails."""


class UpstreamProductError(UpstreamError):
    """Raised when the product search call fails."""


class UpstreamTimeoutError(UpstreamError):
    """Raised when an outbound request exceeds the configured timeout."""
