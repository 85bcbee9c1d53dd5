"""FastAPI application exposing the price lookup endpoint."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from price_getter.client import serialize_details
from price_getter.config import Settings, get_settings
from price_getter.errors import (
    NotFoundError,
    UpstreamError,
    ValidationError,
)
from price_getter.models import ErrorResponse, PriceQuote
from price_getter.service import PriceService, build_service

logger = logging.getLogger(__name__)

MISSING_PARAMS_MESSAGE = "Missing required query parameters: upc and zip."
UPSTREAM_FAILURE_MESSAGE = "Failed to retrieve data from Kroger."


def create_app(
    settings: Settings | None = None,
    service: PriceService | None = None,
) -> FastAPI:
    """Create the application.

    When ``service`` is given it is used as-is and never closed by the app;
    otherwise one is built from ``settings`` at startup.
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owned = app.state.service is None
        if owned:
            app.state.service = build_service(settings)
        yield
        if owned:
            await app.state.service.aclose()
            app.state.service = None

    app = FastAPI(title="priceGetter", version="1.0.0", lifespan=lifespan)
    app.state.service = service

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    app.add_api_route(
        "/api/price",
        get_price,
        methods=["GET"],
        response_model=PriceQuote,
        responses={
            400: {"model": ErrorResponse},
            404: {"model": ErrorResponse},
            502: {"model": ErrorResponse},
        },
    )
    app.add_api_route("/api/health", health_check, methods=["GET"])
    return app


def get_service(request: Request) -> PriceService:
    return request.app.state.service


def _error(status_code: int, message: str, details: str | None = None) -> JSONResponse:
    content: dict[str, str] = {"error": message}
    if details is not None:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content)


async def get_price(
    upc: str | None = Query(default=None),
    zip_code: str | None = Query(default=None, alias="zip"),
    service: PriceService = Depends(get_service),
):
    """Quote the price of ``upc`` at the Kroger store nearest ``zip``."""
    try:
        if not upc or not zip_code:
            raise ValidationError(MISSING_PARAMS_MESSAGE)
        quote = await service.get_price(upc, zip_code)
    except ValidationError as e:
        return _error(400, str(e))
    except NotFoundError as e:
        logger.info("Price lookup for UPC %s, ZIP %s: %s", upc, zip_code, e)
        return _error(404, str(e))
    except UpstreamError as e:
        # Rate limiting (429) lands here like any other upstream failure.
        logger.error("Error in /api/price for UPC %s, ZIP %s: %s", upc, zip_code, e)
        details = e.details if e.details is not None else str(e)
        return _error(502, UPSTREAM_FAILURE_MESSAGE, serialize_details(details))
    return quote


async def health_check():
    return {"status": "ok"}
