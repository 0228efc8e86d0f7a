"""FastAPI application for the menu catalog API."""

import logging
import time
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from datetime import UTC, datetime
from typing import Any

from fastapi import FastAPI, Query, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from menu_catalog_service.cache.base_cache import CacheProvider
from menu_catalog_service.errors import CatalogServiceError
from menu_catalog_service.handlers.event_handler import (
    CacheInvalidationHandler,
    CatalogWebhookEvent,
    WebhookAck,
)
from menu_catalog_service.models.catalog_models import (
    CatalogResponse,
    CategoriesResponse,
    LocationsResponse,
)
from menu_catalog_service.services.catalog_service import CatalogService

logger = logging.getLogger(__name__)


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    timestamp: str


def error_body(code: str, message: str, details: list[dict[str, Any]] | None = None) -> dict:
    """Build the JSON error envelope shared by every failure response."""
    error: dict[str, Any] = {"code": code, "message": message}
    if details is not None:
        error["details"] = details
    return {"error": error}


def create_app(
    catalog_service: CatalogService,
    invalidation_handler: CacheInvalidationHandler,
    cors_origin: str = "http://localhost:5173",
    cache: CacheProvider | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        catalog_service: Service answering the catalog queries
        invalidation_handler: Handler for catalog change notifications
        cors_origin: Origin allowed to call the API from a browser
        cache: Cache provider to start and close with the application

    Returns:
        Configured FastAPI application
    """

    @asynccontextmanager
    async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
        if cache is not None:
            await cache.start()
            logger.info(f"Cache provider started: {cache.backend_name}")
        yield
        if cache is not None:
            await cache.close()

    app = FastAPI(
        title="Menu Catalog Service",
        description="Cached, location-scoped menu catalog served from the Square API",
        version="1.0.0",
        lifespan=lifespan,
    )

    app.state.catalog_service = catalog_service
    app.state.invalidation_handler = invalidation_handler

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[cors_origin],
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type"],
    )

    @app.middleware("http")
    async def log_requests(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        started = time.perf_counter()
        response = await call_next(request)
        duration_ms = (time.perf_counter() - started) * 1000
        message = f"{request.method} {request.url.path} {response.status_code} {duration_ms:.0f}ms"
        if response.status_code >= 500:
            logger.error(message)
        elif response.status_code >= 400:
            logger.warning(message)
        else:
            logger.info(message)
        return response

    @app.exception_handler(CatalogServiceError)
    async def handle_service_error(_request: Request, exc: CatalogServiceError) -> JSONResponse:
        logger.error(f"{exc.code}: {exc.message}")
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(exc.code, exc.public_message),
        )

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(
        _request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        details = [
            {
                "location": str(err["loc"][0]) if err.get("loc") else "request",
                "field": ".".join(str(part) for part in err.get("loc", ())[1:]),
                "message": err.get("msg", "Invalid value"),
            }
            for err in exc.errors()
        ]
        return JSONResponse(
            status_code=400,
            content=error_body("VALIDATION_ERROR", "Request validation failed", details),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(_request: Request, exc: Exception) -> JSONResponse:
        logger.exception(f"Unhandled error: {exc}")
        return JSONResponse(
            status_code=500,
            content=error_body("INTERNAL_ERROR", "Internal server error"),
        )

    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health_check() -> HealthResponse:
        """Health check endpoint.

        Returns:
            Health status with the current UTC time
        """
        return HealthResponse(status="ok", timestamp=datetime.now(UTC).isoformat())

    @app.get(
        "/api/locations",
        response_model=LocationsResponse,
        response_model_by_alias=True,
        response_model_exclude_none=True,
        tags=["Locations"],
    )
    async def get_locations() -> LocationsResponse:
        """List active merchant locations."""
        result: LocationsResponse = await app.state.catalog_service.get_active_locations()
        return result

    @app.get(
        "/api/catalog/categories",
        response_model=CategoriesResponse,
        response_model_by_alias=True,
        response_model_exclude_none=True,
        tags=["Catalog"],
    )
    async def get_categories(
        location_id: str = Query(..., min_length=1, description="Location to scope items to"),
    ) -> CategoriesResponse:
        """List categories with item counts for a location."""
        result: CategoriesResponse = await app.state.catalog_service.get_categories_with_counts(
            location_id
        )
        return result

    @app.get(
        "/api/catalog",
        response_model=CatalogResponse,
        response_model_by_alias=True,
        response_model_exclude_none=True,
        tags=["Catalog"],
    )
    async def get_catalog(
        location_id: str = Query(..., min_length=1, description="Location to scope items to"),
    ) -> CatalogResponse:
        """Menu for a location, grouped by category."""
        result: CatalogResponse = await app.state.catalog_service.get_full_catalog(location_id)
        return result

    @app.post(
        "/webhooks/square/catalog-updated",
        response_model=WebhookAck,
        response_model_exclude_none=True,
        tags=["Webhooks"],
    )
    async def catalog_updated(event: CatalogWebhookEvent) -> WebhookAck:
        """Receive a catalog change notification and invalidate affected caches.

        Signature verification is expected to happen in front of this service.
        """
        ack: WebhookAck = await app.state.invalidation_handler.handle(event)
        return ack

    return app
