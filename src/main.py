"""Main application entry point for the menu catalog service.

This module provides the FastAPI application factory and configuration
for running the service locally or in production.
"""

import logging
import os
from typing import Any

import boto3
from fastapi import FastAPI

from menu_catalog_service.cache import create_cache_provider
from menu_catalog_service.config import CacheProviderType, Settings
from menu_catalog_service.handlers.api_handler import create_app
from menu_catalog_service.handlers.event_handler import CacheInvalidationHandler
from menu_catalog_service.observability import configure_logging, setup_observability
from menu_catalog_service.services.catalog_service import CatalogService
from menu_catalog_service.services.square_client import SquareClient

logger = logging.getLogger(__name__)


def get_dynamodb_resource(settings: Settings) -> Any:
    """Create DynamoDB resource with appropriate configuration.

    Args:
        settings: Validated application settings

    Returns:
        Boto3 DynamoDB resource configured for environment
    """
    if settings.dynamodb_endpoint:
        # Local DynamoDB - use environment variables or defaults for credentials
        logger.info(f"Using local DynamoDB at {settings.dynamodb_endpoint}")
        return boto3.resource(
            "dynamodb",
            endpoint_url=settings.dynamodb_endpoint,
            region_name=settings.aws_region,
            aws_access_key_id=os.getenv("AWS_ACCESS_KEY_ID"),
            aws_secret_access_key=os.getenv("AWS_SECRET_ACCESS_KEY"),
        )

    logger.info(f"Using AWS DynamoDB in region {settings.aws_region}")
    # boto3 uses the default credential chain (IAM role, env vars, etc.)
    return boto3.resource("dynamodb", region_name=settings.aws_region)


def create_application() -> FastAPI:
    """Create and configure the FastAPI application with all dependencies.

    This factory function:
    1. Loads and validates settings
    2. Configures logging
    3. Creates the cache provider
    4. Creates the Square client and catalog service
    5. Creates FastAPI app with catalog and webhook endpoints
    6. Sets up observability

    Returns:
        Configured FastAPI application instance

    Raises:
        ValueError: If the environment configuration is invalid
    """
    settings = Settings.from_env()
    configure_logging(settings.log_level)

    logger.info("Initializing menu catalog service...")

    dynamodb_resource = None
    if settings.cache_provider == CacheProviderType.DYNAMODB:
        dynamodb_resource = get_dynamodb_resource(settings)

    cache = create_cache_provider(settings, dynamodb_resource=dynamodb_resource)

    square_client = SquareClient(
        base_url=settings.square_base_url,
        access_token=settings.square_access_token,
        api_version=settings.square_api_version,
        timeout_seconds=settings.square_timeout_seconds,
    )
    logger.info(f"Square client configured - environment: {settings.square_environment.value}")

    catalog_service = CatalogService(
        square_client=square_client,
        cache=cache,
        cache_ttl_seconds=settings.cache_ttl_seconds,
    )
    invalidation_handler = CacheInvalidationHandler(cache=cache)

    app = create_app(
        catalog_service=catalog_service,
        invalidation_handler=invalidation_handler,
        cors_origin=settings.cors_origin,
        cache=cache,
    )

    setup_observability(app)

    logger.info(f"Menu catalog service initialized - cache provider: {cache.backend_name}")
    return app


# Create the FastAPI application instance (only when not in test mode)
# This prevents the app from being created during test collection
if os.getenv("ENVIRONMENT") != "test":  # noqa: SIM108
    app = create_application()
else:
    # Create a placeholder app for test imports
    app = FastAPI()


if __name__ == "__main__":
    """Run the application with uvicorn when executed directly."""
    import uvicorn

    port = int(os.getenv("PORT", "8001"))
    host = os.getenv("HOST", "0.0.0.0")

    logger.info(f"Starting development server on {host}:{port}")
    logger.info(f"API documentation available at http://{host}:{port}/docs")

    uvicorn.run(
        "main:app",
        host=host,
        port=port,
        reload=True,
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
    )
