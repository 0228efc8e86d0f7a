"""Shared dependency factory for Lambda handlers.

This module provides cached dependency initialization to optimize Lambda cold starts.
Dependencies are created once and reused across invocations within the same Lambda container.
"""

import logging
import os
from typing import Any

import boto3
from fastapi import FastAPI

from menu_catalog_service.cache import CacheProvider, create_cache_provider
from menu_catalog_service.config import CacheProviderType, Settings
from menu_catalog_service.handlers.api_handler import create_app
from menu_catalog_service.handlers.event_handler import CacheInvalidationHandler
from menu_catalog_service.observability import configure_logging, setup_observability
from menu_catalog_service.services.catalog_service import CatalogService
from menu_catalog_service.services.square_client import SquareClient

logger = logging.getLogger(__name__)

# Module-level caches for Lambda container reuse
_settings: Settings | None = None
_dynamodb_resource: Any | None = None
_cache_provider: CacheProvider | None = None
_catalog_service: CatalogService | None = None
_invalidation_handler: CacheInvalidationHandler | None = None
_fastapi_app: FastAPI | None = None


def get_settings() -> Settings:
    """Load or retrieve cached settings.

    Returns:
        Validated Settings instance
    """
    global _settings

    if _settings is None:
        _settings = Settings.from_env()

    return _settings


def get_dynamodb_resource() -> Any:
    """Create or retrieve cached DynamoDB resource.

    Returns:
        Boto3 DynamoDB resource configured for environment
    """
    global _dynamodb_resource

    if _dynamodb_resource is not None:
        return _dynamodb_resource

    settings = get_settings()

    if settings.dynamodb_endpoint:
        # Local DynamoDB - use environment variables
        logger.info(f"Using local DynamoDB at {settings.dynamodb_endpoint}")
        _dynamodb_resource = boto3.resource(
            "dynamodb",
            endpoint_url=settings.dynamodb_endpoint,
            region_name=settings.aws_region,
            aws_access_key_id=os.getenv("AWS_ACCESS_KEY_ID"),
            aws_secret_access_key=os.getenv("AWS_SECRET_ACCESS_KEY"),
        )
    else:
        logger.info(f"Using AWS DynamoDB in region {settings.aws_region}")
        _dynamodb_resource = boto3.resource("dynamodb", region_name=settings.aws_region)

    return _dynamodb_resource


def get_cache_provider() -> CacheProvider:
    """Create or retrieve the cached cache provider.

    Returns:
        CacheProvider selected by CACHE_PROVIDER
    """
    global _cache_provider

    if _cache_provider is not None:
        return _cache_provider

    settings = get_settings()
    dynamodb_resource = None
    if settings.cache_provider == CacheProviderType.DYNAMODB:
        dynamodb_resource = get_dynamodb_resource()

    _cache_provider = create_cache_provider(settings, dynamodb_resource=dynamodb_resource)

    logger.info(f"Cache provider initialized: {_cache_provider.backend_name}")
    return _cache_provider


def get_catalog_service() -> CatalogService:
    """Create or retrieve cached catalog service.

    Returns:
        Configured CatalogService instance
    """
    global _catalog_service

    if _catalog_service is not None:
        return _catalog_service

    settings = get_settings()
    square_client = SquareClient(
        base_url=settings.square_base_url,
        access_token=settings.square_access_token,
        api_version=settings.square_api_version,
        timeout_seconds=settings.square_timeout_seconds,
    )

    _catalog_service = CatalogService(
        square_client=square_client,
        cache=get_cache_provider(),
        cache_ttl_seconds=settings.cache_ttl_seconds,
    )

    logger.info("Catalog service initialized")
    return _catalog_service


def get_invalidation_handler() -> CacheInvalidationHandler:
    """Create or retrieve cached invalidation handler.

    Returns:
        Configured CacheInvalidationHandler instance
    """
    global _invalidation_handler

    if _invalidation_handler is not None:
        return _invalidation_handler

    _invalidation_handler = CacheInvalidationHandler(cache=get_cache_provider())

    logger.info("Invalidation handler initialized")
    return _invalidation_handler


def get_fastapi_app() -> FastAPI:
    """Create or retrieve cached FastAPI application.

    Returns:
        Configured FastAPI application instance
    """
    global _fastapi_app

    if _fastapi_app is not None:
        return _fastapi_app

    _fastapi_app = create_app(
        catalog_service=get_catalog_service(),
        invalidation_handler=get_invalidation_handler(),
        cors_origin=get_settings().cors_origin,
        cache=get_cache_provider(),
    )

    logger.info("FastAPI application initialized")
    return _fastapi_app


def initialize_lambda_environment() -> None:
    """Initialize Lambda environment with logging and observability.

    Should be called once during Lambda cold start.
    """
    configure_logging(get_settings().log_level)
    setup_observability()

    logger.info("Lambda environment initialized")
