"""Select the cache backend from configuration."""

import logging
from typing import Any

from menu_catalog_service.cache.base_cache import CacheProvider
from menu_catalog_service.cache.dynamodb_cache import DynamoDBCacheProvider
from menu_catalog_service.cache.memory_cache import MemoryCacheProvider
from menu_catalog_service.cache.redis_cache import RedisCacheProvider
from menu_catalog_service.config import CacheProviderType, Settings

logger = logging.getLogger(__name__)


def create_cache_provider(settings: Settings, dynamodb_resource: Any | None = None) -> CacheProvider:
    """Create the cache provider named by ``settings.cache_provider``.

    Args:
        settings: Validated application settings
        dynamodb_resource: Boto3 DynamoDB resource, required for the dynamodb backend

    Returns:
        Configured CacheProvider

    Raises:
        ValueError: If the selected backend is missing its connection details
    """
    if settings.cache_provider == CacheProviderType.REDIS:
        if not settings.redis_url:
            raise ValueError("REDIS_URL is required when CACHE_PROVIDER=redis")
        logger.info("Using Redis cache provider")
        return RedisCacheProvider(redis_url=settings.redis_url)

    if settings.cache_provider == CacheProviderType.DYNAMODB:
        if dynamodb_resource is None:
            raise ValueError("A DynamoDB resource is required when CACHE_PROVIDER=dynamodb")
        logger.info(f"Using DynamoDB cache provider - table: {settings.dynamodb_cache_table}")
        return DynamoDBCacheProvider(
            dynamodb_resource=dynamodb_resource, table_name=settings.dynamodb_cache_table
        )

    logger.info("Using in-memory cache provider")
    return MemoryCacheProvider()
