"""Cache providers and key builders."""

from menu_catalog_service.cache.base_cache import CacheProvider
from menu_catalog_service.cache.factory import create_cache_provider
from menu_catalog_service.cache.keys import CacheKeys, build_cache_key

__all__ = ["CacheProvider", "CacheKeys", "build_cache_key", "create_cache_provider"]
