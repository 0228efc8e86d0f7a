"""Cache key builders.

Every key goes through ``build_cache_key`` so prefix-based invalidation lines up with
the keys individual queries write.
"""

KEY_DELIMITER = ":"

LOCATIONS_RESOURCE = "locations"
CATALOG_RESOURCE = "catalog"
CATEGORIES_RESOURCE = "categories"


def build_cache_key(*parts: str) -> str:
    """Join key parts with the namespace delimiter.

    Args:
        *parts: Resource name followed by identifiers

    Returns:
        Colon-joined key, e.g. ``catalog:LOC1``
    """
    return KEY_DELIMITER.join(parts)


class CacheKeys:
    """Canonical keys for each cached query."""

    @staticmethod
    def locations() -> str:
        return build_cache_key(LOCATIONS_RESOURCE)

    @staticmethod
    def catalog(location_id: str) -> str:
        return build_cache_key(CATALOG_RESOURCE, location_id)

    @staticmethod
    def categories(location_id: str) -> str:
        return build_cache_key(CATEGORIES_RESOURCE, location_id)

    @staticmethod
    def catalog_prefix() -> str:
        """Prefix shared by every per-location catalog key (``catalog:``)."""
        return build_cache_key(CATALOG_RESOURCE, "")

    @staticmethod
    def categories_prefix() -> str:
        """Prefix shared by every per-location categories key (``categories:``)."""
        return build_cache_key(CATEGORIES_RESOURCE, "")
