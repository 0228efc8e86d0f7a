"""Catalog service: cache-aside reads of locations and per-location menus."""

import logging
from dataclasses import dataclass
from typing import Any

from menu_catalog_service.cache.base_cache import CacheProvider
from menu_catalog_service.cache.keys import (
    CATALOG_RESOURCE,
    CATEGORIES_RESOURCE,
    LOCATIONS_RESOURCE,
    CacheKeys,
)
from menu_catalog_service.models.catalog_models import (
    CatalogModel,
    CatalogResponse,
    CategoriesResponse,
    LocationsResponse,
)
from menu_catalog_service.models.square_models import ITEM_TYPE, SquareCatalogObject
from menu_catalog_service.observability import traced
from menu_catalog_service.observability.metrics import (
    record_cache_lookup,
    record_pagination_truncated,
)
from menu_catalog_service.services.square_client import SquareClient
from menu_catalog_service.transformers.catalog_transformer import (
    extract_categories_with_counts,
    filter_items_by_location,
    group_items_by_category,
    select_items,
)
from menu_catalog_service.transformers.location_transformer import transform_active_locations
from menu_catalog_service.utils.pagination import MAX_PAGES, Page, aggregate_pages

logger = logging.getLogger(__name__)


@dataclass
class LocationCatalog:
    """Catalog data scoped to one location, ready for transformation.

    Attributes:
        items: Items present at the location, in upstream order
        related_objects: Related objects collected from every page
        truncated: Whether pagination stopped at the page ceiling
    """

    items: list[SquareCatalogObject]
    related_objects: list[SquareCatalogObject]
    truncated: bool = False


class CatalogService:
    """Serve locations, menus and category counts through the cache.

    Each query checks the cache first and returns a hit verbatim. On a miss it pulls
    every upstream page, transforms, caches the result for ``cache_ttl_seconds`` and
    returns it. Upstream and cache failures propagate; nothing is written to the cache
    for a failed query.
    """

    def __init__(
        self,
        square_client: SquareClient,
        cache: CacheProvider,
        cache_ttl_seconds: int = 300,
        max_pages: int = MAX_PAGES,
    ) -> None:
        """Initialize the CatalogService.

        Args:
            square_client: Client for the commerce API
            cache: Cache provider shared by all queries
            cache_ttl_seconds: TTL applied to every cached result
            max_pages: Page ceiling for catalog searches
        """
        self.square_client = square_client
        self.cache = cache
        self.cache_ttl_seconds = cache_ttl_seconds
        self.max_pages = max_pages

    @traced("catalog.get_active_locations")
    async def get_active_locations(self) -> LocationsResponse:
        """Active locations of the merchant.

        Returns:
            LocationsResponse with only ACTIVE locations
        """
        cache_key = CacheKeys.locations()
        cached = await self._read_cache(LOCATIONS_RESOURCE, cache_key)
        if cached is not None:
            return LocationsResponse.model_validate(cached)

        upstream = await self.square_client.list_locations()
        result = LocationsResponse(locations=transform_active_locations(upstream.locations or []))

        await self._write_cache(cache_key, result)
        return result

    @traced("catalog.get_full_catalog", record_args=("location_id",))
    async def get_full_catalog(self, location_id: str) -> CatalogResponse:
        """Menu for a location, grouped by category.

        Args:
            location_id: Location to scope items to

        Returns:
            CatalogResponse; empty when no item is sold at the location
        """
        cache_key = CacheKeys.catalog(location_id)
        cached = await self._read_cache(CATALOG_RESOURCE, cache_key)
        if cached is not None:
            return CatalogResponse.model_validate(cached)

        catalog = await self._fetch_location_catalog(location_id)
        if not catalog.items:
            logger.warning(f"No items found for location {location_id}")
            result = CatalogResponse(categories=[])
        else:
            result = CatalogResponse(
                categories=group_items_by_category(catalog.items, catalog.related_objects)
            )

        await self._write_cache(cache_key, result)
        return result

    @traced("catalog.get_categories_with_counts", record_args=("location_id",))
    async def get_categories_with_counts(self, location_id: str) -> CategoriesResponse:
        """Categories having at least one item at a location, with item counts.

        Args:
            location_id: Location to scope items to

        Returns:
            CategoriesResponse; empty when no item is sold at the location
        """
        cache_key = CacheKeys.categories(location_id)
        cached = await self._read_cache(CATEGORIES_RESOURCE, cache_key)
        if cached is not None:
            return CategoriesResponse.model_validate(cached)

        catalog = await self._fetch_location_catalog(location_id)
        if not catalog.items:
            logger.warning(f"No items found for location {location_id}")
            result = CategoriesResponse(categories=[])
        else:
            result = CategoriesResponse(
                categories=extract_categories_with_counts(catalog.related_objects, catalog.items)
            )

        await self._write_cache(cache_key, result)
        return result

    async def _fetch_location_catalog(self, location_id: str) -> LocationCatalog:
        """Aggregate every catalog page and keep the items present at a location."""
        related_objects: list[SquareCatalogObject] = []

        async def fetch_page(cursor: str | None) -> Page[SquareCatalogObject]:
            response = await self.square_client.search_catalog_objects(
                object_types=[ITEM_TYPE],
                include_related_objects=True,
                cursor=cursor,
            )
            # Related objects can arrive on any page
            related_objects.extend(response.related_objects or [])
            return Page(objects=response.objects, cursor=response.cursor)

        aggregated = await aggregate_pages(fetch_page, max_pages=self.max_pages)
        if aggregated.truncated:
            logger.warning(
                f"Catalog for location {location_id} truncated after "
                f"{aggregated.pages_fetched} pages"
            )
            record_pagination_truncated("search_catalog_objects")

        items = filter_items_by_location(select_items(aggregated.objects), location_id)
        return LocationCatalog(
            items=items,
            related_objects=related_objects,
            truncated=aggregated.truncated,
        )

    async def _read_cache(self, resource: str, cache_key: str) -> Any | None:
        cached = await self.cache.get(cache_key)
        hit = cached is not None
        record_cache_lookup(resource, hit)
        logger.info(f"Cache {'HIT' if hit else 'MISS'}: {cache_key}")
        return cached

    async def _write_cache(self, cache_key: str, result: CatalogModel) -> None:
        await self.cache.set(cache_key, result.to_cache(), self.cache_ttl_seconds)
