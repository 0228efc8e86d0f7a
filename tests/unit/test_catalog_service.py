"""Unit tests for CatalogService."""

from typing import Any
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from menu_catalog_service.cache.base_cache import CacheProvider
from menu_catalog_service.cache.memory_cache import MemoryCacheProvider
from menu_catalog_service.errors import CacheProviderError, UpstreamError
from menu_catalog_service.models.catalog_models import (
    CatalogResponse,
    CategoriesResponse,
    LocationsResponse,
)
from menu_catalog_service.models.square_models import (
    SquareListLocationsResponse,
    SquareSearchCatalogResponse,
)
from menu_catalog_service.services.catalog_service import CatalogService
from menu_catalog_service.services.square_client import SquareClient
from tests.payloads import make_category, make_item


def search_page(
    objects: list[dict[str, Any]],
    related_objects: list[dict[str, Any]] | None = None,
    cursor: str | None = None,
) -> SquareSearchCatalogResponse:
    """Build one parsed SearchCatalogObjects page."""
    return SquareSearchCatalogResponse.model_validate(
        {"objects": objects, "related_objects": related_objects or [], "cursor": cursor}
    )


@pytest.mark.unit
class TestCatalogService:
    """Test suite for CatalogService."""

    @pytest.fixture
    def mock_square_client(self) -> MagicMock:
        """Create a mock SquareClient."""
        client = MagicMock(spec=SquareClient)
        client.list_locations = AsyncMock()
        client.search_catalog_objects = AsyncMock()
        return client

    @pytest.fixture
    def cache(self) -> MemoryCacheProvider:
        """Create a real in-memory cache."""
        return MemoryCacheProvider()

    @pytest.fixture
    def service(self, mock_square_client: MagicMock, cache: MemoryCacheProvider) -> CatalogService:
        """Create a CatalogService with mocked upstream."""
        return CatalogService(
            square_client=mock_square_client, cache=cache, cache_ttl_seconds=300
        )

    @pytest.mark.asyncio
    async def test_get_active_locations_filters_and_caches(
        self,
        service: CatalogService,
        mock_square_client: MagicMock,
        cache: MemoryCacheProvider,
        mock_square_locations: dict[str, Any],
    ) -> None:
        """Test that only active locations are returned and the result is cached."""
        mock_square_client.list_locations.return_value = (
            SquareListLocationsResponse.model_validate(mock_square_locations)
        )

        result = await service.get_active_locations()

        assert isinstance(result, LocationsResponse)
        assert [location.id for location in result.locations] == ["LOC1", "LOC2"]
        assert await cache.get("locations") == result.to_cache()

    @pytest.mark.asyncio
    async def test_get_active_locations_cache_hit_skips_upstream(
        self,
        service: CatalogService,
        mock_square_client: MagicMock,
        mock_square_locations: dict[str, Any],
    ) -> None:
        """Test that a second call within the TTL is served from the cache."""
        mock_square_client.list_locations.return_value = (
            SquareListLocationsResponse.model_validate(mock_square_locations)
        )

        first = await service.get_active_locations()
        second = await service.get_active_locations()

        assert second == first
        mock_square_client.list_locations.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_get_full_catalog_groups_location_items(
        self,
        service: CatalogService,
        mock_square_client: MagicMock,
        mock_catalog_items: list[dict[str, Any]],
        mock_related_objects: list[dict[str, Any]],
    ) -> None:
        """Test that the catalog is filtered to the location and grouped by category."""
        mock_square_client.search_catalog_objects.return_value = search_page(
            mock_catalog_items, mock_related_objects
        )

        result = await service.get_full_catalog("LOC1")

        assert isinstance(result, CatalogResponse)
        assert [group.category for group in result.categories] == [
            "Drinks",
            "Pizza",
            "Uncategorized",
        ]
        drinks = result.categories[0]
        assert drinks.category_id == "CAT_DRINKS"
        assert [item.name for item in drinks.items] == ["Cola"]
        pizza = result.categories[1]
        assert pizza.items[0].image_url == "https://images.example.com/margherita.jpg"
        assert pizza.items[0].variations[0].price_formatted == "$12.50"
        mock_square_client.search_catalog_objects.assert_awaited_once_with(
            object_types=["ITEM"], include_related_objects=True, cursor=None
        )

    @pytest.mark.asyncio
    async def test_related_objects_accumulated_across_pages(
        self, service: CatalogService, mock_square_client: MagicMock
    ) -> None:
        """Test that a category arriving on a later page still resolves earlier items."""
        mock_square_client.search_catalog_objects.side_effect = [
            search_page([make_item("1", "Cola", category_id="CAT_D")], cursor="page-2"),
            search_page(
                [make_item("2", "Tea", category_id="CAT_D")],
                related_objects=[make_category("CAT_D", "Drinks")],
            ),
        ]

        result = await service.get_full_catalog("LOC1")

        assert len(result.categories) == 1
        assert result.categories[0].category == "Drinks"
        assert [item.id for item in result.categories[0].items] == ["1", "2"]
        cursors = [
            call.kwargs["cursor"]
            for call in mock_square_client.search_catalog_objects.await_args_list
        ]
        assert cursors == [None, "page-2"]

    @pytest.mark.asyncio
    async def test_get_categories_with_counts(
        self,
        service: CatalogService,
        mock_square_client: MagicMock,
        mock_catalog_items: list[dict[str, Any]],
        mock_related_objects: list[dict[str, Any]],
    ) -> None:
        """Test category counts for one location."""
        mock_square_client.search_catalog_objects.return_value = search_page(
            mock_catalog_items, mock_related_objects
        )

        result = await service.get_categories_with_counts("LOC2")

        assert isinstance(result, CategoriesResponse)
        assert [(c.id, c.name, c.item_count) for c in result.categories] == [
            ("CAT_DRINKS", "Drinks", 1),
            ("CAT_PIZZA", "Pizza", 1),
        ]

    @pytest.mark.asyncio
    async def test_empty_location_result_is_cached(
        self, service: CatalogService, mock_square_client: MagicMock, cache: MemoryCacheProvider
    ) -> None:
        """Test that an empty catalog is cached so repeat calls do not re-fetch."""
        mock_square_client.search_catalog_objects.return_value = search_page(
            [make_item("1", "Cola", present_at_all_locations=False, present_at_location_ids=["X"])]
        )

        first_catalog = await service.get_full_catalog("LOC1")
        second_catalog = await service.get_full_catalog("LOC1")
        first_categories = await service.get_categories_with_counts("LOC1")
        second_categories = await service.get_categories_with_counts("LOC1")

        assert first_catalog.categories == [] and second_catalog.categories == []
        assert first_categories.categories == [] and second_categories.categories == []
        assert await cache.get("catalog:LOC1") == {"categories": []}
        assert await cache.get("categories:LOC1") == {"categories": []}
        assert mock_square_client.search_catalog_objects.await_count == 2

    @pytest.mark.asyncio
    async def test_catalog_and_categories_cached_independently(
        self,
        service: CatalogService,
        mock_square_client: MagicMock,
        mock_catalog_items: list[dict[str, Any]],
    ) -> None:
        """Test that each query has its own key per location."""
        mock_square_client.search_catalog_objects.return_value = search_page(mock_catalog_items)

        await service.get_full_catalog("LOC1")
        await service.get_full_catalog("LOC2")
        await service.get_categories_with_counts("LOC1")
        await service.get_full_catalog("LOC1")

        assert mock_square_client.search_catalog_objects.await_count == 3

    @pytest.mark.asyncio
    async def test_upstream_failure_propagates_without_cache_write(
        self, service: CatalogService, mock_square_client: MagicMock, cache: MemoryCacheProvider
    ) -> None:
        """Test that a failed fetch aborts the query and caches nothing."""
        mock_square_client.search_catalog_objects.side_effect = [
            search_page([make_item("1", "Cola")], cursor="page-2"),
            UpstreamError("Square API request failed with status 500"),
        ]

        with pytest.raises(UpstreamError):
            await service.get_full_catalog("LOC1")

        assert await cache.has("catalog:LOC1") is False

    @pytest.mark.asyncio
    async def test_cache_failure_is_not_a_miss(self, mock_square_client: MagicMock) -> None:
        """Test that a failing cache backend surfaces instead of triggering a fetch."""
        failing_cache = MagicMock(spec=CacheProvider)
        failing_cache.get = AsyncMock(side_effect=CacheProviderError("Redis get failed"))
        service = CatalogService(square_client=mock_square_client, cache=failing_cache)

        with pytest.raises(CacheProviderError):
            await service.get_categories_with_counts("LOC1")

        mock_square_client.search_catalog_objects.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_cached_value_returned_verbatim(
        self, service: CatalogService, mock_square_client: MagicMock, cache: MemoryCacheProvider
    ) -> None:
        """Test that a hit is returned without touching upstream."""
        cached = {
            "categories": [
                {
                    "category": "Soups",
                    "categoryId": "CAT_S",
                    "items": [{"id": "1", "name": "Tomato", "category": "Soups", "variations": []}],
                }
            ]
        }
        await cache.set("catalog:LOC1", cached, 300)

        result = await service.get_full_catalog("LOC1")

        assert result.to_cache() == cached
        mock_square_client.search_catalog_objects.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_truncated_pagination_is_recorded(
        self, mock_square_client: MagicMock, cache: MemoryCacheProvider
    ) -> None:
        """Test that hitting the page ceiling is reported and partial data is served."""
        mock_square_client.search_catalog_objects.return_value = search_page(
            [make_item("1", "Cola")], cursor="again"
        )
        service = CatalogService(square_client=mock_square_client, cache=cache, max_pages=2)

        with patch(
            "menu_catalog_service.services.catalog_service.record_pagination_truncated"
        ) as mock_record:
            result = await service.get_full_catalog("LOC1")

        mock_record.assert_called_once_with("search_catalog_objects")
        assert mock_square_client.search_catalog_objects.await_count == 2
        assert len(result.categories[0].items) == 2

    @pytest.mark.asyncio
    async def test_ttl_passed_to_cache(self, mock_square_client: MagicMock) -> None:
        """Test that results are written with the configured TTL."""
        mock_cache = MagicMock(spec=CacheProvider)
        mock_cache.get = AsyncMock(return_value=None)
        mock_cache.set = AsyncMock()
        mock_square_client.list_locations.return_value = SquareListLocationsResponse(locations=[])
        service = CatalogService(
            square_client=mock_square_client, cache=mock_cache, cache_ttl_seconds=42
        )

        await service.get_active_locations()

        mock_cache.set.assert_awaited_once_with("locations", {"locations": []}, 42)
