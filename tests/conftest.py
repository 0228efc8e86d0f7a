"""Shared pytest fixtures and configuration for all tests."""

import os

# Entry-point modules build the application at import unless running under test
os.environ.setdefault("ENVIRONMENT", "test")

from typing import Any  # noqa: E402

import pytest  # noqa: E402

from tests.payloads import make_category, make_image, make_item  # noqa: E402


@pytest.fixture
def mock_location_id() -> str:
    """Fixture providing a standard test location ID."""
    return "LOC1"


@pytest.fixture
def mock_related_objects() -> list[dict[str, Any]]:
    """Fixture providing categories and images referenced by the sample items."""
    return [
        make_category("CAT_PIZZA", "Pizza"),
        make_category("CAT_DRINKS", "Drinks"),
        make_category("CAT_MENU", "Lunch Menu", category_type="MENU_CATEGORY"),
        make_image("IMG1", "https://images.example.com/margherita.jpg"),
    ]


@pytest.fixture
def mock_catalog_items() -> list[dict[str, Any]]:
    """Fixture providing sample items spread across locations."""
    return [
        make_item(
            "ITEM_MARGHERITA",
            "Margherita",
            category_id="CAT_PIZZA",
            prices=[1250, 1800],
            image_ids=["IMG1"],
            description="Tomato, mozzarella, basil",
        ),
        make_item(
            "ITEM_COLA",
            "Cola",
            category_id="CAT_DRINKS",
            prices=[300],
            present_at_all_locations=False,
            present_at_location_ids=["LOC1"],
        ),
        make_item(
            "ITEM_LEMONADE",
            "Lemonade",
            category_id="CAT_DRINKS",
            prices=[350],
            present_at_all_locations=False,
            present_at_location_ids=["LOC2"],
        ),
        make_item("ITEM_BREAD", "Garlic Bread", prices=[500]),
    ]


@pytest.fixture
def mock_square_locations() -> dict[str, Any]:
    """Fixture providing a ListLocations response with one inactive location."""
    return {
        "locations": [
            {
                "id": "LOC1",
                "name": "Downtown",
                "address": {
                    "address_line_1": "1 Main St",
                    "locality": "Springfield",
                    "administrative_district_level_1": "IL",
                    "postal_code": "62701",
                },
                "timezone": "America/Chicago",
                "status": "ACTIVE",
            },
            {"id": "LOC2", "name": "Airport", "status": "ACTIVE"},
            {"id": "LOC3", "name": "Closed Kiosk", "status": "INACTIVE"},
        ]
    }


@pytest.fixture
def mock_catalog_webhook_event() -> dict[str, Any]:
    """Fixture providing a catalog.version.updated notification."""
    return {
        "merchant_id": "MERCHANT_1",
        "type": "catalog.version.updated",
        "event_id": "evt_123",
        "created_at": "2024-01-15T10:30:00Z",
        "data": {"type": "catalog", "id": "catalog_1", "object": {}},
    }


@pytest.fixture
def mock_eventbridge_event(mock_catalog_webhook_event: dict[str, Any]) -> dict[str, Any]:
    """Fixture providing a catalog notification relayed through EventBridge."""
    return {
        "version": "0",
        "id": "event_123",
        "detail-type": "CatalogVersionUpdated",
        "source": "square.webhooks",
        "account": "123456789012",
        "time": "2024-01-15T10:30:00Z",
        "region": "us-east-1",
        "resources": [],
        "detail": mock_catalog_webhook_event,
    }
