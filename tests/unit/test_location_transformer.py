"""Unit tests for the location transformer."""

from typing import Any

import pytest

from menu_catalog_service.models.square_models import SquareListLocationsResponse, SquareLocation
from menu_catalog_service.transformers.location_transformer import (
    transform_active_locations,
    transform_square_location,
)


@pytest.mark.unit
class TestLocationTransformer:
    """Tests for location transformation."""

    def test_keeps_only_active_locations_in_order(
        self, mock_square_locations: dict[str, Any]
    ) -> None:
        """Test that inactive locations are dropped."""
        response = SquareListLocationsResponse.model_validate(mock_square_locations)

        locations = transform_active_locations(response.locations or [])

        assert [location.id for location in locations] == ["LOC1", "LOC2"]

    def test_maps_address_fields(self, mock_square_locations: dict[str, Any]) -> None:
        """Test that the address keeps only the fields the frontend uses."""
        location = SquareLocation.model_validate(mock_square_locations["locations"][0])

        result = transform_square_location(location)

        assert result.to_cache() == {
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
        }

    def test_partial_address_keeps_snake_case_keys(self) -> None:
        """Test that address keys are not camelCased and absent parts are omitted."""
        location = SquareLocation.model_validate(
            {
                "id": "LOC5",
                "name": "Harbor",
                "status": "ACTIVE",
                "address": {"address_line_1": "1 Main", "postal_code": "9"},
            }
        )

        address = transform_square_location(location).to_cache()["address"]

        assert address == {"address_line_1": "1 Main", "postal_code": "9"}

    def test_missing_address_and_timezone(self) -> None:
        """Test that absent address parts stay absent and timezone defaults to UTC."""
        location = SquareLocation(id="LOC9", name="Pop-up", status="ACTIVE")

        result = transform_square_location(location)

        assert result.timezone == "UTC"
        assert result.address.locality is None
        assert result.to_cache()["address"] == {}

    def test_status_comparison_is_exact(self) -> None:
        """Test that only the ACTIVE status qualifies."""
        locations = [
            SquareLocation(id="A", name="A", status="ACTIVE"),
            SquareLocation(id="B", name="B", status="active"),
        ]

        assert [location.id for location in transform_active_locations(locations)] == ["A"]
