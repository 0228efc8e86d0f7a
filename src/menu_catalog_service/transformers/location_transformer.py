"""Reshape upstream locations into the frontend Location shape."""

from collections.abc import Iterable

from menu_catalog_service.models.catalog_models import Location, LocationAddress
from menu_catalog_service.models.square_models import ACTIVE_STATUS, SquareLocation

DEFAULT_TIMEZONE = "UTC"


def transform_square_location(location: SquareLocation) -> Location:
    """Keep only the fields the frontend needs; address parts stay optional."""
    address = location.address
    return Location(
        id=location.id,
        name=location.name,
        address=LocationAddress(
            address_line_1=address.address_line_1 if address else None,
            locality=address.locality if address else None,
            administrative_district_level_1=(
                address.administrative_district_level_1 if address else None
            ),
            postal_code=address.postal_code if address else None,
        ),
        timezone=location.timezone or DEFAULT_TIMEZONE,
        status=location.status,
    )


def transform_active_locations(locations: Iterable[SquareLocation]) -> list[Location]:
    """Transform the active locations, preserving upstream order."""
    return [
        transform_square_location(location)
        for location in locations
        if location.status == ACTIVE_STATUS
    ]
