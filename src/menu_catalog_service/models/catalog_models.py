"""Menu data models served to the frontend.

These are derived from upstream catalog payloads on every transformation pass and are
never mutated afterwards. They serialize with camelCase field names, except the
location address which keeps the upstream snake_case keys.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

UNCATEGORIZED_NAME = "Uncategorized"
UNCATEGORIZED_ID = "uncategorized"
UNKNOWN_CATEGORY_NAME = "Unknown Category"


class CatalogModel(BaseModel):
    """Base for derived models: frozen, camelCase on the wire."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    def to_cache(self) -> dict:
        """JSON-compatible representation used for cache storage and responses."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class LocationAddress(BaseModel):
    """Address sub-fields; each may be absent.

    Keys keep the upstream snake_case names on the wire.
    """

    model_config = ConfigDict(frozen=True)

    address_line_1: str | None = None
    locality: str | None = None
    administrative_district_level_1: str | None = None
    postal_code: str | None = None


class Location(CatalogModel):
    """An active merchant location."""

    id: str = Field(..., description="Location identifier")
    name: str = Field(..., description="Display name")
    address: LocationAddress = Field(default_factory=LocationAddress)
    timezone: str = Field(default="UTC", description="IANA timezone, UTC when unset")
    status: str = Field(..., description="Location status (always ACTIVE once filtered)")


class MenuItemVariation(CatalogModel):
    """A purchasable variation of a menu item.

    ``price_major`` and ``price_formatted`` are always derived from ``price_minor``.
    """

    id: str
    name: str
    price_minor: int = Field(..., description="Price in minor currency units, as received")
    price_major: float = Field(..., description="Price in major currency units")
    price_formatted: str = Field(..., description="Display price, e.g. $12.50")


class MenuItem(CatalogModel):
    """A menu item with its category and image references resolved."""

    id: str
    name: str
    description: str | None = None
    category: str = Field(..., description="Resolved category name or Uncategorized")
    image_url: str | None = None
    variations: list[MenuItemVariation] = Field(default_factory=list)


class CategoryGroup(CatalogModel):
    """Items sharing a resolved category name."""

    category: str
    category_id: str
    items: list[MenuItem] = Field(default_factory=list)


class Category(CatalogModel):
    """A category with the number of items available at a location."""

    id: str
    name: str
    item_count: int = Field(..., ge=1)


class LocationsResponse(CatalogModel):
    """Envelope for the locations query."""

    locations: list[Location] = Field(default_factory=list)


class CatalogResponse(CatalogModel):
    """Envelope for the full catalog query."""

    categories: list[CategoryGroup] = Field(default_factory=list)


class CategoriesResponse(CatalogModel):
    """Envelope for the categories-with-counts query."""

    categories: list[Category] = Field(default_factory=list)
