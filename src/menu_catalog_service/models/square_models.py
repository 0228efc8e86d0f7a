"""Upstream commerce API (Square) payload models.

The catalog payload is normalized: items reference categories and images by ID, and the
referenced objects arrive in a separate ``related_objects`` collection. These models keep
that shape as-is; joining happens in the transformer. Unknown fields and unknown object
types are tolerated.
"""

from pydantic import BaseModel, ConfigDict, Field

ITEM_TYPE = "ITEM"
CATEGORY_TYPE = "CATEGORY"
IMAGE_TYPE = "IMAGE"
ITEM_VARIATION_TYPE = "ITEM_VARIATION"

REGULAR_CATEGORY = "REGULAR_CATEGORY"
ACTIVE_STATUS = "ACTIVE"


class SquareModel(BaseModel):
    """Base for upstream models: ignore fields we do not consume."""

    model_config = ConfigDict(extra="ignore")


class SquareMoney(SquareModel):
    """Money amount in minor currency units."""

    amount: int = Field(..., description="Amount in minor units (cents)")
    currency: str | None = None


class SquareAddress(SquareModel):
    """Postal address of a location."""

    address_line_1: str | None = None
    address_line_2: str | None = None
    locality: str | None = None
    administrative_district_level_1: str | None = None
    postal_code: str | None = None
    country: str | None = None


class SquareLocation(SquareModel):
    """A merchant location."""

    id: str
    name: str
    address: SquareAddress | None = None
    timezone: str | None = None
    status: str


class SquareItemVariationData(SquareModel):
    """Payload of an ITEM_VARIATION object."""

    name: str = ""
    pricing_type: str | None = None
    price_money: SquareMoney | None = None


class SquareCategoryReference(SquareModel):
    """Entry of an item's ``categories`` list."""

    id: str
    ordinal: int | None = None


class SquareCategoryData(SquareModel):
    """Payload of a CATEGORY object."""

    name: str
    category_type: str | None = Field(
        None, description="REGULAR_CATEGORY or MENU_CATEGORY; absent means regular"
    )


class SquareImageData(SquareModel):
    """Payload of an IMAGE object."""

    url: str
    caption: str | None = None


class SquareItemData(SquareModel):
    """Payload of an ITEM object."""

    name: str
    description: str | None = None
    category_id: str | None = None
    categories: list[SquareCategoryReference] | None = None
    image_ids: list[str] | None = None
    variations: list["SquareCatalogObject"] | None = None

    @property
    def category_reference(self) -> str | None:
        """Category ID this item points at, if any.

        ``category_id`` wins; otherwise the first entry of ``categories``.
        """
        if self.category_id:
            return self.category_id
        if self.categories:
            return self.categories[0].id
        return None


class SquareCatalogObject(SquareModel):
    """A catalog object of any kind.

    Exactly one of the ``*_data`` blocks is expected to be populated, matching ``type``.
    """

    type: str
    id: str
    present_at_all_locations: bool | None = None
    present_at_location_ids: list[str] | None = None
    item_data: SquareItemData | None = None
    category_data: SquareCategoryData | None = None
    image_data: SquareImageData | None = None
    item_variation_data: SquareItemVariationData | None = None


SquareItemData.model_rebuild()


class SquareSearchCatalogResponse(SquareModel):
    """One page of SearchCatalogObjects."""

    objects: list[SquareCatalogObject] | None = None
    related_objects: list[SquareCatalogObject] | None = None
    cursor: str | None = None


class SquareListLocationsResponse(SquareModel):
    """ListLocations response."""

    locations: list[SquareLocation] | None = None
