"""Reshape normalized catalog payloads into menu structures.

Square returns catalog items in ``objects`` and the categories and images they reference
in ``related_objects``. This module joins those references through ID-keyed lookups
built once per pass, then groups and counts items for a single location.

Everything here is pure: no I/O, and irregular data (unknown category, missing image,
missing price) resolves to documented sentinels instead of raising.
"""

import logging
import unicodedata
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from decimal import Decimal

from menu_catalog_service.models.catalog_models import (
    UNCATEGORIZED_ID,
    UNCATEGORIZED_NAME,
    UNKNOWN_CATEGORY_NAME,
    Category,
    CategoryGroup,
    MenuItem,
    MenuItemVariation,
)
from menu_catalog_service.models.square_models import (
    CATEGORY_TYPE,
    IMAGE_TYPE,
    ITEM_TYPE,
    REGULAR_CATEGORY,
    SquareCatalogObject,
)

logger = logging.getLogger(__name__)

CURRENCY_SYMBOL = "$"
MINOR_UNITS_PER_MAJOR = 100


@dataclass(frozen=True)
class RelatedObjectIndex:
    """ID-keyed lookups over a ``related_objects`` collection.

    Only regular (product) categories are indexed; menu-grouping categories share the
    ID namespace but describe a different concept. The first occurrence of an ID or
    name wins when the collection contains duplicates.
    """

    category_names: dict[str, str] = field(default_factory=dict)
    category_ids_by_name: dict[str, str] = field(default_factory=dict)
    image_urls: dict[str, str] = field(default_factory=dict)

    @classmethod
    def build(cls, related_objects: Iterable[SquareCatalogObject]) -> "RelatedObjectIndex":
        category_names: dict[str, str] = {}
        category_ids_by_name: dict[str, str] = {}
        image_urls: dict[str, str] = {}

        for obj in related_objects:
            if obj.type == CATEGORY_TYPE and is_regular_category(obj):
                name = obj.category_data.name  # type: ignore[union-attr]
                category_names.setdefault(obj.id, name)
                category_ids_by_name.setdefault(name, obj.id)
            elif obj.type == IMAGE_TYPE and obj.image_data is not None:
                image_urls.setdefault(obj.id, obj.image_data.url)

        return cls(
            category_names=category_names,
            category_ids_by_name=category_ids_by_name,
            image_urls=image_urls,
        )


def is_regular_category(obj: SquareCatalogObject) -> bool:
    """Whether a CATEGORY object is a product category (absent kind counts as regular)."""
    if obj.category_data is None:
        return False
    kind = obj.category_data.category_type
    return kind is None or kind == REGULAR_CATEGORY


def collation_key(name: str) -> str:
    """Sort key approximating locale-aware comparison: accents stripped, case folded.

    Names differing only in case or accents (e.g. "apple" and "Apple") compare equal and
    keep their insertion order under a stable sort. ICU-style collation would instead
    place the lowercase form first.
    """
    decomposed = unicodedata.normalize("NFKD", name)
    return "".join(char for char in decomposed if not unicodedata.combining(char)).casefold()


def select_items(objects: Iterable[SquareCatalogObject]) -> list[SquareCatalogObject]:
    """Keep ITEM objects that carry item data."""
    return [obj for obj in objects if obj.type == ITEM_TYPE and obj.item_data is not None]


def is_present_at_location(item: SquareCatalogObject, location_id: str) -> bool:
    """Whether an item is sold at ``location_id``.

    True when the item is present everywhere, or when its explicit location list
    contains the exact ID. IDs are compared case-sensitively.
    """
    if item.present_at_all_locations is True:
        return True
    return location_id in (item.present_at_location_ids or [])


def filter_items_by_location(
    items: Iterable[SquareCatalogObject], location_id: str
) -> list[SquareCatalogObject]:
    """Items available at a location, in their original order."""
    return [item for item in items if is_present_at_location(item, location_id)]


def to_major_units(amount_minor: int) -> float:
    """Convert minor units to a major-unit number (1250 -> 12.5)."""
    return amount_minor / MINOR_UNITS_PER_MAJOR


def format_price(amount_minor: int) -> str:
    """Format minor units as a fixed two-decimal dollar string (1250 -> "$12.50")."""
    major = Decimal(abs(amount_minor)) / MINOR_UNITS_PER_MAJOR
    sign = "-" if amount_minor < 0 else ""
    return f"{sign}{CURRENCY_SYMBOL}{major:.2f}"


def resolve_category_name(item: SquareCatalogObject, index: RelatedObjectIndex) -> str:
    """Resolved category name, or "Uncategorized" when absent or unresolvable."""
    reference = item.item_data.category_reference if item.item_data else None
    if not reference:
        return UNCATEGORIZED_NAME
    return index.category_names.get(reference, UNCATEGORIZED_NAME)


def resolve_image_url(item: SquareCatalogObject, index: RelatedObjectIndex) -> str | None:
    """URL of the item's first image, or None when it has none or it does not resolve."""
    image_ids = item.item_data.image_ids if item.item_data else None
    if not image_ids:
        return None
    return index.image_urls.get(image_ids[0])


def transform_variations(item: SquareCatalogObject) -> list[MenuItemVariation]:
    """Build priced variations; a variation without a price counts as zero."""
    variations: list[MenuItemVariation] = []
    for variation in (item.item_data.variations if item.item_data else None) or []:
        data = variation.item_variation_data
        amount = data.price_money.amount if data and data.price_money else 0
        variations.append(
            MenuItemVariation(
                id=variation.id,
                name=data.name if data else "",
                price_minor=amount,
                price_major=to_major_units(amount),
                price_formatted=format_price(amount),
            )
        )
    return variations


def transform_catalog_item(item: SquareCatalogObject, index: RelatedObjectIndex) -> MenuItem:
    """Build a MenuItem with category, image and prices resolved.

    Args:
        item: ITEM catalog object (must carry item data)
        index: Lookups built from the related objects

    Returns:
        MenuItem for the frontend
    """
    item_data = item.item_data
    if item_data is None:
        raise ValueError(f"Catalog object {item.id} has no item data")

    return MenuItem(
        id=item.id,
        name=item_data.name,
        description=item_data.description,
        category=resolve_category_name(item, index),
        image_url=resolve_image_url(item, index),
        variations=transform_variations(item),
    )


def extract_categories_with_counts(
    related_objects: Sequence[SquareCatalogObject],
    items: Sequence[SquareCatalogObject],
) -> list[Category]:
    """Count location-filtered items per category reference.

    Only categories referenced by at least one of ``items`` appear; upstream category
    metadata never contributes counts. A referenced ID missing from the related objects
    is still reported, named "Unknown Category".

    Args:
        related_objects: Related objects aggregated across every page
        items: Items already filtered to one location

    Returns:
        Categories sorted by name
    """
    index = RelatedObjectIndex.build(related_objects)

    counts: dict[str, int] = {}
    for item in items:
        reference = item.item_data.category_reference if item.item_data else None
        if reference:
            counts[reference] = counts.get(reference, 0) + 1

    categories: list[Category] = []
    for category_id, count in counts.items():
        name = index.category_names.get(category_id)
        if name is None:
            logger.warning(f"Category {category_id} referenced but not found in related objects")
            name = UNKNOWN_CATEGORY_NAME
        categories.append(Category(id=category_id, name=name, item_count=count))

    return sorted(categories, key=lambda category: collation_key(category.name))


def group_items_by_category(
    items: Sequence[SquareCatalogObject],
    related_objects: Sequence[SquareCatalogObject],
) -> list[CategoryGroup]:
    """Transform items and group them by resolved category name.

    Grouping is by display name, not ID: two category IDs with the same name share one
    group. Each group's ID is the first regular category carrying that name, or
    "uncategorized". Groups are sorted by name; items keep their upstream order.

    Args:
        items: Items already filtered to one location
        related_objects: Related objects aggregated across every page

    Returns:
        Sorted category groups
    """
    index = RelatedObjectIndex.build(related_objects)

    grouped: dict[str, list[MenuItem]] = {}
    for item in items:
        menu_item = transform_catalog_item(item, index)
        grouped.setdefault(menu_item.category, []).append(menu_item)

    groups = [
        CategoryGroup(
            category=name,
            category_id=index.category_ids_by_name.get(name, UNCATEGORIZED_ID),
            items=menu_items,
        )
        for name, menu_items in grouped.items()
    ]

    return sorted(groups, key=lambda group: collation_key(group.category))
