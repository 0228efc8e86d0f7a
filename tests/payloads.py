"""Builders for raw Square catalog payloads used across tests."""

from typing import Any

from menu_catalog_service.models.square_models import SquareCatalogObject


def make_item(
    item_id: str,
    name: str,
    category_id: str | None = None,
    prices: list[int | None] | None = None,
    image_ids: list[str] | None = None,
    present_at_all_locations: bool | None = True,
    present_at_location_ids: list[str] | None = None,
    description: str | None = None,
    categories: list[str] | None = None,
) -> dict[str, Any]:
    """Build a raw ITEM catalog object as returned by SearchCatalogObjects."""
    variations = []
    for index, amount in enumerate(prices or []):
        variation_data: dict[str, Any] = {
            "name": f"Size {index + 1}",
            "pricing_type": "FIXED_PRICING",
        }
        if amount is not None:
            variation_data["price_money"] = {"amount": amount, "currency": "USD"}
        variations.append(
            {
                "type": "ITEM_VARIATION",
                "id": f"{item_id}_VAR{index + 1}",
                "item_variation_data": variation_data,
            }
        )

    item_data: dict[str, Any] = {"name": name, "variations": variations}
    if description is not None:
        item_data["description"] = description
    if category_id is not None:
        item_data["category_id"] = category_id
    if categories is not None:
        item_data["categories"] = [{"id": ref} for ref in categories]
    if image_ids is not None:
        item_data["image_ids"] = image_ids

    obj: dict[str, Any] = {"type": "ITEM", "id": item_id, "item_data": item_data}
    if present_at_all_locations is not None:
        obj["present_at_all_locations"] = present_at_all_locations
    if present_at_location_ids is not None:
        obj["present_at_location_ids"] = present_at_location_ids
    return obj


def make_category(
    category_id: str, name: str, category_type: str | None = "REGULAR_CATEGORY"
) -> dict[str, Any]:
    """Build a raw CATEGORY catalog object."""
    category_data: dict[str, Any] = {"name": name}
    if category_type is not None:
        category_data["category_type"] = category_type
    return {"type": "CATEGORY", "id": category_id, "category_data": category_data}


def make_image(image_id: str, url: str) -> dict[str, Any]:
    """Build a raw IMAGE catalog object."""
    return {"type": "IMAGE", "id": image_id, "image_data": {"url": url}}


def to_objects(raw: list[dict[str, Any]]) -> list[SquareCatalogObject]:
    """Validate raw catalog payloads into models."""
    return [SquareCatalogObject.model_validate(obj) for obj in raw]
