"""Catalog change notifications: webhook and EventBridge cache invalidation."""

import logging
from typing import Any

from pydantic import BaseModel, ValidationError

from menu_catalog_service.cache.base_cache import CacheProvider
from menu_catalog_service.cache.keys import CacheKeys
from menu_catalog_service.observability import traced
from menu_catalog_service.observability.metrics import record_cache_invalidation

logger = logging.getLogger(__name__)

CATALOG_VERSION_UPDATED = "catalog.version.updated"


class CatalogWebhookEvent(BaseModel):
    """Change notification sent by the commerce platform.

    Attributes:
        type: Event type, e.g. "catalog.version.updated"
        event_id: Unique id of the notification
        merchant_id: Merchant the change belongs to
        created_at: ISO 8601 timestamp of the change
        data: Event payload, unused beyond logging
    """

    type: str
    event_id: str | None = None
    merchant_id: str | None = None
    created_at: str | None = None
    data: dict[str, Any] | None = None


class WebhookAck(BaseModel):
    """Acknowledgement returned for every notification."""

    message: str
    event_id: str | None = None
    caches_cleared: list[str] | None = None


def parse_eventbridge_event(event: dict[str, Any]) -> CatalogWebhookEvent | None:
    """Parse the ``detail`` of an EventBridge event into a CatalogWebhookEvent.

    Args:
        event: Raw EventBridge event dictionary

    Returns:
        CatalogWebhookEvent if parsing succeeds, None otherwise
    """
    try:
        detail = event.get("detail", {})
        return CatalogWebhookEvent(**detail)
    except (ValidationError, TypeError) as e:
        logger.error(f"Failed to parse EventBridge event: {e}")
        return None


class CacheInvalidationHandler:
    """Clear per-location catalog and category caches when the catalog changes.

    The locations cache is left alone; it only expires through its TTL.
    """

    def __init__(self, cache: CacheProvider) -> None:
        """Initialize the handler.

        Args:
            cache: Cache provider shared with the catalog service
        """
        self.cache = cache

    @traced("catalog.handle_catalog_event")
    async def handle(self, event: CatalogWebhookEvent) -> WebhookAck:
        """Invalidate caches for a catalog version update; acknowledge anything else.

        Args:
            event: The parsed notification

        Returns:
            WebhookAck listing the cleared key patterns, if any

        Raises:
            CacheProviderError: If the backend fails while clearing
        """
        logger.info(f"Received catalog notification: {event.type} (event_id: {event.event_id})")

        if event.type != CATALOG_VERSION_UPDATED:
            logger.info(f"Event type {event.type} received but not processed")
            return WebhookAck(message="Webhook received", event_id=event.event_id)

        prefixes = [CacheKeys.catalog_prefix(), CacheKeys.categories_prefix()]
        for prefix in prefixes:
            await self.cache.clear(prefix)
            record_cache_invalidation(prefix)
        logger.info(f"Cache invalidation complete for prefixes {prefixes}")

        return WebhookAck(
            message="Webhook processed successfully",
            event_id=event.event_id,
            caches_cleared=[f"{prefix}*" for prefix in prefixes],
        )

    async def handle_eventbridge_event(
        self, event: dict[str, Any], _context: Any
    ) -> dict[str, Any]:
        """Lambda handler for catalog notifications relayed through EventBridge.

        Args:
            event: EventBridge event dictionary carrying the notification in ``detail``
            _context: Lambda context object (unused)

        Returns:
            Dictionary with statusCode and body for Lambda response
        """
        catalog_event = parse_eventbridge_event(event)
        if not catalog_event:
            logger.error("Received invalid event format")
            return {
                "statusCode": 400,
                "body": "Invalid event format",
            }

        ack = await self.handle(catalog_event)
        return {
            "statusCode": 200,
            "body": ack.model_dump_json(exclude_none=True),
        }
