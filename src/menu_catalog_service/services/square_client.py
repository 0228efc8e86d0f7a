"""Client for the Square commerce API."""

import logging
import time
from typing import Any

import httpx
from pydantic import ValidationError

from menu_catalog_service.errors import CatalogServiceError, NotFoundError, UpstreamError
from menu_catalog_service.models.square_models import (
    SquareListLocationsResponse,
    SquareSearchCatalogResponse,
)
from menu_catalog_service.observability import traced
from menu_catalog_service.observability.metrics import (
    record_upstream_call,
    record_upstream_failure,
)

logger = logging.getLogger(__name__)

DEFAULT_API_VERSION = "2024-12-18"
DEFAULT_PAGE_LIMIT = 100


def map_status_error(status_code: int) -> CatalogServiceError:
    """Re-express an upstream HTTP status as one of our error categories.

    Upstream response bodies are never carried over.
    """
    if status_code == 401:
        return UpstreamError("Square authentication failed")
    if status_code == 404:
        return NotFoundError("Resource not found in Square")
    if status_code == 429:
        return UpstreamError("Square API rate limit exceeded")
    return UpstreamError(f"Square API request failed with status {status_code}")


class SquareClient:
    """HTTP client for the Square Locations and Catalog APIs.

    Every failure (timeout, network error, non-2xx status, malformed body) is raised as
    an ``UpstreamError`` (``NotFoundError`` for 404) so callers can abort cleanly.
    """

    def __init__(
        self,
        base_url: str,
        access_token: str,
        api_version: str = DEFAULT_API_VERSION,
        timeout_seconds: float = 15.0,
    ) -> None:
        """Initialize the Square client.

        Args:
            base_url: Square host, e.g. "https://connect.squareupsandbox.com"
            access_token: OAuth or personal access token
            api_version: Value for the Square-Version header
            timeout_seconds: Per-request timeout
        """
        self.base_url = f"{base_url.rstrip('/')}/v2"
        self.access_token = access_token
        self.api_version = api_version
        self.timeout_seconds = timeout_seconds

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.access_token}",
            "Square-Version": self.api_version,
            "Accept": "application/json",
            "Content-Type": "application/json",
        }

    async def _request(
        self, operation: str, method: str, path: str, body: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        url = f"{self.base_url}{path}"
        logger.info(f"Square request -> {method} {path}")
        started = time.perf_counter()

        try:
            async with httpx.AsyncClient(timeout=self.timeout_seconds) as client:
                if method == "GET":
                    response = await client.get(url, headers=self._headers())
                else:
                    response = await client.post(url, headers=self._headers(), json=body)
                response.raise_for_status()
                data: dict[str, Any] = response.json()

        except httpx.HTTPStatusError as e:
            status_code = e.response.status_code
            logger.error(f"Square response <- {status_code} {path}: {e}")
            record_upstream_failure(operation, f"http_{status_code}")
            raise map_status_error(status_code) from e

        except httpx.RequestError as e:
            logger.error(f"Square response <- NETWORK_ERROR {path}: {e}")
            record_upstream_failure(operation, type(e).__name__)
            raise UpstreamError(f"Failed to reach Square for {operation}: {e}") from e

        except ValueError as e:
            logger.error(f"Square response for {path} was not valid JSON: {e}")
            record_upstream_failure(operation, "invalid_json")
            raise UpstreamError(f"Square returned an unreadable body for {operation}") from e

        duration = time.perf_counter() - started
        record_upstream_call(operation, duration)
        logger.info(f"Square response <- {response.status_code} {path} ({duration * 1000:.0f}ms)")
        return data

    @traced("square.list_locations")
    async def list_locations(self) -> SquareListLocationsResponse:
        """Fetch every location of the merchant.

        Returns:
            Parsed ListLocations response with a populated ``locations`` list

        Raises:
            UpstreamError: On any failure, including a response without locations
        """
        data = await self._request("list_locations", "GET", "/locations")

        try:
            parsed = SquareListLocationsResponse.model_validate(data)
        except ValidationError as e:
            record_upstream_failure("list_locations", "invalid_payload")
            raise UpstreamError(f"Unexpected ListLocations payload: {e}") from e

        if parsed.locations is None:
            record_upstream_failure("list_locations", "missing_locations")
            raise UpstreamError("Square API returned no locations")

        return parsed

    @traced("square.search_catalog_objects")
    async def search_catalog_objects(
        self,
        object_types: list[str],
        include_related_objects: bool = True,
        cursor: str | None = None,
        limit: int = DEFAULT_PAGE_LIMIT,
    ) -> SquareSearchCatalogResponse:
        """Fetch one page of catalog objects.

        Args:
            object_types: Catalog object types to return, e.g. ["ITEM"]
            include_related_objects: Whether to include referenced categories and images
            cursor: Cursor from the previous page, None for the first page
            limit: Page size

        Returns:
            Parsed page with objects, related objects and the next cursor

        Raises:
            UpstreamError: On any failure
        """
        body: dict[str, Any] = {
            "object_types": object_types,
            "include_related_objects": include_related_objects,
            "limit": limit,
        }
        if cursor:
            body["cursor"] = cursor

        data = await self._request("search_catalog_objects", "POST", "/catalog/search", body)

        try:
            return SquareSearchCatalogResponse.model_validate(data)
        except ValidationError as e:
            record_upstream_failure("search_catalog_objects", "invalid_payload")
            raise UpstreamError(f"Unexpected SearchCatalogObjects payload: {e}") from e
