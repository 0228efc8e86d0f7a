"""Cursor pagination helper for the upstream commerce API."""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

MAX_PAGES = 10


@dataclass
class Page(Generic[T]):
    """One page as returned by a fetch function.

    Attributes:
        objects: Objects on this page (None is treated as empty)
        cursor: Cursor for the next page; empty or None when this is the last page
    """

    objects: list[T] | None = None
    cursor: str | None = None


@dataclass
class AggregatedPages(Generic[T]):
    """Result of following a cursor to the end.

    Attributes:
        objects: All objects from every fetched page, in page-arrival order
        pages_fetched: Number of fetch calls made
        truncated: True if the page ceiling stopped aggregation while a cursor remained
    """

    objects: list[T] = field(default_factory=list)
    pages_fetched: int = 0
    truncated: bool = False


async def aggregate_pages(
    fetch_page: Callable[[str | None], Awaitable[Page[T]]],
    max_pages: int = MAX_PAGES,
) -> AggregatedPages[T]:
    """Call ``fetch_page`` repeatedly, following cursors, and concatenate the objects.

    Starts with no cursor and stops when a page carries no cursor or when ``max_pages``
    pages have been fetched. Hitting the ceiling is not an error; the objects collected
    so far are returned with ``truncated`` set. Exceptions from ``fetch_page`` propagate
    immediately and nothing is returned.

    Args:
        fetch_page: Async callable taking the current cursor (None for the first page)
        max_pages: Hard ceiling on the number of pages fetched

    Returns:
        AggregatedPages with every object in page order

    Example:
        async def fetch(cursor: str | None) -> Page[dict]:
            data = await client.search(cursor=cursor)
            return Page(objects=data["objects"], cursor=data.get("cursor"))

        result = await aggregate_pages(fetch)
    """
    result: AggregatedPages[T] = AggregatedPages()
    cursor: str | None = None

    while True:
        page = await fetch_page(cursor)
        result.pages_fetched += 1

        objects = page.objects or []
        result.objects.extend(objects)
        cursor = page.cursor or None

        logger.debug(
            f"Fetched page {result.pages_fetched} with {len(objects)} objects"
            + (", more pages pending" if cursor else " (final page)")
        )

        if not cursor:
            break

        if result.pages_fetched >= max_pages:
            result.truncated = True
            logger.warning(f"Reached max page limit ({max_pages}), stopping with cursor pending")
            break

    logger.info(
        f"Aggregation complete: {len(result.objects)} objects across "
        f"{result.pages_fetched} pages"
    )
    return result
