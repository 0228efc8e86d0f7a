"""Custom metrics for the menu catalog service."""

from opentelemetry import metrics

meter = metrics.get_meter("menu-catalog-svc")

cache_hit_counter = meter.create_counter(
    name="catalog_cache_hits_total",
    description="Cache hits by cached resource",
    unit="1",
)

cache_miss_counter = meter.create_counter(
    name="catalog_cache_misses_total",
    description="Cache misses by cached resource",
    unit="1",
)

cache_invalidation_counter = meter.create_counter(
    name="catalog_cache_invalidations_total",
    description="Prefix invalidations triggered by catalog change notifications",
    unit="1",
)

upstream_request_duration = meter.create_histogram(
    name="upstream_request_duration_seconds",
    description="Response time of commerce API calls",
    unit="s",
)

upstream_failure_counter = meter.create_counter(
    name="upstream_request_failures_total",
    description="Failed commerce API calls by operation and error category",
    unit="1",
)

pagination_truncation_counter = meter.create_counter(
    name="upstream_pagination_truncated_total",
    description="Aggregations stopped by the page ceiling with a cursor still pending",
    unit="1",
)


def record_cache_lookup(resource: str, hit: bool) -> None:
    """Record a cache lookup outcome.

    Args:
        resource: Cached resource name (locations, catalog, categories)
        hit: Whether the lookup was a hit
    """
    counter = cache_hit_counter if hit else cache_miss_counter
    counter.add(1, {"resource": resource})


def record_cache_invalidation(prefix: str) -> None:
    """Record a prefix invalidation."""
    cache_invalidation_counter.add(1, {"prefix": prefix})


def record_upstream_call(operation: str, duration_seconds: float) -> None:
    """Record a completed commerce API call.

    Args:
        operation: API operation (e.g. "list_locations", "search_catalog_objects")
        duration_seconds: Duration in seconds
    """
    upstream_request_duration.record(duration_seconds, {"operation": operation})


def record_upstream_failure(operation: str, error_type: str) -> None:
    """Record a failed commerce API call."""
    upstream_failure_counter.add(1, {"operation": operation, "error_type": error_type})


def record_pagination_truncated(operation: str) -> None:
    """Record that pagination stopped at the page ceiling."""
    pagination_truncation_counter.add(1, {"operation": operation})
