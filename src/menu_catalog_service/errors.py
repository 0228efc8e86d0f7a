"""Error taxonomy for the catalog service.

Transformers never raise for irregular catalog data; they resolve to sentinels instead.
Only transport-level problems (the commerce API or a networked cache) surface as errors,
and the HTTP layer re-expresses them as a generic failure without leaking internal detail.
"""


class CatalogServiceError(Exception):
    """Base exception carrying a stable machine-readable code and an HTTP status."""

    code = "INTERNAL_ERROR"
    status_code = 500
    public_message = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        """Initialize the error.

        Args:
            message: Internal detail for logs (never returned to API callers)
        """
        self.message = message or self.public_message
        super().__init__(self.message)


class UpstreamError(CatalogServiceError):
    """The commerce API could not be reached or answered with a failure."""

    code = "UPSTREAM_ERROR"
    status_code = 502
    public_message = "Upstream service error"


class NotFoundError(CatalogServiceError):
    """A referenced upstream entity does not exist."""

    code = "NOT_FOUND"
    status_code = 404
    public_message = "Resource not found"


class CacheProviderError(UpstreamError):
    """A networked cache backend is unreachable or failed mid-operation.

    Reported in the upstream category and never treated as a cache miss.
    """
