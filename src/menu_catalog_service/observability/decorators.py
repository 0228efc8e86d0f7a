"""OpenTelemetry tracing decorators."""

import functools
import inspect
from collections.abc import Callable
from typing import Any, TypeVar

from opentelemetry import trace
from opentelemetry.trace import Span, Status, StatusCode

F = TypeVar("F", bound=Callable[..., Any])

SERVICE_NAME = "menu-catalog-svc"


def _bind_attributes(
    signature: inspect.Signature, arg_names: tuple[str, ...], args: Any, kwargs: Any
) -> dict[str, str]:
    if not arg_names:
        return {}
    bound = signature.bind_partial(*args, **kwargs)
    return {
        f"arg.{name}": str(bound.arguments[name])
        for name in arg_names
        if bound.arguments.get(name) is not None
    }


def _record_failure(span: Span, error: Exception) -> None:
    span.set_attribute("success", False)
    span.set_attribute("error.type", type(error).__name__)
    span.record_exception(error)
    span.set_status(Status(StatusCode.ERROR, type(error).__name__))


def traced(
    span_name: str | None = None,
    record_args: tuple[str, ...] = (),
    service_name: str = SERVICE_NAME,
) -> Callable[[F], F]:
    """Wrap a function in an OpenTelemetry span.

    Sync and async functions are supported. Exceptions are recorded on the span and
    re-raised unchanged.

    Args:
        span_name: Name for the span (defaults to the function name)
        record_args: Names of call arguments to attach as ``arg.<name>`` attributes
        service_name: Tracer name

    Example:
        @traced("catalog.get_full_catalog", record_args=("location_id",))
        async def get_full_catalog(self, location_id: str) -> CatalogResponse:
            ...
    """

    def decorator(func: F) -> F:
        name = span_name or func.__name__
        tracer = trace.get_tracer(service_name)
        signature = inspect.signature(func)

        @functools.wraps(func)
        async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
            attributes = _bind_attributes(signature, record_args, args, kwargs)
            with tracer.start_as_current_span(name, attributes=attributes) as span:
                span.set_attribute("function.name", func.__name__)
                try:
                    result = await func(*args, **kwargs)
                except Exception as e:
                    _record_failure(span, e)
                    raise
                span.set_attribute("success", True)
                return result

        @functools.wraps(func)
        def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
            attributes = _bind_attributes(signature, record_args, args, kwargs)
            with tracer.start_as_current_span(name, attributes=attributes) as span:
                span.set_attribute("function.name", func.__name__)
                try:
                    result = func(*args, **kwargs)
                except Exception as e:
                    _record_failure(span, e)
                    raise
                span.set_attribute("success", True)
                return result

        if inspect.iscoroutinefunction(func):
            return async_wrapper  # type: ignore
        return sync_wrapper  # type: ignore

    return decorator
