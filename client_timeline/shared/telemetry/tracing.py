"""Span helpers for timeline operations"""
import inspect
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from functools import wraps
from typing import Any

from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

from client_timeline.infrastructure.config.settings import get_settings

# Keyword arguments recorded on every span as ``timeline.<name>``
SPAN_ARGUMENTS = ("timeline_id", "line_id", "event_id", "position")

_tracer = trace.get_tracer("client_timeline")


@contextmanager
def _span(name: str, attributes: dict | None, kwargs: dict[str, Any]) -> Iterator[None]:
    with _tracer.start_as_current_span(name) as span:
        for key, value in (attributes or {}).items():
            span.set_attribute(key, value)
        for key in SPAN_ARGUMENTS:
            if kwargs.get(key) is not None:
                span.set_attribute(f"timeline.{key}", str(kwargs[key]))
        try:
            yield
        except Exception as e:
            span.set_status(Status(StatusCode.ERROR, str(e)))
            span.record_exception(e)
            raise
        span.set_status(Status(StatusCode.OK))


def traced(operation_name: str | None = None, attributes: dict | None = None):
    """
    Wrap a function (sync or async) in a span when telemetry is enabled.

    Usage:
        @traced("timeline.replace_events")
        async def replace_events(self, line_id: str, events: list[TimelineEvent]):
            ...

    Args:
        operation_name: Span name, defaults to ``module.function``
        attributes: Static attributes set on every span
    """

    def decorator(func: Callable) -> Callable:
        span_name = operation_name or f"{func.__module__}.{func.__qualname__}"

        if inspect.iscoroutinefunction(func):

            @wraps(func)
            async def async_wrapper(*args, **kwargs):
                if not get_settings().telemetry_enabled:
                    return await func(*args, **kwargs)
                with _span(span_name, attributes, kwargs):
                    return await func(*args, **kwargs)

            return async_wrapper

        @wraps(func)
        def sync_wrapper(*args, **kwargs):
            if not get_settings().telemetry_enabled:
                return func(*args, **kwargs)
            with _span(span_name, attributes, kwargs):
                return func(*args, **kwargs)

        return sync_wrapper

    return decorator


def add_span_attributes(**attributes) -> None:
    """Set attributes on the current span, skipping None values"""
    span = trace.get_current_span()
    for key, value in attributes.items():
        if value is not None:
            span.set_attribute(key, value)


def add_span_event(name: str, attributes: dict | None = None) -> None:
    """
    Record a point-in-time event on the current span

    Usage:
        add_span_event("line_consolidated", {"removed_line_id": line_id})
    """
    trace.get_current_span().add_event(name, attributes=attributes or {})
