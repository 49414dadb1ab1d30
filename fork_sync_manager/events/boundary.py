"""Error boundary wrapping each event handler."""

from functools import wraps
from typing import Any, Awaitable, Callable, TypeVar

import structlog
from structlog.contextvars import bound_contextvars

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

F = TypeVar("F", bound=Callable[..., Awaitable[Any]])


def error_boundary(event_name: str) -> Callable[[F], F]:
    """Decorator that logs and contains any failure of an event handler.

    A failing handler returns None instead of raising, so one repository's
    failed sync never stops the host from handling later events.
    """

    def decorator(func: F) -> F:
        @wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            with bound_contextvars(webhook_event=event_name):
                try:
                    return await func(*args, **kwargs)
                except Exception as exc:
                    logger.exception(
                        "Error processing event",
                        handler=func.__name__,
                        error=str(exc),
                        error_type=type(exc).__name__,
                    )
                    return None

        return wrapper  # type: ignore

    return decorator
