"""Error handling decorators.

Both decorators work on sync and async callables and keep the wrapped
signature. Neither converts exceptions: what the function raises is what the
caller sees.
"""

import inspect
from collections.abc import Awaitable, Callable
from functools import wraps
from typing import Any, ParamSpec, TypeVar, cast

from .base import ApplicationError, ErrorLevel
from .error_context import ErrorContext
from .logging import get_logger

logger = get_logger(__name__)
P = ParamSpec("P")
T = TypeVar("T")


def _wrap(
    func: Callable[P, T],
    on_error: Callable[[Callable[..., Any], Exception], bool],
) -> Callable[P, T]:
    """Wrap ``func`` so ``on_error`` sees every exception.

    ``on_error`` returns whether the exception should be re-raised; when it
    returns False the call returns None.
    """
    if inspect.iscoroutinefunction(func):

        @wraps(func)
        async def async_wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            try:
                return await cast("Callable[P, Awaitable[T]]", func)(*args, **kwargs)
            except Exception as e:
                if on_error(func, e):
                    raise
                return cast("T", None)

        return cast("Callable[P, T]", async_wrapper)

    @wraps(func)
    def sync_wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
        try:
            return func(*args, **kwargs)
        except Exception as e:
            if on_error(func, e):
                raise
            return cast("T", None)

    return sync_wrapper


def with_error_handling(
    error_level: ErrorLevel = ErrorLevel.ERROR,
    reraise: bool = True,
) -> Callable[[Callable[P, T]], Callable[P, T]]:
    """Log failures with their structured context.

    ApplicationError subclasses are logged at their own level, anything else
    at ``error_level``.

    Args:
        error_level: Severity for exceptions outside the ApplicationError hierarchy
        reraise: Re-raise after logging; when False the call returns None on failure
    """

    def on_error(func: Callable[..., Any], error: Exception) -> bool:
        level = error.level if isinstance(error, ApplicationError) else error_level
        logger.log(
            level.to_logging_level(),
            f"{func.__qualname__} failed: {error!s}",
            error_context=ErrorContext.capture(error, function=func.__qualname__).to_dict(),
            exc_info=level in (ErrorLevel.ERROR, ErrorLevel.CRITICAL),
        )
        return reraise

    def decorator(func: Callable[P, T]) -> Callable[P, T]:
        return _wrap(func, on_error)

    return decorator


def error_context(
    error_level: ErrorLevel = ErrorLevel.DEBUG,
) -> Callable[[Callable[P, T]], Callable[P, T]]:
    """Record a trace id for a failure and always re-raise it.

    Meant for pure functions where a failure is the caller's bug, so the
    default level is DEBUG.
    """

    def on_error(func: Callable[..., Any], error: Exception) -> bool:
        ctx = ErrorContext.capture(error)
        logger.log(
            error_level.to_logging_level(),
            f"{func.__qualname__} raised {type(error).__name__}",
            trace_id=ctx.trace_id,
            error_message=str(error),
        )
        return True

    def decorator(func: Callable[P, T]) -> Callable[P, T]:
        return _wrap(func, on_error)

    return decorator
