"""Request-scoped logging context.

The character or universe being served and the conversation id are bound
once per request and merged into every log event by structlog's
``merge_contextvars`` processor, which ``setup_logging`` installs.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import structlog


def get_log_context() -> dict[str, Any]:
    """Copy of the fields bound to the current context."""
    return dict(structlog.contextvars.get_contextvars())


def set_log_context(context: dict[str, Any]) -> None:
    """Replace every bound field with ``context``."""
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(**context)


def update_log_context(**fields: Any) -> None:
    structlog.contextvars.bind_contextvars(**fields)


def clear_log_context() -> None:
    structlog.contextvars.clear_contextvars()


@contextmanager
def memory_log_context(
    entity_id: str | None = None,
    kind: str | None = None,
    **fields: Any,
) -> Iterator[None]:
    """Bind the owning entity for the duration of a block.

    Example:
        >>> with memory_log_context("42", kind="character"):
        ...     logger.info("Searching memories")
    """
    bound = {key: value for key, value in {"entity_id": entity_id, "memory_kind": kind}.items() if value is not None}
    bound.update(fields)
    with structlog.contextvars.bound_contextvars(**bound):
        yield
