"""Process-wide logging with structlog and Logfire.

structlog renders to the console and logfire's ``StructlogProcessor``
forwards the same events to Logfire when a token is configured. Standard
library records (httpx, voyageai) go through the same processor chain.
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING

import logfire
import structlog
from structlog.processors import CallsiteParameter, CallsiteParameterAdder
from structlog.types import EventDict, Processor, WrappedLogger
from structlog.typing import FilteringBoundLogger

if TYPE_CHECKING:
    from talae_memory.core.config import Settings

QUIET_LIBRARIES = ("httpx", "httpcore", "voyageai")


def tag_error_type(_logger: WrappedLogger, _method_name: str, event_dict: EventDict) -> EventDict:
    """Record the class name of an ``error`` field so Logfire can group on it."""
    error = event_dict.get("error")
    if isinstance(error, BaseException):
        event_dict["error_type"] = type(error).__name__
    return event_dict


def shared_processors() -> list[Processor]:
    """Processors applied to both structlog and standard library events."""
    return [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        CallsiteParameterAdder(
            parameters=[
                CallsiteParameter.MODULE,
                CallsiteParameter.FUNC_NAME,
                CallsiteParameter.LINENO,
            ]
        ),
        tag_error_type,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
    ]


def setup_logging(level: str = "INFO", colors: bool = True) -> None:
    """Configure structlog and the root logger.

    Args:
        level: Minimum level name, case-insensitive; unknown names fall back to INFO
        colors: Whether the console renderer emits ANSI colors
    """
    log_level = logging.getLevelNamesMapping().get(level.upper(), logging.INFO)
    renderer = structlog.dev.ConsoleRenderer(colors=colors)

    structlog.configure(
        processors=[*shared_processors(), logfire.StructlogProcessor(), renderer],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
            foreign_pre_chain=shared_processors(),
        )
    )
    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(log_level)

    for name in QUIET_LIBRARIES:
        logging.getLogger(name).setLevel(max(log_level, logging.WARNING))


def configure_logfire(settings: Settings) -> None:
    """Configure Logfire for this process. Nothing is sent without LOGFIRE_TOKEN."""
    logfire.configure(
        service_name="talae-memory",
        environment=settings.environment,
        token=settings.logfire_token,
        send_to_logfire="if-token-present",
        console=False,
    )


def get_logger(name: str | None = None) -> FilteringBoundLogger:
    """Structured logger; usable before ``setup_logging`` with structlog's defaults."""
    return structlog.get_logger(name)
