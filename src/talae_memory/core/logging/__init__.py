"""Structured logging with structlog and Logfire."""

from .context import (
    clear_log_context,
    get_log_context,
    memory_log_context,
    set_log_context,
    update_log_context,
)
from .setup import configure_logfire, get_logger, setup_logging

__all__ = [
    "clear_log_context",
    "configure_logfire",
    "get_log_context",
    "get_logger",
    "memory_log_context",
    "set_log_context",
    "setup_logging",
    "update_log_context",
]
