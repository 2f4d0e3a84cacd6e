"""Error hierarchy root: severity, codes and structured details.

Every failure raised by the memory subsystem is an ``ApplicationError``
carrying a code, a severity and a pydantic details model. The details model
is recorded by logfire's pydantic plugin, so failures show up with their
structured fields when logfire is configured.
"""

import logging
from datetime import UTC, datetime
from enum import Enum
from typing import Any, Self

from logfire.integrations.pydantic import PluginSettings
from pydantic import BaseModel, ConfigDict, Field, field_serializer


class ErrorLevel(str, Enum):
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"

    def to_logging_level(self) -> int:
        return logging.getLevelNamesMapping()[self.name]


class ErrorCode(str, Enum):
    """Stable identifiers for failure categories."""

    UNKNOWN = "unknown"
    INVALID_INPUT = "invalid_input"
    PROCESSING_FAILED = "processing_failed"
    CONFIG_INVALID = "config_invalid"
    TIMEOUT = "timeout"

    # Embedding providers
    AUTHENTICATION_FAILED = "authentication_failed"
    RATE_LIMITED = "rate_limited"
    EMBEDDING_FAILED = "embedding_failed"
    SERVICE_UNAVAILABLE = "service_unavailable"


class ErrorDetails(BaseModel, plugin_settings=PluginSettings(logfire={"record": "all"})):
    """Where and when a failure happened. Extra keys are kept."""

    model_config = ConfigDict(extra="allow")

    source: str = Field(description="Component that raised the error, e.g. a provider name")
    operation: str = Field(description="What the component was doing")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @field_serializer("timestamp")
    def serialize_timestamp(self, timestamp: datetime) -> str:
        return timestamp.isoformat()


class ServiceErrorDetails(ErrorDetails):
    """Failure of a call to an external service."""

    service_name: str
    endpoint: str | None = None
    status_code: int | None = Field(None, description="HTTP status, when the service answered")
    latency_ms: float | None = None


class EmbeddingErrorDetails(ServiceErrorDetails):
    """Failure to turn a text into a vector."""

    model_name: str | None = None
    text_length: int | None = None


def coerce_details(details: ErrorDetails | dict[str, Any] | None) -> ErrorDetails:
    """Accept a details model or a plain dict with optional source/operation keys."""
    if isinstance(details, ErrorDetails):
        return details
    fields = dict(details or {})
    return ErrorDetails(
        source=fields.pop("source", "unknown"),
        operation=fields.pop("operation", "unknown"),
        **fields,
    )


class ApplicationError(Exception):
    """Base class for all memory subsystem errors.

    Subclasses pin ``code`` and ``level``; both can still be overridden per
    instance.
    """

    code: ErrorCode = ErrorCode.UNKNOWN
    level: ErrorLevel = ErrorLevel.ERROR

    def __init__(
        self,
        message: str,
        details: ErrorDetails | dict[str, Any] | None = None,
        *,
        code: ErrorCode | None = None,
        level: ErrorLevel | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.details = coerce_details(details)
        if code is not None:
            self.code = code
        if level is not None:
            self.level = level

    @classmethod
    def with_details(cls, message: str, details: ErrorDetails, **kwargs: Any) -> Self:
        return cls(message, details, **kwargs)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code.value!r}, message={self.message!r})"
