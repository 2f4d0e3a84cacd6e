"""Concrete error types.

Embedding provider failures map onto ``EmbeddingError``, ``RateLimitError``,
``TimeoutError`` and ``AuthenticationError``; an open circuit raises
``ServiceError``. Adapters let all of them propagate.
"""

from .base import ApplicationError, ErrorCode, ErrorLevel


class ServiceError(ApplicationError):
    """External service unavailable, including an open circuit breaker."""

    code = ErrorCode.SERVICE_UNAVAILABLE


class EmbeddingError(ApplicationError):
    """The embedding provider failed or returned an unusable vector."""

    code = ErrorCode.EMBEDDING_FAILED


class AuthenticationError(ApplicationError):
    """Provider credentials are missing or rejected."""

    code = ErrorCode.AUTHENTICATION_FAILED


class ProcessingError(ApplicationError):
    """Input that cannot be processed, such as blank text to embed."""

    code = ErrorCode.PROCESSING_FAILED


class RateLimitError(ApplicationError):
    code = ErrorCode.RATE_LIMITED
    level = ErrorLevel.WARNING


class TimeoutError(ApplicationError):  # noqa: A001
    code = ErrorCode.TIMEOUT


class ConfigurationError(ApplicationError):
    """Settings could not be loaded or failed validation."""

    code = ErrorCode.CONFIG_INVALID
    level = ErrorLevel.CRITICAL
