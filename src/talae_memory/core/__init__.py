from .base import ApplicationError, ErrorCode, ErrorLevel
from .circuit_breaker import CircuitBreaker, CircuitState, RetryWithCircuitBreaker
from .errors import (
    AuthenticationError,
    ConfigurationError,
    EmbeddingError,
    ProcessingError,
    RateLimitError,
    ServiceError,
    TimeoutError,
)
