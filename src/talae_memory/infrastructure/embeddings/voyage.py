"""Voyage AI embedding provider."""

from typing import Any

import voyageai

from talae_memory.core.base import ApplicationError, EmbeddingErrorDetails
from talae_memory.core.circuit_breaker import CircuitBreaker, RetryWithCircuitBreaker
from talae_memory.core.errors import (
    AuthenticationError,
    EmbeddingError,
    ProcessingError,
    RateLimitError,
    ServiceError,
    TimeoutError,
)
from talae_memory.core.logging import get_logger
from talae_memory.infrastructure.embeddings.http import coerce_vector

logger = get_logger(__name__)


class VoyageEmbeddingProvider:
    """Voyage AI embeddings, with retry and a circuit breaker around the API.

    Rate limits and timeouts are retried with exponential backoff. Repeated
    failures open the circuit, after which calls fail fast with
    ``ServiceError`` until the recovery timeout elapses.
    """

    service_name = "voyage"

    def __init__(
        self,
        api_key: str,
        model: str = "voyage-3",
        *,
        client: Any | None = None,
        retry_handler: RetryWithCircuitBreaker | None = None,
    ) -> None:
        """Initialize the Voyage embedding provider.

        Args:
            api_key: Voyage API key
            model: Voyage model name
            client: Optional pre-built ``voyageai.AsyncClient``
            retry_handler: Optional retry policy; defaults to three attempts

        Raises:
            AuthenticationError: If the API key is not configured
        """
        if not api_key and client is None:
            raise AuthenticationError(
                message="Voyage API key not configured",
                details={"source": "voyage", "operation": "initialization"},
            )

        self.model = model
        # voyageai doesn't expose a public client type
        self.client = client or voyageai.AsyncClient(api_key=api_key)
        self._retry_handler = retry_handler or RetryWithCircuitBreaker(
            circuit_breaker=CircuitBreaker(
                name="voyage_api",
                failure_threshold=3,
                recovery_timeout=30.0,
                expected_exception_types=(RateLimitError, TimeoutError, ServiceError, EmbeddingError),
                success_threshold=2,
            ),
            max_retries=3,
            initial_delay=1.0,
            backoff_factor=2.0,
            max_delay=30.0,
        )

    async def embed(self, text: str) -> list[float]:
        """Embed a single text through the retry handler.

        Raises:
            ProcessingError: If the text is blank
            ServiceError: If the circuit is open
            RateLimitError, TimeoutError, AuthenticationError, EmbeddingError:
                When the API call fails after retries
        """
        if not text.strip():
            raise ProcessingError(
                message="Cannot embed empty text",
                details={"source": "voyage", "operation": "embed", "text_length": len(text)},
            )
        return await self._retry_handler.call_async(self._request, text)

    async def _request(self, text: str) -> list[float]:
        try:
            response = await self.client.embed(texts=[text], model=self.model)
        except ApplicationError:
            raise
        except Exception as e:
            raise self._map_error(e, text) from e

        embeddings = getattr(response, "embeddings", None) or []
        vector = coerce_vector(embeddings[0] if embeddings else None, source="voyage", model=self.model)
        logger.debug("Generated embedding", provider="voyage", model=self.model, dimensions=len(vector))
        return vector

    def _map_error(self, e: Exception, text: str) -> ApplicationError:
        """Map voyageai client errors to our exception types."""
        error_msg = str(e).lower()
        error_type = type(e).__name__.lower()

        def details(status_code: int | None) -> EmbeddingErrorDetails:
            return EmbeddingErrorDetails(
                source="voyage",
                operation="embed",
                service_name="voyage",
                endpoint="/embeddings",
                status_code=status_code,
                model_name=self.model,
                text_length=len(text),
            )

        if "ratelimit" in error_type or "rate limit" in error_msg or "too many requests" in error_msg:
            return RateLimitError(message="Voyage rate limit exceeded", details=details(429))
        if "timeout" in error_type or "timeout" in error_msg or "timed out" in error_msg:
            return TimeoutError(message="Voyage embedding request timed out", details=details(408))
        if "authentication" in error_type or "api key" in error_msg or "unauthorized" in error_msg:
            return AuthenticationError(message="Voyage rejected the API key", details=details(401))
        return EmbeddingError(message=f"Voyage embedding failed: {e!s}", details=details(None))
