"""Shared plumbing for embedding providers that speak JSON over HTTP."""

import time
from typing import Any

import httpx

from talae_memory.core.base import EmbeddingErrorDetails
from talae_memory.core.errors import (
    AuthenticationError,
    EmbeddingError,
    ProcessingError,
    RateLimitError,
    TimeoutError,
)
from talae_memory.core.logging import get_logger

logger = get_logger(__name__)


def coerce_vector(raw: Any, *, source: str, model: str) -> list[float]:
    """Validate a provider payload as a non-empty list of numbers.

    Raises:
        EmbeddingError: If the payload is not a usable vector
    """
    if not isinstance(raw, list) or not raw:
        raise EmbeddingError(
            message="Embedding response did not contain a vector",
            details=EmbeddingErrorDetails(
                source=source,
                operation="parse_response",
                service_name=source,
                model_name=model,
            ),
        )
    try:
        return [float(value) for value in raw]
    except (TypeError, ValueError) as e:
        raise EmbeddingError(
            message=f"Embedding vector contains non-numeric values: {e!s}",
            details=EmbeddingErrorDetails(
                source=source,
                operation="parse_response",
                service_name=source,
                model_name=model,
            ),
        ) from e


class HttpEmbeddingProvider:
    """Base class for one-request-per-text JSON embedding APIs.

    Subclasses set ``service_name`` and ``endpoint`` and implement
    ``_payload`` and ``_extract``. A client may be injected; otherwise one is
    created and owned by the provider and released by ``aclose``.
    """

    service_name = "http"
    endpoint = ""

    def __init__(
        self,
        model: str,
        base_url: str,
        *,
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ):
        self.model = model
        self.base_url = base_url.rstrip("/")
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)

    @property
    def url(self) -> str:
        return f"{self.base_url}{self.endpoint}"

    def _headers(self) -> dict[str, str]:
        return {}

    def _payload(self, text: str) -> dict[str, Any]:
        raise NotImplementedError

    def _extract(self, body: Any) -> Any:
        raise NotImplementedError

    def _details(self, operation: str, text: str, **kwargs: Any) -> EmbeddingErrorDetails:
        return EmbeddingErrorDetails(
            source=self.service_name,
            operation=operation,
            service_name=self.service_name,
            endpoint=self.endpoint,
            model_name=self.model,
            text_length=len(text),
            **kwargs,
        )

    async def embed(self, text: str) -> list[float]:
        """Embed a single text.

        Raises:
            ProcessingError: If the text is blank
            TimeoutError: If the request timed out
            RateLimitError: If the provider answered 429
            AuthenticationError: If the provider rejected the credentials
            EmbeddingError: For any other transport, status or payload failure
        """
        if not text.strip():
            raise ProcessingError(
                message="Cannot embed empty text",
                details={"source": self.service_name, "operation": "embed", "text_length": len(text)},
            )

        started = time.perf_counter()
        try:
            response = await self._client.post(self.url, json=self._payload(text), headers=self._headers())
        except httpx.TimeoutException as e:
            raise TimeoutError(
                message=f"{self.service_name} embedding request timed out",
                details=self._details("embed", text),
            ) from e
        except httpx.HTTPError as e:
            raise EmbeddingError(
                message=f"{self.service_name} embedding request failed: {e!s}",
                details=self._details("embed", text),
            ) from e
        latency_ms = (time.perf_counter() - started) * 1000

        self._raise_for_status(response, text, latency_ms)

        try:
            body = response.json()
        except ValueError as e:
            raise EmbeddingError(
                message=f"{self.service_name} returned a non-JSON response",
                details=self._details("parse_response", text, status_code=response.status_code),
            ) from e

        vector = coerce_vector(self._extract(body), source=self.service_name, model=self.model)
        logger.debug(
            "Generated embedding",
            provider=self.service_name,
            model=self.model,
            dimensions=len(vector),
            latency_ms=round(latency_ms, 1),
        )
        return vector

    def _raise_for_status(self, response: httpx.Response, text: str, latency_ms: float) -> None:
        status = response.status_code
        if status < 400:
            return

        details = self._details("embed", text, status_code=status, latency_ms=latency_ms)
        if status in (401, 403):
            raise AuthenticationError(
                message=f"{self.service_name} rejected the embedding credentials",
                details=details,
            )
        if status == 429:
            raise RateLimitError(
                message=f"{self.service_name} rate limit exceeded",
                details=details,
            )
        if status in (408, 504):
            raise TimeoutError(
                message=f"{self.service_name} embedding request timed out",
                details=details,
            )
        raise EmbeddingError(
            message=f"{self.service_name} embedding request failed with status {status}",
            details=details,
        )

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
