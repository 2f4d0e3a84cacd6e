"""OpenAI-compatible embedding provider."""

from typing import Any

import httpx

from talae_memory.core.errors import AuthenticationError
from talae_memory.infrastructure.embeddings.http import HttpEmbeddingProvider


class OpenAIEmbeddingProvider(HttpEmbeddingProvider):
    """Embeddings from the OpenAI API or any server exposing ``/embeddings``."""

    service_name = "openai"
    endpoint = "/embeddings"

    def __init__(
        self,
        model: str,
        api_key: str,
        base_url: str = "https://api.openai.com/v1",
        *,
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ):
        """
        Raises:
            AuthenticationError: If no API key is given
        """
        if not api_key:
            raise AuthenticationError(
                message="OpenAI API key not configured",
                details={"source": "openai", "operation": "initialization"},
            )
        super().__init__(model, base_url, timeout=timeout, client=client)
        self._api_key = api_key

    def _headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self._api_key}"}

    def _payload(self, text: str) -> dict[str, Any]:
        return {"model": self.model, "input": text}

    def _extract(self, body: Any) -> Any:
        if not isinstance(body, dict):
            return None
        data = body.get("data")
        if not isinstance(data, list) or not data or not isinstance(data[0], dict):
            return None
        return data[0].get("embedding")
