"""Ollama embedding provider."""

from typing import Any

import httpx

from talae_memory.infrastructure.embeddings.http import HttpEmbeddingProvider


class OllamaEmbeddingProvider(HttpEmbeddingProvider):
    """Embeddings from a local or remote Ollama server.

    Uses ``POST /api/embeddings`` with ``{"model", "prompt"}`` and reads the
    ``embedding`` field of the response.
    """

    service_name = "ollama"
    endpoint = "/api/embeddings"

    def __init__(
        self,
        model: str,
        base_url: str = "http://localhost:11434",
        *,
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ):
        super().__init__(model, base_url, timeout=timeout, client=client)

    def _payload(self, text: str) -> dict[str, Any]:
        return {"model": self.model, "prompt": text}

    def _extract(self, body: Any) -> Any:
        if not isinstance(body, dict):
            return None
        return body.get("embedding")
