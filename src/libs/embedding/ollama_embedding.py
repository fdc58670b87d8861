"""Ollama Embedding implementation.

Connects to a local Ollama server and uses its batch `/api/embed` endpoint.

Design Principles:
    - Local-first: Runs models locally without external API calls
    - Testable: Accepts an injected httpx client
"""

import os
from typing import Any

import httpx

from core.trace.trace_context import TraceContext
from libs.embedding.base_embedding import (
    BaseEmbedding,
    EmbeddingError,
    EmbeddingResult,
    embedding_error_from_http,
)
from libs.http_transport import post_json
from observability.logger import get_logger

logger = get_logger(__name__)


class OllamaEmbedding(BaseEmbedding):
    """Ollama embeddings API implementation.

    Attributes:
        base_url: Base URL of the Ollama server
        model: Model name to use
        timeout: Request timeout in seconds
        truncate_length: Max characters per input (None for no truncation)
    """

    DEFAULT_MODEL = "nomic-embed-text"
    DEFAULT_DIMENSIONS = 768
    DEFAULT_BASE_URL = "http://localhost:11434"

    def __init__(
        self,
        base_url: str | None = None,
        model: str | None = None,
        dimensions: int | None = None,
        timeout: float = 60.0,
        http_client: httpx.Client | None = None,
        truncate_length: int | None = None,
        **kwargs: Any,
    ) -> None:
        """Initialize the Ollama Embedding.

        Args:
            base_url: Ollama server URL. Falls back to OLLAMA_BASE_URL, then localhost.
            model: Model name. Defaults to nomic-embed-text.
            dimensions: Expected dimensions, reported by the dimensions property.
            timeout: Request timeout in seconds.
            http_client: Optional HTTP client.
            truncate_length: Max characters per input (None = no truncation).
            **kwargs: Ignored settings keys (e.g. api_key).
        """
        self._base_url = (
            base_url or os.getenv("OLLAMA_BASE_URL") or self.DEFAULT_BASE_URL
        ).rstrip("/")
        self._model = model or self.DEFAULT_MODEL
        self._dimensions = dimensions
        self._timeout = timeout
        self._http_client = http_client
        self._truncate_length = truncate_length

    @property
    def provider_name(self) -> str:
        return "ollama"

    @property
    def dimensions(self) -> int:
        return self._dimensions or self.DEFAULT_DIMENSIONS

    def _truncate_text(self, text: str) -> str:
        if self._truncate_length and len(text) > self._truncate_length:
            return text[:self._truncate_length]
        return text

    def _parse_response(self, response_data: dict[str, Any]) -> EmbeddingResult:
        embeddings = response_data.get("embeddings", [])
        if not embeddings:
            raise EmbeddingError(
                "Empty response from Ollama Embeddings API",
                provider=self.provider_name,
                details=response_data
            )
        return EmbeddingResult(vectors=embeddings)

    def embed(
        self,
        texts: list[str],
        trace: TraceContext | None = None,
        **kwargs: Any
    ) -> EmbeddingResult:
        """Generate embeddings for a list of texts.

        Raises:
            EmbeddingError: If embedding fails.
        """
        if not texts:
            return EmbeddingResult(vectors=[])

        logger.debug(
            f"Ollama embedding request: model={self._model}, text_count={len(texts)}"
        )

        url = f"{self._base_url}/api/embed"
        payload = {
            "model": self._model,
            "input": [self._truncate_text(text) for text in texts],
        }
        try:
            response_data = post_json(
                url,
                payload,
                timeout=self._timeout,
                http_client=self._http_client,
            )
        except httpx.HTTPError as e:
            raise embedding_error_from_http(e, self.provider_name, "Ollama", url) from e
        except ValueError as e:
            raise EmbeddingError(
                f"Invalid JSON from Ollama Embeddings API: {e}",
                provider=self.provider_name,
            ) from e

        result = self._check_vector_count(self._parse_response(response_data), len(texts))

        if trace:
            trace.record_stage(
                "embedding_response",
                {"provider": self.provider_name, "vector_count": len(result.vectors)}
            )
        return result

    def __repr__(self) -> str:
        return f"OllamaEmbedding(base_url={self._base_url}, model={self._model})"
