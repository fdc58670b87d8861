"""OpenAI Embedding implementation.

Works with OpenAI's embeddings API and any server that speaks the same
format.

Design Principles:
    - OpenAI-compatible: Follows OpenAI embeddings API conventions
    - Observable: trace parameter for tracing integration
"""

import os
from typing import Any

import httpx

from core.trace.trace_context import TraceContext
from libs.embedding.base_embedding import (
    BaseEmbedding,
    EmbeddingConfigurationError,
    EmbeddingError,
    EmbeddingResult,
    embedding_error_from_http,
)
from libs.http_transport import post_json
from observability.logger import get_logger

logger = get_logger(__name__)


class OpenAIEmbedding(BaseEmbedding):
    """OpenAI Embedding implementation.

    Attributes:
        api_key: OpenAI API key
        base_url: Base URL for the API endpoint
        model: Model name to use
        dimensions: Embedding dimensions (if supported by model)
        timeout: Request timeout in seconds
        http_client: Optional HTTP client for custom configuration

    Example:
        >>> embedding = OpenAIEmbedding(api_key="sk-...")
        >>> result = embedding.embed(["Hello world"])
    """

    DEFAULT_MODEL = "text-embedding-3-small"
    DEFAULT_DIMENSIONS = 1536
    DEFAULT_BASE_URL = "https://api.openai.com/v1"

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        model: str | None = None,
        dimensions: int | None = None,
        timeout: float = 30.0,
        http_client: httpx.Client | None = None,
    ) -> None:
        """Initialize the OpenAI Embedding.

        Args:
            api_key: OpenAI API key. If None, reads from OPENAI_API_KEY env var.
            base_url: Base URL for the API. Defaults to OpenAI's official API.
            model: Model name. Defaults to text-embedding-3-small.
            dimensions: Embedding dimensions. Optional for compatible models.
            timeout: Request timeout in seconds.
            http_client: Optional pre-configured HTTP client.

        Raises:
            EmbeddingConfigurationError: If API key is not configured.
        """
        self._api_key = api_key or os.getenv("OPENAI_API_KEY")
        self._base_url = (base_url or self.DEFAULT_BASE_URL).rstrip("/")
        self._model = model or self.DEFAULT_MODEL
        self._dimensions = dimensions
        self._timeout = timeout
        self._http_client = http_client

        if not self._api_key:
            raise EmbeddingConfigurationError(
                "OpenAI API key is not configured. Set 'embedding.api_key' in "
                "settings or OPENAI_API_KEY env var.",
                provider="openai"
            )

    @property
    def provider_name(self) -> str:
        return "openai"

    @property
    def dimensions(self) -> int:
        return self._dimensions or self.DEFAULT_DIMENSIONS

    def _build_request_payload(self, texts: list[str]) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "input": texts,
            "model": self._model,
        }
        if self._dimensions is not None:
            payload["dimensions"] = self._dimensions
        return payload

    def _parse_response(self, response_data: dict[str, Any]) -> EmbeddingResult:
        """Parse OpenAI API response into EmbeddingResult.

        Items are ordered by their 'index' field, which OpenAI does not
        guarantee to match list order.
        """
        data = response_data.get("data", [])
        if not data:
            raise EmbeddingError(
                "Empty response from OpenAI Embeddings API",
                provider=self.provider_name,
                details=response_data
            )

        ordered = sorted(data, key=lambda item: item.get("index", 0))
        vectors = [item.get("embedding", []) for item in ordered]

        usage = response_data.get("usage") or None
        usage_info: dict[str, int] | None = None
        if usage:
            usage_info = {
                "prompt_tokens": usage.get("prompt_tokens", 0),
                "total_tokens": usage.get("total_tokens", 0),
            }

        return EmbeddingResult(vectors=vectors, usage=usage_info)

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
            f"OpenAI embedding request: model={self._model}, "
            f"text_count={len(texts)}"
        )

        url = f"{self._base_url}/embeddings"
        try:
            response_data = post_json(
                url,
                self._build_request_payload(texts),
                headers={"Authorization": f"Bearer {self._api_key}"},
                timeout=self._timeout,
                http_client=self._http_client,
            )
        except httpx.HTTPError as e:
            raise embedding_error_from_http(e, self.provider_name, "OpenAI", url) from e
        except ValueError as e:
            raise EmbeddingError(
                f"Invalid JSON from OpenAI Embeddings API: {e}",
                provider=self.provider_name,
            ) from e

        result = self._check_vector_count(self._parse_response(response_data), len(texts))

        if trace:
            trace.record_stage(
                "embedding_response",
                {
                    "provider": self.provider_name,
                    "vector_count": len(result.vectors),
                    "tokens": result.usage,
                }
            )
        return result

    def __repr__(self) -> str:
        return f"OpenAIEmbedding(model={self._model}, dimensions={self.dimensions})"
