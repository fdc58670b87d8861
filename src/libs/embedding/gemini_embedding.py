"""Google Gemini Embedding implementation.

Calls the Generative Language API `batchEmbedContents` endpoint, which embeds
a list of texts in one request.

Design Principles:
    - Batch-first: One request per embed() call
    - Fail-Fast: A placeholder API key is rejected at construction
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

# Value shipped in example .env files
PLACEHOLDER_API_KEY = "your_gemini_api_key_here"


def resolve_google_api_key(api_key: str | None) -> str | None:
    """Return the configured key, falling back to GOOGLE_API_KEY.

    The example placeholder counts as not configured.
    """
    key = api_key or os.getenv("GOOGLE_API_KEY")
    if not key or key == PLACEHOLDER_API_KEY:
        return None
    return key


class GeminiEmbedding(BaseEmbedding):
    """Gemini embeddings via the Generative Language REST API.

    Attributes:
        model: Embedding model (e.g., text-embedding-004)
        dimensions: Optional output dimensionality
        timeout: Request timeout in seconds
    """

    DEFAULT_MODEL = "text-embedding-004"
    DEFAULT_DIMENSIONS = 768
    DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        model: str | None = None,
        dimensions: int | None = None,
        timeout: float = 30.0,
        http_client: httpx.Client | None = None,
    ) -> None:
        """Initialize the Gemini Embedding.

        Args:
            api_key: Google API key. If None, reads from GOOGLE_API_KEY env var.
            base_url: API base URL.
            model: Model name. Defaults to text-embedding-004.
            dimensions: Optional output dimensionality.
            timeout: Request timeout in seconds.
            http_client: Optional pre-configured HTTP client.

        Raises:
            EmbeddingConfigurationError: If no usable API key is configured.
        """
        self._api_key = resolve_google_api_key(api_key)
        self._base_url = (base_url or self.DEFAULT_BASE_URL).rstrip("/")
        self._model = model or self.DEFAULT_MODEL
        self._dimensions = dimensions
        self._timeout = timeout
        self._http_client = http_client

        if not self._api_key:
            raise EmbeddingConfigurationError(
                "Gemini API key is not configured. Set 'embedding.api_key' in "
                "settings or GOOGLE_API_KEY env var.",
                provider="gemini"
            )

    @property
    def provider_name(self) -> str:
        return "gemini"

    @property
    def dimensions(self) -> int:
        return self._dimensions or self.DEFAULT_DIMENSIONS

    @property
    def _model_path(self) -> str:
        if self._model.startswith("models/"):
            return self._model
        return f"models/{self._model}"

    def _build_request_payload(self, texts: list[str]) -> dict[str, Any]:
        requests = []
        for text in texts:
            request: dict[str, Any] = {
                "model": self._model_path,
                "content": {"parts": [{"text": text}]},
            }
            if self._dimensions is not None:
                request["outputDimensionality"] = self._dimensions
            requests.append(request)
        return {"requests": requests}

    def _parse_response(self, response_data: dict[str, Any]) -> EmbeddingResult:
        embeddings = response_data.get("embeddings", [])
        if not embeddings:
            raise EmbeddingError(
                "Empty response from Gemini Embeddings API",
                provider=self.provider_name,
                details=response_data
            )
        return EmbeddingResult(vectors=[item.get("values", []) for item in embeddings])

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
            f"Gemini embedding request: model={self._model}, text_count={len(texts)}"
        )

        url = f"{self._base_url}/{self._model_path}:batchEmbedContents"
        try:
            response_data = post_json(
                url,
                self._build_request_payload(texts),
                headers={"x-goog-api-key": self._api_key},
                timeout=self._timeout,
                http_client=self._http_client,
            )
        except httpx.HTTPError as e:
            raise embedding_error_from_http(e, self.provider_name, "Gemini", url) from e
        except ValueError as e:
            raise EmbeddingError(
                f"Invalid JSON from Gemini Embeddings API: {e}",
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
        return f"GeminiEmbedding(model={self._model}, dimensions={self.dimensions})"
