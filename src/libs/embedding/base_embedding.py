"""Abstract base class for Embedding providers.

This module defines the BaseEmbedding interface that all embedding
implementations must follow. This enables pluggable embedding providers.

Design Principles:
    - Pluggable: All providers implement this interface
    - Classified failures: Every EmbeddingError carries a FailureKind
"""

from abc import ABC, abstractmethod
from typing import Any

import httpx

from core.failures import (
    FailureKind,
    RATE_LIMIT_HINT,
    failure_kind_for_exception,
    failure_kind_for_status,
)
from core.trace.trace_context import TraceContext
from libs.http_transport import error_body, error_message_from_response


class EmbeddingResult:
    """Result from an embedding operation.

    Attributes:
        vectors: List of embedding vectors, one per input text
        usage: Token usage information (if available)
    """

    def __init__(
        self,
        vectors: list[list[float]],
        usage: dict[str, int] | None = None
    ) -> None:
        self.vectors = vectors
        self.usage = usage

    def __repr__(self) -> str:
        return f"EmbeddingResult(vectors={len(self.vectors)}, usage={self.usage})"


class BaseEmbedding(ABC):
    """Abstract base class for embedding providers.

    Implementations provide embed(); embed_single() delegates to it.
    Vectors from one provider instance always have the same length.
    """

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Return the name of this provider (e.g., 'openai', 'gemini')."""
        ...

    @abstractmethod
    def embed(
        self,
        texts: list[str],
        trace: TraceContext | None = None,
        **kwargs: Any
    ) -> EmbeddingResult:
        """Generate embeddings for a list of texts.

        Args:
            texts: List of text strings to embed
            trace: Tracing context for observability
            **kwargs: Additional provider-specific arguments

        Returns:
            EmbeddingResult with one vector per text, in input order

        Raises:
            EmbeddingError: If embedding fails
        """
        ...

    def embed_single(
        self,
        text: str,
        trace: TraceContext | None = None,
        **kwargs: Any
    ) -> list[float]:
        """Generate the embedding for a single text.

        Empty text is embedded like any other string.

        Raises:
            EmbeddingError: If embedding fails or returns no vector
        """
        result = self.embed([text], trace, **kwargs)
        if not result.vectors:
            raise EmbeddingError(
                "Provider returned no vector",
                provider=self.provider_name,
            )
        return result.vectors[0]

    def _check_vector_count(self, result: EmbeddingResult, expected: int) -> EmbeddingResult:
        if len(result.vectors) != expected:
            raise EmbeddingError(
                f"Expected {expected} vectors, got {len(result.vectors)}",
                provider=self.provider_name,
            )
        return result


class EmbeddingError(Exception):
    """Base exception for embedding-related errors.

    Attributes:
        provider: Provider that failed
        code: HTTP status code, when the provider answered
        kind: FailureKind of the failure
        details: Extra diagnostic data
    """

    def __init__(
        self,
        message: str,
        provider: str | None = None,
        code: int | None = None,
        details: dict[str, Any] | None = None,
        kind: FailureKind | None = None,
    ) -> None:
        super().__init__(message)
        self.provider = provider
        self.code = code
        self.details = details or {}
        self.kind = kind or failure_kind_for_status(code)


class UnknownEmbeddingProviderError(EmbeddingError):
    """Raised when an unknown embedding provider is specified."""

    pass


class EmbeddingConfigurationError(EmbeddingError):
    """Raised when embedding configuration is invalid."""

    pass


def embedding_error_from_http(
    error: httpx.HTTPError,
    provider: str,
    display_name: str,
    url: str | None = None,
) -> EmbeddingError:
    """Convert an httpx failure into a classified EmbeddingError.

    Args:
        error: HTTPStatusError or RequestError raised by the transport
        provider: Provider identifier stored on the error
        display_name: Human-readable API name used in the message
        url: Request URL, recorded for transport errors
    """
    kind = failure_kind_for_exception(error)

    if isinstance(error, httpx.HTTPStatusError):
        status = error.response.status_code
        message = f"{display_name} API error: {error_message_from_response(error)}"
        if kind is FailureKind.RATE_LIMITED:
            message = f"{message}. {RATE_LIMIT_HINT}"
        return EmbeddingError(
            message,
            provider=provider,
            code=status,
            kind=kind,
            details={"status_code": status, "response_body": error_body(error)},
        )

    if kind is FailureKind.TIMEOUT:
        message = f"{display_name} API request timed out: {error}"
    else:
        message = f"Failed to connect to {display_name} API: {error}"
    return EmbeddingError(
        message,
        provider=provider,
        kind=kind,
        details={"url": url, "error": str(error)},
    )
