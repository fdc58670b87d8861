"""Errors raised by the retrieval orchestrator.

Argument errors reuse libs.vector_index.InvalidArgumentError so callers catch
one type for a bad query, a bad k, or an empty text to summarize.
"""

from typing import Any

from libs.vector_index.base_vector_index import InvalidArgumentError


class RetrievalError(Exception):
    """Base exception for orchestrator errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.details = details or {}


class NotInitializedError(RetrievalError):
    """Raised when the corpus is queried before any successful ingest."""

    pass


class EmptyContentError(RetrievalError):
    """Raised when a document has no extractable text.

    Usually means the source was an image-only (scanned) PDF.
    """

    pass


class RetrievalConfigurationError(RetrievalError):
    """Raised when retrieval settings are invalid."""

    pass


__all__ = [
    "RetrievalError",
    "NotInitializedError",
    "EmptyContentError",
    "RetrievalConfigurationError",
    "InvalidArgumentError",
]
