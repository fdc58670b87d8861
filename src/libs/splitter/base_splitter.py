"""Abstract base class for Text Splitters.

This module defines the BaseSplitter interface that all text splitting
implementations must follow. This enables pluggable splitting strategies.

Design Principles:
    - Pluggable: All providers implement this interface
    - Fail-Fast: Invalid chunk sizing is rejected at construction
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

from core.trace.trace_context import TraceContext


@dataclass
class SplitResult:
    """Result from a text splitting operation.

    Attributes:
        chunks: Text chunks in left-to-right order
        metadata: Additional information about the split (e.g., chunk_count)
    """

    chunks: list[str]
    metadata: dict[str, Any] | None = None

    def __repr__(self) -> str:
        return f"SplitResult(chunks={len(self.chunks)}, metadata={self.metadata})"


class BaseSplitter(ABC):
    """Abstract base class for text splitters.

    Implementations provide split_text(); split_documents() applies it to
    each document in order.
    """

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Return the name of this provider (e.g., 'recursive')."""
        ...

    @property
    @abstractmethod
    def chunk_size(self) -> int:
        """Maximum chunk length in characters."""
        ...

    @property
    @abstractmethod
    def chunk_overlap(self) -> int:
        """Characters shared by consecutive chunks."""
        ...

    @abstractmethod
    def split_text(
        self,
        text: str,
        trace: TraceContext | None = None,
    ) -> SplitResult:
        """Split a single text into chunks.

        Args:
            text: The text to split
            trace: Tracing context for observability

        Returns:
            SplitResult containing the chunks

        Raises:
            SplitterError: If splitting fails
        """
        ...

    def split_documents(
        self,
        documents: list[str],
        trace: TraceContext | None = None,
    ) -> list[SplitResult]:
        """Split multiple documents, preserving input order.

        Args:
            documents: Texts to split
            trace: Tracing context for observability

        Returns:
            One SplitResult per input document
        """
        return [self.split_text(doc, trace) for doc in documents]


class SplitterError(Exception):
    """Base exception for splitter-related errors."""

    def __init__(
        self,
        message: str,
        provider: str | None = None,
        details: dict[str, Any] | None = None
    ) -> None:
        super().__init__(message)
        self.provider = provider
        self.details = details or {}


class UnknownSplitterProviderError(SplitterError):
    """Raised when an unknown splitter provider is specified."""

    pass


class SplitterConfigurationError(SplitterError):
    """Raised when splitter configuration is invalid (e.g. overlap >= size)."""

    pass
