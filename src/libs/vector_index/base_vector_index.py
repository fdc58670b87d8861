"""Abstract base class for in-memory vector indexes.

A vector index is built once from (Chunk, vector) pairs and then only
searched. A new corpus gets a new index; indexes are never updated in place.

Design Principles:
    - Pluggable: Brute-force and graph-based indexes share one contract
    - Build-time validation: Empty input and ragged vectors fail at build
    - Deterministic: Equal scores are ordered by insertion id
"""

import itertools
from abc import ABC, abstractmethod
from typing import Any, Iterable, Sequence

from core.types import Chunk, IndexedVector, SearchHit


class BaseVectorIndex(ABC):
    """Abstract base class for vector index providers.

    Subclasses implement `_index_vectors` (called once by `build`) and
    `_search`; argument validation lives here.

    Example:
        >>> index = BruteForceVectorIndex.build([(chunk, [0.1, 0.2])])
        >>> hits = index.search([0.1, 0.2], k=3)
    """

    def __init__(self, **kwargs: Any) -> None:
        self._entries: list[IndexedVector] = []
        self._dimensions = 0
        self._id_counter = itertools.count()

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Return the name of this provider (e.g., 'brute_force', 'chroma')."""
        ...

    @classmethod
    def build(
        cls,
        entries: Iterable[tuple[Chunk, Sequence[float]]],
        **kwargs: Any,
    ) -> "BaseVectorIndex":
        """Construct a fresh index from (chunk, vector) pairs.

        Args:
            entries: Chunks with their embedding vectors, in storage order
            **kwargs: Provider-specific constructor arguments

        Returns:
            A populated index

        Raises:
            EmptyCorpusError: If entries is empty
            DimensionMismatchError: If vectors differ in length or are empty
        """
        index = cls(**kwargs)
        index._add_entries(list(entries))
        index._index_vectors(index._entries)
        return index

    def _add_entries(self, entries: list[tuple[Chunk, Sequence[float]]]) -> None:
        if not entries:
            raise EmptyCorpusError(
                "Cannot build a vector index from zero vectors",
                provider=self.provider_name,
            )

        dimensions = len(entries[0][1])
        if dimensions == 0:
            raise DimensionMismatchError(
                "Embedding vectors must not be empty",
                provider=self.provider_name,
            )

        for position, (chunk, vector) in enumerate(entries):
            if len(vector) != dimensions:
                raise DimensionMismatchError(
                    f"Vector {position} has {len(vector)} dimensions, "
                    f"expected {dimensions}",
                    provider=self.provider_name,
                    details={"position": position, "chunk_id": chunk.id},
                )
            self._entries.append(
                IndexedVector(
                    id=next(self._id_counter),
                    vector=tuple(float(v) for v in vector),
                    chunk=chunk,
                )
            )
        self._dimensions = dimensions

    @abstractmethod
    def _index_vectors(self, entries: list[IndexedVector]) -> None:
        """Build the provider's search structure over validated entries."""
        ...

    def search(self, query_vector: Sequence[float], k: int) -> list[SearchHit]:
        """Return up to k hits ordered by descending cosine similarity.

        Args:
            query_vector: Query embedding, same dimensionality as the index
            k: Maximum number of hits

        Returns:
            min(k, len(self)) hits, ties ordered by ascending vector id

        Raises:
            InvalidArgumentError: If k <= 0
            DimensionMismatchError: If the query has the wrong length
        """
        if k <= 0:
            raise InvalidArgumentError(
                f"k must be positive, got {k}",
                provider=self.provider_name,
            )
        if len(query_vector) != self._dimensions:
            raise DimensionMismatchError(
                f"Query vector has {len(query_vector)} dimensions, "
                f"index has {self._dimensions}",
                provider=self.provider_name,
            )
        return self._search(
            [float(v) for v in query_vector], min(k, len(self._entries))
        )

    @abstractmethod
    def _search(self, query_vector: list[float], k: int) -> list[SearchHit]:
        """Return exactly k hits; k is already clamped to the index size."""
        ...

    @property
    def dimensions(self) -> int:
        return self._dimensions

    def chunks(self) -> list[Chunk]:
        """All chunks in storage order."""
        return [entry.chunk for entry in self._entries]

    def entries(self) -> list[IndexedVector]:
        """All indexed vectors in storage order."""
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(size={len(self._entries)}, "
            f"dimensions={self._dimensions})"
        )


class VectorIndexError(Exception):
    """Base exception for vector index errors."""

    def __init__(
        self,
        message: str,
        provider: str | None = None,
        code: int | None = None,
        details: dict[str, Any] | None = None
    ) -> None:
        super().__init__(message)
        self.provider = provider
        self.code = code
        self.details = details or {}


class EmptyCorpusError(VectorIndexError):
    """Raised when an index is built from zero vectors."""

    pass


class InvalidArgumentError(VectorIndexError, ValueError):
    """Raised for invalid search or query arguments."""

    pass


class DimensionMismatchError(InvalidArgumentError):
    """Raised when a vector's length differs from the index dimensionality."""

    pass


class UnknownVectorIndexProviderError(VectorIndexError):
    """Raised when an unknown vector index provider is specified."""

    pass


class VectorIndexConfigurationError(VectorIndexError):
    """Raised when vector index configuration is invalid."""

    pass
