"""ChromaDB-backed vector index.

Holds the vectors in an in-memory (ephemeral) ChromaDB collection using an
HNSW graph in cosine space. Chunk objects stay on the Python side, keyed by
the string form of their vector id.

Design Principles:
    - Same contract: Results match BaseVectorIndex semantics (min(k, n) hits)
    - Approximate: HNSW search is sub-linear; for small corpora it is exact
    - Isolated: Every index gets its own uniquely named collection
    - Released with the index: the collection is deleted once the index is
      garbage collected, so replaced corpora do not accumulate
"""

import uuid
import weakref
from typing import Any

from core.types import IndexedVector, SearchHit
from libs.vector_index.base_vector_index import (
    BaseVectorIndex,
    VectorIndexConfigurationError,
    VectorIndexError,
)
from observability.logger import get_logger

logger = get_logger(__name__)


def _drop_collection(client: Any, name: str) -> None:
    """Delete a collection whose index is gone; failures are only logged."""
    try:
        client.delete_collection(name)
    except Exception as e:
        logger.warning(f"Failed to delete ChromaDB collection '{name}': {e}")
    else:
        logger.debug(f"Deleted ChromaDB collection '{name}'")


class ChromaVectorIndex(BaseVectorIndex):
    """Vector index stored in an ephemeral ChromaDB collection.

    Attributes:
        collection_name: Name of the backing collection
    """

    COLLECTION_PREFIX = "rag-corpus"
    ADD_BATCH_SIZE = 1000

    def __init__(self, client: Any | None = None, **kwargs: Any) -> None:
        """Initialize the ChromaVectorIndex.

        Args:
            client: Optional chromadb client; an EphemeralClient by default.

        Raises:
            VectorIndexConfigurationError: If chromadb is not installed.
        """
        super().__init__(**kwargs)
        if client is None:
            try:
                import chromadb
            except ImportError as e:
                raise VectorIndexConfigurationError(
                    "chromadb is not installed. "
                    "Install it with: pip install chromadb",
                    provider="chroma"
                ) from e
            client = chromadb.EphemeralClient()

        self._client = client
        self._collection_name = f"{self.COLLECTION_PREFIX}-{uuid.uuid4().hex}"
        self._collection: Any = None
        self._finalizer: weakref.finalize | None = None
        self._by_id: dict[str, IndexedVector] = {}

    @property
    def provider_name(self) -> str:
        return "chroma"

    @property
    def collection_name(self) -> str:
        return self._collection_name

    def _index_vectors(self, entries: list[IndexedVector]) -> None:
        try:
            self._collection = self._client.create_collection(
                name=self._collection_name,
                metadata={"hnsw:space": "cosine"},
            )
            self._finalizer = weakref.finalize(
                self, _drop_collection, self._client, self._collection_name
            )
            self._finalizer.atexit = False
            for start in range(0, len(entries), self.ADD_BATCH_SIZE):
                batch = entries[start:start + self.ADD_BATCH_SIZE]
                self._collection.add(
                    ids=[str(entry.id) for entry in batch],
                    embeddings=[list(entry.vector) for entry in batch],
                )
        except Exception as e:
            raise VectorIndexError(
                f"Failed to build ChromaDB collection: {e}",
                provider=self.provider_name,
                details={"collection": self._collection_name},
            ) from e

        self._by_id = {str(entry.id): entry for entry in entries}
        logger.info(
            f"Built ChromaDB index '{self._collection_name}' "
            f"with {len(entries)} vectors"
        )

    def _search(self, query_vector: list[float], k: int) -> list[SearchHit]:
        try:
            results = self._collection.query(
                query_embeddings=[query_vector],
                n_results=k,
                include=["distances"],
            )
        except Exception as e:
            raise VectorIndexError(
                f"ChromaDB query failed: {e}",
                provider=self.provider_name,
            ) from e

        ids = results.get("ids", [[]])[0]
        distances = results.get("distances", [[]])[0]

        hits = []
        for vector_id, distance in zip(ids, distances):
            entry = self._by_id[vector_id]
            # Cosine distance is 1 - cosine similarity
            hits.append(
                SearchHit(chunk=entry.chunk, score=1.0 - float(distance), vector_id=entry.id)
            )

        hits.sort(key=lambda hit: (-hit.score, hit.vector_id))
        return hits

    def __repr__(self) -> str:
        return (
            f"ChromaVectorIndex(collection={self._collection_name}, "
            f"size={len(self._entries)})"
        )
