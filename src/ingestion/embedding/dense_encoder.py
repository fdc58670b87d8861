"""Dense Encoder - Generate dense embeddings for chunks.

Design Principles:
    - Batch Processing: Embeds chunks in fixed-size batches
    - All-or-nothing: Any failed batch fails the whole encode call
    - Order-preserving: Output pairs follow input chunk order

Example:
    >>> encoder = DenseEncoder(embedding, batch_size=100)
    >>> pairs = encoder.encode(chunks)
    >>> index = BruteForceVectorIndex.build(pairs)
"""

from core.trace.trace_context import TraceContext
from core.types import Chunk
from libs.embedding.base_embedding import BaseEmbedding, EmbeddingError
from observability.logger import get_logger

logger = get_logger(__name__)


class DenseEncoder:
    """Dense embedding encoder for document chunks.

    Attributes:
        embedding: The embedding model used for encoding
        batch_size: Maximum chunks per embedding call
    """

    def __init__(self, embedding: BaseEmbedding, batch_size: int = 100) -> None:
        """Initialize the DenseEncoder.

        Args:
            embedding: Embedding model for generating vectors.
            batch_size: Maximum number of chunks per embedding call.

        Raises:
            ValueError: If batch_size is not positive.
        """
        if batch_size <= 0:
            raise ValueError(f"batch_size must be positive, got {batch_size}")
        self._embedding = embedding
        self._batch_size = batch_size

    @property
    def embedding(self) -> BaseEmbedding:
        return self._embedding

    @property
    def batch_size(self) -> int:
        return self._batch_size

    def encode(
        self,
        chunks: list[Chunk],
        trace: TraceContext | None = None,
    ) -> list[tuple[Chunk, list[float]]]:
        """Embed chunks and pair each chunk with its vector.

        Args:
            chunks: Chunks to encode.
            trace: Optional trace context for observability.

        Returns:
            (chunk, vector) pairs in input order.

        Raises:
            EmbeddingError: If any batch fails or returns the wrong number of vectors.
        """
        if not chunks:
            return []

        pairs: list[tuple[Chunk, list[float]]] = []
        total_tokens: dict[str, int] = {}
        batch_count = 0

        for start in range(0, len(chunks), self._batch_size):
            batch = chunks[start:start + self._batch_size]
            result = self._embedding.embed([chunk.text for chunk in batch])

            if len(result.vectors) != len(batch):
                raise EmbeddingError(
                    f"Embedding returned {len(result.vectors)} vectors "
                    f"for {len(batch)} chunks",
                    provider=self._embedding.provider_name,
                )

            pairs.extend(zip(batch, result.vectors))
            for key, value in (result.usage or {}).items():
                total_tokens[key] = total_tokens.get(key, 0) + value
            batch_count += 1

        logger.info(
            f"Encoded {len(pairs)} chunks in {batch_count} batches "
            f"with {self._embedding.provider_name}"
        )

        if trace:
            trace.record_stage(
                "embedding",
                {
                    "chunk_count": len(pairs),
                    "batch_count": batch_count,
                    "tokens": total_tokens or None,
                },
            )

        return pairs
