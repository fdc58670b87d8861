# Vector Index - In-memory nearest-neighbour search over chunk embeddings

from libs.vector_index.base_vector_index import (
    BaseVectorIndex,
    DimensionMismatchError,
    EmptyCorpusError,
    InvalidArgumentError,
    UnknownVectorIndexProviderError,
    VectorIndexConfigurationError,
    VectorIndexError,
)

from libs.vector_index.brute_force_index import BruteForceVectorIndex
from libs.vector_index.chroma_index import ChromaVectorIndex
from libs.vector_index.vector_index_factory import VectorIndexFactory

__all__ = [
    # Base
    "BaseVectorIndex",
    "VectorIndexError",
    "EmptyCorpusError",
    "InvalidArgumentError",
    "DimensionMismatchError",
    "UnknownVectorIndexProviderError",
    "VectorIndexConfigurationError",
    # Implementations
    "BruteForceVectorIndex",
    "ChromaVectorIndex",
    # Factory
    "VectorIndexFactory",
]
