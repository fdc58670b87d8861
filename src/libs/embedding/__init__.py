# Embedding - Embedding interfaces

from libs.embedding.base_embedding import (
    BaseEmbedding,
    EmbeddingResult,
    EmbeddingError,
    EmbeddingConfigurationError,
    UnknownEmbeddingProviderError,
)

from libs.embedding.gemini_embedding import GeminiEmbedding
from libs.embedding.ollama_embedding import OllamaEmbedding
from libs.embedding.openai_embedding import OpenAIEmbedding
from libs.embedding.embedding_factory import EmbeddingFactory

__all__ = [
    # Base
    "BaseEmbedding",
    "EmbeddingResult",
    "EmbeddingError",
    "EmbeddingConfigurationError",
    "UnknownEmbeddingProviderError",
    # Providers
    "GeminiEmbedding",
    "OllamaEmbedding",
    "OpenAIEmbedding",
    # Factory
    "EmbeddingFactory",
]
