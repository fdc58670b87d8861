"""Embedding Factory for creating Embedding instances based on configuration.

Usage:
    settings = load_settings()
    embedding = EmbeddingFactory.create(settings)
"""

from typing import Any

from core.settings import Settings
from libs.embedding.base_embedding import (
    BaseEmbedding,
    EmbeddingConfigurationError,
    UnknownEmbeddingProviderError,
)
from libs.provider_registry import ProviderRegistry
from observability.logger import get_logger

logger = get_logger(__name__)


class EmbeddingFactory(ProviderRegistry[BaseEmbedding]):
    """Factory for creating Embedding instances.

    Provider selection comes from settings.embedding.provider. The built-in
    providers (openai, gemini, ollama) are registered on import.
    """

    kind = "embedding"
    _providers: dict[str, type[BaseEmbedding]] = {}

    @classmethod
    def create(cls, settings: Settings, **kwargs: Any) -> BaseEmbedding:
        """Create an Embedding instance based on configuration.

        Args:
            settings: Settings object containing embedding configuration
            **kwargs: Overrides for constructor arguments (e.g., http_client)

        Returns:
            BaseEmbedding implementation instance

        Raises:
            UnknownEmbeddingProviderError: If the provider is not registered
            EmbeddingConfigurationError: If configuration is invalid
        """
        embed_config = settings.embedding
        implementation_class = cls.resolve(
            embed_config.provider,
            UnknownEmbeddingProviderError,
            EmbeddingConfigurationError,
            "embedding.provider",
        )

        init_kwargs = cls._constructor_kwargs(
            {
                "api_key": embed_config.api_key,
                "base_url": embed_config.base_url,
                "model": embed_config.model,
                "dimensions": embed_config.dimensions,
                "timeout": embed_config.timeout,
            },
            kwargs,
        )

        logger.info(
            f"Creating embedding instance: provider={embed_config.provider}, "
            f"model={embed_config.model or 'default'}"
        )
        return implementation_class(**init_kwargs)


def _register_builtin_providers() -> None:
    from libs.embedding.gemini_embedding import GeminiEmbedding
    from libs.embedding.ollama_embedding import OllamaEmbedding
    from libs.embedding.openai_embedding import OpenAIEmbedding

    EmbeddingFactory.register("openai", OpenAIEmbedding)
    EmbeddingFactory.register("gemini", GeminiEmbedding)
    EmbeddingFactory.register("ollama", OllamaEmbedding)


_register_builtin_providers()
