"""Vector Index Factory for building indexes based on configuration.

Usage:
    VectorIndexFactory.register("brute_force", BruteForceVectorIndex)

    settings = load_settings()
    index = VectorIndexFactory.create(settings, entries)
"""

from typing import Any, Iterable, Sequence

from core.settings import Settings
from core.types import Chunk
from libs.provider_registry import ProviderRegistry
from libs.vector_index.base_vector_index import (
    BaseVectorIndex,
    UnknownVectorIndexProviderError,
    VectorIndexConfigurationError,
)
from observability.logger import get_logger

logger = get_logger(__name__)


class VectorIndexFactory(ProviderRegistry[BaseVectorIndex]):
    """Factory for building vector indexes.

    Provider selection comes from settings.vector_index.provider.
    """

    kind = "vector index"
    _providers: dict[str, type[BaseVectorIndex]] = {}

    @classmethod
    def get_index_class(cls, settings: Settings) -> type[BaseVectorIndex]:
        """Resolve the configured index class without building an index.

        Raises:
            UnknownVectorIndexProviderError: If the provider is not registered
            VectorIndexConfigurationError: If no provider is configured
        """
        return cls.resolve(
            settings.vector_index.provider,
            UnknownVectorIndexProviderError,
            VectorIndexConfigurationError,
            "vector_index.provider",
        )

    @classmethod
    def create(
        cls,
        settings: Settings,
        entries: Iterable[tuple[Chunk, Sequence[float]]],
        **kwargs: Any
    ) -> BaseVectorIndex:
        """Build a populated index of the configured provider.

        Args:
            settings: Settings object containing vector_index configuration
            entries: (chunk, vector) pairs in storage order
            **kwargs: Provider-specific constructor arguments

        Returns:
            BaseVectorIndex implementation instance

        Raises:
            UnknownVectorIndexProviderError: If the provider is not registered
            EmptyCorpusError: If entries is empty
        """
        implementation_class = cls.get_index_class(settings)
        logger.debug(f"Building vector index: provider={settings.vector_index.provider}")
        return implementation_class.build(entries, **kwargs)


def _register_builtin_providers() -> None:
    from libs.vector_index.brute_force_index import BruteForceVectorIndex
    from libs.vector_index.chroma_index import ChromaVectorIndex

    VectorIndexFactory.register("brute_force", BruteForceVectorIndex)
    VectorIndexFactory.register("chroma", ChromaVectorIndex)


_register_builtin_providers()
