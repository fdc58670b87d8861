"""Splitter Factory for creating Splitter instances based on configuration.

Usage:
    SplitterFactory.register("recursive", RecursiveSplitter)

    settings = load_settings()
    splitter = SplitterFactory.create(settings)
"""

from typing import Any

from core.settings import Settings
from libs.provider_registry import ProviderRegistry
from libs.splitter.base_splitter import (
    BaseSplitter,
    SplitterConfigurationError,
    UnknownSplitterProviderError,
)
from observability.logger import get_logger

logger = get_logger(__name__)


class SplitterFactory(ProviderRegistry[BaseSplitter]):
    """Factory for creating Splitter instances.

    Provider selection comes from settings.ingestion.splitter.
    """

    kind = "splitter"
    _providers: dict[str, type[BaseSplitter]] = {}

    @classmethod
    def create(cls, settings: Settings, **kwargs: Any) -> BaseSplitter:
        """Create a Splitter instance based on configuration.

        Args:
            settings: Settings object containing ingestion configuration
            **kwargs: Overrides for constructor arguments (e.g., chunk_size=500)

        Returns:
            BaseSplitter implementation instance

        Raises:
            UnknownSplitterProviderError: If the provider is not registered
            SplitterConfigurationError: If configuration is invalid
        """
        ingest_config = settings.ingestion
        implementation_class = cls.resolve(
            ingest_config.splitter,
            UnknownSplitterProviderError,
            SplitterConfigurationError,
            "ingestion.splitter",
        )

        init_kwargs = cls._constructor_kwargs(
            {
                "chunk_size": ingest_config.chunk_size,
                "chunk_overlap": ingest_config.chunk_overlap,
            },
            kwargs,
        )

        logger.info(
            f"Creating splitter instance: provider={ingest_config.splitter}, "
            f"chunk_size={init_kwargs.get('chunk_size', 'N/A')}"
        )
        return implementation_class(**init_kwargs)


def _register_builtin_providers() -> None:
    from libs.splitter.recursive_splitter import RecursiveSplitter

    SplitterFactory.register("recursive", RecursiveSplitter)


_register_builtin_providers()
