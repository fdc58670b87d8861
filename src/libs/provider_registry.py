"""Runtime provider registry shared by the library factories.

Each factory (splitter, embedding, LLM, vector index) keeps its own mapping of
provider names to implementation classes. Providers are registered at runtime;
nothing is hardcoded here.

Usage:
    class LLMFactory(ProviderRegistry[BaseLLM]):
        kind = "LLM"
        _providers = {}

    LLMFactory.register("openai", OpenAILLM)
    llm_class = LLMFactory.resolve("openai", UnknownLLMProviderError)
"""

from typing import Any, ClassVar, Generic, TypeVar

from observability.logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class ProviderRegistry(Generic[T]):
    """Name -> implementation class registry.

    Subclasses must define their own `_providers` dict so registries do not
    share state.
    """

    kind: ClassVar[str] = "provider"
    _providers: ClassVar[dict[str, type]] = {}

    @classmethod
    def register(cls, provider_name: str, implementation_class: type[T]) -> None:
        """Register a provider implementation.

        Args:
            provider_name: Provider identifier (case-insensitive)
            implementation_class: Class implementing the factory's base interface
        """
        cls._providers[provider_name.lower()] = implementation_class
        logger.info(f"Registered {cls.kind} provider: {provider_name}")

    @classmethod
    def unregister(cls, provider_name: str) -> bool:
        """Unregister a provider.

        Returns:
            True if removed, False if not found
        """
        provider = provider_name.lower()
        if provider in cls._providers:
            del cls._providers[provider]
            logger.info(f"Unregistered {cls.kind} provider: {provider_name}")
            return True
        return False

    @classmethod
    def get_provider_names(cls) -> list[str]:
        """Get list of registered provider names."""
        return list(cls._providers.keys())

    @classmethod
    def has_provider(cls, provider_name: str) -> bool:
        """Check if a provider is registered."""
        return provider_name.lower() in cls._providers

    @classmethod
    def clear(cls) -> None:
        """Clear all registered providers."""
        cls._providers.clear()
        logger.info(f"Cleared all registered {cls.kind} providers")

    @classmethod
    def resolve(
        cls,
        provider_name: str | None,
        unknown_error: type[Exception],
        config_error: type[Exception],
        setting_path: str,
    ) -> type[T]:
        """Look up the implementation class for a configured provider name.

        Args:
            provider_name: Configured provider name
            unknown_error: Exception raised for an unregistered provider
            config_error: Exception raised when no provider is configured
            setting_path: Settings path named in the error message

        Returns:
            The registered implementation class

        Raises:
            config_error: If provider_name is empty
            unknown_error: If provider_name is not registered
        """
        provider = (provider_name or "").lower()
        if not provider:
            raise config_error(
                f"{cls.kind} provider is not configured. "
                f"Set '{setting_path}' in settings.yaml"
            )

        if provider not in cls._providers:
            available = ", ".join(cls._providers.keys())
            if not available:
                available = "(no providers registered)"
            raise unknown_error(
                f"Unknown {cls.kind} provider: '{provider}'. "
                f"Available providers: {available}",
                provider=provider
            )

        return cls._providers[provider]

    @staticmethod
    def _constructor_kwargs(
        from_settings: dict[str, Any],
        overrides: dict[str, Any],
    ) -> dict[str, Any]:
        """Merge settings values with explicit overrides, dropping None values."""
        init_kwargs = dict(from_settings)
        for key, value in overrides.items():
            if value is not None:
                init_kwargs[key] = value
        return {k: v for k, v in init_kwargs.items() if v is not None}
