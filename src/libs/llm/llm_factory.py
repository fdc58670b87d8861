"""LLM Factory for creating LLM instances based on configuration.

Usage:
    settings = load_settings()
    llm = LLMFactory.create(settings)
    text = llm.generate("Summarize ...")
"""

from typing import Any

from core.settings import Settings
from libs.llm.base_llm import (
    BaseLLM,
    LLMConfigurationError,
    UnknownLLMProviderError,
)
from libs.provider_registry import ProviderRegistry
from observability.logger import get_logger

logger = get_logger(__name__)


class LLMFactory(ProviderRegistry[BaseLLM]):
    """Factory for creating LLM instances.

    Provider selection comes from settings.llm.provider. The built-in
    providers (openai, gemini, ollama) are registered on import.
    """

    kind = "LLM"
    _providers: dict[str, type[BaseLLM]] = {}

    @classmethod
    def create(cls, settings: Settings, **kwargs: Any) -> BaseLLM:
        """Create an LLM instance based on configuration.

        Args:
            settings: Settings object containing LLM configuration
            **kwargs: Overrides for constructor arguments (e.g., http_client)

        Returns:
            BaseLLM implementation instance

        Raises:
            UnknownLLMProviderError: If the provider is not registered
            LLMConfigurationError: If configuration is invalid
        """
        llm_config = settings.llm
        implementation_class = cls.resolve(
            llm_config.provider,
            UnknownLLMProviderError,
            LLMConfigurationError,
            "llm.provider",
        )

        init_kwargs = cls._constructor_kwargs(
            {
                "api_key": llm_config.api_key,
                "base_url": llm_config.base_url,
                "model": llm_config.model,
                "temperature": llm_config.temperature,
                "max_tokens": llm_config.max_tokens,
                "timeout": llm_config.timeout,
            },
            kwargs,
        )

        logger.info(
            f"Creating LLM instance: provider={llm_config.provider}, "
            f"model={llm_config.model}"
        )
        return implementation_class(**init_kwargs)


def _register_builtin_providers() -> None:
    from libs.llm.gemini_llm import GeminiLLM
    from libs.llm.ollama_llm import OllamaLLM
    from libs.llm.openai_llm import OpenAILLM

    LLMFactory.register("openai", OpenAILLM)
    LLMFactory.register("gemini", GeminiLLM)
    LLMFactory.register("ollama", OllamaLLM)


_register_builtin_providers()
