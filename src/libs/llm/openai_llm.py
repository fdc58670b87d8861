"""OpenAI-compatible LLM implementation.

Supports OpenAI's chat completions API and any provider that uses the same
format (DeepSeek, vLLM, LM Studio and similar local servers).

Design Principles:
    - OpenAI-compatible: Follows OpenAI API conventions
    - Observable: trace parameter for tracing integration
"""

import os
from typing import Any

import httpx

from core.trace.trace_context import TraceContext
from libs.http_transport import post_json
from libs.llm.base_llm import (
    BaseLLM,
    ChatMessage,
    LLMConfigurationError,
    LLMError,
    LLMResponse,
    llm_error_from_http,
)
from observability.logger import get_logger

logger = get_logger(__name__)


class OpenAILLM(BaseLLM):
    """OpenAI LLM implementation.

    Attributes:
        api_key: OpenAI API key
        base_url: Base URL for the API endpoint
        model: Model name to use
        temperature: Sampling temperature (0.0-2.0)
        max_tokens: Maximum tokens to generate
        timeout: Request timeout in seconds
        http_client: Optional HTTP client for custom configuration

    Example:
        >>> llm = OpenAILLM(api_key="sk-...", model="gpt-4o-mini")
        >>> llm.generate("Hello")
    """

    DEFAULT_BASE_URL = "https://api.openai.com/v1"

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        model: str | None = None,
        temperature: float = 0.7,
        max_tokens: int = 2048,
        timeout: float = 60.0,
        http_client: httpx.Client | None = None,
    ) -> None:
        """Initialize the OpenAI LLM.

        Args:
            api_key: OpenAI API key. If None, reads from OPENAI_API_KEY env var.
            base_url: Base URL for the API. Defaults to OpenAI's official API.
            model: Model name. Required.
            temperature: Sampling temperature (0.0-2.0).
            max_tokens: Maximum tokens to generate.
            timeout: Request timeout in seconds.
            http_client: Optional pre-configured HTTP client.

        Raises:
            LLMConfigurationError: If model or API key is missing.
        """
        self._api_key = api_key or os.getenv("OPENAI_API_KEY")
        self._base_url = (base_url or self.DEFAULT_BASE_URL).rstrip("/")
        self._model = model
        self._temperature = temperature
        self._max_tokens = max_tokens
        self._timeout = timeout
        self._http_client = http_client

        if not self._model:
            raise LLMConfigurationError(
                "OpenAI model is not configured. Set 'llm.model' in settings.",
                provider="openai"
            )
        if not self._api_key:
            raise LLMConfigurationError(
                "OpenAI API key is not configured. Set 'llm.api_key' in settings "
                "or OPENAI_API_KEY env var.",
                provider="openai"
            )

    @property
    def provider_name(self) -> str:
        return "openai"

    def _build_request_payload(
        self,
        messages: list[ChatMessage],
        **kwargs: Any
    ) -> dict[str, Any]:
        return {
            "model": self._model,
            "messages": [{"role": msg.role, "content": msg.content} for msg in messages],
            "temperature": kwargs.get("temperature", self._temperature),
            "max_tokens": kwargs.get("max_tokens", self._max_tokens),
        }

    def _parse_response(self, response_data: dict[str, Any]) -> LLMResponse:
        choices = response_data.get("choices", [])
        if not choices:
            raise LLMError(
                "Empty response from OpenAI API",
                provider=self.provider_name,
                details=response_data
            )

        content = choices[0].get("message", {}).get("content") or ""

        usage = response_data.get("usage", {})
        usage_info: dict[str, int] = {
            "prompt_tokens": usage.get("prompt_tokens", 0),
            "completion_tokens": usage.get("completion_tokens", 0),
            "total_tokens": usage.get("total_tokens", 0),
        }

        return LLMResponse(content=content, raw_response=response_data, usage=usage_info)

    def chat(
        self,
        messages: list[ChatMessage],
        trace: TraceContext | None = None,
        **kwargs: Any
    ) -> LLMResponse:
        """Send a chat request to OpenAI.

        Raises:
            LLMError: If the request fails (subclass chosen by failure kind).
        """
        if not messages:
            raise LLMError(
                "No messages provided to chat",
                provider=self.provider_name,
                details={"message_count": 0}
            )

        logger.debug(
            f"OpenAI chat request: model={self._model}, message_count={len(messages)}"
        )

        url = f"{self._base_url}/chat/completions"
        try:
            response_data = post_json(
                url,
                self._build_request_payload(messages, **kwargs),
                headers={"Authorization": f"Bearer {self._api_key}"},
                timeout=self._timeout,
                http_client=self._http_client,
            )
        except httpx.HTTPError as e:
            raise llm_error_from_http(e, self.provider_name, "OpenAI", url) from e
        except ValueError as e:
            raise LLMError(
                f"Invalid JSON from OpenAI API: {e}",
                provider=self.provider_name,
            ) from e

        response = self._parse_response(response_data)

        if trace:
            trace.record_stage(
                "llm_response",
                {"provider": self.provider_name, "model": self._model, "usage": response.usage}
            )
        return response

    def __repr__(self) -> str:
        return f"OpenAILLM(model={self._model}, base_url={self._base_url})"
