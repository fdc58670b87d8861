"""Ollama LLM implementation.

Uses the native `/api/chat` endpoint of a local Ollama server with
streaming disabled.

Example Configuration:
    llm:
      provider: ollama
      base_url: http://localhost:11434
      model: llama3.2
      temperature: 0.7
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

DEFAULT_OLLAMA_BASE_URL = "http://localhost:11434"


class OllamaLLM(BaseLLM):
    """Ollama LLM implementation.

    Attributes:
        base_url: Base URL for the Ollama API endpoint
        model: Model name to use
        temperature: Sampling temperature
        max_tokens: Maximum tokens to generate (num_predict)
        timeout: Request timeout in seconds
        keep_alive: Keepalive duration for the model (e.g., "5m", "0")
    """

    def __init__(
        self,
        base_url: str | None = None,
        model: str | None = None,
        temperature: float = 0.7,
        max_tokens: int = 2048,
        timeout: float = 120.0,
        keep_alive: str = "5m",
        http_client: httpx.Client | None = None,
        **kwargs: Any,
    ) -> None:
        """Initialize the Ollama LLM.

        Args:
            base_url: Ollama server URL. Falls back to OLLAMA_BASE_URL, then localhost.
            model: Model name. Required.
            temperature: Sampling temperature.
            max_tokens: Maximum tokens to generate.
            timeout: Request timeout in seconds.
            keep_alive: How long Ollama keeps the model loaded.
            http_client: Optional pre-configured HTTP client.
            **kwargs: Ignored settings keys (e.g. api_key).

        Raises:
            LLMConfigurationError: If model is not provided.
        """
        self._base_url = (
            base_url or os.getenv("OLLAMA_BASE_URL") or DEFAULT_OLLAMA_BASE_URL
        ).rstrip("/")
        self._model = model
        self._temperature = temperature
        self._max_tokens = max_tokens
        self._timeout = timeout
        self._keep_alive = keep_alive
        self._http_client = http_client

        if not self._model:
            raise LLMConfigurationError(
                "Ollama model is not configured. Set 'llm.model' in settings.",
                provider="ollama"
            )

    @property
    def provider_name(self) -> str:
        return "ollama"

    def _build_request_payload(
        self,
        messages: list[ChatMessage],
        **kwargs: Any
    ) -> dict[str, Any]:
        return {
            "model": self._model,
            "messages": [{"role": msg.role, "content": msg.content} for msg in messages],
            "stream": False,
            "keep_alive": self._keep_alive,
            "options": {
                "temperature": kwargs.get("temperature", self._temperature),
                "num_predict": kwargs.get("max_tokens", self._max_tokens),
            },
        }

    def _parse_response(self, response_data: dict[str, Any]) -> LLMResponse:
        message = response_data.get("message")
        if not message:
            raise LLMError(
                "Empty response from Ollama API",
                provider=self.provider_name,
                details=response_data
            )

        usage_info = {
            "prompt_tokens": response_data.get("prompt_eval_count", 0),
            "completion_tokens": response_data.get("eval_count", 0),
        }
        usage_info["total_tokens"] = usage_info["prompt_tokens"] + usage_info["completion_tokens"]

        return LLMResponse(
            content=message.get("content", ""),
            raw_response=response_data,
            usage=usage_info,
        )

    def chat(
        self,
        messages: list[ChatMessage],
        trace: TraceContext | None = None,
        **kwargs: Any
    ) -> LLMResponse:
        """Send a chat request to Ollama.

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
            f"Ollama chat request: model={self._model}, message_count={len(messages)}"
        )

        url = f"{self._base_url}/api/chat"
        try:
            response_data = post_json(
                url,
                self._build_request_payload(messages, **kwargs),
                timeout=self._timeout,
                http_client=self._http_client,
            )
        except httpx.HTTPError as e:
            raise llm_error_from_http(e, self.provider_name, "Ollama", url) from e
        except ValueError as e:
            raise LLMError(
                f"Invalid JSON from Ollama API: {e}",
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
        return f"OllamaLLM(model={self._model}, base_url={self._base_url})"
