"""Google Gemini LLM implementation.

Calls the Generative Language API `generateContent` endpoint. System messages
become the request's systemInstruction; assistant messages use the 'model'
role.

Example Configuration:
    llm:
      provider: gemini
      model: gemini-2.5-flash
      # api_key read from GOOGLE_API_KEY when omitted
"""

from typing import Any

import httpx

from core.trace.trace_context import TraceContext
from libs.embedding.gemini_embedding import resolve_google_api_key
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


class GeminiLLM(BaseLLM):
    """Gemini chat via the Generative Language REST API.

    Attributes:
        model: Model name (e.g., gemini-2.5-flash)
        temperature: Sampling temperature
        max_tokens: Maximum output tokens
        timeout: Request timeout in seconds
    """

    DEFAULT_MODEL = "gemini-2.5-flash"
    DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"

    _ROLE_MAP = {"user": "user", "assistant": "model", "model": "model"}

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
        """Initialize the Gemini LLM.

        Args:
            api_key: Google API key. If None, reads from GOOGLE_API_KEY env var.
            base_url: API base URL.
            model: Model name. Defaults to gemini-2.5-flash.
            temperature: Sampling temperature.
            max_tokens: Maximum output tokens.
            timeout: Request timeout in seconds.
            http_client: Optional pre-configured HTTP client.

        Raises:
            LLMConfigurationError: If no usable API key is configured.
        """
        self._api_key = resolve_google_api_key(api_key)
        self._base_url = (base_url or self.DEFAULT_BASE_URL).rstrip("/")
        self._model = model or self.DEFAULT_MODEL
        self._temperature = temperature
        self._max_tokens = max_tokens
        self._timeout = timeout
        self._http_client = http_client

        if not self._api_key:
            raise LLMConfigurationError(
                "Gemini API key is not configured. Set 'llm.api_key' in settings "
                "or GOOGLE_API_KEY env var.",
                provider="gemini"
            )

    @property
    def provider_name(self) -> str:
        return "gemini"

    @property
    def _model_path(self) -> str:
        if self._model.startswith("models/"):
            return self._model
        return f"models/{self._model}"

    def _build_request_payload(
        self,
        messages: list[ChatMessage],
        **kwargs: Any
    ) -> dict[str, Any]:
        system_parts = [
            {"text": msg.content} for msg in messages if msg.role == "system"
        ]
        contents = [
            {
                "role": self._ROLE_MAP.get(msg.role, "user"),
                "parts": [{"text": msg.content}],
            }
            for msg in messages
            if msg.role != "system"
        ]

        payload: dict[str, Any] = {
            "contents": contents,
            "generationConfig": {
                "temperature": kwargs.get("temperature", self._temperature),
                "maxOutputTokens": kwargs.get("max_tokens", self._max_tokens),
            },
        }
        if system_parts:
            payload["systemInstruction"] = {"parts": system_parts}
        return payload

    def _parse_response(self, response_data: dict[str, Any]) -> LLMResponse:
        candidates = response_data.get("candidates", [])
        if not candidates:
            block_reason = response_data.get("promptFeedback", {}).get("blockReason")
            message = "Empty response from Gemini API"
            if block_reason:
                message = f"Gemini API blocked the prompt: {block_reason}"
            raise LLMError(message, provider=self.provider_name, details=response_data)

        parts = candidates[0].get("content", {}).get("parts", [])
        content = "".join(part.get("text", "") for part in parts)

        usage = response_data.get("usageMetadata", {})
        usage_info: dict[str, int] = {
            "prompt_tokens": usage.get("promptTokenCount", 0),
            "completion_tokens": usage.get("candidatesTokenCount", 0),
            "total_tokens": usage.get("totalTokenCount", 0),
        }

        return LLMResponse(content=content, raw_response=response_data, usage=usage_info)

    def chat(
        self,
        messages: list[ChatMessage],
        trace: TraceContext | None = None,
        **kwargs: Any
    ) -> LLMResponse:
        """Send a chat request to Gemini.

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
            f"Gemini chat request: model={self._model}, message_count={len(messages)}"
        )

        url = f"{self._base_url}/{self._model_path}:generateContent"
        try:
            response_data = post_json(
                url,
                self._build_request_payload(messages, **kwargs),
                headers={"x-goog-api-key": self._api_key},
                timeout=self._timeout,
                http_client=self._http_client,
            )
        except httpx.HTTPError as e:
            raise llm_error_from_http(e, self.provider_name, "Gemini", url) from e
        except ValueError as e:
            raise LLMError(
                f"Invalid JSON from Gemini API: {e}",
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
        return f"GeminiLLM(model={self._model})"
