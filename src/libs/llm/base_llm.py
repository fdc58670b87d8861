"""Abstract base class for LLM providers.

This module defines the BaseLLM interface that all LLM implementations
must follow. This enables pluggable LLM providers (OpenAI, Gemini, Ollama).

Design Principles:
    - Pluggable: All providers implement this interface
    - Classified failures: LLMError subclasses per FailureKind
    - Observable: trace parameter for tracing integration
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

import httpx

from core.failures import (
    FailureKind,
    RATE_LIMIT_HINT,
    failure_kind_for_exception,
    failure_kind_for_status,
)
from core.trace.trace_context import TraceContext
from libs.http_transport import error_body, error_message_from_response


@dataclass
class LLMResponse:
    """Response from an LLM chat completion.

    Attributes:
        content: The text content of the response
        raw_response: The raw response from the provider (if available)
        usage: Token usage information (if available)
    """
    content: str
    raw_response: Any | None = None
    usage: dict[str, int] | None = None


@dataclass
class ChatMessage:
    """A single message in a chat conversation.

    Attributes:
        role: Message role (user, assistant, system)
        content: Message content
    """
    role: str
    content: str


class BaseLLM(ABC):
    """Abstract base class for LLM providers.

    Implementations provide chat(); generate() is the single-prompt form
    used by the retrieval core.
    """

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Return the name of this provider (e.g., 'openai', 'gemini', 'ollama')."""
        ...

    @abstractmethod
    def chat(
        self,
        messages: list[ChatMessage],
        trace: TraceContext | None = None,
        **kwargs: Any
    ) -> LLMResponse:
        """Send a chat request to the LLM.

        Args:
            messages: List of chat messages in conversation order
            trace: Tracing context for observability
            **kwargs: Additional provider-specific arguments
                - temperature: Sampling temperature
                - max_tokens: Maximum tokens to generate

        Returns:
            LLMResponse containing the generated text

        Raises:
            LLMError: If the request fails
        """
        ...

    def generate(
        self,
        prompt: str,
        trace: TraceContext | None = None,
        **kwargs: Any
    ) -> str:
        """Complete a single user prompt and return the text.

        Raises:
            LLMError: If the request fails
        """
        response = self.chat([ChatMessage(role="user", content=prompt)], trace, **kwargs)
        return response.content


class LLMError(Exception):
    """Base exception for LLM-related errors.

    Attributes:
        provider: Provider that failed
        code: HTTP status code, when the provider answered
        kind: FailureKind of the failure
        details: Extra diagnostic data
    """

    default_kind: FailureKind | None = None

    def __init__(
        self,
        message: str,
        provider: str | None = None,
        code: int | None = None,
        details: dict[str, Any] | None = None,
        kind: FailureKind | None = None,
    ) -> None:
        super().__init__(message)
        self.provider = provider
        self.code = code
        self.details = details or {}
        self.kind = kind or self.default_kind or failure_kind_for_status(code)


class UnknownLLMProviderError(LLMError):
    """Raised when an unknown LLM provider is specified."""

    pass


class LLMConfigurationError(LLMError):
    """Raised when LLM configuration is invalid."""

    pass


class LLMRateLimitError(LLMError):
    """Raised when the provider rejects a request for rate or quota reasons."""

    default_kind = FailureKind.RATE_LIMITED


class LLMTimeoutError(LLMError):
    """Raised when generation does not finish in time."""

    default_kind = FailureKind.TIMEOUT


class LLMAuthenticationError(LLMError):
    """Raised when the provider rejects the API key."""

    default_kind = FailureKind.INVALID_CREDENTIAL


class LLMUnreachableError(LLMError):
    """Raised when the provider cannot be reached."""

    default_kind = FailureKind.UNREACHABLE


_ERROR_CLASS_BY_KIND: dict[FailureKind, type[LLMError]] = {
    FailureKind.RATE_LIMITED: LLMRateLimitError,
    FailureKind.TIMEOUT: LLMTimeoutError,
    FailureKind.INVALID_CREDENTIAL: LLMAuthenticationError,
    FailureKind.UNREACHABLE: LLMUnreachableError,
}


def llm_error_class(kind: FailureKind) -> type[LLMError]:
    """Return the LLMError subclass for a failure kind."""
    return _ERROR_CLASS_BY_KIND.get(kind, LLMError)


def llm_error_from_http(
    error: httpx.HTTPError,
    provider: str,
    display_name: str,
    url: str | None = None,
) -> LLMError:
    """Convert an httpx failure into the matching LLMError subclass.

    Args:
        error: HTTPStatusError or RequestError raised by the transport
        provider: Provider identifier stored on the error
        display_name: Human-readable API name used in the message
        url: Request URL, recorded for transport errors
    """
    kind = failure_kind_for_exception(error)
    error_class = llm_error_class(kind)

    if isinstance(error, httpx.HTTPStatusError):
        status = error.response.status_code
        message = f"{display_name} API error: {error_message_from_response(error)}"
        if kind is FailureKind.RATE_LIMITED:
            message = f"{message}. {RATE_LIMIT_HINT}"
        return error_class(
            message,
            provider=provider,
            code=status,
            kind=kind,
            details={"status_code": status, "response_body": error_body(error)},
        )

    if kind is FailureKind.TIMEOUT:
        message = f"{display_name} API request timed out: {error}"
    else:
        message = f"Failed to connect to {display_name} API: {error}"
    return error_class(
        message,
        provider=provider,
        kind=kind,
        details={"url": url, "error": str(error)},
    )
