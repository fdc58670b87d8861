"""Failure classification shared by embedding and generation providers.

Remote providers fail in a handful of ways that callers need to tell apart:
a rate limit deserves a wait-and-retry hint, a timeout points at a slow
backend, a bad credential or an unreachable host points at a broken one.

Design Principles:
    - One vocabulary: LLM and embedding errors both carry a FailureKind
    - Transport-aware: classifies both HTTP status codes and httpx exceptions
"""

from enum import Enum

import httpx


class FailureKind(str, Enum):
    """Category of a failed call to an external model provider."""

    RATE_LIMITED = "rate_limited"
    TIMEOUT = "timeout"
    INVALID_CREDENTIAL = "invalid_credential"
    UNREACHABLE = "unreachable"
    INVALID_REQUEST = "invalid_request"
    UNKNOWN = "unknown"


# Message suffix attached to rate-limited failures
RATE_LIMIT_HINT = "Rate limit or quota exceeded. Please wait a minute and retry."


def failure_kind_for_status(status_code: int | None) -> FailureKind:
    """Map an HTTP status code to a FailureKind.

    Args:
        status_code: HTTP status returned by the provider.

    Returns:
        The matching FailureKind; UNKNOWN when no rule applies.
    """
    if status_code is None:
        return FailureKind.UNKNOWN
    if status_code == 429:
        return FailureKind.RATE_LIMITED
    if status_code in (401, 403):
        return FailureKind.INVALID_CREDENTIAL
    if status_code in (408, 504):
        return FailureKind.TIMEOUT
    if status_code >= 500:
        return FailureKind.UNREACHABLE
    if 400 <= status_code < 500:
        return FailureKind.INVALID_REQUEST
    return FailureKind.UNKNOWN


def failure_kind_for_exception(error: BaseException) -> FailureKind:
    """Map a transport exception to a FailureKind.

    Args:
        error: Exception raised while talking to a provider.

    Returns:
        TIMEOUT for httpx timeouts, UNREACHABLE for other httpx transport
        errors, the status-derived kind for HTTPStatusError, else UNKNOWN.
    """
    if isinstance(error, httpx.TimeoutException):
        return FailureKind.TIMEOUT
    if isinstance(error, httpx.HTTPStatusError):
        return failure_kind_for_status(error.response.status_code)
    if isinstance(error, httpx.RequestError):
        return FailureKind.UNREACHABLE
    if isinstance(error, TimeoutError):
        return FailureKind.TIMEOUT
    return FailureKind.UNKNOWN


def describe_failure(kind: FailureKind, provider: str) -> str:
    """Return a user-actionable message for a failure kind."""
    if kind is FailureKind.RATE_LIMITED:
        return f"{provider} API quota exceeded. {RATE_LIMIT_HINT}"
    if kind is FailureKind.TIMEOUT:
        return f"{provider} API response timed out. Check the network or retry later."
    if kind is FailureKind.INVALID_CREDENTIAL:
        return f"{provider} API key is invalid or missing."
    if kind is FailureKind.UNREACHABLE:
        return f"Cannot connect to the {provider} API. Check the network."
    return f"{provider} API request failed."
