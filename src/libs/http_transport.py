"""JSON-over-HTTP helpers shared by the remote model providers.

Providers own their payload and response formats; this module only sends a
JSON body, raises on non-2xx responses, and pulls a readable message out of a
provider's error body.
"""

import json
from typing import Any

import httpx

USER_AGENT = "rag-core/1.0"


def post_json(
    url: str,
    payload: dict[str, Any],
    headers: dict[str, str] | None = None,
    timeout: float = 60.0,
    http_client: httpx.Client | None = None,
) -> dict[str, Any]:
    """POST a JSON payload and return the decoded JSON response.

    Args:
        url: Endpoint URL.
        payload: JSON body.
        headers: Extra request headers.
        timeout: Transport timeout when no client is supplied.
        http_client: Optional pre-configured client; never closed here.

    Returns:
        Decoded response body.

    Raises:
        httpx.HTTPStatusError: On a non-2xx response.
        httpx.RequestError: On transport failures (including timeouts).
        ValueError: If the response body is not valid JSON.
    """
    request_headers = {
        "Content-Type": "application/json",
        "User-Agent": USER_AGENT,
    }
    request_headers.update(headers or {})

    client = http_client or httpx.Client(timeout=timeout)
    try:
        response = client.post(url, headers=request_headers, json=payload)
        response.raise_for_status()
        return response.json()
    finally:
        if http_client is None:
            client.close()


def error_message_from_response(error: httpx.HTTPStatusError) -> str:
    """Extract the provider's error message from an HTTP error response.

    Understands OpenAI/Gemini style `{"error": {"message": ...}}` and Ollama
    style `{"error": "..."}` bodies; falls back to the status line.
    """
    try:
        body = error.response.json()
    except (json.JSONDecodeError, ValueError):
        body = None

    if isinstance(body, dict):
        detail = body.get("error")
        if isinstance(detail, dict) and detail.get("message"):
            return str(detail["message"])
        if isinstance(detail, str) and detail:
            return detail

    return f"HTTP {error.response.status_code}"


def error_body(error: httpx.HTTPStatusError) -> Any:
    """Return the decoded error body, or the raw text when it is not JSON."""
    try:
        return error.response.json()
    except (json.JSONDecodeError, ValueError):
        return error.response.text
