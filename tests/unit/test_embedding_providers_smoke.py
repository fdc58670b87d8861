"""Smoke tests for Embedding providers (OpenAI, Gemini, Ollama).

Tests use respx to simulate API responses without making real HTTP calls.

Design Principles:
    - Mock HTTP: Uses respx to intercept requests
    - Deterministic: All tests use fixed mock responses
    - Coverage: Request format, response parsing and failure classification
"""

import json

import httpx
import pytest
import respx

from core.failures import FailureKind, RATE_LIMIT_HINT
from libs.embedding.base_embedding import (
    EmbeddingConfigurationError,
    EmbeddingError,
    EmbeddingResult,
)
from libs.embedding.gemini_embedding import GeminiEmbedding, resolve_google_api_key
from libs.embedding.ollama_embedding import OllamaEmbedding
from libs.embedding.openai_embedding import OpenAIEmbedding

OPENAI_URL = "https://api.openai.com/v1/embeddings"
GEMINI_URL = (
    "https://generativelanguage.googleapis.com/v1beta/models/"
    "text-embedding-004:batchEmbedContents"
)
OLLAMA_URL = "http://localhost:11434/api/embed"


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("OPENAI_API_KEY", "GOOGLE_API_KEY", "OLLAMA_BASE_URL"):
        monkeypatch.delenv(name, raising=False)


class TestOpenAIEmbedding:
    """Tests for the OpenAI embeddings client."""

    def test_missing_key_raises(self):
        with pytest.raises(EmbeddingConfigurationError):
            OpenAIEmbedding()

    def test_defaults(self):
        embedding = OpenAIEmbedding(api_key="sk-test")
        assert embedding.provider_name == "openai"
        assert embedding.dimensions == 1536

    @respx.mock
    def test_embed_orders_by_index(self):
        route = respx.post(OPENAI_URL).mock(
            return_value=httpx.Response(
                200,
                json={
                    "data": [
                        {"index": 1, "embedding": [0.0, 1.0]},
                        {"index": 0, "embedding": [1.0, 0.0]},
                    ],
                    "usage": {"prompt_tokens": 4, "total_tokens": 4},
                },
            )
        )

        result = OpenAIEmbedding(api_key="sk-test", dimensions=2).embed(["first", "second"])

        assert isinstance(result, EmbeddingResult)
        assert result.vectors == [[1.0, 0.0], [0.0, 1.0]]
        assert result.usage == {"prompt_tokens": 4, "total_tokens": 4}
        body = json.loads(route.calls[0].request.content)
        assert body == {"input": ["first", "second"], "model": "text-embedding-3-small", "dimensions": 2}

    def test_empty_input_makes_no_request(self):
        assert OpenAIEmbedding(api_key="sk-test").embed([]).vectors == []

    @respx.mock
    def test_vector_count_mismatch(self):
        respx.post(OPENAI_URL).mock(
            return_value=httpx.Response(200, json={"data": [{"index": 0, "embedding": [1.0]}]})
        )

        with pytest.raises(EmbeddingError, match="Expected 2 vectors"):
            OpenAIEmbedding(api_key="sk-test").embed(["a", "b"])

    @respx.mock
    def test_rate_limit(self):
        respx.post(OPENAI_URL).mock(
            return_value=httpx.Response(429, json={"error": {"message": "slow down"}})
        )

        with pytest.raises(EmbeddingError) as exc_info:
            OpenAIEmbedding(api_key="sk-test").embed(["a"])
        assert exc_info.value.kind is FailureKind.RATE_LIMITED
        assert RATE_LIMIT_HINT in str(exc_info.value)


class TestGeminiEmbedding:
    """Tests for the Gemini batchEmbedContents client."""

    def test_resolve_key_rejects_placeholder(self):
        assert resolve_google_api_key("your_gemini_api_key_here") is None
        assert resolve_google_api_key("real") == "real"

    def test_missing_key_raises(self):
        with pytest.raises(EmbeddingConfigurationError):
            GeminiEmbedding()

    @respx.mock
    def test_embed_batch(self):
        route = respx.post(GEMINI_URL).mock(
            return_value=httpx.Response(
                200,
                json={"embeddings": [{"values": [0.1, 0.2]}, {"values": [0.3, 0.4]}]},
            )
        )

        result = GeminiEmbedding(api_key="g-key", dimensions=2).embed(["one", "two"])

        assert result.vectors == [[0.1, 0.2], [0.3, 0.4]]
        request = route.calls[0].request
        assert request.headers["x-goog-api-key"] == "g-key"
        body = json.loads(request.content)
        assert body["requests"][1] == {
            "model": "models/text-embedding-004",
            "content": {"parts": [{"text": "two"}]},
            "outputDimensionality": 2,
        }

    @respx.mock
    def test_embed_single_empty_string(self):
        respx.post(GEMINI_URL).mock(
            return_value=httpx.Response(200, json={"embeddings": [{"values": [0.5, 0.5]}]})
        )

        assert GeminiEmbedding(api_key="g-key").embed_single("") == [0.5, 0.5]

    @respx.mock
    def test_invalid_key(self):
        respx.post(GEMINI_URL).mock(
            return_value=httpx.Response(400, json={"error": {"message": "API key not valid"}})
        )

        with pytest.raises(EmbeddingError) as exc_info:
            GeminiEmbedding(api_key="g-key").embed(["a"])
        assert exc_info.value.code == 400
        assert "API key not valid" in str(exc_info.value)

    @respx.mock
    def test_timeout(self):
        respx.post(GEMINI_URL).mock(side_effect=httpx.ConnectTimeout("timed out"))

        with pytest.raises(EmbeddingError) as exc_info:
            GeminiEmbedding(api_key="g-key").embed(["a"])
        assert exc_info.value.kind is FailureKind.TIMEOUT


class TestOllamaEmbedding:
    """Tests for the Ollama /api/embed client."""

    def test_defaults(self):
        embedding = OllamaEmbedding(api_key="ignored")
        assert embedding.provider_name == "ollama"
        assert embedding.dimensions == 768

    @respx.mock
    def test_embed_with_truncation(self):
        route = respx.post(OLLAMA_URL).mock(
            return_value=httpx.Response(200, json={"embeddings": [[1.0, 2.0]]})
        )

        result = OllamaEmbedding(truncate_length=3).embed(["abcdef"])

        assert result.vectors == [[1.0, 2.0]]
        body = json.loads(route.calls[0].request.content)
        assert body == {"model": "nomic-embed-text", "input": ["abc"]}

    @respx.mock
    def test_unreachable(self):
        respx.post(OLLAMA_URL).mock(side_effect=httpx.ConnectError("refused"))

        with pytest.raises(EmbeddingError) as exc_info:
            OllamaEmbedding().embed(["a"])
        assert exc_info.value.kind is FailureKind.UNREACHABLE
