"""
Pytest configuration and shared fixtures for the retrieval core test suite.

This module provides common fixtures used across unit and integration tests:
settings objects, a deterministic embedding and a scripted LLM.
"""

import hashlib
import re
import sys
import threading
from pathlib import Path
from typing import Any, Callable

import pytest

# Add the project root and src directories to the Python path
PROJECT_ROOT = Path(__file__).parent.parent
SRC_ROOT = PROJECT_ROOT / "src"

for path in [str(SRC_ROOT), str(PROJECT_ROOT)]:
    if path not in sys.path:
        sys.path.insert(0, path)

from core.settings import Settings  # noqa: E402
from core.trace.trace_context import TraceContext  # noqa: E402
from libs.embedding.base_embedding import BaseEmbedding, EmbeddingResult  # noqa: E402
from libs.llm.base_llm import BaseLLM, ChatMessage, LLMResponse  # noqa: E402


class HashEmbedding(BaseEmbedding):
    """Deterministic bag-of-words embedding.

    Each lowercase word is hashed into one of `dimensions` buckets, so texts
    sharing words have a high cosine similarity. The empty string maps to a
    constant non-zero vector.
    """

    def __init__(self, dimensions: int = 64) -> None:
        self._dimensions = dimensions
        self.calls: list[list[str]] = []
        self.fail_with: Exception | None = None

    @property
    def provider_name(self) -> str:
        return "hash"

    def vector_for(self, text: str) -> list[float]:
        vector = [0.0] * self._dimensions
        words = re.findall(r"\w+", text.lower())
        if not words:
            vector[0] = 1.0
            return vector
        for word in words:
            bucket = int(hashlib.md5(word.encode("utf-8")).hexdigest(), 16) % self._dimensions
            vector[bucket] += 1.0
        return vector

    def embed(
        self,
        texts: list[str],
        trace: TraceContext | None = None,
        **kwargs: Any,
    ) -> EmbeddingResult:
        self.calls.append(list(texts))
        if self.fail_with is not None:
            raise self.fail_with
        return EmbeddingResult(vectors=[self.vector_for(text) for text in texts])


class ScriptedLLM(BaseLLM):
    """LLM that records prompts and answers from a script.

    `reply` may be a string or a callable taking the prompt. `errors` are
    raised, in order, before any reply is returned.
    """

    def __init__(
        self,
        reply: str | Callable[[str], str] = "scripted answer",
        errors: list[Exception] | None = None,
        delay: float = 0.0,
    ) -> None:
        self.reply = reply
        self.errors = list(errors or [])
        self.delay = delay
        self.prompts: list[str] = []
        self._released = threading.Event()

    @property
    def provider_name(self) -> str:
        return "scripted"

    def release(self) -> None:
        """Unblock calls sleeping on `delay`."""
        self._released.set()

    def chat(
        self,
        messages: list[ChatMessage],
        trace: TraceContext | None = None,
        **kwargs: Any,
    ) -> LLMResponse:
        prompt = messages[-1].content
        self.prompts.append(prompt)
        if self.errors:
            raise self.errors.pop(0)
        if self.delay:
            self._released.wait(self.delay)
        content = self.reply(prompt) if callable(self.reply) else self.reply
        return LLMResponse(content=content)


@pytest.fixture(scope="session")
def project_root() -> Path:
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture(scope="session")
def config_path(project_root: Path) -> Path:
    """Return the path to the config directory."""
    return project_root / "config"


@pytest.fixture
def settings() -> Settings:
    """Settings with small chunks and short deadlines for fast tests."""
    settings = Settings()
    settings.llm.provider = "scripted"
    settings.llm.model = "scripted-model"
    settings.llm.generation_timeout = 5.0
    settings.llm.retry_backoff_seconds = 0.0
    settings.embedding.provider = "hash"
    settings.embedding.call_timeout = 5.0
    settings.ingestion.chunk_size = 200
    settings.ingestion.chunk_overlap = 40
    settings.memory.read_timeout = 2.0
    settings.chat.deadline_seconds = 5.0
    settings.observability.trace_enabled = True
    return settings


@pytest.fixture
def hash_embedding() -> HashEmbedding:
    return HashEmbedding()


@pytest.fixture
def scripted_llm() -> ScriptedLLM:
    return ScriptedLLM()


@pytest.fixture
def make_llm() -> Callable[..., ScriptedLLM]:
    """Factory fixture building ScriptedLLM instances with custom scripts."""
    created: list[ScriptedLLM] = []

    def _make(**kwargs: Any) -> ScriptedLLM:
        llm = ScriptedLLM(**kwargs)
        created.append(llm)
        return llm

    yield _make
    for llm in created:
        llm.release()
