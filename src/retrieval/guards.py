"""Deadline and retry guards around the embedding and generation providers.

Every provider call made by the retrieval core goes through these wrappers:
the call runs under call_with_deadline(), an expired deadline is reported as
a classified timeout, and a rate-limited generation is retried a bounded
number of times.
"""

import time
from typing import Any, Callable

from core.deadline import DeadlineExceeded, call_with_deadline
from core.failures import FailureKind
from core.trace.trace_context import TraceContext
from libs.embedding.base_embedding import BaseEmbedding, EmbeddingError, EmbeddingResult
from libs.llm.base_llm import BaseLLM, LLMError, LLMTimeoutError
from observability.logger import get_logger

logger = get_logger(__name__)


class GuardedEmbedder(BaseEmbedding):
    """BaseEmbedding decorator that bounds every embed() call by a deadline.

    Attributes:
        inner: The wrapped embedding provider
        timeout: Deadline per embed() call in seconds
    """

    def __init__(self, embedding: BaseEmbedding, timeout: float | None) -> None:
        self._inner = embedding
        self._timeout = timeout

    @property
    def provider_name(self) -> str:
        return self._inner.provider_name

    @property
    def inner(self) -> BaseEmbedding:
        return self._inner

    def embed(
        self,
        texts: list[str],
        trace: TraceContext | None = None,
        **kwargs: Any
    ) -> EmbeddingResult:
        """Embed texts, failing with a TIMEOUT EmbeddingError past the deadline."""
        try:
            return call_with_deadline(
                self._inner.embed,
                self._timeout,
                texts,
                operation=f"{self.provider_name} embedding",
                **kwargs,
            )
        except DeadlineExceeded as e:
            raise EmbeddingError(
                f"{self.provider_name} embedding did not complete within {e.timeout:.0f}s",
                provider=self.provider_name,
                kind=FailureKind.TIMEOUT,
                details={"text_count": len(texts)},
            ) from e


class GuardedGenerator:
    """Deadline-bounded generation with a bounded retry on rate limits.

    Only RATE_LIMITED failures are retried; everything else propagates on
    the first attempt. The deadline covers the whole call, retries and
    backoff included, and each attempt occupies a single pool worker.

    Example:
        >>> generator = GuardedGenerator(llm, timeout=60, rate_limit_retries=1)
        >>> text = generator.generate(prompt, operation="answer")
    """

    def __init__(
        self,
        llm: BaseLLM,
        timeout: float | None,
        rate_limit_retries: int = 1,
        retry_backoff_seconds: float = 2.0,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._llm = llm
        self._timeout = timeout
        self._rate_limit_retries = max(0, rate_limit_retries)
        self._retry_backoff_seconds = retry_backoff_seconds
        self._sleep = sleep
        self._clock = clock

    @property
    def llm(self) -> BaseLLM:
        return self._llm

    @property
    def provider_name(self) -> str:
        return self._llm.provider_name

    def _timeout_error(self, operation: str, deadline: float) -> LLMTimeoutError:
        return LLMTimeoutError(
            f"{self.provider_name} {operation} did not complete "
            f"within {deadline:.0f}s",
            provider=self.provider_name,
            details={"operation": operation, "timeout": deadline},
        )

    def generate(
        self,
        prompt: str,
        timeout: float | None = None,
        operation: str = "generation",
    ) -> str:
        """Generate text for a prompt.

        Args:
            prompt: The full prompt.
            timeout: Deadline override in seconds; the configured one otherwise.
            operation: Name used in logs and timeout messages.

        Raises:
            LLMTimeoutError: If the deadline passes first.
            LLMError: Any other provider failure, after retries for rate limits.
        """
        deadline = timeout if timeout is not None else self._timeout
        bounded = deadline is not None and deadline > 0
        attempts = 1 + self._rate_limit_retries
        started = self._clock()

        attempt = 1
        while True:
            remaining = deadline
            if bounded:
                remaining = deadline - (self._clock() - started)
                if remaining <= 0:
                    raise self._timeout_error(operation, deadline)
            try:
                return call_with_deadline(
                    self._llm.generate, remaining, prompt, operation=operation
                )
            except DeadlineExceeded as e:
                raise self._timeout_error(operation, deadline) from e
            except LLMError as e:
                if e.kind is not FailureKind.RATE_LIMITED or attempt == attempts:
                    raise
                logger.warning(
                    f"{operation} rate limited (attempt {attempt}/{attempts}), "
                    f"retrying in {self._retry_backoff_seconds:.1f}s"
                )
                self._sleep(self._retry_backoff_seconds)
                attempt += 1
