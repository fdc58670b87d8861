"""Call-with-deadline primitive.

Every externally bound call (embedding, generation, memory read) goes through
call_with_deadline(). The call runs on a shared worker pool; if it has not
finished when the deadline passes, DeadlineExceeded is raised and the late
result is discarded, never awaited.

A worker stays busy until an abandoned call returns on its own, so the
underlying HTTP clients keep their own transport timeouts as well.
"""

import atexit
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import Any, Callable, TypeVar

from observability.logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

# Workers shared by all deadline-guarded calls in the process
DEFAULT_MAX_WORKERS = 16

_executor: ThreadPoolExecutor | None = None
_executor_lock = threading.Lock()


class DeadlineExceeded(TimeoutError):
    """Raised when a guarded call does not finish before its deadline."""

    def __init__(self, operation: str, timeout: float) -> None:
        super().__init__(f"{operation} did not complete within {timeout:.1f}s")
        self.operation = operation
        self.timeout = timeout


def get_executor() -> ThreadPoolExecutor:
    """Return the process-wide worker pool, creating it on first use."""
    global _executor
    with _executor_lock:
        if _executor is None:
            _executor = ThreadPoolExecutor(
                max_workers=DEFAULT_MAX_WORKERS,
                thread_name_prefix="rag-deadline",
            )
        return _executor


@atexit.register
def _shutdown_executor() -> None:
    with _executor_lock:
        if _executor is not None:
            _executor.shutdown(wait=False, cancel_futures=True)


def _discard_late_result(operation: str) -> Callable[[Future], None]:
    def _callback(future: Future) -> None:
        if future.cancelled():
            return
        error = future.exception()
        if error is not None:
            logger.warning(f"Late failure of abandoned call '{operation}': {error}")
        else:
            logger.info(f"Discarded late result of abandoned call '{operation}'")

    return _callback


def call_with_deadline(
    fn: Callable[..., T],
    timeout: float | None,
    *args: Any,
    operation: str | None = None,
    executor: ThreadPoolExecutor | None = None,
    **kwargs: Any,
) -> T:
    """Run fn(*args, **kwargs) and return its result within a deadline.

    Exceptions raised by fn propagate unchanged.

    Args:
        fn: Callable to run.
        timeout: Deadline in seconds. None or <= 0 calls fn inline with no deadline.
        *args: Positional arguments for fn.
        operation: Name used in the DeadlineExceeded message and logs.
        executor: Optional worker pool; defaults to the shared pool.
        **kwargs: Keyword arguments for fn.

    Returns:
        Whatever fn returns.

    Raises:
        DeadlineExceeded: If fn is still running when the deadline passes.

    Example:
        >>> text = call_with_deadline(llm.generate, 55.0, prompt, operation="chat")
    """
    name = operation or getattr(fn, "__qualname__", repr(fn))

    if timeout is None or timeout <= 0:
        return fn(*args, **kwargs)

    future = (executor or get_executor()).submit(fn, *args, **kwargs)
    try:
        return future.result(timeout=timeout)
    except FutureTimeoutError:
        # fn itself raised a TimeoutError (e.g. a nested deadline)
        if future.done():
            raise
        # A call that already started cannot be cancelled; its outcome is only logged
        if not future.cancel():
            future.add_done_callback(_discard_late_result(name))
        logger.warning(f"Deadline of {timeout:.1f}s exceeded for '{name}'")
        raise DeadlineExceeded(name, timeout) from None
