"""Conversation Memory - bounded log of chat turns.

Design Principles:
    - Degraded reads: read() never raises; on timeout or failure it returns []
    - Fire-and-forget writes: append() returns a Future and never raises to
      the caller; failures are only logged
    - Bounded: storage keeps max_stored_turns, prompts see window_turns

Usage:
    memory = ConversationMemory.from_settings(settings)
    history = memory.read()
    prompt_history = memory.render(history)
    memory.append(ConversationTurn(input=message, output=reply))
"""

import threading
from concurrent.futures import Future, ThreadPoolExecutor

from core.deadline import call_with_deadline
from core.settings import Settings
from core.types import ConversationTurn, MemoryMessage
from observability.logger import get_logger

logger = get_logger(__name__)


class ConversationMemory:
    """In-process conversation memory with windowing and truncation.

    Appends run on a single background worker, so they complete in arrival
    order. A read racing an append may or may not see it.

    Attributes:
        window_turns: Most recent turns used in a prompt
        max_message_chars: Per-message cap inside a prompt
        read_timeout: Default deadline for read()
        max_stored_turns: Turns kept before the oldest are dropped
    """

    def __init__(
        self,
        window_turns: int = 3,
        max_message_chars: int = 200,
        read_timeout: float = 5.0,
        max_stored_turns: int = 100,
        executor: ThreadPoolExecutor | None = None,
    ) -> None:
        if window_turns < 0:
            raise ValueError(f"window_turns must be non-negative, got {window_turns}")
        if max_stored_turns <= 0:
            raise ValueError(f"max_stored_turns must be positive, got {max_stored_turns}")

        self._window_turns = window_turns
        self._max_message_chars = max_message_chars
        self._read_timeout = read_timeout
        self._max_stored_turns = max_stored_turns

        self._turns: list[ConversationTurn] = []
        self._lock = threading.Lock()
        self._executor = executor or ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="memory-append"
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "ConversationMemory":
        config = settings.memory
        return cls(
            window_turns=config.window_turns,
            max_message_chars=config.max_message_chars,
            read_timeout=config.read_timeout,
            max_stored_turns=config.max_stored_turns,
        )

    @property
    def window_turns(self) -> int:
        return self._window_turns

    @property
    def max_message_chars(self) -> int:
        return self._max_message_chars

    def _snapshot(self) -> list[ConversationTurn]:
        with self._lock:
            return list(self._turns)

    def read(self, timeout: float | None = None) -> list[ConversationTurn]:
        """Return all stored turns, oldest first.

        Args:
            timeout: Deadline in seconds; read_timeout when None.

        Returns:
            The stored turns, or [] if the read times out or fails.
        """
        deadline = self._read_timeout if timeout is None else timeout
        try:
            return call_with_deadline(self._snapshot, deadline, operation="memory read")
        except Exception as e:
            logger.warning(f"Failed to load memory, using empty memory: {e}")
            return []

    def _store(self, turn: ConversationTurn) -> None:
        with self._lock:
            self._turns.append(turn)
            overflow = len(self._turns) - self._max_stored_turns
            if overflow > 0:
                del self._turns[:overflow]

    @staticmethod
    def _log_append_failure(future: Future) -> None:
        if future.cancelled():
            logger.warning("Memory append was cancelled")
            return
        error = future.exception()
        if error is not None:
            logger.warning(f"Failed to save memory: {error}")

    def append(self, turn: ConversationTurn) -> Future:
        """Schedule a turn to be stored and return immediately.

        Returns:
            Future of the background write. Its failure is logged; it is never
            raised to the caller of append().
        """
        try:
            future = self._executor.submit(self._store, turn)
        except RuntimeError as e:
            # Executor already shut down
            logger.warning(f"Failed to save memory: {e}")
            future = Future()
            future.set_exception(e)
            return future
        future.add_done_callback(self._log_append_failure)
        return future

    def clear(self) -> None:
        """Remove every stored turn."""
        with self._lock:
            self._turns.clear()
        logger.info("Conversation memory cleared")

    def _truncate(self, text: str) -> str:
        return text[:self._max_message_chars]

    def window(self, turns: list[ConversationTurn]) -> list[ConversationTurn]:
        """Most recent window_turns turns, each side cut to max_message_chars."""
        if self._window_turns == 0:
            return []
        recent = turns[-self._window_turns:]
        return [
            ConversationTurn(input=self._truncate(t.input), output=self._truncate(t.output))
            for t in recent
        ]

    def render(self, turns: list[ConversationTurn]) -> str:
        """Format the windowed turns as "User: ..." / "Assistant: ..." lines.

        Returns an empty string when there is no history.
        """
        lines: list[str] = []
        for turn in self.window(turns):
            lines.append(f"User: {turn.input}")
            lines.append(f"Assistant: {turn.output}")
        return "\n".join(lines)

    def messages(self) -> list[MemoryMessage]:
        """Stored history as alternating human/ai messages, 1-based."""
        result: list[MemoryMessage] = []
        for turn in self._snapshot():
            result.append(MemoryMessage(index=len(result) + 1, type="human", content=turn.input))
            result.append(MemoryMessage(index=len(result) + 1, type="ai", content=turn.output))
        return result

    def close(self) -> None:
        """Finish pending appends and stop the background worker."""
        self._executor.shutdown(wait=True)

    def __len__(self) -> int:
        with self._lock:
            return len(self._turns)
