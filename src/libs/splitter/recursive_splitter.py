"""Recursive Character Text Splitter implementation.

Splits text on the coarsest separator that yields pieces no longer than
chunk_size, descending to finer separators only for pieces that are still
too long, then merges adjacent pieces into chunks with a fixed overlap.

Design Principles:
    - Recursive splitting: Try separators from coarse to fine
    - Bounded: No emitted chunk exceeds chunk_size
    - Configurable: chunk_size and chunk_overlap control splitting behavior
"""

from libs.splitter.base_splitter import (
    BaseSplitter,
    SplitResult,
    SplitterConfigurationError,
    SplitterError,
)
from core.trace.trace_context import TraceContext
from observability.logger import get_logger

logger = get_logger(__name__)


class RecursiveSplitter(BaseSplitter):
    """Recursive Character Text Splitter.

    Separator priority is paragraph break, line break, sentence end, space,
    and finally the empty separator, which cuts between characters. Text
    without any separator therefore falls back to fixed-width windows of
    chunk_size characters, each starting chunk_size - chunk_overlap after the
    previous one.

    Attributes:
        chunk_size: Maximum size of each chunk in characters
        chunk_overlap: Overlap between consecutive chunks
        separators: Separators to try, in priority order
    """

    DEFAULT_CHUNK_SIZE = 1000
    DEFAULT_CHUNK_OVERLAP = 200
    DEFAULT_SEPARATORS: tuple[str, ...] = ("\n\n", "\n", ". ", " ", "")

    def __init__(
        self,
        chunk_size: int | None = None,
        chunk_overlap: int | None = None,
        separators: list[str] | None = None,
    ) -> None:
        """Initialize the RecursiveSplitter.

        Args:
            chunk_size: Maximum chunk size in characters. Defaults to 1000.
            chunk_overlap: Overlap between chunks. Defaults to 200.
            separators: Custom separators (in priority order). An empty
                string is appended when missing so every text can be split.

        Raises:
            SplitterConfigurationError: If chunk_size <= 0, chunk_overlap < 0
                or chunk_overlap >= chunk_size.
        """
        if chunk_size is not None and chunk_size <= 0:
            raise SplitterConfigurationError(
                f"chunk_size must be positive, got {chunk_size}",
                provider="recursive"
            )

        if chunk_overlap is not None and chunk_overlap < 0:
            raise SplitterConfigurationError(
                f"chunk_overlap must be non-negative, got {chunk_overlap}",
                provider="recursive"
            )

        self._chunk_size = chunk_size if chunk_size is not None else self.DEFAULT_CHUNK_SIZE
        self._chunk_overlap = (
            chunk_overlap if chunk_overlap is not None else self.DEFAULT_CHUNK_OVERLAP
        )

        if self._chunk_overlap >= self._chunk_size:
            raise SplitterConfigurationError(
                f"chunk_overlap ({self._chunk_overlap}) must be less than "
                f"chunk_size ({self._chunk_size})",
                provider="recursive"
            )

        seps = list(separators) if separators else list(self.DEFAULT_SEPARATORS)
        if "" not in seps:
            seps.append("")
        self._separators = seps

    @property
    def provider_name(self) -> str:
        return "recursive"

    @property
    def chunk_size(self) -> int:
        return self._chunk_size

    @property
    def chunk_overlap(self) -> int:
        return self._chunk_overlap

    @property
    def separators(self) -> list[str]:
        return list(self._separators)

    @staticmethod
    def _split_keeping_separator(text: str, separator: str) -> list[str]:
        """Split text, leaving each separator attached to the piece before it."""
        if not separator:
            return list(text)
        parts = text.split(separator)
        pieces = [part + separator for part in parts[:-1]] + [parts[-1]]
        return [piece for piece in pieces if piece]

    def _merge_pieces(self, pieces: list[str]) -> list[str]:
        """Greedily pack pieces into chunks, carrying chunk_overlap characters forward.

        After a chunk is emitted, pieces are dropped from its front until at
        most chunk_overlap characters remain and the next piece fits.
        """
        chunks: list[str] = []
        window: list[str] = []
        total = 0

        for piece in pieces:
            length = len(piece)
            if window and total + length > self._chunk_size:
                chunks.append("".join(window))
                while window and (
                    total > self._chunk_overlap
                    or total + length > self._chunk_size
                ):
                    total -= len(window.pop(0))
            window.append(piece)
            total += length

        if window:
            chunks.append("".join(window))
        return chunks

    def _split_recursive(self, text: str, separators: list[str]) -> list[str]:
        # Coarsest separator present in the text; "" always matches
        separator = separators[-1]
        finer: list[str] = []
        for i, candidate in enumerate(separators):
            if candidate == "" or candidate in text:
                separator = candidate
                finer = separators[i + 1:]
                break

        chunks: list[str] = []
        fitting: list[str] = []
        for piece in self._split_keeping_separator(text, separator):
            if len(piece) <= self._chunk_size:
                fitting.append(piece)
                continue
            if fitting:
                chunks.extend(self._merge_pieces(fitting))
                fitting = []
            chunks.extend(self._split_recursive(piece, finer))

        if fitting:
            chunks.extend(self._merge_pieces(fitting))
        return chunks

    def split_text(
        self,
        text: str,
        trace: TraceContext | None = None,
    ) -> SplitResult:
        """Split a single text into ordered chunks.

        Chunks are right-stripped; chunks that are empty after stripping are
        dropped. Empty input yields an empty result.

        Args:
            text: The text to split.
            trace: Tracing context for observability.

        Returns:
            SplitResult containing list of chunks.

        Raises:
            SplitterError: If splitting fails.
        """
        if not text:
            return SplitResult(chunks=[], metadata={"chunk_count": 0})

        logger.debug(
            f"Recursive splitter: text_length={len(text)}, "
            f"chunk_size={self._chunk_size}, overlap={self._chunk_overlap}"
        )

        try:
            if len(text) <= self._chunk_size:
                raw_chunks = [text]
            else:
                raw_chunks = self._split_recursive(text, self._separators)
        except RecursionError as e:
            raise SplitterError(
                f"Failed to split text: {e}",
                provider=self.provider_name,
                details={"text_length": len(text)}
            ) from e

        chunks = [chunk.rstrip() for chunk in raw_chunks]
        chunks = [chunk for chunk in chunks if chunk.strip()]

        if trace:
            trace.record_stage(
                "text_splitting",
                {
                    "provider": self.provider_name,
                    "text_length": len(text),
                    "chunk_count": len(chunks),
                }
            )

        return SplitResult(
            chunks=chunks,
            metadata={
                "chunk_count": len(chunks),
                "chunk_size": self._chunk_size,
                "chunk_overlap": self._chunk_overlap,
            }
        )

    def __repr__(self) -> str:
        return (
            f"RecursiveSplitter("
            f"chunk_size={self._chunk_size}, "
            f"chunk_overlap={self._chunk_overlap})"
        )
