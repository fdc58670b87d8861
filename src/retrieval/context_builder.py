"""Assembly of bounded prompt content from retrieved chunks."""

from typing import Sequence

from core.types import Chunk

FRAGMENT_SEPARATOR = "\n\n"


def build_context(chunks: Sequence[Chunk], max_chars: int) -> tuple[str, int]:
    """Join chunks as numbered fragments, bounded to max_chars.

    Each chunk becomes "[Fragment i]\\n<text>" (1-based). Fragments are added
    in order while they fit; the first fragment is cut to max_chars when it
    alone is too long, so a non-empty input always yields some context.

    Args:
        chunks: Chunks in rank order.
        max_chars: Upper bound on the returned string length.

    Returns:
        (context, number of fragments included)
    """
    blocks: list[str] = []
    length = 0
    for position, chunk in enumerate(chunks, start=1):
        block = f"[Fragment {position}]\n{chunk.text}"
        added = len(block) + (len(FRAGMENT_SEPARATOR) if blocks else 0)
        if length + added > max_chars:
            if not blocks:
                blocks.append(block[:max_chars])
            break
        blocks.append(block)
        length += added
    return FRAGMENT_SEPARATOR.join(blocks), len(blocks)


def build_summary_content(chunks: Sequence[Chunk], max_chars: int) -> tuple[str, int]:
    """Join chunk texts with blank lines and cut the result to max_chars.

    Returns:
        (content, number of chunks that contributed at least one character)
    """
    text = FRAGMENT_SEPARATOR.join(chunk.text for chunk in chunks)
    content = text[:max_chars]

    contributing = 0
    offset = 0
    for chunk in chunks:
        if offset >= len(content):
            break
        contributing += 1
        offset += len(chunk.text) + len(FRAGMENT_SEPARATOR)
    return content, contributing
