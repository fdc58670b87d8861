"""Core data types for ingestion, retrieval and chat.

This module defines the shared data structures used across the retrieval
core: from document ingestion through search results to conversation turns.

Design Principles:
    - Serializable: All types can be converted to dict/JSON
    - Immutable: Core types use frozen dataclasses
    - Extensible: metadata allows incremental field addition
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any


@dataclass(frozen=True)
class Document:
    """Raw document entity.

    Represents a document before chunking, either extracted from a file by a
    loader or passed in as raw text.

    Attributes:
        id: Unique identifier for the document
        text: Raw text content of the document
        metadata: Document-level metadata (source and type at minimum)
    """
    id: str
    text: str
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "id": self.id,
            "text": self.text,
            "metadata": dict(self.metadata),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Document":
        """Create from dictionary."""
        return cls(
            id=data["id"],
            text=data["text"],
            metadata=data.get("metadata", {}),
        )


@dataclass(frozen=True)
class Chunk:
    """A bounded contiguous slice of a document, the unit of retrieval.

    Attributes:
        id: Stable identifier (`{doc_id}_{index:04d}_{hash8}`)
        text: Text content of this chunk
        metadata: Source metadata; always holds 'source', 'type', 'chunk_index'
        source_ref: ID of the parent Document
    """
    id: str
    text: str
    metadata: dict[str, Any] = field(default_factory=dict)
    source_ref: str | None = None

    @property
    def source(self) -> str | None:
        """Source document identifier."""
        return self.metadata.get("source")

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "id": self.id,
            "text": self.text,
            "metadata": dict(self.metadata),
            "source_ref": self.source_ref,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Chunk":
        """Create from dictionary."""
        return cls(
            id=data["id"],
            text=data["text"],
            metadata=data.get("metadata", {}),
            source_ref=data.get("source_ref"),
        )


@dataclass(frozen=True)
class IndexedVector:
    """A chunk vector owned by a vector index.

    Attributes:
        id: Insertion handle, monotonically increasing within one index
        vector: The embedding vector
        chunk: The chunk the vector was computed from
    """
    id: int
    vector: tuple[float, ...]
    chunk: Chunk


@dataclass(frozen=True)
class SearchHit:
    """One ranked result of a nearest-neighbour search.

    Attributes:
        chunk: The matched chunk
        score: Cosine similarity to the query (higher is closer)
        vector_id: IndexedVector.id of the match, i.e. its storage position
    """
    chunk: Chunk
    score: float
    vector_id: int


@dataclass(frozen=True)
class Provenance:
    """Information about the parsed file behind the current corpus.

    Attributes:
        filename: Original file name
        pages: Page count, when the extractor reports one
        text_length: Characters of extracted text
        ingested_at: ISO-8601 UTC timestamp of ingestion
    """
    filename: str
    pages: int | None
    text_length: int
    ingested_at: str

    @classmethod
    def now(cls, filename: str, pages: int | None, text_length: int) -> "Provenance":
        """Create provenance stamped with the current UTC time."""
        return cls(
            filename=filename,
            pages=pages,
            text_length=text_length,
            ingested_at=datetime.now(timezone.utc).isoformat(),
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "filename": self.filename,
            "pages": self.pages,
            "text_length": self.text_length,
            "ingested_at": self.ingested_at,
        }


@dataclass(frozen=True)
class ConversationTurn:
    """One exchange of the chat mode.

    Attributes:
        input: The user's message
        output: The assistant's reply
    """
    input: str
    output: str


@dataclass(frozen=True)
class MemoryMessage:
    """One message of the conversation memory, for inspection.

    Attributes:
        index: 1-based position in the message history
        type: 'human' or 'ai'
        content: Message text
    """
    index: int
    type: str
    content: str


@dataclass(frozen=True)
class IngestResult:
    """Outcome of an ingest call.

    Attributes:
        document_count: Documents ingested
        chunk_count: Chunks indexed in the new corpus
        provenance: File information when the source was a parsed file
        preview: Leading text of a single ingested document
    """
    document_count: int
    chunk_count: int
    provenance: Provenance | None = None
    preview: str | None = None


@dataclass(frozen=True)
class AnswerResult:
    """Outcome of a question answered from the corpus.

    Attributes:
        answer: Generated answer
        sources: Number of fragments used as context
        provenance: File information of the current corpus, if any
    """
    answer: str
    sources: int
    provenance: Provenance | None = None


@dataclass(frozen=True)
class SummaryResult:
    """Outcome of a whole-corpus summary.

    Attributes:
        summary: Generated summary
        fragment_count: Chunks that contributed to the prompt
        provenance: File information of the current corpus, if any
    """
    summary: str
    fragment_count: int
    provenance: Provenance | None = None
