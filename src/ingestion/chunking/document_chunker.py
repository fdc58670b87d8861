"""Document Chunker - Adapter between libs.splitter and the ingest path.

Design Principles:
    - Adapter Pattern: Wraps libs.splitter for ingestion use
    - Deterministic: Chunk IDs are stable across runs
    - Metadata Inheritance: Chunks inherit document metadata
    - Traceable: Chunks reference their parent document

Core Responsibilities:
    1. Generate stable Chunk IDs: `{doc_id}_{index:04d}_{hash_8chars}`
    2. Inherit Document.metadata to each Chunk
    3. Add chunk_index for ordering
    4. Set source_ref to parent Document.id
"""

import hashlib
from typing import Any

from core.settings import Settings
from core.types import Chunk, Document
from libs.splitter.base_splitter import BaseSplitter, SplitterError
from libs.splitter.splitter_factory import SplitterFactory
from observability.logger import get_logger

logger = get_logger(__name__)


class DocumentChunkingError(Exception):
    """Error during document chunking."""

    pass


class DocumentChunker:
    """Adapter that converts Document objects to Chunk objects.

    Example:
        >>> chunker = DocumentChunker(settings)
        >>> doc = Document(id="doc-1", text="Long text...", metadata={"source": "a"})
        >>> chunks = chunker.split([doc])
    """

    def __init__(
        self,
        settings: Settings | None = None,
        splitter: BaseSplitter | None = None,
    ) -> None:
        """Initialize the DocumentChunker.

        Args:
            settings: Settings used to create a splitter when none is given.
            splitter: Optional splitter instance.

        Raises:
            ValueError: If neither settings nor splitter is given.
        """
        if splitter is None:
            if settings is None:
                raise ValueError("DocumentChunker needs settings or a splitter")
            splitter = SplitterFactory.create(settings)
        self._splitter = splitter

    @property
    def splitter(self) -> BaseSplitter:
        """Get the underlying splitter instance."""
        return self._splitter

    def split(self, documents: list[Document]) -> list[Chunk]:
        """Split documents into chunks, documents in input order.

        Args:
            documents: Documents to split.

        Returns:
            Chunks of the first document, then the second, and so on.

        Raises:
            DocumentChunkingError: If splitting fails.
        """
        chunks: list[Chunk] = []
        for document in documents:
            chunks.extend(self.split_document(document))
        return chunks

    def split_document(self, document: Document) -> list[Chunk]:
        """Split a Document into Chunks with metadata and IDs.

        Args:
            document: The Document to split.

        Returns:
            List of Chunk objects with inherited metadata and stable IDs.

        Raises:
            DocumentChunkingError: If splitting fails.
        """
        try:
            text_chunks = self._splitter.split_text(document.text).chunks
        except SplitterError as e:
            raise DocumentChunkingError(
                f"Failed to split document {document.id}: {e}"
            ) from e

        chunks = [
            Chunk(
                id=self._generate_chunk_id(document.id, index, text_chunk),
                text=text_chunk,
                metadata=self._inherit_metadata(document, index),
                source_ref=document.id,
            )
            for index, text_chunk in enumerate(text_chunks)
        ]

        logger.debug(f"Created {len(chunks)} chunks for document {document.id}")
        return chunks

    def _generate_chunk_id(self, doc_id: str, index: int, text_chunk: str) -> str:
        """Generate a deterministic chunk ID: `{doc_id}_{index:04d}_{hash_8chars}`."""
        content_hash = hashlib.md5(text_chunk.encode("utf-8")).hexdigest()[:8]
        return f"{doc_id}_{index:04d}_{content_hash}"

    def _inherit_metadata(self, document: Document, chunk_index: int) -> dict[str, Any]:
        inherited: dict[str, Any] = dict(document.metadata)
        inherited["chunk_index"] = chunk_index
        return inherited
