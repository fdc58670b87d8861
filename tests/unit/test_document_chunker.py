"""Unit tests for DocumentChunker.

Design Principles:
    - Contract Testing: Chunk ids, metadata inheritance and ordering
    - Mock-based: Splitter failures are simulated with MagicMock
"""

from unittest.mock import MagicMock

import pytest

from core.settings import Settings
from core.types import Chunk, Document
from ingestion.chunking.document_chunker import DocumentChunker, DocumentChunkingError
from libs.splitter.base_splitter import SplitResult, SplitterError
from libs.splitter.recursive_splitter import RecursiveSplitter


@pytest.fixture
def chunker() -> DocumentChunker:
    return DocumentChunker(splitter=RecursiveSplitter(chunk_size=100, chunk_overlap=20))


class TestDocumentChunker:
    """Tests for Document -> Chunk conversion."""

    def test_requires_settings_or_splitter(self):
        with pytest.raises(ValueError):
            DocumentChunker()

    def test_creates_splitter_from_settings(self):
        settings = Settings()
        settings.ingestion.chunk_size = 300
        settings.ingestion.chunk_overlap = 30

        chunker = DocumentChunker(settings)

        assert chunker.splitter.chunk_size == 300
        assert chunker.splitter.chunk_overlap == 30

    def test_chunk_ids_are_stable_and_ordered(self, chunker):
        doc = Document(id="doc-1", text="word " * 100, metadata={"source": "a", "type": "raw"})

        first = chunker.split_document(doc)
        second = chunker.split_document(doc)

        assert [c.id for c in first] == [c.id for c in second]
        assert first[0].id.startswith("doc-1_0000_")
        assert first[1].id.startswith("doc-1_0001_")
        assert len(first[0].id.split("_")[-1]) == 8

    def test_metadata_is_inherited_with_chunk_index(self, chunker):
        doc = Document(id="doc-1", text="word " * 100, metadata={"source": "a.pdf", "type": "pdf"})

        chunks = chunker.split_document(doc)

        for index, chunk in enumerate(chunks):
            assert isinstance(chunk, Chunk)
            assert chunk.metadata["source"] == "a.pdf"
            assert chunk.metadata["type"] == "pdf"
            assert chunk.metadata["chunk_index"] == index
            assert chunk.source_ref == "doc-1"
        assert "chunk_index" not in doc.metadata

    def test_split_keeps_document_order(self, chunker):
        docs = [
            Document(id="first", text="alpha " * 50, metadata={"source": "1"}),
            Document(id="empty", text="", metadata={"source": "2"}),
            Document(id="second", text="beta " * 50, metadata={"source": "3"}),
        ]

        chunks = chunker.split(docs)
        refs = [c.source_ref for c in chunks]

        assert "empty" not in refs
        assert refs == ["first"] * refs.count("first") + ["second"] * refs.count("second")
        assert refs.count("first") > 1

    def test_splitter_error_is_wrapped(self):
        splitter = MagicMock()
        splitter.split_text.side_effect = SplitterError("boom", provider="mock")
        chunker = DocumentChunker(splitter=splitter)

        with pytest.raises(DocumentChunkingError) as exc_info:
            chunker.split_document(Document(id="d", text="text"))
        assert "d" in str(exc_info.value)
        assert isinstance(exc_info.value.__cause__, SplitterError)

    def test_uses_splitter_output_verbatim(self):
        splitter = MagicMock()
        splitter.split_text.return_value = SplitResult(chunks=["one", "two"])
        chunker = DocumentChunker(splitter=splitter)

        chunks = chunker.split_document(Document(id="d", text="ignored"))

        assert [c.text for c in chunks] == ["one", "two"]
