"""Tests for RecursiveSplitter.

This module contains unit tests for RecursiveSplitter.
Tests cover window sizing, overlap, separator preference and edge cases.
"""

import math

import pytest

from core.trace.trace_context import TraceContext
from libs.splitter.base_splitter import SplitResult, SplitterConfigurationError
from libs.splitter.recursive_splitter import RecursiveSplitter


class TestRecursiveSplitterConfiguration:
    """Tests for construction and validation."""

    def test_initialization_default(self):
        """Test initialization with default values."""
        splitter = RecursiveSplitter()

        assert splitter.provider_name == "recursive"
        assert splitter.chunk_size == 1000
        assert splitter.chunk_overlap == 200
        assert splitter.separators == ["\n\n", "\n", ". ", " ", ""]

    def test_initialization_custom(self):
        """Test initialization with custom parameters."""
        splitter = RecursiveSplitter(chunk_size=500, chunk_overlap=50)

        assert splitter.chunk_size == 500
        assert splitter.chunk_overlap == 50

    def test_custom_separators_get_character_fallback(self):
        splitter = RecursiveSplitter(chunk_size=10, chunk_overlap=0, separators=["|"])
        assert splitter.separators == ["|", ""]

    def test_initialization_invalid_chunk_size(self):
        """Test initialization fails with invalid chunk_size."""
        with pytest.raises(SplitterConfigurationError):
            RecursiveSplitter(chunk_size=0, chunk_overlap=0)

        with pytest.raises(SplitterConfigurationError):
            RecursiveSplitter(chunk_size=-100, chunk_overlap=0)

    def test_initialization_invalid_overlap(self):
        """Test initialization fails with negative chunk_overlap."""
        with pytest.raises(SplitterConfigurationError):
            RecursiveSplitter(chunk_overlap=-1)

    @pytest.mark.parametrize("overlap", [100, 150])
    def test_overlap_not_smaller_than_size_rejected(self, overlap):
        """Test initialization fails when overlap >= chunk_size."""
        with pytest.raises(SplitterConfigurationError) as exc_info:
            RecursiveSplitter(chunk_size=100, chunk_overlap=overlap)
        assert exc_info.value.provider == "recursive"


class TestRecursiveSplitterSplitting:
    """Tests for split_text behavior."""

    def test_split_empty_text(self):
        """Test splitting empty text."""
        splitter = RecursiveSplitter()
        result = splitter.split_text("")

        assert isinstance(result, SplitResult)
        assert result.chunks == []

    def test_whitespace_only_text_yields_no_chunks(self):
        splitter = RecursiveSplitter(chunk_size=10, chunk_overlap=2)
        assert splitter.split_text("   \n\n   \n").chunks == []

    def test_split_short_text(self):
        """Test splitting text smaller than chunk_size."""
        splitter = RecursiveSplitter(chunk_size=1000)
        result = splitter.split_text("This is a short text.")

        assert result.chunks == ["This is a short text."]
        assert result.metadata["chunk_count"] == 1

    def test_text_of_exactly_chunk_size_is_one_chunk(self):
        splitter = RecursiveSplitter(chunk_size=1000, chunk_overlap=200)
        assert len(splitter.split_text("a" * 1000).chunks) == 1

    @pytest.mark.parametrize(
        "length,size,overlap",
        [(2500, 1000, 200), (1001, 1000, 200), (5000, 1000, 0), (777, 100, 30)],
    )
    def test_chunk_count_without_separators(self, length, size, overlap):
        """Separator-free text falls back to fixed-stride windows."""
        splitter = RecursiveSplitter(chunk_size=size, chunk_overlap=overlap)
        chunks = splitter.split_text("x" * length).chunks

        assert len(chunks) == math.ceil((length - overlap) / (size - overlap))
        assert all(len(chunk) <= size for chunk in chunks)

    def test_consecutive_windows_share_exact_overlap(self):
        text = "".join(chr(ord("a") + i % 26) for i in range(2500))
        splitter = RecursiveSplitter(chunk_size=1000, chunk_overlap=200)
        chunks = splitter.split_text(text).chunks

        assert chunks[0] == text[0:1000]
        assert chunks[1] == text[800:1800]
        assert chunks[2] == text[1600:2500]
        for previous, current in zip(chunks, chunks[1:]):
            assert previous[-200:] == current[:200]

    def test_no_chunk_exceeds_size_with_mixed_separators(self):
        sentence = "The quick brown fox jumps over the lazy dog. "
        text = "\n\n".join(sentence * 8 for _ in range(10))
        splitter = RecursiveSplitter(chunk_size=150, chunk_overlap=30)

        chunks = splitter.split_text(text).chunks

        assert len(chunks) > 1
        assert all(0 < len(chunk) <= 150 for chunk in chunks)

    def test_prefers_paragraph_boundaries(self):
        first = "A" * 60
        second = "B" * 60
        splitter = RecursiveSplitter(chunk_size=100, chunk_overlap=0)

        chunks = splitter.split_text(f"{first}\n\n{second}").chunks

        assert chunks == [first, second]

    def test_separator_stays_with_preceding_piece(self):
        splitter = RecursiveSplitter(chunk_size=30, chunk_overlap=0)
        text = "First sentence here. Second sentence here. Third one."

        chunks = splitter.split_text(text).chunks

        assert chunks[0].endswith(".")
        assert not any(chunk.startswith(" ") for chunk in chunks)

    def test_chunks_are_right_stripped(self):
        splitter = RecursiveSplitter(chunk_size=20, chunk_overlap=0)
        chunks = splitter.split_text("alpha beta gamma delta\n\nepsilon zeta eta").chunks
        assert all(chunk == chunk.rstrip() for chunk in chunks)

    def test_chunks_cover_text_in_order(self):
        words = [f"word{i}" for i in range(300)]
        splitter = RecursiveSplitter(chunk_size=100, chunk_overlap=20)

        chunks = splitter.split_text(" ".join(words)).chunks
        positions = [" ".join(words).find(chunk) for chunk in chunks]

        assert all(pos >= 0 for pos in positions)
        assert positions == sorted(positions)
        assert chunks[-1].endswith("word299")

    def test_records_trace_stage(self):
        trace = TraceContext()
        splitter = RecursiveSplitter(chunk_size=50, chunk_overlap=10)

        result = splitter.split_text("y" * 200, trace=trace)

        stage = trace.get_stage("text_splitting")
        assert stage["chunk_count"] == len(result.chunks)
        assert stage["text_length"] == 200

    def test_split_documents_preserves_order(self):
        splitter = RecursiveSplitter(chunk_size=100, chunk_overlap=0)
        results = splitter.split_documents(["one", "", "three"])

        assert [r.chunks for r in results] == [["one"], [], ["three"]]
