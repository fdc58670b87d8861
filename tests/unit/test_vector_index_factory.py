"""Tests for VectorIndexFactory."""

import gc
import logging
from unittest.mock import MagicMock

import pytest

from core.settings import Settings
from core.types import Chunk
from libs.vector_index import (
    BruteForceVectorIndex,
    ChromaVectorIndex,
    UnknownVectorIndexProviderError,
    VectorIndexConfigurationError,
    VectorIndexFactory,
)


@pytest.fixture
def pairs() -> list[tuple[Chunk, list[float]]]:
    return [(Chunk(id=f"c{i}", text=str(i)), [float(i), 1.0]) for i in range(3)]


class TestVectorIndexFactory:
    """Tests for provider resolution."""

    def test_builtin_providers_registered(self):
        assert VectorIndexFactory.has_provider("brute_force")
        assert VectorIndexFactory.has_provider("chroma")

    def test_default_provider_is_brute_force(self):
        assert VectorIndexFactory.get_index_class(Settings()) is BruteForceVectorIndex

    def test_create_builds_populated_index(self, pairs):
        index = VectorIndexFactory.create(Settings(), pairs)

        assert isinstance(index, BruteForceVectorIndex)
        assert len(index) == 3

    def test_chroma_selected_by_settings(self, pairs):
        settings = Settings()
        settings.vector_index.provider = "chroma"
        client = MagicMock()

        index = VectorIndexFactory.create(settings, pairs, client=client)

        assert isinstance(index, ChromaVectorIndex)
        client.create_collection.assert_called_once()
        collection = client.create_collection.return_value
        kwargs = collection.add.call_args.kwargs
        assert kwargs["ids"] == ["0", "1", "2"]
        assert kwargs["embeddings"][2] == [2.0, 1.0]

    def test_unknown_provider(self):
        settings = Settings()
        settings.vector_index.provider = "faiss"

        with pytest.raises(UnknownVectorIndexProviderError) as exc_info:
            VectorIndexFactory.get_index_class(settings)
        assert "brute_force" in str(exc_info.value)

    def test_missing_provider(self):
        settings = Settings()
        settings.vector_index.provider = None

        with pytest.raises(VectorIndexConfigurationError):
            VectorIndexFactory.get_index_class(settings)


class TestChromaVectorIndexWithMockClient:
    """ChromaVectorIndex result mapping, without a real ChromaDB."""

    def test_distances_become_scores_sorted_with_id_ties(self, pairs):
        client = MagicMock()
        collection = client.create_collection.return_value
        collection.query.return_value = {
            "ids": [["2", "0", "1"]],
            "distances": [[0.5, 0.1, 0.1]],
        }

        index = ChromaVectorIndex.build(pairs, client=client)
        hits = index.search([1.0, 1.0], k=3)

        assert [hit.vector_id for hit in hits] == [0, 1, 2]
        assert hits[0].score == pytest.approx(0.9)
        assert hits[2].chunk.id == "c2"
        assert collection.query.call_args.kwargs["n_results"] == 3

    def test_collection_uses_cosine_space(self, pairs):
        client = MagicMock()
        ChromaVectorIndex.build(pairs, client=client)

        kwargs = client.create_collection.call_args.kwargs
        assert kwargs["metadata"] == {"hnsw:space": "cosine"}
        assert kwargs["name"].startswith("rag-corpus-")

    def test_each_index_gets_a_new_collection(self, pairs):
        client = MagicMock()
        first = ChromaVectorIndex.build(pairs, client=client)
        second = ChromaVectorIndex.build(pairs, client=client)
        assert first.collection_name != second.collection_name

    def test_backend_failure_is_wrapped(self, pairs):
        from libs.vector_index import VectorIndexError

        client = MagicMock()
        client.create_collection.side_effect = RuntimeError("disk on fire")

        with pytest.raises(VectorIndexError) as exc_info:
            ChromaVectorIndex.build(pairs, client=client)
        assert "disk on fire" in str(exc_info.value)

    def test_collection_is_deleted_with_the_index(self, pairs):
        client = MagicMock()
        index = ChromaVectorIndex.build(pairs, client=client)
        name = index.collection_name
        client.delete_collection.assert_not_called()

        del index
        gc.collect()

        client.delete_collection.assert_called_once_with(name)

    def test_live_index_keeps_its_collection(self, pairs):
        client = MagicMock()
        kept = ChromaVectorIndex.build(pairs, client=client)
        replaced = ChromaVectorIndex.build(pairs, client=client)
        replaced_name = replaced.collection_name

        del replaced
        gc.collect()

        client.delete_collection.assert_called_once_with(replaced_name)
        assert kept.collection_name != replaced_name

    def test_failed_delete_is_logged(self, pairs, caplog):
        client = MagicMock()
        client.delete_collection.side_effect = RuntimeError("already gone")
        index = ChromaVectorIndex.build(pairs, client=client)
        caplog.set_level(logging.WARNING)

        del index
        gc.collect()

        assert "already gone" in caplog.text
