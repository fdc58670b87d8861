"""
Smoke tests for verifying core package imports.

These tests ensure that all top-level packages can be imported correctly
before running more comprehensive test suites.
"""

from importlib import import_module

import pytest

MODULES = [
    "core.deadline",
    "core.failures",
    "core.settings",
    "core.types",
    "core.trace.trace_context",
    "observability.logger",
    "libs.provider_registry",
    "libs.http_transport",
    "libs.splitter.splitter_factory",
    "libs.embedding.embedding_factory",
    "libs.llm.llm_factory",
    "libs.vector_index.vector_index_factory",
    "libs.loader.pdf_loader",
    "ingestion.chunking.document_chunker",
    "ingestion.embedding.dense_encoder",
    "retrieval.orchestrator",
    "memory.conversation_memory",
    "rag.rag_core",
    "rag.bootstrap",
]


class TestCoreImports:
    """Test that all packages and modules can be imported."""

    @pytest.mark.parametrize("name", MODULES)
    def test_import_module(self, name: str) -> None:
        assert import_module(name) is not None

    def test_public_entry_points(self) -> None:
        from rag import RAGCore, build_rag_core

        assert callable(build_rag_core)
        assert hasattr(RAGCore, "chat")


class TestBuiltinProviders:
    """Test that importing a factory registers its built-in providers."""

    def test_factories_have_builtins(self) -> None:
        from libs.embedding.embedding_factory import EmbeddingFactory
        from libs.llm.llm_factory import LLMFactory
        from libs.splitter.splitter_factory import SplitterFactory
        from libs.vector_index.vector_index_factory import VectorIndexFactory

        assert set(LLMFactory.get_provider_names()) >= {"openai", "gemini", "ollama"}
        assert set(EmbeddingFactory.get_provider_names()) >= {"openai", "gemini", "ollama"}
        assert "recursive" in SplitterFactory.get_provider_names()
        assert set(VectorIndexFactory.get_provider_names()) >= {"brute_force", "chroma"}
