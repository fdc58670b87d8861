"""Assembly of a RAGCore from settings."""

from core.settings import Settings
from ingestion.chunking.document_chunker import DocumentChunker
from libs.embedding.embedding_factory import EmbeddingFactory
from libs.llm.llm_factory import LLMFactory
from libs.loader.pdf_loader import PdfLoader
from libs.splitter.splitter_factory import SplitterFactory
from libs.vector_index.vector_index_factory import VectorIndexFactory
from memory.conversation_memory import ConversationMemory
from observability.logger import get_logger
from rag.rag_core import RAGCore
from retrieval.orchestrator import RetrievalOrchestrator

logger = get_logger(__name__)

BYTES_PER_MB = 1024 * 1024


def build_rag_core(settings: Settings, **provider_overrides) -> RAGCore:
    """Create every component from settings and wire them into a RAGCore.

    Args:
        settings: Loaded application settings.
        **provider_overrides: Keyword arguments passed to both provider
            factories (e.g. http_client for tests).

    Raises:
        SplitterConfigurationError, EmbeddingConfigurationError,
        LLMConfigurationError, VectorIndexConfigurationError: On bad settings.
    """
    splitter = SplitterFactory.create(settings)
    embedding = EmbeddingFactory.create(settings, **provider_overrides)
    llm = LLMFactory.create(settings, **provider_overrides)
    index_class = VectorIndexFactory.get_index_class(settings)

    orchestrator = RetrievalOrchestrator(
        settings,
        embedding=embedding,
        llm=llm,
        chunker=DocumentChunker(splitter=splitter),
        index_class=index_class,
    )
    loader = PdfLoader(
        max_file_size_bytes=int(settings.ingestion.max_file_size_mb * BYTES_PER_MB)
    )

    logger.info(
        f"RAG core ready: llm={llm.provider_name}, embedding={embedding.provider_name}, "
        f"index={settings.vector_index.provider}, splitter={splitter.provider_name}"
    )
    return RAGCore(
        settings,
        orchestrator=orchestrator,
        memory=ConversationMemory.from_settings(settings),
        loader=loader,
    )
