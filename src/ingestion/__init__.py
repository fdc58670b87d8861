# Ingestion - Chunking and embedding of documents
from ingestion.chunking import DocumentChunker, DocumentChunkingError
from ingestion.embedding import DenseEncoder

__all__ = ["DenseEncoder", "DocumentChunker", "DocumentChunkingError"]
