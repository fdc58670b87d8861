# RAG - Public surface of the document Q&A core
from rag.bootstrap import build_rag_core
from rag.rag_core import RAGCore

__all__ = ["RAGCore", "build_rag_core"]
