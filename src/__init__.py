# Document Q&A Retrieval Core
#
# Top-level packages of the retrieval core. Each one is imported by name
# (e.g. ``from retrieval.orchestrator import RetrievalOrchestrator``) with
# src/ on the import path.

__all__ = [
    "core",
    "ingestion",
    "libs",
    "memory",
    "observability",
    "rag",
    "retrieval",
]
