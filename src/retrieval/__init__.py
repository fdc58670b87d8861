# Retrieval - Corpus ownership, query answering and summarization

from retrieval.errors import (
    EmptyContentError,
    InvalidArgumentError,
    NotInitializedError,
    RetrievalConfigurationError,
    RetrievalError,
)
from retrieval.guards import GuardedEmbedder, GuardedGenerator
from retrieval.orchestrator import Corpus, RetrievalOrchestrator, RetrievalState

__all__ = [
    "Corpus",
    "RetrievalOrchestrator",
    "RetrievalState",
    "GuardedEmbedder",
    "GuardedGenerator",
    "RetrievalError",
    "NotInitializedError",
    "EmptyContentError",
    "RetrievalConfigurationError",
    "InvalidArgumentError",
]
