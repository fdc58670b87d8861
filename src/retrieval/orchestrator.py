"""Retrieval Orchestrator - owns the current corpus and the query path.

Ingest runs chunking, embedding and index building into a brand-new index,
then installs it with a single reference assignment. Readers take one
reference to the current corpus and use only that, so a query sees either
the old corpus or the new one in full.

Design Principles:
    - Replace, never merge: each ingest builds a fresh index
    - Failure leaves state unchanged: nothing is installed unless the build succeeds
    - Bounded prompts: context and summary content are cut to configured budgets
"""

import hashlib
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Any

from core.settings import Settings
from core.trace.trace_context import TraceContext
from core.types import (
    AnswerResult,
    Chunk,
    Document,
    IngestResult,
    Provenance,
    SummaryResult,
)
from ingestion.chunking.document_chunker import DocumentChunker
from ingestion.embedding.dense_encoder import DenseEncoder
from libs.embedding.base_embedding import BaseEmbedding
from libs.llm.base_llm import BaseLLM
from libs.vector_index.base_vector_index import BaseVectorIndex
from libs.vector_index.vector_index_factory import VectorIndexFactory
from observability.logger import get_logger, log_timing
from retrieval import prompts
from retrieval.context_builder import build_context, build_summary_content
from retrieval.errors import (
    EmptyContentError,
    InvalidArgumentError,
    NotInitializedError,
    RetrievalConfigurationError,
)
from retrieval.guards import GuardedEmbedder, GuardedGenerator

logger = get_logger(__name__)

SUMMARY_STRATEGIES = ("all_chunks", "top_k")


class RetrievalState(str, Enum):
    """Lifecycle of an orchestrator."""

    UNINITIALIZED = "uninitialized"
    READY = "ready"


@dataclass(frozen=True)
class Corpus:
    """The indexed content currently answering queries.

    Attributes:
        index: Vector index over every chunk of the corpus
        provenance: File information when the corpus came from a parsed file
    """

    index: BaseVectorIndex
    provenance: Provenance | None = None


class RetrievalOrchestrator:
    """Ingest, answer and summarize over a single replaceable corpus.

    Example:
        >>> orchestrator = RetrievalOrchestrator(settings, embedding, llm)
        >>> orchestrator.ingest_document(text, "notes.txt")
        >>> orchestrator.answer("What is the main finding?").answer
    """

    def __init__(
        self,
        settings: Settings,
        embedding: BaseEmbedding,
        llm: BaseLLM,
        chunker: DocumentChunker | None = None,
        index_class: type[BaseVectorIndex] | None = None,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            settings: Application settings.
            embedding: Embedding provider; wrapped with a deadline guard.
            llm: Generation provider; wrapped with deadline and retry guards.
            chunker: Optional chunker; built from settings when omitted.
            index_class: Optional index implementation; from settings when omitted.

        Raises:
            RetrievalConfigurationError: If the summary strategy is unknown.
        """
        strategy = settings.retrieval.summary_strategy
        if strategy not in SUMMARY_STRATEGIES:
            raise RetrievalConfigurationError(
                f"Unknown retrieval.summary_strategy '{strategy}'. "
                f"Expected one of: {', '.join(SUMMARY_STRATEGIES)}"
            )

        self._settings = settings
        if isinstance(embedding, GuardedEmbedder):
            self._embedder = embedding
        else:
            self._embedder = GuardedEmbedder(embedding, settings.embedding.call_timeout)
        self._generator = GuardedGenerator(
            llm,
            timeout=settings.llm.generation_timeout,
            rate_limit_retries=settings.llm.rate_limit_retries,
            retry_backoff_seconds=settings.llm.retry_backoff_seconds,
        )
        self._chunker = chunker or DocumentChunker(settings)
        self._encoder = DenseEncoder(self._embedder, settings.ingestion.batch_size)
        self._index_class = index_class or VectorIndexFactory.get_index_class(settings)

        self._corpus: Corpus | None = None
        self._swap_lock = threading.Lock()

    # ------------------------------------------------------------------ state

    @property
    def state(self) -> RetrievalState:
        if self._corpus is None:
            return RetrievalState.UNINITIALIZED
        return RetrievalState.READY

    @property
    def is_ready(self) -> bool:
        return self._corpus is not None

    @property
    def chunk_count(self) -> int:
        corpus = self._corpus
        return len(corpus.index) if corpus else 0

    @property
    def generator(self) -> GuardedGenerator:
        return self._generator

    def current_provenance(self) -> Provenance | None:
        """Provenance of the current corpus; None before ingest or for raw text."""
        corpus = self._corpus
        return corpus.provenance if corpus else None

    def _current_corpus(self) -> Corpus:
        corpus = self._corpus
        if corpus is None:
            raise NotInitializedError(
                "No documents have been ingested yet. Upload a PDF or load documents first."
            )
        return corpus

    def _install(self, corpus: Corpus) -> None:
        with self._swap_lock:
            previous = self._corpus
            self._corpus = corpus
        if previous is not None:
            logger.info(
                f"Replaced corpus of {len(previous.index)} chunks "
                f"with {len(corpus.index)} chunks"
            )

    def _finish_trace(self, trace: TraceContext, status: str) -> None:
        if self._settings.observability.trace_enabled:
            logger.debug(f"Trace: {trace.finish(status)}")

    # ----------------------------------------------------------------- ingest

    def ingest_documents(
        self,
        documents: list[str],
        metadata: dict[str, Any] | None = None,
    ) -> IngestResult:
        """Index raw texts as the new corpus.

        Each document gets source "document-<n>" (1-based) and type "raw"
        unless the caller's metadata overrides them. The new corpus has no
        provenance.

        Args:
            documents: Document texts.
            metadata: Extra metadata attached to every chunk.

        Returns:
            IngestResult with document and chunk counts.

        Raises:
            EmptyCorpusError: If the documents produce no chunks.
            EmbeddingError: If embedding fails. The previous corpus stays current.
        """
        docs = [
            Document(
                id=f"doc-{n}",
                text=text,
                metadata={"source": f"document-{n}", "type": "raw", **(metadata or {})},
            )
            for n, text in enumerate(documents, start=1)
        ]
        corpus = self._build_corpus(docs, provenance=None)
        return IngestResult(document_count=len(docs), chunk_count=len(corpus.index))

    def ingest_document(
        self,
        raw_text: str,
        source_name: str,
        source_type: str = "raw",
        page_count: int | None = None,
    ) -> IngestResult:
        """Index a single document as the new corpus.

        Args:
            raw_text: Document text (e.g. extracted from a PDF).
            source_name: Source identifier stored on every chunk.
            source_type: "pdf" for parsed files, which records provenance.
            page_count: Page count of a parsed file.

        Returns:
            IngestResult with provenance (parsed files only) and a preview.

        Raises:
            EmptyContentError: If raw_text is empty or whitespace-only.
            EmbeddingError: If embedding fails. The previous corpus stays current.
        """
        if not raw_text or not raw_text.strip():
            raise EmptyContentError(
                f"No extractable text found in {source_name} "
                "(it may be a scanned or image-only document)",
                details={"source": source_name},
            )

        provenance = None
        if source_type == "pdf":
            provenance = Provenance.now(source_name, page_count, len(raw_text))

        doc_hash = hashlib.sha256(raw_text.encode("utf-8")).hexdigest()[:16]
        document = Document(
            id=f"{source_type}:{doc_hash}",
            text=raw_text,
            metadata={"source": source_name, "type": source_type},
        )
        corpus = self._build_corpus([document], provenance)

        preview_chars = self._settings.ingestion.preview_chars
        return IngestResult(
            document_count=1,
            chunk_count=len(corpus.index),
            provenance=provenance,
            preview=raw_text[:preview_chars] + "...",
        )

    def _build_corpus(
        self,
        documents: list[Document],
        provenance: Provenance | None,
    ) -> Corpus:
        trace = TraceContext("ingest")
        try:
            with log_timing(logger, f"Ingest of {len(documents)} document(s)"):
                with trace.stage("chunking") as info:
                    chunks = self._chunker.split(documents)
                    info["chunk_count"] = len(chunks)

                pairs = self._encoder.encode(chunks, trace)

                with trace.stage("index_build", provider=self._index_class.__name__):
                    index = self._index_class.build(pairs)
        except Exception:
            self._finish_trace(trace, "error")
            raise

        corpus = Corpus(index=index, provenance=provenance)
        self._install(corpus)
        self._finish_trace(trace, "success")
        logger.info(f"Corpus ready: {len(index)} chunks from {len(documents)} document(s)")
        return corpus

    # ------------------------------------------------------------------ query

    def answer(self, query: str, k: int | None = None) -> AnswerResult:
        """Answer a question from the current corpus only.

        Args:
            query: The user's question.
            k: Fragments to retrieve; retrieval.top_k when None.

        Returns:
            AnswerResult with the answer, fragment count and provenance.

        Raises:
            InvalidArgumentError: If query is empty or k <= 0.
            NotInitializedError: If nothing has been ingested.
            EmbeddingError / LLMError: On provider failures.
        """
        if not query or not query.strip():
            raise InvalidArgumentError("Query must not be empty")
        top_k = self._settings.retrieval.top_k if k is None else k
        if top_k <= 0:
            raise InvalidArgumentError(f"k must be positive, got {top_k}")

        corpus = self._current_corpus()
        trace = TraceContext("answer")
        try:
            with trace.stage("retrieval", k=top_k) as info:
                query_vector = self._embedder.embed_single(query)
                hits = corpus.index.search(query_vector, top_k)
                info["hit_count"] = len(hits)
                info["scores"] = [round(hit.score, 4) for hit in hits]

            context, fragment_count = build_context(
                [hit.chunk for hit in hits],
                self._settings.retrieval.context_max_chars,
            )

            with trace.stage("generation"):
                answer = self._generator.generate(
                    prompts.answer_prompt(context, query), operation="answer"
                )
        except Exception:
            self._finish_trace(trace, "error")
            raise

        self._finish_trace(trace, "success")
        return AnswerResult(
            answer=answer,
            sources=fragment_count,
            provenance=corpus.provenance,
        )

    def _summary_chunks(self, corpus: Corpus) -> list[Chunk]:
        retrieval = self._settings.retrieval
        if retrieval.summary_strategy == "all_chunks":
            return corpus.index.chunks()

        # top_k: rank against the empty query, then restore storage order
        hits = corpus.index.search(
            self._embedder.embed_single(""), retrieval.summary_top_k
        )
        return [hit.chunk for hit in sorted(hits, key=lambda hit: hit.vector_id)]

    def summarize_whole(self) -> SummaryResult:
        """Summarize the whole current corpus.

        Returns:
            SummaryResult with the summary and contributing chunk count.

        Raises:
            NotInitializedError: If nothing has been ingested.
            LLMTimeoutError: If generation exceeds retrieval.summary_timeout.
        """
        corpus = self._current_corpus()
        retrieval = self._settings.retrieval

        trace = TraceContext("summarize_whole")
        try:
            with trace.stage("retrieval", strategy=retrieval.summary_strategy) as info:
                chunks = self._summary_chunks(corpus)
                content, fragment_count = build_summary_content(
                    chunks, retrieval.summary_max_chars
                )
                info["fragment_count"] = fragment_count

            with trace.stage("generation"):
                summary = self._generator.generate(
                    prompts.document_summary_prompt(content),
                    timeout=retrieval.summary_timeout,
                    operation="document summary",
                )
        except Exception:
            self._finish_trace(trace, "error")
            raise

        self._finish_trace(trace, "success")
        return SummaryResult(
            summary=summary,
            fragment_count=fragment_count,
            provenance=corpus.provenance,
        )

    def summarize_text(self, text: str) -> str:
        """Summarize arbitrary text in 3-5 sentences without touching the corpus.

        Raises:
            InvalidArgumentError: If text is empty or whitespace-only.
        """
        if not text or not text.strip():
            raise InvalidArgumentError("Text to summarize must not be empty")
        return self._generator.generate(
            prompts.text_summary_prompt(text), operation="text summary"
        )
