"""RAGCore - the public surface of the document Q&A core.

Composes the retrieval orchestrator (document questions and summaries), the
conversation memory (chat mode) and the PDF loader into the operations a
transport layer calls.

Design Principles:
    - Chat degrades, never fails on memory: unreadable history means no history
    - Chat is deadline-bounded: a late reply is discarded and reported as a timeout
    - Writes to memory are fire-and-forget
"""

from pathlib import Path
from typing import Any

from core.settings import Settings
from core.trace.trace_context import TraceContext
from core.types import (
    AnswerResult,
    ConversationTurn,
    IngestResult,
    MemoryMessage,
    Provenance,
    SummaryResult,
)
from libs.llm.base_llm import LLMTimeoutError
from libs.loader.base_loader import BaseLoader, LoadError
from memory.conversation_memory import ConversationMemory
from observability.logger import get_logger, log_timing
from retrieval import prompts
from retrieval.errors import InvalidArgumentError
from retrieval.orchestrator import RetrievalOrchestrator

logger = get_logger(__name__)


class RAGCore:
    """Document Q&A and chat over a single replaceable corpus.

    Example:
        >>> core = build_rag_core(load_settings())
        >>> core.ingest_pdf(pdf_bytes, "report.pdf")
        >>> core.answer("What are the conclusions?").answer
        >>> core.chat("Hi there!")
    """

    def __init__(
        self,
        settings: Settings,
        orchestrator: RetrievalOrchestrator,
        memory: ConversationMemory,
        loader: BaseLoader | None = None,
    ) -> None:
        self._settings = settings
        self._orchestrator = orchestrator
        self._memory = memory
        self._loader = loader

    @property
    def orchestrator(self) -> RetrievalOrchestrator:
        return self._orchestrator

    @property
    def memory(self) -> ConversationMemory:
        return self._memory

    # ---------------------------------------------------------------- ingest

    def ingest_documents(
        self,
        documents: list[str],
        metadata: dict[str, Any] | None = None,
    ) -> IngestResult:
        return self._orchestrator.ingest_documents(documents, metadata)

    def ingest_document(
        self,
        raw_text: str,
        source_name: str,
        source_type: str = "raw",
        page_count: int | None = None,
    ) -> IngestResult:
        return self._orchestrator.ingest_document(
            raw_text, source_name, source_type=source_type, page_count=page_count
        )

    def ingest_pdf(self, data: bytes, filename: str) -> IngestResult:
        """Extract text from an uploaded PDF and make it the current corpus.

        Args:
            data: PDF file content.
            filename: Original file name; must end in .pdf.

        Returns:
            IngestResult with provenance and a text preview.

        Raises:
            UnsupportedFormatError: If filename is not a .pdf.
            FileTooLargeError: If data exceeds ingestion.max_file_size_mb.
            LoadError: If the PDF cannot be parsed or no loader is configured.
            EmptyContentError: If the PDF has no extractable text.
        """
        if self._loader is None:
            raise LoadError("No document loader is configured")

        with log_timing(logger, f"PDF ingest of {filename}"):
            document = self._loader.load_bytes(data, filename)
            logger.info(
                f"Extracted {len(document.text)} characters from {filename} "
                f"({document.metadata.get('page_count')} pages)"
            )
            return self._orchestrator.ingest_document(
                document.text,
                filename,
                source_type="pdf",
                page_count=document.metadata.get("page_count"),
            )

    def ingest_pdf_file(self, path: str | Path) -> IngestResult:
        """Read a PDF from disk and ingest it like an upload."""
        path = Path(path)
        return self.ingest_pdf(path.read_bytes(), path.name)

    # ----------------------------------------------------------------- query

    def answer(self, query: str, k: int | None = None) -> AnswerResult:
        with log_timing(logger, "Document question"):
            return self._orchestrator.answer(query, k)

    def summarize_whole(self) -> SummaryResult:
        with log_timing(logger, "Document summary"):
            return self._orchestrator.summarize_whole()

    def summarize_text(self, text: str) -> str:
        with log_timing(logger, "Text summary"):
            return self._orchestrator.summarize_text(text)

    def current_provenance(self) -> Provenance | None:
        return self._orchestrator.current_provenance()

    # ------------------------------------------------------------------ chat

    def chat(self, message: str) -> str:
        """Reply to a chat message using recent conversation history.

        History comes from a deadline-bounded memory read; if the read fails
        the reply is generated without history. Generation, rate-limit retries
        included, is bounded by chat.deadline_seconds. On success the turn is appended to
        memory in the background and the reply is returned without waiting.

        Raises:
            InvalidArgumentError: If message is empty or whitespace-only.
            LLMTimeoutError: If the reply is not ready before the deadline.
            LLMError: Other generation failures (rate limit, credentials, ...).
        """
        if not message or not message.strip():
            raise InvalidArgumentError("Message must not be empty")

        trace = TraceContext("chat")
        deadline = self._settings.chat.deadline_seconds
        generator = self._orchestrator.generator

        try:
            with log_timing(logger, "Chat response"):
                with trace.stage("memory_read") as info:
                    history = self._memory.read()
                    info["turns"] = len(history)
                logger.info(f"Current history: {len(history)} turns")

                prompt = prompts.chat_prompt(message, self._memory.render(history))

                with trace.stage("generation", deadline=deadline):
                    try:
                        reply = generator.generate(prompt, timeout=deadline, operation="chat")
                    except LLMTimeoutError as e:
                        raise LLMTimeoutError(
                            f"Chat response timed out after {deadline:.0f}s. "
                            "Please try again or shorten your message.",
                            provider=generator.provider_name,
                            details={"operation": "chat", "timeout": deadline},
                        ) from e
        except Exception:
            self._finish_trace(trace, "error")
            raise

        self._memory.append(ConversationTurn(input=message, output=reply))
        self._finish_trace(trace, "success")
        return reply

    def _finish_trace(self, trace: TraceContext, status: str) -> None:
        if self._settings.observability.trace_enabled:
            logger.debug(f"Trace: {trace.finish(status)}")

    def read_memory(self) -> list[ConversationTurn]:
        return self._memory.read()

    def memory_messages(self) -> list[MemoryMessage]:
        return self._memory.messages()

    def clear_memory(self) -> None:
        self._memory.clear()

    # ---------------------------------------------------------------- health

    def status(self) -> dict[str, Any]:
        """Health summary: initialized, pdf_loaded, chunk_count, memory_turns."""
        return {
            "initialized": self._orchestrator.is_ready,
            "pdf_loaded": self._orchestrator.current_provenance() is not None,
            "chunk_count": self._orchestrator.chunk_count,
            "memory_turns": len(self._memory),
        }

    def close(self) -> None:
        """Flush pending memory writes."""
        self._memory.close()
