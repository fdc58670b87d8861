#!/usr/bin/env python3
"""Document Q&A Retrieval Core - Main Entry Point

Loads settings, validates the provider configuration and optionally runs a
one-shot ingest / question / summary / chat from the command line.

Usage:
    python main.py
    python main.py --pdf report.pdf --ask "What are the conclusions?"
    python main.py --pdf report.pdf --summarize
    python main.py --chat "Hello!"
"""

import argparse
import sys
from pathlib import Path

from core.settings import SettingsError, load_settings
from ingestion.chunking.document_chunker import DocumentChunkingError
from libs.embedding.base_embedding import EmbeddingError
from libs.llm.base_llm import LLMError
from libs.loader.base_loader import LoaderError
from libs.splitter.base_splitter import SplitterError
from libs.vector_index.base_vector_index import VectorIndexError
from observability.logger import configure_logger, get_logger
from rag.bootstrap import build_rag_core
from retrieval.errors import RetrievalError

logger = get_logger(__name__)

# Default settings path
SETTINGS_PATH = Path(__file__).parent / "config" / "settings.yaml"

RAG_ERRORS = (
    DocumentChunkingError,
    EmbeddingError,
    LLMError,
    LoaderError,
    RetrievalError,
    SplitterError,
    VectorIndexError,
)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Document Q&A retrieval core")
    parser.add_argument("--settings", type=Path, default=None, help="Path to settings.yaml")
    parser.add_argument("--pdf", type=Path, default=None, help="PDF file to ingest")
    parser.add_argument("--ask", default=None, help="Question about the ingested PDF")
    parser.add_argument("--summarize", action="store_true", help="Summarize the ingested PDF")
    parser.add_argument("--chat", default=None, help="Chat message (no document needed)")
    return parser.parse_args(argv)


def main(settings_path: Path | None = None, argv: list[str] | None = None) -> int:
    """Main entry point.

    Args:
        settings_path: Optional path to settings.yaml. Defaults to config/settings.yaml.
        argv: Command line arguments (sys.argv[1:] when None).

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    args = parse_args(argv)
    path = args.settings or settings_path or SETTINGS_PATH

    logger.info("Document Q&A Retrieval Core - Starting...")

    try:
        settings = load_settings(path)
        configure_logger(
            level=settings.observability.log_level,
            log_file=settings.observability.log_file,
        )
        logger.info(f"Configuration loaded successfully from {path}")
        logger.info(f"LLM provider: {settings.llm.provider}, model: {settings.llm.model}")
        logger.info(f"Embedding provider: {settings.embedding.provider}")
        logger.info(f"Vector index provider: {settings.vector_index.provider}")
    except SettingsError as e:
        logger.error(f"Configuration error: {e}")
        return 1

    try:
        core = build_rag_core(settings)
    except RAG_ERRORS as e:
        logger.error(f"Initialization error: {e}")
        return 1

    logger.info("Initialization complete.")

    try:
        if args.pdf:
            result = core.ingest_pdf_file(args.pdf)
            print(f"Ingested {args.pdf.name}: {result.chunk_count} chunks")
            if result.provenance:
                print(f"Pages: {result.provenance.pages}")
        if args.ask:
            answer = core.answer(args.ask)
            print(answer.answer)
            print(f"(sources: {answer.sources})")
        if args.summarize:
            print(core.summarize_whole().summary)
        if args.chat:
            print(core.chat(args.chat))
    except (RAG_ERRORS + (OSError,)) as e:
        logger.error(f"Request failed: {e}")
        return 1
    finally:
        core.close()

    return 0


if __name__ == "__main__":
    sys.exit(main())
