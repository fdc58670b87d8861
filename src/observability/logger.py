"""Logging utilities for the document Q&A retrieval core.

Every module obtains its logger through get_logger(__name__); the entry point
calls configure_logger() once with the level from settings.

Design Principles:
    - Observable: ingest, query and chat paths log their lifecycle at INFO
    - Fail-Safe: degraded paths (memory fallback, late results) log at WARNING
"""

import logging
import sys
import time
from contextlib import contextmanager
from typing import Iterator

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_DEFAULT_HANDLER_NAME = "rag-core-default"


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance with standard configuration.

    Args:
        name: Logger name (typically __name__ from the calling module)

    Returns:
        Configured Logger instance

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.info("Indexed 12 chunks")
    """
    logger = logging.getLogger(name)

    # Until configure_logger() runs, each module logger writes to stderr itself
    if not logger.handlers and not logging.getLogger().handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.set_name(_DEFAULT_HANDLER_NAME)
        handler.setFormatter(
            logging.Formatter(fmt=DEFAULT_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
        )
        logger.addHandler(handler)

    if not logger.level:
        logger.setLevel(logging.INFO)

    return logger


def configure_logger(
    level: str = "INFO",
    format: str | None = None,
    log_file: str | None = None
) -> None:
    """Configure the root logger for the application.

    Module loggers created before this call keep their own handler, so their
    level is aligned with the requested one as well.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR)
        format: Custom log format string (optional)
        log_file: Path to log file (optional, for file logging)

    Example:
        >>> configure_logger(level="DEBUG", log_file="./rag.log")
    """
    log_level = logging.getLevelName(level.upper())
    if not isinstance(log_level, int):
        log_level = logging.INFO

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()

    formatter = logging.Formatter(fmt=format or DEFAULT_FORMAT)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    # Drop the per-module stderr handlers so records are emitted once, by root
    for existing in logging.Logger.manager.loggerDict.values():
        if not isinstance(existing, logging.Logger):
            continue
        for handler in list(existing.handlers):
            if handler.get_name() == _DEFAULT_HANDLER_NAME:
                existing.removeHandler(handler)
        if existing.level:
            existing.setLevel(log_level)


@contextmanager
def log_timing(logger: logging.Logger, operation: str) -> Iterator[None]:
    """Log how long an operation took, and whether it failed.

    Args:
        logger: Logger to write to.
        operation: Human readable operation name, e.g. "PDF summary".

    Example:
        >>> with log_timing(logger, "Chat response"):
        ...     reply = core.chat("hello")
    """
    start = time.perf_counter()
    try:
        yield
    except Exception as e:
        logger.error(
            f"{operation} failed (Time: {time.perf_counter() - start:.2f}s): {e}"
        )
        raise
    logger.info(f"{operation} complete (Time: {time.perf_counter() - start:.2f}s)")
