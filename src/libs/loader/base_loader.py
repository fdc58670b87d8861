"""Base Loader interface for document extraction.

This module defines the abstract base class for all document loaders.
Each loader extracts text and metadata from one file format and produces a
standardized Document.

Design Principles:
    - Abstract Interface: BaseLoader defines the contract
    - Metadata Enrichment: Each loader records source, type and file facts
"""

from abc import ABC, abstractmethod
from pathlib import Path

from core.types import Document


class LoaderError(Exception):
    """Base exception for loader operations."""

    pass


class LoadError(LoaderError):
    """Failed to load document (unreadable or unparsable content)."""

    pass


class UnsupportedFormatError(LoaderError):
    """File format not supported by this loader."""

    pass


class FileTooLargeError(LoaderError):
    """File exceeds the loader's size limit."""

    def __init__(self, message: str, size: int, limit: int) -> None:
        super().__init__(message)
        self.size = size
        self.limit = limit


class BaseLoader(ABC):
    """Abstract base class for document loaders.

    Loaders are responsible for:
    1. Reading file content from a path or an in-memory payload
    2. Extracting metadata (source name, page count, size)
    3. Producing a standardized Document object

    Attributes:
        supported_extensions: File extensions this loader supports.
    """

    supported_extensions: list[str] = []

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Return the name of this loader provider (e.g., 'pdf')."""
        pass

    @abstractmethod
    def load(self, path: str | Path) -> Document:
        """Load a document from the specified path.

        Raises:
            LoadError: If the file cannot be read or parsed.
            UnsupportedFormatError: If the file format is not supported.
        """
        pass

    @abstractmethod
    def load_bytes(self, data: bytes, filename: str) -> Document:
        """Load a document from an uploaded payload.

        Args:
            data: Raw file content.
            filename: Original file name, used for format checks and metadata.

        Raises:
            LoadError: If the content cannot be parsed.
            UnsupportedFormatError: If the file name has an unsupported extension.
            FileTooLargeError: If the payload exceeds the size limit.
        """
        pass

    def can_load(self, path: str | Path) -> bool:
        """Check if this loader can handle the given file name."""
        return Path(path).suffix.lower() in self.supported_extensions

    def get_supported_extensions(self) -> list[str]:
        return list(self.supported_extensions)
