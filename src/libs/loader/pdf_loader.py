"""PDF Loader using MarkItDown for text extraction.

This loader:
1. Converts the PDF to text with MarkItDown
2. Counts pages with PyMuPDF (fitz)
3. Derives a stable document id from the file's SHA256 hash

Graceful Degradation:
    If page counting fails, logs a warning and reports the page count as None.
"""

import hashlib
import os
import tempfile
from pathlib import Path
from typing import Any

from core.types import Document
from libs.loader.base_loader import (
    BaseLoader,
    FileTooLargeError,
    LoadError,
    UnsupportedFormatError,
)
from observability.logger import get_logger

logger = get_logger(__name__)


class PdfLoader(BaseLoader):
    """PDF document loader using MarkItDown.

    Attributes:
        supported_extensions: List of supported file extensions.
        max_file_size_bytes: Largest accepted file, None for no limit.
    """

    supported_extensions = [".pdf"]

    def __init__(self, max_file_size_bytes: int | None = None) -> None:
        """Initialize the PDF loader.

        Args:
            max_file_size_bytes: Largest accepted file in bytes; None disables the check.
        """
        self._max_file_size_bytes = max_file_size_bytes

    @property
    def provider_name(self) -> str:
        return "pdf"

    @property
    def max_file_size_bytes(self) -> int | None:
        return self._max_file_size_bytes

    def _check_format(self, name: str) -> None:
        if not self.can_load(name):
            suffix = Path(name).suffix or "(none)"
            raise UnsupportedFormatError(
                f"Unsupported format: {suffix}. Only PDF files are accepted."
            )

    def _check_size(self, size: int) -> None:
        limit = self._max_file_size_bytes
        if limit is not None and size > limit:
            raise FileTooLargeError(
                f"File is {size} bytes, exceeding the limit of {limit} bytes",
                size=size,
                limit=limit,
            )

    def load(self, path: str | Path) -> Document:
        """Load a PDF document and extract its text.

        Args:
            path: Path to the PDF file.

        Returns:
            Document with the extracted text. Metadata holds source, type
            ('pdf'), file_name, file_size, page_count and source_path.

        Raises:
            LoadError: If the file cannot be read or parsed.
            UnsupportedFormatError: If the file is not a PDF.
            FileTooLargeError: If the file exceeds max_file_size_bytes.
        """
        path = Path(path)

        if not path.exists():
            raise LoadError(f"File not found: {path}")

        self._check_format(path.name)
        file_size = path.stat().st_size
        self._check_size(file_size)

        try:
            from markitdown import MarkItDown
        except ImportError as e:
            raise LoadError(
                "markitdown is not installed. "
                "Install with: pip install 'markitdown[pdf]'"
            ) from e

        file_hash = self._compute_file_hash(path)

        try:
            result = MarkItDown().convert(str(path))
        except Exception as e:
            raise LoadError(f"Failed to parse PDF {path.name}: {e}") from e

        text_content = result.text_content or ""
        metadata: dict[str, Any] = {
            "source": path.name,
            "type": "pdf",
            "file_name": path.name,
            "file_size": file_size,
            "page_count": self._count_pages(path),
            "source_path": str(path.absolute()),
        }

        logger.info(
            f"Loaded PDF {path.name}: {len(text_content)} characters, "
            f"pages={metadata['page_count']}"
        )
        return Document(id=f"pdf:{file_hash}", text=text_content, metadata=metadata)

    def load_bytes(self, data: bytes, filename: str) -> Document:
        """Load an uploaded PDF payload.

        The payload is written to a temporary file for extraction; metadata
        names the original file instead of the temporary one.
        """
        self._check_format(filename)
        self._check_size(len(data))

        fd, tmp_name = tempfile.mkstemp(suffix=".pdf")
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
            document = self.load(tmp_name)
        finally:
            os.unlink(tmp_name)

        metadata = dict(document.metadata)
        metadata["source"] = filename
        metadata["file_name"] = filename
        metadata.pop("source_path", None)
        return Document(id=document.id, text=document.text, metadata=metadata)

    def _count_pages(self, path: Path) -> int | None:
        """Return the page count, or None when PyMuPDF cannot provide it."""
        try:
            import fitz  # PyMuPDF
        except ImportError:
            logger.warning(f"PyMuPDF not available, page count unknown for {path.name}")
            return None

        try:
            with fitz.open(str(path)) as doc:
                return doc.page_count
        except Exception as e:
            logger.warning(f"Page count failed for {path.name}: {e}")
            return None

    def _compute_file_hash(self, path: Path) -> str:
        """Compute SHA256 hash of the file (first 16 hex chars)."""
        hasher = hashlib.sha256()
        with open(path, "rb") as f:
            for chunk in iter(lambda: f.read(8192), b""):
                hasher.update(chunk)
        return hasher.hexdigest()[:16]
