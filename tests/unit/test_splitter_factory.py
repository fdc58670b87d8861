"""Tests for SplitterFactory and the shared provider registry behavior."""

import pytest

from core.settings import Settings
from libs.splitter.base_splitter import (
    BaseSplitter,
    SplitResult,
    SplitterConfigurationError,
    UnknownSplitterProviderError,
)
from libs.splitter.recursive_splitter import RecursiveSplitter
from libs.splitter.splitter_factory import SplitterFactory


class FixedSplitter(BaseSplitter):
    """Splitter that returns the whole text as a single chunk."""

    def __init__(self, chunk_size: int = 10, chunk_overlap: int = 0) -> None:
        self._chunk_size = chunk_size
        self._chunk_overlap = chunk_overlap

    @property
    def provider_name(self) -> str:
        return "fixed"

    @property
    def chunk_size(self) -> int:
        return self._chunk_size

    @property
    def chunk_overlap(self) -> int:
        return self._chunk_overlap

    def split_text(self, text, trace=None):
        return SplitResult(chunks=[text] if text else [])


@pytest.fixture
def fixed_provider():
    SplitterFactory.register("fixed", FixedSplitter)
    yield
    SplitterFactory.unregister("fixed")


class TestSplitterFactory:
    """Tests for provider resolution and construction."""

    def test_recursive_is_registered_on_import(self):
        assert SplitterFactory.has_provider("recursive")
        assert "recursive" in SplitterFactory.get_provider_names()

    def test_create_from_settings(self):
        settings = Settings()
        settings.ingestion.chunk_size = 400
        settings.ingestion.chunk_overlap = 40

        splitter = SplitterFactory.create(settings)

        assert isinstance(splitter, RecursiveSplitter)
        assert splitter.chunk_size == 400
        assert splitter.chunk_overlap == 40

    def test_kwargs_override_settings(self):
        splitter = SplitterFactory.create(Settings(), chunk_size=500, chunk_overlap=None)

        assert splitter.chunk_size == 500
        assert splitter.chunk_overlap == 200

    def test_provider_name_is_case_insensitive(self):
        settings = Settings()
        settings.ingestion.splitter = "Recursive"
        assert isinstance(SplitterFactory.create(settings), RecursiveSplitter)

    def test_unknown_provider_lists_available(self):
        settings = Settings()
        settings.ingestion.splitter = "semantic"

        with pytest.raises(UnknownSplitterProviderError) as exc_info:
            SplitterFactory.create(settings)
        assert "recursive" in str(exc_info.value)
        assert exc_info.value.provider == "semantic"

    def test_missing_provider_is_configuration_error(self):
        settings = Settings()
        settings.ingestion.splitter = ""

        with pytest.raises(SplitterConfigurationError) as exc_info:
            SplitterFactory.create(settings)
        assert "ingestion.splitter" in str(exc_info.value)

    def test_invalid_sizes_fail_at_creation(self):
        settings = Settings()
        settings.ingestion.chunk_size = 100
        settings.ingestion.chunk_overlap = 100

        with pytest.raises(SplitterConfigurationError):
            SplitterFactory.create(settings)

    def test_custom_provider_registration(self, fixed_provider):
        settings = Settings()
        settings.ingestion.splitter = "fixed"

        splitter = SplitterFactory.create(settings)

        assert isinstance(splitter, FixedSplitter)
        assert splitter.chunk_size == 1000

    def test_unregister_unknown_returns_false(self):
        assert SplitterFactory.unregister("does-not-exist") is False
