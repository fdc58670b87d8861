"""Tests for configuration loading and validation.

These tests verify that:
1. Settings can be loaded from YAML files
2. Required fields are validated
3. Error messages are clear and include field paths
"""

from pathlib import Path

import pytest

from core.settings import (
    EmbeddingConfig,
    LLMConfig,
    Settings,
    SettingsError,
    SettingsFileError,
    SettingsValidationError,
    get_effective_settings,
    load_settings,
    validate_settings,
)

MINIMAL_YAML = """
llm:
  provider: openai
  model: gpt-4o-mini
embedding:
  provider: openai
"""


@pytest.fixture
def write_yaml(tmp_path: Path):
    def _write(content: str) -> Path:
        path = tmp_path / "settings.yaml"
        path.write_text(content, encoding="utf-8")
        return path

    return _write


class TestSettingsLoading:
    """Test loading settings from YAML files."""

    def test_load_default_settings(self, config_path: Path) -> None:
        """Test loading the shipped settings.yaml file."""
        settings = load_settings(config_path / "settings.yaml")

        assert settings.llm.provider == "gemini"
        assert settings.llm.model == "gemini-2.5-flash"
        assert settings.ingestion.chunk_size == 1000
        assert settings.ingestion.chunk_overlap == 200
        assert settings.retrieval.top_k == 3
        assert settings.memory.window_turns == 3
        assert settings.memory.max_message_chars == 200
        assert settings.chat.deadline_seconds == 55
        assert settings.vector_index.provider == "brute_force"

    def test_load_minimal_settings_uses_defaults(self, write_yaml) -> None:
        settings = load_settings(write_yaml(MINIMAL_YAML))

        assert settings.llm.provider == "openai"
        assert settings.embedding.provider == "openai"
        assert settings.retrieval.summary_strategy == "all_chunks"
        assert settings.retrieval.summary_max_chars == 8000
        assert settings.retrieval.summary_timeout == 90.0
        assert settings.ingestion.max_file_size_mb == 10.0
        assert settings.memory.read_timeout == 5.0

    def test_unknown_keys_are_ignored(self, write_yaml) -> None:
        settings = load_settings(write_yaml(MINIMAL_YAML + "\nchat:\n  deadline_seconds: 10\n  legacy: 1\n"))
        assert settings.chat.deadline_seconds == 10

    def test_load_nonexistent_file(self) -> None:
        with pytest.raises(SettingsFileError) as exc_info:
            load_settings("/nonexistent/path/settings.yaml")
        assert "not found" in str(exc_info.value).lower()

    def test_load_invalid_yaml(self, write_yaml) -> None:
        with pytest.raises(SettingsFileError):
            load_settings(write_yaml("invalid: yaml: content: [[["))

    def test_non_mapping_document(self, write_yaml) -> None:
        with pytest.raises(SettingsFileError):
            load_settings(write_yaml("- just\n- a list\n"))

    def test_non_mapping_section(self, write_yaml) -> None:
        with pytest.raises(SettingsFileError) as exc_info:
            load_settings(write_yaml(MINIMAL_YAML + "memory: 3\n"))
        assert "memory" in str(exc_info.value)

    def test_errors_share_base_class(self) -> None:
        assert issubclass(SettingsFileError, SettingsError)
        assert issubclass(SettingsValidationError, SettingsError)


class TestSettingsValidation:
    """Test settings validation."""

    def test_validate_minimal_settings(self) -> None:
        settings = Settings(
            llm=LLMConfig(provider="openai", model="gpt-4o-mini"),
            embedding=EmbeddingConfig(provider="openai"),
        )
        # Should not raise
        validate_settings(settings)

    def test_missing_required_field_llm_provider(self) -> None:
        settings = Settings(
            llm=LLMConfig(model="gpt-4o-mini"),
            embedding=EmbeddingConfig(provider="openai"),
        )
        with pytest.raises(SettingsValidationError) as exc_info:
            validate_settings(settings)
        assert "llm.provider" in str(exc_info.value)
        assert exc_info.value.missing_fields == ["llm.provider"]

    def test_missing_multiple_required_fields(self) -> None:
        with pytest.raises(SettingsValidationError) as exc_info:
            validate_settings(Settings())
        assert exc_info.value.missing_fields == [
            "llm.provider",
            "llm.model",
            "embedding.provider",
        ]

    def test_empty_string_counts_as_missing(self) -> None:
        settings = Settings(
            llm=LLMConfig(provider="openai", model=""),
            embedding=EmbeddingConfig(provider="openai"),
        )
        with pytest.raises(SettingsValidationError) as exc_info:
            validate_settings(settings)
        assert exc_info.value.missing_fields == ["llm.model"]

    def test_load_reports_missing_fields(self, write_yaml) -> None:
        with pytest.raises(SettingsValidationError) as exc_info:
            load_settings(write_yaml("llm:\n  provider: openai\n"))
        assert "embedding.provider" in exc_info.value.missing_fields


class TestEffectiveSettings:
    """Test runtime overrides."""

    def test_dotted_overrides(self, write_yaml) -> None:
        settings = get_effective_settings(
            write_yaml(MINIMAL_YAML),
            overrides={"retrieval.top_k": 5, "vector_index.provider": "chroma"},
        )
        assert settings.retrieval.top_k == 5
        assert settings.vector_index.provider == "chroma"

    def test_nested_overrides(self, write_yaml) -> None:
        settings = get_effective_settings(
            write_yaml(MINIMAL_YAML), overrides={"memory": {"window_turns": 5}}
        )
        assert settings.memory.window_turns == 5

    def test_unknown_override_field(self, write_yaml) -> None:
        with pytest.raises(SettingsValidationError) as exc_info:
            get_effective_settings(write_yaml(MINIMAL_YAML), overrides={"retrieval.fusion_k": 3})
        assert exc_info.value.missing_fields == ["retrieval.fusion_k"]

    def test_override_cannot_clear_required_field(self, write_yaml) -> None:
        with pytest.raises(SettingsValidationError):
            get_effective_settings(write_yaml(MINIMAL_YAML), overrides={"llm.provider": None})
