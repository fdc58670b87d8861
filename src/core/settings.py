"""Configuration management for the document Q&A retrieval core.

This module provides the Settings dataclass and loading/validation functions.
All configuration values are read from config/settings.yaml.

Design Principles:
    - Config-Driven: All values sourced from settings.yaml
    - Fail-Fast: Missing required fields cause immediate failure
    - Clear Errors: Error messages include field paths (e.g., 'embedding.provider')
"""

from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

import yaml


@dataclass
class LLMConfig:
    """Generation provider configuration.

    Attributes:
        provider: LLM provider type (openai, gemini, ollama) - REQUIRED
        model: Model name to use - REQUIRED
        temperature: Sampling temperature
        max_tokens: Maximum tokens to generate
        api_key: API key (environment variable preferred)
        base_url: Base URL for API requests
        timeout: Transport timeout of a single request in seconds
        generation_timeout: Deadline for one guarded generation call
        rate_limit_retries: Extra attempts after a rate-limited generation
        retry_backoff_seconds: Wait before each rate-limit retry
    """
    provider: str | None = None
    model: str | None = None
    temperature: float = 0.7
    max_tokens: int = 2048
    api_key: str | None = None
    base_url: str | None = None
    timeout: float = 60.0
    generation_timeout: float = 60.0
    rate_limit_retries: int = 1
    retry_backoff_seconds: float = 2.0


@dataclass
class EmbeddingConfig:
    """Embedding provider configuration.

    Attributes:
        provider: Embedding provider type (openai, gemini, ollama) - REQUIRED
        model: Model name
        dimensions: Requested vector dimensions (provider default when None)
        api_key: API key for remote providers
        base_url: Base URL for API requests
        timeout: Transport timeout of a single request in seconds
        call_timeout: Deadline for one guarded embedding call
    """
    provider: str | None = None
    model: str | None = None
    dimensions: int | None = None
    api_key: str | None = None
    base_url: str | None = None
    timeout: float = 30.0
    call_timeout: float = 60.0


@dataclass
class VectorIndexConfig:
    """Vector index configuration.

    Attributes:
        provider: Index implementation (brute_force, chroma)
    """
    provider: str = "brute_force"


@dataclass
class IngestionConfig:
    """Ingestion pipeline configuration.

    Attributes:
        chunk_size: Target chunk size in characters
        chunk_overlap: Overlap between chunks
        splitter: Splitter type (recursive)
        batch_size: Chunks per embedding request
        max_file_size_mb: Largest accepted PDF upload
        preview_chars: Length of the text preview returned after ingest
    """
    chunk_size: int = 1000
    chunk_overlap: int = 200
    splitter: str = "recursive"
    batch_size: int = 100
    max_file_size_mb: float = 10.0
    preview_chars: int = 500


@dataclass
class RetrievalConfig:
    """Query and summarization configuration.

    Attributes:
        top_k: Fragments retrieved for a question
        context_max_chars: Upper bound on the assembled context block
        summary_strategy: all_chunks or top_k
        summary_top_k: Fragments sampled by the top_k summary strategy
        summary_max_chars: Character budget of the summary prompt content
        summary_timeout: Deadline for whole-document summary generation
    """
    top_k: int = 3
    context_max_chars: int = 8000
    summary_strategy: str = "all_chunks"
    summary_top_k: int = 10
    summary_max_chars: int = 8000
    summary_timeout: float = 90.0


@dataclass
class MemoryConfig:
    """Conversation memory configuration.

    Attributes:
        window_turns: Most recent turns included in a chat prompt
        max_message_chars: Per-message truncation inside a chat prompt
        read_timeout: Deadline for reading the memory before degrading
        max_stored_turns: Turns retained before the oldest are pruned
    """
    window_turns: int = 3
    max_message_chars: int = 200
    read_timeout: float = 5.0
    max_stored_turns: int = 100


@dataclass
class ChatConfig:
    """Chat configuration.

    Attributes:
        deadline_seconds: Deadline raced against a chat generation call
    """
    deadline_seconds: float = 55.0


@dataclass
class ObservabilityConfig:
    """Observability and logging configuration.

    Attributes:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_file: Optional log file path
        trace_enabled: Whether request traces are recorded and logged
    """
    log_level: str = "INFO"
    log_file: str | None = None
    trace_enabled: bool = True


@dataclass
class Settings:
    """Application settings container.

    Attributes:
        llm: LLM configuration
        embedding: Embedding configuration
        vector_index: Vector index configuration
        ingestion: Ingestion configuration
        retrieval: Retrieval configuration
        memory: Conversation memory configuration
        chat: Chat configuration
        observability: Observability configuration
    """
    llm: LLMConfig = field(default_factory=LLMConfig)
    embedding: EmbeddingConfig = field(default_factory=EmbeddingConfig)
    vector_index: VectorIndexConfig = field(default_factory=VectorIndexConfig)
    ingestion: IngestionConfig = field(default_factory=IngestionConfig)
    retrieval: RetrievalConfig = field(default_factory=RetrievalConfig)
    memory: MemoryConfig = field(default_factory=MemoryConfig)
    chat: ChatConfig = field(default_factory=ChatConfig)
    observability: ObservabilityConfig = field(default_factory=ObservabilityConfig)


class SettingsError(Exception):
    """Base exception for settings-related errors."""

    pass


class SettingsFileError(SettingsError):
    """Raised when settings file cannot be read or parsed."""

    pass


class SettingsValidationError(SettingsError):
    """Raised when settings validation fails."""

    def __init__(self, message: str, missing_fields: list[str] | None = None) -> None:
        super().__init__(message)
        self.missing_fields = missing_fields or []


# Fields that have no usable default
REQUIRED_FIELDS: tuple[str, ...] = (
    "llm.provider",
    "llm.model",
    "embedding.provider",
)


def _flatten_dict(d: dict[str, Any], prefix: str = "") -> dict[str, Any]:
    """Flatten a nested dictionary to dot-notation keys.

    Args:
        d: Dictionary to flatten
        prefix: Prefix for nested keys

    Returns:
        Flattened dictionary with dot-notation keys
    """
    result: dict[str, Any] = {}
    for key, value in d.items():
        new_key = f"{prefix}.{key}" if prefix else key
        if isinstance(value, dict):
            result.update(_flatten_dict(value, new_key))
        else:
            result[new_key] = value
    return result


def validate_settings(settings: Settings) -> None:
    """Validate required fields in settings.

    Args:
        settings: Settings object to validate

    Raises:
        SettingsValidationError: If required fields are missing

    Example:
        >>> settings = load_settings("config/settings.yaml")
        >>> validate_settings(settings)  # May raise if required fields missing
    """
    missing: list[str] = []

    for field_path in REQUIRED_FIELDS:
        current: Any = settings
        for part in field_path.split("."):
            current = getattr(current, part, None)
            if current is None:
                break
        if current is None or current == "":
            missing.append(field_path)

    if missing:
        field_list = ", ".join(missing)
        raise SettingsValidationError(
            f"Missing required configuration fields: {field_list}",
            missing_fields=missing
        )


def _build_section(section_cls: type, data: dict[str, Any] | None, name: str) -> Any:
    """Build one settings section, ignoring keys the dataclass does not know.

    Raises:
        SettingsFileError: If the YAML section is not a mapping.
    """
    if data is None:
        return section_cls()
    if not isinstance(data, dict):
        raise SettingsFileError(
            f"Section '{name}' must be a mapping, got {type(data).__name__}"
        )
    known = {f.name for f in fields(section_cls)}
    return section_cls(**{k: v for k, v in data.items() if k in known})


def _yaml_to_settings(data: dict[str, Any]) -> Settings:
    """Convert YAML dictionary to Settings object.

    Args:
        data: Parsed YAML dictionary

    Returns:
        Settings object
    """
    sections = {f.name: f for f in fields(Settings)}
    kwargs: dict[str, Any] = {}
    for name, section_field in sections.items():
        section_cls = section_field.default_factory  # type: ignore[misc]
        kwargs[name] = _build_section(section_cls, data.get(name), name)
    return Settings(**kwargs)


def load_settings(path: str | Path = "config/settings.yaml") -> Settings:
    """Load settings from a YAML file.

    Args:
        path: Path to the settings YAML file (default: config/settings.yaml)

    Returns:
        Settings object with all configuration loaded

    Raises:
        SettingsFileError: If the file cannot be read or parsed
        SettingsValidationError: If required fields are missing

    Example:
        >>> settings = load_settings()
        >>> print(settings.llm.provider)
        gemini
    """
    path = Path(path)

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except FileNotFoundError as e:
        raise SettingsFileError(f"Settings file not found: {path}") from e
    except yaml.YAMLError as e:
        raise SettingsFileError(f"Invalid YAML in settings file: {e}") from e

    if not isinstance(data, dict):
        raise SettingsFileError(f"Settings file must contain a mapping: {path}")

    settings = _yaml_to_settings(data)
    validate_settings(settings)

    return settings


def get_effective_settings(
    path: str | Path = "config/settings.yaml",
    overrides: dict[str, Any] | None = None
) -> Settings:
    """Load settings with optional runtime overrides.

    Args:
        path: Path to the settings YAML file
        overrides: Optional dictionary of field paths to override.
                   Use dot-notation (e.g., {"llm.provider": "ollama"})
                   or nested dictionaries.

    Returns:
        Settings object with overrides applied

    Raises:
        SettingsValidationError: If an override names an unknown field

    Example:
        >>> settings = get_effective_settings(
        ...     overrides={"retrieval.top_k": 5}
        ... )
        >>> settings.retrieval.top_k
        5
    """
    settings = load_settings(path)

    if overrides:
        for field_path, value in _flatten_dict(overrides).items():
            parts = field_path.split(".")
            obj: Any = settings
            for part in parts[:-1]:
                obj = getattr(obj, part, None)
            if obj is None or not hasattr(obj, parts[-1]):
                raise SettingsValidationError(
                    f"Unknown configuration field: {field_path}",
                    missing_fields=[field_path]
                )
            setattr(obj, parts[-1], value)
        validate_settings(settings)

    return settings
