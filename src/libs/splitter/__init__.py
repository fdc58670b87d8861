# Splitter - Text splitting interfaces

from libs.splitter.base_splitter import (
    BaseSplitter,
    SplitResult,
    SplitterError,
    SplitterConfigurationError,
    UnknownSplitterProviderError,
)

from libs.splitter.recursive_splitter import (
    RecursiveSplitter,
)

from libs.splitter.splitter_factory import (
    SplitterFactory,
)

__all__ = [
    # Base
    "BaseSplitter",
    "SplitResult",
    "SplitterError",
    "SplitterConfigurationError",
    "UnknownSplitterProviderError",
    # Implementations
    "RecursiveSplitter",
    # Factory
    "SplitterFactory",
]
