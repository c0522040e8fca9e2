"""Pluggable Tokenizer.

Splits sequences of characters into tokens with interchangeable separator
strategies: delimiter splitting with dropped and kept delimiters, comma separated
values with quoting and escapes, fixed-width fields, and the classic punctuation
and whitespace splitter.

Progressive API Disclosure:
- Level 1: Simple functions - tokenize(), split_csv(), split_fixed_width(), ...
- Level 2: Separators and the Tokenizer/TokenIterator that drive them
- Level 3: Configured engine - SeparatorTokenizer with TokenizerConfig and results
"""

__version__ = "0.1.0"
__author__ = "Pluggable Tokenizer Team"

# Separators and iterators come first; the configuration module builds on them.
from .tokenization import (
    DROP_EMPTY_TOKENS,
    KEEP_EMPTY_TOKENS,
    CharDelimitersSeparator,
    CharSeparator,
    EmptyTokenPolicy,
    EscapedListSeparator,
    OffsetSeparator,
    Separator,
    SeparatorTokenizer,
    StringTokenBuffer,
    TokenIterator,
    TokenizationResult,
    Tokenizer,
    TokenView,
    ViewTokenBuffer,
)

# Progressive API disclosure - Level 1: Simple functions
from .api import (
    analyze,
    split_csv,
    split_delimited,
    split_fixed_width,
    split_whitespace,
    tokenize,
)

# Configuration classes for advanced usage
from .shared.config import SeparatorKind, TokenizerConfig
from .shared.errors import (
    ConfigValidationError,
    EscapedListError,
    PreconditionViolation,
    TokenizerError,
)

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Level 1: Simple functions
    "analyze",
    "split_csv",
    "split_delimited",
    "split_fixed_width",
    "split_whitespace",
    "tokenize",

    # Level 2: Separators and iteration
    "CharDelimitersSeparator",
    "CharSeparator",
    "DROP_EMPTY_TOKENS",
    "EmptyTokenPolicy",
    "EscapedListSeparator",
    "KEEP_EMPTY_TOKENS",
    "OffsetSeparator",
    "Separator",
    "StringTokenBuffer",
    "TokenIterator",
    "TokenView",
    "Tokenizer",
    "ViewTokenBuffer",

    # Level 3: Configured engine and results
    "SeparatorKind",
    "SeparatorTokenizer",
    "TokenizationResult",
    "TokenizerConfig",

    # Errors
    "ConfigValidationError",
    "EscapedListError",
    "PreconditionViolation",
    "TokenizerError",
]
