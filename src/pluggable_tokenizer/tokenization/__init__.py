"""Tokenization engine: separators and the machinery that drives them.

Key Components:
    CharSeparator: Dropped/kept delimiter splitting with an empty-token policy
    EscapedListSeparator: CSV splitting with quotes and escapes
    OffsetSeparator: Fixed-width splitting
    CharDelimitersSeparator: Returnable/nonreturnable delimiter splitting
    TokenIterator, Tokenizer: Drive a separator over a source
    SeparatorTokenizer: Configured engine returning TokenizationResult objects
"""

# Separators must be importable before the API layer, which pulls in the
# configuration module that builds them.
from .buffers import (
    StringTokenBuffer,
    TokenBuffer,
    TokenView,
    ViewTokenBuffer,
)
from .cursor import (
    SequenceCursor,
    StreamCursor,
    StreamEnd,
    sequence_range,
    source_range,
    stream_range,
)
from .separators import (
    DROP_EMPTY_TOKENS,
    KEEP_EMPTY_TOKENS,
    CharDelimitersSeparator,
    CharSeparator,
    CharSeparatorState,
    EmptyTokenPolicy,
    EscapedListSeparator,
    EscapedListState,
    OffsetSeparator,
    OffsetState,
    Separator,
)
from .iterator import (
    TokenIterator,
    Tokenizer,
)
from .api import (
    SeparatorTokenizer,
    TokenizationResult,
)

__all__ = [
    "DROP_EMPTY_TOKENS",
    "KEEP_EMPTY_TOKENS",
    "CharDelimitersSeparator",
    "CharSeparator",
    "CharSeparatorState",
    "EmptyTokenPolicy",
    "EscapedListSeparator",
    "EscapedListState",
    "OffsetSeparator",
    "OffsetState",
    "Separator",
    "SeparatorTokenizer",
    "SequenceCursor",
    "StreamCursor",
    "StreamEnd",
    "StringTokenBuffer",
    "TokenBuffer",
    "TokenIterator",
    "TokenView",
    "TokenizationResult",
    "Tokenizer",
    "ViewTokenBuffer",
    "sequence_range",
    "source_range",
    "stream_range",
]
