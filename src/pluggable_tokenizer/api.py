"""One-call tokenization functions.

These cover the common cases without building separators or iterators by hand.
They raise ``EscapedListError`` on malformed input; ``analyze`` instead returns a
``TokenizationResult`` carrying diagnostics.
"""

import string
from typing import Any, Iterable, List, Optional, Union

from .shared.config import TokenizerConfig
from .tokenization import (
    CharSeparator,
    EmptyTokenPolicy,
    EscapedListSeparator,
    OffsetSeparator,
    Separator,
    SeparatorTokenizer,
    TokenizationResult,
    Tokenizer,
)

Source = Union[str, bytes, bytearray, Iterable[Any]]


def tokenize(source: Source, separator: Optional[Separator] = None) -> List[Any]:
    """Split ``source`` into a list of tokens.

    Args:
        source: ``str``, ``bytes`` or an iterable of code units
        separator: Separator to use; punctuation and whitespace splitting by default

    Returns:
        The tokens, of the same type as ``source`` for ``str`` and ``bytes`` input

    Examples:
        >>> tokenize("This is,  a test")
        ['This', 'is', ',', 'a', 'test']
        >>> tokenize("12252001", OffsetSeparator([2, 2, 4]))
        ['12', '25', '2001']
    """
    return Tokenizer(source, separator or CharSeparator()).tokens()


def split_csv(
    text: Source,
    separator: str = ",",
    quote: str = '"',
    escape: str = "\\"
) -> List[Any]:
    """Split one line of comma separated values.

    Examples:
        >>> split_csv('Field 1,"embedded,comma",3')
        ['Field 1', 'embedded,comma', '3']
    """
    return tokenize(text, EscapedListSeparator(escape, separator, quote))


def split_fixed_width(
    text: Source,
    offsets: Iterable[int],
    wrap_offsets: bool = True,
    return_partial_last: bool = True
) -> List[Any]:
    """Split ``text`` into fields of the given widths."""
    return tokenize(text, OffsetSeparator(offsets, wrap_offsets, return_partial_last))


def split_delimited(
    text: Source,
    dropped_delims: str,
    kept_delims: str = "",
    keep_empty_tokens: bool = False
) -> List[Any]:
    """Split on explicit delimiters, strtok style.

    Examples:
        >>> split_delimited("a,,b|c", ",", "|")
        ['a', 'b', '|', 'c']
        >>> split_delimited("a,,b", ",", keep_empty_tokens=True)
        ['a', '', 'b']
    """
    policy = EmptyTokenPolicy.KEEP if keep_empty_tokens else EmptyTokenPolicy.DROP
    return tokenize(text, CharSeparator(dropped_delims, kept_delims, policy))


def split_whitespace(text: Source) -> List[Any]:
    """Split on ASCII whitespace only; punctuation stays inside tokens."""
    return split_delimited(text, string.whitespace)


def analyze(
    source: Source,
    config: Optional[TokenizerConfig] = None,
    correlation_id: Optional[str] = None
) -> TokenizationResult:
    """Tokenize with a configuration and return a result with diagnostics.

    Args:
        source: ``str``, ``bytes`` or an iterable of code units
        config: Tokenizer configuration; the default splits on punctuation and
            whitespace with the legacy delimiter separator
        correlation_id: Optional correlation ID for request tracking

    Returns:
        TokenizationResult; malformed input gives ``success=False`` with the tokens
        found before the error
    """
    return SeparatorTokenizer(config, correlation_id).tokenize(source)
