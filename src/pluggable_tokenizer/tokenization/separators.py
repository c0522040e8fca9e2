"""Separator state machines.

A separator is called repeatedly by a token iterator. Each call moves the cursor
forward, writes the next token into the token buffer and reports whether a token was
produced. Once a call reports ``False`` at the end of the input, further calls keep
reporting ``False`` until ``reset()`` is invoked.

Four separators share that contract without sharing a base class:

- ``CharSeparator``: dropped/kept delimiter characters with an empty-token policy
- ``EscapedListSeparator``: comma separated values with quoting and escapes
- ``OffsetSeparator``: fixed field widths, optionally wrapping around
- ``CharDelimitersSeparator``: the older returnable/nonreturnable delimiter splitter

Each instance keeps its iteration state in a small dataclass. Copying a separator
with ``copy.copy`` copies that state, so the copy iterates independently.
"""

import copy
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Iterable, Optional, Protocol, Tuple, Union, runtime_checkable

from pluggable_tokenizer.character import (
    CharacterClassifier,
    code_point,
    code_point_set,
    default_classifier,
)
from pluggable_tokenizer.shared.errors import EscapedListError, PreconditionViolation

from .buffers import TokenBuffer

DelimiterSpec = Union[str, bytes, Iterable[Any], None]

_ESCAPE_NEWLINE = ord("n")
_NEWLINE = "\n"


class EmptyTokenPolicy(Enum):
    """Whether adjacent or boundary delimiters produce empty tokens."""

    DROP = auto()   # Collapse runs of delimiters
    KEEP = auto()   # Emit an empty token for every empty field


DROP_EMPTY_TOKENS = EmptyTokenPolicy.DROP
KEEP_EMPTY_TOKENS = EmptyTokenPolicy.KEEP


@runtime_checkable
class Separator(Protocol):
    """Contract between a separator and the iterator driving it."""

    kind: str

    def reset(self) -> None:
        ...

    def next(self, cursor: Any, end: Any, token: TokenBuffer) -> bool:
        ...


def _clone(separator: Any) -> Any:
    clone = separator.__class__.__new__(separator.__class__)
    clone.__dict__.update(separator.__dict__)
    if "state" in separator.__dict__:
        clone.state = copy.copy(separator.state)
    return clone


@dataclass
class CharSeparatorState:
    """Iteration state of a ``CharSeparator``."""

    output_done: bool = False


class CharSeparator:
    """Split on dropped and kept delimiter characters.

    Dropped delimiters are consumed and never reported. Kept delimiters are reported
    as one-character tokens. Built without any delimiter set, punctuation is kept and
    whitespace is dropped according to ``classifier``; when only one of the sets is
    given the other one is empty.

    Example:
        >>> sep = CharSeparator("-;", "|", EmptyTokenPolicy.KEEP)
    """

    kind = "char"

    def __init__(
        self,
        dropped_delims: DelimiterSpec = None,
        kept_delims: DelimiterSpec = None,
        empty_tokens: EmptyTokenPolicy = EmptyTokenPolicy.DROP,
        classifier: Optional[CharacterClassifier] = None
    ) -> None:
        """Initialize the separator.

        Args:
            dropped_delims: Delimiters that are skipped
            kept_delims: Delimiters that are returned as tokens
            empty_tokens: Empty token policy
            classifier: Classifier used when no delimiter set is given
        """
        use_classifier = dropped_delims is None and kept_delims is None
        self.dropped_delims = code_point_set(dropped_delims)
        self.kept_delims = code_point_set(kept_delims)
        self.use_ispunct = use_classifier
        self.use_isspace = use_classifier
        self.empty_tokens = EmptyTokenPolicy(empty_tokens)
        self.classifier = classifier or default_classifier()
        self.state = CharSeparatorState()

    def reset(self) -> None:
        self.state.output_done = False

    def is_kept(self, char: Any) -> bool:
        if self.kept_delims:
            return code_point(char) in self.kept_delims
        if self.use_ispunct:
            return self.classifier.is_punct(char)
        return False

    def is_dropped(self, char: Any) -> bool:
        if self.dropped_delims:
            return code_point(char) in self.dropped_delims
        if self.use_isspace:
            return self.classifier.is_space(char)
        return False

    def _scan_field(self, cursor: Any, end: Any) -> None:
        while (
            cursor != end
            and not self.is_dropped(cursor.current)
            and not self.is_kept(cursor.current)
        ):
            cursor.advance()

    def next(self, cursor: Any, end: Any, token: TokenBuffer) -> bool:
        token.clear()

        if self.empty_tokens is EmptyTokenPolicy.DROP:
            while cursor != end and self.is_dropped(cursor.current):
                cursor.advance()
            if cursor == end:
                return False
            start = cursor.copy()
            if self.is_kept(cursor.current):
                cursor.advance()
            else:
                self._scan_field(cursor, end)
            token.assign_range(start, cursor)
            return True

        state = self.state
        start = cursor.copy()

        # The empty field after the last delimiter.
        if cursor == end:
            if state.output_done:
                return False
            state.output_done = True
            token.assign_range(start, cursor)
            return True

        char = cursor.current
        if self.is_kept(char):
            if state.output_done:
                cursor.advance()
                state.output_done = False
            else:
                state.output_done = True
        elif not state.output_done and self.is_dropped(char):
            state.output_done = True
        else:
            if self.is_dropped(char):
                cursor.advance()
                start = cursor.copy()
            self._scan_field(cursor, end)
            state.output_done = True

        token.assign_range(start, cursor)
        return True

    __call__ = next
    __copy__ = _clone

    def __repr__(self) -> str:
        return (
            f"CharSeparator(dropped={sorted(self.dropped_delims)}, "
            f"kept={sorted(self.kept_delims)}, empty_tokens={self.empty_tokens.name}, "
            f"use_classifier={self.use_ispunct})"
        )


@dataclass
class EscapedListState:
    """Iteration state of an ``EscapedListSeparator``."""

    # Set after a field separator: one more (possibly empty) field follows.
    pending_field: bool = False


class EscapedListSeparator:
    """Split comma separated values with quotes and backslash escapes.

    Field separators inside quotes are literal. Quote characters toggle quoting and
    are never part of a token. An escape character must be followed by ``n`` (a
    newline) or by an escape, separator or quote character, which is taken
    literally; anything else raises ``EscapedListError``. A quote left open runs to
    the end of the input.
    """

    kind = "escaped_list"

    def __init__(
        self,
        escape: DelimiterSpec = "\\",
        separator: DelimiterSpec = ",",
        quote: DelimiterSpec = '"'
    ) -> None:
        """Initialize the separator.

        Args:
            escape: Escape characters
            separator: Field separator characters
            quote: Quote characters
        """
        self.escape = code_point_set(escape)
        self.separator = code_point_set(separator)
        self.quote = code_point_set(quote)
        self.state = EscapedListState()

    def reset(self) -> None:
        self.state.pending_field = False

    def is_escape(self, char: Any) -> bool:
        return code_point(char) in self.escape

    def is_separator(self, char: Any) -> bool:
        return code_point(char) in self.separator

    def is_quote(self, char: Any) -> bool:
        return code_point(char) in self.quote

    def _do_escape(self, cursor: Any, end: Any, token: TokenBuffer) -> None:
        cursor.advance()
        if cursor == end:
            raise EscapedListError(
                EscapedListError.CANNOT_END_WITH_ESCAPE, position=cursor.position
            )
        char = cursor.current
        if code_point(char) == _ESCAPE_NEWLINE:
            token.append(_NEWLINE if isinstance(char, str) else ord(_NEWLINE))
        elif self.is_quote(char) or self.is_separator(char) or self.is_escape(char):
            token.append(char)
        else:
            raise EscapedListError(
                EscapedListError.UNKNOWN_ESCAPE_SEQUENCE, position=cursor.position
            )

    def next(self, cursor: Any, end: Any, token: TokenBuffer) -> bool:
        in_quote = False
        token.clear()

        if cursor == end:
            if self.state.pending_field:
                self.state.pending_field = False
                return True
            return False

        self.state.pending_field = False
        while cursor != end:
            char = cursor.current
            if self.is_escape(char):
                self._do_escape(cursor, end, token)
            elif self.is_separator(char):
                if not in_quote:
                    cursor.advance()
                    self.state.pending_field = True
                    return True
                token.append(char)
            elif self.is_quote(char):
                in_quote = not in_quote
            else:
                token.append(char)
            cursor.advance()
        return True

    __call__ = next
    __copy__ = _clone

    def __repr__(self) -> str:
        return (
            f"EscapedListSeparator(escape={sorted(self.escape)}, "
            f"separator={sorted(self.separator)}, quote={sorted(self.quote)})"
        )


@dataclass
class OffsetState:
    """Iteration state of an ``OffsetSeparator``."""

    current_offset: int = 0


class OffsetSeparator:
    """Split into fields of fixed widths taken from an offset table."""

    kind = "offset"

    def __init__(
        self,
        offsets: Iterable[int] = (1,),
        wrap_offsets: bool = True,
        return_partial_last: bool = True
    ) -> None:
        """Initialize the separator.

        Args:
            offsets: Field widths, used in order
            wrap_offsets: Start over at the first width after the last one
            return_partial_last: Report a final field shorter than its width

        Raises:
            PreconditionViolation: If the table is empty or holds a width below 1
        """
        self.offsets: Tuple[int, ...] = tuple(offsets)
        if not self.offsets:
            raise PreconditionViolation("Offset table must not be empty")
        for width in self.offsets:
            if isinstance(width, bool) or not isinstance(width, int) or width < 1:
                raise PreconditionViolation(f"Offset widths must be positive integers, got {width!r}")
        self.wrap_offsets = wrap_offsets
        self.return_partial_last = return_partial_last
        self.state = OffsetState()

    def reset(self) -> None:
        self.state.current_offset = 0

    def next(self, cursor: Any, end: Any, token: TokenBuffer) -> bool:
        token.clear()
        start = cursor.copy()

        if cursor == end:
            return False

        if self.state.current_offset == len(self.offsets):
            if not self.wrap_offsets:
                return False
            self.state.current_offset = 0

        width = self.offsets[self.state.current_offset]
        taken = 0
        while taken < width and cursor != end:
            cursor.advance()
            taken += 1
        token.assign_range(start, cursor)

        # The cursor stays advanced; the iterator treats this as the end.
        if taken < width and not self.return_partial_last:
            return False

        self.state.current_offset += 1
        return True

    __call__ = next
    __copy__ = _clone

    def __repr__(self) -> str:
        return (
            f"OffsetSeparator(offsets={list(self.offsets)}, wrap_offsets={self.wrap_offsets}, "
            f"return_partial_last={self.return_partial_last})"
        )


class CharDelimitersSeparator:
    """Older delimiter splitter with returnable and nonreturnable delimiters.

    Nonreturnable delimiters are always skipped. Returnable delimiters are reported
    as one-character tokens when ``return_delims`` is set and skipped otherwise.
    A delimiter set left as ``None`` falls back to punctuation (returnable) or
    whitespace (nonreturnable). Superseded by ``CharSeparator``.
    """

    kind = "char_delimiters"

    def __init__(
        self,
        return_delims: bool = False,
        returnable: DelimiterSpec = None,
        nonreturnable: DelimiterSpec = None,
        classifier: Optional[CharacterClassifier] = None
    ) -> None:
        self.return_delims = return_delims
        self.returnable = code_point_set(returnable)
        self.nonreturnable = code_point_set(nonreturnable)
        self.no_ispunct = returnable is not None
        self.no_isspace = nonreturnable is not None
        self.classifier = classifier or default_classifier()

    def reset(self) -> None:
        """Nothing to reset; this separator keeps no state between calls."""

    def is_ret(self, char: Any) -> bool:
        if self.returnable:
            return code_point(char) in self.returnable
        if self.no_ispunct:
            return False
        return self.classifier.is_punct(char)

    def is_nonret(self, char: Any) -> bool:
        if self.nonreturnable:
            return code_point(char) in self.nonreturnable
        if self.no_isspace:
            return False
        return self.classifier.is_space(char)

    def next(self, cursor: Any, end: Any, token: TokenBuffer) -> bool:
        token.clear()

        while cursor != end and (
            self.is_nonret(cursor.current)
            or (self.is_ret(cursor.current) and not self.return_delims)
        ):
            cursor.advance()

        if cursor == end:
            return False

        start = cursor.copy()
        if self.is_ret(cursor.current):
            cursor.advance()
        else:
            while (
                cursor != end
                and not self.is_nonret(cursor.current)
                and not self.is_ret(cursor.current)
            ):
                cursor.advance()
        token.assign_range(start, cursor)
        return True

    __call__ = next
    __copy__ = _clone

    def __repr__(self) -> str:
        return (
            f"CharDelimitersSeparator(return_delims={self.return_delims}, "
            f"returnable={sorted(self.returnable)}, nonreturnable={sorted(self.nonreturnable)})"
        )
