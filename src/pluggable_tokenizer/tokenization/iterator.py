"""Token iteration over a range driven by a separator.

``TokenIterator`` owns a copy of the separator, a cursor, the end sentinel and a
token buffer, and calls the separator once per step. It supports both the Python
iterator protocol and an explicit ``current``/``advance``/``at_end`` interface.
``Tokenizer`` is the re-iterable convenience wrapper around a source and separator.
"""

import copy
from typing import Any, Callable, Iterable, Iterator, List, Optional, Union

from pluggable_tokenizer.shared.errors import PreconditionViolation

from .buffers import StringTokenBuffer, TokenBuffer
from .cursor import source_range
from .separators import CharDelimitersSeparator, Separator

BufferFactory = Callable[[Union[str, bytes]], TokenBuffer]


class TokenIterator:
    """Iterate the tokens a separator finds between ``begin`` and ``end``.

    The separator is copied and reset on the first step, so the instance passed in
    is never mutated. Steps are taken lazily: an ``EscapedListError`` surfaces on the
    call that reaches the bad escape, after which the iterator is exhausted.
    """

    def __init__(
        self,
        separator: Separator,
        begin: Any,
        end: Any,
        buffer_factory: BufferFactory = StringTokenBuffer
    ) -> None:
        """Initialize the iterator.

        Args:
            separator: Separator to drive
            begin: Cursor at the start of the range
            end: End sentinel of the range
            buffer_factory: Builds the token buffer from the empty source value
        """
        self.separator = copy.copy(separator)
        self.cursor = begin.copy()
        self.end = end
        self.buffer_factory = buffer_factory
        self.token: Optional[TokenBuffer] = None
        self.separator_calls = 0
        self._started = False
        self._valid = False
        self._yielded = False

    def _step(self) -> None:
        self._valid = False
        self.separator_calls += 1
        self._valid = self.separator.next(self.cursor, self.end, self.token)

    def _ensure_started(self) -> None:
        if self._started:
            return
        self._started = True
        self.separator.reset()
        self.token = self.buffer_factory(self.cursor.empty_value())
        if self.cursor != self.end:
            self._step()

    @property
    def at_end(self) -> bool:
        """True once the separator has reported that no token is left."""
        self._ensure_started()
        return not self._valid

    @property
    def current(self) -> Any:
        """The token at the current position."""
        self._ensure_started()
        if not self._valid:
            raise PreconditionViolation("Cannot dereference an exhausted token iterator")
        return self.token.value

    def advance(self) -> "TokenIterator":
        """Move to the next token."""
        self._ensure_started()
        if not self._valid:
            raise PreconditionViolation("Cannot advance an exhausted token iterator")
        self._step()
        self._yielded = False
        return self

    def __iter__(self) -> "TokenIterator":
        return self

    def __next__(self) -> Any:
        self._ensure_started()
        if self._yielded and self._valid:
            self._step()
        if not self._valid:
            raise StopIteration
        self._yielded = True
        return self.token.value

    def __copy__(self) -> "TokenIterator":
        clone = TokenIterator.__new__(TokenIterator)
        clone.__dict__.update(self.__dict__)
        clone.separator = copy.copy(self.separator)
        clone.cursor = self.cursor.copy()
        clone.token = copy.copy(self.token)
        return clone

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TokenIterator):
            return NotImplemented
        self._ensure_started()
        other._ensure_started()
        if self._valid and other._valid:
            return self.cursor == other.cursor and self.end == other.end
        return self._valid == other._valid

    __hash__ = None

    def __repr__(self) -> str:
        state = "unstarted" if not self._started else ("valid" if self._valid else "at_end")
        return f"TokenIterator({self.separator!r}, {state})"


class Tokenizer:
    """Re-iterable view of the tokens in ``source``.

    ``str`` and ``bytes`` sources are indexed directly and can be iterated any number
    of times. Any other iterable of code units is read lazily, once.

    Example:
        >>> list(Tokenizer("This,,is, a.test.."))
        ['This', 'is', 'a', 'test']
    """

    def __init__(
        self,
        source: Union[str, bytes, Iterable[Any]],
        separator: Optional[Separator] = None,
        buffer_factory: BufferFactory = StringTokenBuffer
    ) -> None:
        self.separator: Separator = separator or CharDelimitersSeparator()
        self.buffer_factory = buffer_factory
        self.assign(source)

    def assign(
        self,
        source: Union[str, bytes, Iterable[Any]],
        separator: Optional[Separator] = None
    ) -> None:
        """Point the tokenizer at a new source and optionally a new separator."""
        self.source = source
        if separator is not None:
            self.separator = separator

    def __iter__(self) -> Iterator[Any]:
        begin, end = source_range(self.source)
        return TokenIterator(self.separator, begin, end, self.buffer_factory)

    def tokens(self) -> List[Any]:
        """Collect every token into a list."""
        return list(self)

    def __repr__(self) -> str:
        return f"Tokenizer(separator={self.separator!r})"
