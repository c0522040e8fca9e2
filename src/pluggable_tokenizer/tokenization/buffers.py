"""Token buffer backends.

A separator writes each token through three operations: ``clear``, ``append`` one
code unit and ``assign_range`` between two cursors. ``StringTokenBuffer`` builds an
owned ``str``/``bytes`` value. ``ViewTokenBuffer`` records a ``TokenView`` into the
source sequence instead of copying it; such a view is only meaningful while the
source it points into is kept around by the caller.
"""

from typing import Any, List, Optional, Protocol, Union

from pluggable_tokenizer.shared.errors import TokenBufferError

from .cursor import SequenceCursor


class TokenBuffer(Protocol):
    """Capabilities a separator needs from its output token."""

    def clear(self) -> None:
        ...

    def append(self, char: Any) -> None:
        ...

    def assign_range(self, begin: Any, end: Any) -> None:
        ...

    @property
    def value(self) -> Any:
        ...


class StringTokenBuffer:
    """Owning token buffer producing ``str`` or ``bytes`` values."""

    def __init__(self, empty: Union[str, bytes] = "") -> None:
        """Initialize the buffer.

        Args:
            empty: Empty value of the source type, returned for empty tokens
        """
        self._empty = empty
        self._parts: List[Union[str, bytes]] = []

    def clear(self) -> None:
        self._parts.clear()

    def append(self, char: Any) -> None:
        if isinstance(char, int):
            char = bytes((char,))
        self._parts.append(char)

    def assign_range(self, begin: Any, end: Any) -> None:
        self._parts = [begin.span_to(end)]

    @property
    def value(self) -> Union[str, bytes]:
        if not self._parts:
            return self._empty
        if len(self._parts) == 1:
            return self._parts[0]
        return self._parts[0][:0].join(self._parts)

    def __len__(self) -> int:
        return sum(len(part) for part in self._parts)

    def __copy__(self) -> "StringTokenBuffer":
        clone = StringTokenBuffer(self._empty)
        clone._parts = list(self._parts)
        return clone

    def __repr__(self) -> str:
        return f"StringTokenBuffer({self.value!r})"


class TokenView:
    """Non-owning view of ``source[start:stop]``."""

    __slots__ = ("source", "start", "stop")

    def __init__(self, source: Union[str, bytes], start: int = 0, stop: int = 0) -> None:
        if not 0 <= start <= stop <= len(source):
            raise ValueError("TokenView bounds must satisfy 0 <= start <= stop <= len(source)")
        self.source = source
        self.start = start
        self.stop = stop

    def materialize(self) -> Union[str, bytes]:
        """Copy the viewed span out of the source."""
        return self.source[self.start:self.stop]

    def __len__(self) -> int:
        return self.stop - self.start

    def __str__(self) -> str:
        span = self.materialize()
        return span if isinstance(span, str) else repr(span)

    def __bytes__(self) -> bytes:
        span = self.materialize()
        return span if isinstance(span, bytes) else span.encode()

    def __eq__(self, other: object) -> bool:
        if isinstance(other, TokenView):
            return self.materialize() == other.materialize()
        if isinstance(other, (str, bytes)):
            return self.materialize() == other
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.materialize())

    def __repr__(self) -> str:
        return f"TokenView({self.materialize()!r}, start={self.start}, stop={self.stop})"


class ViewTokenBuffer:
    """Token buffer that points into the source instead of copying it.

    Only contiguous spans can be represented, so separators that build tokens one
    code unit at a time (the escaped-list separator) cannot write into it.
    """

    def __init__(self, empty: Union[str, bytes] = "") -> None:
        self._empty = empty
        self._view: Optional[TokenView] = None

    def clear(self) -> None:
        self._view = None

    def append(self, char: Any) -> None:
        raise TokenBufferError(
            "ViewTokenBuffer cannot accumulate individual characters; "
            "use StringTokenBuffer for this separator"
        )

    def assign_range(self, begin: Any, end: Any) -> None:
        if not isinstance(begin, SequenceCursor) or not isinstance(end, SequenceCursor):
            raise TokenBufferError("ViewTokenBuffer requires cursors over an in-memory sequence")
        self._view = TokenView(begin.source, begin.index, end.index)

    @property
    def value(self) -> TokenView:
        if self._view is None:
            return TokenView(self._empty, 0, 0)
        return self._view

    def __repr__(self) -> str:
        return f"ViewTokenBuffer({self.value!r})"
