"""Forward-only cursors over the input of a tokenization run.

Separators need three things from a position: compare it with the end sentinel,
read the code unit under it and step forward by one. Token buffers additionally need
to copy a position and extract the span between two of them.

``SequenceCursor`` indexes into an in-memory ``str`` or ``bytes``. ``StreamCursor``
pulls code units from any iterable on demand and keeps the ones already read so that
spans can still be assigned to a token.
"""

from typing import Any, Iterable, List, Optional, Sequence, Tuple, Union

from pluggable_tokenizer.shared.errors import PreconditionViolation

TokenSource = Union[str, bytes]


class SequenceCursor:
    """Position inside an in-memory sequence."""

    __slots__ = ("source", "index")

    def __init__(self, source: Sequence[Any], index: int = 0) -> None:
        if not 0 <= index <= len(source):
            raise PreconditionViolation(
                f"Cursor index {index} outside sequence of length {len(source)}"
            )
        self.source = source
        self.index = index

    @property
    def current(self) -> Any:
        """Code unit under the cursor."""
        if self.index >= len(self.source):
            raise PreconditionViolation("Cannot dereference a cursor past the end")
        return self.source[self.index]

    def advance(self) -> "SequenceCursor":
        if self.index >= len(self.source):
            raise PreconditionViolation("Cannot advance a cursor past the end")
        self.index += 1
        return self

    def copy(self) -> "SequenceCursor":
        return SequenceCursor(self.source, self.index)

    __copy__ = copy

    def span_to(self, other: "SequenceCursor") -> Any:
        """Return the code units from this cursor up to ``other``."""
        return self.source[self.index:other.index]

    def empty_value(self) -> Any:
        return self.source[:0]

    @property
    def position(self) -> int:
        return self.index

    def __eq__(self, other: object) -> bool:
        if isinstance(other, SequenceCursor):
            return self.source is other.source and self.index == other.index
        return NotImplemented

    def __hash__(self) -> int:
        return hash((id(self.source), self.index))

    def __repr__(self) -> str:
        return f"SequenceCursor(index={self.index}, length={len(self.source)})"


class _PulledUnits:
    """Code units read so far from a stream, shared by all cursors over it."""

    def __init__(self, iterable: Iterable[Any]) -> None:
        self._iterator = iter(iterable)
        self.units: List[Any] = []
        self.exhausted = False
        self.empty: TokenSource = ""

    def has(self, index: int) -> bool:
        while len(self.units) <= index and not self.exhausted:
            try:
                unit = next(self._iterator)
            except StopIteration:
                self.exhausted = True
                break
            if not self.units and isinstance(unit, int):
                self.empty = b""
            self.units.append(unit)
        return index < len(self.units)

    def join(self, start: int, stop: int) -> TokenSource:
        chunk = self.units[start:stop]
        if isinstance(self.empty, bytes):
            return bytes(chunk)
        return "".join(chunk)


class StreamEnd:
    """End sentinel for a ``StreamCursor``."""

    __slots__ = ("_units",)

    def __init__(self, units: _PulledUnits) -> None:
        self._units = units

    def __eq__(self, other: object) -> bool:
        if isinstance(other, StreamCursor):
            return other == self
        if isinstance(other, StreamEnd):
            return self._units is other._units
        return NotImplemented

    def __hash__(self) -> int:
        return hash(id(self._units))

    def __repr__(self) -> str:
        return "StreamEnd()"


class StreamCursor:
    """Position in a pull-based stream of code units.

    Every unit pulled from the stream is kept, shared by all copies of the cursor, so
    that a token can be assigned from any earlier position and copies can advance
    independently. Memory therefore grows with the amount of input consumed, not
    with the longest token. For very large one-pass inputs, read the data into
    ``str``/``bytes`` chunks and tokenize those with ``SequenceCursor`` instead.
    """

    __slots__ = ("_units", "index")

    def __init__(self, source: Iterable[Any], index: int = 0,
                 _units: Optional[_PulledUnits] = None) -> None:
        self._units = _units if _units is not None else _PulledUnits(source)
        self.index = index

    @property
    def current(self) -> Any:
        if not self._units.has(self.index):
            raise PreconditionViolation("Cannot dereference a cursor past the end")
        return self._units.units[self.index]

    def advance(self) -> "StreamCursor":
        if not self._units.has(self.index):
            raise PreconditionViolation("Cannot advance a cursor past the end")
        self.index += 1
        return self

    @property
    def units_read(self) -> int:
        """Number of units pulled from the stream and held in memory so far."""
        return len(self._units.units)

    def copy(self) -> "StreamCursor":
        return StreamCursor((), self.index, self._units)

    __copy__ = copy

    def span_to(self, other: "StreamCursor") -> TokenSource:
        return self._units.join(self.index, other.index)

    def empty_value(self) -> TokenSource:
        self._units.has(0)
        return self._units.empty

    def end(self) -> StreamEnd:
        """Sentinel that compares equal to any cursor over this stream once drained."""
        return StreamEnd(self._units)

    @property
    def position(self) -> int:
        return self.index

    def __eq__(self, other: object) -> bool:
        if isinstance(other, StreamEnd):
            return self._units is other._units and not self._units.has(self.index)
        if isinstance(other, StreamCursor):
            return self._units is other._units and self.index == other.index
        return NotImplemented

    def __hash__(self) -> int:
        return hash((id(self._units), self.index))

    def __repr__(self) -> str:
        return f"StreamCursor(index={self.index})"


def sequence_range(
    source: Sequence[Any],
    start: int = 0,
    stop: Optional[int] = None
) -> Tuple[SequenceCursor, SequenceCursor]:
    """Return ``(begin, end)`` cursors over ``source[start:stop]``."""
    if stop is None:
        stop = len(source)
    if start > stop:
        raise PreconditionViolation("Range start must not be after range stop")
    return SequenceCursor(source, start), SequenceCursor(source, stop)


def stream_range(iterable: Iterable[Any]) -> Tuple[StreamCursor, StreamEnd]:
    """Return ``(begin, end)`` over an iterable that is read lazily."""
    begin = StreamCursor(iterable)
    return begin, begin.end()


def source_range(source: Union[str, bytes, bytearray, Iterable[Any]]) -> Tuple[Any, Any]:
    """Return ``(begin, end)`` for a sequence or a one-pass iterable."""
    if isinstance(source, bytearray):
        source = bytes(source)
    if isinstance(source, (str, bytes)):
        return sequence_range(source)
    return stream_range(source)
