"""Tests for cursors and token buffer backends."""

import copy

import pytest

from pluggable_tokenizer.shared.errors import PreconditionViolation, TokenBufferError
from pluggable_tokenizer.tokenization import (
    SequenceCursor,
    StreamCursor,
    StreamEnd,
    StringTokenBuffer,
    TokenView,
    ViewTokenBuffer,
    sequence_range,
    source_range,
    stream_range,
)


class TestSequenceCursor:
    """Test cursors over in-memory sequences."""

    def test_walk(self):
        begin, end = sequence_range("ab")
        assert begin.current == "a"
        begin.advance()
        assert begin.current == "b"
        assert begin != end
        begin.advance()
        assert begin == end
        assert begin.position == 2

    def test_bytes_yield_ints(self):
        begin, _ = sequence_range(b"ab")
        assert begin.current == 97

    def test_past_end(self):
        begin, end = sequence_range("")
        assert begin == end
        with pytest.raises(PreconditionViolation):
            begin.current
        with pytest.raises(PreconditionViolation):
            begin.advance()

    def test_copy_is_independent(self):
        begin, _ = sequence_range("abc")
        clone = copy.copy(begin)
        begin.advance()
        assert clone.position == 0
        assert begin.position == 1

    def test_span_and_empty_value(self):
        begin, end = sequence_range("abcd", 1, 3)
        assert begin.span_to(end) == "bc"
        assert begin.empty_value() == ""
        assert sequence_range(b"xy")[0].empty_value() == b""

    def test_different_sources_are_unequal(self):
        assert SequenceCursor("ab") != SequenceCursor(b"ab")

    def test_invalid_range(self):
        with pytest.raises(PreconditionViolation):
            sequence_range("abc", 2, 1)
        with pytest.raises(PreconditionViolation):
            SequenceCursor("abc", 4)


class TestStreamCursor:
    """Test pull-based cursors over iterables."""

    def test_walk_generator(self):
        begin, end = stream_range(ch for ch in "ab")
        assert isinstance(end, StreamEnd)
        assert begin != end
        assert begin.current == "a"
        begin.advance().advance()
        assert begin == end
        assert end == begin

    def test_units_are_pulled_lazily(self):
        pulled = []

        def units():
            for ch in "abc":
                pulled.append(ch)
                yield ch

        begin, _ = stream_range(units())
        assert pulled == []
        assert begin.current == "a"
        assert pulled == ["a"]

    def test_copies_share_units(self):
        begin, end = stream_range(iter("abc"))
        mark = begin.copy()
        begin.advance().advance()
        assert mark.span_to(begin) == "ab"
        assert mark.current == "a"
        assert mark != end

    def test_int_units_produce_bytes(self):
        begin, end = stream_range(iter(b"hi"))
        assert begin.empty_value() == b""
        start = begin.copy()
        begin.advance().advance()
        assert start.span_to(begin) == b"hi"

    def test_empty_stream(self):
        begin, end = stream_range([])
        assert begin == end
        assert begin.empty_value() == ""
        with pytest.raises(PreconditionViolation):
            begin.current

    def test_consumed_units_are_retained(self):
        """Units stay in memory after every cursor has moved past them."""
        begin, end = stream_range(iter("abcdef"))
        for _ in range(3):
            begin.advance()
        assert begin.units_read == 3
        assert begin.copy().units_read == 3

        while begin != end:
            begin.advance()
        assert begin.units_read == 6


class TestSourceRange:
    """Test choosing a cursor type for a source."""

    def test_strings_and_bytes_are_indexed(self):
        assert isinstance(source_range("abc")[0], SequenceCursor)
        assert isinstance(source_range(b"abc")[0], SequenceCursor)

    def test_bytearray_is_copied_to_bytes(self):
        begin, end = source_range(bytearray(b"ab"))
        assert isinstance(begin.source, bytes)

    def test_other_iterables_are_streamed(self):
        assert isinstance(source_range(["a", "b"])[0], StreamCursor)


class TestStringTokenBuffer:
    """Test the owning token buffer."""

    def test_empty_value(self):
        assert StringTokenBuffer().value == ""
        assert StringTokenBuffer(b"").value == b""

    def test_append_characters(self):
        buffer = StringTokenBuffer()
        buffer.append("a")
        buffer.append("b")
        assert buffer.value == "ab"
        assert len(buffer) == 2

    def test_append_byte_values(self):
        buffer = StringTokenBuffer(b"")
        buffer.append(104)
        buffer.append(105)
        assert buffer.value == b"hi"

    def test_assign_range_replaces_content(self):
        buffer = StringTokenBuffer()
        buffer.append("x")
        begin, end = sequence_range("hello", 1, 4)
        buffer.assign_range(begin, end)
        assert buffer.value == "ell"

    def test_clear(self):
        buffer = StringTokenBuffer()
        buffer.append("x")
        buffer.clear()
        assert buffer.value == ""

    def test_copy_is_independent(self):
        buffer = StringTokenBuffer()
        buffer.append("a")
        clone = copy.copy(buffer)
        buffer.append("b")
        assert clone.value == "a"


class TestTokenView:
    """Test non-owning token views."""

    def test_materialize(self):
        view = TokenView("hello world", 6, 11)
        assert view.materialize() == "world"
        assert len(view) == 5
        assert str(view) == "world"

    def test_equality(self):
        view = TokenView("abcabc", 0, 3)
        assert view == "abc"
        assert view == TokenView("xabc", 1, 4)
        assert hash(view) == hash("abc")
        assert view != "abd"

    def test_bytes_view(self):
        view = TokenView(b"abc", 1, 3)
        assert view == b"bc"
        assert bytes(view) == b"bc"

    def test_invalid_bounds(self):
        with pytest.raises(ValueError):
            TokenView("abc", 2, 1)
        with pytest.raises(ValueError):
            TokenView("abc", 0, 4)


class TestViewTokenBuffer:
    """Test the view token buffer backend."""

    def test_assign_range(self):
        source = "hello"
        buffer = ViewTokenBuffer()
        begin, end = sequence_range(source, 0, 2)
        buffer.assign_range(begin, end)
        assert isinstance(buffer.value, TokenView)
        assert buffer.value.source is source
        assert buffer.value == "he"

    def test_cleared_value_is_empty_view(self):
        buffer = ViewTokenBuffer(b"")
        buffer.clear()
        assert buffer.value == b""
        assert len(buffer.value) == 0

    def test_append_is_rejected(self):
        with pytest.raises(TokenBufferError):
            ViewTokenBuffer().append("a")

    def test_stream_cursors_are_rejected(self):
        begin, end = stream_range(iter("ab"))
        with pytest.raises(TokenBufferError):
            ViewTokenBuffer().assign_range(begin, end)
