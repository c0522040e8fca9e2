"""Tests for the separator state machines."""

import copy

import pytest

from pluggable_tokenizer.character import NarrowClassifier
from pluggable_tokenizer.shared.errors import EscapedListError, PreconditionViolation
from pluggable_tokenizer.tokenization import (
    CharDelimitersSeparator,
    CharSeparator,
    EmptyTokenPolicy,
    EscapedListSeparator,
    KEEP_EMPTY_TOKENS,
    OffsetSeparator,
    Separator,
    StringTokenBuffer,
    Tokenizer,
    sequence_range,
)

SAMPLE = ";;Hello|world||-foo--bar;yow;baz|"


def split(text, separator):
    return Tokenizer(text, separator).tokens()


def drive(separator, text):
    """Call a separator directly until it reports no token."""
    cursor, end = sequence_range(text)
    token = StringTokenBuffer(text[:0])
    tokens = []
    while separator.next(cursor, end, token):
        tokens.append(token.value)
    return tokens


class TestSeparatorProtocol:
    """Test that every separator satisfies the shared contract."""

    @pytest.mark.parametrize("separator", [
        CharSeparator(),
        EscapedListSeparator(),
        OffsetSeparator(),
        CharDelimitersSeparator(),
    ])
    def test_implements_protocol(self, separator):
        assert isinstance(separator, Separator)
        assert isinstance(separator.kind, str)

    def test_callable_alias(self):
        """Separators can be called like functions."""
        separator = CharSeparator(",")
        cursor, end = sequence_range("a,b")
        token = StringTokenBuffer()
        assert separator(cursor, end, token) is True
        assert token.value == "a"


class TestCharSeparatorDropEmpty:
    """Test CharSeparator collapsing runs of delimiters."""

    def test_all_dropped(self):
        separator = CharSeparator("-;|")
        assert split(SAMPLE, separator) == ["Hello", "world", "foo", "bar", "yow", "baz"]

    def test_dropped_and_kept(self):
        separator = CharSeparator("-;", "|")
        assert split(SAMPLE, separator) == [
            "Hello", "|", "world", "|", "|", "foo", "bar", "yow", "baz", "|"
        ]

    def test_default_uses_classifier(self):
        """Without delimiter sets, whitespace is dropped and punctuation kept."""
        assert split("Hello, world!", CharSeparator()) == ["Hello", ",", "world", "!"]

    def test_only_dropped_given(self):
        """Giving one set leaves the other empty instead of using the classifier."""
        assert split("a-b,c d", CharSeparator("-")) == ["a", "b,c d"]

    def test_only_kept_given(self):
        assert split("a b|c", CharSeparator(None, "|")) == ["a b", "|", "c"]

    def test_empty_sets_disable_classifier(self):
        assert split("a b,c", CharSeparator("", "")) == ["a b,c"]

    def test_dropped_checked_first(self):
        """A character in both sets is skipped when empty tokens are dropped."""
        assert split("a|b", CharSeparator("|", "|")) == ["a", "b"]

    def test_only_delimiters(self):
        assert split(";;;", CharSeparator(";")) == []

    def test_custom_classifier(self):
        """The narrow classifier does not treat wide spaces as delimiters."""
        separator = CharSeparator(classifier=NarrowClassifier())
        assert split("a　b c", separator) == ["a　b", "c"]

    def test_default_bytes_use_c_tables(self):
        """High bytes are neither whitespace nor punctuation by default."""
        assert split(b"a\xa0b", CharSeparator()) == [b"a\xa0b"]
        assert split(b"a\xa0b\x85c\xa7d", CharSeparator()) == [b"a\xa0b\x85c\xa7d"]

    def test_default_str_uses_unicode_rules(self):
        assert split("a\xa0b\xa7c", CharSeparator()) == ["a", "b", "\xa7", "c"]


class TestCharSeparatorKeepEmpty:
    """Test CharSeparator reporting empty tokens."""

    def test_sample_sequence(self):
        separator = CharSeparator("-;", "|", EmptyTokenPolicy.KEEP)
        assert split(SAMPLE, separator) == [
            "", "", "Hello", "|", "world", "|", "", "|", "",
            "foo", "", "bar", "yow", "baz", "|", "",
        ]

    def test_module_level_alias(self):
        separator = CharSeparator(",", "", KEEP_EMPTY_TOKENS)
        assert split("a,,b", separator) == ["a", "", "b"]

    def test_leading_and_trailing_delimiters(self):
        separator = CharSeparator(",", None, EmptyTokenPolicy.KEEP)
        assert split(",a,", separator) == ["", "a", ""]

    def test_single_token(self):
        separator = CharSeparator(",", None, EmptyTokenPolicy.KEEP)
        assert split("a", separator) == ["a"]

    def test_single_delimiter(self):
        separator = CharSeparator(",", None, EmptyTokenPolicy.KEEP)
        assert split(",", separator) == ["", ""]

    def test_empty_input_yields_nothing(self):
        separator = CharSeparator(",", None, EmptyTokenPolicy.KEEP)
        assert split("", separator) == []

    def test_direct_call_on_empty_input(self):
        """Called directly, the separator reports the one empty field."""
        separator = CharSeparator(",", None, EmptyTokenPolicy.KEEP)
        assert drive(separator, "") == [""]

    def test_reset_reproduces_tokens(self):
        separator = CharSeparator("-;", "|", EmptyTokenPolicy.KEEP)
        first = drive(separator, SAMPLE)
        separator.reset()
        assert drive(separator, SAMPLE) == first

    def test_copy_iterates_independently(self):
        separator = CharSeparator(",", None, EmptyTokenPolicy.KEEP)
        cursor, end = sequence_range("a,")
        token = StringTokenBuffer()
        assert separator.next(cursor, end, token) and token.value == "a"

        clone = copy.copy(separator)
        clone_cursor = cursor.copy()
        assert separator.next(cursor, end, token) and token.value == ""
        assert separator.next(cursor, end, token) is False

        assert clone.next(clone_cursor, end, token) and token.value == ""
        assert clone.state is not separator.state


class TestEscapedListSeparator:
    """Test CSV splitting with quotes and escapes."""

    def test_quotes_and_escapes(self):
        text = 'Field 1,"embedded,comma",quote \\", escape \\\\'
        assert split(text, EscapedListSeparator()) == [
            "Field 1", "embedded,comma", 'quote "', " escape \\"
        ]

    def test_newline_escape(self):
        assert split("line\\nbreak", EscapedListSeparator()) == ["line\nbreak"]

    def test_escaped_separator_and_quote(self):
        assert split('a\\,b,\\"c', EscapedListSeparator()) == ["a,b", '"c']

    def test_trailing_separator_gives_empty_field(self):
        assert split("a,", EscapedListSeparator()) == ["a", ""]

    def test_only_separators(self):
        assert split(",,", EscapedListSeparator()) == ["", "", ""]

    def test_empty_input(self):
        assert split("", EscapedListSeparator()) == []

    def test_quotes_toggle_anywhere(self):
        """Quote characters are removed wherever they occur in a field."""
        assert split('ab"c,d"e,f', EscapedListSeparator()) == ["abc,de", "f"]

    def test_unterminated_quote_runs_to_end(self):
        assert split('"abc,def', EscapedListSeparator()) == ["abc,def"]

    def test_custom_characters(self):
        separator = EscapedListSeparator("~", ";", "'")
        assert split("a;'b;c';d~;e", separator) == ["a", "b;c", "d;e"]

    def test_multiple_separator_characters(self):
        separator = EscapedListSeparator(separator=",;")
        assert split("a,b;c", separator) == ["a", "b", "c"]

    def test_cannot_end_with_escape(self):
        with pytest.raises(EscapedListError) as exc_info:
            split("abc\\", EscapedListSeparator())
        assert str(exc_info.value) == "cannot end with escape"
        assert exc_info.value.position == 4

    def test_unknown_escape_sequence(self):
        with pytest.raises(EscapedListError) as exc_info:
            split("a,b\\q", EscapedListSeparator())
        assert str(exc_info.value) == EscapedListError.UNKNOWN_ESCAPE_SEQUENCE
        assert exc_info.value.position == 4

    def test_error_surfaces_lazily(self):
        """Tokens before the bad escape are delivered before the error."""
        iterator = iter(Tokenizer("a,\\q", EscapedListSeparator()))
        assert next(iterator) == "a"
        with pytest.raises(EscapedListError):
            next(iterator)
        with pytest.raises(StopIteration):
            next(iterator)

    def test_reset_after_error(self):
        separator = EscapedListSeparator()
        with pytest.raises(EscapedListError):
            drive(separator, "a,\\x")
        separator.reset()
        assert drive(separator, "a,b") == ["a", "b"]

    def test_reset_reproduces_tokens(self):
        separator = EscapedListSeparator()
        first = drive(separator, "a,b,")
        separator.reset()
        assert drive(separator, "a,b,") == first == ["a", "b", ""]

    def test_bytes_input(self):
        assert split(b'a,"b,c",d\\n', EscapedListSeparator()) == [b"a", b"b,c", b"d\n"]

    def test_copy_keeps_pending_field(self):
        """A copy taken after a trailing separator still owes the empty field."""
        separator = EscapedListSeparator()
        cursor, end = sequence_range("a,")
        token = StringTokenBuffer()
        assert separator.next(cursor, end, token) and token.value == "a"
        assert separator.state.pending_field is True

        clone = copy.copy(separator)
        clone_cursor = cursor.copy()
        assert clone.state is not separator.state

        assert separator.next(cursor, end, token) and token.value == ""
        assert separator.next(cursor, end, token) is False
        assert separator.state.pending_field is False
        assert clone.state.pending_field is True

        assert clone.next(clone_cursor, end, token) and token.value == ""
        assert clone.next(clone_cursor, end, token) is False


class TestOffsetSeparator:
    """Test fixed-width splitting."""

    def test_date_fields(self):
        assert split("12252001", OffsetSeparator([2, 2, 4])) == ["12", "25", "2001"]

    def test_wraps_around(self):
        separator = OffsetSeparator([2, 2, 4])
        assert split("1225200101012002", separator) == [
            "12", "25", "2001", "01", "01", "2002"
        ]

    def test_no_wrap_no_partial(self):
        separator = OffsetSeparator([1, 3, 5], wrap_offsets=False, return_partial_last=False)
        assert split("1234567", separator) == ["1", "234"]

    def test_no_wrap_with_partial(self):
        separator = OffsetSeparator([1, 3, 5], wrap_offsets=False)
        assert split("1234567", separator) == ["1", "234", "567"]

    def test_no_wrap_stops_after_table(self):
        separator = OffsetSeparator([2], wrap_offsets=False)
        assert split("123456", separator) == ["12"]

    def test_partial_last_dropped(self):
        separator = OffsetSeparator([2], return_partial_last=False)
        assert split("12345", separator) == ["12", "34"]

    def test_partial_last_returned(self):
        assert split("12345", OffsetSeparator([2])) == ["12", "34", "5"]

    def test_default_single_characters(self):
        assert split("abc", OffsetSeparator()) == ["a", "b", "c"]

    def test_empty_input(self):
        assert split("", OffsetSeparator([3])) == []

    def test_reset_restarts_table(self):
        separator = OffsetSeparator([1, 2])
        first = drive(separator, "abcdef")
        separator.reset()
        assert drive(separator, "abcdef") == first == ["a", "bc", "d", "ef"]

    @pytest.mark.parametrize("offsets", [[], [0], [2, -1], [1.5], [True]])
    def test_invalid_table(self, offsets):
        with pytest.raises(PreconditionViolation):
            OffsetSeparator(offsets)

    def test_bytes_input(self):
        assert split(b"abcd", OffsetSeparator([3])) == [b"abc", b"d"]

    def test_copy_keeps_table_position(self):
        separator = OffsetSeparator([1, 2], wrap_offsets=False)
        cursor, end = sequence_range("abcd")
        token = StringTokenBuffer()
        assert separator.next(cursor, end, token) and token.value == "a"

        clone = copy.copy(separator)
        clone_cursor = cursor.copy()
        assert clone.state is not separator.state

        assert separator.next(cursor, end, token) and token.value == "bc"
        assert separator.state.current_offset == 2
        assert clone.state.current_offset == 1

        assert clone.next(clone_cursor, end, token) and token.value == "bc"

    def test_copies_diverge_once_one_advances(self):
        """At the same position, the exhausted table stops while the copy still has a width."""
        separator = OffsetSeparator([1, 2], wrap_offsets=False)
        cursor, end = sequence_range("abcd")
        token = StringTokenBuffer()
        separator.next(cursor, end, token)
        clone = copy.copy(separator)
        separator.next(cursor, end, token)

        assert separator.next(cursor.copy(), end, token) is False
        assert clone.next(cursor.copy(), end, token) and token.value == "d"


class TestCharDelimitersSeparator:
    """Test the returnable/nonreturnable delimiter separator."""

    def test_default_skips_everything(self):
        assert split("This is,  a test", CharDelimitersSeparator()) == [
            "This", "is", "a", "test"
        ]

    def test_return_delims(self):
        separator = CharDelimitersSeparator(return_delims=True)
        assert split("This is,  a test", separator) == ["This", "is", ",", "a", "test"]

    def test_explicit_returnable(self):
        """Nonreturnable delimiters still fall back to whitespace."""
        separator = CharDelimitersSeparator(True, "|")
        assert split("a|b c,d", separator) == ["a", "|", "b", "c,d"]

    def test_explicit_nonreturnable(self):
        separator = CharDelimitersSeparator(True, None, ";")
        assert split("a;b c.d", separator) == ["a", "b c", ".", "d"]

    def test_empty_set_disables_fallback(self):
        separator = CharDelimitersSeparator(False, "", None)
        assert split("a,b c", separator) == ["a,b", "c"]

    def test_no_empty_tokens(self):
        assert split(",,a,,", CharDelimitersSeparator()) == ["a"]

    def test_reset_is_harmless(self):
        separator = CharDelimitersSeparator()
        first = drive(separator, "x y")
        separator.reset()
        assert drive(separator, "x y") == first == ["x", "y"]

    def test_bytes_input(self):
        assert split(b"ab cd", CharDelimitersSeparator()) == [b"ab", b"cd"]

    def test_bytes_high_values_are_not_delimiters(self):
        assert split(b"a\xa0b\x85c", CharDelimitersSeparator(True)) == [b"a\xa0b\x85c"]
