"""Tests for the one-call tokenization functions."""

import pytest

from pluggable_tokenizer import (
    EscapedListError,
    OffsetSeparator,
    TokenizerConfig,
    analyze,
    split_csv,
    split_delimited,
    split_fixed_width,
    split_whitespace,
    tokenize,
)


class TestTokenize:
    """Test the tokenize() entry point."""

    def test_default_separator(self):
        assert tokenize("This is,  a test") == ["This", "is", ",", "a", "test"]

    def test_explicit_separator(self):
        assert tokenize("12252001", OffsetSeparator([2, 2, 4])) == ["12", "25", "2001"]

    def test_bytes(self):
        assert tokenize(b"a b") == [b"a", b"b"]

    def test_bytes_high_values_are_not_delimiters(self):
        assert tokenize(b"a\xa0b\x85c\xa7d") == [b"a\xa0b\x85c\xa7d"]

    def test_str_uses_unicode_rules(self):
        assert tokenize("a\xa0b\x85c\xa7d") == ["a", "b", "c", "\xa7", "d"]

    def test_empty(self):
        assert tokenize("") == []


class TestSplitHelpers:
    """Test the split_* helpers."""

    def test_split_csv(self):
        assert split_csv('Field 1,"embedded,comma",3') == ["Field 1", "embedded,comma", "3"]

    def test_split_csv_custom_separator(self):
        assert split_csv("a\tb\t", separator="\t") == ["a", "b", ""]

    def test_split_csv_bad_escape(self):
        with pytest.raises(EscapedListError):
            split_csv("a,b\\")

    def test_split_fixed_width(self):
        assert split_fixed_width("1234567", [1, 3, 5], False, False) == ["1", "234"]

    def test_split_delimited(self):
        assert split_delimited("a,,b|c", ",", "|") == ["a", "b", "|", "c"]

    def test_split_delimited_keep_empty(self):
        assert split_delimited("a,,b", ",", keep_empty_tokens=True) == ["a", "", "b"]

    def test_split_whitespace_keeps_punctuation(self):
        assert split_whitespace(" Hello,\tworld! ") == ["Hello,", "world!"]


class TestAnalyze:
    """Test the result-returning entry point."""

    def test_success(self):
        result = analyze("a b", correlation_id="req-7")
        assert result.success is True
        assert result.tokens == ["a", "b"]
        assert result.correlation_id == "req-7"

    def test_bytes_use_c_tables(self):
        assert analyze(b"a\xa0b").tokens == [b"a\xa0b"]
        assert analyze("a\xa0b").tokens == ["a", "b"]

    def test_failure_is_reported(self):
        result = analyze("x,\\", TokenizerConfig.csv())
        assert result.success is False
        assert result.tokens == ["x"]
        assert result.diagnostics[0].message == "cannot end with escape"
