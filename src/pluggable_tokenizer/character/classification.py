"""Character classification for separator defaults.

Separators that fall back to "punctuation is kept, whitespace is dropped" ask a
classifier instead of calling ``str.isspace`` directly, so the same separator code
works on ``bytes`` (8-bit code units) and on ``str`` (wide code points).

Three fixed classifiers are provided, plus ``CodeUnitClassifier`` which picks
between them per code unit and is the default:

- ``NarrowClassifier``: the 8-bit "C" locale tables. Anything above 0xFF is
  neither space nor punctuation.
- ``WideClassifier``: Unicode rules, the counterpart of ``iswspace``/``iswpunct``.
- ``FallbackClassifier``: for builds without wide classification; applies the
  narrow tables to values up to 0xFF and answers ``False`` above that.
"""

import string
import unicodedata
from typing import FrozenSet, Iterable, Optional, Protocol, Union

CodeUnit = Union[str, int]

NARROW_MAX = 0xFF

_C_SPACE: FrozenSet[int] = frozenset(ord(ch) for ch in string.whitespace)
_C_PUNCT: FrozenSet[int] = frozenset(ord(ch) for ch in string.punctuation)

# iswpunct() is true for every graphic character that is not alphanumeric,
# which in Unicode terms is the punctuation and symbol categories.
_WIDE_PUNCT_CATEGORIES = ("P", "S")


def code_point(char: CodeUnit) -> int:
    """Return the integer value of a single code unit.

    ``str`` inputs must be exactly one character; ``int`` inputs (what iterating
    over ``bytes`` yields) are returned unchanged.
    """
    if isinstance(char, int):
        return char
    if isinstance(char, str) and len(char) == 1:
        return ord(char)
    raise TypeError(f"Expected a single code unit, got {char!r}")


def code_point_set(chars: Union[str, bytes, Iterable[CodeUnit], None]) -> FrozenSet[int]:
    """Normalise a delimiter specification into a set of code points."""
    if chars is None:
        return frozenset()
    if isinstance(chars, str):
        return frozenset(ord(ch) for ch in chars)
    if isinstance(chars, (bytes, bytearray)):
        return frozenset(chars)
    return frozenset(code_point(ch) for ch in chars)


def _safe_code_point(char: CodeUnit) -> Optional[int]:
    try:
        return code_point(char)
    except TypeError:
        return None


class CharacterClassifier(Protocol):
    """Classification interface used by the delimiter separators."""

    char_width: int

    def is_space(self, char: CodeUnit) -> bool:
        ...

    def is_punct(self, char: CodeUnit) -> bool:
        ...


class NarrowClassifier:
    """8-bit classification following the "C" locale."""

    char_width = 1

    def is_space(self, char: CodeUnit) -> bool:
        value = _safe_code_point(char)
        return value is not None and value in _C_SPACE

    def is_punct(self, char: CodeUnit) -> bool:
        value = _safe_code_point(char)
        return value is not None and value in _C_PUNCT

    def __repr__(self) -> str:
        return "NarrowClassifier()"


class WideClassifier:
    """Unicode classification for wide code units."""

    char_width = 4

    def is_space(self, char: CodeUnit) -> bool:
        value = _safe_code_point(char)
        if value is None or value < 0:
            return False
        try:
            return chr(value).isspace()
        except (ValueError, OverflowError):
            return False

    def is_punct(self, char: CodeUnit) -> bool:
        value = _safe_code_point(char)
        if value is None or value < 0:
            return False
        try:
            category = unicodedata.category(chr(value))
        except (ValueError, OverflowError):
            return False
        return category.startswith(_WIDE_PUNCT_CATEGORIES)

    def __repr__(self) -> str:
        return "WideClassifier()"


class FallbackClassifier:
    """Classification used when no wide-character facility is available."""

    char_width = 4

    def is_space(self, char: CodeUnit) -> bool:
        value = _safe_code_point(char)
        return value is not None and 0 <= value <= NARROW_MAX and value in _C_SPACE

    def is_punct(self, char: CodeUnit) -> bool:
        value = _safe_code_point(char)
        return value is not None and 0 <= value <= NARROW_MAX and value in _C_PUNCT

    def __repr__(self) -> str:
        return "FallbackClassifier()"


def classifier_for_width(char_width: int, wide_support: bool = True) -> CharacterClassifier:
    """Select the classifier for code units of ``char_width`` bytes.

    Args:
        char_width: Size of one code unit in bytes (1 for ``bytes`` input)
        wide_support: Whether wide classification may be used for wider units

    Returns:
        Classifier instance for that width
    """
    if char_width < 1:
        raise ValueError("char_width must be >= 1")
    if char_width == 1:
        return NarrowClassifier()
    if wide_support:
        return WideClassifier()
    return FallbackClassifier()


class CodeUnitClassifier:
    """Pick narrow or wide rules from the type of each code unit.

    Integers (what iterating over ``bytes`` yields) get the 8-bit C tables; ``str``
    characters get Unicode rules, or the fallback tables without wide support.
    """

    char_width = 0

    def __init__(self, wide_support: bool = True) -> None:
        self.narrow = NarrowClassifier()
        self.wide: CharacterClassifier = (
            WideClassifier() if wide_support else FallbackClassifier()
        )

    def _for(self, char: CodeUnit) -> CharacterClassifier:
        return self.narrow if isinstance(char, int) else self.wide

    def is_space(self, char: CodeUnit) -> bool:
        return self._for(char).is_space(char)

    def is_punct(self, char: CodeUnit) -> bool:
        return self._for(char).is_punct(char)

    def __repr__(self) -> str:
        return f"CodeUnitClassifier(wide={self.wide!r})"


def default_classifier() -> CharacterClassifier:
    """Classifier used when a separator is built without one."""
    return CodeUnitClassifier()
