"""Configuration classes for the tokenization engine.

Each separator kind has its own section dataclass, validated on construction.
``TokenizerConfig`` bundles the sections with the choice of separator, the token
backend and diagnostics settings, and knows how to build the configured separator.
"""

import json
from dataclasses import dataclass, field, replace
from enum import Enum, auto
from typing import Any, Dict, List, Optional

from pluggable_tokenizer.character import (
    CharacterClassifier,
    CodeUnitClassifier,
    classifier_for_width,
)
from pluggable_tokenizer.tokenization.separators import (
    CharDelimitersSeparator,
    CharSeparator,
    EmptyTokenPolicy,
    EscapedListSeparator,
    OffsetSeparator,
    Separator,
)

from .errors import ConfigValidationError

SUPPORTED_CHAR_WIDTHS = (1, 2, 4)


class SeparatorKind(Enum):
    """Separator strategies that a configuration can select."""

    CHAR = auto()             # Dropped/kept delimiters
    ESCAPED_LIST = auto()     # CSV with quotes and escapes
    OFFSET = auto()           # Fixed field widths
    CHAR_DELIMITERS = auto()  # Returnable/nonreturnable delimiters


@dataclass
class CharSeparatorConfig:
    """Configuration for ``CharSeparator``."""

    dropped_delims: Optional[str] = None
    kept_delims: Optional[str] = None
    empty_tokens: EmptyTokenPolicy = EmptyTokenPolicy.DROP

    def __post_init__(self) -> None:
        """Validate delimiter configuration."""
        for name in ("dropped_delims", "kept_delims"):
            value = getattr(self, name)
            if value is not None and not isinstance(value, str):
                raise ValueError(f"{name} must be a string or None")
        if not isinstance(self.empty_tokens, EmptyTokenPolicy):
            raise ValueError("empty_tokens must be an EmptyTokenPolicy")


@dataclass
class EscapedListConfig:
    """Configuration for ``EscapedListSeparator``."""

    escape: str = "\\"
    separator: str = ","
    quote: str = '"'

    def __post_init__(self) -> None:
        """Validate escaped list configuration."""
        for name in ("escape", "separator", "quote"):
            if not isinstance(getattr(self, name), str):
                raise ValueError(f"{name} must be a string")
        if not self.separator:
            raise ValueError("separator must contain at least one character")


@dataclass
class OffsetConfig:
    """Configuration for ``OffsetSeparator``."""

    offsets: List[int] = field(default_factory=lambda: [1])
    wrap_offsets: bool = True
    return_partial_last: bool = True

    def __post_init__(self) -> None:
        """Validate the offset table."""
        if not self.offsets:
            raise ValueError("offsets must contain at least one width")
        for width in self.offsets:
            if isinstance(width, bool) or not isinstance(width, int) or width < 1:
                raise ValueError("offsets must be positive integers")


@dataclass
class CharDelimitersConfig:
    """Configuration for ``CharDelimitersSeparator``."""

    return_delims: bool = False
    returnable: Optional[str] = None
    nonreturnable: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate delimiter configuration."""
        for name in ("returnable", "nonreturnable"):
            value = getattr(self, name)
            if value is not None and not isinstance(value, str):
                raise ValueError(f"{name} must be a string or None")


@dataclass
class ClassifierConfig:
    """Configuration for the default whitespace/punctuation classifier.

    With ``char_width`` left as ``None`` the rules follow the code unit type: 8-bit
    tables for ``bytes`` input, Unicode rules for ``str`` input.
    """

    char_width: Optional[int] = None
    wide_support: bool = True

    def __post_init__(self) -> None:
        """Validate classifier configuration."""
        if self.char_width is not None and self.char_width not in SUPPORTED_CHAR_WIDTHS:
            raise ValueError(f"char_width must be one of {SUPPORTED_CHAR_WIDTHS}")

    def build(self) -> CharacterClassifier:
        if self.char_width is None:
            return CodeUnitClassifier(self.wide_support)
        return classifier_for_width(self.char_width, self.wide_support)


_SECTIONS = ("char", "escaped_list", "offset", "char_delimiters", "classifier")


@dataclass(frozen=True)
class TokenizerConfig:
    """Complete configuration of a tokenization run.

    Immutable; use ``override`` to derive a changed copy.
    """

    kind: SeparatorKind = SeparatorKind.CHAR_DELIMITERS
    char: CharSeparatorConfig = field(default_factory=CharSeparatorConfig)
    escaped_list: EscapedListConfig = field(default_factory=EscapedListConfig)
    offset: OffsetConfig = field(default_factory=OffsetConfig)
    char_delimiters: CharDelimitersConfig = field(default_factory=CharDelimitersConfig)
    classifier: ClassifierConfig = field(default_factory=ClassifierConfig)

    use_views: bool = False
    raise_on_error: bool = False
    enable_diagnostics: bool = True
    correlation_id: Optional[str] = None
    name: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate the complete configuration."""
        try:
            if not isinstance(self.kind, SeparatorKind):
                raise ValueError("kind must be a SeparatorKind")
            for section in _SECTIONS:
                getattr(self, section).__post_init__()
        except ValueError as e:
            raise ConfigValidationError(str(e)) from e

        if self.use_views and self.kind is SeparatorKind.ESCAPED_LIST:
            raise ConfigValidationError(
                "The escaped list separator builds tokens character by character "
                "and cannot write into token views",
                field_name="use_views",
                suggestions=["Set use_views=False", "Choose another separator kind"],
            )

    def build_separator(self) -> Separator:
        """Create a fresh separator for this configuration."""
        if self.kind is SeparatorKind.CHAR:
            return CharSeparator(
                self.char.dropped_delims,
                self.char.kept_delims,
                self.char.empty_tokens,
                classifier=self.classifier.build(),
            )
        if self.kind is SeparatorKind.ESCAPED_LIST:
            return EscapedListSeparator(
                self.escaped_list.escape,
                self.escaped_list.separator,
                self.escaped_list.quote,
            )
        if self.kind is SeparatorKind.OFFSET:
            return OffsetSeparator(
                self.offset.offsets,
                self.offset.wrap_offsets,
                self.offset.return_partial_last,
            )
        return CharDelimitersSeparator(
            self.char_delimiters.return_delims,
            self.char_delimiters.returnable,
            self.char_delimiters.nonreturnable,
            classifier=self.classifier.build(),
        )

    def overlapping_delimiters(self) -> List[str]:
        """List characters configured in more than one role for the chosen kind.

        Overlaps are legal; the separator resolves them by the order in which it
        checks roles. This is reported as a diagnostic only.
        """
        if self.kind is SeparatorKind.ESCAPED_LIST:
            roles = [self.escaped_list.escape, self.escaped_list.separator,
                     self.escaped_list.quote]
        elif self.kind is SeparatorKind.CHAR:
            roles = [self.char.dropped_delims or "", self.char.kept_delims or ""]
        elif self.kind is SeparatorKind.CHAR_DELIMITERS:
            roles = [self.char_delimiters.returnable or "",
                     self.char_delimiters.nonreturnable or ""]
        else:
            return []
        seen: Dict[str, int] = {}
        for role in roles:
            for ch in set(role):
                seen[ch] = seen.get(ch, 0) + 1
        return sorted(ch for ch, count in seen.items() if count > 1)

    def override(self, **kwargs: Any) -> "TokenizerConfig":
        """Create a new configuration with specific overrides.

        Args:
            **kwargs: Top-level fields, or section fields as ``section__field``

        Returns:
            New TokenizerConfig instance with overrides applied

        Example:
            >>> config = TokenizerConfig.csv()
            >>> tsv = config.override(escaped_list__separator="\\t")
        """
        nested_overrides: Dict[str, Dict[str, Any]] = {}
        new_fields: Dict[str, Any] = {}
        for key, value in kwargs.items():
            if "__" in key:
                section, field_name = key.split("__", 1)
                if section not in _SECTIONS:
                    raise ConfigValidationError(
                        f"Unknown configuration section: {section}",
                        field_name=key,
                        suggestions=list(_SECTIONS),
                    )
                nested_overrides.setdefault(section, {})[field_name] = value
            else:
                new_fields[key] = value

        for section, overrides in nested_overrides.items():
            try:
                new_fields[section] = replace(getattr(self, section), **overrides)
            except (TypeError, ValueError) as e:
                raise ConfigValidationError(str(e), field_name=section) from e

        return replace(self, **new_fields)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary format."""
        def _dataclass_to_dict(obj: Any) -> Any:
            if hasattr(obj, "__dataclass_fields__"):
                return {
                    name: _dataclass_to_dict(getattr(obj, name))
                    for name in obj.__dataclass_fields__
                }
            if isinstance(obj, Enum):
                return obj.name
            if isinstance(obj, (list, tuple)):
                return [_dataclass_to_dict(item) for item in obj]
            return obj

        return _dataclass_to_dict(self)

    def to_json(self, indent: int = 2) -> str:
        """Convert configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TokenizerConfig":
        """Create configuration from dictionary.

        Enum values are given by member name. Unknown keys are rejected.
        """
        def _dict_to_dataclass(data_dict: Dict[str, Any], target_class: type) -> Any:
            if not isinstance(data_dict, dict):
                raise ConfigValidationError(
                    f"Expected an object for {target_class.__name__}, "
                    f"got {type(data_dict).__name__}"
                )
            known = target_class.__dataclass_fields__
            unknown = sorted(set(data_dict) - set(known))
            if unknown:
                raise ConfigValidationError(
                    f"Unknown {target_class.__name__} fields: {', '.join(unknown)}",
                    field_name=unknown[0],
                    suggestions=sorted(known),
                )

            field_values: Dict[str, Any] = {}
            for field_name, value in data_dict.items():
                field_type = known[field_name].type
                if hasattr(field_type, "__dataclass_fields__"):
                    field_values[field_name] = _dict_to_dataclass(value, field_type)
                elif hasattr(field_type, "__members__") and isinstance(value, str):
                    try:
                        field_values[field_name] = field_type[value]
                    except KeyError as e:
                        raise ConfigValidationError(
                            f"Invalid value {value!r} for {field_name}",
                            field_name=field_name,
                            suggestions=list(field_type.__members__),
                        ) from e
                else:
                    field_values[field_name] = value
            try:
                return target_class(**field_values)
            except ValueError as e:
                raise ConfigValidationError(str(e)) from e

        return _dict_to_dataclass(data, cls)

    @classmethod
    def from_json(cls, json_str: str) -> "TokenizerConfig":
        """Create configuration from JSON string."""
        return cls.from_dict(json.loads(json_str))

    # Preset factory methods
    @classmethod
    def csv(cls, separator: str = ",", quote: str = '"', escape: str = "\\") -> "TokenizerConfig":
        """Comma separated values with quoting and backslash escapes."""
        return cls(
            kind=SeparatorKind.ESCAPED_LIST,
            escaped_list=EscapedListConfig(escape=escape, separator=separator, quote=quote),
            name="csv",
        )

    @classmethod
    def whitespace(cls) -> "TokenizerConfig":
        """Split on whitespace, returning punctuation as separate tokens."""
        return cls(kind=SeparatorKind.CHAR, char=CharSeparatorConfig(), name="whitespace")

    @classmethod
    def fixed_width(
        cls,
        offsets: List[int],
        wrap_offsets: bool = True,
        return_partial_last: bool = True
    ) -> "TokenizerConfig":
        """Fixed-width fields."""
        return cls(
            kind=SeparatorKind.OFFSET,
            offset=OffsetConfig(list(offsets), wrap_offsets, return_partial_last),
            name="fixed_width",
        )

    @classmethod
    def strtok(
        cls,
        dropped_delims: str,
        kept_delims: Optional[str] = None,
        keep_empty_tokens: bool = False
    ) -> "TokenizerConfig":
        """Classic strtok-style splitting on explicit delimiters."""
        policy = EmptyTokenPolicy.KEEP if keep_empty_tokens else EmptyTokenPolicy.DROP
        return cls(
            kind=SeparatorKind.CHAR,
            char=CharSeparatorConfig(dropped_delims, kept_delims, policy),
            name="strtok",
        )
