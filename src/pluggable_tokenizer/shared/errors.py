"""Exception hierarchy for the tokenization engine."""

from typing import List, Optional


class TokenizerError(Exception):
    """Base exception for recoverable tokenization errors."""


class EscapedListError(TokenizerError):
    """Raised when an escaped list contains a malformed escape sequence."""

    CANNOT_END_WITH_ESCAPE = "cannot end with escape"
    UNKNOWN_ESCAPE_SEQUENCE = "unknown escape sequence"

    def __init__(self, message: str, position: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.position = position

    def __str__(self) -> str:
        return self.message


class TokenBufferError(TokenizerError, TypeError):
    """Raised when a token buffer backend cannot perform an operation."""


class PreconditionViolation(AssertionError):
    """A caller broke a contract of the engine.

    Not meant to be caught: it signals a programming error such as an empty offset
    table or dereferencing an exhausted token iterator.
    """


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigValidationError(ConfigError):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.field_name = field_name
        self.suggestions = suggestions or []
