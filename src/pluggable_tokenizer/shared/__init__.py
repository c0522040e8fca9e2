"""Shared utilities for the tokenization engine.

This module provides the result types, the exception hierarchy and the logging
helpers used by every layer. Configuration lives in ``shared.config`` and is
imported from there, since it builds separators from the tokenization layer.
"""

from .errors import (
    ConfigError,
    ConfigValidationError,
    EscapedListError,
    PreconditionViolation,
    TokenBufferError,
    TokenizerError,
)
from .logging import (
    CorrelationLogger,
    get_logger,
)
from .result import (
    DiagnosticEntry,
    DiagnosticSeverity,
    PerformanceMetrics,
    TokenizationMetadata,
)

__all__ = [
    "ConfigError",
    "ConfigValidationError",
    "EscapedListError",
    "PreconditionViolation",
    "TokenBufferError",
    "TokenizerError",
    "CorrelationLogger",
    "get_logger",
    "DiagnosticEntry",
    "DiagnosticSeverity",
    "PerformanceMetrics",
    "TokenizationMetadata",
]
