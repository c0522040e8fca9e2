"""Result objects and diagnostic types for tokenization runs.

These types carry what a caller needs to judge a run after the fact: the diagnostics
raised while splitting, timing figures and a breakdown of the tokens produced.
"""

import time
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, Optional


class DiagnosticSeverity(Enum):
    """Severity levels for diagnostic entries."""

    DEBUG = auto()
    INFO = auto()
    WARNING = auto()
    ERROR = auto()      # Recoverable failure, e.g. a bad escape sequence
    CRITICAL = auto()   # Unexpected failure of the engine itself


@dataclass
class DiagnosticEntry:
    """Single diagnostic entry with context information."""

    severity: DiagnosticSeverity
    message: str
    component: str
    position: Optional[int] = None
    details: Optional[Dict[str, Any]] = None
    timestamp: float = field(default_factory=time.time)
    correlation_id: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate diagnostic entry."""
        if not self.message:
            raise ValueError("Diagnostic message cannot be empty")
        if not self.component:
            raise ValueError("Diagnostic component cannot be empty")
        if self.position is not None and self.position < 0:
            raise ValueError("Diagnostic position must be >= 0")


@dataclass
class PerformanceMetrics:
    """Performance metrics for a tokenization run."""

    processing_time_ms: float = 0.0
    characters_processed: int = 0
    tokens_generated: int = 0
    separator_calls: int = 0

    @property
    def characters_per_second(self) -> float:
        """Calculate characters processed per second."""
        if self.processing_time_ms <= 0:
            return 0.0
        return (self.characters_processed * 1000.0) / self.processing_time_ms

    @property
    def tokens_per_second(self) -> float:
        """Calculate tokens generated per second."""
        if self.processing_time_ms <= 0:
            return 0.0
        return (self.tokens_generated * 1000.0) / self.processing_time_ms


@dataclass
class TokenizationMetadata:
    """Breakdown of the tokens produced by one run."""

    separator_kind: Optional[str] = None
    total_tokens: int = 0
    empty_tokens: int = 0
    single_char_tokens: int = 0
    longest_token: int = 0
    token_length_distribution: Dict[int, int] = field(default_factory=dict)

    @property
    def empty_rate(self) -> float:
        """Fraction of tokens that are empty."""
        if self.total_tokens == 0:
            return 0.0
        return self.empty_tokens / self.total_tokens

    @property
    def average_length(self) -> float:
        """Mean token length."""
        if self.total_tokens == 0:
            return 0.0
        total = sum(
            length * count for length, count in self.token_length_distribution.items()
        )
        return total / self.total_tokens

    def add_token_length(self, length: int) -> None:
        """Record one token of the given length."""
        if length < 0:
            raise ValueError("Token length must be >= 0")
        self.total_tokens += 1
        if length == 0:
            self.empty_tokens += 1
        elif length == 1:
            self.single_char_tokens += 1
        self.longest_token = max(self.longest_token, length)
        self.token_length_distribution[length] = (
            self.token_length_distribution.get(length, 0) + 1
        )
