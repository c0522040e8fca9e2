"""High-level tokenization API with result objects and diagnostics.

``SeparatorTokenizer`` turns a ``TokenizerConfig`` into a separator, runs it over a
source and reports the outcome as a ``TokenizationResult``. Recoverable errors such
as a malformed escape sequence are recorded as diagnostics instead of propagating,
unless the configuration or the call asks for them to be raised.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Union

from pluggable_tokenizer.shared import (
    DiagnosticEntry,
    DiagnosticSeverity,
    PerformanceMetrics,
    TokenizationMetadata,
    TokenizerError,
    get_logger,
)
from pluggable_tokenizer.shared.config import TokenizerConfig

from .buffers import StringTokenBuffer, ViewTokenBuffer
from .cursor import source_range
from .iterator import TokenIterator
from .separators import Separator

Source = Union[str, bytes, bytearray, Iterable[Any]]


@dataclass
class TokenizationResult:
    """Result object for one tokenization run."""

    tokens: List[Any] = field(default_factory=list)
    success: bool = True

    metadata: TokenizationMetadata = field(default_factory=TokenizationMetadata)
    diagnostics: List[DiagnosticEntry] = field(default_factory=list)
    performance: PerformanceMetrics = field(default_factory=PerformanceMetrics)

    correlation_id: Optional[str] = None

    def __post_init__(self) -> None:
        """Calculate derived statistics."""
        if self.tokens:
            self._update_metadata()

    def _update_metadata(self) -> None:
        kind = self.metadata.separator_kind
        self.metadata = TokenizationMetadata(separator_kind=kind)
        for token in self.tokens:
            self.metadata.add_token_length(len(token))

    @property
    def token_count(self) -> int:
        """Get total number of tokens."""
        return len(self.tokens)

    @property
    def non_empty_tokens(self) -> List[Any]:
        """Tokens with at least one character."""
        return [token for token in self.tokens if len(token) > 0]

    def as_strings(self) -> List[Union[str, bytes]]:
        """Tokens as owned values, materializing any token views."""
        return [
            token.materialize() if hasattr(token, "materialize") else token
            for token in self.tokens
        ]

    def add_diagnostic(
        self,
        severity: DiagnosticSeverity,
        message: str,
        component: str,
        position: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None
    ) -> None:
        """Add a diagnostic entry."""
        self.diagnostics.append(
            DiagnosticEntry(
                severity=severity,
                message=message,
                component=component,
                position=position,
                details=details,
                correlation_id=self.correlation_id,
            )
        )

    def get_diagnostics_by_severity(
        self,
        severity: DiagnosticSeverity
    ) -> List[DiagnosticEntry]:
        """Get diagnostics of a specific severity level."""
        return [diag for diag in self.diagnostics if diag.severity == severity]

    def has_errors(self) -> bool:
        """Check if result contains any error diagnostics."""
        return any(
            diag.severity in (DiagnosticSeverity.ERROR, DiagnosticSeverity.CRITICAL)
            for diag in self.diagnostics
        )

    def summary(self) -> Dict[str, Any]:
        """Get summary statistics for the tokenization result."""
        return {
            "success": self.success,
            "separator": self.metadata.separator_kind,
            "token_count": self.token_count,
            "empty_tokens": self.metadata.empty_tokens,
            "empty_rate": self.metadata.empty_rate,
            "average_length": self.metadata.average_length,
            "processing_time_ms": self.performance.processing_time_ms,
            "characters_per_second": self.performance.characters_per_second,
            "diagnostics_count": len(self.diagnostics),
            "has_errors": self.has_errors(),
        }


class SeparatorTokenizer:
    """Configured tokenization engine.

    The separator built from the configuration is a template: every run drives its
    own copy, so one engine can tokenize many sources in turn.
    """

    def __init__(
        self,
        config: Optional[TokenizerConfig] = None,
        correlation_id: Optional[str] = None,
        separator: Optional[Separator] = None
    ) -> None:
        """Initialize the engine.

        Args:
            config: Configuration for tokenization behavior
            correlation_id: Optional correlation ID for request tracking
            separator: Ready-made separator overriding the configured kind
        """
        self.config = config or TokenizerConfig()
        self.correlation_id = correlation_id or self.config.correlation_id
        self._configured_separator = separator is None
        self.separator = separator or self.config.build_separator()
        self.logger = get_logger(
            __name__, self.correlation_id, "separator_tokenizer", self.separator.kind
        )

    @property
    def buffer_factory(self) -> Any:
        return ViewTokenBuffer if self.config.use_views else StringTokenBuffer

    def iter_tokens(self, source: Source) -> TokenIterator:
        """Return a lazy iterator over the tokens of ``source``."""
        begin, end = source_range(source)
        return TokenIterator(self.separator, begin, end, self.buffer_factory)

    def tokenize(
        self,
        source: Source,
        raise_on_error: Optional[bool] = None
    ) -> TokenizationResult:
        """Tokenize ``source`` completely.

        Args:
            source: ``str``, ``bytes`` or an iterable of code units
            raise_on_error: Re-raise ``TokenizerError`` instead of recording it;
                defaults to the configuration

        Returns:
            TokenizationResult with the tokens produced and diagnostics
        """
        if raise_on_error is None:
            raise_on_error = self.config.raise_on_error

        start_time = time.time()
        iterator = self.iter_tokens(source)
        tokens: List[Any] = []
        failure: Optional[TokenizerError] = None

        if self.logger.is_enabled_for(logging.DEBUG):
            self.logger.debug(
                "Starting tokenization",
                extra={"separator": repr(self.separator), "use_views": self.config.use_views}
            )

        try:
            for token in iterator:
                tokens.append(token)
        except TokenizerError as e:
            if raise_on_error:
                raise
            failure = e

        processing_time = (time.time() - start_time) * 1000
        result = TokenizationResult(
            tokens=tokens,
            success=failure is None,
            correlation_id=self.correlation_id,
        )
        result.metadata.separator_kind = self.separator.kind
        result.performance.processing_time_ms = processing_time
        result.performance.characters_processed = iterator.cursor.position
        result.performance.tokens_generated = len(tokens)
        result.performance.separator_calls = iterator.separator_calls

        if failure is not None:
            position = getattr(failure, "position", None)
            self.logger.tokenizer_failure(failure, len(tokens))
            result.add_diagnostic(
                DiagnosticSeverity.ERROR,
                str(failure),
                self.separator.kind,
                position=position,
                details={"exception_type": type(failure).__name__},
            )

        if self.config.enable_diagnostics and self._configured_separator:
            overlaps = self.config.overlapping_delimiters()
            if overlaps:
                result.add_diagnostic(
                    DiagnosticSeverity.WARNING,
                    f"Characters configured in more than one role: {''.join(overlaps)}",
                    "tokenizer_config",
                    details={"characters": overlaps},
                )

        self.logger.info(
            "Tokenization completed",
            extra={
                "token_count": len(tokens),
                "success": result.success,
                "processing_time_ms": processing_time,
            }
        )
        return result

    def configure(self, config: TokenizerConfig) -> None:
        """Replace the configuration and rebuild the separator."""
        self.config = config
        self.correlation_id = config.correlation_id or self.correlation_id
        self._configured_separator = True
        self.separator = config.build_separator()
        self.logger = get_logger(
            __name__, self.correlation_id, "separator_tokenizer", self.separator.kind
        )
        self.logger.info("Tokenizer configuration updated", extra={"kind": config.kind.name})
