"""Structured logging utilities for the tokenization engine.

Records are tagged with the emitting component, the separator kind being driven
(``"char"``, ``"escaped_list"`` ...) and an optional correlation ID, so a single
tokenization run can be followed from the CLI down to the separator that failed.
"""

import logging
from typing import Any, Dict, Optional


class CorrelationLogger:
    """Logger that tags every record with run context.

    The context travels in ``extra``, so it is available to formatters and filters
    as ``record.component``, ``record.separator_kind`` and ``record.correlation_id``.
    """

    def __init__(
        self,
        name: str,
        correlation_id: Optional[str] = None,
        component: Optional[str] = None,
        separator_kind: Optional[str] = None
    ) -> None:
        """Initialize the logger.

        Args:
            name: Logger name (typically __name__)
            correlation_id: Optional correlation ID for request tracking
            component: Component name; defaults to the last part of ``name``
            separator_kind: ``kind`` of the separator this logger reports on
        """
        self.logger = logging.getLogger(name)
        self.correlation_id = correlation_id
        self.component = component or name.rsplit(".", 1)[-1]
        self.separator_kind = separator_kind

    def _get_extra(self, extra: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        context: Dict[str, Any] = {
            "component": self.component,
            "correlation_id": self.correlation_id,
            "separator_kind": self.separator_kind,
        }
        if extra:
            context.update(extra)
        return context

    def _log(
        self,
        level: int,
        message: str,
        extra: Optional[Dict[str, Any]],
        exc_info: bool
    ) -> None:
        self.logger.log(level, message, extra=self._get_extra(extra), exc_info=exc_info)

    def is_enabled_for(self, level: int) -> bool:
        return self.logger.isEnabledFor(level)

    def bind(
        self,
        component: Optional[str] = None,
        separator_kind: Optional[str] = None
    ) -> "CorrelationLogger":
        """Return a logger sharing this correlation ID with some context replaced.

        Args:
            component: New component name, or keep the current one
            separator_kind: New separator kind, or keep the current one
        """
        return CorrelationLogger(
            self.logger.name,
            self.correlation_id,
            component or self.component,
            separator_kind or self.separator_kind,
        )

    def debug(self, message: str, extra: Optional[Dict[str, Any]] = None,
              exc_info: bool = False) -> None:
        self._log(logging.DEBUG, message, extra, exc_info)

    def info(self, message: str, extra: Optional[Dict[str, Any]] = None,
             exc_info: bool = False) -> None:
        self._log(logging.INFO, message, extra, exc_info)

    def warning(self, message: str, extra: Optional[Dict[str, Any]] = None,
                exc_info: bool = False) -> None:
        self._log(logging.WARNING, message, extra, exc_info)

    def error(self, message: str, extra: Optional[Dict[str, Any]] = None,
              exc_info: bool = True) -> None:
        """Log an error; the active exception's traceback is attached by default."""
        self._log(logging.ERROR, message, extra, exc_info)

    def tokenizer_failure(self, error: Exception, tokens_so_far: int) -> None:
        """Log a failed run with the position the separator reported, if any."""
        self._log(
            logging.ERROR,
            "Tokenization failed",
            {
                "error": str(error),
                "error_type": type(error).__name__,
                "position": getattr(error, "position", None),
                "tokens": tokens_so_far,
            },
            False,
        )


def get_logger(
    name: str,
    correlation_id: Optional[str] = None,
    component: Optional[str] = None,
    separator_kind: Optional[str] = None
) -> CorrelationLogger:
    """Get a context-tagging logger instance.

    Args:
        name: Logger name (typically __name__)
        correlation_id: Optional correlation ID for request tracking
        component: Component name for structured logging
        separator_kind: Separator kind the records relate to

    Returns:
        CorrelationLogger instance
    """
    return CorrelationLogger(name, correlation_id, component, separator_kind)
