"""Command-line interface module for the pluggable tokenizer.

This module provides the ``pluggable-tokenize`` tool for splitting files with any
of the separators and for running the separator benchmarks.
"""

from .main import main

__all__ = ["main"]
