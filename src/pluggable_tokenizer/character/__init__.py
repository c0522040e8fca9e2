"""Character processing layer for the tokenization engine.

This module provides the classifiers that decide which code units count as
whitespace or punctuation when a separator is built without explicit delimiters.
"""

from .classification import (
    CharacterClassifier,
    CodeUnit,
    CodeUnitClassifier,
    FallbackClassifier,
    NarrowClassifier,
    WideClassifier,
    classifier_for_width,
    code_point,
    code_point_set,
    default_classifier,
)

__all__ = [
    "CharacterClassifier",
    "CodeUnit",
    "CodeUnitClassifier",
    "FallbackClassifier",
    "NarrowClassifier",
    "WideClassifier",
    "classifier_for_width",
    "code_point",
    "code_point_set",
    "default_classifier",
]
