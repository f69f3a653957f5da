"""Utility functions for JsonNode."""

from .comparison import JsonEqualityComparer, EQUALITY_COMPARER
from .lazy_sequence import LazySequence
from .naming import to_camel_case
from .validation import ValidationUtils

__all__ = [
    "JsonEqualityComparer",
    "EQUALITY_COMPARER",
    "LazySequence",
    "to_camel_case",
    "ValidationUtils",
]
