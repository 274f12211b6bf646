"""Concurrent class and method search across dependency jars."""

from jarlens.search.engine import (
    CLASS_RESULT_LIMIT,
    METHOD_RESULT_LIMIT,
    USAGE_RESULT_LIMIT,
    PatternSearchEngine,
)
from jarlens.search.patterns import compile_pattern

__all__ = [
    "CLASS_RESULT_LIMIT",
    "METHOD_RESULT_LIMIT",
    "USAGE_RESULT_LIMIT",
    "PatternSearchEngine",
    "compile_pattern",
]
