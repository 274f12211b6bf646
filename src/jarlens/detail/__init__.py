"""Class detail extraction from recovered source."""

from jarlens.detail.extractor import ClassDetailExtractor
from jarlens.detail.java_text import normalize_definition, outline_disassembly, outline_source

__all__ = [
    "ClassDetailExtractor",
    "normalize_definition",
    "outline_disassembly",
    "outline_source",
]
