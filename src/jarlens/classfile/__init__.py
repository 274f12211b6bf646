"""Minimal decoding of compiled Java class files."""

from jarlens.classfile.parser import ClassFileParser, ClassFormatError, parse_class

__all__ = ["ClassFileParser", "ClassFormatError", "parse_class"]
