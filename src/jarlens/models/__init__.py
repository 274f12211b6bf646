"""Data models for jarlens."""

from jarlens.models.detail import ClassDetail, MethodInfo, RecoveredSource
from jarlens.models.entries import (
    BomComponent,
    ClassEntry,
    DependencyRecord,
    JarIndex,
    ResolutionResult,
    SearchHit,
)

__all__ = [
    "BomComponent",
    "ClassDetail",
    "ClassEntry",
    "DependencyRecord",
    "JarIndex",
    "MethodInfo",
    "RecoveredSource",
    "ResolutionResult",
    "SearchHit",
]
