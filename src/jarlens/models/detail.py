"""Models describing the recovered structure of a single class."""

from dataclasses import dataclass, field
from typing import Optional

SOURCE_UNAVAILABLE = "Source unavailable"


@dataclass
class MethodInfo:
    """A method declaration recovered from source or disassembly text."""

    signature: str
    normalized_definition: str = ""
    parameters: list[str] = field(default_factory=list)
    return_type: Optional[str] = None
    raw_declaration: Optional[str] = None


@dataclass
class RecoveredSource:
    """Readable text for a class and the provider it came from."""

    text: str
    origin: str


@dataclass
class ClassDetail:
    """Structure of a class as shown to callers.

    A detail with ``error`` set is an explicit failure result; it is
    returned instead of raising so callers can render it directly.
    """

    name: str
    package: Optional[str] = None
    kind: str = "class"
    fields: list[str] = field(default_factory=list)
    methods: list[MethodInfo] = field(default_factory=list)
    raw_source: Optional[str] = None  # None when no provider produced text
    imports: list[str] = field(default_factory=list)
    source_origin: Optional[str] = None
    error: Optional[str] = None

    @property
    def is_error(self) -> bool:
        return self.error is not None

    @property
    def source_unavailable(self) -> bool:
        return self.error is not None and self.error.startswith(SOURCE_UNAVAILABLE)

    @classmethod
    def failed(cls, name: str, message: str) -> "ClassDetail":
        return cls(name=name, kind="error", error=message)

    @classmethod
    def unavailable(cls, name: str, reason: str = "") -> "ClassDetail":
        """Detail for a class whose source could not be recovered by any provider."""
        message = SOURCE_UNAVAILABLE if not reason else f"{SOURCE_UNAVAILABLE}: {reason}"
        return cls(name=name, kind="unknown", error=message)
