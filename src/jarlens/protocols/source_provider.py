"""Protocol for readable-source providers."""

from typing import Optional, Protocol, runtime_checkable

from jarlens.models import RecoveredSource


@runtime_checkable
class SourceProvider(Protocol):
    """One step of the source recovery chain.

    Providers are tried in order; the first that returns a
    ``RecoveredSource`` wins. Returning None means "not available here".
    """

    @property
    def origin(self) -> str:
        """Identifier recorded on details built from this provider."""
        ...

    def recover(self, jar_path: str, full_name: str) -> Optional[RecoveredSource]:
        ...
