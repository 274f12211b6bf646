"""Protocols for dependency resolution collaborators."""

from pathlib import Path
from typing import Protocol, runtime_checkable

from jarlens.models import BomComponent


@runtime_checkable
class DependencyResolver(Protocol):
    """Produces the dependency bill of materials for a project descriptor.

    Implementations run an external build tool. Failures are raised as
    ``ResolutionFailedError``, ``ResolutionOutputMissingError`` or
    ``ResolutionParseError``.
    """

    def resolve(self, descriptor: Path) -> list[BomComponent]:
        """Return the library coordinates the descriptor depends on."""
        ...

    def repository_root(self, working_dir: Path) -> Path:
        """Return the local repository root the coordinates live under."""
        ...


@runtime_checkable
class RepositoryLocator(Protocol):
    """Finds the filesystem root of the local artifact repository."""

    def locate(self, working_dir: Path) -> Path:
        ...
