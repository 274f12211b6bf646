"""Protocol definitions for external collaborators."""

from jarlens.protocols.resolver import DependencyResolver, RepositoryLocator
from jarlens.protocols.source_provider import SourceProvider

__all__ = ["DependencyResolver", "RepositoryLocator", "SourceProvider"]
