"""Dependency resolution collaborators."""

from jarlens.resolvers.maven import MavenRepositoryLocator, MavenResolver, parse_bom

__all__ = ["MavenRepositoryLocator", "MavenResolver", "parse_bom"]
