"""Composition root wiring the caches, search engine and detail extractor together."""

import logging
from pathlib import Path
from typing import Optional, Sequence

from jarlens.config import Config
from jarlens.detail import ClassDetailExtractor
from jarlens.models import ClassDetail, ResolutionResult, SearchHit
from jarlens.protocols import DependencyResolver, SourceProvider
from jarlens.resolvers import MavenResolver
from jarlens.search import PatternSearchEngine
from jarlens.sources import default_providers
from jarlens.storage import DependencyResolutionCache, JarIndexCache

logger = logging.getLogger(__name__)


class MavenInspector:
    """Answers class and method queries about a Maven project's dependencies.

    One instance owns one dependency cache and one jar index cache for the
    lifetime of the process. Both are loaded from disk on construction.
    """

    def __init__(
        self,
        config: Config,
        resolver: Optional[DependencyResolver] = None,
        providers: Optional[Sequence[SourceProvider]] = None,
        max_workers: int | None = None,
    ):
        self.config = config
        self.dependencies = DependencyResolutionCache(
            config.dependency_cache_file,
            resolver or MavenResolver(config),
            lock_timeout=config.lock_timeout,
        )
        self.jar_index = JarIndexCache(config.jar_cache_file, lock_timeout=config.lock_timeout)
        self.dependencies.load()
        self.jar_index.load()

        self.search = PatternSearchEngine(self.dependencies, self.jar_index, max_workers)
        self.extractor = ClassDetailExtractor(
            default_providers(config) if providers is None else providers
        )

    def resolve(self, descriptor: str | Path) -> ResolutionResult:
        return self.dependencies.resolve(descriptor)

    def search_classes(self, descriptor: str | Path, pattern: str) -> list[SearchHit]:
        return self.search.search_classes(descriptor, pattern)

    def search_methods(self, descriptor: str | Path, pattern: str) -> list[SearchHit]:
        return self.search.search_methods(descriptor, pattern)

    def inspect(self, jar_path: str, full_name: str) -> ClassDetail:
        return self.extractor.inspect(jar_path, full_name)

    def inspect_by_name(self, full_name: str) -> ClassDetail:
        """Inspect a class from any jar of any previously resolved project."""
        return self.extractor.inspect_by_name(full_name, self.dependencies.known_jar_paths())

    def find_method_usage(self, full_name: str, normalized_definition: str) -> list[SearchHit]:
        """Find classes in previously resolved jars that call the given method."""
        jar_paths = self.dependencies.known_jar_paths()
        logger.debug(f"Looking for callers of {full_name}.{normalized_definition} in {len(jar_paths)} jars")
        return self.search.find_method_usage(full_name, normalized_definition, jar_paths)
