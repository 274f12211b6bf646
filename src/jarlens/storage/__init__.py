"""Persistent caches for resolved dependencies and jar contents."""

from jarlens.storage.dependency_cache import DependencyResolutionCache
from jarlens.storage.jar_index import JarIndexCache, build_jar_index

__all__ = ["DependencyResolutionCache", "JarIndexCache", "build_jar_index"]
