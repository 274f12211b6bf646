"""Bounded, early-terminating searches fanned out over a jar set."""

import logging
import os
import struct
import threading
import zipfile
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Callable, Iterable, Optional

from jarlens.detail.java_text import split_normalized_definition
from jarlens.models import ClassEntry, SearchHit
from jarlens.search.patterns import compile_pattern, is_glob
from jarlens.storage import DependencyResolutionCache, JarIndexCache

logger = logging.getLogger(__name__)

CLASS_RESULT_LIMIT = 20
METHOD_RESULT_LIMIT = 50
USAGE_RESULT_LIMIT = 50


class BoundedResults:
    """Thread-safe hit collection that raises a stop signal once full."""

    def __init__(self, limit: int, dedupe: bool = False):
        self.limit = limit
        self.stop = threading.Event()
        self._dedupe = dedupe
        self._seen: set[tuple[str, str]] = set()
        self._hits: list[SearchHit] = []
        self._lock = threading.Lock()

    def add(self, hit: SearchHit) -> bool:
        """Record a hit. Returns False once the limit has been reached."""
        with self._lock:
            if len(self._hits) >= self.limit:
                self.stop.set()
                return False
            key = (hit.full_name, hit.jar_path)
            if self._dedupe:
                if key in self._seen:
                    return True
                self._seen.add(key)
            self._hits.append(hit)
            if len(self._hits) >= self.limit:
                self.stop.set()
            return True

    @property
    def hits(self) -> list[SearchHit]:
        with self._lock:
            return list(self._hits)


def _utf8_constant(text: str) -> bytes:
    """Encoded CONSTANT_Utf8_info entry, so a name never matches inside a longer one."""
    raw = text.encode("utf-8")
    return b"\x01" + struct.pack(">H", len(raw)) + raw


def _hit(entry: ClassEntry, jar_path: str) -> SearchHit:
    return SearchHit(simple_name=entry.simple_name, full_name=entry.full_name, jar_path=jar_path)


class PatternSearchEngine:
    """Searches the dependency jars of a project for classes and methods.

    One worker handles one jar. Workers check the shared stop signal between
    class entries, so a search ends soon after its result cap is reached even
    inside a large jar. Which of several equally valid matches make it into a
    capped result is not defined.
    """

    def __init__(
        self,
        dependencies: DependencyResolutionCache,
        jar_index: JarIndexCache,
        max_workers: int | None = None,
    ):
        self._dependencies = dependencies
        self._jar_index = jar_index
        self._max_workers = max_workers or os.cpu_count() or 4

    def search_classes(self, descriptor: str | Path, pattern: str) -> list[SearchHit]:
        """Find classes whose name matches the pattern.

        Glob patterns are tried against both the full and the simple name;
        substring patterns against the full name, which contains the
        simple name.
        """
        matches = compile_pattern(pattern)
        glob = is_glob(pattern)

        def class_matches(entry: ClassEntry) -> bool:
            if glob:
                return matches(entry.full_name) or matches(entry.simple_name)
            return matches(entry.full_name)

        jar_paths = self._dependencies.resolve(descriptor).jar_paths
        return self._search_indexes(jar_paths, class_matches, BoundedResults(CLASS_RESULT_LIMIT))

    def search_methods(self, descriptor: str | Path, pattern: str) -> list[SearchHit]:
        """Find classes declaring at least one method whose name matches the pattern."""
        matches = compile_pattern(pattern)

        def class_matches(entry: ClassEntry) -> bool:
            return any(matches(name) for name in entry.method_names)

        jar_paths = self._dependencies.resolve(descriptor).jar_paths
        return self._search_indexes(
            jar_paths, class_matches, BoundedResults(METHOD_RESULT_LIMIT, dedupe=True)
        )

    def find_method_usage(
        self,
        full_name: str,
        normalized_definition: str,
        jar_paths: Iterable[str],
    ) -> list[SearchHit]:
        """Find classes whose bytecode references a method.

        A class qualifies when its constant pool holds the owning class's
        internal name and the method name as whole UTF8 constants, and
        mentions every parameter type kept in the normalized definition (as a
        descriptor fragment such as ``/OrderDto;``).
        """
        method_name, parameter_types = split_normalized_definition(normalized_definition)
        owner_entry = f"{full_name.replace('.', '/')}.class"
        needles = [_utf8_constant(full_name.replace(".", "/")), _utf8_constant(method_name)]
        type_fragments = [
            (f"/{name};".encode("utf-8"), f"L{name};".encode("utf-8")) for name in parameter_types
        ]

        def references(entry_name: str, data: bytes) -> bool:
            if entry_name == owner_entry:
                return False
            if not all(needle in data for needle in needles):
                return False
            return all(slash in data or bare in data for slash, bare in type_fragments)

        results = BoundedResults(USAGE_RESULT_LIMIT, dedupe=True)

        def scan(jar_path: str) -> None:
            try:
                with zipfile.ZipFile(jar_path, "r") as zf:
                    for info in zf.infolist():
                        if results.stop.is_set():
                            return
                        if not info.filename.endswith(".class"):
                            continue
                        data = zf.read(info.filename)
                        if references(info.filename, data):
                            stem = Path(info.filename).stem
                            class_name = info.filename[: -len(".class")].replace("/", ".")
                            if not results.add(SearchHit(stem, class_name, jar_path)):
                                return
            except (zipfile.BadZipFile, OSError) as exc:
                logger.warning(f"Skipping unreadable jar {jar_path}: {exc}")

        self._fan_out(list(jar_paths), scan, results)
        return results.hits

    def _search_indexes(
        self,
        jar_paths: list[str],
        class_matches: Callable[[ClassEntry], bool],
        results: BoundedResults,
    ) -> list[SearchHit]:
        def scan(jar_path: str) -> None:
            index = self._jar_index.get(jar_path)
            if index is None:
                return
            for entry in index.classes:
                if results.stop.is_set():
                    return
                if class_matches(entry) and not results.add(_hit(entry, jar_path)):
                    return

        self._fan_out(jar_paths, scan, results)
        self._jar_index.save()
        return results.hits

    def _fan_out(
        self,
        jar_paths: list[str],
        scan: Callable[[str], None],
        results: BoundedResults,
    ) -> None:
        if not jar_paths:
            return

        def guarded(jar_path: str) -> Optional[str]:
            if results.stop.is_set():
                return None
            try:
                scan(jar_path)
            except Exception:
                logger.exception(f"Search failed in {jar_path}")
            return jar_path

        workers = min(self._max_workers, len(jar_paths))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="jarlens-search") as pool:
            list(pool.map(guarded, jar_paths))
        logger.debug(f"Searched {len(jar_paths)} jars, {len(results.hits)} hits")
