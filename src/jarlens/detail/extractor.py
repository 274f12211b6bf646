"""Builds ClassDetail results from the first source provider that answers."""

import logging
import threading
import zipfile
from pathlib import Path
from typing import Iterable, Sequence

from jarlens.detail.java_text import SourceOutline, outline_disassembly, outline_source
from jarlens.models import ClassDetail, RecoveredSource
from jarlens.protocols import SourceProvider
from jarlens.sources.decompiler import class_entry_name
from jarlens.sources.disassembly import DisassemblyProvider

logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = (
    "Class not found in any analyzed dependencies. "
    "Please run 'analyze_pom_dependencies' first."
)


class ClassDetailExtractor:
    """Recovers the members of a class and caches the result by class name.

    Providers are tried in order and the first one to return source wins;
    sources are never merged. ``inspect`` never raises: failures come back
    as a ClassDetail with ``error`` set.
    """

    def __init__(self, providers: Sequence[SourceProvider]):
        self._providers = list(providers)
        self._cache: dict[str, ClassDetail] = {}
        self._lock = threading.Lock()

    @property
    def providers(self) -> list[SourceProvider]:
        return list(self._providers)

    def inspect(self, jar_path: str, full_name: str) -> ClassDetail:
        with self._lock:
            cached = self._cache.get(full_name)
        if cached is not None:
            return cached

        if not Path(jar_path).is_file():
            return ClassDetail.failed(full_name, f"Jar not found: {jar_path}")

        tried = []
        for provider in self._providers:
            tried.append(provider.origin)
            try:
                recovered = provider.recover(jar_path, full_name)
                if recovered is None:
                    continue
                detail = self._build_detail(full_name, recovered)
            except Exception:
                logger.exception(f"Source provider {provider.origin} failed for {full_name}")
                continue

            with self._lock:
                self._cache[full_name] = detail
            logger.debug(f"Recovered {full_name} via {recovered.origin}")
            return detail

        reason = f"tried {', '.join(tried)}" if tried else "no source providers configured"
        logger.info(f"No source for {full_name} ({reason})")
        return ClassDetail.unavailable(full_name, reason)

    def inspect_by_name(self, full_name: str, jar_paths: Iterable[str]) -> ClassDetail:
        """Inspect a class by locating the first jar that contains it."""
        entry_name = class_entry_name(full_name)
        for jar_path in jar_paths:
            if not Path(jar_path).is_file():
                continue
            try:
                with zipfile.ZipFile(jar_path, "r") as zf:
                    zf.getinfo(entry_name)
            except KeyError:
                continue
            except (zipfile.BadZipFile, OSError) as exc:
                logger.debug(f"Skipping unreadable jar {jar_path}: {exc}")
                continue
            return self.inspect(jar_path, full_name)

        return ClassDetail.failed(full_name, NOT_FOUND_MESSAGE)

    def clear(self) -> None:
        with self._lock:
            self._cache.clear()

    @staticmethod
    def _build_detail(full_name: str, recovered: RecoveredSource) -> ClassDetail:
        outline: SourceOutline
        if recovered.origin == DisassemblyProvider.origin:
            outline = outline_disassembly(recovered.text)
        else:
            # nested classes share their outer class's source file
            outline = outline_source(recovered.text, full_name.split("$")[1:])

        package = outline.package
        if package is None and "." in full_name:
            package = full_name.rsplit(".", 1)[0]

        return ClassDetail(
            name=full_name,
            package=package,
            kind=outline.kind,
            fields=outline.fields,
            methods=outline.methods,
            raw_source=recovered.text,
            imports=outline.imports,
            source_origin=recovered.origin,
        )
