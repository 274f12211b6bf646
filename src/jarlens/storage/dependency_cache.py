"""Per-descriptor cache of resolved dependency jars, validated by modification time."""

import logging
import threading
from pathlib import Path
from typing import Optional

from jarlens.errors import DescriptorNotFoundError
from jarlens.models import DependencyRecord, ResolutionResult
from jarlens.protocols import DependencyResolver
from jarlens.storage.json_store import JsonStore
from jarlens.utils.paths import normalize_cache_key

logger = logging.getLogger(__name__)

LOCK_NAME = "dependency_cache"


class DependencyResolutionCache:
    """Resolves a project descriptor to the jars of its dependencies.

    A record is reused while the descriptor's mtime equals the stored one and
    the record lists at least one jar. Anything else re-runs the resolver,
    which is the expensive step this cache exists to avoid.
    """

    def __init__(
        self,
        cache_file: Path | str,
        resolver: DependencyResolver,
        lock_timeout: float = 3.0,
    ):
        self._store = JsonStore(cache_file, LOCK_NAME, lock_timeout)
        self._resolver = resolver
        self._records: dict[str, DependencyRecord] = {}
        self._lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._store.path

    def load(self) -> None:
        document = self._store.read()
        if not isinstance(document, dict):
            return
        loaded = {}
        for key, value in document.items():
            try:
                loaded[key] = DependencyRecord.from_dict(value)
            except (KeyError, TypeError, ValueError) as exc:
                logger.warning(f"Dropping malformed dependency record {key}: {exc}")
        with self._lock:
            self._records.update(loaded)

    def save(self) -> bool:
        with self._lock:
            document = {key: record.to_dict() for key, record in self._records.items()}
        return self._store.write(document)

    def cached_jar_paths(self, descriptor: str | Path) -> Optional[list[str]]:
        """Return the cached jars if the record is still valid, without resolving."""
        path = Path(descriptor)
        with self._lock:
            record = self._records.get(normalize_cache_key(str(descriptor)))
        if record is None or not record.jar_paths:
            return None
        try:
            if path.stat().st_mtime != record.last_modified:
                return None
        except OSError:
            return None
        return list(record.jar_paths)

    def resolve(self, descriptor: str | Path) -> ResolutionResult:
        """Return the dependency jars of a descriptor, resolving when stale.

        Raises:
            DescriptorNotFoundError: If the descriptor does not exist
            ResolutionFailedError: If the resolver failed
            ResolutionOutputMissingError: If the resolver produced no output
            ResolutionParseError: If the resolver output was unparsable
        """
        path = Path(descriptor)
        if not path.is_file():
            raise DescriptorNotFoundError(str(descriptor))
        project_root = str(path.parent.absolute())

        cached = self.cached_jar_paths(descriptor)
        if cached is not None:
            logger.debug(f"Dependency cache hit for {descriptor}")
            return ResolutionResult(project_root=project_root, jar_paths=cached)

        logger.info(f"Resolving dependencies of {descriptor}")
        repository = self._resolver.repository_root(path.parent)
        components = self._resolver.resolve(path)

        jar_paths = []
        for component in components:
            candidate = repository / component.relative_jar_path()
            if candidate.is_file():
                jar_paths.append(str(candidate))
            else:
                logger.debug(f"Artifact not in local repository: {candidate}")

        record = DependencyRecord(last_modified=path.stat().st_mtime, jar_paths=jar_paths)
        with self._lock:
            self._records[normalize_cache_key(str(descriptor))] = record
        self.save()

        logger.info(f"Resolved {len(jar_paths)} of {len(components)} dependencies for {descriptor}")
        return ResolutionResult(project_root=project_root, jar_paths=list(jar_paths))

    def invalidate(self, descriptor: str | Path) -> bool:
        """Forget the record for a descriptor so the next resolve re-runs the resolver."""
        with self._lock:
            removed = self._records.pop(normalize_cache_key(str(descriptor)), None)
        if removed is not None:
            self.save()
        return removed is not None

    def known_jar_paths(self) -> list[str]:
        """Distinct jars across every cached descriptor, in first-seen order."""
        with self._lock:
            records = list(self._records.values())
        seen: dict[str, None] = {}
        for record in records:
            for jar_path in record.jar_paths:
                seen.setdefault(jar_path, None)
        return list(seen)

    def keys(self) -> list[str]:
        with self._lock:
            return list(self._records)
