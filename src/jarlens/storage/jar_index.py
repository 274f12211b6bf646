"""Content-hash keyed cache of decoded jar contents."""

import logging
import threading
import zipfile
from pathlib import Path, PurePosixPath
from typing import Iterator, Optional

from jarlens.classfile import parse_class
from jarlens.models import ClassEntry, JarIndex
from jarlens.storage.json_store import JsonStore
from jarlens.utils.hashing import compute_hash

logger = logging.getLogger(__name__)

LOCK_NAME = "jar_content_cache"


def iter_class_entries(jar_path: str | Path) -> Iterator[ClassEntry]:
    """Yield a ClassEntry for every parsable ``.class`` entry of a jar.

    Entries that fail to parse are skipped.

    Raises:
        zipfile.BadZipFile: If the archive itself is corrupt
        OSError: If the archive cannot be read
    """
    with zipfile.ZipFile(jar_path, "r") as zf:
        for info in zf.infolist():
            if info.is_dir() or not info.filename.endswith(".class"):
                continue
            try:
                data = zf.read(info.filename)
            except (zipfile.BadZipFile, OSError, ValueError) as exc:
                logger.debug(f"Unreadable entry {info.filename} in {jar_path}: {exc}")
                continue
            entry = parse_class(data, PurePosixPath(info.filename).stem)
            if entry is not None:
                yield entry


def build_jar_index(jar_path: str, content_hash: str) -> JarIndex:
    """Decode every class in a jar. A corrupt jar yields an empty index."""
    try:
        classes = tuple(iter_class_entries(jar_path))
    except (zipfile.BadZipFile, OSError) as exc:
        logger.warning(f"Skipping unreadable jar {jar_path}: {exc}")
        classes = ()
    logger.debug(f"Indexed {len(classes)} classes from {jar_path}")
    return JarIndex(jar_path=jar_path, content_hash=content_hash, classes=classes)


class JarIndexCache:
    """Maps jar paths to their decoded classes, rebuilt when the jar's bytes change.

    Safe for concurrent ``get`` calls from worker threads. Persistence is
    explicit: call ``save`` after a bulk scan rather than after every jar.
    """

    def __init__(self, cache_file: Path | str, lock_timeout: float = 3.0):
        self._store = JsonStore(cache_file, LOCK_NAME, lock_timeout)
        self._entries: dict[str, JarIndex] = {}
        self._lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._store.path

    def load(self) -> None:
        """Merge the persisted cache into memory. Corrupt files are ignored."""
        document = self._store.read()
        if not isinstance(document, list):
            return
        loaded = {}
        for item in document:
            try:
                index = JarIndex.from_dict(item)
            except (KeyError, TypeError) as exc:
                logger.warning(f"Dropping malformed jar cache record: {exc}")
                continue
            loaded[index.jar_path] = index
        with self._lock:
            self._entries.update(loaded)
        logger.debug(f"Loaded {len(loaded)} jar indexes from {self.path}")

    def save(self) -> bool:
        with self._lock:
            document = [index.to_dict() for index in self._entries.values()]
        return self._store.write(document)

    def get(self, jar_path: str) -> Optional[JarIndex]:
        """Return the index for a jar, building it when absent or stale.

        Returns:
            The jar's index, or None if the jar does not exist
        """
        if not Path(jar_path).is_file():
            return None

        content_hash = compute_hash(jar_path)
        with self._lock:
            cached = self._entries.get(jar_path)
        if cached is not None and content_hash and cached.content_hash == content_hash:
            return cached

        index = build_jar_index(jar_path, content_hash)
        with self._lock:
            self._entries[jar_path] = index
        return index

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __contains__(self, jar_path: object) -> bool:
        with self._lock:
            return jar_path in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
