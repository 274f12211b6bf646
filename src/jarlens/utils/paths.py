"""Path helpers."""

import re

_SEPARATORS = re.compile(r"[\\/]+")


def normalize_cache_key(path: str) -> str:
    """Normalize a path for use as a cache key.

    Separators are unified to a single ``/``, the path is lowercased and
    a trailing separator is removed, so ``C:\\Work\\pom.xml`` and
    ``c:/work//pom.xml`` map to the same key.
    """
    if not path:
        return path
    normalized = _SEPARATORS.sub("/", path).lower()
    if len(normalized) > 1:
        normalized = normalized.rstrip("/")
    return normalized
