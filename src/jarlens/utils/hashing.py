"""Content hashing used to detect changed jars."""

import hashlib
import logging
from pathlib import Path

logger = logging.getLogger(__name__)

_CHUNK_SIZE = 1 << 20


def compute_hash(path: str | Path) -> str:
    """Return the lowercase hex MD5 digest of a file's bytes.

    Unreadable files yield an empty string, which never matches a
    stored digest.
    """
    digest = hashlib.md5()
    try:
        with open(path, "rb") as fh:
            while True:
                chunk = fh.read(_CHUNK_SIZE)
                if not chunk:
                    break
                digest.update(chunk)
    except OSError as exc:
        logger.warning(f"Cannot hash {path}: {exc}")
        return ""
    return digest.hexdigest()
