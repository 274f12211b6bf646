"""Reading and writing a JSON cache file under a cross-process lock."""

import json
import logging
import os
import uuid
from pathlib import Path
from typing import Any

from jarlens.utils.locking import ProcessFileLock

logger = logging.getLogger(__name__)


class JsonStore:
    """A single JSON document on disk shared between processes.

    Writes go to a temporary sibling that then replaces the target, so a
    reader never observes a partially written file.
    """

    def __init__(self, path: Path | str, lock_name: str, lock_timeout: float = 3.0):
        self.path = Path(path)
        self.lock_name = lock_name
        self.lock_timeout = lock_timeout

    def _lock(self) -> ProcessFileLock:
        return ProcessFileLock(self.path.parent, self.lock_name, timeout=self.lock_timeout)

    def read(self) -> Any:
        """Return the decoded document, or None if absent or corrupt."""
        if not self.path.exists():
            return None
        try:
            with self._lock():
                if not self.path.exists():
                    return None
                return json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning(f"Ignoring unreadable cache {self.path}: {exc}")
            return None

    def write(self, document: Any) -> bool:
        """Persist the document. Returns False if it could not be written."""
        tmp_path = self.path.with_name(f"{self.path.name}.{os.getpid()}.{uuid.uuid4().hex}.tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self._lock():
                tmp_path.write_text(json.dumps(document, ensure_ascii=False), encoding="utf-8")
                tmp_path.replace(self.path)
        except OSError as exc:
            logger.warning(f"Failed to save cache {self.path}: {exc}")
            tmp_path.unlink(missing_ok=True)
            return False
        return True
