"""Named cross-process lock backed by an OS file lock."""

import logging
import os
import time
from pathlib import Path

IS_WINDOWS = os.name == "nt"
if not IS_WINDOWS:
    import fcntl
else:
    import msvcrt

logger = logging.getLogger(__name__)

_POLL_INTERVAL = 0.05


class ProcessFileLock:
    """Exclusive lock shared by every process using the same lock file.

    Acquisition waits at most ``timeout`` seconds. When the wait runs out the
    context manager still enters, unlocked, so a stuck peer can never hang
    this process; a warning is logged instead.
    """

    def __init__(self, directory: Path | str, name: str, timeout: float = 3.0):
        self.path = Path(directory) / f"{name}.lock"
        self.timeout = timeout
        self._fh = None
        self.locked = False

    def _try_lock(self) -> bool:
        try:
            if IS_WINDOWS:
                self._fh.seek(0)
                msvcrt.locking(self._fh.fileno(), msvcrt.LK_NBLCK, 1)
            else:
                fcntl.flock(self._fh.fileno(), fcntl.LOCK_EX | fcntl.LOCK_NB)
        except OSError:
            return False
        return True

    def acquire(self) -> bool:
        """Try to take the lock within the timeout. Returns True when held."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._fh = open(self.path, "a+")
        deadline = time.monotonic() + self.timeout
        while True:
            if self._try_lock():
                self.locked = True
                return True
            if time.monotonic() >= deadline:
                logger.warning(
                    f"Timed out after {self.timeout:.1f}s waiting for {self.path}; continuing without lock"
                )
                return False
            time.sleep(_POLL_INTERVAL)

    def release(self) -> None:
        if self._fh is None:
            return
        try:
            if self.locked:
                if IS_WINDOWS:
                    self._fh.seek(0)
                    msvcrt.locking(self._fh.fileno(), msvcrt.LK_UNLCK, 1)
                else:
                    fcntl.flock(self._fh.fileno(), fcntl.LOCK_UN)
        except OSError as exc:
            logger.warning(f"Failed to release {self.path}: {exc}")
        finally:
            self.locked = False
            self._fh.close()
            self._fh = None

    def __enter__(self) -> "ProcessFileLock":
        self.acquire()
        return self

    def __exit__(self, *exc_info) -> None:
        self.release()
