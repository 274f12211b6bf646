"""Utility functions for jarlens."""

from jarlens.utils.hashing import compute_hash
from jarlens.utils.locking import ProcessFileLock
from jarlens.utils.paths import normalize_cache_key
from jarlens.utils.process import CommandResult, run_command

__all__ = [
    "CommandResult",
    "ProcessFileLock",
    "compute_hash",
    "normalize_cache_key",
    "run_command",
]
