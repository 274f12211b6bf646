"""Member listing from ``javap``, used when no source can be recovered."""

import logging
from typing import Optional

from jarlens.models import RecoveredSource
from jarlens.utils.process import run_command

logger = logging.getLogger(__name__)


class DisassemblyProvider:
    """Runs ``javap -p -s`` against the jar and returns its text output."""

    origin = "disassembly"

    def __init__(self, javap_path: str = "javap", timeout: float = 120.0):
        self.javap_path = javap_path
        self.timeout = timeout

    def recover(self, jar_path: str, full_name: str) -> Optional[RecoveredSource]:
        result = run_command(
            [self.javap_path, "-p", "-s", "-cp", jar_path, full_name],
            timeout=self.timeout,
        )
        if result.returncode != 0 or not result.stdout.strip():
            logger.info(f"javap failed for {full_name}: {result.output[:500]}")
            return None
        return RecoveredSource(text=result.stdout, origin=self.origin)
