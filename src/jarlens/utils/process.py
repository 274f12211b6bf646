"""Running external tools."""

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Sequence

logger = logging.getLogger(__name__)


@dataclass
class CommandResult:
    """Captured outcome of an external command."""

    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0 and not self.stderr.strip()

    @property
    def output(self) -> str:
        """Combined output for diagnostics."""
        return "\n".join(part for part in (self.stdout.strip(), self.stderr.strip()) if part)


def run_command(
    args: Sequence[str],
    cwd: Path | str | None = None,
    timeout: float | None = None,
) -> CommandResult:
    """Run a command to completion and capture its output.

    A missing executable or a timeout is reported as a failed result
    (return code 127 / 124) rather than raised.
    """
    logger.debug(f"Running {' '.join(args)} in {cwd or '.'}")
    try:
        completed = subprocess.run(
            list(args),
            cwd=cwd,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            timeout=timeout,
        )
    except FileNotFoundError as exc:
        logger.error(f"Command not found: {args[0]}")
        return CommandResult(returncode=127, stdout="", stderr=str(exc))
    except subprocess.TimeoutExpired:
        logger.error(f"Command timed out after {timeout}s: {' '.join(args)}")
        return CommandResult(returncode=124, stdout="", stderr=f"Timed out after {timeout}s")

    if completed.stderr.strip():
        logger.warning(f"{args[0]} wrote to stderr: {completed.stderr.strip()[:500]}")
    return CommandResult(
        returncode=completed.returncode,
        stdout=completed.stdout or "",
        stderr=completed.stderr or "",
    )
