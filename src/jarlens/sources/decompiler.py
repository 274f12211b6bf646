"""Source recovery by decompiling a single class with Fernflower."""

import logging
import tempfile
import zipfile
from pathlib import Path
from typing import Optional

from jarlens.models import RecoveredSource
from jarlens.utils.process import run_command

logger = logging.getLogger(__name__)


def class_entry_name(full_name: str) -> str:
    return f"{full_name.replace('.', '/')}.class"


class DecompilerProvider:
    """Decompiles the requested class entry only, never the whole jar."""

    origin = "decompiler"

    def __init__(self, fernflower_path: str, java_path: str = "java", timeout: float = 120.0):
        self.fernflower_path = fernflower_path
        self.java_path = java_path
        self.timeout = timeout

    def recover(self, jar_path: str, full_name: str) -> Optional[RecoveredSource]:
        entry_name = class_entry_name(full_name)
        with tempfile.TemporaryDirectory(prefix="jarlens-") as tmp:
            tmp_dir = Path(tmp)
            class_file = tmp_dir / "in" / Path(entry_name).name
            out_dir = tmp_dir / "out"
            class_file.parent.mkdir()
            out_dir.mkdir()

            try:
                with zipfile.ZipFile(jar_path, "r") as zf:
                    class_file.write_bytes(zf.read(entry_name))
            except KeyError:
                logger.debug(f"{entry_name} not in {jar_path}")
                return None
            except (zipfile.BadZipFile, OSError) as exc:
                logger.warning(f"Cannot extract {entry_name} from {jar_path}: {exc}")
                return None

            result = run_command(
                [self.java_path, "-jar", self.fernflower_path, str(class_file), str(out_dir)],
                timeout=self.timeout,
            )
            produced = sorted(out_dir.rglob("*.java"))
            if not produced:
                logger.info(f"Decompiler produced no source for {full_name}: {result.output[:500]}")
                return None
            return RecoveredSource(
                text=produced[0].read_text(encoding="utf-8", errors="replace"),
                origin=self.origin,
            )
