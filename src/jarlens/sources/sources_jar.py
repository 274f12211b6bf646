"""Source lookup in the ``-sources.jar`` published next to a binary jar."""

import logging
import zipfile
from pathlib import Path
from typing import Optional

from jarlens.models import RecoveredSource

logger = logging.getLogger(__name__)


def sources_jar_for(jar_path: str | Path) -> Path:
    """``foo-1.0.jar`` -> ``foo-1.0-sources.jar`` in the same directory."""
    path = Path(jar_path)
    return path.with_name(f"{path.stem}-sources.jar")


def source_entry_name(full_name: str) -> str:
    """Entry of the ``.java`` file declaring a class; nested classes live in their outer file."""
    top_level = full_name.split("$", 1)[0]
    return f"{top_level.replace('.', '/')}.java"


class SourcesJarProvider:
    """Reads the class's source file from the adjacent sources jar."""

    origin = "sources-jar"

    def recover(self, jar_path: str, full_name: str) -> Optional[RecoveredSource]:
        sources_jar = sources_jar_for(jar_path)
        if not sources_jar.is_file():
            return None

        entry_name = source_entry_name(full_name)
        try:
            with zipfile.ZipFile(sources_jar, "r") as zf:
                try:
                    raw = zf.read(entry_name)
                except KeyError:
                    logger.debug(f"{entry_name} not in {sources_jar}")
                    return None
        except (zipfile.BadZipFile, OSError) as exc:
            logger.warning(f"Unreadable sources jar {sources_jar}: {exc}")
            return None

        return RecoveredSource(text=raw.decode("utf-8", errors="replace"), origin=self.origin)
