"""Runtime configuration read from environment variables."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

DEFAULT_CACHE_DIR = Path.home() / ".cache" / "jarlens"
DEPENDENCY_CACHE_FILE = "dependency_cache.json"
JAR_CACHE_FILE = "jar_content_cache.json"
LOG_FILE = "jarlens.log"


def _optional(env: Mapping[str, str], key: str) -> Optional[str]:
    value = env.get(key, "").strip()
    return value or None


@dataclass
class Config:
    """Paths to caches and external tools.

    Every field can be set through a ``JARLENS_*`` environment variable;
    see ``from_env`` for the names.
    """

    cache_dir: Path = DEFAULT_CACHE_DIR
    maven_path: str = "mvn"
    maven_settings: Optional[str] = None
    maven_repository: Optional[str] = None
    java_path: str = "java"
    fernflower_path: Optional[str] = None
    javap_path: Optional[str] = None  # None keeps the disassembly fallback off
    lock_timeout: float = 3.0
    maven_timeout: float = 600.0
    tool_timeout: float = 120.0

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> "Config":
        env = os.environ if env is None else env
        cache_dir = _optional(env, "JARLENS_CACHE_DIR")
        lock_timeout = _optional(env, "JARLENS_LOCK_TIMEOUT")
        return cls(
            cache_dir=Path(cache_dir).expanduser() if cache_dir else DEFAULT_CACHE_DIR,
            maven_path=_optional(env, "JARLENS_MAVEN_PATH") or "mvn",
            maven_settings=_optional(env, "JARLENS_MAVEN_SETTINGS"),
            maven_repository=_optional(env, "JARLENS_MAVEN_REPOSITORY"),
            java_path=_optional(env, "JARLENS_JAVA_PATH") or "java",
            fernflower_path=_optional(env, "JARLENS_FERNFLOWER_PATH"),
            javap_path=_optional(env, "JARLENS_JAVAP_PATH"),
            lock_timeout=float(lock_timeout) if lock_timeout else 3.0,
        )

    @property
    def dependency_cache_file(self) -> Path:
        return self.cache_dir / DEPENDENCY_CACHE_FILE

    @property
    def jar_cache_file(self) -> Path:
        return self.cache_dir / JAR_CACHE_FILE

    @property
    def log_file(self) -> Path:
        return self.cache_dir / LOG_FILE
