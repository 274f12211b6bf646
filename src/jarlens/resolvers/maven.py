"""Maven-backed dependency resolution via the CycloneDX BOM plugin."""

import logging
import re
import xml.etree.ElementTree as ET
from pathlib import Path
from typing import Optional

from jarlens.config import Config
from jarlens.errors import (
    ResolutionFailedError,
    ResolutionOutputMissingError,
    ResolutionParseError,
)
from jarlens.models import BomComponent
from jarlens.protocols import RepositoryLocator
from jarlens.utils.process import run_command

logger = logging.getLogger(__name__)

BOM_GOAL = "org.cyclonedx:cyclonedx-maven-plugin:makeAggregateBom"
SETTINGS_GOAL = "help:effective-settings"
BOM_RELATIVE_PATH = Path("target") / "bom.xml"

_LOCAL_REPOSITORY = re.compile(r"<localRepository>(.*?)</localRepository>", re.IGNORECASE | re.DOTALL)


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _child_text(element: ET.Element, name: str) -> str:
    for child in element:
        if _local_name(child.tag) == name:
            return (child.text or "").strip()
    return ""


def parse_bom(bom_path: Path) -> list[BomComponent]:
    """Read library components from a CycloneDX BOM, whatever its schema version.

    Raises:
        ResolutionParseError: If the file is not well-formed XML
    """
    try:
        root = ET.parse(bom_path).getroot()
    except (ET.ParseError, OSError) as exc:
        raise ResolutionParseError(f"Failed to parse {bom_path}: {exc}") from exc

    components = []
    for element in root.iter():
        if _local_name(element.tag) != "component" or element.get("type") != "library":
            continue
        group = _child_text(element, "group")
        name = _child_text(element, "name")
        version = _child_text(element, "version")
        if group and name and version:
            components.append(BomComponent(group=group, name=name, version=version))
    return components


def _maven_command(config: Config, goal: str) -> list[str]:
    command = [config.maven_path]
    if config.maven_settings:
        command += ["-s", config.maven_settings]
    return command + ["-B", goal]


class MavenRepositoryLocator:
    """Finds the local Maven repository.

    Order: configured path, then ``<localRepository>`` from Maven's
    effective settings, then ``~/.m2/repository``. The answer is memoized.
    """

    def __init__(self, config: Config):
        self._config = config
        self._root: Optional[Path] = None

    def locate(self, working_dir: Path) -> Path:
        if self._root is not None:
            return self._root

        if self._config.maven_repository:
            self._root = Path(self._config.maven_repository).expanduser()
            return self._root

        result = run_command(
            _maven_command(self._config, SETTINGS_GOAL),
            cwd=working_dir,
            timeout=self._config.maven_timeout,
        )
        match = _LOCAL_REPOSITORY.search(result.stdout) if result.returncode == 0 else None
        if match and match.group(1).strip():
            self._root = Path(match.group(1).strip())
        else:
            self._root = Path.home() / ".m2" / "repository"
            logger.info(f"Falling back to default local repository {self._root}")
        return self._root


class MavenResolver:
    """Resolves a pom.xml by generating its aggregate CycloneDX BOM."""

    def __init__(self, config: Config, locator: RepositoryLocator | None = None):
        self._config = config
        self._locator = locator or MavenRepositoryLocator(config)

    def repository_root(self, working_dir: Path) -> Path:
        return self._locator.locate(working_dir)

    def resolve(self, descriptor: Path) -> list[BomComponent]:
        """Run Maven in the descriptor's directory and parse the produced BOM.

        Stderr output alone is not fatal: Maven prints warnings there, so a
        failed run counts as failure only when no BOM was written.
        """
        working_dir = descriptor.parent
        command = _maven_command(self._config, BOM_GOAL)
        result = run_command(command, cwd=working_dir, timeout=self._config.maven_timeout)

        bom_path = working_dir / BOM_RELATIVE_PATH
        if not bom_path.is_file():
            if not result.ok:
                raise ResolutionFailedError(
                    f"Maven execution returned error output.\nCmd: {' '.join(command)}",
                    result.output,
                )
            raise ResolutionOutputMissingError(
                f"Build failed or bom.xml not found at {bom_path}.\nOutput: {result.output}"
            )
        if not result.ok:
            logger.warning(f"Maven reported problems but produced {bom_path}; continuing")

        components = parse_bom(bom_path)
        logger.debug(f"{bom_path} lists {len(components)} library components")
        return components
