"""Index and cache records for classes, jars and resolved dependencies."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class ClassEntry:
    """A class decoded from a compiled entry inside a jar."""

    full_name: str
    simple_name: str
    method_names: tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return {
            "fullName": self.full_name,
            "simpleName": self.simple_name,
            "methodNames": list(self.method_names),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ClassEntry":
        return cls(
            full_name=data["fullName"],
            simple_name=data["simpleName"],
            method_names=tuple(data.get("methodNames") or ()),
        )


@dataclass(frozen=True)
class JarIndex:
    """All parsable classes of one jar, keyed by the jar's content hash."""

    jar_path: str
    content_hash: str
    classes: tuple[ClassEntry, ...] = ()

    def to_dict(self) -> dict:
        return {
            "jarPath": self.jar_path,
            "fileHash": self.content_hash,
            "classes": [entry.to_dict() for entry in self.classes],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "JarIndex":
        return cls(
            jar_path=data["jarPath"],
            content_hash=data.get("fileHash") or "",
            classes=tuple(ClassEntry.from_dict(c) for c in data.get("classes") or ()),
        )


@dataclass
class DependencyRecord:
    """Resolved jars of a project descriptor, valid while its mtime is unchanged."""

    last_modified: float
    jar_paths: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"lastModified": self.last_modified, "jarPaths": list(self.jar_paths)}

    @classmethod
    def from_dict(cls, data: dict) -> "DependencyRecord":
        return cls(
            last_modified=float(data["lastModified"]),
            jar_paths=list(data.get("jarPaths") or []),
        )


@dataclass(frozen=True)
class SearchHit:
    """A class location returned by a search."""

    simple_name: str
    full_name: str
    jar_path: str


@dataclass(frozen=True)
class BomComponent:
    """A library coordinate reported by the dependency resolver."""

    group: str
    name: str
    version: str

    def relative_jar_path(self) -> str:
        """Path of the artifact's jar relative to the local repository root."""
        return "/".join(
            [*self.group.split("."), self.name, self.version, f"{self.name}-{self.version}.jar"]
        )


@dataclass
class ResolutionResult:
    """Outcome of resolving a project descriptor."""

    project_root: str
    jar_paths: list[str] = field(default_factory=list)

    def __str__(self) -> str:
        return f"{len(self.jar_paths)} jars found in {self.project_root}"
