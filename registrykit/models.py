"""Core value types shared across registrykit components."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Tuple


@dataclass(frozen=True)
class Definition:
    """Named unit of generated code whose body may mention other definitions."""

    name: str
    body: str


@dataclass(frozen=True)
class ResourceGroup:
    """Operation definitions for one resource plus everything they depend on."""

    name: str
    operations: Tuple[Definition, ...]
    dependencies: Tuple[Definition, ...]

    def ordered(self) -> Tuple[Definition, ...]:
        """Dependencies first (already topologically sorted), then operations."""
        return self.dependencies + self.operations


@dataclass(frozen=True)
class RegistryFile:
    """A registry-relative source file and its optional destination template."""

    path: str
    target: Optional[str] = None

    @property
    def destination(self) -> str:
        return self.target or self.path


@dataclass(frozen=True)
class NpmDependency:
    """Third-party package requested by a registry component."""

    name: str
    version: Optional[str] = None

    @classmethod
    def parse(cls, raw: str) -> "NpmDependency":
        text = raw.strip()
        # A leading "@" belongs to the scope; only a later one separates the range.
        index = text.rfind("@")
        if index > 0:
            version = text[index + 1 :].strip()
            return cls(name=text[:index], version=version or None)
        return cls(name=text)

    @property
    def spec(self) -> str:
        return f"{self.name}@{self.version}" if self.version else self.name


@dataclass(frozen=True)
class RegistryComponent:
    """Catalog entry describing an installable component, provider, or utility."""

    key: str
    name: str
    category: str
    files: Tuple[RegistryFile, ...] = ()
    component_dependencies: Tuple[str, ...] = ()
    npm_dependencies: Tuple[NpmDependency, ...] = ()
    kind: str = "component"
    description: Optional[str] = None


@dataclass(frozen=True)
class InstallSummary:
    """Human-oriented overview of a resolved install set."""

    components: List[str]
    providers: List[str]
    utils: List[str]
    npm_packages: List[str]
    file_count: int


@dataclass(frozen=True)
class ResolvedInstallSet:
    """Closure of requested components with flattened, deduplicated files and packages."""

    components: Tuple[RegistryComponent, ...]
    files: Tuple[RegistryFile, ...]
    npm_dependencies: Tuple[NpmDependency, ...]

    @property
    def keys(self) -> List[str]:
        return [component.key for component in self.components]

    def summary(self) -> InstallSummary:
        by_kind: Dict[str, List[str]] = {"component": [], "provider": [], "util": []}
        for component in self.components:
            by_kind.setdefault(component.kind, []).append(component.name)
        return InstallSummary(
            components=by_kind["component"],
            providers=by_kind["provider"],
            utils=by_kind["util"],
            npm_packages=[dep.spec for dep in self.npm_dependencies],
            file_count=len(self.files),
        )


@dataclass(frozen=True)
class DestinationEntry:
    """Absolute target path paired with rewritten file content."""

    path: Path
    content: str
    source: str = ""


@dataclass
class InstallResult:
    """Outcome of writing a batch of destination entries."""

    written: List[Path] = field(default_factory=list)
    skipped: List[Path] = field(default_factory=list)
    failed: List[Tuple[Path, str]] = field(default_factory=list)
