"""Registry document validation and flattening into component snapshots."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..errors import RegistryError
from ..models import NpmDependency, RegistryComponent, RegistryFile

PROVIDER_PREFIX = "providers/"
UTIL_PREFIX = "utils/"


class _FileEntry(BaseModel):
    model_config = ConfigDict(extra="ignore")

    path: str
    target: Optional[str] = None


class _Entry(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    name: str
    files: List[Union[str, _FileEntry]] = Field(default_factory=list)
    dependencies: List[str] = Field(default_factory=list)
    description: Optional[str] = None
    npm_dependencies: List[str] = Field(default_factory=list, alias="npmDependencies")


class _ComponentEntry(_Entry):
    category: str = "other"
    providers: List[str] = Field(default_factory=list)
    utils: List[str] = Field(default_factory=list)


class _Category(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str
    description: Optional[str] = None


class _InitSection(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    files: List[Union[str, _FileEntry]] = Field(default_factory=list)
    npm_dependencies: List[str] = Field(default_factory=list, alias="npmDependencies")


class _Document(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    name: str = "registry"
    description: Optional[str] = None
    base_url: Optional[str] = Field(default=None, alias="baseUrl")
    categories: Dict[str, _Category] = Field(default_factory=dict)
    utils: Dict[str, _Entry] = Field(default_factory=dict)
    providers: Dict[str, _Entry] = Field(default_factory=dict)
    components: Dict[str, _ComponentEntry] = Field(default_factory=dict)
    init: _InitSection = Field(default_factory=_InitSection)


@dataclass(frozen=True)
class Registry:
    """Immutable snapshot of a fetched registry document."""

    name: str
    components: Tuple[RegistryComponent, ...]
    categories: Dict[str, str] = field(default_factory=dict)
    init_files: Tuple[RegistryFile, ...] = ()
    init_packages: Tuple[NpmDependency, ...] = ()

    def __iter__(self) -> Iterator[RegistryComponent]:
        return iter(self.components)

    def __len__(self) -> int:
        return len(self.components)

    def get(self, key: str) -> Optional[RegistryComponent]:
        for component in self.components:
            if component.key == key:
                return component
        return None

    def keys(self, kind: Optional[str] = None) -> List[str]:
        return [c.key for c in self.components if kind is None or c.kind == kind]

    def of_kind(self, kind: str) -> List[RegistryComponent]:
        return [c for c in self.components if c.kind == kind]

    def by_category(self) -> Dict[str, List[RegistryComponent]]:
        """Components grouped by category key, in registry order."""
        grouped: Dict[str, List[RegistryComponent]] = {}
        for component in self.of_kind("component"):
            grouped.setdefault(component.category, []).append(component)
        return grouped

    def category_name(self, key: str) -> str:
        return self.categories.get(key, key)


def load_registry(payload: Mapping[str, Any]) -> Registry:
    """Validate a decoded registry document and flatten it into one snapshot."""
    if not isinstance(payload, Mapping):
        raise RegistryError("Registry document must be a JSON object")
    try:
        document = _Document.model_validate(payload)
    except ValidationError as exc:
        raise RegistryError(f"Malformed registry document: {exc}") from exc

    components: List[RegistryComponent] = []
    for key, entry in document.utils.items():
        components.append(
            _build(
                f"{UTIL_PREFIX}{_strip(key, UTIL_PREFIX)}",
                entry,
                kind="util",
                category="utils",
                dependencies=[_util_dependency(dep, document) for dep in entry.dependencies],
            )
        )
    for key, entry in document.providers.items():
        components.append(
            _build(
                f"{PROVIDER_PREFIX}{_strip(key, PROVIDER_PREFIX)}",
                entry,
                kind="provider",
                category="providers",
                dependencies=[_qualify(dep, PROVIDER_PREFIX) for dep in entry.dependencies],
            )
        )
    for key, entry in document.components.items():
        dependencies = list(entry.dependencies)
        dependencies.extend(_qualify(dep, PROVIDER_PREFIX) for dep in entry.providers)
        dependencies.extend(_qualify(dep, UTIL_PREFIX) for dep in entry.utils)
        components.append(
            _build(key, entry, kind="component", category=entry.category, dependencies=dependencies)
        )

    return Registry(
        name=document.name,
        components=tuple(components),
        categories={key: category.name for key, category in document.categories.items()},
        init_files=tuple(_file(item) for item in document.init.files),
        init_packages=tuple(NpmDependency.parse(dep) for dep in document.init.npm_dependencies),
    )


def _build(
    key: str,
    entry: _Entry,
    *,
    kind: str,
    category: str,
    dependencies: List[str],
) -> RegistryComponent:
    return RegistryComponent(
        key=key,
        name=entry.name,
        category=category,
        files=tuple(_file(item) for item in entry.files),
        component_dependencies=tuple(dict.fromkeys(dependencies)),
        npm_dependencies=tuple(NpmDependency.parse(dep) for dep in entry.npm_dependencies if dep.strip()),
        kind=kind,
        description=entry.description,
    )


def _file(item: Union[str, _FileEntry]) -> RegistryFile:
    if isinstance(item, str):
        return RegistryFile(path=item)
    return RegistryFile(path=item.path, target=item.target)


def _strip(name: str, prefix: str) -> str:
    return name[len(prefix) :] if name.startswith(prefix) else name


def _qualify(name: str, prefix: str) -> str:
    return f"{prefix}{_strip(name, prefix)}"


def _util_dependency(name: str, document: _Document) -> str:
    # Utility dependencies may name providers or other utilities.
    if name.startswith(PROVIDER_PREFIX) or name in document.providers:
        return _qualify(name, PROVIDER_PREFIX)
    return _qualify(name, UTIL_PREFIX)


__all__ = ["PROVIDER_PREFIX", "Registry", "UTIL_PREFIX", "load_registry"]
