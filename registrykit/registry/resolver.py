"""Transitive resolution of requested registry components."""

from __future__ import annotations

from typing import Dict, Iterable, List, Sequence

from ..errors import RegistryError, UnknownComponentError
from ..graph import DependencyGraph, toposort
from ..models import NpmDependency, RegistryComponent, RegistryFile, ResolvedInstallSet


def resolve(registry: Iterable[RegistryComponent], requested: Sequence[str]) -> ResolvedInstallSet:
    """Compute the closure of ``requested`` with deduplicated files and packages.

    Every unknown requested key is reported at once before anything else
    happens. A dependency naming a key the registry does not contain means
    the registry itself is broken and raises ``RegistryError``.

    Components are ordered dependency-first, visiting requested keys in the
    order given; files and packages follow that order, first occurrence wins.
    """
    components: Dict[str, RegistryComponent] = {}
    for component in registry:
        components.setdefault(component.key, component)

    requested_keys = list(dict.fromkeys(requested))
    unknown = [key for key in requested_keys if key not in components]
    if unknown:
        raise UnknownComponentError(unknown, components.keys())

    def _edges(key: str) -> Sequence[str]:
        dependencies = components[key].component_dependencies
        for dependency in dependencies:
            if dependency not in components:
                raise RegistryError(
                    f'Registry entry "{key}" depends on "{dependency}", which is not in the registry'
                )
        return dependencies

    graph = DependencyGraph(_edges)
    closure = graph.closure_of(requested_keys)
    ordered_keys = toposort(closure, graph.dependencies_of, frozenset(closure))
    ordered = [components[key] for key in ordered_keys]

    return ResolvedInstallSet(
        components=tuple(ordered),
        files=tuple(_unique_files(ordered)),
        npm_dependencies=tuple(_unique_packages(ordered)),
    )


def _unique_files(components: Iterable[RegistryComponent]) -> List[RegistryFile]:
    seen: Dict[str, RegistryFile] = {}
    for component in components:
        for registry_file in component.files:
            seen.setdefault(registry_file.destination, registry_file)
    return list(seen.values())


def _unique_packages(components: Iterable[RegistryComponent]) -> List[NpmDependency]:
    # Later version ranges for an already-seen package are discarded.
    seen: Dict[str, NpmDependency] = {}
    for component in components:
        for dependency in component.npm_dependencies:
            seen.setdefault(dependency.name, dependency)
    return list(seen.values())


__all__ = ["resolve"]
