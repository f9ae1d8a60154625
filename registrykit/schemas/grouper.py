"""Partition operation definitions into self-contained resource groups."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import AbstractSet, Dict, Iterable, List, Optional, Sequence

from ..graph import DependencyGraph, toposort
from ..models import Definition, ResourceGroup

DEFAULT_VERBS = (
    "create",
    "patch",
    "update",
    "delete",
    "register",
    "upload",
    "send",
    "preview",
    "render",
)
DEFAULT_SUFFIX = "_Body"


@dataclass(frozen=True)
class Operation:
    """Verb and resource parsed from an operation definition name."""

    verb: str
    resource: str

    @property
    def resource_key(self) -> str:
        return self.resource.lower()

    @property
    def identifier(self) -> str:
        return f"{self.verb}{self.resource}"

    @property
    def export_name(self) -> str:
        return f"{self.identifier}Schema"

    @property
    def type_name(self) -> str:
        return f"{self.verb[:1].upper()}{self.verb[1:]}{self.resource}Schema"


class OperationMatcher:
    """Recognises `<verb><Resource><suffix>` definition names."""

    def __init__(self, verbs: Sequence[str] = DEFAULT_VERBS, suffix: str = DEFAULT_SUFFIX) -> None:
        if not verbs:
            raise ValueError("At least one operation verb is required")
        self.verbs = tuple(verb.lower() for verb in verbs)
        self.suffix = suffix
        alternatives = "|".join(re.escape(verb) for verb in self.verbs)
        self._pattern = re.compile(
            rf"^(?i:({alternatives}))([A-Z][A-Za-z0-9]*){re.escape(suffix)}$"
        )

    def match(self, name: str) -> Optional[Operation]:
        found = self._pattern.match(name)
        if found is None:
            return None
        return Operation(verb=found.group(1).lower(), resource=found.group(2))

    def is_operation(self, name: str) -> bool:
        return self._pattern.match(name) is not None


def group_definitions(
    definitions: Iterable[Definition],
    *,
    matcher: Optional[OperationMatcher] = None,
    dependency_names: Optional[AbstractSet[str]] = None,
) -> Dict[str, ResourceGroup]:
    """Group operation definitions by resource and pull in their dependencies.

    Only non-operation definitions (optionally restricted to
    ``dependency_names``) are followed as dependencies. A definition needed by
    several resources is copied into each of their groups.
    """
    matcher = matcher or OperationMatcher()
    ordered = list(definitions)
    by_name = {definition.name: definition for definition in ordered}
    graph = DependencyGraph.from_definitions(ordered)

    operation_names = {definition.name for definition in ordered if matcher.is_operation(definition.name)}

    def _is_dependency(name: str) -> bool:
        if name in operation_names or name not in by_name:
            return False
        return dependency_names is None or name in dependency_names

    operations: Dict[str, List[Definition]] = {}
    collected: Dict[str, List[str]] = {}
    for definition in ordered:
        operation = matcher.match(definition.name)
        if operation is None:
            continue
        key = operation.resource_key
        operations.setdefault(key, []).append(definition)
        bucket = collected.setdefault(key, [])
        direct = graph.dependencies_of(definition.name)
        for name in graph.closure_of(direct, include=_is_dependency):
            if name not in bucket:
                bucket.append(name)

    groups: Dict[str, ResourceGroup] = {}
    for key, members in operations.items():
        names = collected[key]
        sorted_names = toposort(names, graph.dependencies_of, frozenset(names))
        groups[key] = ResourceGroup(
            name=key,
            operations=tuple(members),
            dependencies=tuple(by_name[name] for name in sorted_names),
        )
    return groups


__all__ = [
    "DEFAULT_SUFFIX",
    "DEFAULT_VERBS",
    "Operation",
    "OperationMatcher",
    "group_definitions",
]
