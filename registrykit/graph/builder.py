"""Dependency graph over named artifacts."""

from __future__ import annotations

from collections import deque
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Set

from ..models import Definition
from .scanner import scan

EdgeFunction = Callable[[str], Iterable[str]]


class DependencyGraph:
    """Adjacency view (node -> direct dependencies) backed by an edge function.

    Direct dependencies are computed on demand and memoised; ``closure_of``
    expands them eagerly with a breadth-first walk.
    """

    def __init__(self, edges: EdgeFunction) -> None:
        self._edges = edges
        self._cache: Dict[str, List[str]] = {}

    @classmethod
    def from_definitions(cls, definitions: Iterable[Definition]) -> "DependencyGraph":
        """Build a graph whose edges come from scanning definition bodies."""
        bodies = {definition.name: definition.body for definition in definitions}
        known = frozenset(bodies)

        def _edges(name: str) -> List[str]:
            body = bodies.get(name)
            if body is None:
                return []
            # Sorted so that traversal order never depends on set iteration.
            return sorted(scan(body, known, own_name=name))

        return cls(_edges)

    @classmethod
    def from_mapping(cls, adjacency: Mapping[str, Iterable[str]]) -> "DependencyGraph":
        return cls(lambda name: adjacency.get(name, ()))

    def dependencies_of(self, name: str) -> List[str]:
        """Direct dependencies of ``name`` in a stable order, without duplicates."""
        cached = self._cache.get(name)
        if cached is None:
            cached = list(dict.fromkeys(self._edges(name)))
            self._cache[name] = cached
        return list(cached)

    def closure_of(
        self,
        seeds: Iterable[str],
        *,
        include: Optional[Callable[[str], bool]] = None,
    ) -> List[str]:
        """Return seeds plus every node reachable from them, in discovery order.

        Nodes rejected by ``include`` are neither returned nor expanded. Each
        node is processed once, so cyclic graphs terminate.
        """
        seen: Set[str] = set()
        order: List[str] = []
        queue: deque[str] = deque()
        for seed in seeds:
            if seed in seen or (include is not None and not include(seed)):
                continue
            seen.add(seed)
            order.append(seed)
            queue.append(seed)

        while queue:
            current = queue.popleft()
            for dependency in self.dependencies_of(current):
                if dependency in seen:
                    continue
                if include is not None and not include(dependency):
                    continue
                seen.add(dependency)
                order.append(dependency)
                queue.append(dependency)
        return order


__all__ = ["DependencyGraph", "EdgeFunction"]
