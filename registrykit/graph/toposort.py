"""Depth-first topological ordering with best-effort cycle handling."""

from __future__ import annotations

from typing import AbstractSet, Callable, Dict, Iterable, Iterator, List, Optional, Sequence, Tuple

from ..errors import CycleError

_VISITING = 1
_DONE = 2


def toposort(
    names: Sequence[str],
    dependencies_of: Callable[[str], Iterable[str]],
    relevant: Optional[AbstractSet[str]] = None,
    *,
    strict: bool = False,
) -> List[str]:
    """Order ``names`` so that every entry follows its in-scope dependencies.

    Dependencies outside ``relevant`` (defaults to ``names``) are ignored.
    Traversal is a post-order DFS in input order, so identical inputs always
    give identical output. A node reached again while still on the stack is
    treated as already emitted, which silently breaks the cycle; with
    ``strict=True`` a ``CycleError`` naming the cycle is raised instead.
    """
    scope = frozenset(names) if relevant is None else relevant
    state: Dict[str, int] = {}
    result: List[str] = []

    for root in names:
        if root in state:
            continue
        state[root] = _VISITING
        path: List[str] = [root]
        stack: List[Tuple[str, Iterator[str]]] = [(root, iter(dependencies_of(root)))]
        while stack:
            node, pending = stack[-1]
            advanced = False
            for dependency in pending:
                if dependency not in scope:
                    continue
                marker = state.get(dependency)
                if marker is None:
                    state[dependency] = _VISITING
                    path.append(dependency)
                    stack.append((dependency, iter(dependencies_of(dependency))))
                    advanced = True
                    break
                if marker == _VISITING and strict:
                    start = path.index(dependency)
                    raise CycleError(path[start:] + [dependency])
            if not advanced:
                stack.pop()
                path.pop()
                state[node] = _DONE
                result.append(node)
    return result


__all__ = ["toposort"]
