"""Dependency graph primitives shared by the installer and schema emitter."""

from .builder import DependencyGraph, EdgeFunction
from .scanner import REFERENCE_PATTERN, scan
from .toposort import toposort

__all__ = [
    "DependencyGraph",
    "EdgeFunction",
    "REFERENCE_PATTERN",
    "scan",
    "toposort",
]
