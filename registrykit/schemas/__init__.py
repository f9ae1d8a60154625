"""Schema bundle parsing, resource grouping, and module emission."""

from .emitter import IndexAlias, SchemaEmitter, refine_operation_body
from .generator import SchemaBundleGenerator
from .grouper import DEFAULT_SUFFIX, DEFAULT_VERBS, Operation, OperationMatcher, group_definitions
from .source import SchemaBundle, normalise, parse_bundle

__all__ = [
    "DEFAULT_SUFFIX",
    "DEFAULT_VERBS",
    "IndexAlias",
    "Operation",
    "OperationMatcher",
    "SchemaBundle",
    "SchemaBundleGenerator",
    "SchemaEmitter",
    "group_definitions",
    "normalise",
    "parse_bundle",
    "refine_operation_body",
]
