"""Parsing of generated schema bundles into named definitions."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterable, List, Sequence, Tuple

from ..errors import SchemaSourceError
from ..models import Definition

_DEFINITION_PATTERN = re.compile(r"\bconst\s+([A-Za-z_$][\w$]*)\s*=\s*([^;]+);", re.S)
_SCHEMAS_BLOCK_PATTERN = re.compile(r"export\s+const\s+schemas\s*=\s*\{([^}]+)\}", re.S)
# `z.object(...)`, `z\n  .object(...)` or composition such as `Base.and(...)`.
_SCHEMA_BODY_PATTERN = re.compile(r"z\s*\.|[A-Z][A-Za-z0-9]*\.")

_NORMALISATIONS: Tuple[Tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"\.prefault\("), ".default("),
    (re.compile(r"z\.record\(z\.string\(\)\)"), "z.record(z.string(), z.any())"),
    (re.compile(r"\.optional\(\)\s*\.default\(\{\}\)"), ".optional()"),
)


@dataclass(frozen=True)
class SchemaBundle:
    """Definitions found in a generated bundle, in source order."""

    definitions: Tuple[Definition, ...]
    exported: Tuple[str, ...]
    schema_names: FrozenSet[str]

    def get(self, name: str) -> Definition | None:
        for definition in self.definitions:
            if definition.name == name:
                return definition
        return None

    def missing_exports(self, suffix: str) -> List[str]:
        """Exported operation names that have no matching definition."""
        defined = {definition.name for definition in self.definitions}
        return [name for name in self.exported if suffix in name and name not in defined]


def normalise(text: str, stub_references: Iterable[str] = ()) -> str:
    """Apply textual fixes for known generator quirks."""
    result = text
    for pattern, replacement in _NORMALISATIONS:
        result = pattern.sub(replacement, result)
    for name in stub_references:
        escaped = re.escape(name)
        result = re.sub(rf":\s*{escaped},", ": z.any().optional(),", result)
        result = re.sub(rf"z\.array\({escaped}\)", "z.array(z.any())", result)
    return result


def parse_bundle(text: str, *, stub_references: Sequence[str] = ()) -> SchemaBundle:
    """Extract definitions and the exported schema names from bundle text."""
    content = normalise(text, stub_references)

    block = _SCHEMAS_BLOCK_PATTERN.search(content)
    if block is None:
        raise SchemaSourceError("Could not find schema definitions in generated file")
    exported = _parse_exported_names(block.group(1))

    definitions: Dict[str, Definition] = {}
    for match in _DEFINITION_PATTERN.finditer(content):
        name, body = match.group(1), match.group(2).strip()
        if name == "schemas" or name in definitions:
            continue
        definitions[name] = Definition(name=name, body=body)

    schema_names = frozenset(
        name for name, definition in definitions.items() if _SCHEMA_BODY_PATTERN.match(definition.body)
    )
    return SchemaBundle(
        definitions=tuple(definitions.values()),
        exported=tuple(exported),
        schema_names=schema_names,
    )


def _parse_exported_names(block: str) -> List[str]:
    names: List[str] = []
    for entry in block.split(","):
        name = entry.split(":", 1)[0].strip()
        if name and name not in names:
            names.append(name)
    return names


__all__ = ["SchemaBundle", "normalise", "parse_bundle"]
