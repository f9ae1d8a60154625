"""Render resource groups as self-contained TypeScript schema modules."""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Mapping, Sequence, Tuple

from jinja2 import Environment, FileSystemLoader

from ..errors import SchemaSourceError
from ..logging import get_logger
from ..models import ResourceGroup
from .grouper import Operation, OperationMatcher

MODULE_SUFFIX = ".ts"
INDEX_MODULE = "index"

# Limits mirrored from the API so forms validate before submitting.
_BODY_REFINEMENTS: Tuple[Tuple[re.Pattern[str], str], ...] = (
    (
        re.compile(r"name: z\.string\(\)\.min\(1\)\.max\(100\)(?!\.max)"),
        'name: z.string().min(1).max(100, "Name must not exceed 100 characters")',
    ),
    (
        re.compile(r"description: z\.union\(\[z\.string\(\)(?!\.max)"),
        'description: z.union([z.string().max(4000, "Description must not exceed 4000 characters")',
    ),
    (re.compile(r"country: z\.string\(\)(?!\.min)"), "country: z.string().min(1)"),
)


@dataclass(frozen=True)
class IndexAlias:
    """Extra re-export in the index module, e.g. one resource reusing another's schema."""

    name: str
    source: str
    module: str

    @property
    def name_type(self) -> str:
        return f"{self.name[:1].upper()}{self.name[1:]}Schema"

    @property
    def source_type(self) -> str:
        return f"{self.source[:1].upper()}{self.source[1:]}Schema"


@dataclass(frozen=True)
class _RenderedOperation:
    operation: Operation
    body: str


def refine_operation_body(body: str) -> str:
    result = body
    for pattern, replacement in _BODY_REFINEMENTS:
        result = pattern.sub(replacement, result)
    return result


class SchemaEmitter:
    """Writes one module per resource group plus an index re-exporting them."""

    def __init__(
        self,
        output_dir: Path,
        *,
        matcher: OperationMatcher | None = None,
        index_aliases: Sequence[IndexAlias] = (),
        templates_dir: Path | None = None,
    ) -> None:
        self.output_dir = output_dir
        self.matcher = matcher or OperationMatcher()
        self.index_aliases = list(index_aliases)
        self.logger = get_logger("schemas")
        loader = FileSystemLoader(str(templates_dir or Path(__file__).with_name("templates")))
        self._env = Environment(
            loader=loader,
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )

    def render_module(self, group: ResourceGroup) -> str:
        rendered: List[_RenderedOperation] = []
        for definition in group.operations:
            operation = self.matcher.match(definition.name)
            if operation is None:
                self.logger.warning("Skipping %s: not an operation schema name", definition.name)
                continue
            rendered.append(_RenderedOperation(operation, refine_operation_body(definition.body)))
        template = self._env.get_template("module.ts.j2")
        return template.render(
            group=group.name,
            dependencies=list(group.dependencies),
            operations=rendered,
        )

    def render_index(self, modules: Iterable[str]) -> str:
        template = self._env.get_template("index.ts.j2")
        return template.render(modules=sorted(set(modules)), aliases=self.index_aliases)

    def write(self, groups: Mapping[str, ResourceGroup]) -> List[Path]:
        """Write every group module and a fresh index; return the written paths."""
        if INDEX_MODULE in groups:
            operations = ", ".join(definition.name for definition in groups[INDEX_MODULE].operations)
            raise SchemaSourceError(
                f"Resource '{INDEX_MODULE}' ({operations}) would overwrite the generated index module; "
                "adjust the operation verbs or suffix"
            )
        self.output_dir.mkdir(parents=True, exist_ok=True)
        written: List[Path] = []
        for name, group in groups.items():
            path = self.output_dir / f"{name}{MODULE_SUFFIX}"
            path.write_text(self.render_module(group), encoding="utf-8")
            self.logger.debug("Wrote %s (%d dependencies, %d operations)", path, len(group.dependencies), len(group.operations))
            written.append(path)

        # Modules left over from earlier runs stay exported.
        modules = [
            path.stem
            for path in self.output_dir.iterdir()
            if path.is_file() and path.suffix == MODULE_SUFFIX and path.stem != INDEX_MODULE
        ]
        index_path = self.output_dir / f"{INDEX_MODULE}{MODULE_SUFFIX}"
        index_path.write_text(self.render_index(modules), encoding="utf-8")
        written.append(index_path)
        return written


__all__ = ["IndexAlias", "SchemaEmitter", "refine_operation_body"]
