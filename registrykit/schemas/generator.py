"""Invoke the external OpenAPI-to-schema generator."""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Callable, Iterable, Sequence

from ..errors import SchemaSourceError

DEFAULT_COMMAND = ("bunx", "openapi-zod-client")


class SchemaBundleGenerator:
    """Produces a schema bundle file from an OpenAPI document."""

    def __init__(
        self,
        command: Sequence[str] = DEFAULT_COMMAND,
        runner: Callable[..., None] | None = None,
    ) -> None:
        self.command = list(command)
        self._runner = runner or self._default_runner

    def generate(self, openapi_path: Path, output_path: Path, *, cwd: Path) -> Path:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        args = [
            *self.command,
            str(openapi_path),
            "--output",
            str(output_path),
            "--export-schemas",
            "--group-strategy",
            "none",
            "--with-docs",
        ]
        try:
            self._runner(args, cwd=cwd)
        except (OSError, subprocess.CalledProcessError) as exc:
            raise SchemaSourceError(f"Failed to generate schemas: {exc}") from exc
        if not output_path.exists():
            raise SchemaSourceError(f"Schema generator did not produce {output_path}")
        return output_path

    @staticmethod
    def _default_runner(args: Iterable[str], *, cwd: Path) -> None:
        subprocess.run(list(args), cwd=str(cwd), check=True)


__all__ = ["DEFAULT_COMMAND", "SchemaBundleGenerator"]
