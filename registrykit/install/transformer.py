"""Rewrite registry import paths and compute install destinations."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Dict, Tuple

from ..config import AliasConfig, resolve_alias_path
from ..errors import RegistryError
from ..models import RegistryFile

# More specific prefixes first: `components/ui/` must win over `components/`.
_CATEGORY_PREFIXES: Tuple[Tuple[str, str], ...] = (
    ("components/ui/", "ui"),
    ("components/", "components"),
    ("providers/", "providers"),
    ("lib/", "lib"),
    ("hooks/", "hooks"),
)

_IMPORT_PATTERNS: Tuple[Tuple[re.Pattern[str], str], ...] = tuple(
    (re.compile(re.escape(f"@/ui/{prefix}")), category) for prefix, category in _CATEGORY_PREFIXES
)


def transform_imports(source: str, aliases: AliasConfig) -> str:
    """Point `@/ui/...` registry imports at the project's configured aliases."""
    targets = aliases.as_dict()
    result = source
    for pattern, category in _IMPORT_PATTERNS:
        replacement = f"{targets[category].rstrip('/')}/"
        result = pattern.sub(lambda _match, value=replacement: value, result)
    return result


def split_destination(source_path: str) -> Tuple[str, str]:
    """Return ``(category, path relative to that category's alias)``."""
    for prefix, category in _CATEGORY_PREFIXES:
        if source_path.startswith(prefix):
            return category, source_path[len(prefix) :]
    return "components", source_path


def destination_path(registry_file: RegistryFile, aliases: AliasConfig, root: Path) -> Path:
    """Absolute install path for a registry file.

    An explicit ``target`` template may reference alias directories as
    ``{components}``, ``{ui}``, ``{lib}``, ``{hooks}`` or ``{providers}``.
    """
    directories: Dict[str, str] = {
        category: str(resolve_alias_path(alias, root)) for category, alias in aliases.as_dict().items()
    }
    if registry_file.target:
        try:
            rendered = registry_file.target.format(**directories)
        except (KeyError, IndexError) as exc:
            raise RegistryError(f"Unknown placeholder in target {registry_file.target!r}: {exc}") from exc
        path = Path(rendered)
        return path if path.is_absolute() else root / path
    category, relative = split_destination(registry_file.path)
    return Path(directories[category]) / relative


__all__ = ["destination_path", "split_destination", "transform_imports"]
