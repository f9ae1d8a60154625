"""Tests for import rewriting and destination mapping."""

from __future__ import annotations

from pathlib import Path

import pytest

from registrykit.config import AliasConfig
from registrykit.errors import RegistryError
from registrykit.install import destination_path, split_destination, transform_imports
from registrykit.models import RegistryFile


def test_transform_imports_uses_configured_aliases() -> None:
    source = (
        'import { Button } from "@/ui/components/ui/button";\n'
        'import { Table } from "@/ui/components/invoices/table";\n'
        'import { useSdk } from "@/ui/providers/sdk";\n'
        'import { cn } from "@/ui/lib/utils";\n'
        'import { useDebounce } from "@/ui/hooks/use-debounce";\n'
        'import { z } from "zod";\n'
    )
    aliases = AliasConfig(components="~/registry", ui="~/ui/", lib="~/lib", hooks="~/hooks", providers="~/providers")

    result = transform_imports(source, aliases)

    assert '"~/ui/button"' in result
    assert '"~/registry/invoices/table"' in result
    assert '"~/providers/sdk"' in result
    assert '"~/lib/utils"' in result
    assert '"~/hooks/use-debounce"' in result
    assert 'from "zod"' in result
    assert "@/ui/" not in result


def test_transform_imports_leaves_unrelated_source_untouched() -> None:
    source = 'export const Y = "@/components/ui/button";\n'
    assert transform_imports(source, AliasConfig()) == source


@pytest.mark.parametrize(
    ("path", "expected"),
    [
        ("components/ui/button.tsx", ("ui", "button.tsx")),
        ("components/invoices/table.tsx", ("components", "invoices/table.tsx")),
        ("providers/sdk.tsx", ("providers", "sdk.tsx")),
        ("lib/format.ts", ("lib", "format.ts")),
        ("hooks/use-x.ts", ("hooks", "use-x.ts")),
        ("misc/thing.ts", ("components", "misc/thing.ts")),
    ],
)
def test_split_destination(path: str, expected: tuple) -> None:
    assert split_destination(path) == expected


def test_destination_path_follows_alias_directories(tmp_path: Path) -> None:
    aliases = AliasConfig()
    assert destination_path(RegistryFile("components/ui/button.tsx"), aliases, tmp_path) == (
        tmp_path / "src" / "components" / "ui" / "button.tsx"
    )
    assert destination_path(RegistryFile("lib/format.ts"), aliases, tmp_path) == tmp_path / "src" / "lib" / "format.ts"

    custom = AliasConfig(lib="app/lib")
    assert destination_path(RegistryFile("lib/format.ts"), custom, tmp_path) == tmp_path / "app" / "lib" / "format.ts"


def test_destination_path_renders_target_templates(tmp_path: Path) -> None:
    aliases = AliasConfig()
    registry_file = RegistryFile("providers/sdk.tsx", target="{providers}/space-invoices.tsx")
    assert destination_path(registry_file, aliases, tmp_path) == tmp_path / "src" / "providers" / "space-invoices.tsx"

    relative = RegistryFile("templates/env.ts", target="config/env.ts")
    assert destination_path(relative, aliases, tmp_path) == tmp_path / "config" / "env.ts"


def test_destination_path_rejects_unknown_placeholders(tmp_path: Path) -> None:
    with pytest.raises(RegistryError, match="Unknown placeholder"):
        destination_path(RegistryFile("a.ts", target="{pages}/a.ts"), AliasConfig(), tmp_path)
