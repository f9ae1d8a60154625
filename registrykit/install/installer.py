"""Fetch registry files and write them into a project without surprise overwrites."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Dict, List, Protocol, Sequence

from ..config import AliasConfig
from ..errors import FetchError
from ..logging import get_logger
from ..models import DestinationEntry, InstallResult, RegistryFile
from .transformer import destination_path, transform_imports

ASK = "ask"
ALWAYS = "always"
NEVER = "never"
OVERWRITE_POLICIES = (ASK, ALWAYS, NEVER)

ConfirmOverwrite = Callable[[Sequence[Path]], bool]


class FileSystem(Protocol):
    """Filesystem operations the installer depends on."""

    def exists(self, path: Path) -> bool: ...

    def mkdirs(self, path: Path) -> None: ...

    def write_text(self, path: Path, content: str) -> None: ...


class LocalFileSystem:
    """FileSystem backed by the real disk."""

    def exists(self, path: Path) -> bool:
        return path.exists()

    def mkdirs(self, path: Path) -> None:
        path.mkdir(parents=True, exist_ok=True)

    def write_text(self, path: Path, content: str) -> None:
        path.write_text(content, encoding="utf-8")


def fetch_entries(
    files: Sequence[RegistryFile],
    fetch_file: Callable[[str], str],
    aliases: AliasConfig,
    root: Path,
) -> List[DestinationEntry]:
    """Fetch and rewrite every file before anything is written.

    Any single failure aborts the whole batch, so a failed fetch never leaves
    a partially installed component behind.
    """
    entries: List[DestinationEntry] = []
    for registry_file in files:
        try:
            content = fetch_file(registry_file.path)
        except FetchError:
            raise
        except Exception as exc:
            raise FetchError(f"Failed to fetch file {registry_file.path}: {exc}") from exc
        entries.append(
            DestinationEntry(
                path=destination_path(registry_file, aliases, root),
                content=transform_imports(content, aliases),
                source=registry_file.path,
            )
        )
    return entries


class Installer:
    """Writes destination entries while applying an overwrite policy.

    With the ``ask`` policy a single yes/no answer covers every conflicting
    file. Writes are not transactional: a failed write is recorded and the
    rest of the batch still proceeds.
    """

    def __init__(
        self,
        filesystem: FileSystem | None = None,
        *,
        confirm: ConfirmOverwrite | None = None,
    ) -> None:
        self.filesystem = filesystem or LocalFileSystem()
        self.confirm = confirm
        self.logger = get_logger("installer")

    def install(self, entries: Sequence[DestinationEntry], overwrite: str = ASK) -> InstallResult:
        if overwrite not in OVERWRITE_POLICIES:
            raise ValueError(f"Unknown overwrite policy: {overwrite}")

        unique: Dict[Path, DestinationEntry] = {}
        for entry in entries:
            unique.setdefault(entry.path, entry)

        existing = [path for path in unique if self.filesystem.exists(path)]
        result = InstallResult()

        if existing and not self._allow_overwrite(existing, overwrite):
            for path in existing:
                unique.pop(path)
            result.skipped.extend(existing)
            self.logger.info("Keeping %d existing file(s)", len(existing))

        for path, entry in unique.items():
            try:
                self.filesystem.mkdirs(path.parent)
                self.filesystem.write_text(path, entry.content)
            except OSError as exc:
                self.logger.warning("Failed to write %s: %s", path, exc)
                result.failed.append((path, str(exc)))
                continue
            self.logger.debug("Wrote %s", path)
            result.written.append(path)
        return result

    def _allow_overwrite(self, existing: Sequence[Path], overwrite: str) -> bool:
        if overwrite == ALWAYS:
            return True
        if overwrite == NEVER:
            return False
        if self.confirm is None:
            return False
        return bool(self.confirm(list(existing)))


__all__ = [
    "ALWAYS",
    "ASK",
    "FileSystem",
    "Installer",
    "LocalFileSystem",
    "NEVER",
    "OVERWRITE_POLICIES",
    "fetch_entries",
]
