"""Node package manager detection and invocation."""

from __future__ import annotations

import json
import subprocess
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Sequence, Set

from ..errors import PackageInstallError
from ..models import NpmDependency

_LOCKFILES = (
    ("bun.lockb", "bun"),
    ("bun.lock", "bun"),
    ("pnpm-lock.yaml", "pnpm"),
    ("yarn.lock", "yarn"),
    ("package-lock.json", "npm"),
)
_KNOWN_MANAGERS = ("bun", "pnpm", "yarn", "npm")


def load_package_json(root: Path) -> Dict[str, object]:
    """Parsed package.json of ``root``; empty when absent or unreadable."""
    package_json = root / "package.json"
    if not package_json.exists():
        return {}
    try:
        data = json.loads(package_json.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError):
        return {}
    if isinstance(data, dict):
        return data
    return {}


def detect_package_manager(root: Path) -> str:
    """Infer the project's package manager from lockfiles, then package.json."""
    for lockfile, manager in _LOCKFILES:
        if (root / lockfile).exists():
            return manager
    declared = load_package_json(root).get("packageManager")
    if isinstance(declared, str):
        for manager in _KNOWN_MANAGERS:
            if declared.startswith(manager):
                return manager
    return "npm"


def install_command(manager: str, packages: Sequence[str], *, dev: bool = False) -> List[str]:
    if manager in {"bun", "pnpm", "yarn"}:
        command = [manager, "add"]
        if dev:
            command.append("-D")
    else:
        command = ["npm", "install"]
        if dev:
            command.append("--save-dev")
    return command + list(packages)


def installed_packages(root: Path) -> Set[str]:
    """Package names declared in dependencies or devDependencies."""
    data = load_package_json(root)
    names: Set[str] = set()
    for key in ("dependencies", "devDependencies"):
        section = data.get(key)
        if isinstance(section, dict):
            names.update(section.keys())
    return names


def filter_new_packages(packages: Iterable[NpmDependency], root: Path) -> List[NpmDependency]:
    installed = installed_packages(root)
    return [package for package in packages if package.name not in installed]


class PackageInstaller:
    """Runs the detected package manager to add npm dependencies."""

    def __init__(self, runner: Callable[..., None] | None = None) -> None:
        self._runner = runner or self._default_runner

    def install(
        self,
        packages: Sequence[NpmDependency],
        *,
        cwd: Path,
        dev: bool = False,
    ) -> List[str]:
        """Install ``packages`` and return the command that was run (empty when nothing to do)."""
        if not packages:
            return []
        manager = detect_package_manager(cwd)
        command = install_command(manager, [package.spec for package in packages], dev=dev)
        try:
            self._runner(command, cwd=cwd)
        except FileNotFoundError as exc:
            raise PackageInstallError(f"Unable to locate '{manager}'. Install it or add packages manually.") from exc
        except subprocess.CalledProcessError as exc:
            raise PackageInstallError(f"Package installation failed with code {exc.returncode}") from exc
        return command

    @staticmethod
    def _default_runner(args: Iterable[str], *, cwd: Path) -> None:
        subprocess.run(list(args), cwd=str(cwd), check=True)


__all__ = [
    "PackageInstaller",
    "detect_package_manager",
    "filter_new_packages",
    "install_command",
    "installed_packages",
    "load_package_json",
]
