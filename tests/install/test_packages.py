"""Tests for package manager detection and invocation."""

from __future__ import annotations

import json
import subprocess
from pathlib import Path
from typing import List

import pytest

from registrykit.errors import PackageInstallError
from registrykit.install import PackageInstaller, detect_package_manager, filter_new_packages, install_command
from registrykit.models import NpmDependency


@pytest.mark.parametrize(
    ("lockfile", "manager"),
    [
        ("bun.lockb", "bun"),
        ("bun.lock", "bun"),
        ("pnpm-lock.yaml", "pnpm"),
        ("yarn.lock", "yarn"),
        ("package-lock.json", "npm"),
    ],
)
def test_detect_package_manager_from_lockfile(tmp_path: Path, lockfile: str, manager: str) -> None:
    (tmp_path / lockfile).write_text("", encoding="utf-8")
    assert detect_package_manager(tmp_path) == manager


def test_detect_package_manager_from_package_json(tmp_path: Path) -> None:
    (tmp_path / "package.json").write_text(json.dumps({"packageManager": "pnpm@9.1.0"}), encoding="utf-8")
    assert detect_package_manager(tmp_path) == "pnpm"


def test_detect_package_manager_defaults_to_npm(tmp_path: Path) -> None:
    assert detect_package_manager(tmp_path) == "npm"
    (tmp_path / "package.json").write_text("{ broken", encoding="utf-8")
    assert detect_package_manager(tmp_path) == "npm"


def test_install_command_shapes() -> None:
    assert install_command("bun", ["zod"]) == ["bun", "add", "zod"]
    assert install_command("pnpm", ["zod"], dev=True) == ["pnpm", "add", "-D", "zod"]
    assert install_command("npm", ["zod", "clsx"]) == ["npm", "install", "zod", "clsx"]
    assert install_command("npm", ["zod"], dev=True) == ["npm", "install", "--save-dev", "zod"]


def test_filter_new_packages_skips_declared_dependencies(tmp_path: Path) -> None:
    (tmp_path / "package.json").write_text(
        json.dumps({"dependencies": {"zod": "^3"}, "devDependencies": {"typescript": "^5"}}),
        encoding="utf-8",
    )
    packages = [NpmDependency("zod", "^3.23"), NpmDependency("clsx"), NpmDependency("typescript")]
    assert filter_new_packages(packages, tmp_path) == [NpmDependency("clsx")]


def test_package_installer_runs_detected_manager(tmp_path: Path) -> None:
    (tmp_path / "yarn.lock").write_text("", encoding="utf-8")
    calls: List[List[str]] = []

    def runner(args, *, cwd: Path) -> None:
        calls.append(list(args))

    command = PackageInstaller(runner).install([NpmDependency("zod", "^3"), NpmDependency("clsx")], cwd=tmp_path)

    assert command == ["yarn", "add", "zod@^3", "clsx"]
    assert calls == [command]


def test_package_installer_noop_without_packages(tmp_path: Path) -> None:
    def runner(args, *, cwd: Path) -> None:
        raise AssertionError("runner should not be called")

    assert PackageInstaller(runner).install([], cwd=tmp_path) == []


@pytest.mark.parametrize(
    "error",
    [FileNotFoundError("npm"), subprocess.CalledProcessError(1, ["npm", "install"])],
)
def test_package_installer_failures(tmp_path: Path, error: Exception) -> None:
    def runner(args, *, cwd: Path) -> None:
        raise error

    with pytest.raises(PackageInstallError):
        PackageInstaller(runner).install([NpmDependency("zod")], cwd=tmp_path)
