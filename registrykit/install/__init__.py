"""Fetching, writing, and package installation for resolved components."""

from .installer import (
    ALWAYS,
    ASK,
    NEVER,
    OVERWRITE_POLICIES,
    FileSystem,
    Installer,
    LocalFileSystem,
    fetch_entries,
)
from .packages import PackageInstaller, detect_package_manager, filter_new_packages, install_command
from .transformer import destination_path, split_destination, transform_imports

__all__ = [
    "ALWAYS",
    "ASK",
    "FileSystem",
    "Installer",
    "LocalFileSystem",
    "NEVER",
    "OVERWRITE_POLICIES",
    "PackageInstaller",
    "destination_path",
    "detect_package_manager",
    "fetch_entries",
    "filter_new_packages",
    "install_command",
    "split_destination",
    "transform_imports",
]
