"""Error taxonomy shared by registrykit commands."""

from __future__ import annotations

from typing import Iterable, Sequence


class RegistryKitError(RuntimeError):
    """Base class for failures surfaced to the command line."""


class ConfigError(RegistryKitError):
    """Raised when the project configuration is missing or cannot be parsed."""


class UnknownComponentError(RegistryKitError):
    """Raised when requested component keys are absent from the registry."""

    def __init__(self, unknown: Sequence[str], available: Iterable[str]) -> None:
        self.unknown = list(unknown)
        self.available = sorted(available)
        names = ", ".join(f'"{key}"' for key in self.unknown)
        noun = "Component" if len(self.unknown) == 1 else "Components"
        listing = "\n".join(f"  - {key}" for key in self.available)
        super().__init__(
            f"{noun} {names} not found in registry.\nAvailable components:\n{listing}"
        )


class RegistryError(RegistryKitError):
    """Raised when the registry document itself is malformed or inconsistent."""


class FetchError(RegistryKitError):
    """Raised when the registry or a registry file cannot be retrieved."""


class CycleError(RegistryKitError):
    """Raised by strict topological sorting when a dependency cycle exists."""

    def __init__(self, cycle: Sequence[str]) -> None:
        self.cycle = list(cycle)
        super().__init__("Dependency cycle detected: " + " -> ".join(self.cycle))


class SchemaSourceError(RegistryKitError):
    """Raised when a generated schema bundle cannot be interpreted."""


class PackageInstallError(RegistryKitError):
    """Raised when the package manager fails to install dependencies."""


__all__ = [
    "ConfigError",
    "CycleError",
    "FetchError",
    "PackageInstallError",
    "RegistryError",
    "RegistryKitError",
    "SchemaSourceError",
    "UnknownComponentError",
]
