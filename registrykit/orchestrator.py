"""Command flows for init/add/list/schemas."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from .config import CONFIG_FILE, AliasConfig, ProjectConfig, load_config, resolve_alias_path, write_config
from .errors import ConfigError, PackageInstallError, SchemaSourceError
from .install import (
    ALWAYS,
    ASK,
    FileSystem,
    Installer,
    LocalFileSystem,
    PackageInstaller,
    fetch_entries,
    filter_new_packages,
)
from .logging import get_logger
from .models import InstallResult, NpmDependency, ResolvedInstallSet
from .prompts import ConsolePrompter, Prompter
from .registry import Registry, RegistryClient, resolve
from .schemas import (
    OperationMatcher,
    SchemaBundleGenerator,
    SchemaEmitter,
    group_definitions,
    parse_bundle,
)


@dataclass
class PackageOutcome:
    """Result of the optional package-manager step."""

    requested: List[str] = field(default_factory=list)
    command: List[str] = field(default_factory=list)
    error: Optional[str] = None


@dataclass
class InitOutcome:
    config_path: Path
    result: InstallResult
    packages: PackageOutcome


@dataclass
class AddOutcome:
    resolved: Optional[ResolvedInstallSet] = None
    result: Optional[InstallResult] = None
    packages: PackageOutcome = field(default_factory=PackageOutcome)
    cancelled: bool = False


@dataclass
class SchemaOutcome:
    written: List[Path]
    groups: Dict[str, Tuple[int, int]]


ClientFactory = Callable[[ProjectConfig], RegistryClient]


class Orchestrator:
    """Coordinates registry fetches, resolution, installation, and schema emission."""

    def __init__(
        self,
        *,
        client_factory: ClientFactory | None = None,
        filesystem: FileSystem | None = None,
        package_installer: PackageInstaller | None = None,
        prompter: Prompter | None = None,
        schema_generator: SchemaBundleGenerator | None = None,
        local_path: Path | None = None,
    ) -> None:
        self._client_factory = client_factory or self._default_client
        self.filesystem = filesystem or LocalFileSystem()
        self.package_installer = package_installer or PackageInstaller()
        self.prompter = prompter or ConsolePrompter()
        self._schema_generator = schema_generator
        self.local_path = local_path
        self.logger = get_logger("orchestrator")

    # ------------------------------------------------------------------
    # init

    def run_init(self, path: str, *, yes: bool = False, force: bool = False) -> Optional[InitOutcome]:
        """Write configuration, create alias directories, and install essentials."""
        root = Path(path).expanduser().resolve()
        config = load_config(root)
        self.logger.info("Initializing registry components in %s", root)

        if config.exists and not force:
            if not self.prompter.confirm(f"{CONFIG_FILE} already exists. Overwrite?", default=False):
                self.logger.info("Initialization cancelled.")
                return None

        config.aliases = self._ask_aliases(yes=yes)
        config_path = write_config(config)
        self.logger.info("Created %s", config_path.name)

        for alias in config.aliases.as_dict().values():
            self.filesystem.mkdirs(resolve_alias_path(alias, root))
        self.logger.debug("Created alias directories")

        client = self._client_factory(config)
        registry = client.fetch_registry()
        entries = fetch_entries(list(registry.init_files), client.fetch_file, config.aliases, root)
        result = Installer(self.filesystem).install(entries, overwrite=ALWAYS)
        self.logger.info("Copied %d essential file(s)", len(result.written))

        packages = self._install_packages(registry.init_packages, root)
        return InitOutcome(config_path=config_path, result=result, packages=packages)

    def _ask_aliases(self, *, yes: bool) -> AliasConfig:
        defaults = AliasConfig()
        if yes:
            return defaults
        questions = (
            ("components", "Where should feature components be installed?"),
            ("ui", "Where should UI primitives be installed?"),
            ("lib", "Where should lib utilities be installed?"),
            ("hooks", "Where should hooks be installed?"),
            ("providers", "Where should providers be installed?"),
        )
        answers = {
            key: self.prompter.text(message, default=getattr(defaults, key)) for key, message in questions
        }
        return AliasConfig(**answers)

    # ------------------------------------------------------------------
    # add

    def run_add(
        self,
        keys: Sequence[str],
        path: str,
        *,
        all_components: bool = False,
        yes: bool = False,
        overwrite: str = ASK,
    ) -> AddOutcome:
        """Resolve requested components and install their files and packages."""
        root = Path(path).expanduser().resolve()
        config = load_config(root)
        if not config.exists:
            raise ConfigError(f"No {CONFIG_FILE} found in {root}. Run `registrykit init` first.")

        client = self._client_factory(config)
        registry = client.fetch_registry()
        self.logger.info("Fetched component registry")

        requested = list(keys)
        if all_components:
            requested = registry.keys("component")
        if not requested:
            requested = self.prompter.select("Select components to install", _picker_groups(registry))
            if not requested:
                self.logger.info("No components selected.")
                return AddOutcome(cancelled=True)

        resolved = resolve(registry, requested)
        self._log_summary(resolved)

        if not yes and not self.prompter.confirm("Proceed with installation?", default=True):
            self.logger.info("Installation cancelled.")
            return AddOutcome(resolved=resolved, cancelled=True)

        entries = fetch_entries(list(resolved.files), client.fetch_file, config.aliases, root)
        installer = Installer(self.filesystem, confirm=self._confirm_overwrite)
        result = installer.install(entries, overwrite=overwrite)
        self.logger.info("Installed %d file(s)", len(result.written))
        for failed_path, reason in result.failed:
            self.logger.error("Could not write %s: %s", failed_path, reason)

        packages = self._install_packages(resolved.npm_dependencies, root)
        return AddOutcome(resolved=resolved, result=result, packages=packages)

    def _confirm_overwrite(self, existing: Sequence[Path]) -> bool:
        self.logger.warning("The following files already exist:")
        for existing_path in existing:
            self.logger.warning("  %s", existing_path)
        return self.prompter.confirm("Overwrite existing files?", default=False)

    def _log_summary(self, resolved: ResolvedInstallSet) -> None:
        summary = resolved.summary()
        self.logger.info(
            "Resolved %d files with %d npm packages", summary.file_count, len(summary.npm_packages)
        )
        self.logger.info("The following will be installed:")
        if summary.components:
            self.logger.info("  Components: %s", ", ".join(summary.components))
        if summary.providers:
            self.logger.info("  Providers: %s", ", ".join(summary.providers))
        if summary.utils:
            self.logger.info("  Utilities: %s", ", ".join(summary.utils))
        if summary.npm_packages:
            self.logger.info("  npm packages: %s", ", ".join(summary.npm_packages))
        self.logger.info("  Files: %d files", summary.file_count)

    def _install_packages(self, packages: Sequence[NpmDependency], root: Path) -> PackageOutcome:
        missing = filter_new_packages(packages, root)
        outcome = PackageOutcome(requested=[package.spec for package in missing])
        if not missing:
            return outcome
        try:
            outcome.command = self.package_installer.install(missing, cwd=root)
        except PackageInstallError as exc:
            # Files are already written; the user can install packages by hand.
            outcome.error = str(exc)
            self.logger.error("Failed to install npm packages. Please install manually:")
            self.logger.error("  %s", " ".join(outcome.requested))
        else:
            self.logger.info("Installed %d npm package(s)", len(missing))
        return outcome

    # ------------------------------------------------------------------
    # list

    def run_list(self, path: str = ".") -> Registry:
        config = load_config(Path(path).expanduser().resolve())
        return self._client_factory(config).fetch_registry()

    # ------------------------------------------------------------------
    # schemas

    def run_schemas(
        self,
        path: str,
        *,
        input_path: str | None = None,
        openapi_path: str | None = None,
        output_dir: str | None = None,
    ) -> SchemaOutcome:
        """Split a generated schema bundle into per-resource modules."""
        root = Path(path).expanduser().resolve()
        config = load_config(root)
        settings = config.schemas
        bundle_path = _under(root, Path(input_path) if input_path else settings.input)
        target_dir = _under(root, Path(output_dir) if output_dir else settings.output_dir)

        if openapi_path:
            generator = self._schema_generator or SchemaBundleGenerator(settings.generator_command)
            self.logger.info("Generating schema bundle from %s", openapi_path)
            generator.generate(_under(root, Path(openapi_path)), bundle_path, cwd=root)

        try:
            text = bundle_path.read_text(encoding="utf-8")
        except FileNotFoundError as exc:
            raise SchemaSourceError(f"Schema bundle not found: {bundle_path}") from exc

        bundle = parse_bundle(text, stub_references=settings.stub_references)
        for name in bundle.missing_exports(settings.operation_suffix):
            self.logger.warning("Could not find schema definition for %s", name)

        matcher = OperationMatcher(settings.verbs, settings.operation_suffix)
        groups = group_definitions(
            bundle.definitions,
            matcher=matcher,
            dependency_names=bundle.schema_names,
        )
        emitter = SchemaEmitter(target_dir, matcher=matcher, index_aliases=settings.index_aliases)
        written = emitter.write(groups)
        self.logger.info("Wrote %d schema module(s) to %s", len(groups), target_dir)
        return SchemaOutcome(
            written=written,
            groups={name: (len(group.dependencies), len(group.operations)) for name, group in groups.items()},
        )

    # ------------------------------------------------------------------
    # Internal helpers

    def _default_client(self, config: ProjectConfig) -> RegistryClient:
        local_path = self.local_path or config.registry.local_path
        return RegistryClient(
            config.registry.base_url,
            local_path=local_path,
            timeout=config.registry.timeout,
        )


def registry_listing(registry: Registry) -> Dict[str, List[Dict[str, object]]]:
    """Machine-readable overview of the registry used by `list --json`."""
    return {
        "components": [
            {
                "key": component.key,
                "name": component.name,
                "category": component.category,
                "files": len(component.files),
                "dependencies": len(component.component_dependencies),
            }
            for component in registry.of_kind("component")
        ],
        "providers": [
            {"key": item.key, "name": item.name, "files": len(item.files)}
            for item in registry.of_kind("provider")
        ],
        "utils": [
            {"key": item.key, "name": item.name, "files": len(item.files)}
            for item in registry.of_kind("util")
        ],
    }


def _picker_groups(registry: Registry) -> Dict[str, List[Tuple[str, str]]]:
    return {
        registry.category_name(category): [(component.key, component.name) for component in components]
        for category, components in registry.by_category().items()
    }


def _under(root: Path, path: Path) -> Path:
    return path if path.is_absolute() else root / path


__all__ = [
    "AddOutcome",
    "InitOutcome",
    "Orchestrator",
    "PackageOutcome",
    "SchemaOutcome",
    "registry_listing",
]
