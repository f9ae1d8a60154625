"""Project configuration for registrykit (.registrykit.yml)."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence

import yaml

from .errors import ConfigError
from .schemas.emitter import IndexAlias
from .schemas.generator import DEFAULT_COMMAND
from .schemas.grouper import DEFAULT_SUFFIX, DEFAULT_VERBS

CONFIG_FILE = ".registrykit.yml"
ENV_REGISTRY_URL = "REGISTRYKIT_REGISTRY_URL"
ENV_LOCAL_PATH = "REGISTRYKIT_LOCAL_PATH"


@dataclass
class AliasConfig:
    """Import aliases that decide where each kind of registry file is installed."""

    components: str = "@/components/registry"
    ui: str = "@/components/ui"
    lib: str = "@/lib"
    hooks: str = "@/hooks"
    providers: str = "@/providers"

    def as_dict(self) -> Dict[str, str]:
        return {
            "components": self.components,
            "ui": self.ui,
            "lib": self.lib,
            "hooks": self.hooks,
            "providers": self.providers,
        }


@dataclass
class RegistryConfig:
    """Where the registry document and sources are fetched from."""

    base_url: Optional[str] = None
    local_path: Optional[Path] = None
    timeout: float = 30.0


@dataclass
class SchemaConfig:
    """Schema emission settings."""

    input: Path = Path("generated/schemas.ts")
    output_dir: Path = Path("src/generated/schemas")
    operation_suffix: str = DEFAULT_SUFFIX
    verbs: List[str] = field(default_factory=lambda: list(DEFAULT_VERBS))
    stub_references: List[str] = field(default_factory=list)
    index_aliases: List[IndexAlias] = field(default_factory=list)
    generator_command: List[str] = field(default_factory=lambda: list(DEFAULT_COMMAND))


@dataclass
class ProjectConfig:
    """Represents the settings defined in .registrykit.yml."""

    root: Path
    aliases: AliasConfig = field(default_factory=AliasConfig)
    registry: RegistryConfig = field(default_factory=RegistryConfig)
    schemas: SchemaConfig = field(default_factory=SchemaConfig)
    exists: bool = False
    # Mapping as read from disk; sections registrykit does not rewrite survive `write_config`.
    raw: Dict[str, Any] = field(default_factory=dict)
    # Registry settings taken from the environment, with the value they replaced.
    env_overrides: Dict[str, Any] = field(default_factory=dict)

    @property
    def path(self) -> Path:
        return self.root / CONFIG_FILE


def load_config(config_path: Path, *, environ: Mapping[str, str] | None = None) -> ProjectConfig:
    """Load configuration from disk, falling back to defaults when absent."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()
    env = os.environ if environ is None else environ

    if not config_file.exists():
        config = ProjectConfig(root=root)
        _apply_env_overrides(config, env)
        return config

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILE} must contain a mapping at the root")

    defaults = AliasConfig()
    alias_data = _as_dict(data.get("aliases"))
    aliases = AliasConfig(
        components=_as_str(alias_data.get("components")) or defaults.components,
        ui=_as_str(alias_data.get("ui")) or defaults.ui,
        lib=_as_str(alias_data.get("lib")) or defaults.lib,
        hooks=_as_str(alias_data.get("hooks")) or defaults.hooks,
        providers=_as_str(alias_data.get("providers")) or defaults.providers,
    )

    registry_data = _as_dict(data.get("registry"))
    local_path_str = _as_str(registry_data.get("local_path"))
    registry = RegistryConfig(
        base_url=_as_str(registry_data.get("base_url")),
        local_path=_resolve_path(root, local_path_str) if local_path_str else None,
        timeout=_as_float(registry_data.get("timeout")) or RegistryConfig.timeout,
    )

    schema_data = _as_dict(data.get("schemas"))
    schema_defaults = SchemaConfig()
    input_str = _as_str(schema_data.get("input"))
    output_str = _as_str(schema_data.get("output_dir"))
    schemas = SchemaConfig(
        input=Path(input_str) if input_str else schema_defaults.input,
        output_dir=Path(output_str) if output_str else schema_defaults.output_dir,
        operation_suffix=_as_str(schema_data.get("operation_suffix")) or DEFAULT_SUFFIX,
        verbs=_as_str_list(schema_data.get("verbs")) or list(DEFAULT_VERBS),
        stub_references=_as_str_list(schema_data.get("stub_references")),
        index_aliases=_as_index_aliases(schema_data.get("index_aliases")),
        generator_command=_as_str_list(schema_data.get("generator_command")) or list(DEFAULT_COMMAND),
    )

    config = ProjectConfig(
        root=root,
        aliases=aliases,
        registry=registry,
        schemas=schemas,
        exists=True,
        raw=data,
    )
    _apply_env_overrides(config, env)
    return config


def write_config(config: ProjectConfig) -> Path:
    """Persist aliases and registry settings, keeping the rest of the file as it was.

    Registry values that came from the environment are written back as the
    file had them, so a one-off override never becomes permanent.
    """
    payload: Dict[str, Any] = dict(config.raw)
    payload["aliases"] = config.aliases.as_dict()

    values: Dict[str, Any] = {
        "base_url": config.registry.base_url,
        "local_path": config.registry.local_path,
    }
    values.update(config.env_overrides)
    registry: Dict[str, Any] = dict(_as_dict(config.raw.get("registry")))
    if values["base_url"]:
        registry["base_url"] = values["base_url"]
    else:
        registry.pop("base_url", None)
    local_path: Optional[Path] = values["local_path"]
    if local_path is None:
        registry.pop("local_path", None)
    else:
        written = _as_str(registry.get("local_path"))
        # Keep the path as the user spelled it when it still points at the same place.
        if written is None or _resolve_path(config.root, written) != local_path:
            registry["local_path"] = str(local_path)
    if registry:
        payload["registry"] = registry
    else:
        payload.pop("registry", None)

    config.root.mkdir(parents=True, exist_ok=True)
    config.path.write_text(
        yaml.safe_dump(payload, sort_keys=False, default_flow_style=False),
        encoding="utf-8",
    )
    config.raw = payload
    config.exists = True
    return config.path


def resolve_alias_path(alias: str, root: Path) -> Path:
    """Map an import alias to a directory: `@/x` lives under `src/`, anything else under the root."""
    if alias.startswith("@/"):
        return root / "src" / alias[2:]
    return root / alias


def _apply_env_overrides(config: ProjectConfig, env: Mapping[str, str]) -> None:
    url = env.get(ENV_REGISTRY_URL)
    if url:
        config.env_overrides.setdefault("base_url", config.registry.base_url)
        config.registry.base_url = url
    local = env.get(ENV_LOCAL_PATH)
    if local:
        config.env_overrides.setdefault("local_path", config.registry.local_path)
        config.registry.local_path = _resolve_path(config.root, local)


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILE).resolve()
    if config_path.name != CONFIG_FILE:
        return (config_path.parent / CONFIG_FILE).resolve()
    return config_path.resolve()


def _resolve_path(root: Path, value: str) -> Path:
    path = Path(value).expanduser()
    return path if path.is_absolute() else (root / path).resolve()


def _read_config(path: Path) -> Any:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return {} if loaded is None else loaded


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


def _as_float(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []


def _as_index_aliases(value: Any) -> List[IndexAlias]:
    if not isinstance(value, list):
        return []
    aliases: List[IndexAlias] = []
    for item in value:
        entry = _as_dict(item)
        name = _as_str(entry.get("name"))
        source = _as_str(entry.get("source"))
        module = _as_str(entry.get("module"))
        if not (name and source and module):
            raise ConfigError("schemas.index_aliases entries need name, source and module")
        aliases.append(IndexAlias(name=name, source=source, module=module))
    return aliases


__all__ = [
    "AliasConfig",
    "CONFIG_FILE",
    "ProjectConfig",
    "RegistryConfig",
    "SchemaConfig",
    "load_config",
    "resolve_alias_path",
    "write_config",
]
