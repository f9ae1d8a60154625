"""CLI entrypoints for registrykit commands."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from .errors import RegistryKitError
from .install import ALWAYS, ASK, NEVER
from .logging import configure_logging
from .orchestrator import Orchestrator, registry_listing
from .prompts import ConsolePrompter, StaticPrompter


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _add_cwd_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--cwd",
        default=".",
        help="Working directory (defaults to current directory).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="registrykit",
        description="Add registry components to a project and generate per-resource schema modules.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "--local",
        metavar="PATH",
        default=None,
        help="Use a local registry checkout instead of the remote registry (for development).",
    )
    parser.add_argument(
        "--log-file",
        metavar="PATH",
        default=None,
        help="Also write a debug-level log of the run to PATH.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    init_parser = subparsers.add_parser(
        "init",
        help="Initialize registry components in your project.",
    )
    _add_verbose_option(init_parser, suppress_default=True)
    _add_cwd_option(init_parser)
    init_parser.add_argument("-y", "--yes", action="store_true", help="Skip prompts and use defaults.")
    init_parser.add_argument("-f", "--force", action="store_true", help="Overwrite existing configuration.")

    add_parser = subparsers.add_parser(
        "add",
        help="Add components to your project.",
    )
    _add_verbose_option(add_parser, suppress_default=True)
    _add_cwd_option(add_parser)
    add_parser.add_argument("components", nargs="*", help="Component keys to add.")
    add_parser.add_argument("-y", "--yes", action="store_true", help="Skip the installation confirmation.")
    add_parser.add_argument("-a", "--all", action="store_true", help="Add all available components.")
    overwrite_group = add_parser.add_mutually_exclusive_group()
    overwrite_group.add_argument(
        "-o",
        "--overwrite",
        dest="overwrite",
        action="store_const",
        const=ALWAYS,
        default=ASK,
        help="Overwrite existing files without asking.",
    )
    overwrite_group.add_argument(
        "--no-overwrite",
        dest="overwrite",
        action="store_const",
        const=NEVER,
        help="Keep existing files without asking.",
    )

    list_parser = subparsers.add_parser(
        "list",
        help="List available components.",
    )
    _add_verbose_option(list_parser, suppress_default=True)
    _add_cwd_option(list_parser)
    list_parser.add_argument("--json", action="store_true", help="Output as JSON.")

    schemas_parser = subparsers.add_parser(
        "schemas",
        help="Split a generated schema bundle into per-resource modules.",
    )
    _add_verbose_option(schemas_parser, suppress_default=True)
    _add_cwd_option(schemas_parser)
    schemas_parser.add_argument("--input", default=None, help="Generated schema bundle to read.")
    schemas_parser.add_argument(
        "--openapi",
        default=None,
        help="OpenAPI document to run through the schema generator first.",
    )
    schemas_parser.add_argument("--output", default=None, help="Directory for the emitted modules.")

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for registrykit commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(
        verbose=bool(args.verbose),
        log_file=Path(args.log_file) if args.log_file else None,
    )

    prompter = ConsolePrompter() if sys.stdin.isatty() else StaticPrompter()
    orchestrator = Orchestrator(
        prompter=prompter,
        local_path=Path(args.local) if args.local else None,
    )

    try:
        if args.command == "init":
            _run_init(orchestrator, args)
        elif args.command == "add":
            _run_add(orchestrator, args)
        elif args.command == "list":
            _run_list(orchestrator, args)
        elif args.command == "schemas":
            _run_schemas(orchestrator, args)
        else:  # pragma: no cover - argparse enforces choices
            parser.exit(1, "Unknown command\n")
    except RegistryKitError as exc:
        parser.exit(1, f"{exc}\nRun with --verbose for more details.\n")
    except Exception as exc:  # pragma: no cover - unexpected failure
        parser.exit(1, f"registrykit {args.command} failed: {exc}\nRun with --verbose for more details.\n")


def _run_init(orchestrator: Orchestrator, args: argparse.Namespace) -> None:
    outcome = orchestrator.run_init(args.cwd, yes=bool(args.yes), force=bool(args.force))
    if outcome is None:
        return
    print(f"Configuration written to {_relativize(outcome.config_path)}")
    print(f"Copied {len(outcome.result.written)} essential files")
    if outcome.packages.error:
        print(f"Install manually: {' '.join(outcome.packages.requested)}")


def _run_add(orchestrator: Orchestrator, args: argparse.Namespace) -> None:
    outcome = orchestrator.run_add(
        args.components,
        args.cwd,
        all_components=bool(args.all),
        yes=bool(args.yes),
        overwrite=args.overwrite,
    )
    if outcome.cancelled or outcome.result is None:
        return
    result = outcome.result
    for path in result.written:
        print(f"  created {_relativize(path)}")
    for path in result.skipped:
        print(f"  skipped {_relativize(path)}")
    for path, reason in result.failed:
        print(f"  failed  {_relativize(path)}: {reason}")
    if outcome.packages.error:
        print(f"Install manually: {' '.join(outcome.packages.requested)}")
    if result.failed:
        sys.exit(1)
    print("Components installed successfully!")


def _run_list(orchestrator: Orchestrator, args: argparse.Namespace) -> None:
    registry = orchestrator.run_list(args.cwd)
    if args.json:
        print(json.dumps(registry_listing(registry), indent=2))
        return

    print("Available components:\n")
    for category, components in registry.by_category().items():
        print(f"{registry.category_name(category)}:")
        for component in components:
            print(f"  {component.key:<40} {component.name}")
        print()
    for kind, title in (("provider", "Providers"), ("util", "Utilities")):
        entries = registry.of_kind(kind)
        if not entries:
            continue
        print(f"{title}:")
        for entry in entries:
            print(f"  {entry.key:<40} {entry.name}")
        print()
    print("Usage:")
    print("  registrykit add <component-key>")


def _run_schemas(orchestrator: Orchestrator, args: argparse.Namespace) -> None:
    outcome = orchestrator.run_schemas(
        args.cwd,
        input_path=args.input,
        openapi_path=args.openapi,
        output_dir=args.output,
    )
    for name, (dependencies, operations) in outcome.groups.items():
        print(f"  {name}: {operations} operation(s), {dependencies} dependency schema(s)")
    print(f"Wrote {len(outcome.written)} files")


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
