"""CLI parser and entrypoint behaviour tests."""

from __future__ import annotations

import io
import json
from pathlib import Path

import pytest

from registrykit.cli import _build_parser, main
from registrykit.install import ALWAYS, ASK, NEVER


@pytest.fixture(autouse=True)
def _non_interactive_stdin(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("sys.stdin", io.StringIO())


def test_cli_accepts_verbose_before_command() -> None:
    args = _build_parser().parse_args(["--verbose", "list"])
    assert args.verbose is True
    assert args.command == "list"


def test_cli_accepts_verbose_after_command() -> None:
    args = _build_parser().parse_args(["add", "ui/button", "--verbose"])
    assert args.verbose is True
    assert args.components == ["ui/button"]


def test_cli_add_overwrite_flags() -> None:
    parser = _build_parser()
    assert parser.parse_args(["add", "a"]).overwrite == ASK
    assert parser.parse_args(["add", "a", "--overwrite"]).overwrite == ALWAYS
    assert parser.parse_args(["add", "a", "--no-overwrite"]).overwrite == NEVER
    with pytest.raises(SystemExit):
        parser.parse_args(["add", "a", "-o", "--no-overwrite"])


def test_cli_global_local_option() -> None:
    args = _build_parser().parse_args(["--local", "../react-ui", "add", "--all", "-y"])
    assert args.local == "../react-ui"
    assert args.all is True
    assert args.yes is True
    assert args.cwd == "."


def test_cli_schemas_options() -> None:
    args = _build_parser().parse_args(["schemas", "--openapi", "api.json", "--output", "out"])
    assert args.openapi == "api.json"
    assert args.output == "out"
    assert args.input is None


def _seed(registry_builder) -> Path:
    registry_builder.component("ui/button", name="Button", category="ui", files=["components/ui/button.tsx"])
    registry_builder.sources({"components/ui/button.tsx": "export const Button = () => null;\n"})
    return registry_builder.write()


def test_main_list_json(registry_builder, project_root: Path, capsys: pytest.CaptureFixture[str]) -> None:
    registry_root = _seed(registry_builder)

    main(["--local", str(registry_root), "list", "--json", "--cwd", str(project_root)])

    payload = json.loads(capsys.readouterr().out)
    assert payload["components"][0]["key"] == "ui/button"


def test_main_init_then_add(registry_builder, project_root: Path, capsys: pytest.CaptureFixture[str]) -> None:
    registry_root = _seed(registry_builder)

    main(["--local", str(registry_root), "init", "-y", "--cwd", str(project_root)])
    main(["--local", str(registry_root), "add", "ui/button", "-y", "--cwd", str(project_root)])

    out = capsys.readouterr().out
    assert "Components installed successfully!" in out
    assert (project_root / "src" / "components" / "ui" / "button.tsx").exists()


def test_main_unknown_component_exits_with_listing(
    registry_builder, project_root: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    registry_root = _seed(registry_builder)
    main(["--local", str(registry_root), "init", "-y", "--cwd", str(project_root)])

    with pytest.raises(SystemExit) as excinfo:
        main(["--local", str(registry_root), "add", "ghost", "-y", "--cwd", str(project_root)])

    assert excinfo.value.code == 1
    err = capsys.readouterr().err
    assert 'Component "ghost" not found in registry.' in err
    assert "  - ui/button" in err


def test_main_add_without_config_fails(registry_builder, project_root: Path, capsys: pytest.CaptureFixture[str]) -> None:
    registry_root = _seed(registry_builder)
    with pytest.raises(SystemExit) as excinfo:
        main(["--local", str(registry_root), "add", "ui/button", "-y", "--cwd", str(project_root)])
    assert excinfo.value.code == 1
    assert "registrykit init" in capsys.readouterr().err


def test_main_non_interactive_add_with_overwrite_flag(
    registry_builder, project_root: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    registry_root = _seed(registry_builder)
    main(["--local", str(registry_root), "init", "-y", "--cwd", str(project_root)])
    button = project_root / "src" / "components" / "ui" / "button.tsx"
    button.parent.mkdir(parents=True, exist_ok=True)
    button.write_text("// customised\n", encoding="utf-8")

    main(["--local", str(registry_root), "add", "ui/button", "--overwrite", "--cwd", str(project_root)])

    assert button.read_text(encoding="utf-8") == "export const Button = () => null;\n"
    assert "Components installed successfully!" in capsys.readouterr().out


def test_main_non_interactive_add_keeps_existing_files(
    registry_builder, project_root: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    registry_root = _seed(registry_builder)
    main(["--local", str(registry_root), "init", "-y", "--cwd", str(project_root)])
    button = project_root / "src" / "components" / "ui" / "button.tsx"
    button.parent.mkdir(parents=True, exist_ok=True)
    button.write_text("// customised\n", encoding="utf-8")

    main(["--local", str(registry_root), "add", "ui/button", "--cwd", str(project_root)])

    assert button.read_text(encoding="utf-8") == "// customised\n"
    assert "skipped" in capsys.readouterr().out


def test_main_writes_debug_log_file(registry_builder, project_root: Path, tmp_path: Path) -> None:
    registry_root = _seed(registry_builder)
    log_file = tmp_path / "logs" / "registrykit.log"
    main(["--local", str(registry_root), "init", "-y", "--cwd", str(project_root)])

    main(
        [
            "--local",
            str(registry_root),
            "--log-file",
            str(log_file),
            "add",
            "ui/button",
            "-y",
            "--cwd",
            str(project_root),
        ]
    )

    text = log_file.read_text(encoding="utf-8")
    assert "DEBUG registrykit.installer: Wrote" in text
    assert "button.tsx" in text
