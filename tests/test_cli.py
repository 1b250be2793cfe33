"""Tests for CLI (cli.py) and the package entry point."""

from __future__ import annotations

import json
from collections.abc import Iterator
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from flutter_architect.core.process_runner import ProcessResult


@pytest.fixture
def cli_runner(runner: MagicMock) -> Iterator[MagicMock]:
    with patch("flutter_architect.cli.ProcessRunner", return_value=runner):
        yield runner


def _cli(*args: str) -> None:
    from flutter_architect.cli import cli_main

    with patch("sys.argv", ["flutter-architect", *args]):
        cli_main()


def test_cli_main_no_command() -> None:
    """cli_main() with no subcommand should exit 1."""
    with pytest.raises(SystemExit) as exc_info:
        _cli()
    assert exc_info.value.code == 1


def test_cli_help(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as exc_info:
        _cli("--help")
    assert exc_info.value.code == 0
    assert "usage" in capsys.readouterr().out.lower()


def test_cli_info(cli_runner: MagicMock, capsys: pytest.CaptureFixture[str]) -> None:
    cli_runner.run.return_value = ProcessResult(
        output="Flutter 3.24.0 • channel stable", exit_code=0, success=True
    )
    _cli("info")
    out = capsys.readouterr().out
    assert "Flutter Version: Flutter 3.24.0 • channel stable" in out
    assert '"boot_max_attempts": 60' in out


def test_cli_emulators(cli_runner: MagicMock, capsys: pytest.CaptureFixture[str]) -> None:
    cli_runner.run.return_value = ProcessResult(output="Pixel_7\n", exit_code=0, success=True)
    _cli("emulators")
    assert capsys.readouterr().out.strip() == "Pixel_7"


def test_cli_validate_failure_exits_1(
    flutter_project: Path, cli_runner: MagicMock, capsys: pytest.CaptureFixture[str]
) -> None:
    cli_runner.run.return_value = ProcessResult(output="", exit_code=1, success=False, stderr="bad")
    with pytest.raises(SystemExit) as exc_info:
        _cli("validate", str(flutter_project))
    assert exc_info.value.code == 1
    assert "❌ flutter pub get: FAILED" in capsys.readouterr().out


def test_cli_missing_project(
    tmp_path: Path, cli_runner: MagicMock, capsys: pytest.CaptureFixture[str]
) -> None:
    with pytest.raises(SystemExit) as exc_info:
        _cli("fix", str(tmp_path / "ghost"))
    assert exc_info.value.code == 1
    assert "Project not found" in capsys.readouterr().err


def test_cli_fix_bare_name(
    flutter_project: Path,
    cli_runner: MagicMock,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    monkeypatch.setenv("FLUTTER_ARCHITECT_PROJECTS_DIR", str(flutter_project.parent))
    _cli("fix", "demo_app")
    assert "fixed successfully" in capsys.readouterr().out
    assert cli_runner.run_silent.call_count == 2


def test_cli_apply(
    flutter_project: Path, cli_runner: MagicMock, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    fixes_file = tmp_path / "fixes.json"
    fixes_file.write_text(
        json.dumps(
            [{"file_path": "lib/app.dart", "content": "class App {}\n", "description": "add App"}]
        ),
        encoding="utf-8",
    )

    _cli("apply", str(flutter_project), str(fixes_file))

    assert "1 fix(es) applied successfully" in capsys.readouterr().out
    assert (flutter_project / "lib" / "app.dart").read_text() == "class App {}\n"


def test_cli_apply_rejects_non_list(
    flutter_project: Path, cli_runner: MagicMock, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    fixes_file = tmp_path / "fixes.json"
    fixes_file.write_text('{"file_path": "a"}', encoding="utf-8")

    with pytest.raises(SystemExit) as exc_info:
        _cli("apply", str(flutter_project), str(fixes_file))
    assert exc_info.value.code == 1
    assert "JSON array" in capsys.readouterr().err


def test_main_version(capsys: pytest.CaptureFixture[str]) -> None:
    from flutter_architect import main

    with patch("sys.argv", ["flutter-architect", "--version"]):
        main()
    assert capsys.readouterr().out.startswith("flutter-architect ")


def test_main_without_command_serves() -> None:
    from flutter_architect import main

    with patch("sys.argv", ["flutter-architect"]), patch("flutter_architect.server.serve") as serve:
        main()
    serve.assert_called_once_with()
