"""Tests for core/code_fixes.py — apply_one / apply_batch."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock

from flutter_architect.core.code_fixes import apply_batch, apply_one
from flutter_architect.core.config import ServerConfig
from flutter_architect.core.lock import ResourceLock
from flutter_architect.core.process_runner import ProcessResult
from flutter_architect.core.transaction import FileEdit


def _fail(runner: MagicMock, stderr: str) -> None:
    runner.run.return_value = ProcessResult(output="", exit_code=1, success=False, stderr=stderr)


def test_batch_rollback_restores_all_files(flutter_project: Path, runner: MagicMock) -> None:
    (flutter_project / "a.txt").write_text("A0", encoding="utf-8")
    (flutter_project / "b.txt").write_text("B0", encoding="utf-8")
    _fail(runner, "Because demo_app depends on foo ^9.0.0 which doesn't exist")

    outcome = apply_batch(
        flutter_project,
        [FileEdit("a.txt", "X", "d1"), FileEdit("b.txt", "Y", "d2")],
        runner=runner,
        config=ServerConfig(),
    )

    assert outcome.success is False
    assert outcome.rolled_back is True
    assert outcome.descriptions == ["d1", "d2"]
    assert "foo ^9.0.0" in outcome.stderr
    assert (flutter_project / "a.txt").read_text() == "A0"
    assert (flutter_project / "b.txt").read_text() == "B0"

    summary = outcome.summary()
    assert "rolled back" in summary
    assert "• a.txt: d1" in summary
    assert "• b.txt: d2" in summary
    assert "foo ^9.0.0" in summary


def test_batch_rollback_removes_newly_created_files(flutter_project: Path, runner: MagicMock) -> None:
    _fail(runner, "boom")

    outcome = apply_batch(
        flutter_project,
        [FileEdit("a.txt", "X", "d1"), FileEdit("b.txt", "Y", "d2")],
        runner=runner,
        config=ServerConfig(),
    )

    assert outcome.success is False
    assert not (flutter_project / "a.txt").exists()
    assert not (flutter_project / "b.txt").exists()


def test_batch_success_reports_descriptions_in_order(flutter_project: Path, runner: MagicMock) -> None:
    outcome = apply_batch(
        flutter_project,
        [
            FileEdit("pubspec.yaml", "name: demo_app\nversion: 1.0.1\n", "bump version"),
            FileEdit("lib/main.dart", "void main() { print('hi'); }\n", "say hi"),
        ],
        runner=runner,
        config=ServerConfig(),
    )

    assert outcome.success is True
    assert outcome.descriptions == ["bump version", "say hi"]
    assert "version: 1.0.1" in (flutter_project / "pubspec.yaml").read_text()
    summary = outcome.summary()
    assert summary.startswith("✅ 2 fix(es) applied successfully!")
    assert "pub get succeeded" in summary
    runner.run.assert_called_once()


def test_batch_always_validates(flutter_project: Path, runner: MagicMock) -> None:
    apply_batch(flutter_project, [FileEdit("a.txt", "X", "d")], runner=runner, config=ServerConfig())
    runner.run.assert_called_once()


def test_empty_batch_is_rejected(flutter_project: Path, runner: MagicMock) -> None:
    outcome = apply_batch(flutter_project, [], runner=runner, config=ServerConfig())

    assert outcome.success is False
    assert outcome.error == "No fixes given"
    runner.run.assert_not_called()


def test_apply_one_success(flutter_project: Path, runner: MagicMock) -> None:
    outcome = apply_one(
        flutter_project,
        "lib/main.dart",
        "void main() => runApp(App());\n",
        "use runApp",
        runner=runner,
        config=ServerConfig(flutter_bin="/opt/flutter/bin/flutter"),
    )

    assert outcome.success is True
    assert (flutter_project / "lib" / "main.dart").read_text() == "void main() => runApp(App());\n"
    cmd = runner.run.call_args[0][0]
    assert cmd == ["/opt/flutter/bin/flutter", "pub", "get"]


def test_apply_one_without_validation(flutter_project: Path, runner: MagicMock) -> None:
    outcome = apply_one(
        flutter_project,
        "README.md",
        "# demo\n",
        "add readme",
        validate_after=False,
        runner=runner,
        config=ServerConfig(),
    )

    assert outcome.success is True
    assert "Validation skipped" in outcome.summary()
    runner.run.assert_not_called()


def test_apply_one_rollback_restores_original(flutter_project: Path, runner: MagicMock) -> None:
    _fail(runner, "pubspec.yaml: mapping values are not allowed here")

    outcome = apply_one(
        flutter_project,
        "pubspec.yaml",
        "name: : broken",
        "break pubspec",
        runner=runner,
        config=ServerConfig(),
    )

    assert outcome.success is False
    assert outcome.rolled_back is True
    assert (flutter_project / "pubspec.yaml").read_text() == "name: demo_app\n"
    assert "mapping values" in outcome.summary()


def test_apply_one_rejects_traversal(flutter_project: Path, runner: MagicMock) -> None:
    outcome = apply_one(
        flutter_project, "../../.bashrc", "evil", "escape", runner=runner, config=ServerConfig()
    )

    assert outcome.success is False
    assert outcome.rolled_back is False
    assert "escapes project root" in (outcome.error or "")
    assert "nothing was written" in outcome.summary()
    runner.run.assert_not_called()


def test_apply_one_missing_project(tmp_path: Path, runner: MagicMock) -> None:
    outcome = apply_one(tmp_path / "missing", "a.txt", "x", "d", runner=runner, config=ServerConfig())

    assert outcome.success is False
    assert "Project not found" in (outcome.error or "")


def test_busy_project_is_reported(flutter_project: Path, runner: MagicMock) -> None:
    with ResourceLock(flutter_project):
        outcome = apply_one(
            flutter_project, "a.txt", "x", "d", runner=runner, config=ServerConfig(lock_timeout=0)
        )

    assert outcome.success is False
    assert "Another operation" in (outcome.error or "")
    assert not (flutter_project / "a.txt").exists()


def test_repeated_successful_calls(flutter_project: Path, runner: MagicMock) -> None:
    for i in range(5):
        outcome = apply_one(
            flutter_project, "counter.txt", str(i), f"set {i}", runner=runner, config=ServerConfig()
        )
        assert outcome.success is True
    assert (flutter_project / "counter.txt").read_text() == "4"
    assert runner.run.call_count == 5


def test_validator_that_cannot_start_restores_files(flutter_project: Path, runner: MagicMock) -> None:
    runner.run.side_effect = OSError(8, "Exec format error")

    outcome = apply_one(
        flutter_project, "pubspec.yaml", "broken: [", "break pubspec", runner=runner, config=ServerConfig()
    )

    assert outcome.success is False
    assert outcome.rolled_back is True
    assert "Exec format error" in outcome.summary()
    assert "rolled back" in outcome.summary()
    assert (flutter_project / "pubspec.yaml").read_text() == "name: demo_app\n"
