"""Tests for core/launcher.py — Android and web launches."""

from __future__ import annotations

import io
from pathlib import Path
from unittest.mock import MagicMock, call

import pytest

from flutter_architect.core import launcher
from flutter_architect.core.config import ServerConfig
from flutter_architect.core.errors import (
    ExternalToolError,
    ImageNotFoundError,
    LaunchFailedError,
)
from flutter_architect.core.launcher import (
    android_run_args,
    run_android,
    run_web,
    web_run_args,
)


def _fake_process(stdout: str = "", stderr: str = "") -> MagicMock:
    process = MagicMock()
    process.stdout = io.StringIO(stdout)
    process.stderr = io.StringIO(stderr)
    process.wait.return_value = 0
    process.pid = 31337
    return process


def test_run_args() -> None:
    assert android_run_args("prod") == ["run", "--flavor", "prod", "--dart-define=ENVIRONMENT=prod"]
    assert web_run_args("dev") == ["run", "-d", "chrome", "--dart-define=ENVIRONMENT=dev"]


def test_run_android_ensures_emulator_then_starts(flutter_project: Path, runner: MagicMock) -> None:
    runner.start_monitored.return_value = _fake_process("Flutter run key commands.\n")
    orchestrator = MagicMock()
    before = len(launcher.monitors())

    monitor = run_android(
        flutter_project,
        runner,
        ServerConfig(flutter_bin="/opt/flutter"),
        flavor="prod",
        emulator="Pixel_7",
        orchestrator=orchestrator,
    )

    orchestrator.ensure_running.assert_called_once_with("Pixel_7")
    runner.run_silent.assert_called_once_with(["/opt/flutter", "pub", "get"], cwd=str(flutter_project))
    runner.start_monitored.assert_called_once_with(
        ["/opt/flutter", "run", "--flavor", "prod", "--dart-define=ENVIRONMENT=prod"],
        cwd=str(flutter_project),
    )
    assert monitor.join(timeout=5)
    assert monitor.ready is True
    assert monitor.label == "Flutter Android"
    assert len(launcher.monitors()) == before + 1
    assert launcher.monitors()[-1] is monitor


def test_run_android_rejects_unknown_flavor(flutter_project: Path, runner: MagicMock) -> None:
    orchestrator = MagicMock()
    with pytest.raises(ValueError, match="flavor"):
        run_android(flutter_project, runner, ServerConfig(), flavor="staging", orchestrator=orchestrator)
    orchestrator.ensure_running.assert_not_called()
    runner.start_monitored.assert_not_called()


def test_run_android_stops_when_no_device(flutter_project: Path, runner: MagicMock) -> None:
    orchestrator = MagicMock()
    orchestrator.ensure_running.side_effect = ImageNotFoundError("device-7", ["device-1"])

    with pytest.raises(ImageNotFoundError):
        run_android(flutter_project, runner, ServerConfig(), emulator="device-7", orchestrator=orchestrator)
    runner.run_silent.assert_not_called()
    runner.start_monitored.assert_not_called()


def test_run_web(flutter_project: Path, runner: MagicMock) -> None:
    runner.start_monitored.return_value = _fake_process(stderr="Error: cannot resolve symbol\n")

    monitor = run_web(flutter_project, runner, ServerConfig(), environment="prod")

    assert runner.start_monitored.call_args == call(
        ["flutter", "run", "-d", "chrome", "--dart-define=ENVIRONMENT=prod"],
        cwd=str(flutter_project),
    )
    assert monitor.join(timeout=5)
    assert monitor.error_count == 1
    assert monitor.exit_code == 0


def test_run_web_pub_get_failure(flutter_project: Path, runner: MagicMock) -> None:
    runner.run_silent.side_effect = ExternalToolError(["flutter", "pub", "get"], 1, "bad pubspec")

    with pytest.raises(ExternalToolError):
        run_web(flutter_project, runner, ServerConfig())
    runner.start_monitored.assert_not_called()


def test_run_web_launch_failure(flutter_project: Path, runner: MagicMock) -> None:
    runner.start_monitored.side_effect = FileNotFoundError("flutter")

    with pytest.raises(LaunchFailedError, match="Web"):
        run_web(flutter_project, runner, ServerConfig())
