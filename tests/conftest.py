"""Shared test fixtures."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from flutter_architect.core.process_runner import ProcessResult, ProcessRunner


@pytest.fixture(autouse=True)
def isolated_config(tmp_path_factory: pytest.TempPathFactory, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Keep the user's config file and SDK env vars out of every test."""
    config_path = tmp_path_factory.mktemp("config") / "config.json"
    monkeypatch.setenv("FLUTTER_ARCHITECT_CONFIG", str(config_path))
    for var in ("FLUTTER_ARCHITECT_PROJECTS_DIR", "FLUTTER_BIN", "ADB_PATH", "ANDROID_EMULATOR"):
        monkeypatch.delenv(var, raising=False)
    return config_path


@pytest.fixture
def flutter_project(tmp_path: Path) -> Path:
    """Create a minimal Flutter project tree."""
    project = tmp_path / "demo_app"
    (project / "lib").mkdir(parents=True)
    (project / "pubspec.yaml").write_text("name: demo_app\n", encoding="utf-8")
    (project / "lib" / "main.dart").write_text("void main() {}\n", encoding="utf-8")
    return project


@pytest.fixture
def runner() -> MagicMock:
    """ProcessRunner double; every command succeeds with empty output by default."""
    mock = MagicMock(spec=ProcessRunner)
    mock.run.return_value = ProcessResult(output="", exit_code=0, success=True)
    return mock
