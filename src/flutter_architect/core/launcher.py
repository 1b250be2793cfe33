"""Start `flutter run` for Android or Chrome and hand it to a ProcessMonitor.

Launched processes are detached from the tool call; their monitors are kept
in an append-only list for the life of the server.
"""

from __future__ import annotations

import logging
from pathlib import Path

from flutter_architect.core.config import ServerConfig
from flutter_architect.core.emulator import EmulatorOrchestrator
from flutter_architect.core.errors import LaunchFailedError
from flutter_architect.core.monitor import ProcessMonitor
from flutter_architect.core.process_runner import ProcessRunner

logger = logging.getLogger("flutter_architect")

FLAVORS = ("dev", "prod")

_monitors: list[ProcessMonitor] = []


def monitors() -> list[ProcessMonitor]:
    return list(_monitors)


def android_run_args(flavor: str) -> list[str]:
    return ["run", "--flavor", flavor, f"--dart-define=ENVIRONMENT={flavor}"]


def web_run_args(environment: str) -> list[str]:
    return ["run", "-d", "chrome", f"--dart-define=ENVIRONMENT={environment}"]


def _start(
    label: str,
    project: Path,
    args: list[str],
    runner: ProcessRunner,
    config: ServerConfig,
) -> ProcessMonitor:
    runner.run_silent([config.flutter_bin, "pub", "get"], cwd=str(project))
    try:
        process = runner.start_monitored([config.flutter_bin, *args], cwd=str(project))
    except OSError as exc:
        raise LaunchFailedError(f"Failed to start Flutter {label}: {exc}") from exc

    monitor = ProcessMonitor(f"Flutter {label}", queue_size=config.monitor_queue_size)
    monitor.attach(process)
    _monitors.append(monitor)
    logger.info("Flutter %s process started (pid %s)", label, process.pid)
    return monitor


def run_android(
    project: Path,
    runner: ProcessRunner,
    config: ServerConfig,
    *,
    flavor: str = "dev",
    emulator: str | None = None,
    orchestrator: EmulatorOrchestrator | None = None,
) -> ProcessMonitor:
    """Ensure an emulator, resolve dependencies, start the app detached.

    Raises ValueError for an unknown flavor, OrchestrationError when no
    device can be brought up, ExternalToolError when `pub get` fails.
    """
    if flavor not in FLAVORS:
        raise ValueError(f"flavor must be one of {FLAVORS}, got '{flavor}'")
    orchestrator = orchestrator or EmulatorOrchestrator(runner, config)
    orchestrator.ensure_running(emulator)
    return _start("Android", project, android_run_args(flavor), runner, config)


def run_web(
    project: Path,
    runner: ProcessRunner,
    config: ServerConfig,
    *,
    environment: str = "dev",
) -> ProcessMonitor:
    """Resolve dependencies and start the app in Chrome, detached."""
    if environment not in FLAVORS:
        raise ValueError(f"environment must be one of {FLAVORS}, got '{environment}'")
    return _start("Web", project, web_run_args(environment), runner, config)
