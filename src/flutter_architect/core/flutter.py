"""Flutter SDK commands used outside the transaction engine."""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path

from flutter_architect.core.lock import ResourceLock
from flutter_architect.core.process_runner import ProcessRunner

logger = logging.getLogger("flutter_architect")

DEEP_CLEAN_DIRS = (
    ".dart_tool",
    "build",
    "android/.gradle",
    "android/app/build",
    "ios/.symlinks",
    "ios/Pods",
)
DEEP_CLEAN_FILES = ("pubspec.lock",)


def flutter_version(runner: ProcessRunner, flutter_bin: str = "flutter") -> str:
    """First line of `flutter --version`."""
    result = runner.run([flutter_bin, "--version"])
    if result.exit_code != 0 or not result.output:
        return "Unknown (flutter not found in PATH)"
    return result.output.splitlines()[0].strip()


def deep_clean(project: Path) -> list[str]:
    """Delete build caches and the lockfile. Returns what was removed."""
    removed: list[str] = []
    for rel in DEEP_CLEAN_DIRS:
        directory = project / rel
        if directory.is_dir():
            shutil.rmtree(directory)
            removed.append(rel)
    for rel in DEEP_CLEAN_FILES:
        path = project / rel
        if path.is_file():
            path.unlink()
            removed.append(rel)
    return removed


def fix_project(
    project: Path,
    runner: ProcessRunner,
    *,
    flutter_bin: str = "flutter",
    deep: bool = False,
    lock_timeout: float = 30.0,
) -> list[str]:
    """Optional deep clean, then `flutter clean` and `flutter pub get`.

    Raises ExternalToolError if either command fails.
    """
    with ResourceLock(project, timeout=lock_timeout):
        removed = deep_clean(project) if deep else []
        if removed:
            logger.info("deep clean removed: %s", ", ".join(removed))
        runner.run_silent([flutter_bin, "clean"], cwd=str(project))
        runner.run_silent([flutter_bin, "pub", "get"], cwd=str(project))
    return removed


@dataclass
class ValidationStep:
    name: str
    passed: bool
    detail: str = ""


@dataclass
class ProjectValidation:
    steps: list[ValidationStep] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return all(step.passed for step in self.steps)

    def report(self) -> str:
        lines = ["# VALIDATION RESULTS", ""]
        for step in self.steps:
            if step.passed:
                lines.append(f"✅ {step.name}: PASSED")
            else:
                lines.append(f"❌ {step.name}: FAILED")
                if step.detail:
                    lines.append(step.detail)
        lines.append("")
        if self.passed:
            lines.append("🎉 All validation tests passed! Project is healthy.")
        else:
            lines.append("⚠️ Some tests failed. See details above.")
        return "\n".join(lines)


def validate_project(
    project: Path,
    runner: ProcessRunner,
    *,
    flutter_bin: str = "flutter",
    build_check: bool = False,
) -> ProjectValidation:
    """Run pub get, analyze and optionally a debug APK build. Every step runs."""
    validation = ProjectValidation()
    cwd = str(project)

    pub_get = runner.run([flutter_bin, "pub", "get"], cwd=cwd)
    validation.steps.append(
        ValidationStep("flutter pub get", pub_get.success, f"Error: {pub_get.stderr}")
    )

    analyze = runner.run([flutter_bin, "analyze"], cwd=cwd)
    validation.steps.append(
        ValidationStep("flutter analyze", analyze.success, f"Output: {analyze.output}")
    )

    if build_check:
        build = runner.run([flutter_bin, "build", "apk", "--debug"], cwd=cwd)
        validation.steps.append(
            ValidationStep("flutter build", build.success, f"Error: {build.stderr}")
        )

    return validation
