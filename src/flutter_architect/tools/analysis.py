"""analyze_flutter_project / validate_flutter_project."""

from __future__ import annotations

import asyncio

from flutter_architect.core.errors import FlutterArchitectError
from flutter_architect.server import load_runtime, locate_project, mcp


@mcp.tool()
async def analyze_flutter_project(path: str, include_code_samples: bool = False) -> str:
    """Deeply analyze a Flutter project.

    Returns structure, dependencies (pubspec.yaml / pubspec.lock),
    configuration (build.gradle, AndroidManifest.xml), current errors from
    pub get and analyze, and the Flutter version.

    AFTER ANALYZING: call apply_code_fix or apply_batch_fixes, then
    validate_flutter_project.
    """
    from flutter_architect.core.analyzer import analyze_project, format_report

    config, runner = load_runtime()
    try:
        project = locate_project(path, config)
    except FlutterArchitectError as e:
        return f"Error: {e}"

    try:
        analysis = await asyncio.to_thread(
            analyze_project,
            project,
            runner,
            flutter_bin=config.flutter_bin,
            include_code_samples=include_code_samples,
        )
    except OSError as e:
        return f"Error analyzing project: {e}"
    return format_report(analysis)


@mcp.tool()
async def validate_flutter_project(path: str, run_build_check: bool = False) -> str:
    """Check that a Flutter project is in working condition.

    Runs flutter pub get, flutter analyze and, with run_build_check,
    flutter build apk --debug.

    IF THIS FAILS: analyze_flutter_project → apply fixes → validate again
    (max 3 times).
    """
    from flutter_architect.core.flutter import validate_project

    config, runner = load_runtime()
    try:
        project = locate_project(path, config)
    except FlutterArchitectError as e:
        return f"Error: {e}"

    validation = await asyncio.to_thread(
        validate_project,
        project,
        runner,
        flutter_bin=config.flutter_bin,
        build_check=run_build_check,
    )
    return validation.report()
