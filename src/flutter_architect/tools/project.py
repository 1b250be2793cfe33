"""fix_flutter_project — clean and re-resolve a broken project."""

from __future__ import annotations

import asyncio

from flutter_architect.core.errors import FlutterArchitectError
from flutter_architect.server import load_runtime, locate_project, mcp


@mcp.tool()
async def fix_flutter_project(path: str, deep_clean: bool = False) -> str:
    """Repair a project with flutter clean + flutter pub get.

    deep_clean also removes .dart_tool, build, android/.gradle,
    android/app/build, ios/.symlinks, ios/Pods and pubspec.lock first.
    """
    from flutter_architect.core.flutter import fix_project

    config, runner = load_runtime()
    try:
        project = locate_project(path, config)
    except FlutterArchitectError as e:
        return f"Error: {e}"

    try:
        await asyncio.to_thread(
            fix_project,
            project,
            runner,
            flutter_bin=config.flutter_bin,
            deep=deep_clean,
            lock_timeout=config.lock_timeout,
        )
    except (FlutterArchitectError, OSError) as e:
        return f"Error fixing project: {e}"
    return f"✅ Flutter project fixed successfully at {project}"
