"""run_flutter_android — run a project on an Android emulator with a flavor."""

from __future__ import annotations

import asyncio
from typing import Literal

from flutter_architect.core.errors import FlutterArchitectError, OrchestrationError
from flutter_architect.server import load_runtime, locate_project, mcp


@mcp.tool()
async def run_flutter_android(
    path: str,
    flavor: Literal["dev", "prod"] = "dev",
    emulator: str | None = None,
) -> str:
    """Run a Flutter project on an Android emulator with flavor support.

    Starts an emulator first when none is running (the named one, or the
    first available). The app runs detached; its output is monitored in the
    server log.
    """
    from flutter_architect.core.launcher import run_android

    config, runner = load_runtime()
    try:
        project = locate_project(path, config)
    except FlutterArchitectError as e:
        return f"Error: {e}"

    try:
        await asyncio.to_thread(
            run_android, project, runner, config, flavor=flavor, emulator=emulator
        )
    except OrchestrationError as e:
        return f"❌ {e}"
    except (FlutterArchitectError, ValueError) as e:
        return f"Error: {e}"

    return (
        f"📱 Flutter Android (flavor: {flavor}) is starting...\n\n"
        f"📍 Project: {project}\n"
        f"🎨 Flavor: {flavor} (native Android flavor via --flavor)\n"
        "🚀 App will launch on emulator in ~10-30 seconds\n\n"
        "The server will remain connected. Use shutdown_server to close."
    )
