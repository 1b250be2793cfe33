"""run_flutter_web — run a project in Chrome."""

from __future__ import annotations

import asyncio
from typing import Literal

from flutter_architect.core.errors import FlutterArchitectError
from flutter_architect.server import load_runtime, locate_project, mcp


@mcp.tool()
async def run_flutter_web(path: str, environment: Literal["dev", "prod"] = "dev") -> str:
    """Run a Flutter project on Chrome (passed as --dart-define=ENVIRONMENT=...).

    Web does not support native flavors, only dart-define variables.
    """
    from flutter_architect.core.launcher import run_web

    config, runner = load_runtime()
    try:
        project = locate_project(path, config)
    except FlutterArchitectError as e:
        return f"Error: {e}"

    try:
        await asyncio.to_thread(run_web, project, runner, config, environment=environment)
    except (FlutterArchitectError, ValueError) as e:
        return f"Error: {e}"

    return (
        f"🌐 Flutter Web (environment: {environment}) is starting...\n\n"
        f"📍 Project: {project}\n"
        f"🎯 Environment: {environment} (via --dart-define=ENVIRONMENT={environment})\n"
        "🚀 Chrome will open in ~10-30 seconds\n\n"
        "The server will remain connected. Use shutdown_server to close."
    )
