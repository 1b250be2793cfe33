"""Flutter Architect MCP Server — FastMCP over stdio."""

from __future__ import annotations

import asyncio
import contextlib
import logging
import os
import platform
import sys
from pathlib import Path

from mcp.server.fastmcp import FastMCP

from flutter_architect.core.config import ServerConfig
from flutter_architect.core.paths import default_projects_dir, require_project
from flutter_architect.core.process_runner import ProcessRunner
from flutter_architect.core.shutdown import ShutdownSignal

logger = logging.getLogger("flutter_architect")

mcp = FastMCP(
    "flutter-architect-mcp",
    instructions=(
        "Inspect, repair and run Flutter projects. "
        "Typical loop: analyze_flutter_project → apply_code_fix / apply_batch_fixes "
        "→ validate_flutter_project, then run_flutter_android or run_flutter_web."
    ),
)

shutdown = ShutdownSignal()


def load_runtime() -> tuple[ServerConfig, ProcessRunner]:
    """Config for this call plus a runner bound to its command timeout."""
    config = ServerConfig.load()
    if not config.projects_dir:
        config.projects_dir = str(default_projects_dir())
    return config, ProcessRunner(timeout=config.command_timeout)


def locate_project(path: str, config: ServerConfig) -> Path:
    """Resolve a tool's project argument. Raises ProjectNotFoundError."""
    return require_project(path, config.projects_dir)


# Tool registrations are in tools/*.py — imported below
import flutter_architect.tools.analysis  # noqa: E402, F401
import flutter_architect.tools.android  # noqa: E402, F401
import flutter_architect.tools.code_fixes  # noqa: E402, F401
import flutter_architect.tools.project  # noqa: E402, F401
import flutter_architect.tools.server_info  # noqa: E402, F401
import flutter_architect.tools.web  # noqa: E402, F401


def _configure_logging() -> None:
    # stdout carries the MCP transport; logs go to stderr only
    log_level = os.environ.get("FLUTTER_ARCHITECT_LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )


async def serve_until(signal: ShutdownSignal, poll_interval: float = 1.0) -> None:
    """Run the stdio server until the transport closes or `signal` is set."""
    server = asyncio.create_task(mcp.run_stdio_async())
    while not server.done() and not signal.is_set():
        await asyncio.sleep(poll_interval)

    if server.done():
        server.result()
        return

    logger.info("Shutting down MCP Server...")
    server.cancel()
    with contextlib.suppress(asyncio.CancelledError):
        await server


def serve(signal: ShutdownSignal | None = None) -> None:
    """Start MCP server on stdio."""
    _configure_logging()
    config, _ = load_runtime()
    logger.info("Flutter Architect MCP Server %s started", config.version)
    logger.info("Projects directory: %s", config.projects_dir)
    logger.info("OS: %s", platform.system())
    asyncio.run(serve_until(signal or shutdown, config.shutdown_poll_interval))
