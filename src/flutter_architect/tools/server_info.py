"""get_server_info / list_emulators / shutdown_server."""

from __future__ import annotations

import asyncio
import logging
import platform

from flutter_architect.server import load_runtime, mcp, shutdown

logger = logging.getLogger("flutter_architect")

_CREATE_AVD_HINT = (
    "Create one with Android Studio:\n"
    "Tools → Device Manager → Create Device\n\n"
    "Or via command line:\n"
    'avdmanager create avd -n MyEmulator -k "system-images;android-34;google_apis;x86_64"'
)


@mcp.tool()
async def get_server_info() -> str:
    """Server configuration, Flutter version and available emulators."""
    from flutter_architect.core.devices import DeviceRegistry
    from flutter_architect.core.flutter import flutter_version

    config, runner = load_runtime()
    registry = DeviceRegistry(runner, flutter_bin=config.flutter_bin, emulator_bin=config.emulator_bin)
    version, images = await asyncio.gather(
        asyncio.to_thread(flutter_version, runner, config.flutter_bin),
        asyncio.to_thread(registry.list_available_images),
    )
    return "\n".join(
        [
            "📋 Flutter MCP Server Info:",
            "",
            f"Projects Directory: {config.projects_dir}",
            f"Flutter Version: {version}",
            f"Operating System: {platform.system()}",
            f"Available Emulators: {', '.join(images) if images else 'None'}",
            f"Server Version: {config.version}",
            "",
            "Web runs use --dart-define only; Android runs use --flavor.",
            "Use shutdown_server tool to close this server.",
        ]
    )


@mcp.tool()
async def list_emulators() -> str:
    """List available Android emulators (AVDs)."""
    from flutter_architect.core.devices import DeviceRegistry

    config, runner = load_runtime()
    registry = DeviceRegistry(runner, flutter_bin=config.flutter_bin, emulator_bin=config.emulator_bin)
    images = await asyncio.to_thread(registry.list_available_images)
    if not images:
        return f"❌ No Android emulators found.\n\n{_CREATE_AVD_HINT}"
    listing = "\n".join(f"• {image}" for image in images)
    return (
        f"📱 Available Android Emulators:\n\n{listing}\n\n"
        "Use run_flutter_android with emulator parameter to specify which one to use."
    )


@mcp.tool()
async def shutdown_server(confirm: bool = True) -> str:
    """Shut down the MCP server gracefully (confirm must be true)."""
    if not confirm:
        return "Shutdown cancelled."
    logger.info("Shutdown requested by user")
    shutdown.request()
    return "✅ MCP Server is shutting down...\nGoodbye! 👋"
