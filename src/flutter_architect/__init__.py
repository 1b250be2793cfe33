"""Flutter Architect — MCP server for inspecting, repairing and running Flutter projects."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("flutter-architect")
except PackageNotFoundError:
    __version__ = "unknown"


_CLI_COMMANDS = {"info", "emulators", "analyze", "validate", "fix", "apply"}


def main() -> None:
    """Entry point: run MCP server by default, CLI if subcommand given."""
    import sys

    if len(sys.argv) > 1 and (
        sys.argv[1] in _CLI_COMMANDS or sys.argv[1] in ("--help", "-h", "--version")
    ):
        from flutter_architect.cli import cli_main

        if sys.argv[1] == "--version":
            print(f"flutter-architect {__version__}")
            return
        cli_main()
    else:
        from flutter_architect.server import serve

        serve()
