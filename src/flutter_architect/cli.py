"""Flutter Architect CLI — thin wrapper over core/ modules."""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from pathlib import Path

from flutter_architect.core.config import ServerConfig
from flutter_architect.core.errors import FlutterArchitectError
from flutter_architect.core.paths import default_projects_dir, require_project
from flutter_architect.core.process_runner import ProcessRunner
from flutter_architect.core.transaction import FileEdit


def cli_main() -> None:
    """CLI entry point."""
    # FLUTTER_ARCHITECT_LOG_LEVEL=DEBUG to enable debug output
    log_level = os.environ.get("FLUTTER_ARCHITECT_LOG_LEVEL", "WARNING").upper()
    logging.basicConfig(
        level=getattr(logging, log_level, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    parser = build_parser()
    args = parser.parse_args()

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    try:
        _dispatch(args)
    except (FlutterArchitectError, OSError, ValueError, KeyError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="flutter-architect",
        description="Inspect, repair and run Flutter projects (MCP server when run without a command)",
    )
    sub = parser.add_subparsers(dest="command")

    sub.add_parser("info", help="Show configuration and Flutter version")
    sub.add_parser("emulators", help="List available Android emulators")

    analyze_p = sub.add_parser("analyze", help="Print a full project analysis")
    analyze_p.add_argument("project", help="Project name or path")
    analyze_p.add_argument("--code-samples", action="store_true", help="Include lib/main.dart")

    validate_p = sub.add_parser("validate", help="Run pub get + analyze (+ build)")
    validate_p.add_argument("project", help="Project name or path")
    validate_p.add_argument("--build", action="store_true", help="Also build a debug APK")

    fix_p = sub.add_parser("fix", help="flutter clean + pub get")
    fix_p.add_argument("project", help="Project name or path")
    fix_p.add_argument("--deep", action="store_true", help="Delete build caches and pubspec.lock first")

    apply_p = sub.add_parser("apply", help="Apply a batch of fixes from a JSON file")
    apply_p.add_argument("project", help="Project name or path")
    apply_p.add_argument(
        "fixes_file",
        help='JSON array of {"file_path", "content", "description"} objects',
    )
    return parser


def _runtime() -> tuple[ServerConfig, ProcessRunner]:
    config = ServerConfig.load()
    if not config.projects_dir:
        config.projects_dir = str(default_projects_dir())
    return config, ProcessRunner(timeout=config.command_timeout)


def _load_fixes(path: str) -> list[FileEdit]:
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(data, list):
        raise ValueError(f"{path} must contain a JSON array of fixes")
    return [
        FileEdit(path=item["file_path"], content=item["content"], description=item["description"])
        for item in data
    ]


def _dispatch(args: argparse.Namespace) -> None:
    """Route parsed arguments to core functions."""
    config, runner = _runtime()

    if args.command == "info":
        from flutter_architect.core.flutter import flutter_version

        print(f"Projects Directory: {config.projects_dir}")
        print(f"Flutter Version: {flutter_version(runner, config.flutter_bin)}")
        print(config.to_json())

    elif args.command == "emulators":
        from flutter_architect.core.devices import DeviceRegistry

        registry = DeviceRegistry(
            runner, flutter_bin=config.flutter_bin, emulator_bin=config.emulator_bin
        )
        images = registry.list_available_images()
        print("\n".join(images) if images else "No Android emulators found.")

    elif args.command == "analyze":
        from flutter_architect.core.analyzer import analyze_project, format_report

        project = require_project(args.project, config.projects_dir)
        analysis = analyze_project(
            project,
            runner,
            flutter_bin=config.flutter_bin,
            include_code_samples=args.code_samples,
        )
        print(format_report(analysis))

    elif args.command == "validate":
        from flutter_architect.core.flutter import validate_project

        project = require_project(args.project, config.projects_dir)
        validation = validate_project(
            project, runner, flutter_bin=config.flutter_bin, build_check=args.build
        )
        print(validation.report())
        if not validation.passed:
            sys.exit(1)

    elif args.command == "fix":
        from flutter_architect.core.flutter import fix_project

        project = require_project(args.project, config.projects_dir)
        fix_project(
            project,
            runner,
            flutter_bin=config.flutter_bin,
            deep=args.deep,
            lock_timeout=config.lock_timeout,
        )
        print(f"Flutter project fixed successfully at {project}")

    elif args.command == "apply":
        from flutter_architect.core.code_fixes import apply_batch

        project = require_project(args.project, config.projects_dir)
        outcome = apply_batch(project, _load_fixes(args.fixes_file), runner=runner, config=config)
        print(outcome.summary())
        if not outcome.success:
            sys.exit(1)
