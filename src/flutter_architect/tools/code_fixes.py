"""apply_code_fix / apply_batch_fixes / read_project_file."""

from __future__ import annotations

import asyncio

from pydantic import BaseModel, Field

from flutter_architect.core.errors import FlutterArchitectError
from flutter_architect.core.paths import resolve_target
from flutter_architect.server import load_runtime, locate_project, mcp


class FixSpec(BaseModel):
    """One file replacement inside a batch."""

    file_path: str = Field(description='Relative path from project root, e.g. "pubspec.yaml"')
    content: str = Field(description="New complete file content")
    description: str = Field(description="Human-readable description of what this fix does")


@mcp.tool()
async def apply_code_fix(
    project_path: str,
    file_path: str,
    content: str,
    description: str,
    validate_after: bool = True,
) -> str:
    """Apply a code fix to one file of a Flutter project.

    Use this to fix dependency conflicts in pubspec.yaml, update Gradle
    configuration, modify source files or create missing files.
    With validate_after=True (default) `flutter pub get` runs afterwards and
    the change is rolled back if it fails.

    AFTER APPLYING FIX: call validate_flutter_project; if still failing,
    analyze_flutter_project again.
    """
    from flutter_architect.core.code_fixes import apply_one

    config, runner = load_runtime()
    try:
        project = locate_project(project_path, config)
    except FlutterArchitectError as e:
        return f"Error: {e}"

    outcome = await asyncio.to_thread(
        apply_one,
        project,
        file_path,
        content,
        description,
        validate_after,
        runner=runner,
        config=config,
    )
    return outcome.summary()


@mcp.tool()
async def apply_batch_fixes(project_path: str, fixes: list[FixSpec]) -> str:
    """Apply several code fixes as one transaction.

    Use this when a problem needs changes to more than one file. All files
    are written, then `flutter pub get` validates them; if validation fails
    every file is restored (files created by the batch are removed).
    """
    from flutter_architect.core.code_fixes import apply_batch
    from flutter_architect.core.transaction import FileEdit

    config, runner = load_runtime()
    try:
        project = locate_project(project_path, config)
    except FlutterArchitectError as e:
        return f"Error: {e}"

    edits = [FileEdit(path=f.file_path, content=f.content, description=f.description) for f in fixes]
    outcome = await asyncio.to_thread(apply_batch, project, edits, runner=runner, config=config)
    return outcome.summary()


@mcp.tool()
async def read_project_file(project_path: str, file_path: str) -> str:
    """Read one file of a Flutter project (path relative to the project root).

    analyze_flutter_project already includes the common files; use this for
    anything else.
    """
    config, _ = load_runtime()
    try:
        project = locate_project(project_path, config)
        target = resolve_target(project, file_path)
    except FlutterArchitectError as e:
        return f"Error: {e}"

    if not target.is_file():
        return f"Error: File not found: {file_path}"
    try:
        content = target.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        return f"Error reading file: {e}"
    return f"File: {file_path}\n```\n{content}\n```"
