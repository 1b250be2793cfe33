"""Path resolution — projects directory, project roots and in-project targets.

Every file a tool reads or writes inside a project is resolved through
resolve_target(); never join user-supplied paths onto a root elsewhere.
"""

from __future__ import annotations

import os
from pathlib import Path

from flutter_architect.core.errors import PathEscapeError, ProjectNotFoundError


def default_projects_dir(home: Path | None = None) -> Path:
    """Desktop if present, then Documents, then the home directory itself."""
    home = home if home is not None else Path.home()
    for candidate in (home / "Desktop", home / "Documents"):
        if candidate.is_dir():
            return candidate
    return home


def resolve_project(path: str, projects_dir: str | Path) -> Path:
    """Resolve a project argument: bare names live under projects_dir."""
    if os.sep not in path and (os.altsep is None or os.altsep not in path):
        return Path(projects_dir) / path
    return Path(path).expanduser()


def require_project(path: str, projects_dir: str | Path) -> Path:
    """Resolve a project argument and require an existing directory.

    Raises ProjectNotFoundError otherwise.
    """
    project = resolve_project(path, projects_dir)
    if not project.is_dir():
        raise ProjectNotFoundError(f"Project not found at {project}")
    return project.resolve()


def resolve_target(project_root: Path, relative: str) -> Path:
    """Join a relative path onto project_root and canonicalize it.

    Raises PathEscapeError for absolute paths or any path that resolves
    (symlinks included) outside the root.
    """
    root = project_root.resolve()
    if not relative or Path(relative).is_absolute():
        raise PathEscapeError(relative, str(root))
    target = (root / relative).resolve()
    if target == root or not target.is_relative_to(root):
        raise PathEscapeError(relative, str(root))
    return target
