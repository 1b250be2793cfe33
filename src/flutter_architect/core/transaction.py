"""FileTransaction — all-or-nothing multi-file write guarded by a validator.

Lifecycle:
    txn = FileTransaction.begin(project_root, edits, runner=runner)   # snapshot only
    outcome = txn.commit_or_rollback(validate=True)                   # write, validate, decide

begin() performs every precondition check and reads every pre-existing
target before any byte is written. commit_or_rollback() writes the edits in
request order, runs the validator at most once, and either discards the
snapshot (exit code 0) or restores it (anything else). Files the transaction
created are deleted on rollback, together with any parent directories it
had to create.
"""

from __future__ import annotations

import logging
import os
import shutil
from dataclasses import dataclass
from pathlib import Path

from flutter_architect.core.errors import ProjectNotFoundError
from flutter_architect.core.paths import resolve_target
from flutter_architect.core.process_runner import ProcessRunner

logger = logging.getLogger("flutter_architect")

DEFAULT_VALIDATOR = ["flutter", "pub", "get"]


def _atomic_write_bytes(path: Path, data: bytes) -> None:
    """Write via a sibling temp file and rename, so a failed write never truncates `path`.

    An existing file keeps its permission bits.
    """
    tmp_path = path.with_name(f".{path.name}.{os.getpid()}.tmp")
    try:
        with open(tmp_path, "xb") as fh:
            fh.write(data)
        if path.exists():
            shutil.copymode(path, tmp_path)
        os.replace(tmp_path, path)
    except Exception:
        tmp_path.unlink(missing_ok=True)
        raise


@dataclass(frozen=True)
class FileEdit:
    """One file replacement: path relative to the project root, full new content."""

    path: str
    content: str
    description: str


@dataclass
class ValidationOutcome:
    succeeded: bool
    exit_code: int
    stdout: str = ""
    stderr: str = ""
    # False when the caller skipped validation
    validated: bool = True


class FileTransaction:
    """Snapshot → write → validate → commit or roll back."""

    def __init__(
        self,
        project_root: Path,
        edits: list[FileEdit],
        targets: list[tuple[str, Path]],
        snapshot: dict[str, bytes | None],
        *,
        runner: ProcessRunner,
        validator_cmd: list[str],
    ) -> None:
        self.project_root = project_root
        self.edits = edits
        self.snapshot = snapshot
        self.rollback_errors: list[str] = []
        self._targets = targets
        self._runner = runner
        self._validator_cmd = validator_cmd
        self._created_dirs: list[Path] = []
        self._finished = False

    @classmethod
    def begin(
        cls,
        project_root: str | Path,
        edits: list[FileEdit],
        *,
        runner: ProcessRunner,
        validator_cmd: list[str] | None = None,
    ) -> FileTransaction:
        """Check preconditions and snapshot every target.

        Raises ProjectNotFoundError, PathEscapeError, or the OSError of a
        failed snapshot read. Nothing has been written when any of these
        is raised.
        """
        root = Path(project_root)
        if not root.is_dir():
            raise ProjectNotFoundError(f"Project not found at {root}")
        root = root.resolve()

        # Resolve everything first so a traversal attempt aborts before any read
        targets = []
        for edit in edits:
            target = resolve_target(root, edit.path)
            targets.append((target.relative_to(root).as_posix(), target))

        snapshot: dict[str, bytes | None] = {}
        for rel, target in targets:
            if rel in snapshot:
                continue
            if target.is_dir():
                raise IsADirectoryError(f"Target is a directory: {rel}")
            snapshot[rel] = target.read_bytes() if target.exists() else None

        logger.info(
            "transaction opened on %s: %d edit(s), %d existing file(s) backed up",
            root,
            len(edits),
            sum(1 for content in snapshot.values() if content is not None),
        )
        return cls(
            root,
            list(edits),
            targets,
            snapshot,
            runner=runner,
            validator_cmd=list(validator_cmd or DEFAULT_VALIDATOR),
        )

    @property
    def finished(self) -> bool:
        return self._finished

    def commit_or_rollback(self, validate: bool = True) -> ValidationOutcome:
        """Apply every edit, validate, then commit or roll back.

        A write failure, or a validator that raises instead of returning an
        exit code, restores every snapshot and re-raises the original error.
        The validator runs at most once.
        """
        if self._finished:
            raise RuntimeError("Transaction already committed or rolled back")

        try:
            for edit, (rel, target) in zip(self.edits, self._targets):
                self._make_parents(target)
                _atomic_write_bytes(target, edit.content.encode("utf-8"))
                logger.info("Applied: %s (%s)", rel, edit.description)
        except Exception:
            logger.exception("write phase failed, rolling back %d file(s)", len(self.snapshot))
            self._rollback()
            raise

        if not validate:
            self._commit()
            return ValidationOutcome(succeeded=True, exit_code=0, validated=False)

        logger.info("Validating: %s", " ".join(self._validator_cmd))
        try:
            result = self._runner.run(self._validator_cmd, cwd=str(self.project_root))
        except Exception:
            logger.exception("validator could not run, rolling back %d file(s)", len(self.snapshot))
            self._rollback()
            raise
        outcome = ValidationOutcome(
            succeeded=result.exit_code == 0,
            exit_code=result.exit_code,
            stdout=result.output,
            stderr=result.stderr,
        )
        if outcome.succeeded:
            self._commit()
        else:
            logger.warning("Validation failed (exit %d), rolling back...", result.exit_code)
            self._rollback()
        return outcome

    def _make_parents(self, target: Path) -> None:
        missing: list[Path] = []
        parent = target.parent
        while parent != self.project_root and not parent.exists():
            missing.append(parent)
            parent = parent.parent
        if missing:
            target.parent.mkdir(parents=True, exist_ok=True)
            self._created_dirs.extend(missing)

    def _commit(self) -> None:
        self.snapshot.clear()
        self._created_dirs.clear()
        self._finished = True
        logger.info("transaction committed on %s", self.project_root)

    def _rollback(self) -> None:
        for rel, original in self.snapshot.items():
            target = self.project_root / rel
            try:
                if original is None:
                    target.unlink(missing_ok=True)
                else:
                    _atomic_write_bytes(target, original)
            except OSError as exc:
                logger.error("rollback failed for %s: %s", rel, exc)
                self.rollback_errors.append(f"{rel}: {exc}")

        # deepest first so parents are empty by the time they are reached
        for directory in sorted(self._created_dirs, key=lambda d: len(d.parts), reverse=True):
            try:
                directory.rmdir()
            except OSError as exc:
                logger.debug("left directory %s in place: %s", directory, exc)

        self.snapshot.clear()
        self._created_dirs.clear()
        self._finished = True
        logger.warning("Rolled back changes on %s", self.project_root)
