"""Code fixes — single-file and batch entry points over FileTransaction.

Both entry points hold the project lock for the whole transaction and
translate every failure into one FixOutcome; callers never see exceptions
from an individual step.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from flutter_architect.core.config import ServerConfig
from flutter_architect.core.errors import FlutterArchitectError
from flutter_architect.core.lock import ResourceLock
from flutter_architect.core.process_runner import ProcessRunner
from flutter_architect.core.transaction import FileEdit, FileTransaction, ValidationOutcome

logger = logging.getLogger("flutter_architect")


@dataclass
class FixOutcome:
    """Terminal result of one apply_one / apply_batch call."""

    success: bool
    edits: list[FileEdit]
    rolled_back: bool = False
    validation: ValidationOutcome | None = None
    error: str | None = None
    rollback_errors: list[str] = field(default_factory=list)

    @property
    def descriptions(self) -> list[str]:
        return [edit.description for edit in self.edits]

    @property
    def stderr(self) -> str:
        return self.validation.stderr if self.validation is not None else ""

    def _change_lines(self) -> str:
        return "\n".join(f"• {edit.path}: {edit.description}" for edit in self.edits)

    def summary(self) -> str:
        """Human-readable report for the MCP client."""
        if self.error is not None:
            prefix = "rolled back" if self.rolled_back else "nothing was written"
            return f"Error applying fixes ({prefix}): {self.error}"

        if not self.success:
            lines = [
                "❌ Fixes failed validation and were rolled back.",
                "",
                "Attempted fixes:",
                self._change_lines(),
                "",
                "Error:",
                self.stderr or "(validator produced no stderr)",
            ]
            if self.rollback_errors:
                lines += ["", "⚠️ Could not restore:", *self.rollback_errors]
            lines += ["", "Please revise the fixes and try again."]
            return "\n".join(lines)

        if self.validation is not None and self.validation.validated:
            validation_line = "✅ Validation: pub get succeeded"
        else:
            validation_line = "Validation skipped"
        return "\n".join(
            [
                f"✅ {len(self.edits)} fix(es) applied successfully!",
                "",
                "Changes:",
                self._change_lines(),
                "",
                validation_line,
                "",
                "You can now run validate_flutter_project to do a full check,",
                "or apply additional fixes if needed.",
            ]
        )


def _validator_cmd(config: ServerConfig) -> list[str]:
    return [config.flutter_bin, "pub", "get"]


def _run_transaction(
    project_root: str | Path,
    edits: list[FileEdit],
    *,
    validate: bool,
    runner: ProcessRunner | None,
    config: ServerConfig | None,
) -> FixOutcome:
    config = config or ServerConfig.load()
    runner = runner or ProcessRunner(timeout=config.command_timeout)
    root = Path(project_root)

    try:
        with ResourceLock(root, timeout=config.lock_timeout):
            txn = FileTransaction.begin(
                root, edits, runner=runner, validator_cmd=_validator_cmd(config)
            )
            try:
                outcome = txn.commit_or_rollback(validate=validate)
            except Exception as exc:
                # commit_or_rollback restored the snapshot before re-raising
                return FixOutcome(
                    success=False,
                    edits=edits,
                    rolled_back=True,
                    error=str(exc),
                    rollback_errors=txn.rollback_errors,
                )
    except (FlutterArchitectError, OSError) as exc:
        logger.warning("fix rejected before any write: %s", exc)
        return FixOutcome(success=False, edits=edits, error=str(exc))

    return FixOutcome(
        success=outcome.succeeded,
        edits=edits,
        rolled_back=not outcome.succeeded,
        validation=outcome,
        rollback_errors=txn.rollback_errors,
    )


def apply_one(
    project_root: str | Path,
    path: str,
    content: str,
    description: str,
    validate_after: bool = True,
    *,
    runner: ProcessRunner | None = None,
    config: ServerConfig | None = None,
) -> FixOutcome:
    """Replace one file, optionally validating with `flutter pub get`."""
    logger.info("Applying fix: %s", description)
    edits = [FileEdit(path=path, content=content, description=description)]
    return _run_transaction(
        project_root, edits, validate=validate_after, runner=runner, config=config
    )


def apply_batch(
    project_root: str | Path,
    fixes: list[FileEdit],
    *,
    runner: ProcessRunner | None = None,
    config: ServerConfig | None = None,
) -> FixOutcome:
    """Replace several files as one transaction. Always validates."""
    logger.info("Applying %d fixes...", len(fixes))
    if not fixes:
        return FixOutcome(success=False, edits=[], error="No fixes given")
    return _run_transaction(project_root, list(fixes), validate=True, runner=runner, config=config)
