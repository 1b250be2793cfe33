"""ProcessRunner — every external SDK invocation goes through this module.

Three modes:
- run(): blocking, captures stdout/stderr/exit code, never raises for a
  missing or unrunnable executable or a timeout (reported as exit_code -1).
- run_silent(): blocking, discards output, raises ExternalToolError on a
  non-zero exit.
- start_detached() / start_monitored(): fire-and-forget child processes.

Tests mock this class to avoid real subprocess calls.
"""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from datetime import datetime

from flutter_architect.core.errors import ExternalToolError

logger = logging.getLogger("flutter_architect")


@dataclass
class ProcessResult:
    """Result of a blocking command."""

    output: str
    exit_code: int
    success: bool
    stderr: str = ""
    elapsed_seconds: float = 0.0


class ProcessRunner:
    """Runs external executables on behalf of the core subsystems."""

    def __init__(self, *, timeout: float | None = 600.0) -> None:
        """
        Args:
            timeout: Upper bound in seconds for blocking commands. None disables it.
        """
        self.timeout = timeout

    def run(self, cmd: list[str], *, cwd: str | None = None) -> ProcessResult:
        """Run a command to completion and capture its output.

        Args:
            cmd: Command and arguments.
            cwd: Working directory.

        Returns:
            ProcessResult; success means exit code 0.
        """
        logger.info("subprocess starting: %s (cwd=%s)", " ".join(cmd), cwd)
        started_at = datetime.now()

        try:
            result = subprocess.run(
                cmd,
                stdin=subprocess.DEVNULL,
                capture_output=True,
                text=True,
                errors="replace",
                cwd=cwd,
                timeout=self.timeout,
            )
        except subprocess.TimeoutExpired as exc:
            elapsed = (datetime.now() - started_at).total_seconds()
            logger.error("subprocess timed out after %.1fs (limit=%.0fs)", elapsed, self.timeout)
            return ProcessResult(
                output="",
                exit_code=-1,
                success=False,
                stderr=self._decode_stderr(exc.stderr) or "timeout",
                elapsed_seconds=elapsed,
            )
        except OSError as exc:
            logger.error("command not runnable: %s (%s)", cmd[0], exc)
            if isinstance(exc, FileNotFoundError):
                stderr = f"command not found: {cmd[0]}"
            else:
                stderr = f"could not run {cmd[0]}: {exc}"
            return ProcessResult(output="", exit_code=-1, success=False, stderr=stderr)

        elapsed = (datetime.now() - started_at).total_seconds()
        output = result.stdout.strip()
        stderr = result.stderr.strip()
        self._log_result(result.returncode, elapsed, stderr)
        return ProcessResult(
            output=output,
            exit_code=result.returncode,
            success=result.returncode == 0,
            stderr=stderr,
            elapsed_seconds=elapsed,
        )

    def run_silent(self, cmd: list[str], *, cwd: str | None = None) -> None:
        """Run a command, discard its output, raise on a non-zero exit."""
        result = self.run(cmd, cwd=cwd)
        if result.exit_code != 0:
            raise ExternalToolError(cmd, result.exit_code, result.stderr)

    def start_detached(self, cmd: list[str], *, cwd: str | None = None) -> subprocess.Popen[bytes]:
        """Start a command in its own session with no output captured.

        Raises OSError if the executable cannot be started at all.
        """
        logger.info("detached process starting: %s", " ".join(cmd))
        return subprocess.Popen(
            cmd,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            cwd=cwd,
            start_new_session=True,
        )

    def start_monitored(self, cmd: list[str], *, cwd: str | None = None) -> subprocess.Popen[str]:
        """Start a long-lived command with piped text stdout/stderr for a ProcessMonitor.

        Raises OSError if the executable cannot be started at all.
        """
        logger.info("monitored process starting: %s (cwd=%s)", " ".join(cmd), cwd)
        return subprocess.Popen(
            cmd,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            errors="replace",
            cwd=cwd,
            start_new_session=True,
        )

    def _log_result(self, exit_code: int, elapsed: float, stderr: str) -> None:
        if exit_code != 0:
            logger.warning(
                "subprocess exited with code %d after %.1fs. stderr: %s",
                exit_code,
                elapsed,
                stderr[:500] if stderr else "(none)",
            )
        else:
            logger.info("subprocess completed in %.1fs", elapsed)

    @staticmethod
    def _decode_stderr(stderr: bytes | str | None) -> str:
        if stderr is None:
            return ""
        if isinstance(stderr, bytes):
            return stderr.decode(errors="replace")
        return stderr
