"""BootWaiter — poll a boot-completion probe with a bounded attempt count.

The probe is soft-fail: an exception from it counts as "not booted yet"
(adb is often unreachable for a while after the emulator process starts).
Running out of attempts is hard-fail: BootTimeoutError.
"""

from __future__ import annotations

import enum
import logging
import time
from collections.abc import Callable

from flutter_architect.core.errors import BootTimeoutError, ExternalToolError
from flutter_architect.core.process_runner import ProcessRunner

logger = logging.getLogger("flutter_architect")

BOOTED_SENTINEL = "1"


class BootState(enum.Enum):
    BOOTING = "booting"
    BOOTED = "booted"
    TIMED_OUT = "timed_out"


def adb_boot_probe(runner: ProcessRunner, adb_bin: str = "adb") -> Callable[[], str]:
    """Probe reading `sys.boot_completed` over adb."""
    cmd = [adb_bin, "shell", "getprop", "sys.boot_completed"]

    def probe() -> str:
        result = runner.run(cmd)
        if result.exit_code != 0:
            raise ExternalToolError(cmd, result.exit_code, result.stderr)
        return result.output

    return probe


class BootWaiter:
    """Booting → Booted on the first sentinel; Booting → TimedOut after max_attempts."""

    def __init__(
        self,
        probe: Callable[[], str],
        *,
        interval: float = 2.0,
        max_attempts: int = 60,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.probe = probe
        self.interval = interval
        self.max_attempts = max_attempts
        self._sleep = sleep
        self.state = BootState.BOOTING
        self.attempts = 0

    def wait(self) -> BootState:
        """Block until booted. Raises BootTimeoutError when attempts run out."""
        while self.attempts < self.max_attempts:
            self._sleep(self.interval)
            self.attempts += 1
            try:
                value = self.probe()
            except Exception as exc:
                logger.debug("boot probe attempt %d failed: %s", self.attempts, exc)
                continue
            if value.strip() == BOOTED_SENTINEL:
                self.state = BootState.BOOTED
                logger.info("device booted after %d probe(s)", self.attempts)
                return self.state

        self.state = BootState.TIMED_OUT
        raise BootTimeoutError(self.attempts, self.interval)
