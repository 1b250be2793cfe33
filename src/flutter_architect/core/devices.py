"""DeviceRegistry — running devices and available AVD images.

Both queries are fail-soft: a missing SDK binary, a non-zero exit or an
unexpected error all read as "nothing there", never as a fatal condition.
"""

from __future__ import annotations

import logging

from flutter_architect.core.process_runner import ProcessRunner

logger = logging.getLogger("flutter_architect")

ACTIVE_DEVICE_MARKER = "emulator"


def _non_blank_lines(text: str) -> list[str]:
    return [line.strip() for line in text.splitlines() if line.strip()]


def is_active_device(line: str) -> bool:
    """True if a `flutter devices` line describes a running emulator."""
    return ACTIVE_DEVICE_MARKER in line


class DeviceRegistry:
    def __init__(
        self,
        runner: ProcessRunner,
        *,
        flutter_bin: str = "flutter",
        emulator_bin: str = "emulator",
    ) -> None:
        self.runner = runner
        self.flutter_bin = flutter_bin
        self.emulator_bin = emulator_bin

    def list_running(self) -> frozenset[str]:
        """Non-blank lines of `flutter devices`; empty on any failure."""
        try:
            result = self.runner.run([self.flutter_bin, "devices"])
        except Exception:
            logger.exception("device listing raised")
            return frozenset()
        if result.exit_code != 0:
            return frozenset()
        return frozenset(_non_blank_lines(result.output))

    def list_available_images(self) -> list[str]:
        """AVD names from `emulator -list-avds`, in listing order; empty on any failure."""
        try:
            result = self.runner.run([self.emulator_bin, "-list-avds"])
        except Exception:
            logger.exception("image listing raised")
            return []
        if result.exit_code != 0:
            return []
        return _non_blank_lines(result.output)
