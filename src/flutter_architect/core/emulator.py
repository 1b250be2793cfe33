"""EmulatorOrchestrator — guarantee a running Android device before a launch.

Procedure:
1. If `flutter devices` already lists an emulator, do nothing.
2. Otherwise list the available AVDs.
3. Pick the requested one (must exist) or the first one.
4. Launch it detached.
5. Wait for `sys.boot_completed` to report 1.

All-or-nothing from the caller's point of view: ensure_running either
returns, raises exactly one OrchestrationError subclass, or raises
LockBusyError before any step when another bring-up holds the emulator lock.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

from flutter_architect.core.boot import BootWaiter, adb_boot_probe
from flutter_architect.core.config import ServerConfig
from flutter_architect.core.devices import DeviceRegistry, is_active_device
from flutter_architect.core.errors import (
    ImageNotFoundError,
    LaunchFailedError,
    NoImagesAvailableError,
)
from flutter_architect.core.lock import EMULATOR_LOCK_KEY, ResourceLock
from flutter_architect.core.process_runner import ProcessRunner

logger = logging.getLogger("flutter_architect")


class EmulatorOrchestrator:
    def __init__(
        self,
        runner: ProcessRunner,
        config: ServerConfig,
        *,
        registry: DeviceRegistry | None = None,
        probe: Callable[[], str] | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.runner = runner
        self.config = config
        self.registry = registry or DeviceRegistry(
            runner, flutter_bin=config.flutter_bin, emulator_bin=config.emulator_bin
        )
        self.probe = probe or adb_boot_probe(runner, config.adb_bin)
        self._sleep = sleep

    def ensure_running(self, preferred: str | None = None) -> str | None:
        """Make sure some emulator is running.

        Returns the name of the image that was launched, or None when a
        device was already active (the preferred image is not checked then).

        Raises:
            NoImagesAvailableError: No AVDs exist.
            ImageNotFoundError: `preferred` is not among the AVDs.
            LaunchFailedError: The emulator binary could not be started.
            BootTimeoutError: The device never reported boot completion.
            LockBusyError: Another bring-up held the emulator lock past lock_timeout.
        """
        with ResourceLock(EMULATOR_LOCK_KEY, timeout=self.config.lock_timeout):
            running = self.registry.list_running()
            if any(is_active_device(line) for line in running):
                logger.info("Emulator already running")
                return None

            logger.info("No emulator running, starting one...")
            images = self.registry.list_available_images()
            if not images:
                raise NoImagesAvailableError()

            target = preferred if preferred is not None else images[0]
            if target not in images:
                raise ImageNotFoundError(target, images)

            logger.info("Starting emulator: %s", target)
            cmd = [self.config.emulator_bin, "-avd", target]
            try:
                self.runner.start_detached(cmd)
            except OSError as exc:
                raise LaunchFailedError(f"Error starting emulator {target}: {exc}") from exc

            logger.info("Emulator started, waiting for boot...")
            BootWaiter(
                self.probe,
                interval=self.config.boot_interval,
                max_attempts=self.config.boot_max_attempts,
                sleep=self._sleep,
            ).wait()
            logger.info("Emulator is ready!")
            return target
