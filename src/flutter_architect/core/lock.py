"""Advisory in-process locks keyed by canonical resource name."""

from __future__ import annotations

import threading
from pathlib import Path
from types import TracebackType

from flutter_architect.core.errors import LockBusyError

EMULATOR_LOCK_KEY = "emulator"

_registry_guard = threading.Lock()
_locks: dict[str, threading.Lock] = {}


def lock_key(resource: str | Path) -> str:
    """Canonical key: resolved path for filesystem resources, the string otherwise."""
    if isinstance(resource, Path):
        return str(resource.resolve())
    return resource


def _lock_for(key: str) -> threading.Lock:
    with _registry_guard:
        lock = _locks.get(key)
        if lock is None:
            lock = _locks[key] = threading.Lock()
        return lock


class ResourceLock:
    """Hold the lock for one resource (a project root or the emulator) for a block.

    Waits up to `timeout` seconds, then raises LockBusyError.
    """

    def __init__(self, resource: str | Path, *, timeout: float = 30.0) -> None:
        self.key = lock_key(resource)
        self.timeout = timeout
        self._lock = _lock_for(self.key)

    def __enter__(self) -> ResourceLock:
        if not self._lock.acquire(timeout=self.timeout):
            raise LockBusyError(f"Another operation is running on {self.key}")
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self._lock.release()
