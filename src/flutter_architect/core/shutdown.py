"""ShutdownSignal — explicit stop request checked by the serve loop."""

from __future__ import annotations

import threading


class ShutdownSignal:
    def __init__(self) -> None:
        self._event = threading.Event()

    def request(self) -> None:
        self._event.set()

    def is_set(self) -> bool:
        return self._event.is_set()
