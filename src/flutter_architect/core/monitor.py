"""ProcessMonitor — classify the output of a detached `flutter run` process.

attach() never blocks: one daemon thread per output stream reads complete
lines, classifies them and puts ProcessEvents on a bounded queue; a third
daemon thread drains the queue into the sink (logging by default). The
monitored process outlives the tool call that started it.
"""

from __future__ import annotations

import enum
import logging
import queue
import subprocess
import threading
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import IO

logger = logging.getLogger("flutter_architect")

READY_MARKERS = ("Flutter run key commands", "Running with sound null safety")
BENIGN_BANNER = "DevTools"


class Stream(enum.Enum):
    STDOUT = "stdout"
    STDERR = "stderr"


class Classification(enum.Enum):
    INFO = "info"
    ERROR = "error"
    IGNORED = "ignored"


@dataclass(frozen=True)
class ProcessEvent:
    stream: Stream
    classification: Classification
    raw_line: str


def classify_line(stream: Stream, line: str) -> Classification:
    """Never raises; anything unrecognized is IGNORED."""
    if stream is Stream.STDOUT and any(marker in line for marker in READY_MARKERS):
        return Classification.INFO
    if stream is Stream.STDERR and "error" in line.lower() and BENIGN_BANNER not in line:
        return Classification.ERROR
    return Classification.IGNORED


def iter_complete_lines(stream: IO[str]) -> Iterator[str]:
    """Yield newline-terminated lines; a trailing partial line is dropped."""
    for line in stream:
        if not line.endswith("\n"):
            return
        yield line.rstrip("\r\n")


def logging_sink(label: str) -> Callable[[ProcessEvent], None]:
    def sink(event: ProcessEvent) -> None:
        if event.classification is Classification.INFO:
            logger.info("✓ %s app is running!", label)
        elif event.classification is Classification.ERROR:
            logger.error("[%s] %s", label, event.raw_line)
        else:
            logger.debug("[%s] %s: %s", label, event.stream.value, event.raw_line)

    return sink


class ProcessMonitor:
    """Consumes both output streams of one child process."""

    def __init__(
        self,
        label: str,
        *,
        sink: Callable[[ProcessEvent], None] | None = None,
        queue_size: int = 256,
    ) -> None:
        self.label = label
        self.ready = False
        self.error_count = 0
        self.exit_code: int | None = None
        self._sink = sink or logging_sink(label)
        self._events: queue.Queue[ProcessEvent | None] = queue.Queue(maxsize=queue_size)
        self._threads: list[threading.Thread] = []

    def attach(self, process: subprocess.Popen[str]) -> None:
        """Start consuming; returns immediately."""
        if self._threads:
            raise RuntimeError(f"Monitor {self.label} is already attached")
        streams = [(Stream.STDOUT, process.stdout), (Stream.STDERR, process.stderr)]
        readers = [
            threading.Thread(
                target=self._read,
                args=(kind, pipe),
                name=f"{self.label}-{kind.value}",
                daemon=True,
            )
            for kind, pipe in streams
            if pipe is not None
        ]
        drain = threading.Thread(
            target=self._drain,
            args=(process, len(readers)),
            name=f"{self.label}-sink",
            daemon=True,
        )
        self._threads = [*readers, drain]
        for thread in self._threads:
            thread.start()

    @property
    def running(self) -> bool:
        return any(thread.is_alive() for thread in self._threads)

    def join(self, timeout: float | None = None) -> bool:
        """Wait for every stream to close. Returns False if still running."""
        for thread in self._threads:
            thread.join(timeout)
        return not self.running

    def _read(self, kind: Stream, pipe: IO[str]) -> None:
        try:
            for line in iter_complete_lines(pipe):
                classification = classify_line(kind, line)
                if classification is Classification.INFO:
                    if self.ready:
                        classification = Classification.IGNORED
                    else:
                        self.ready = True
                self._events.put(ProcessEvent(kind, classification, line))
        except (OSError, ValueError) as exc:
            logger.debug("[%s] %s stream closed: %s", self.label, kind.value, exc)
        finally:
            self._events.put(None)

    def _drain(self, process: subprocess.Popen[str], pending: int) -> None:
        while pending:
            event = self._events.get()
            if event is None:
                pending -= 1
                continue
            if event.classification is Classification.ERROR:
                self.error_count += 1
            try:
                self._sink(event)
            except Exception:
                logger.exception("[%s] event sink failed", self.label)
        self.exit_code = process.wait()
        logger.info("[%s] process exited with code %s", self.label, self.exit_code)
