"""Error taxonomy shared by core/ and tools/."""

from __future__ import annotations


class FlutterArchitectError(Exception):
    """Base class for every expected failure raised by flutter_architect."""


class ProjectNotFoundError(FlutterArchitectError, FileNotFoundError):
    """Project directory (or a file inside it) does not exist."""


class PathEscapeError(FlutterArchitectError, ValueError):
    """A relative target path resolves outside the project root."""

    def __init__(self, path: str, project_root: str) -> None:
        super().__init__(f"Path escapes project root: {path} (root: {project_root})")
        self.path = path
        self.project_root = project_root


class ExternalToolError(FlutterArchitectError):
    """A delegated command exited non-zero."""

    def __init__(self, cmd: list[str], exit_code: int, stderr: str = "") -> None:
        super().__init__(f"Command failed: {' '.join(cmd)} (exit code: {exit_code})")
        self.cmd = cmd
        self.exit_code = exit_code
        self.stderr = stderr


class LockBusyError(FlutterArchitectError, RuntimeError):
    """Another operation holds the lock for the same resource."""


class OrchestrationError(FlutterArchitectError):
    """Terminal failure of an emulator bring-up call."""


class NoImagesAvailableError(OrchestrationError):
    def __init__(self) -> None:
        super().__init__(
            "No Android emulators found!\n\n"
            "Please create an emulator first:\n"
            "- Open Android Studio\n"
            "- Tools → Device Manager → Create Device\n\n"
            "Or use command line:\n"
            'avdmanager create avd -n MyEmulator -k "system-images;android-34;google_apis;x86_64"'
        )


class ImageNotFoundError(OrchestrationError):
    def __init__(self, name: str, available: list[str]) -> None:
        listing = "\n".join(f"• {image}" for image in available)
        super().__init__(f'Emulator "{name}" not found!\n\nAvailable emulators:\n{listing}')
        self.name = name
        self.available = list(available)


class LaunchFailedError(OrchestrationError):
    """The emulator launch command could not be started."""


class BootTimeoutError(OrchestrationError):
    """Boot probe never reported completion within the attempt budget."""

    def __init__(self, attempts: int, interval: float) -> None:
        super().__init__(
            f"Emulator boot timeout after {attempts * interval:g} seconds ({attempts} attempts)"
        )
        self.attempts = attempts
        self.interval = interval
