"""ServerConfig — 3-tier configuration resolution.

Resolution order:
1. Server defaults (this dataclass)
2. Config file ($FLUTTER_ARCHITECT_CONFIG or ~/.flutter-architect/config.json)
3. Environment variables and runtime overrides (CLI flags / tests)
"""

from __future__ import annotations

import json
import os
import re
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any

_ENV_KEYS = {
    "FLUTTER_ARCHITECT_PROJECTS_DIR": "projects_dir",
    "FLUTTER_BIN": "flutter_bin",
    "ADB_PATH": "adb_bin",
    "ANDROID_EMULATOR": "emulator_bin",
}


def _strip_jsonc_comments(text: str) -> str:
    """Remove // line comments from a JSON string (JSONC support)."""
    return re.sub(r"(?m)^\s*//[^\n]*", "", text)


def default_config_path() -> Path:
    env = os.environ.get("FLUTTER_ARCHITECT_CONFIG")
    if env:
        return Path(env)
    return Path.home() / ".flutter-architect" / "config.json"


@dataclass
class ServerConfig:
    """MCP server configuration."""

    name: str = "flutter-architect-mcp"
    version: str = "1.0.0"
    # Empty = Desktop → Documents → home (see core/paths.py)
    projects_dir: str = ""
    flutter_bin: str = "flutter"
    adb_bin: str = "adb"
    emulator_bin: str = "emulator"
    # Boot wait: interval * max_attempts bounds the total wait
    boot_interval: float = 2.0
    boot_max_attempts: int = 60
    command_timeout: float = 600.0
    lock_timeout: float = 30.0
    monitor_queue_size: int = 256
    shutdown_poll_interval: float = 1.0

    @classmethod
    def load(cls, config_path: str | Path | None = None, **overrides: object) -> ServerConfig:
        """Load config with 3-tier resolution."""
        config = cls()
        path = Path(config_path) if config_path is not None else default_config_path()

        if path.is_file():
            raw = path.read_text(encoding="utf-8")
            config._apply_dict(json.loads(_strip_jsonc_comments(raw)))

        env_data = {key: os.environ[env] for env, key in _ENV_KEYS.items() if os.environ.get(env)}
        if env_data:
            config._apply_dict(env_data)

        if overrides:
            config._apply_dict(dict(overrides))

        config._validate()
        return config

    def _validate(self) -> None:
        """Raises ValueError on out-of-range values."""
        if self.boot_interval < 0:
            raise ValueError(f"boot_interval must be >= 0, got {self.boot_interval}")
        if self.boot_max_attempts < 1:
            raise ValueError(f"boot_max_attempts must be >= 1, got {self.boot_max_attempts}")
        if self.command_timeout <= 0:
            raise ValueError(f"command_timeout must be > 0, got {self.command_timeout}")
        if self.lock_timeout < 0:
            raise ValueError(f"lock_timeout must be >= 0, got {self.lock_timeout}")
        if self.monitor_queue_size < 1:
            raise ValueError(f"monitor_queue_size must be >= 1, got {self.monitor_queue_size}")
        if self.shutdown_poll_interval <= 0:
            raise ValueError(
                f"shutdown_poll_interval must be > 0, got {self.shutdown_poll_interval}"
            )

    def _apply_dict(self, data: dict[str, object]) -> None:
        for key, value in data.items():
            if key.startswith("_"):
                continue
            if hasattr(self, key):
                self.set(key, value)

    def set(self, key: str, value: object) -> None:
        """Set a single config value, coercing strings to the field's type.

        Raises ValueError if the key does not exist.
        """
        if not hasattr(self, key) or key.startswith("_"):
            raise ValueError(f"Unknown config key: {key}")
        current = getattr(self, key)
        if isinstance(value, str):
            if isinstance(current, bool):
                value = value.lower() in ("true", "1", "yes")
            elif isinstance(current, int):
                value = int(value)
            elif isinstance(current, float):
                value = float(value)
        elif isinstance(current, float) and isinstance(value, int):
            value = float(value)
        setattr(self, key, value)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2, ensure_ascii=False)
