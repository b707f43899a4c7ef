"""Configuration utilities for beadboard."""

import os
from dataclasses import dataclass, replace
from pathlib import Path


class ConfigError(Exception):
    """Raised when a configuration value is missing or invalid."""


DEFAULT_BD_COMMAND = "bd"
DEFAULT_INTERVAL = 5.0
DEFAULT_TIMEOUT = 10.0
DEFAULT_WATCH_DIR = Path(".beads")


def _positive_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a number, got {raw!r}")
    if value <= 0:
        raise ConfigError(f"{name} must be positive, got {raw!r}")
    return value


@dataclass(frozen=True)
class Config:
    """Runtime settings for the dashboard."""

    bd_command: str = DEFAULT_BD_COMMAND
    interval: float = DEFAULT_INTERVAL
    timeout: float = DEFAULT_TIMEOUT
    watch_dir: Path = DEFAULT_WATCH_DIR

    @classmethod
    def from_env(cls) -> "Config":
        """Load configuration from environment variables.

        Reads BEADBOARD_BD_COMMAND, BEADBOARD_INTERVAL, BEADBOARD_TIMEOUT
        and BEADBOARD_WATCH_DIR, falling back to defaults for unset values.

        Raises:
            ConfigError: If a numeric variable is not a positive number.
        """
        return cls(
            bd_command=os.environ.get("BEADBOARD_BD_COMMAND") or DEFAULT_BD_COMMAND,
            interval=_positive_float("BEADBOARD_INTERVAL", DEFAULT_INTERVAL),
            timeout=_positive_float("BEADBOARD_TIMEOUT", DEFAULT_TIMEOUT),
            watch_dir=Path(os.environ.get("BEADBOARD_WATCH_DIR") or DEFAULT_WATCH_DIR),
        )

    def with_overrides(
        self,
        bd_command: str | None = None,
        interval: float | None = None,
    ) -> "Config":
        """Return a copy with command-line overrides applied.

        Raises:
            ConfigError: If interval is not positive.
        """
        config = self
        if bd_command:
            config = replace(config, bd_command=bd_command)
        if interval is not None:
            if interval <= 0:
                raise ConfigError(f"interval must be positive, got {interval}")
            config = replace(config, interval=interval)
        return config
