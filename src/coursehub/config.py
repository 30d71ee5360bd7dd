"""Configuration loading for CourseHub services."""

from __future__ import annotations

import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

import yaml

DEFAULT_DB_PATH = "coursehub.db"
DEFAULT_TICK_INTERVAL = 60.0
DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_PROPOSER_TIMEOUT = 30.0
DEFAULT_GATEWAY_FAILURE_RATE = 0.1
DEFAULT_LOG_DIR = "logs"
DEFAULT_LOG_LEVEL = "INFO"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

# Environment variable -> settings field
ENV_OVERRIDES = {
    "COURSEHUB_DB_PATH": "db_path",
    "COURSEHUB_CATALOG_PATH": "catalog_path",
    "COURSEHUB_TICK_INTERVAL": "tick_interval_seconds",
    "COURSEHUB_MAX_ATTEMPTS": "max_attempts",
    "COURSEHUB_PROPOSER_URL": "proposer_url",
    "COURSEHUB_PROPOSER_TIMEOUT": "proposer_timeout",
    "COURSEHUB_GATEWAY_FAILURE_RATE": "gateway_failure_rate",
    "COURSEHUB_LOG_DIR": "log_dir",
    "COURSEHUB_LOG_LEVEL": "log_level",
}


class ConfigError(Exception):
    """Raised when configuration is invalid or missing."""


@dataclass
class Settings:
    """Runtime settings for the API, queue runner and CLI.

    Attributes:
        db_path: SQLite file for registration intents. ":memory:" keeps
            intents in process memory only.
        catalog_path: YAML/JSON course catalog. None uses the bundled sample.
        tick_interval_seconds: Seconds between registration queue sweeps.
        max_attempts: Registration attempts before an intent fails.
        terminal_markers: Gateway messages that fail an intent immediately.
        proposer_url: Base URL of a remote schedule proposer. None uses the
            local preference proposer.
        proposer_timeout: HTTP timeout for the remote proposer.
        gateway_failure_rate: Per-section failure probability of the
            simulated registration gateway.
        log_dir: Directory for the rotating coursehub.log file.
        log_level: Level name for CourseHub and server logs.
    """

    db_path: str = DEFAULT_DB_PATH
    catalog_path: str | None = None
    tick_interval_seconds: float = DEFAULT_TICK_INTERVAL
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    terminal_markers: tuple[str, ...] = ()
    proposer_url: str | None = None
    proposer_timeout: float = DEFAULT_PROPOSER_TIMEOUT
    gateway_failure_rate: float = DEFAULT_GATEWAY_FAILURE_RATE
    log_dir: str = DEFAULT_LOG_DIR
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Settings:
        """Create settings from a dictionary.

        Args:
            data: Settings mapping, usually parsed from YAML.

        Returns:
            Validated settings object.

        Raises:
            ConfigError: If a key is unknown or a value has the wrong type.
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"Unknown settings: {', '.join(unknown)}")

        values = dict(data)
        if "terminal_markers" in values:
            markers = values["terminal_markers"] or []
            if not isinstance(markers, list | tuple):
                raise ConfigError("terminal_markers must be a list of strings")
            values["terminal_markers"] = tuple(str(m) for m in markers)

        settings = cls(**values)
        settings.validate()
        return settings

    def validate(self) -> None:
        """Check value ranges.

        Raises:
            ConfigError: If any value is out of range.
        """
        try:
            self.tick_interval_seconds = float(self.tick_interval_seconds)
            self.max_attempts = int(self.max_attempts)
            self.proposer_timeout = float(self.proposer_timeout)
            self.gateway_failure_rate = float(self.gateway_failure_rate)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"Invalid numeric setting: {e}") from e

        if self.tick_interval_seconds <= 0:
            raise ConfigError("tick_interval_seconds must be positive")
        if self.max_attempts < 1:
            raise ConfigError("max_attempts must be at least 1")
        if self.proposer_timeout <= 0:
            raise ConfigError("proposer_timeout must be positive")
        if not 0.0 <= self.gateway_failure_rate <= 1.0:
            raise ConfigError("gateway_failure_rate must be between 0 and 1")

        self.log_level = str(self.log_level).upper()
        if self.log_level not in LOG_LEVELS:
            raise ConfigError(f"log_level must be one of {', '.join(LOG_LEVELS)}")

    @property
    def uses_memory_store(self) -> bool:
        """Whether intents live in process memory rather than SQLite."""
        return self.db_path == ":memory:"


def load_settings(
    config_path: Path | str | None = None,
    environ: dict[str, str] | None = None,
) -> Settings:
    """Load settings from an optional YAML file plus environment overrides.

    Args:
        config_path: Path to a YAML settings file (optional).
        environ: Environment mapping. Defaults to os.environ.

    Returns:
        Parsed settings.

    Raises:
        ConfigError: If the file is missing or invalid, or a value is invalid.
    """
    data: dict[str, Any] = {}

    if config_path is not None:
        config_path = Path(config_path)
        if not config_path.exists():
            raise ConfigError(f"Configuration file not found: {config_path}")

        try:
            with open(config_path) as f:
                loaded = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {config_path}: {e}") from e

        if loaded is None:
            loaded = {}
        if not isinstance(loaded, dict):
            raise ConfigError(
                f"Configuration must be a YAML mapping, got {type(loaded).__name__}"
            )
        data.update(loaded)

    env = os.environ if environ is None else environ
    for var, field_name in ENV_OVERRIDES.items():
        if var in env:
            data[field_name] = env[var]

    return Settings.from_dict(data)
