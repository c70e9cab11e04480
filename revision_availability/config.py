"""
Configuration file parsing and environment overrides.

Precedence (highest to lowest): command line flags, environment variables,
the first configuration file found, built-in defaults.
"""

from __future__ import annotations

import dataclasses
import logging
import os
from dataclasses import dataclass
from typing import Any, Mapping

import yaml

from .feed import DEFAULT_FEED_URL
from .probe import DEFAULT_DOWNLOAD_HOST

logger = logging.getLogger(__name__)

# Configuration file locations (in priority order)
CONFIG_LOCATIONS = [
    ".revision-availability.yml",
    ".revision-availability.yaml",
    os.path.expanduser("~/.config/revision-availability/config.yml"),
    os.path.expanduser("~/.config/revision-availability/config.yaml"),
]

ENV_COLOR = "REVISION_AVAILABILITY_COLOR"
ENV_TIMEOUT = "REVISION_AVAILABILITY_TIMEOUT"
ENV_MAX_WORKERS = "REVISION_AVAILABILITY_MAX_WORKERS"


class ConfigError(ValueError):
    """Raised for invalid configuration values or unreadable config files."""
    pass


@dataclass(frozen=True)
class Config:
    """
    Runtime configuration.

    Attributes:
        feed_url: URL of the revision feed
        download_host: Base URL of the snapshot storage
        timeout_seconds: Per-request network timeout, None to wait indefinitely
        row_timeout_seconds: Time allowed for all probes of one row, None to wait for all
        max_workers: Probe threads per row, None for one per platform
        color: Whether to emit ANSI colors
        source: Path to the configuration file that was loaded
    """
    feed_url: str = DEFAULT_FEED_URL
    download_host: str = DEFAULT_DOWNLOAD_HOST
    timeout_seconds: float | None = None
    row_timeout_seconds: float | None = None
    max_workers: int | None = None
    color: bool = True
    source: str = ""

    def __post_init__(self):
        if not self.feed_url.startswith(("http://", "https://")):
            raise ConfigError(f"Invalid feed_url: {self.feed_url}. Must be an http(s) URL")

        if not self.download_host.startswith(("http://", "https://")):
            raise ConfigError(f"Invalid download_host: {self.download_host}. Must be an http(s) URL")

        if self.timeout_seconds is not None and not 1 <= self.timeout_seconds <= 600:
            raise ConfigError(
                f"Invalid timeout_seconds: {self.timeout_seconds}. "
                "Must be between 1 and 600"
            )

        if self.row_timeout_seconds is not None and self.row_timeout_seconds <= 0:
            raise ConfigError(
                f"Invalid row_timeout_seconds: {self.row_timeout_seconds}. Must be positive"
            )

        if self.max_workers is not None and not 1 <= self.max_workers <= 32:
            raise ConfigError(
                f"Invalid max_workers: {self.max_workers}. "
                "Must be between 1 and 32"
            )

        if not isinstance(self.color, bool):
            raise ConfigError(f"Invalid color: {self.color!r}. Must be true or false")

    @staticmethod
    def from_dict(data: dict[str, Any], source: str = "") -> Config:
        """Create Config from dictionary."""
        try:
            return Config(
                feed_url=data.get("feed_url", DEFAULT_FEED_URL),
                download_host=data.get("download_host", DEFAULT_DOWNLOAD_HOST),
                timeout_seconds=data.get("timeout_seconds"),
                row_timeout_seconds=data.get("row_timeout_seconds"),
                max_workers=data.get("max_workers"),
                color=data.get("color", True),
                source=source,
            )
        except (AttributeError, TypeError) as e:
            raise ConfigError(f"Invalid configuration{' in ' + source if source else ''}: {e}") from e

    def replace(self, **changes: Any) -> Config:
        """Return a copy with the given non-None fields changed."""
        changes = {k: v for k, v in changes.items() if v is not None}
        return dataclasses.replace(self, **changes)


def load_config_file(file_path: str) -> Config | None:
    """
    Load configuration from a single YAML file.

    Args:
        file_path: Path to configuration file

    Returns:
        Config object, or None if the file does not exist

    Raises:
        ConfigError: If the file cannot be parsed or holds invalid values
    """
    if not os.path.exists(file_path):
        return None

    logger.debug(f"Loading config from: {file_path}")
    try:
        with open(file_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Could not read config {file_path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config {file_path} must be a mapping")
    return Config.from_dict(data, source=file_path)


def load_config(custom_path: str | None = None) -> Config:
    """
    Load configuration from the custom path or the first standard location.

    Args:
        custom_path: Optional path to a configuration file

    Returns:
        Config object (defaults if no file is found)

    Raises:
        ConfigError: If custom_path is given but missing, or a file is invalid
    """
    if custom_path:
        config = load_config_file(custom_path)
        if config is None:
            raise ConfigError(f"Could not load config from specified path: {custom_path}")
        return config

    for location in CONFIG_LOCATIONS:
        config = load_config_file(location)
        if config is not None:
            logger.debug(f"Found config at: {location}")
            return config

    logger.debug("No config files found, using defaults")
    return Config()


def apply_env_overrides(config: Config, environ: Mapping[str, str] | None = None) -> Config:
    """
    Apply environment variable overrides to a config.

    Raises:
        ConfigError: If a numeric variable does not parse
    """
    env = os.environ if environ is None else environ
    changes: dict[str, Any] = {}

    if ENV_COLOR in env:
        changes["color"] = env[ENV_COLOR] == "1"
    if "NO_COLOR" in env:
        changes["color"] = False

    try:
        if env.get(ENV_TIMEOUT):
            changes["timeout_seconds"] = float(env[ENV_TIMEOUT])
        if env.get(ENV_MAX_WORKERS):
            changes["max_workers"] = int(env[ENV_MAX_WORKERS])
    except ValueError as e:
        raise ConfigError(f"Invalid environment override: {e}") from e

    return config.replace(**changes)
