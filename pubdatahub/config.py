"""Loading and saving the application configuration file."""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path

CONFIG_PATH_ENV = "PUBDATAHUB_CONFIG_PATH"
CONFIG_FILE_NAME = "config.json"

_log = logging.getLogger(__name__)


class ConfigError(Exception):
    """Raised when the configuration cannot be read, written or applied."""


@dataclass(frozen=True)
class Config:
    """Application settings."""

    storage_path: Path
    config_dir: Path

    @property
    def config_file(self) -> Path:
        return self.config_dir / CONFIG_FILE_NAME


def default_config_dir() -> Path:
    """Return the configuration directory from the environment or the home directory."""
    override = os.environ.get(CONFIG_PATH_ENV)
    if override:
        return Path(override)
    try:
        home = Path.home()
    except (RuntimeError, KeyError) as exc:
        raise ConfigError(f"failed to get user home directory: {exc}") from exc
    return home / ".pubdatahub"


def _read_settings(config_file: Path) -> dict:
    try:
        data = json.loads(config_file.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        raise ConfigError(f"failed to read config file: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError("failed to read config file: top level must be an object")
    return data


def _write_settings(config_file: Path, settings: dict) -> None:
    try:
        config_file.write_text(json.dumps(settings, indent=2) + "\n", encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"failed to write config file: {exc}") from exc


def init_config(config_dir: str | os.PathLike | None = None) -> Config:
    """Load the configuration, creating a default file when none exists.

    The storage directory named by the configuration is created as well.
    """
    directory = Path(config_dir) if config_dir is not None else default_config_dir()
    config_file = directory / CONFIG_FILE_NAME
    settings = {"storage_path": str(directory / "data")}

    if config_file.is_file():
        settings.update(_read_settings(config_file))
    else:
        _log.info("Config file not found, creating default at %s", config_file)
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise ConfigError(f"failed to create config directory: {exc}") from exc
        _write_settings(config_file, settings)

    storage = settings.get("storage_path")
    if not isinstance(storage, str) or not storage:
        raise ConfigError("failed to unmarshal config: storage_path must be a non-empty string")

    storage_path = Path(storage)
    try:
        storage_path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise ConfigError(f"failed to create storage directory: {exc}") from exc

    return Config(storage_path=storage_path, config_dir=directory)


def set_storage_path(path: str | os.PathLike, config_dir: str | os.PathLike | None = None) -> None:
    """Store a new storage path in the existing configuration file."""
    directory = Path(config_dir) if config_dir is not None else default_config_dir()
    config_file = directory / CONFIG_FILE_NAME
    if not config_file.is_file():
        raise ConfigError(f"config file not found: {config_file}")
    settings = _read_settings(config_file)
    settings["storage_path"] = str(path)
    _write_settings(config_file, settings)