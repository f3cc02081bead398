"""Configuration settings for LaunchGate."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, fields
from pathlib import Path

import yaml

from launchgate.gates.version import VersionStrategy

logger = logging.getLogger(__name__)

DATA_DIR = Path.home() / ".launchgate"
DEFAULT_CONFIG_FILE = DATA_DIR / "config.yaml"
ENV_PREFIX = "LAUNCHGATE_"


@dataclass
class Settings:
    """Application settings."""

    # Remote document
    config_url: str | None = None
    platform: str | None = "ios"
    fetch_timeout: float = 10.0

    # Store page opened when the user accepts an update
    update_url: str | None = None

    # Installed version (explicit, or looked up from a distribution)
    app_version: str | None = None
    distribution: str | None = None
    version_strategy: VersionStrategy = VersionStrategy.LEXICOGRAPHIC

    # Dismissal memory
    db_path: Path = field(default_factory=lambda: DATA_DIR / "launchgate.db")

    # Ignore fetch completions from checks a newer check() superseded
    drop_superseded: bool = False

    @classmethod
    def load(cls, path: Path | None = None) -> "Settings":
        """Load settings: defaults, then YAML file, then environment.

        Args:
            path: YAML settings file. Defaults to ~/.launchgate/config.yaml
                when that file exists.

        Raises:
            ValueError: If the file is not a mapping or names unknown keys
        """
        values: dict = {}

        config_file = Path(path) if path else DEFAULT_CONFIG_FILE
        if path or config_file.exists():
            values.update(_read_yaml(config_file))

        values.update(_read_env(os.environ))
        return cls.from_dict(values)

    @classmethod
    def from_dict(cls, values: dict) -> "Settings":
        known = {f.name for f in fields(cls)}
        unknown = set(values) - known
        if unknown:
            raise ValueError(f"Unknown settings: {', '.join(sorted(unknown))}")

        settings = cls(**values)
        settings.version_strategy = VersionStrategy(settings.version_strategy)
        settings.db_path = Path(settings.db_path).expanduser()
        settings.fetch_timeout = float(settings.fetch_timeout)
        settings.drop_superseded = _as_bool(settings.drop_superseded)
        return settings


def _read_yaml(path: Path) -> dict:
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Settings file must contain a mapping: {path}")
    logger.debug(f"Loaded settings from {path}")
    return data


def _read_env(environ) -> dict:
    values = {}
    for f in fields(Settings):
        env_name = ENV_PREFIX + f.name.upper()
        if env_name in environ:
            values[f.name] = environ[env_name]
    return values


def _as_bool(value) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)
