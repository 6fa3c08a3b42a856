"""
Settings loader — resolves where the bookmark store lives and how to log.

Resolution, highest precedence first:

    CLI flag  >  SHELLMARK_* env var  >  YAML config file  >  default

The YAML file is ``--config``, else ``$SHELLMARK_CONFIG``, else
``<home>/shellmark.yml`` when it exists. Keys may be flat or nested
under a ``shellmark:`` key.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path

import yaml
from pydantic import BaseModel, ValidationError

from shellmark.core.persistence.store_file import default_store_path

logger = logging.getLogger(__name__)

CONFIG_FILE = "shellmark.yml"
DEFAULT_HOME = "~/.shell-config"

ENV_CONFIG = "SHELLMARK_CONFIG"
ENV_HOME = "SHELLMARK_HOME"
ENV_STORE = "SHELLMARK_STORE"
ENV_LOG_LEVEL = "SHELLMARK_LOG_LEVEL"
ENV_LOG_FILE = "SHELLMARK_LOG_FILE"
ENV_LOG_FILE_LEVEL = "SHELLMARK_LOG_FILE_LEVEL"

_ENV_KEYS = {
    "home": ENV_HOME,
    "store_file": ENV_STORE,
    "log_level": ENV_LOG_LEVEL,
    "log_file": ENV_LOG_FILE,
    "log_file_level": ENV_LOG_FILE_LEVEL,
}


class ConfigError(Exception):
    """Raised when the settings file is invalid or unreadable."""


class Settings(BaseModel):
    """Resolved runtime settings."""

    home: Path = Path(DEFAULT_HOME).expanduser()
    store_file: Path | None = None
    log_level: str = "WARNING"
    log_file: str | None = None
    log_file_level: str | None = None
    config_path: Path | None = None

    @property
    def store_path(self) -> Path:
        """The bookmark file, defaulting to ``<home>/bookmarks/.bookmarks``."""
        if self.store_file is not None:
            return self.store_file.expanduser()
        return default_store_path(self.home.expanduser())

    def to_dict(self) -> dict:
        return {
            "home": str(self.home),
            "store_file": str(self.store_path),
            "log_level": self.log_level,
            "log_file": self.log_file,
            "log_file_level": self.log_file_level,
            "config_path": str(self.config_path) if self.config_path else None,
        }


def read_config_file(path: Path) -> dict:
    """Read a YAML settings file into a flat dict.

    Raises:
        ConfigError: If the file is missing, unreadable, or not a mapping.
    """
    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    # The YAML may wrap everything under a "shellmark" key or be flat
    section = data.get("shellmark", data)
    if not isinstance(section, dict):
        raise ConfigError(f"Expected 'shellmark' to be a mapping in {path}")
    return dict(section)


def _expand(value: str | None) -> str | None:
    return os.path.expanduser(value) if value else value


def load_settings(
    config_path: Path | None = None,
    store_file: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> Settings:
    """Resolve settings from flags, environment, config file, and defaults.

    Args:
        config_path: Explicit YAML file (``--config``).
        store_file: Explicit store file (``--store``), wins over everything.
        environ: Environment mapping (default: ``os.environ``).

    Raises:
        ConfigError: If a config file is given but invalid.
    """
    env = os.environ if environ is None else environ

    # ── Home first: it decides where the default config file lives ──
    home = Path(_expand(env.get(ENV_HOME)) or os.path.expanduser(DEFAULT_HOME))

    explicit = config_path or (Path(env[ENV_CONFIG]) if env.get(ENV_CONFIG) else None)
    values: dict = {}
    if explicit is not None:
        values = read_config_file(explicit.expanduser())
        config_path = explicit.expanduser()
    else:
        candidate = home / CONFIG_FILE
        if candidate.is_file():
            values = read_config_file(candidate)
            config_path = candidate

    if config_path:
        logger.debug("Loaded settings from %s", config_path)

    # ── Env overrides file ──────────────────────────────────────
    for key, var in _ENV_KEYS.items():
        if env.get(var):
            values[key] = env[var]

    # ── Flag overrides env ──────────────────────────────────────
    if store_file is not None:
        values["store_file"] = str(store_file)

    for key in ("home", "store_file", "log_file"):
        if values.get(key):
            values[key] = _expand(str(values[key]))
    values.setdefault("home", str(home))

    try:
        return Settings.model_validate({**values, "config_path": config_path})
    except ValidationError as e:
        raise ConfigError(f"Invalid settings: {e}") from e
