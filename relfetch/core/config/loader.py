"""
Settings loader — reads an optional YAML file into ``InstallerSettings``.

Without a file the built-in defaults are used. The YAML may be flat or
nest everything under a ``relfetch`` key.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import yaml
from pydantic import ValidationError

from relfetch.core.errors import InstallerError
from relfetch.core.models.settings import InstallerSettings

logger = logging.getLogger(__name__)

# Env var that points at an explicit settings file
SETTINGS_ENV_VAR = "RELFETCH_CONFIG"

# Per-user settings file, relative to $HOME
USER_SETTINGS_FILE = Path(".config") / "relfetch" / "config.yml"


class ConfigError(InstallerError):
    """Raised when the settings file is invalid or missing."""


def find_settings_file() -> Path | None:
    """Locate a settings file.

    Checks ``$RELFETCH_CONFIG`` first, then ``~/.config/relfetch/config.yml``.

    Returns:
        Path to the settings file, or None if there is none.

    Raises:
        ConfigError: If ``$RELFETCH_CONFIG`` names a file that does not exist.
    """
    explicit = os.environ.get(SETTINGS_ENV_VAR, "").strip()
    if explicit:
        path = Path(explicit).expanduser()
        if not path.is_file():
            raise ConfigError(f"Config file not found: {path} (from ${SETTINGS_ENV_VAR})")
        return path

    candidate = Path.home() / USER_SETTINGS_FILE
    if candidate.is_file():
        return candidate
    return None


def load_settings(path: Path | None = None) -> InstallerSettings:
    """Load and validate installer settings.

    Args:
        path: Explicit settings file. If None, ``find_settings_file()``
            decides, and defaults are used when nothing is found.

    Returns:
        Validated InstallerSettings.

    Raises:
        ConfigError: If the file is missing, unreadable or invalid.
    """
    if path is None:
        path = find_settings_file()
        if path is None:
            logger.debug("No settings file, using defaults")
            return InstallerSettings()

    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    logger.debug("Loading settings from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return InstallerSettings()

    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    if "relfetch" in data:
        data = data["relfetch"] or {}
        if not isinstance(data, dict):
            raise ConfigError(f"Expected a mapping under 'relfetch' in {path}")

    try:
        settings = InstallerSettings.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid settings in {path}: {e}") from e

    logger.info("Loaded settings for %s (%s)", settings.repository, settings.binary)
    return settings
