"""
Helper utilities for Starlight.

Provides common functions used by the CLI and search handlers:
- App launching by index key
- Settings loading
"""

import os
from pathlib import Path
from typing import Any, Dict, Optional

import toml
from loguru import logger

from ..errors import LaunchError

APP_NAME = "starlight"


def get_settings_path() -> Path:
    """
    Path to the settings file:
      $XDG_CONFIG_HOME/starlight/settings.toml
      or ~/.config/starlight/settings.toml
    """
    config_home = os.environ.get("XDG_CONFIG_HOME")
    base = Path(config_home) if config_home else Path.home() / ".config"
    return base / APP_NAME / "settings.toml"


async def launch_app(index, key: str, launcher):
    """
    Look up an application by key and launch it.

    The record is read under the index's read lock; the process is
    started after the lock is released.

    Args:
        index: ApplicationIndex to look the key up in
        key: Descriptor filename stem (e.g. "firefox")
        launcher: Launcher used to spawn the process

    Returns:
        The started subprocess.Popen

    Raises:
        LaunchError: Unknown key, or the process could not be started

    Example:
        await launch_app(index, "firefox", Launcher())
    """
    record = await index.get(key)
    if record is None:
        raise LaunchError(f"No application with key '{key}'")

    return launcher.launch(record)


def load_settings(path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load Starlight settings from TOML file.

    Args:
        path: Settings file to read (defaults to get_settings_path())

    Returns:
        Dictionary containing settings with defaults applied

    Example settings structure:
        {
            "logging": {"level": "ERROR"},
            "discovery": {"extra_paths": []},
            "search": {"max_results": 30, "include_categories": False},
            "launcher": {"terminals": ["gnome-terminal", ...]},
            "web_search": {"engines": {}}
        }
    """
    from ..services.launcher import DEFAULT_TERMINALS

    # Default settings
    defaults = {
        "logging": {
            "level": "ERROR",
        },
        "discovery": {
            "extra_paths": [],
        },
        "search": {
            "max_results": 30,
            "include_categories": False,
        },
        "launcher": {
            "terminals": list(DEFAULT_TERMINALS),
        },
        "web_search": {
            "engines": {},
        },
    }

    settings_path = Path(path) if path else get_settings_path()

    # Load from file if it exists
    if settings_path.exists():
        try:
            loaded = toml.load(settings_path)
            # Merge loaded settings with defaults
            return _deep_merge(defaults, loaded)
        except (OSError, toml.TomlDecodeError) as e:
            logger.warning(f"Could not load settings from {settings_path}: {e}")
            logger.warning("Using default settings")
            return defaults
    else:
        logger.debug(f"Settings file not found at {settings_path}, using defaults")
        return defaults


def _deep_merge(base: Dict, override: Dict) -> Dict:
    """
    Deep merge two dictionaries.

    Args:
        base: Base dictionary with defaults
        override: Dictionary with overrides

    Returns:
        Merged dictionary (override takes precedence)
    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value

    return result
