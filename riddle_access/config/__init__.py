"""
Riddle Access Configuration Module

Provides centralized configuration loading for the riddle access layer.
"""

from pathlib import Path
from typing import Dict, Any, Optional

import yaml


_config_cache: Optional[Dict[str, Any]] = None
CONFIG_DIR = Path(__file__).parent
CONFIG_FILE = CONFIG_DIR / "riddle_access_config.yaml"


class ConfigError(Exception):
    """Raised when the configuration file is missing or malformed."""


def get_config() -> Dict[str, Any]:
    """
    Load riddle access configuration (cached).

    Returns:
        Dict containing all configuration settings.

    Raises:
        ConfigError: If the config file is missing or not a mapping
    """
    global _config_cache
    if _config_cache is not None:
        return _config_cache

    if not CONFIG_FILE.exists():
        raise ConfigError(f"Config file not found: {CONFIG_FILE}")

    with open(CONFIG_FILE, 'r', encoding='utf-8') as f:
        loaded = yaml.safe_load(f)

    if not isinstance(loaded, dict):
        raise ConfigError(f"Config file must contain a mapping: {CONFIG_FILE}")

    _config_cache = loaded
    return _config_cache


def get_section(name: str) -> Dict[str, Any]:
    """Return one top-level section of the config, or an empty dict."""
    return get_config().get(name) or {}


def clear_config_cache() -> None:
    """Clear the config cache (useful for testing)."""
    global _config_cache
    _config_cache = None


__all__ = [
    'ConfigError',
    'get_config',
    'get_section',
    'clear_config_cache',
]
