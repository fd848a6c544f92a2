"""Configuration package."""

from grammar_drills.config.settings import (
    Settings,
    get_settings,
    load_yaml_config,
    normalize_async_url,
    settings,
    yaml_config,
)

__all__ = [
    "Settings",
    "get_settings",
    "load_yaml_config",
    "normalize_async_url",
    "settings",
    "yaml_config",
]
