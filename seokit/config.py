"""Configuration loading and management."""

from pathlib import Path
from typing import Any

import yaml

DEFAULT_CONFIG_PATHS = [
    Path("configs/default.yaml"),
    Path("seokit.yaml"),
    Path.home() / ".seokit" / "config.yaml",
]


def load_config(config_path: Path | None = None) -> dict[str, Any]:
    """Load configuration from file.

    Values from the file are merged over the defaults, so a file only
    needs the keys it changes.

    Args:
        config_path: Optional path to config file. If not provided,
                    searches default locations.

    Returns:
        Configuration dictionary.

    Raises:
        FileNotFoundError: If an explicit config path does not exist.
    """
    if config_path is not None and not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    paths_to_try = [config_path] if config_path else DEFAULT_CONFIG_PATHS

    for path in paths_to_try:
        if path.exists():
            with open(path, encoding="utf-8") as f:
                config = yaml.safe_load(f)
                return merge_configs(get_default_config(), config or {})

    # Return default config if no file found
    return get_default_config()


def get_default_config() -> dict[str, Any]:
    """Return default configuration."""
    return {
        "sitemap": {
            "output": "sitemap.xml",
            "cache_max_age": 3600,
        },
        "head": {
            "max_title_length": 60,
            "max_description_length": 160,
        },
        "logging": {
            "level": "WARNING",
        },
    }


def get_section(config: dict[str, Any], section: str) -> dict[str, Any]:
    """Get a configuration section merged over its defaults.

    Args:
        config: Full configuration dictionary.
        section: Section name (sitemap, head, logging).

    Returns:
        Section dictionary.
    """
    defaults = get_default_config().get(section, {})
    return merge_configs(defaults, config.get(section) or {})


def merge_configs(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge two configuration dictionaries.

    Args:
        base: Base configuration.
        override: Override configuration (takes precedence).

    Returns:
        Merged configuration.
    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = merge_configs(result[key], value)
        else:
            result[key] = value

    return result
