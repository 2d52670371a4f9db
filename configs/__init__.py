"""Configuration module for convsplit."""

import copy
from pathlib import Path
import yaml

CONFIG_DIR = Path(__file__).resolve().parent
DEFAULT_CONFIG_PATH = CONFIG_DIR / "default.yaml"
HARDWARE_CATALOG_PATH = CONFIG_DIR / "hardware.yaml"


def load_config(config_path: str) -> dict:
    """Load configuration from YAML file.

    Args:
        config_path: Path to configuration file

    Returns:
        Configuration dictionary (empty for an empty file)
    """
    with open(config_path, 'r') as f:
        return yaml.safe_load(f) or {}


def load_default_config() -> dict:
    """Load the bundled default configuration."""
    return load_config(str(DEFAULT_CONFIG_PATH))


def merge_configs(base_config: dict, override_config: dict) -> dict:
    """Deep-merge an override into a base configuration.

    Nested sections are merged key by key; any other override value replaces
    the base value. Neither input is modified and the result shares no
    mutable values with them.

    Args:
        base_config: Base configuration
        override_config: Override configuration

    Returns:
        Merged configuration
    """
    merged = copy.deepcopy(base_config)
    for key, value in override_config.items():
        if isinstance(merged.get(key), dict) and isinstance(value, dict):
            merged[key] = merge_configs(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged
