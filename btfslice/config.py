"""
btf-slice Configuration System

This module holds the default settings for the slicing pipeline and handles
loading and validating overrides from YAML files. The command-line tool runs
on the defaults; library callers may pass their own file.
"""

import copy
import logging
import os
from typing import Any, Dict, Optional

import yaml

from .constants import DEFAULT_OUTPUT_PATH

logger = logging.getLogger(__name__)

DEFAULT_CONFIG = {
    'btfslice': {
        'output_path': DEFAULT_OUTPUT_PATH,
        'remove_partial_output': True,
        'validate_indices': True,
        'logging': {
            'console': False,
            'level': 'WARNING',
            'log_file': None,
        }
    }
}


def load_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load configuration from a YAML file, with fallback to the default config.

    Values present in the file override the defaults; missing keys keep their
    default value.

    Args:
        config_path: Path to YAML configuration file. If None, the defaults are returned.

    Returns:
        Dictionary containing configuration
    """
    config = copy.deepcopy(DEFAULT_CONFIG)
    if config_path is None:
        return config

    if not os.path.exists(config_path):
        logger.warning(f"Config file {config_path} not found, using default configuration")
        return config

    try:
        with open(config_path, 'r') as f:
            loaded = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        logger.warning(f"Failed to load config from {config_path}: {e}")
        return config

    if not isinstance(loaded, dict) or 'btfslice' not in loaded:
        raise ValueError("Config file must contain 'btfslice' section")

    _merge(config, loaded)
    if not validate_config(config):
        raise ValueError(f"Invalid configuration in {config_path}")
    return config


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> None:
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            _merge(base[key], value)
        else:
            base[key] = value


def get_config_value(config: Dict[str, Any], *keys: str, default: Any = None) -> Any:
    """
    Safely get a nested configuration value.

    Args:
        config: Configuration dictionary
        *keys: Keys to traverse the nested structure
        default: Default value if path doesn't exist

    Returns:
        The configuration value or default
    """
    current = config
    for key in keys:
        if isinstance(current, dict) and key in current:
            current = current[key]
        else:
            return default
    return current


def validate_config(config: Dict[str, Any]) -> bool:
    """
    Validate configuration structure.

    Args:
        config: Configuration dictionary

    Returns:
        True if valid, False otherwise
    """
    section = config.get('btfslice', {})

    output_path = section.get('output_path')
    if not isinstance(output_path, str) or not output_path:
        logger.warning(f"output_path must be a non-empty string, got {output_path!r}")
        return False

    for flag in ('remove_partial_output', 'validate_indices'):
        if not isinstance(section.get(flag), bool):
            logger.warning(f"{flag} must be a boolean, got {section.get(flag)!r}")
            return False

    level = get_config_value(section, 'logging', 'level', default='WARNING')
    if not isinstance(logging.getLevelName(str(level).upper()), int):
        logger.warning(f"Unknown logging level {level!r}")
        return False

    return True
