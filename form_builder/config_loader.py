"""
Configuration loading utilities for the form schema builder.

This module loads config.yaml, merges it over the built-in defaults and
validates the builder and export settings.
"""

import yaml
from pathlib import Path
from typing import Dict, Any, Optional
import logging
from copy import deepcopy

from .builder_exceptions import ConfigurationLoadError
from .form_models import FormKind, Orientation, ValueType

logger = logging.getLogger(__name__)

CONFIG_FILE = Path("config.yaml")

EXPORT_FORMATS = ('json', 'yaml')
LOGGING_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')

# Global configuration cache
_config_cache = None


def deep_merge(base_dict: Dict[str, Any], update_dict: Dict[str, Any]) -> Dict[str, Any]:
    """
    Deep merge two dictionaries, with update_dict taking precedence.

    Args:
        base_dict: Base dictionary (defaults)
        update_dict: Dictionary to merge in (user config)

    Returns:
        Merged dictionary
    """
    result = deepcopy(base_dict)

    for key, value in update_dict.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = deepcopy(value)

    return result


def get_default_config() -> Dict[str, Any]:
    """
    Get the default configuration.

    Returns:
        Dictionary with default configuration
    """
    return {
        'app': {
            'name': 'JSON Forms Builder',
            'version': '1.0.0',
            'debug': False
        },
        'builder': {
            'default_form_kind': FormKind.SIMPLE,
            'default_element_type': ValueType.STRING,
            'default_orientation': Orientation.VERTICAL
        },
        'export': {
            'format': 'json',
            'indent': 2
        },
        'ui': {
            'page_title': 'Form Builder',
            'sidebar_title': 'Schema Preview'
        },
        'logging': {
            'level': 'INFO'
        }
    }


def load_config(config_path: Optional[Path] = None, strict: bool = False) -> Dict[str, Any]:
    """
    Load application configuration.

    Args:
        config_path: Optional path to config file (defaults to config.yaml)
        strict: Raise ConfigurationLoadError instead of falling back to defaults

    Returns:
        Complete configuration dictionary

    Raises:
        ConfigurationLoadError: If strict and the file cannot be read or parsed
    """
    if config_path is None:
        config_path = CONFIG_FILE

    default_config = get_default_config()

    if not config_path.exists():
        logger.warning(f"Configuration file not found: {config_path}")
        logger.info("Using default configuration")
        return default_config

    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            user_config = yaml.safe_load(f)
    except (yaml.YAMLError, IOError, OSError) as e:
        logger.error(f"Failed to load configuration from {config_path}: {e}")
        if strict:
            raise ConfigurationLoadError(config_path, e) from e
        logger.info("Using default configuration")
        return default_config

    if user_config is None:
        logger.warning(f"Configuration file is empty: {config_path}")
        return default_config

    if not isinstance(user_config, dict):
        logger.error(f"Configuration file is not a valid dictionary: {config_path}")
        if strict:
            raise ConfigurationLoadError(config_path, TypeError("top level must be a mapping"))
        logger.info("Using default configuration")
        return default_config

    config = deep_merge(default_config, user_config)
    logger.info(f"Successfully loaded configuration from {config_path}")
    return config


def get_config() -> Dict[str, Any]:
    """Get the cached application configuration, loading it on first use."""
    global _config_cache

    if _config_cache is None:
        _config_cache = load_config()
    return _config_cache


def get_config_value(section: str, key: str, default: Any = None) -> Any:
    """
    Get a single configuration value.

    Args:
        section: Configuration section name
        key: Key within the section
        default: Value returned when the section or key is missing
    """
    section_values = get_config().get(section, {})
    if not isinstance(section_values, dict):
        return default
    return section_values.get(key, default)


def validate_config(config: Dict[str, Any]) -> bool:
    """
    Validate configuration structure and enumerated values.

    Args:
        config: Configuration dictionary to validate

    Returns:
        True if configuration is valid, False otherwise
    """
    required_sections = ['app', 'builder', 'export', 'ui', 'logging']

    for section in required_sections:
        if not isinstance(config.get(section), dict):
            logger.warning(f"Missing required configuration section: {section}")
            return False

    app = config['app']
    if 'name' not in app or 'version' not in app:
        logger.warning("Missing required app configuration (name or version)")
        return False

    builder = config['builder']
    if builder.get('default_form_kind', FormKind.SIMPLE) not in FormKind.ALL:
        logger.warning(f"Invalid default_form_kind: {builder.get('default_form_kind')}")
        return False
    if builder.get('default_element_type', ValueType.STRING) not in ValueType.ALL:
        logger.warning(f"Invalid default_element_type: {builder.get('default_element_type')}")
        return False
    if builder.get('default_orientation', Orientation.VERTICAL) not in Orientation.ALL:
        logger.warning(f"Invalid default_orientation: {builder.get('default_orientation')}")
        return False

    export = config['export']
    if export.get('format', 'json') not in EXPORT_FORMATS:
        logger.warning(f"Invalid export format: {export.get('format')}")
        return False
    try:
        indent = int(export.get('indent', 2))
        if indent < 0:
            logger.warning("export indent must not be negative")
            return False
    except (ValueError, TypeError):
        logger.warning("export indent must be a valid integer")
        return False

    level = str(config['logging'].get('level', 'INFO')).upper()
    if level not in LOGGING_LEVELS:
        logger.warning(f"Invalid logging level: {level}")
        return False

    return True
