#!/usr/bin/env python3
"""
Loader for app_config.json.
Holds the public, non-secret settings shared by the functions and the service worker
(app URL, icon, Firebase web config, suggestion and notification tuning).
"""

import json
import logging
from pathlib import Path

# Create logger for this module
logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).parent.parent.parent
APP_CONFIG_PATH = PROJECT_ROOT / 'app_config.json'

_config_cache = None


def get_app_config(reload=False, path=None):
    """
    Load and return the application configuration.

    Args:
        reload: If True, re-read the file instead of using the cache
        path: Optional override for the config file location (bypasses the cache)

    Returns:
        dict: Configuration dictionary, empty if the file is missing or invalid
    """
    global _config_cache

    if path is not None:
        return _read_config_file(Path(path))

    if _config_cache is None or reload:
        _config_cache = _read_config_file(APP_CONFIG_PATH)

    return dict(_config_cache)


def _read_config_file(config_path):
    if not config_path.exists():
        logger.warning(f"app_config.json not found at {config_path}")
        return {}
    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        logger.error(f"Failed to parse {config_path}: {e}")
        return {}
    if not isinstance(data, dict):
        logger.error(f"{config_path} must contain a JSON object, got {type(data).__name__}")
        return {}
    logger.debug(f"Loaded app config from {config_path}")
    return data


def get_config_value(key, default=None, section=None, config=None):
    """
    Get a single configuration value.

    Args:
        key: The configuration key to retrieve
        default: Value returned when the key is missing
        section: Optional section name (e.g. 'suggestion') to look within
        config: Optional already-loaded config dict

    Examples:
        get_config_value('app_url')
        get_config_value('max_tokens', section='suggestion')
    """
    if config is None:
        config = get_app_config()

    if section:
        section_config = config.get(section) or {}
        return section_config.get(key, default)

    return config.get(key, default)


def get_firebase_config(config=None):
    """Firebase web SDK configuration (apiKey, projectId, messagingSenderId, ...)"""
    if config is None:
        config = get_app_config()
    return dict(config.get('firebase') or {})


def reload_config():
    """Clear the cache and re-read app_config.json"""
    global _config_cache
    _config_cache = None
    return get_app_config(reload=True)
