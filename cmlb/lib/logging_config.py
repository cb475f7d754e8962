#!/usr/bin/env python3
"""
Centralized logging configuration for the CMLB functions.
Provides consistent logging setup for the Cloud Functions and the local Flask app.
"""

import logging
import os
import sys

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

VALID_LOG_LEVELS = {
    'DEBUG': logging.DEBUG,
    'INFO': logging.INFO,
    'WARNING': logging.WARNING,
    'ERROR': logging.ERROR,
    'CRITICAL': logging.CRITICAL,
}

# Libraries that log every HTTP request at INFO/DEBUG
NOISY_LOGGERS = ('urllib3', 'google.auth', 'google.api_core')


def get_log_level_from_env() -> int:
    """
    Get log level from LOG_LEVEL environment variable.

    Returns:
        int: Logging level constant (defaults to logging.INFO)
    """
    raw_value = os.environ.get('LOG_LEVEL', 'INFO')
    log_level_str = raw_value.strip().upper()

    if log_level_str in VALID_LOG_LEVELS:
        return VALID_LOG_LEVELS[log_level_str]

    logging.basicConfig(level=logging.WARNING, format=LOG_FORMAT, stream=sys.stderr)
    logging.warning(
        f"Invalid LOG_LEVEL value '{raw_value}'. "
        f"Valid values are: {', '.join(VALID_LOG_LEVELS)}. Defaulting to INFO."
    )
    return logging.INFO


def setup_logging(force: bool = False) -> None:
    """
    Configure the root logger.

    Idempotent unless force is True. Cloud Functions collects stderr, so a single
    StreamHandler to stderr is used for both deployed and local runs.

    Args:
        force: If True, drop existing root handlers and reconfigure.
    """
    root_logger = logging.getLogger()
    log_level = get_log_level_from_env()

    if not force and root_logger.handlers:
        root_logger.setLevel(log_level)
        return

    if force:
        for handler in root_logger.handlers[:]:
            root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root_logger.addHandler(handler)
    root_logger.setLevel(log_level)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(log_level, logging.WARNING))

    if log_level <= logging.INFO:
        logging.info(f"Logging configured with level: {logging.getLevelName(log_level)}")
