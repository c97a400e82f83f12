"""
Logging for oauth2-mfa.

All modules log through the single "OAUTH2_MFA" logger:

    ```python
    from oauth2_mfa.logger import get_logger
    logger = get_logger()

    logger.info("Issued access token")
    ```

By default the logger only carries a NullHandler and propagates, so records
reach whatever handlers the host application configured. Setting
OAUTH2_MFA_LOG_ENABLED=true (or calling ``setup_logger()``) attaches a
console handler at the level given by OAUTH2_MFA_LOG_LEVEL (DEBUG, INFO,
WARNING, ERROR, CRITICAL; INFO by default). In DEBUG mode records include
timestamps and function info.
"""

import logging
from typing import Optional

from oauth2_mfa.config import get_settings

LOGGER_NAME = "OAUTH2_MFA"

LOG_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

_logger_configured = False


def get_log_level() -> int:
    """Map the configured ``log_level`` setting to a logging level."""
    return LOG_LEVELS.get(get_settings().log_level.upper(), logging.INFO)


def setup_logger(
    name: Optional[str] = None, force_reconfigure: bool = False
) -> logging.Logger:
    """
    Attach a console handler to the project logger.

    Args:
        name: Optional logger name, defaults to LOGGER_NAME
        force_reconfigure: Replace the handler even if already set up

    Returns:
        Configured logger instance
    """
    global _logger_configured

    logger = logging.getLogger(name or LOGGER_NAME)

    if _logger_configured and not force_reconfigure:
        return logger

    logger.handlers.clear()

    log_level = get_log_level()

    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)

    if log_level == logging.DEBUG:
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s"
        )
    else:
        formatter = logging.Formatter("%(levelname)s: %(message)s")
    console_handler.setFormatter(formatter)

    logger.addHandler(console_handler)
    logger.setLevel(log_level)
    # The console handler already prints every record once
    logger.propagate = False

    _logger_configured = True
    return logger


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Get the project logger, configuring it on first use.

    Args:
        name: Optional logger name, defaults to LOGGER_NAME

    Returns:
        Logger instance
    """
    logger = logging.getLogger(name or LOGGER_NAME)
    if logger.handlers:
        return logger

    if get_settings().log_enabled:
        return setup_logger(name)

    logger.addHandler(logging.NullHandler())
    return logger


logger = get_logger()
