"""
Logging setup for VelocityShell.

Every vshell module logs through logging.getLogger(__name__); nothing is
attached until the application calls configure_logging().
"""

import logging
from typing import Optional

from vshell.core.config import get_config


def configure_logging(
    level: Optional[int] = None,
    format_string: Optional[str] = None,
    handler: Optional[logging.Handler] = None,
):
    """
    Configure logging for the vshell package.

    Call this at application startup to enable logging. With no arguments
    the level and log file come from the logging section of the config.

    Args:
        level: Logging level (default: from config, INFO).
        format_string: Optional custom format string.
        handler: Optional custom handler (default: file handler if the
                 config names a log file, otherwise StreamHandler).

    Example:
        from vshell import configure_logging
        configure_logging(level=logging.DEBUG)
    """
    log_config = get_config().logging

    if level is None:
        level = logging.getLevelName(str(log_config.level).upper())
        if not isinstance(level, int):
            level = logging.INFO

    if format_string is None:
        format_string = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

    if handler is None:
        if log_config.file:
            log_config.file.parent.mkdir(parents=True, exist_ok=True)
            handler = logging.FileHandler(log_config.file)
        else:
            handler = logging.StreamHandler()

    package_logger = logging.getLogger("vshell")
    handler.setFormatter(logging.Formatter(format_string))
    package_logger.addHandler(handler)
    package_logger.setLevel(level)
