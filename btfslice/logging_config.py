# btfslice/logging_config.py
"""
Centralized logging configuration for the btfslice package.
"""

import logging
import sys
from typing import Optional

# Create a logger for this configuration module itself
_config_logger = logging.getLogger(__name__)

DEFAULT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def configure_logging(
    level: int = logging.DEBUG,
    log_file: Optional[str] = None,
    console_level: int = logging.WARNING,
    file_level: int = logging.DEBUG,
    format_string: Optional[str] = None,
    console: bool = True
) -> logging.Logger:
    """
    Configures logging for the btfslice package.

    Sets up the package logger with a console handler on stderr and, when
    ``log_file`` is given, a file handler. Stdout is left alone so the
    command-line tool stays quiet on success. Prevents adding multiple
    handlers if called repeatedly.

    Args:
        level: The base logging level for the package logger.
        log_file: The name of the log file. If None, no file handler is added.
        console_level: The logging level for the console output.
        file_level: The logging level for the file output.
        format_string: The format string for log messages. If None, a default is used.
        console: Whether to add the stderr handler at all.

    Returns:
        The configured package logger.
    """
    package_logger = logging.getLogger('btfslice')
    package_logger.setLevel(level)

    # Check if handlers already exist to prevent duplicates
    if package_logger.handlers:
        _config_logger.debug("Logging already configured for the 'btfslice' package. Skipping.")
        return package_logger

    formatter = logging.Formatter(format_string or DEFAULT_FORMAT)

    if console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(console_level)
        console_handler.setFormatter(formatter)
        package_logger.addHandler(console_handler)
        _config_logger.debug("Console handler added.")

    if log_file:
        try:
            file_handler = logging.FileHandler(log_file)
        except OSError as e:
            _config_logger.error(f"Failed to create file handler for '{log_file}': {e}")
        else:
            file_handler.setLevel(file_level)
            file_handler.setFormatter(formatter)
            package_logger.addHandler(file_handler)
            _config_logger.debug(f"File handler added for '{log_file}'.")

    if not package_logger.handlers:
        # Keep records away from the last-resort stderr handler
        package_logger.addHandler(logging.NullHandler())

    _config_logger.debug("Logging configured for the 'btfslice' package.")
    return package_logger


def level_from_name(name: str) -> int:
    """Map a level name such as ``"info"`` to its numeric value (WARNING if unknown)."""
    value = logging.getLevelName(str(name).upper())
    return value if isinstance(value, int) else logging.WARNING
