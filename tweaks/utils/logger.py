"""
Logging Utilities
=================

Logging setup for the tweaks package, driven by the ``logging`` section of a
coordinator configuration:

    logging:
      level: DEBUG
      file: logs/tweaks.log
      max_file_size: 5MB
      backup_count: 3
      console: false

Handlers are attached to the ``tweaks`` package logger only, so an
application's own root logging setup is left untouched.
"""

import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Optional, Dict, Any

PACKAGE_LOGGER = 'tweaks'

SIZE_UNITS = {'KB': 1024, 'MB': 1024 ** 2, 'GB': 1024 ** 3}

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# Marks handlers installed here so a second setup call replaces them
_MANAGED_ATTR = '_tweaks_managed'


def setup_logging(config: Optional[Dict[str, Any]] = None) -> logging.Logger:
    """
    Configure the package logger from a coordinator configuration.

    Calling it again replaces the handlers installed by the previous call.

    Args:
        config: Configuration dict; only its 'logging' section is read

    Returns:
        The 'tweaks' package logger
    """
    section = (config or {}).get('logging') or {}
    level_name = str(section.get('level') or 'INFO').upper()
    log_file = section.get('file')

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(getattr(logging, level_name, logging.INFO))

    for handler in [h for h in package_logger.handlers if getattr(h, _MANAGED_ATTR, False)]:
        package_logger.removeHandler(handler)
        handler.close()

    handlers = []
    if section.get('console', True):
        handlers.append(logging.StreamHandler(sys.stdout))
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=_parse_size(section.get('max_file_size', '10MB')),
            backupCount=int(section.get('backup_count', 5)),
            encoding='utf-8'
        ))

    formatter = logging.Formatter(LOG_FORMAT, datefmt='%Y-%m-%d %H:%M:%S')
    for handler in handlers:
        handler.setFormatter(formatter)
        setattr(handler, _MANAGED_ATTR, True)
        package_logger.addHandler(handler)

    package_logger.info(f"Tweaks logging configured - Level: {level_name}, File: {log_file}")
    return package_logger


def _parse_size(size: Any) -> int:
    """Convert '10MB', '512kb' or a plain byte count to bytes."""
    text = str(size).strip().upper()
    unit = SIZE_UNITS.get(text[-2:])
    if unit is None:
        return int(text)
    return int(float(text[:-2]) * unit)


class TweaksLogger:
    """
    Structured logger for resolution, write and notification events.
    """

    def __init__(self, name: str = "tweaks"):
        self.logger = logging.getLogger(name)
        self.name = name

    def log_resolution(
        self,
        feature: str,
        variable: str,
        value: Any,
        provider: Optional[str] = None,
        level: str = "DEBUG"
    ):
        """
        Log the outcome of a tweak lookup.

        Args:
            feature: Feature identifier
            variable: Variable identifier
            value: Resolved value (None when undefined)
            provider: Name of the answering provider
            level: Log level
        """
        if value is None:
            message = f"TWEAK RESOLVED - {feature}.{variable}: undefined"
        else:
            message = f"TWEAK RESOLVED - {feature}.{variable}: {value!r}, Provider: {provider}"

        getattr(self.logger, level.lower())(message)

    def log_write(
        self,
        feature: str,
        variable: str,
        value: Any,
        provider: str,
        level: str = "INFO"
    ):
        """Log a write through the mutable provider (value None means delete)."""
        action = "DELETE" if value is None else f"SET {value!r}"
        message = f"TWEAK WRITE - {feature}.{variable}: {action}, Provider: {provider}"

        getattr(self.logger, level.lower())(message)

    def log_notification(self, observer_count: int, level: str = "DEBUG"):
        message = f"CHANGE EVENT - Observers notified: {observer_count}"
        getattr(self.logger, level.lower())(message)

    def log_error(
        self,
        error_type: str,
        error_message: str,
        **kwargs
    ):
        """
        Log errors with context.

        Args:
            error_type: Type of error
            error_message: Error message
            **kwargs: Additional context
        """
        log_message = f"ERROR - Type: {error_type}, Message: {error_message}"

        if kwargs:
            context_str = ", ".join([f"{k}: {v}" for k, v in kwargs.items()])
            log_message += f", Context: {context_str}"

        self.logger.error(log_message)
