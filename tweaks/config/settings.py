#!/usr/bin/env python3
"""
Environment settings for the tweaks coordinator
"""

import os
from typing import Any, Callable, Dict, List, Optional
from dataclasses import dataclass
from dotenv import load_dotenv

from ..core.exceptions import ConfigurationError
from ..core.tweak import TweaksPriority


@dataclass
class TweaksSettings:
    """Provider and logging settings read from environment variables"""

    # Provider sources
    defaults_file: Optional[str]
    remote_url: Optional[str]
    local_store: Optional[str]

    # Priorities
    defaults_priority: int
    remote_priority: int
    local_priority: int

    # Remote settings
    remote_timeout: float
    fetch_on_start: bool

    # Logging settings
    log_level: str
    log_file: Optional[str]

    @classmethod
    def from_env(cls, dotenv_path: Optional[str] = None) -> 'TweaksSettings':
        """
        Create settings from environment variables (and a .env file if present)

        Raises:
            ConfigurationError: If a priority or the timeout is not a number
        """

        load_dotenv(dotenv_path)

        return cls(
            # Provider sources
            defaults_file=os.getenv('TWEAKS_DEFAULTS_FILE') or None,
            remote_url=os.getenv('TWEAKS_REMOTE_URL') or None,
            local_store=os.getenv('TWEAKS_LOCAL_STORE') or None,

            # Priorities
            defaults_priority=_env_number('TWEAKS_DEFAULTS_PRIORITY', int(TweaksPriority.P0), int),
            remote_priority=_env_number('TWEAKS_REMOTE_PRIORITY', int(TweaksPriority.P5), int),
            local_priority=_env_number('TWEAKS_LOCAL_PRIORITY', int(TweaksPriority.P10), int),

            # Remote settings
            remote_timeout=_env_number('TWEAKS_REMOTE_TIMEOUT', 10.0, float),
            fetch_on_start=os.getenv('TWEAKS_FETCH_ON_START', 'true').lower() == 'true',

            # Logging settings
            log_level=os.getenv('TWEAKS_LOG_LEVEL', 'INFO'),
            log_file=os.getenv('TWEAKS_LOG_FILE') or None,
        )

    def validate(self) -> List[str]:
        """Validate settings and return list of errors"""
        errors = []

        if self.remote_timeout <= 0:
            errors.append("remote_timeout must be positive")

        if self.remote_url and not self.remote_url.startswith(('http://', 'https://')):
            errors.append("remote_url must be an http(s) URL")

        if self.log_level.upper() not in ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'):
            errors.append(f"Unknown log level: {self.log_level}")

        return errors

    def to_config(self) -> Dict[str, Any]:
        """Convert to the configuration dict understood by build_coordinator()"""
        providers: List[Dict[str, Any]] = []

        if self.defaults_file:
            providers.append({'type': 'file', 'path': self.defaults_file,
                              'priority': self.defaults_priority})
        if self.remote_url:
            providers.append({'type': 'remote', 'url': self.remote_url,
                              'priority': self.remote_priority,
                              'timeout': self.remote_timeout,
                              'fetch_on_start': self.fetch_on_start})
        # The local store is always available, in memory if no path is set
        providers.append({'type': 'local', 'path': self.local_store,
                          'priority': self.local_priority})

        return {
            'logging': {'level': self.log_level, 'file': self.log_file},
            'providers': providers,
        }


def _env_number(key: str, default: Any, convert: Callable[[str], Any]) -> Any:
    raw = os.getenv(key)
    if raw is None or raw.strip() == '':
        return default
    try:
        return convert(raw)
    except ValueError:
        raise ConfigurationError(f"{key} must be a {convert.__name__}, got {raw!r}")
