#!/usr/bin/env python3
"""ConfigLoader for tweaks coordinator setups.

Reads a YAML file describing the logging setup and the ranked providers:

    logging:
      level: INFO
      file: logs/tweaks.log
    providers:
      - {type: file, path: defaults.json, priority: 0}
      - {type: remote, url: https://example.com/tweaks, priority: 5}
      - {type: local, path: overrides.yaml, priority: 10}

Relative provider paths are resolved against the directory holding the
configuration file. A missing file yields an empty config dict, so callers
can still fall back to environment settings.
"""
from __future__ import annotations
import os
import yaml
from pathlib import Path
from typing import Any, Dict, Optional

from ..core.exceptions import ConfigurationError
from .settings import TweaksSettings

PATH_KEYS = ('path',)


class ConfigLoader:
    """Simple YAML configuration loader with optional environment overlay."""
    def __init__(self, config_path: Optional[str | os.PathLike[str]] = None,
                 use_env: bool = False):
        self._raw_path = Path(config_path) if config_path else None
        self.use_env = use_env
        self.config: Dict[str, Any] = {}
        self._load()

    # ------------------------------------------------------------------
    def _load_yaml(self, path: Path) -> Dict[str, Any]:
        if not path.exists():
            return {}
        try:
            with path.open('r', encoding='utf-8') as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigurationError(f"Configuration root in {path} must be a mapping")
        if not isinstance(data.get('logging') or {}, dict):
            raise ConfigurationError(f"'logging' in {path} must be a mapping")
        if not isinstance(data.get('providers') or [], list):
            raise ConfigurationError(f"'providers' in {path} must be a list")
        return data

    # ------------------------------------------------------------------
    def _load(self):
        file_cfg: Dict[str, Any] = {}
        if self._raw_path is not None:
            file_cfg = self._load_yaml(self._raw_path)
            base_dir = self._raw_path.resolve().parent
            for provider in file_cfg.get('providers') or []:
                for key in PATH_KEYS:
                    value = provider.get(key) if isinstance(provider, dict) else None
                    if value and not Path(value).is_absolute():
                        provider[key] = str(base_dir / value)

        if self.use_env:
            env_cfg = TweaksSettings.from_env().to_config()
            # Environment wins for logging, the file wins for providers
            merged = {**file_cfg, 'logging': {**(file_cfg.get('logging') or {}),
                                              **{k: v for k, v in env_cfg['logging'].items() if v}}}
            if not file_cfg.get('providers'):
                merged['providers'] = env_cfg['providers']
        else:
            merged = file_cfg

        self.config = merged

    # ------------------------------------------------------------------
    def get(self, key: str, default: Any = None) -> Any:
        return self.config.get(key, default)

    # Attribute-style access convenience
    def __getattr__(self, item: str) -> Any:  # pragma: no cover - convenience
        try:
            return self.config[item]
        except KeyError as e:
            raise AttributeError(item) from e

__all__ = ["ConfigLoader"]
