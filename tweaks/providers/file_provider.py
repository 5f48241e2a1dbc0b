"""
File Tweaks Provider
====================

Read-only provider serving bundled default values from a JSON or YAML file.

Expected layout:

    {
        "ui_customization": {
            "display_red_view": {"Title": "Display Red View", "Group": "UI", "Value": true}
        }
    }
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from ..core.exceptions import ProviderLoadError
from ..core.tweak import SUPPORTED_VALUE_TYPES, Tweak, TweaksPriority
from .base import TweaksProvider

logger = logging.getLogger(__name__)

TITLE_KEY = "Title"
GROUP_KEY = "Group"
VALUE_KEY = "Value"


class FileTweaksProvider(TweaksProvider):
    """
    Immutable defaults loaded once from a configuration file.
    """

    def __init__(self,
                 definitions: Dict[str, Dict[str, Dict[str, Any]]],
                 priority: Union[TweaksPriority, int] = TweaksPriority.P0,
                 name: Optional[str] = None):
        """
        Initialize from already-parsed definitions.

        Args:
            definitions: feature -> variable -> {"Title", "Group", "Value"}
            priority: Provider priority
            name: Provider name for logging
        """
        super().__init__(priority, name)
        self._definitions = self._validate(definitions)
        logger.info(
            f"{self.name} loaded {sum(len(v) for v in self._definitions.values())} tweaks "
            f"across {len(self._definitions)} features"
        )

    @classmethod
    def from_file(cls,
                  path: Union[str, Path],
                  priority: Union[TweaksPriority, int] = TweaksPriority.P0,
                  name: Optional[str] = None) -> "FileTweaksProvider":
        """
        Load defaults from a JSON or YAML file.

        Args:
            path: Path to the defaults file
            priority: Provider priority
            name: Provider name for logging

        Returns:
            FileTweaksProvider instance

        Raises:
            ProviderLoadError: If the file is missing, unsupported or malformed
        """
        path = Path(path)

        if not path.exists():
            raise ProviderLoadError(f"Defaults file not found: {path}")

        try:
            with open(path, 'r', encoding='utf-8') as f:
                if path.suffix.lower() in ['.yaml', '.yml']:
                    data = yaml.safe_load(f)
                elif path.suffix.lower() == '.json':
                    data = json.load(f)
                else:
                    raise ProviderLoadError(f"Unsupported defaults format: {path.suffix}")
        except (OSError, ValueError, yaml.YAMLError) as e:
            logger.error(f"Failed to load defaults from {path}: {e}")
            raise ProviderLoadError(f"Failed to load defaults from {path}: {e}") from e

        return cls(data or {}, priority=priority, name=name or path.stem)

    @staticmethod
    def _validate(definitions: Any) -> Dict[str, Dict[str, Dict[str, Any]]]:
        if not isinstance(definitions, dict):
            raise ProviderLoadError("Defaults must be a mapping of features")

        for feature, variables in definitions.items():
            if not isinstance(variables, dict):
                raise ProviderLoadError(f"Feature '{feature}' must map variables to definitions")
            for variable, definition in variables.items():
                if not isinstance(definition, dict) or VALUE_KEY not in definition:
                    raise ProviderLoadError(f"Tweak '{feature}.{variable}' has no '{VALUE_KEY}'")
                if not isinstance(definition[VALUE_KEY], SUPPORTED_VALUE_TYPES):
                    raise ProviderLoadError(
                        f"Tweak '{feature}.{variable}' has unsupported value "
                        f"{definition[VALUE_KEY]!r}"
                    )
        return definitions

    def is_feature_enabled(self, feature: str) -> bool:
        # Defaults carry values only, never feature switches
        return False

    def tweak_with(self, feature: str, variable: str) -> Optional[Tweak]:
        definition = self._definitions.get(feature, {}).get(variable)
        if definition is None:
            return None
        return Tweak(
            identifier=variable,
            title=definition.get(TITLE_KEY),
            group=definition.get(GROUP_KEY),
            value=definition[VALUE_KEY],
        )

    def active_variation(self, experiment: str) -> Optional[str]:
        return None

    @property
    def features(self) -> Dict[str, List[str]]:
        return {feature: list(variables) for feature, variables in self._definitions.items()}
