"""
Local Tweaks Provider
=====================

User-editable override store. Values live in memory and, when a path is
given, are persisted to a YAML file after every mutation.
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional, Union

import yaml

from ..core.events import ChangeEventBus
from ..core.tweak import Tweak, TweakValue, TweaksPriority, validate_tweak_value
from ..utils.logger import TweaksLogger
from .base import MutableTweaksProvider, TweaksProvider

logger = logging.getLogger(__name__)


class LocalTweaksProvider(TweaksProvider, MutableTweaksProvider):
    """
    Mutable key/value provider for local overrides.
    """

    def __init__(self,
                 store_path: Optional[Union[str, Path]] = None,
                 priority: Union[TweaksPriority, int] = TweaksPriority.P10,
                 event_bus: Optional[ChangeEventBus] = None,
                 name: Optional[str] = None):
        """
        Initialize local override store.

        Args:
            store_path: YAML file backing the store (in-memory if None)
            priority: Provider priority
            event_bus: Bus to publish change events on (process-wide if None)
            name: Provider name for logging
        """
        super().__init__(priority, name or "local")
        self.event_bus = event_bus
        self.store_path = Path(store_path) if store_path else None
        self._values: Dict[str, Dict[str, TweakValue]] = self._load()
        self._log = TweaksLogger(__name__)

    # ------------------------------------------------------------------
    def _load(self) -> Dict[str, Dict[str, TweakValue]]:
        if self.store_path is None or not self.store_path.exists():
            return {}
        try:
            with self.store_path.open('r', encoding='utf-8') as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logger.error(f"Failed to read local overrides from {self.store_path}: {e}")
            raise

        if not isinstance(data, dict):
            logger.warning(f"Ignoring malformed local overrides in {self.store_path}")
            return {}
        return {
            feature: dict(variables)
            for feature, variables in data.items()
            if isinstance(variables, dict)
        }

    def _commit(self, values: Dict[str, Dict[str, TweakValue]]) -> None:
        # Persist first so memory never serves a value the store rejected
        if self.store_path is not None:
            try:
                self.store_path.parent.mkdir(parents=True, exist_ok=True)
                with self.store_path.open('w', encoding='utf-8') as f:
                    yaml.safe_dump(values, f, default_flow_style=False)
            except OSError as e:
                logger.error(f"Failed to write local overrides to {self.store_path}: {e}")
                raise
        self._values = values

    def _copy_values(self) -> Dict[str, Dict[str, TweakValue]]:
        return {feature: dict(variables) for feature, variables in self._values.items()}

    # ------------------------------------------------------------------
    def is_feature_enabled(self, feature: str) -> bool:
        return False

    def tweak_with(self, feature: str, variable: str) -> Optional[Tweak]:
        value = self._values.get(feature, {}).get(variable)
        if value is None:
            return None
        return Tweak(identifier=variable, value=value)

    def active_variation(self, experiment: str) -> Optional[str]:
        return None

    @property
    def features(self) -> Dict[str, List[str]]:
        return {feature: list(variables) for feature, variables in self._values.items()}

    # ------------------------------------------------------------------
    def set_value(self, value: TweakValue, feature: str, variable: str) -> None:
        """
        Store an override and announce the change.

        Raises:
            UnsupportedValueError: If value is not bool, int, float or str
            OSError: If the store file cannot be written (the store is left unchanged)
        """
        validate_tweak_value(value)
        values = self._copy_values()
        values.setdefault(feature, {})[variable] = value
        self._commit(values)
        self._log.log_write(feature, variable, value, self.name)
        self.notify_change()

    def delete_value(self, feature: str, variable: str) -> None:
        if variable not in self._values.get(feature, {}):
            return
        values = self._copy_values()
        del values[feature][variable]
        if not values[feature]:
            del values[feature]
        self._commit(values)
        self._log.log_write(feature, variable, None, self.name)
        self.notify_change()

    def clear(self) -> None:
        """Remove every override."""
        if not self._values:
            return
        self._commit({})
        logger.info("Local overrides cleared")
        self.notify_change()
