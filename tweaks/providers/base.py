"""
Provider Base Module
====================

Capability contract shared by every tweaks provider. Read access is
required; mutation is an optional capability added with the
MutableTweaksProvider mixin.
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Union
import logging

from ..core.events import ChangeEventBus, TWEAKS_DID_CHANGE, get_default_event_bus
from ..core.tweak import Tweak, TweakValue, TweaksPriority

logger = logging.getLogger(__name__)


class TweaksProvider(ABC):
    """
    Abstract base class for ranked tweak sources.

    Subclasses answer feature, tweak and experiment queries. Returning
    False or None means the provider has no opinion.
    """

    def __init__(self, priority: Union[TweaksPriority, int], name: Optional[str] = None):
        """
        Initialize base provider.

        Args:
            priority: Provider priority (higher wins)
            name: Human-readable name used in log messages
        """
        self.priority = priority
        self.name = name or type(self).__name__

    @abstractmethod
    def is_feature_enabled(self, feature: str) -> bool:
        """Return True if this provider explicitly enables the feature."""

    @abstractmethod
    def tweak_with(self, feature: str, variable: str) -> Optional[Tweak]:
        """Return the tweak for (feature, variable), or None."""

    @abstractmethod
    def active_variation(self, experiment: str) -> Optional[str]:
        """Return the active variant name for an experiment, or None."""

    @property
    def features(self) -> Dict[str, List[str]]:
        """Known feature names mapped to their variable names."""
        return {}

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, priority={int(self.priority)})"


class MutableTweaksProvider(ABC):
    """
    Mutation capability mixin.

    Implementations persist the change first, then call notify_change() so
    subscribers of the event bus see the new state.
    """

    event_bus: Optional[ChangeEventBus] = None

    @abstractmethod
    def set_value(self, value: TweakValue, feature: str, variable: str) -> None:
        """Store a value for (feature, variable)."""

    @abstractmethod
    def delete_value(self, feature: str, variable: str) -> None:
        """Remove the stored value for (feature, variable)."""

    def notify_change(self) -> None:
        bus = self.event_bus or get_default_event_bus()
        bus.publish(TWEAKS_DID_CHANGE)


def supports_mutation(provider: TweaksProvider) -> bool:
    return isinstance(provider, MutableTweaksProvider)
