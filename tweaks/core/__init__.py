"""
Core Module
===========

Tweak data model, change event bus and the provider coordinator.
"""

from .exceptions import (
    TweaksError,
    EmptyProviderListError,
    ProviderLoadError,
    UnsupportedValueError,
    ConfigurationError,
)
from .tweak import Tweak, TweakValue, TweaksPriority
from .events import ChangeEventBus, TWEAKS_DID_CHANGE, get_default_event_bus
from .coordinator import TweaksCoordinator, create_coordinator

__all__ = [
    'TweaksError',
    'EmptyProviderListError',
    'ProviderLoadError',
    'UnsupportedValueError',
    'ConfigurationError',
    'Tweak',
    'TweakValue',
    'TweaksPriority',
    'ChangeEventBus',
    'TWEAKS_DID_CHANGE',
    'get_default_event_bus',
    'TweaksCoordinator',
    'create_coordinator',
]
