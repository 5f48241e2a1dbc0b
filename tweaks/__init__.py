"""
Tweaks - Ranked Feature Flag Resolution
=======================================

Resolves feature flags, tweak values and experiment variants across
multiple ranked configuration providers.

Modules:
- core: Tweak model, change event bus and the coordinator
- providers: File defaults, remote experiments and local overrides
- config: YAML/environment configuration and the coordinator factory
- utils: Logging utilities
"""

__version__ = "1.0.0"
__author__ = "Tweaks Team"

from .core.exceptions import (
    TweaksError,
    EmptyProviderListError,
    ProviderLoadError,
    UnsupportedValueError,
    ConfigurationError,
)
from .core.tweak import Tweak, TweaksPriority
from .core.events import ChangeEventBus, TWEAKS_DID_CHANGE, get_default_event_bus
from .core.coordinator import TweaksCoordinator, create_coordinator
from .providers import (
    TweaksProvider,
    MutableTweaksProvider,
    FileTweaksProvider,
    LocalTweaksProvider,
    RemoteTweaksProvider,
)
from .config import ConfigLoader, TweaksSettings, build_coordinator
from .utils.logger import setup_logging, TweaksLogger

__all__ = [
    "TweaksError",
    "EmptyProviderListError",
    "ProviderLoadError",
    "UnsupportedValueError",
    "ConfigurationError",
    "Tweak",
    "TweaksPriority",
    "ChangeEventBus",
    "TWEAKS_DID_CHANGE",
    "get_default_event_bus",
    "TweaksCoordinator",
    "create_coordinator",
    "TweaksProvider",
    "MutableTweaksProvider",
    "FileTweaksProvider",
    "LocalTweaksProvider",
    "RemoteTweaksProvider",
    "ConfigLoader",
    "TweaksSettings",
    "build_coordinator",
    "setup_logging",
    "TweaksLogger",
]
