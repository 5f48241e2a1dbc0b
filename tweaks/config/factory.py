"""
Coordinator Factory
===================

Builds providers and a coordinator from a configuration dict, as produced by
ConfigLoader or TweaksSettings.to_config().
"""

import logging
from typing import Any, Dict, List, Optional

from ..core.coordinator import TweaksCoordinator, create_coordinator
from ..core.events import ChangeEventBus
from ..core.exceptions import ConfigurationError
from ..providers.base import TweaksProvider
from ..providers.file_provider import FileTweaksProvider
from ..providers.local_provider import LocalTweaksProvider
from ..providers.remote_provider import RemoteTweaksProvider
from ..utils.logger import setup_logging

logger = logging.getLogger(__name__)

PROVIDER_TYPES = ('file', 'remote', 'local')


def build_provider(spec: Dict[str, Any], event_bus: Optional[ChangeEventBus] = None) -> TweaksProvider:
    """
    Create a single provider from its configuration entry.

    Args:
        spec: Provider entry ({"type": ..., "priority": ..., ...})
        event_bus: Bus handed to providers that publish changes

    Returns:
        Provider instance

    Raises:
        ConfigurationError: If the entry is invalid
    """
    if not isinstance(spec, dict):
        raise ConfigurationError(f"Provider entry must be a mapping, got {spec!r}")

    provider_type = spec.get('type')
    if provider_type not in PROVIDER_TYPES:
        raise ConfigurationError(
            f"Unknown provider type {provider_type!r}, expected one of {PROVIDER_TYPES}"
        )

    try:
        priority = int(spec['priority'])
    except KeyError:
        raise ConfigurationError(f"Provider '{provider_type}' has no priority")
    except (TypeError, ValueError):
        raise ConfigurationError(f"Provider '{provider_type}' has invalid priority {spec['priority']!r}")

    name = spec.get('name')

    if provider_type == 'file':
        if not spec.get('path'):
            raise ConfigurationError("File provider requires a 'path'")
        return FileTweaksProvider.from_file(spec['path'], priority=priority, name=name)

    if provider_type == 'remote':
        if not spec.get('url'):
            raise ConfigurationError("Remote provider requires a 'url'")
        provider = RemoteTweaksProvider(
            url=spec['url'],
            priority=priority,
            timeout=float(spec.get('timeout', 10.0)),
            event_bus=event_bus,
            headers=spec.get('headers'),
            name=name,
        )
        if spec.get('fetch_on_start', True):
            provider.fetch()
        return provider

    return LocalTweaksProvider(
        store_path=spec.get('path'),
        priority=priority,
        event_bus=event_bus,
        name=name,
    )


def build_providers(config: Dict[str, Any], event_bus: Optional[ChangeEventBus] = None) -> List[TweaksProvider]:
    """Create every provider listed under the 'providers' key."""
    entries = config.get('providers') or []
    if not isinstance(entries, list):
        raise ConfigurationError("'providers' must be a list")

    providers = [build_provider(entry, event_bus=event_bus) for entry in entries]
    logger.info(f"Built {len(providers)} provider(s) from configuration")
    return providers


def build_coordinator(config: Dict[str, Any],
                      event_bus: Optional[ChangeEventBus] = None) -> Optional[TweaksCoordinator]:
    """
    Create a coordinator from a configuration dict.

    A 'logging' section, when present, configures the package logger first.

    Returns:
        TweaksCoordinator, or None when the configuration lists no provider
    """
    if config.get('logging'):
        setup_logging(config)
    return create_coordinator(build_providers(config, event_bus=event_bus), event_bus=event_bus)
