"""
Providers Module
================

Ranked tweak sources consumed by the coordinator.
"""

from .base import TweaksProvider, MutableTweaksProvider, supports_mutation
from .file_provider import FileTweaksProvider
from .local_provider import LocalTweaksProvider
from .remote_provider import RemoteTweaksProvider

__all__ = [
    'TweaksProvider',
    'MutableTweaksProvider',
    'supports_mutation',
    'FileTweaksProvider',
    'LocalTweaksProvider',
    'RemoteTweaksProvider',
]
