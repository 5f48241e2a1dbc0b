"""
Tweaks Exceptions
=================

Error types raised by the tweaks package.
"""


class TweaksError(Exception):
    """Base class for all tweaks errors."""


class EmptyProviderListError(TweaksError, ValueError):
    """Raised when a coordinator is built without any provider."""


class ProviderLoadError(TweaksError):
    """Raised when a provider cannot load its backing data."""


class UnsupportedValueError(TweaksError, TypeError):
    """Raised when a tweak value is not a supported primitive."""


class ConfigurationError(TweaksError):
    """Raised for invalid configuration files or settings."""
