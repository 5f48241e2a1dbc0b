"""Configuration package.

Provides the YAML ConfigLoader, environment settings and the coordinator factory.
"""
from .config_loader import ConfigLoader  # noqa: F401
from .settings import TweaksSettings  # noqa: F401
from .factory import build_provider, build_providers, build_coordinator  # noqa: F401
