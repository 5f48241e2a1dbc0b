"""
Utilities Module
================

Contains utility functions and helper classes.
"""

from .logger import setup_logging, TweaksLogger

__all__ = [
    'setup_logging',
    'TweaksLogger',
]
