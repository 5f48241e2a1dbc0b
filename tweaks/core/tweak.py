"""
Tweak Data Model
================

Resolved tweak records and the provider priority scale.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Optional, Union

from .exceptions import UnsupportedValueError

TweakValue = Union[bool, int, float, str]

SUPPORTED_VALUE_TYPES = (bool, int, float, str)


class TweaksPriority(IntEnum):
    """Provider priority levels (higher numbers take precedence)."""
    P0 = 0     # Bundled defaults
    P1 = 1
    P2 = 2
    P3 = 3
    P4 = 4
    P5 = 5     # Remote experiments
    P6 = 6
    P7 = 7
    P8 = 8
    P9 = 9
    P10 = 10   # Local user overrides


@dataclass(frozen=True)
class Tweak:
    """A resolved tweak value with optional display metadata."""

    identifier: str
    title: Optional[str] = None
    group: Optional[str] = None
    value: Optional[TweakValue] = None

    @property
    def display_title(self) -> str:
        return self.title or self.identifier

    @property
    def can_be_displayed(self) -> bool:
        return self.title is not None

    @property
    def has_value(self) -> bool:
        return self.value is not None


def validate_tweak_value(value: Any) -> TweakValue:
    """
    Ensure a value is one of the supported primitive types.

    Args:
        value: Candidate tweak value

    Returns:
        The value unchanged

    Raises:
        UnsupportedValueError: If the value is not bool, int, float or str
    """
    if not isinstance(value, SUPPORTED_VALUE_TYPES):
        raise UnsupportedValueError(
            f"Unsupported tweak value type: {type(value).__name__}"
        )
    return value


def priority_value(priority: Union[TweaksPriority, int]) -> int:
    """Normalize a priority to a plain int for ordering."""
    return int(priority)
