"""
Shared pytest fixtures for the tweaks test suite.
"""

import json
import logging
from typing import Dict, List, Optional

import pytest

from tweaks.core.events import ChangeEventBus
from tweaks.core.tweak import Tweak, TweaksPriority
from tweaks.providers.base import TweaksProvider
from tweaks.providers.file_provider import FileTweaksProvider
from tweaks.providers.local_provider import LocalTweaksProvider

UI_CUSTOMIZATION = "ui_customization"
GENERAL = "general"

DISPLAY_RED_VIEW = "display_red_view"
DISPLAY_YELLOW_VIEW = "display_yellow_view"
DISPLAY_GREEN_VIEW = "display_green_view"
GREET_ON_APP_DID_BECOME_ACTIVE = "greet_on_app_did_become_active"
TAP_TO_CHANGE_VIEW_COLOR = "tap_to_change_view_color"

TEST_CONFIGURATION = {
    UI_CUSTOMIZATION: {
        DISPLAY_RED_VIEW: {"Title": "Display Red View", "Group": "UI", "Value": False},
        DISPLAY_YELLOW_VIEW: {"Title": "Display Yellow View", "Group": "UI", "Value": True},
        DISPLAY_GREEN_VIEW: {"Title": "Display Green View", "Group": "UI", "Value": True},
        GREET_ON_APP_DID_BECOME_ACTIVE: {"Title": "Greet on app launch", "Value": False},
    },
    GENERAL: {
        TAP_TO_CHANGE_VIEW_COLOR: {"Title": "Tap to change views color", "Group": "General", "Value": True},
    },
}


class MockRemoteProvider(TweaksProvider):
    """Read-only provider standing in for a remote experiment service."""

    def __init__(self,
                 known_values: Optional[Dict[str, object]] = None,
                 enabled_features: Optional[List[str]] = None,
                 variations: Optional[Dict[str, str]] = None,
                 priority=TweaksPriority.P5,
                 name: str = "mock-remote"):
        super().__init__(priority, name)
        self.known_values = known_values if known_values is not None else {
            DISPLAY_RED_VIEW: True,
            DISPLAY_YELLOW_VIEW: False,
            DISPLAY_GREEN_VIEW: False,
            GREET_ON_APP_DID_BECOME_ACTIVE: True,
        }
        self.enabled_features = enabled_features or []
        self.variations = variations or {}
        self.calls: List[str] = []

    def is_feature_enabled(self, feature):
        self.calls.append(f"is_feature_enabled:{feature}")
        return feature in self.enabled_features

    def tweak_with(self, feature, variable):
        self.calls.append(f"tweak_with:{feature}.{variable}")
        if variable not in self.known_values:
            return None
        return Tweak(identifier=variable, value=self.known_values[variable])

    def active_variation(self, experiment):
        self.calls.append(f"active_variation:{experiment}")
        return self.variations.get(experiment)


@pytest.fixture
def event_bus():
    return ChangeEventBus(name="test")


@pytest.fixture
def defaults_path(tmp_path):
    path = tmp_path / "test_configuration.json"
    path.write_text(json.dumps(TEST_CONFIGURATION), encoding="utf-8")
    return path


@pytest.fixture
def json_provider(defaults_path):
    return FileTweaksProvider.from_file(defaults_path, priority=TweaksPriority.P0)


@pytest.fixture
def local_provider(tmp_path, event_bus):
    return LocalTweaksProvider(
        store_path=tmp_path / "overrides.yaml",
        priority=TweaksPriority.P10,
        event_bus=event_bus,
    )


@pytest.fixture
def mock_remote():
    return MockRemoteProvider()


@pytest.fixture(autouse=True)
def reset_package_logging():
    # setup_logging() changes the shared 'tweaks' logger; undo it per test
    package_logger = logging.getLogger("tweaks")
    handlers, level = package_logger.handlers[:], package_logger.level
    yield
    for handler in package_logger.handlers[:]:
        if handler not in handlers:
            package_logger.removeHandler(handler)
            handler.close()
    package_logger.setLevel(level)
