"""
Provider Tests
==============

File defaults, local overrides and the remote experiment provider.
"""

import json
from unittest.mock import MagicMock

import pytest
import requests
import yaml

from tweaks.core.events import TWEAKS_DID_CHANGE
from tweaks.core.exceptions import ProviderLoadError, UnsupportedValueError
from tweaks.core.tweak import Tweak, TweaksPriority
from tweaks.providers.base import supports_mutation
from tweaks.providers.file_provider import FileTweaksProvider
from tweaks.providers.local_provider import LocalTweaksProvider
from tweaks.providers.remote_provider import RemoteTweaksProvider

from conftest import GENERAL, TAP_TO_CHANGE_VIEW_COLOR, UI_CUSTOMIZATION


def _count_events(bus):
    counter = {"count": 0}

    def handler():
        counter["count"] += 1

    bus.subscribe(TWEAKS_DID_CHANGE, handler)
    return counter


# ----------------------------------------------------------------------
# FileTweaksProvider
# ----------------------------------------------------------------------
def test_file_provider_reads_json_definitions(json_provider):
    tweak = json_provider.tweak_with(GENERAL, TAP_TO_CHANGE_VIEW_COLOR)

    assert tweak == Tweak(
        identifier=TAP_TO_CHANGE_VIEW_COLOR,
        title="Tap to change views color",
        group="General",
        value=True,
    )
    assert tweak.can_be_displayed
    assert json_provider.tweak_with(GENERAL, "missing") is None
    assert json_provider.is_feature_enabled(GENERAL) is False
    assert json_provider.active_variation("anything") is None
    assert not supports_mutation(json_provider)


def test_file_provider_reads_yaml_definitions(tmp_path):
    path = tmp_path / "defaults.yaml"
    path.write_text(yaml.safe_dump({"search": {"max_results": {"Value": 25}}}), encoding="utf-8")

    provider = FileTweaksProvider.from_file(path, priority=TweaksPriority.P1)

    assert provider.tweak_with("search", "max_results").value == 25
    assert provider.tweak_with("search", "max_results").display_title == "max_results"
    assert provider.features == {"search": ["max_results"]}
    assert provider.name == "defaults"


def test_file_provider_missing_file(tmp_path):
    with pytest.raises(ProviderLoadError):
        FileTweaksProvider.from_file(tmp_path / "nope.json")


def test_file_provider_malformed_json(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(ProviderLoadError):
        FileTweaksProvider.from_file(path)


def test_file_provider_unsupported_extension(tmp_path):
    path = tmp_path / "defaults.ini"
    path.write_text("[x]", encoding="utf-8")

    with pytest.raises(ProviderLoadError):
        FileTweaksProvider.from_file(path)


@pytest.mark.parametrize("definitions", [
    ["not", "a", "mapping"],
    {"feature": "not a mapping"},
    {"feature": {"variable": {"Title": "no value"}}},
    {"feature": {"variable": {"Value": [1, 2]}}},
])
def test_file_provider_rejects_invalid_definitions(definitions):
    with pytest.raises(ProviderLoadError):
        FileTweaksProvider(definitions)


# ----------------------------------------------------------------------
# LocalTweaksProvider
# ----------------------------------------------------------------------
def test_local_provider_set_and_delete_publish_changes(local_provider, event_bus):
    counter = _count_events(event_bus)

    local_provider.set_value("blue", UI_CUSTOMIZATION, "color")
    assert local_provider.tweak_with(UI_CUSTOMIZATION, "color").value == "blue"

    local_provider.delete_value(UI_CUSTOMIZATION, "color")
    assert local_provider.tweak_with(UI_CUSTOMIZATION, "color") is None

    assert counter["count"] == 2
    assert supports_mutation(local_provider)


def test_local_provider_delete_unknown_is_silent(local_provider, event_bus):
    counter = _count_events(event_bus)

    local_provider.delete_value("nothing", "here")

    assert counter["count"] == 0


def test_local_provider_persists_across_instances(tmp_path, event_bus):
    store = tmp_path / "nested" / "overrides.yaml"
    LocalTweaksProvider(store_path=store, event_bus=event_bus).set_value(3, "search", "page_size")

    reloaded = LocalTweaksProvider(store_path=store, event_bus=event_bus)

    assert reloaded.tweak_with("search", "page_size").value == 3
    assert yaml.safe_load(store.read_text(encoding="utf-8")) == {"search": {"page_size": 3}}


def test_local_provider_in_memory_without_path(event_bus):
    provider = LocalTweaksProvider(event_bus=event_bus)
    provider.set_value(1.5, "animations", "speed")

    assert provider.tweak_with("animations", "speed").value == 1.5
    assert provider.features == {"animations": ["speed"]}


def test_local_provider_rejects_unsupported_values(local_provider):
    with pytest.raises(UnsupportedValueError):
        local_provider.set_value({"nested": True}, UI_CUSTOMIZATION, "color")


def test_local_provider_clear(local_provider, event_bus):
    local_provider.set_value(True, "a", "b")
    counter = _count_events(event_bus)

    local_provider.clear()
    local_provider.clear()

    assert local_provider.features == {}
    assert counter["count"] == 1


def test_local_provider_failed_write_leaves_store_unchanged(local_provider, event_bus, tmp_path):
    local_provider.set_value("blue", UI_CUSTOMIZATION, "color")
    counter = _count_events(event_bus)
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory", encoding="utf-8")
    local_provider.store_path = blocker / "overrides.yaml"

    with pytest.raises(OSError):
        local_provider.set_value(3, "search", "page_size")
    with pytest.raises(OSError):
        local_provider.delete_value(UI_CUSTOMIZATION, "color")
    with pytest.raises(OSError):
        local_provider.clear()

    assert local_provider.tweak_with("search", "page_size") is None
    assert local_provider.tweak_with(UI_CUSTOMIZATION, "color").value == "blue"
    assert local_provider.features == {UI_CUSTOMIZATION: ["color"]}
    assert counter["count"] == 0


# ----------------------------------------------------------------------
# RemoteTweaksProvider
# ----------------------------------------------------------------------
REMOTE_PAYLOAD = {
    "features": {"new_onboarding": True, "dark_mode": False},
    "experiments": {"checkout_flow": "variant_b"},
    "tweaks": {UI_CUSTOMIZATION: {"display_red_view": True, "bad": [1]}},
}


def _session_returning(payload=None, exc=None):
    session = MagicMock(spec=requests.Session)
    if exc is not None:
        session.get.side_effect = exc
        return session
    response = MagicMock()
    response.raise_for_status.return_value = None
    if isinstance(payload, Exception):
        response.json.side_effect = payload
    else:
        response.json.return_value = payload
    session.get.return_value = response
    return session


def test_remote_provider_fetch_updates_snapshot(event_bus):
    session = _session_returning(REMOTE_PAYLOAD)
    provider = RemoteTweaksProvider(url="https://example.com/tweaks", event_bus=event_bus,
                                    session=session, headers={"X-Api-Key": "k"})
    counter = _count_events(event_bus)

    assert provider.fetch() is True

    session.get.assert_called_once_with(
        "https://example.com/tweaks", headers={"X-Api-Key": "k"}, timeout=10.0
    )
    assert provider.is_feature_enabled("new_onboarding") is True
    assert provider.is_feature_enabled("dark_mode") is False
    assert provider.active_variation("checkout_flow") == "variant_b"
    assert provider.tweak_with(UI_CUSTOMIZATION, "display_red_view").value is True
    assert provider.tweak_with(UI_CUSTOMIZATION, "bad") is None
    assert counter["count"] == 1
    assert provider.priority == TweaksPriority.P5


def test_remote_provider_keeps_snapshot_on_network_error(event_bus):
    provider = RemoteTweaksProvider(url="https://example.com/tweaks", event_bus=event_bus,
                                    session=_session_returning(REMOTE_PAYLOAD))
    provider.fetch()
    provider.session = _session_returning(exc=requests.ConnectionError("down"))

    assert provider.fetch() is False
    assert provider.last_fetch_ok is False
    assert provider.active_variation("checkout_flow") == "variant_b"


def test_remote_provider_rejects_invalid_json(event_bus):
    provider = RemoteTweaksProvider(url="https://example.com/tweaks", event_bus=event_bus,
                                    session=_session_returning(json.JSONDecodeError("bad", "", 0)))

    assert provider.fetch() is False
    assert provider.features == {}


def test_remote_provider_rejects_non_object_payload(event_bus):
    provider = RemoteTweaksProvider(event_bus=event_bus, session=_session_returning())
    counter = _count_events(event_bus)

    assert provider.apply_payload(["not", "an", "object"]) is False
    assert provider.apply_payload({"features": ["x"]}) is False
    assert counter["count"] == 0


def test_remote_provider_without_url_skips_fetch(event_bus):
    session = _session_returning(REMOTE_PAYLOAD)
    provider = RemoteTweaksProvider(event_bus=event_bus, session=session)

    assert provider.fetch() is False
    session.get.assert_not_called()
    assert not supports_mutation(provider)


def test_remote_provider_close_leaves_injected_session_open(event_bus):
    session = _session_returning(REMOTE_PAYLOAD)

    with RemoteTweaksProvider(event_bus=event_bus, session=session) as provider:
        provider.fetch()

    session.close.assert_not_called()


def test_remote_provider_closes_its_own_session(event_bus, monkeypatch):
    created = MagicMock(spec=requests.Session)
    monkeypatch.setattr(requests, "Session", lambda: created)

    provider = RemoteTweaksProvider(url="https://example.com/tweaks", event_bus=event_bus)
    provider.close()

    assert provider.session is created
    created.close.assert_called_once_with()
