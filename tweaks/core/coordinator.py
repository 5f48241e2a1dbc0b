"""
Tweaks Coordinator
==================

Composes several ranked providers into one resolution surface:
1. Lookups scan providers by descending priority and return the first
   definitive answer.
2. Writes go to the highest-priority provider supporting mutation.
3. Change events published on the event bus are fanned out to every
   registered observer callback.
"""

import logging
import weakref
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from .events import ChangeEventBus, TWEAKS_DID_CHANGE, get_default_event_bus
from .exceptions import EmptyProviderListError
from .tweak import Tweak, TweakValue, priority_value
from ..providers.base import supports_mutation
from ..utils.logger import TweaksLogger

logger = logging.getLogger(__name__)

UpdateCallback = Callable[[], None]


class _ObserverEntry:
    """Registry slot: (possibly weak) references to an observer and its callback."""

    __slots__ = ("ref", "callback_ref")

    def __init__(self, ref: Callable[[], Any], callback_ref: Callable[[], Optional[UpdateCallback]]):
        self.ref = ref
        self.callback_ref = callback_ref

    @property
    def callback(self) -> Optional[UpdateCallback]:
        return self.callback_ref()


class TweaksCoordinator:
    """
    Resolves feature flags, tweaks and experiment variants across providers.

    Providers are sorted once at construction (stable, descending priority),
    so among equal priorities the first registered provider wins.
    """

    def __init__(self, providers: Sequence[Any], event_bus: Optional[ChangeEventBus] = None):
        """
        Initialize the coordinator.

        Args:
            providers: Non-empty sequence of TweaksProvider instances
            event_bus: Bus carrying change events (process-wide bus if None)

        Raises:
            EmptyProviderListError: If no provider is given
        """
        if not providers:
            raise EmptyProviderListError("TweaksCoordinator requires at least one provider")

        self._providers: Tuple[Any, ...] = tuple(
            sorted(providers, key=lambda p: priority_value(p.priority), reverse=True)
        )
        self._observers: Dict[int, _ObserverEntry] = {}
        self._log = TweaksLogger(__name__)

        self.event_bus = event_bus or get_default_event_bus()
        self._subscription: Optional[int] = self.event_bus.subscribe(
            TWEAKS_DID_CHANGE, self._configuration_did_change
        )

        logger.info(
            "TweaksCoordinator initialized with providers: "
            + ", ".join(f"{_provider_name(p)}({priority_value(p.priority)})" for p in self._providers)
        )

    @property
    def providers(self) -> Tuple[Any, ...]:
        return self._providers

    # ------------------------------------------------------------------
    # Lookup resolution
    # ------------------------------------------------------------------
    def tweak_with(self, feature: str, variable: str) -> Optional[Tweak]:
        """
        Return the tweak from the highest-priority provider defining it.

        Args:
            feature: Feature identifier
            variable: Variable identifier

        Returns:
            Winning Tweak, or None if no provider has a value
        """
        for provider in self._providers:
            tweak = self._query(provider, "tweak_with", feature, variable)
            if tweak is not None and tweak.value is not None:
                self._log.log_resolution(feature, variable, tweak.value, _provider_name(provider))
                return tweak
        self._log.log_resolution(feature, variable, None)
        return None

    def value_for_tweak(self, feature: str, variable: str) -> Optional[TweakValue]:
        tweak = self.tweak_with(feature, variable)
        return tweak.value if tweak is not None else None

    def is_feature_enabled(self, feature: str) -> bool:
        for provider in self._providers:
            if self._query(provider, "is_feature_enabled", feature):
                return True
        return False

    def active_variation(self, experiment: str) -> Optional[str]:
        for provider in self._providers:
            variation = self._query(provider, "active_variation", experiment)
            if variation is not None:
                return variation
        return None

    def features(self) -> Dict[str, List[str]]:
        """Union of the features and variables known to all providers."""
        merged: Dict[str, List[str]] = {}
        for provider in self._providers:
            for feature, variables in (getattr(provider, "features", None) or {}).items():
                known = merged.setdefault(feature, [])
                known.extend(v for v in variables if v not in known)
        return merged

    def _query(self, provider: Any, method: str, *args: str) -> Any:
        # A broken provider answers "absent" instead of failing the lookup
        try:
            return getattr(provider, method)(*args)
        except Exception as e:
            logger.warning(f"Provider {_provider_name(provider)} failed in {method}{args}: {e}")
            return None

    # ------------------------------------------------------------------
    # Mutable provider selection
    # ------------------------------------------------------------------
    def top_customizable_configuration(self) -> Optional[Any]:
        """Return the highest-priority provider supporting mutation, or None."""
        for provider in self._providers:
            if supports_mutation(provider):
                return provider
        return None

    # ------------------------------------------------------------------
    # Observer registry
    # ------------------------------------------------------------------
    def register_for_updates(self, observer: Any, callback: UpdateCallback) -> None:
        """
        Register a callback to run whenever any provider changes.

        Observers are keyed by identity. Registering the same observer again
        replaces its callback. Observers supporting weak references are
        forgotten automatically once collected; others must be deregistered.
        A bound method of the observer itself (``observer.refresh``) is held
        weakly. Any other callback is held strongly, so a closure or a
        method of another object that references the observer keeps it
        alive until it is deregistered.

        Args:
            observer: Object owning the subscription
            callback: Zero-argument callable
        """
        key = id(observer)
        entry = self._observers.get(key)
        if entry is not None and entry.ref() is observer:
            entry.callback_ref = self._callback_ref(observer, callback, weak=not isinstance(entry.ref, _StrongRef))
            return

        try:
            ref = weakref.ref(observer, self._make_reaper(key))
            weak = True
        except TypeError:
            ref = _StrongRef(observer)
            weak = False
        self._observers[key] = _ObserverEntry(ref, self._callback_ref(observer, callback, weak))
        logger.debug(f"Registered observer {type(observer).__name__} ({len(self._observers)} total)")

    @staticmethod
    def _callback_ref(observer: Any, callback: UpdateCallback, weak: bool) -> Callable[[], Optional[UpdateCallback]]:
        if weak and getattr(callback, "__self__", None) is observer and hasattr(callback, "__func__"):
            return weakref.WeakMethod(callback)
        return _StrongRef(callback)

    def deregister_from_updates(self, observer: Any) -> None:
        key = id(observer)
        entry = self._observers.get(key)
        if entry is not None and entry.ref() is observer:
            del self._observers[key]
            logger.debug(f"Deregistered observer {type(observer).__name__}")

    def observer_count(self) -> int:
        return len(self._observers)

    def _make_reaper(self, key: int) -> Callable[[Any], None]:
        registry = weakref.ref(self)

        def reap(dead_ref: Any) -> None:
            coordinator = registry()
            if coordinator is None:
                return
            entry = coordinator._observers.get(key)
            if entry is not None and entry.ref is dead_ref:
                del coordinator._observers[key]

        return reap

    def _configuration_did_change(self) -> None:
        entries = list(self._observers.items())
        self._log.log_notification(len(entries))
        for key, entry in entries:
            # Skip observers deregistered by an earlier callback in this round
            if self._observers.get(key) is not entry:
                continue
            callback = entry.callback
            if callback is None:
                continue
            try:
                callback()
            except Exception as e:
                self._log.log_error("ObserverCallback", str(e), callback=repr(callback))

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def close(self) -> None:
        """Unsubscribe from the event bus and drop all observers."""
        if self._subscription is not None:
            self.event_bus.unsubscribe(self._subscription)
            self._subscription = None
        self._observers.clear()

    def __enter__(self) -> "TweaksCoordinator":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


class _StrongRef:
    """Callable mimicking weakref.ref for objects that cannot be weakly referenced."""

    __slots__ = ("_obj",)

    def __init__(self, obj: Any):
        self._obj = obj

    def __call__(self) -> Any:
        return self._obj


def create_coordinator(
    providers: Sequence[Any],
    event_bus: Optional[ChangeEventBus] = None,
) -> Optional[TweaksCoordinator]:
    """
    Build a coordinator, returning None instead of raising for an empty list.

    Args:
        providers: Providers to compose
        event_bus: Optional event bus

    Returns:
        TweaksCoordinator or None
    """
    if not providers:
        logger.warning("Cannot create TweaksCoordinator from an empty provider list")
        return None
    return TweaksCoordinator(providers, event_bus=event_bus)


def _provider_name(provider: Any) -> str:
    return getattr(provider, "name", None) or type(provider).__name__
