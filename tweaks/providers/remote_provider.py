"""
Remote Tweaks Provider
======================

Read-only provider backed by a remote experiment service. Network I/O only
happens in fetch(); lookups always read the last successfully fetched
snapshot, so the coordinator never blocks on the network.

Payload format (every section optional):

    {
        "features": {"new_onboarding": true},
        "experiments": {"checkout_flow": "variant_b"},
        "tweaks": {"ui_customization": {"display_red_view": true}}
    }
"""

import logging
from typing import Any, Dict, List, Optional, Union

import requests

from ..core.events import ChangeEventBus, TWEAKS_DID_CHANGE, get_default_event_bus
from ..core.tweak import SUPPORTED_VALUE_TYPES, Tweak, TweaksPriority
from .base import TweaksProvider

logger = logging.getLogger(__name__)


class RemoteTweaksProvider(TweaksProvider):
    """
    Experiment values fetched over HTTP.
    """

    def __init__(self,
                 url: Optional[str] = None,
                 priority: Union[TweaksPriority, int] = TweaksPriority.P5,
                 timeout: float = 10.0,
                 event_bus: Optional[ChangeEventBus] = None,
                 session: Optional[requests.Session] = None,
                 headers: Optional[Dict[str, str]] = None,
                 name: Optional[str] = None):
        """
        Initialize remote provider.

        Args:
            url: Endpoint returning the experiment payload as JSON
            priority: Provider priority
            timeout: Request timeout in seconds
            event_bus: Bus to publish change events on (process-wide if None)
            session: Optional requests session (shared connection pool)
            headers: Extra request headers, e.g. an API key
            name: Provider name for logging
        """
        super().__init__(priority, name or "remote")
        self.url = url
        self.timeout = timeout
        self.event_bus = event_bus
        # Only a session created here is closed by close()
        self._owns_session = session is None
        self.session = session or requests.Session()
        self.headers = headers or {}

        self._features: Dict[str, bool] = {}
        self._experiments: Dict[str, str] = {}
        self._tweaks: Dict[str, Dict[str, Any]] = {}
        self.last_fetch_ok: Optional[bool] = None

    def fetch(self) -> bool:
        """
        Fetch the latest payload and publish a change event on success.

        Returns:
            True if the snapshot was refreshed
        """
        if not self.url:
            logger.debug(f"{self.name}: no URL configured, skipping fetch")
            return False

        try:
            response = self.session.get(self.url, headers=self.headers, timeout=self.timeout)
            response.raise_for_status()
            payload = response.json()
        except requests.RequestException as e:
            logger.error(f"{self.name}: failed to fetch {self.url}: {e}")
            self.last_fetch_ok = False
            return False
        except ValueError as e:
            logger.error(f"{self.name}: invalid JSON from {self.url}: {e}")
            self.last_fetch_ok = False
            return False

        self.last_fetch_ok = self.apply_payload(payload)
        return self.last_fetch_ok

    def apply_payload(self, payload: Any) -> bool:
        """
        Replace the snapshot with an already-fetched payload.

        Returns:
            True if the payload was accepted
        """
        if not isinstance(payload, dict):
            logger.error(f"{self.name}: payload must be an object, got {type(payload).__name__}")
            return False

        features = payload.get('features') or {}
        experiments = payload.get('experiments') or {}
        tweaks = payload.get('tweaks') or {}
        if not all(isinstance(section, dict) for section in (features, experiments, tweaks)):
            logger.error(f"{self.name}: payload sections must be objects")
            return False

        self._features = {str(k): v is True for k, v in features.items()}
        self._experiments = {str(k): str(v) for k, v in experiments.items() if v is not None}
        self._tweaks = {
            str(feature): {
                str(variable): value
                for variable, value in variables.items()
                if isinstance(value, SUPPORTED_VALUE_TYPES)
            }
            for feature, variables in tweaks.items()
            if isinstance(variables, dict)
        }

        logger.info(
            f"{self.name}: snapshot updated - features: {len(self._features)}, "
            f"experiments: {len(self._experiments)}, "
            f"tweaks: {sum(len(v) for v in self._tweaks.values())}"
        )
        (self.event_bus or get_default_event_bus()).publish(TWEAKS_DID_CHANGE)
        return True

    def is_feature_enabled(self, feature: str) -> bool:
        return self._features.get(feature, False)

    def tweak_with(self, feature: str, variable: str) -> Optional[Tweak]:
        value = self._tweaks.get(feature, {}).get(variable)
        if value is None:
            return None
        return Tweak(identifier=variable, value=value)

    def active_variation(self, experiment: str) -> Optional[str]:
        return self._experiments.get(experiment)

    @property
    def features(self) -> Dict[str, List[str]]:
        return {feature: list(variables) for feature, variables in self._tweaks.items()}

    def close(self) -> None:
        """Release the HTTP session if this provider created it."""
        if self._owns_session:
            self.session.close()
            logger.debug(f"{self.name}: session closed")

    def __enter__(self) -> "RemoteTweaksProvider":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
