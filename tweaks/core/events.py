"""
Change Event Bus
================

Synchronous publish/subscribe channel used by providers to announce that
their data changed. Events carry no payload: subscribers re-query for the
current values.
"""

import itertools
import logging
from typing import Callable, Dict, Optional, Tuple

logger = logging.getLogger(__name__)

TWEAKS_DID_CHANGE = "TweaksConfigurationDidChangeNotification"

EventHandler = Callable[[], None]


class ChangeEventBus:
    """
    In-memory event bus keyed by event name.

    Handlers run on the publishing call stack, in subscription order.
    A handler that raises is logged and skipped; delivery continues.
    """

    def __init__(self, name: str = "tweaks"):
        self.name = name
        self._handlers: Dict[int, Tuple[str, EventHandler]] = {}
        self._tokens = itertools.count(1)

    def subscribe(self, event_name: str, handler: EventHandler) -> int:
        """
        Subscribe a handler to an event.

        Args:
            event_name: Event to listen for
            handler: Zero-argument callable

        Returns:
            Token to pass to unsubscribe()
        """
        token = next(self._tokens)
        self._handlers[token] = (event_name, handler)
        logger.debug(f"[{self.name}] Subscribed token {token} to '{event_name}'")
        return token

    def unsubscribe(self, token: int) -> None:
        """Remove a subscription. Unknown tokens are ignored."""
        if self._handlers.pop(token, None) is not None:
            logger.debug(f"[{self.name}] Unsubscribed token {token}")

    def publish(self, event_name: str) -> int:
        """
        Deliver an event to every handler subscribed to it.

        Returns:
            Number of handlers invoked
        """
        handlers = [h for name, h in list(self._handlers.values()) if name == event_name]
        logger.debug(f"[{self.name}] Publishing '{event_name}' to {len(handlers)} handler(s)")

        for handler in handlers:
            try:
                handler()
            except Exception as e:
                logger.error(f"[{self.name}] Handler error for '{event_name}': {e}")
        return len(handlers)

    def subscriber_count(self, event_name: Optional[str] = None) -> int:
        if event_name is None:
            return len(self._handlers)
        return sum(1 for name, _ in self._handlers.values() if name == event_name)


_default_bus: Optional[ChangeEventBus] = None


def get_default_event_bus() -> ChangeEventBus:
    """Return the process-wide event bus, creating it on first use."""
    global _default_bus
    if _default_bus is None:
        _default_bus = ChangeEventBus(name="default")
    return _default_bus
