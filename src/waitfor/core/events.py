"""
Poll Events — synchronous hooks fired by the wait driver.

``core.driver.wait`` emits one ``poll_attempt`` per evaluation of the
condition tree and a single ``condition_met`` just before it returns.
Handlers run inline on the polling thread. Their time is not deducted
from the interval, since the driver measures ``spent`` around ``evaluate``
alone. The CLI subscribes in ``-v`` mode to print per-attempt
progress; library callers can hook the same events for metrics or logging.

Payloads (keyword arguments passed to each handler):

    poll_attempt    attempt (int, 1-based), met (bool), elapsed (float, s)
    condition_met   attempt (int)

A failing handler is logged and never interrupts the wait.
"""

import logging
from typing import Callable, Dict, List

logger = logging.getLogger("waitfor.events")

POLL_ATTEMPT = "poll_attempt"
CONDITION_MET = "condition_met"

POLL_EVENTS = (POLL_ATTEMPT, CONDITION_MET)


class EventBus:
    """Handler registry for the poll events above."""

    def __init__(self):
        self._handlers: Dict[str, List[Callable]] = {}

    def on(self, event_type: str, handler: Callable):
        """Subscribe ``handler`` to one of ``POLL_EVENTS``.

        Unknown names are rejected up front; a typo would otherwise leave
        a handler that silently never fires.
        """
        if event_type not in POLL_EVENTS:
            raise ValueError(f"unknown poll event '{event_type}'")
        self._handlers.setdefault(event_type, []).append(handler)

    def emit(self, event_type: str, **payload):
        """Call the handlers for ``event_type`` in subscription order."""
        for handler in self._handlers.get(event_type, []):
            try:
                handler(**payload)
            except Exception as e:
                logger.error(f"{event_type} handler failed: {e}", exc_info=True)

    def has_listeners(self) -> bool:
        return any(self._handlers.values())

    def clear(self):
        """Drop every subscription."""
        self._handlers.clear()
