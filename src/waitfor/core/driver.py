"""
Poll Driver — block until a condition is met.

One evaluation per tick, then sleep for whatever is left of the interval.
There is no timeout here: OR an ``Elapsed`` leaf into the tree to bound a wait.
"""

import logging
import time
from typing import Optional

from waitfor.core.events import CONDITION_MET, POLL_ATTEMPT, EventBus
from waitfor.formats import as_seconds

logger = logging.getLogger("waitfor.driver")


def wait(node, interval, bus: Optional[EventBus] = None) -> int:
    """Evaluate ``node`` every ``interval`` until it returns true.

    Args:
        node: anything with a non-blocking ``evaluate() -> bool``
            (a Condition or a tree Node).
        interval: seconds (float) or a ``timedelta``. An evaluation that takes
            longer than the interval is followed immediately by the next one.
        bus: optional EventBus that receives ``poll_attempt`` and
            ``condition_met`` events.

    Returns:
        The number of evaluations it took.
    """
    period = as_seconds(interval)
    if period < 0:
        raise ValueError(f"poll interval must be non-negative, got {period}")

    describe = getattr(node, "describe", None)
    label = describe() if describe else repr(node)
    logger.info(f"Waiting for {label} (every {period:g}s)")

    notify = bus is not None and bus.has_listeners()
    attempt = 0
    while True:
        attempt += 1
        start = time.monotonic()
        met = node.evaluate()
        spent = time.monotonic() - start

        logger.debug(
            f"Attempt {attempt}: {'met' if met else 'not met'} in {spent:.3f}s",
            extra={"event": POLL_ATTEMPT, "attempt": attempt, "result": met, "elapsed": round(spent, 4)},
        )
        if notify:
            bus.emit(POLL_ATTEMPT, attempt=attempt, met=met, elapsed=spent)

        if met:
            logger.info(
                f"Condition met after {attempt} attempt(s)",
                extra={"event": CONDITION_MET, "attempt": attempt, "condition": label},
            )
            if notify:
                bus.emit(CONDITION_MET, attempt=attempt)
            return attempt

        if period > spent:
            time.sleep(period - spent)
