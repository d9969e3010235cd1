"""
Primitive Conditions — the leaves of every wait.

Each condition answers one question about the world with ``evaluate()``.
Transition detectors (``Update``, ``FileSize``) remember what they saw on the
previous call, so negating them switches between "fire on change" and "fire
on stability" rather than complementing a single read.

Observation failures never raise: Update, UpdateSince and FileSize treat an
unreadable file as "met" so a wait can't hang on a file that went away.
"""

import logging
import time
from datetime import timedelta
from typing import Callable, Optional, Union

from waitfor.conditions import probes
from waitfor.formats import as_seconds

logger = logging.getLogger("waitfor.conditions")

Seconds = Union[float, int, timedelta]


class Condition:
    """Base class for primitive conditions."""
    name: str = "condition"

    def __init__(self, negated: bool = False):
        self.negated = negated

    def evaluate(self) -> bool:
        raise NotImplementedError

    def negate(self) -> "Condition":
        """Flip the negation flag in place and return this same condition."""
        self.negated = not self.negated
        return self

    def describe(self) -> str:
        text = f"{self.name}({self._subject()})"
        return f"not {text}" if self.negated else text

    def _subject(self) -> str:
        return ""

    def wait(self, interval: Seconds) -> int:
        from waitfor.core.driver import wait
        return wait(self, interval)

    def __and__(self, other):
        from waitfor.conditions.tree import Node, both
        if not isinstance(other, (Condition, Node)):
            return NotImplemented
        return both(self, other)

    def __or__(self, other):
        from waitfor.conditions.tree import Node, either
        if not isinstance(other, (Condition, Node)):
            return NotImplemented
        return either(self, other)

    def __invert__(self) -> "Condition":
        return self.negate()

    def __str__(self) -> str:
        return self.describe()


class Elapsed(Condition):
    """Met once the monotonic clock has passed ``target``.

    Negated, it is met only *until* ``target``.
    """
    name = "elapsed"

    def __init__(self, target: float, negated: bool = False):
        super().__init__(negated)
        self.target = target

    @classmethod
    def after(cls, duration: Seconds) -> "Elapsed":
        """Elapsed condition that completes ``duration`` from now."""
        return cls(time.monotonic() + as_seconds(duration))

    def evaluate(self) -> bool:
        now = time.monotonic()
        if self.negated:
            return self.target >= now
        return self.target < now

    def _subject(self) -> str:
        remaining = self.target - time.monotonic()
        return f"{remaining:+.1f}s"


class Exists(Condition):
    name = "exists"

    def __init__(self, path: str, negated: bool = False):
        super().__init__(negated)
        self.path = str(path)

    def evaluate(self) -> bool:
        return probes.path_exists(self.path) != self.negated

    def _subject(self) -> str:
        return self.path


class Update(Condition):
    """Met when the file's modification time changes.

    The first call only records a baseline. Negated, it is met once two
    consecutive reads agree (the file stopped changing).
    """
    name = "updated"

    def __init__(self, path: str, negated: bool = False):
        super().__init__(negated)
        self.path = str(path)
        self.last_modified: Optional[int] = None

    def evaluate(self) -> bool:
        current = probes.modified_time(self.path)
        if current is None:
            logger.debug(f"{self.describe()}: no mtime, treating as met")
            return True

        if self.last_modified is None:
            self.last_modified = current
            return False

        changed = self.last_modified != current
        if self.negated:
            if changed:
                # still changing; move the baseline forward
                self.last_modified = current
                return False
            return True
        # firing doesn't advance the baseline
        return changed

    def _subject(self) -> str:
        return self.path


class UpdateSince(Condition):
    """Met while the file was modified less than ``trigger`` ago.

    Negated, it is met once the file has been quiet for at least ``trigger``.
    Stateless: every call re-reads the file's metadata.
    """
    name = "updated_within"

    def __init__(self, path: str, trigger: Seconds, negated: bool = False):
        super().__init__(negated)
        self.path = str(path)
        self.trigger = as_seconds(trigger)

    def evaluate(self) -> bool:
        mtime_ns = probes.modified_time(self.path)
        if mtime_ns is None:
            logger.debug(f"{self.describe()}: no mtime, treating as met")
            return True

        since_ns = time.time_ns() - mtime_ns
        if since_ns < 0:
            logger.debug(f"{self.describe()}: mtime is in the future, treating as met")
            return True

        recently_updated = since_ns / 1e9 < self.trigger
        return recently_updated != self.negated

    def _subject(self) -> str:
        return f"{self.path}, {self.trigger:g}s"


class TcpHost(Condition):
    """Met when a TCP connection to ``host:port`` is accepted."""
    name = "tcp"

    def __init__(self, host: str, negated: bool = False, timeout: Optional[float] = None):
        super().__init__(negated)
        self.host = host
        self.timeout = timeout

    def evaluate(self) -> bool:
        return probes.tcp_connect(self.host, self.timeout) != self.negated

    def _subject(self) -> str:
        return self.host


class HttpGet(Condition):
    """Met when a GET to ``url`` answers with exactly ``status``.

    A request that gets no response at all has no status, which never
    matches: not met, or met when negated.
    """
    name = "http"

    def __init__(
        self,
        url: str,
        status: int = 200,
        negated: bool = False,
        timeout: float = probes.DEFAULT_HTTP_TIMEOUT,
    ):
        super().__init__(negated)
        self.url = url
        self.status = status
        self.timeout = timeout

    def evaluate(self) -> bool:
        got = probes.http_status(self.url, self.timeout)
        return (got == self.status) != self.negated

    def _subject(self) -> str:
        return f"{self.status}, {self.url}"


class FileSize(Condition):
    """Met when the file's size differs from the last observed size.

    Negated, it is met when two consecutive reads report the same size.
    Nothing is implied about the direction of change.
    """
    name = "size_changed"

    def __init__(self, path: str, negated: bool = False):
        super().__init__(negated)
        self.path = str(path)
        self.last_size: Optional[int] = None

    def evaluate(self) -> bool:
        current = probes.file_size(self.path)
        if current is None:
            logger.debug(f"{self.describe()}: no size, treating as met")
            return True

        prior = self.last_size
        if prior is not None:
            if not self.negated and prior != current:
                return True
            if self.negated and prior == current:
                return True

        self.last_size = current
        return False

    def _subject(self) -> str:
        return self.path


class Custom(Condition):
    """Met when a caller-supplied zero-argument probe returns true.

    Exceptions raised by the probe propagate.
    """
    name = "custom"

    def __init__(self, probe: Callable[[], bool], negated: bool = False):
        super().__init__(negated)
        self.probe = probe

    def evaluate(self) -> bool:
        return bool(self.probe()) != self.negated

    def _subject(self) -> str:
        return getattr(self.probe, "__name__", repr(self.probe))
