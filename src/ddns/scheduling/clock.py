"""Time sources for the dispatcher."""

import threading
import time
from datetime import datetime
from typing import Protocol


class Clock(Protocol):
    """What the dispatch loop needs from time.

    ``monotonic`` drives scheduling decisions, ``now`` is only used to label
    occurrences with wall-clock times.
    """

    def monotonic(self) -> float: ...

    def now(self) -> datetime: ...

    def wait(self, timeout: float, event: threading.Event) -> bool:
        """Block up to ``timeout`` seconds. Return True if ``event`` was set."""
        ...


class SystemClock:
    """Real time: ``time.monotonic`` and the local wall clock."""

    def monotonic(self) -> float:
        return time.monotonic()

    def now(self) -> datetime:
        return datetime.now().astimezone()

    def wait(self, timeout: float, event: threading.Event) -> bool:
        return event.wait(timeout)
