"""Scheduling types.

Public types:
- Registration: A named job with its repeat interval, collected before start
- ScheduledOccurrence: The pending firing of a registration inside the dispatcher
- OccurrenceReport: What happened when an occurrence ran
- JobHandler / ReportHook: Callable signatures
"""

import math
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import StrEnum


class SchedulingError(Exception):
    """Base class for dispatcher errors."""


class InvalidIntervalError(SchedulingError, ValueError):
    """Raised when a job is registered with a non-positive interval."""


class NoJobsError(SchedulingError):
    """Raised when the dispatcher is started without any registrations."""


class Outcome(StrEnum):
    SUCCESS = "success"
    FAILURE = "failure"


# Returning False means failure; anything else (including None) is success.
JobHandler = Callable[[], bool | None]


@dataclass(frozen=True)
class Registration:
    """A job registered before the dispatcher starts."""

    name: str
    interval: float  # seconds
    handler: JobHandler


@dataclass(order=True)
class ScheduledOccurrence:
    """The next pending firing of a registration.

    Ordered on ``next_due`` only so the heap never compares handlers.
    ``next_due`` is a monotonic clock value; the anchor pair maps it back
    to wall-clock time for reporting.
    """

    next_due: float
    name: str = field(compare=False)
    interval: float = field(compare=False)
    handler: JobHandler = field(compare=False)
    anchor_monotonic: float = field(compare=False)
    anchor_wall: datetime = field(compare=False)
    fired: int = field(default=0, compare=False)

    @classmethod
    def from_registration(
        cls, registration: Registration, now_monotonic: float, now_wall: datetime
    ) -> "ScheduledOccurrence":
        return cls(
            next_due=now_monotonic,
            name=registration.name,
            interval=registration.interval,
            handler=registration.handler,
            anchor_monotonic=now_monotonic,
            anchor_wall=now_wall,
        )

    def wall_time(self, instant: float) -> datetime:
        """Translate a monotonic instant into wall-clock time."""
        return self.anchor_wall + timedelta(seconds=instant - self.anchor_monotonic)

    def advance(self) -> None:
        self.next_due += self.interval


@dataclass(frozen=True)
class OccurrenceReport:
    """Result of a single fired occurrence."""

    name: str
    outcome: Outcome
    scheduled_at: datetime
    fired_at: datetime
    finished_at: datetime
    sequence: int
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.outcome is Outcome.SUCCESS

    @property
    def lateness(self) -> float:
        """Seconds between the nominal due time and the actual launch."""
        return (self.fired_at - self.scheduled_at).total_seconds()


ReportHook = Callable[[OccurrenceReport], None]


def to_seconds(interval: float | timedelta) -> float:
    """Normalize an interval to seconds, rejecting non-positive or infinite values."""
    if isinstance(interval, timedelta):
        seconds = interval.total_seconds()
    elif isinstance(interval, bool) or not isinstance(interval, int | float):
        raise InvalidIntervalError(
            f"Interval must be a number of seconds or a timedelta, got {interval!r}"
        )
    else:
        seconds = float(interval)
    if not seconds > 0:
        raise InvalidIntervalError(f"Interval must be positive, got {interval!r}")
    if not math.isfinite(seconds):
        raise InvalidIntervalError(f"Interval must be finite, got {interval!r}")
    return seconds
