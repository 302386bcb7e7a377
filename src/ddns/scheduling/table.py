"""Job registration table.

Registrations are collected here before the dispatcher starts. The table is
write-once-then-drained: the dispatcher takes every registration when it
starts and the table rejects new ones afterwards.
"""

import logging
from collections.abc import Iterator
from datetime import timedelta

from ddns.scheduling.types import (
    JobHandler,
    Registration,
    SchedulingError,
    to_seconds,
)

logger = logging.getLogger(__name__)


class JobTable:
    """Ordered list of (name, interval, handler) registrations.

    Example:
        table = JobTable()
        table.register("IP updater", refresh, timedelta(minutes=5))
        dispatcher.start(table)
    """

    def __init__(self) -> None:
        self._registrations: list[Registration] = []
        self._drained = False

    def register(
        self, name: str, handler: JobHandler, interval: float | timedelta
    ) -> Registration:
        """Append a registration.

        Duplicate names are allowed; each registration fires on its own.

        Raises:
            InvalidIntervalError: If the interval is not a positive duration.
            TypeError: If the handler is not callable.
            SchedulingError: If the table was already drained by a dispatcher.
        """
        if self._drained:
            raise SchedulingError(
                f"Cannot register '{name}': dispatcher already started"
            )
        if not callable(handler):
            raise TypeError(f"Handler for '{name}' is not callable: {handler!r}")

        registration = Registration(
            name=name, interval=to_seconds(interval), handler=handler
        )
        self._registrations.append(registration)
        logger.debug(
            "job_registered",
            extra={"job.name": name, "job.interval": registration.interval},
        )
        return registration

    def drain(self) -> list[Registration]:
        """Hand every registration over and close the table."""
        registrations = self._registrations
        self._registrations = []
        self._drained = True
        return registrations

    @property
    def drained(self) -> bool:
        return self._drained

    def __len__(self) -> int:
        return len(self._registrations)

    def __iter__(self) -> Iterator[Registration]:
        return iter(list(self._registrations))
