"""Timing dispatcher: fires registered jobs at fixed intervals, forever.

The dispatcher owns a min-heap of ScheduledOccurrence keyed on the next due
monotonic instant. A single loop takes the earliest occurrence, waits for it, launches the
handler on its own thread and re-sifts the occurrence with its due time
advanced by exactly one interval. Handlers never run on the
dispatch thread, so a slow or failing job cannot delay any other firing.
"""

import heapq
import logging
import threading
from collections.abc import Callable, Iterable
from datetime import datetime, timedelta

from ddns.scheduling.clock import Clock, SystemClock
from ddns.scheduling.table import JobTable
from ddns.scheduling.types import (
    JobHandler,
    NoJobsError,
    OccurrenceReport,
    Outcome,
    Registration,
    ReportHook,
    ScheduledOccurrence,
    SchedulingError,
)

logger = logging.getLogger(__name__)

Spawner = Callable[[Callable[[], None], str], None]

# Longest single wait handed to the clock; Event.wait overflows past TIMEOUT_MAX
MAX_WAIT_SECONDS = min(threading.TIMEOUT_MAX, 24 * 60 * 60.0)


def spawn_thread(target: Callable[[], None], name: str) -> None:
    """Run ``target`` on a fresh daemon thread without waiting for it."""
    threading.Thread(target=target, name=name, daemon=True).start()


def log_report(report: OccurrenceReport) -> None:
    """Default report hook: one log line per finished occurrence."""
    extra = {
        "job.name": report.name,
        "occurrence.outcome": str(report.outcome),
        "occurrence.sequence": report.sequence,
        "occurrence.scheduled_at": report.scheduled_at.isoformat(),
        "occurrence.fired_at": report.fired_at.isoformat(),
        "occurrence.duration_ms": round(
            (report.finished_at - report.fired_at).total_seconds() * 1000
        ),
    }
    if report.succeeded:
        logger.info(f"{report.name}: succeeded", extra=extra)
    else:
        extra["error.message"] = report.error
        logger.warning(f"{report.name}: failed", extra=extra)


class Dispatcher:
    """Drift-free recurring job dispatcher.

    Example:
        dispatcher = Dispatcher()
        dispatcher.register("IP updater", refresh_ip, timedelta(minutes=5))
        dispatcher.register("Domain updater (home)", update_home, 60)
        dispatcher.start()  # blocks until stop()

    Every job fires once immediately, then every ``interval`` seconds after
    its previous nominal due time. Overdue occurrences fire without delay
    and are never skipped. Occurrences of the same job may overlap.
    """

    def __init__(
        self,
        clock: Clock | None = None,
        spawn: Spawner = spawn_thread,
        on_report: ReportHook | None = log_report,
    ):
        self._clock = clock or SystemClock()
        self._spawn = spawn
        self._on_report = on_report
        self._table = JobTable()
        self._queue: list[ScheduledOccurrence] = []
        self._queue_lock = threading.Lock()
        self._stop = threading.Event()
        self._started = False
        self._dispatched = 0

    @property
    def table(self) -> JobTable:
        return self._table

    @property
    def dispatched(self) -> int:
        """Number of occurrences launched so far."""
        return self._dispatched

    @property
    def running(self) -> bool:
        return self._started and not self._stop.is_set()

    def register(
        self, name: str, handler: JobHandler, interval: float | timedelta
    ) -> Registration:
        """Register a job on this dispatcher's own table."""
        return self._table.register(name, handler, interval)

    def start(
        self, registrations: JobTable | Iterable[Registration] | None = None
    ) -> None:
        """Take ownership of all registrations and run the dispatch loop.

        Registrations made through ``register`` are always included; any
        passed in are appended after them. Blocks until ``stop`` is called.

        Raises:
            NoJobsError: If there is nothing to schedule.
            SchedulingError: If the dispatcher was already started.
        """
        if self._started:
            raise SchedulingError("Dispatcher already started")

        taken = self._table.drain()
        if isinstance(registrations, JobTable):
            taken.extend(registrations.drain())
        elif registrations is not None:
            taken.extend(registrations)

        if not taken:
            raise NoJobsError("No jobs registered; refusing to start an empty loop")

        self._started = True
        now_monotonic = self._clock.monotonic()
        now_wall = self._clock.now()
        queue = [
            ScheduledOccurrence.from_registration(r, now_monotonic, now_wall)
            for r in taken
        ]
        heapq.heapify(queue)
        with self._queue_lock:
            self._queue = queue

        logger.info("dispatcher_started", extra={"job.count": len(self._queue)})
        self._run_loop()
        logger.info(
            "dispatcher_stopped", extra={"occurrence.dispatched": self._dispatched}
        )

    def stop(self) -> None:
        """Make the loop exit at its next wait. Running handlers are left alone."""
        self._stop.set()

    def pending(self) -> list[tuple[str, datetime]]:
        """Snapshot of (job name, next scheduled wall time), earliest first.

        Safe to call from any thread while the loop runs.
        """
        with self._queue_lock:
            return [(o.name, o.wall_time(o.next_due)) for o in sorted(self._queue)]

    def _run_loop(self) -> None:
        queue = self._queue
        while not self._stop.is_set():
            # The earliest occurrence stays in the heap while we wait for it.
            occurrence = queue[0]
            if not self._wait_until(occurrence.next_due):
                break
            self._launch(occurrence)
            with self._queue_lock:
                occurrence.advance()
                heapq.heapreplace(queue, occurrence)

    def _wait_until(self, due: float) -> bool:
        """Block until ``due``. Return False if stopped while waiting."""
        while True:
            delay = due - self._clock.monotonic()
            if delay <= 0:
                return True
            if self._clock.wait(min(delay, MAX_WAIT_SECONDS), self._stop):
                return False

    def _launch(self, occurrence: ScheduledOccurrence) -> None:
        occurrence.fired += 1
        self._dispatched += 1
        fired_at = self._clock.monotonic()
        scheduled_at = occurrence.wall_time(occurrence.next_due)

        logger.debug(
            f"Firing {occurrence.name} #{occurrence.fired} "
            f"({fired_at - occurrence.next_due:.3f}s late)"
        )

        target = self._make_runner(
            occurrence, occurrence.fired, scheduled_at, occurrence.wall_time(fired_at)
        )
        try:
            self._spawn(target, f"ddns-occurrence-{occurrence.name}")
        except Exception:
            # Thread creation can fail under resource exhaustion; the
            # occurrence is still rescheduled below.
            logger.exception(
                "occurrence_launch_failed", extra={"job.name": occurrence.name}
            )

    def _make_runner(
        self,
        occurrence: ScheduledOccurrence,
        sequence: int,
        scheduled_at: datetime,
        fired_at: datetime,
    ) -> Callable[[], None]:
        # Only the immutable parts of the occurrence are read off-thread.
        name = occurrence.name
        handler = occurrence.handler
        wall_time = occurrence.wall_time

        def run() -> None:
            error: str | None = None
            try:
                result = handler()
            except Exception as e:
                logger.exception(
                    "job_handler_error",
                    extra={"job.name": name, "error.message": str(e)},
                )
                outcome = Outcome.FAILURE
                error = str(e) or type(e).__name__
            else:
                outcome = Outcome.FAILURE if result is False else Outcome.SUCCESS

            report = OccurrenceReport(
                name=name,
                outcome=outcome,
                scheduled_at=scheduled_at,
                fired_at=fired_at,
                finished_at=wall_time(self._clock.monotonic()),
                sequence=sequence,
                error=error,
            )
            self._emit(report)

        return run

    def _emit(self, report: OccurrenceReport) -> None:
        if self._on_report is None:
            return
        try:
            self._on_report(report)
        except Exception:
            logger.exception("report_hook_error", extra={"job.name": report.name})
