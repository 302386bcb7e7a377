"""Scheduling subsystem: recurring job dispatch.

Public API:
- JobTable: Registrations collected before the loop starts
- Dispatcher: Heap-ordered loop that fires each job on its own thread
- SystemClock: Default time source

Types:
- Registration, ScheduledOccurrence, OccurrenceReport, Outcome
- SchedulingError, InvalidIntervalError, NoJobsError
"""

from ddns.scheduling.clock import Clock, SystemClock
from ddns.scheduling.dispatcher import Dispatcher, log_report, spawn_thread
from ddns.scheduling.table import JobTable
from ddns.scheduling.types import (
    InvalidIntervalError,
    JobHandler,
    NoJobsError,
    OccurrenceReport,
    Outcome,
    Registration,
    ReportHook,
    ScheduledOccurrence,
    SchedulingError,
)

__all__ = [
    "Clock",
    "Dispatcher",
    "InvalidIntervalError",
    "JobHandler",
    "JobTable",
    "NoJobsError",
    "OccurrenceReport",
    "Outcome",
    "Registration",
    "ReportHook",
    "ScheduledOccurrence",
    "SchedulingError",
    "SystemClock",
    "log_report",
    "spawn_thread",
]
