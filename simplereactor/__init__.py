"""simplereactor: single-threaded periodic scheduler for long-lived components

A Reactor hosts several components in one thread of control. Every
registered component is started once; components that declare a polling
interval are then polled at their deadlines, earliest first, sleeping in
between.

Responsibilities:
    - Component registration by reference identity
    - Deadline-ordered scheduling with O(log n) selection
    - Drift-free rescheduling from nominal deadlines
    - Thread-safe add/remove/cancel while the loop runs

Cross-cutting Concerns:
    Thread Safety:
        - add(), remove() and cancel() are safe from any thread
        - Hooks run on the loop thread, never under the reactor lock

    Error Handling:
        - Structured error hierarchy rooted at ReactorError
        - Hook failures are not swallowed

    Logging:
        - Standard library logging, no handlers installed
"""

from simplereactor.core.errors import (
    ConfigurationError,
    InvariantViolationError,
    QueueEmptyError,
    ReactorError,
    ReactorStateError,
)
from simplereactor.host import Host
from simplereactor.interfaces.protocols import Clock, Pollable, Service
from simplereactor.runtime import DeadlineQueue, IdlePolicy, MonotonicClock, Reactor, ReactorConfig
from simplereactor.services import Heartbeat, PeriodicCallback

__version__ = "0.1.0"

__all__ = [
    "Clock",
    "ConfigurationError",
    "DeadlineQueue",
    "Heartbeat",
    "Host",
    "IdlePolicy",
    "InvariantViolationError",
    "MonotonicClock",
    "PeriodicCallback",
    "Pollable",
    "QueueEmptyError",
    "Reactor",
    "ReactorConfig",
    "ReactorError",
    "ReactorStateError",
    "Service",
]
