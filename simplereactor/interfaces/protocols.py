# simplereactor/interfaces/protocols.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
from datetime import timedelta
from typing import Protocol, Union, runtime_checkable

Interval = Union[timedelta, int, float]


@runtime_checkable
class Service(Protocol):
    """
    Lifecycle capability required of every registered component.

    Methods:
        start(): Called exactly once, when the reactor leaves its NotStarted state.
        stop(): Called by the host on deregistration or shutdown. The reactor
            loop itself never calls it.

    Error Handling:
    - Exceptions raised by either hook are not caught by the reactor and
      propagate to whoever drives the loop.
    """

    def start(self) -> None: ...

    def stop(self) -> None: ...


@runtime_checkable
class Pollable(Service, Protocol):
    """
    Polling capability, implemented in addition to Service by components that
    need to run periodically.

    Runtime Invariants:
    - poll_interval is read once, when the component is registered, and is
      assumed immutable afterwards.
    - poll() is invoked at most once per elapsed interval.
    """

    @property
    def poll_interval(self) -> Interval: ...

    def poll(self) -> None: ...


@runtime_checkable
class Clock(Protocol):
    """
    Source of monotonic time in integer ticks (nanoseconds).
    """

    def now(self) -> int:
        """Return the current tick count."""
        ...

    def sleep(self, ticks: int) -> None:
        """Suspend the caller for the given number of ticks."""
        ...
