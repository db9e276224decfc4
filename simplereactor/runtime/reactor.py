# simplereactor/runtime/reactor.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Dict, Optional, Tuple

from simplereactor.core.components import ComponentRegistry, PollableRegistration, Registration
from simplereactor.core.errors import ConfigurationError, InvariantViolationError, ReactorStateError
from simplereactor.interfaces.protocols import Clock, Interval
from simplereactor.runtime.concurrency import get_condition, get_lock
from simplereactor.runtime.deadline_queue import Bucket, DeadlineQueue
from simplereactor.runtime.timers import MonotonicClock, seconds_to_ticks

logger = logging.getLogger(__name__)


class IdlePolicy(Enum):
    """Defines what the loop does while no pollable component is scheduled."""

    BLOCK = auto()  # Wait until a pollable is added or the reactor is cancelled
    SPIN = auto()  # Sleep idle_interval, then look again


class ReactorState(Enum):
    NOT_STARTED = auto()
    RUNNING = auto()


@dataclass(frozen=True)
class ReactorConfig:
    """
    Settings supplied when a reactor is constructed.

    :param idle_policy: Behavior of the loop while the deadline queue is empty.
    :param idle_interval: Seconds slept per idle cycle under IdlePolicy.SPIN.
    :param join_timeout: Seconds a host waits for the loop thread on shutdown.
    """

    idle_policy: IdlePolicy = IdlePolicy.BLOCK
    idle_interval: float = 0.01
    join_timeout: float = 5.0

    def __post_init__(self) -> None:
        if not isinstance(self.idle_policy, IdlePolicy):
            raise ConfigurationError("idle_policy must be an IdlePolicy value", {"idle_policy": self.idle_policy})
        if self.idle_interval <= 0:
            raise ConfigurationError("idle_interval must be positive", {"idle_interval": self.idle_interval})
        if self.join_timeout < 0:
            raise ConfigurationError("join_timeout must not be negative", {"join_timeout": self.join_timeout})


class Reactor:
    """Single-threaded periodic scheduler for long-lived components.

    The reactor starts every registered component once, then repeatedly
    takes the earliest deadline from its DeadlineQueue, sleeps until it is
    due, polls every component in that bucket and reschedules each one at
    the bucket's nominal deadline plus its interval.

    Class Invariants:
    1. A registered pollable component of a running reactor is in exactly
       one place: awaiting its late start, queued, in the bucket being fired,
       or being polled
    2. A component without a polling interval is never queued
    3. A late-started component is not queued before its start() returned
    4. Deadlines are rescheduled from the nominal deadline, never from the
       actual firing time

    Threading/Concurrency Guarantees:
    1. add(), remove() and cancel() may be called from any thread
    2. Every hook runs on the thread driving the loop
    3. One lock serializes every registry and queue access
    4. The lock is never held while a hook runs or while the loop sleeps
    5. Cancellation is observed once per cycle and never interrupts a sleep
       or a running hook
    """

    def __init__(self, config: Optional[ReactorConfig] = None, clock: Optional[Clock] = None) -> None:
        """Initialize a reactor in the NotStarted state.

        Args:
            config: Loop settings, defaults to ReactorConfig()
            clock: Time source, defaults to the monotonic clock
        """
        self._config = config or ReactorConfig()
        self._clock = clock or MonotonicClock()
        self._lock = get_lock()
        self._wakeup = get_condition(self._lock)
        self._cancelled = threading.Event()
        self._registry = ComponentRegistry()
        self._queue = DeadlineQueue()
        self._state = ReactorState.NOT_STARTED
        self._in_flight: Bucket = {}
        self._polling: Optional[PollableRegistration] = None
        self._pending_starts: Dict[int, Registration] = {}
        self._starting: Optional[Registration] = None

    @property
    def config(self) -> ReactorConfig:
        return self._config

    @property
    def clock(self) -> Clock:
        return self._clock

    @property
    def started(self) -> bool:
        return self._state is ReactorState.RUNNING

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    @property
    def components(self) -> Tuple[Any, ...]:
        """Snapshot of the registered components."""
        with self._lock:
            return tuple(registration.component for registration in self._registry)

    @property
    def next_deadline(self) -> Optional[int]:
        """Earliest scheduled deadline in ticks, or None if nothing is queued."""
        with self._lock:
            return self._queue.peek_earliest()

    def deadline_of(self, component: Any) -> Optional[int]:
        """Return the tick at which a component is next due, if it is queued."""
        with self._lock:
            return self._queue.deadline_of(component)

    def __contains__(self, component: Any) -> bool:
        with self._lock:
            return component in self._registry

    def add(self, component: Any, interval: Optional[Interval] = None, start_if_running: bool = False) -> None:
        """Register a component.

        Re-adding a registered component is a no-op. Once the reactor is
        running, a pollable component is scheduled at now + interval. The
        reactor only starts components present when it was seeded; hosts
        that want late components started pass start_if_running.

        Args:
            component: Object implementing start() and stop()
            interval: Polling interval, overriding the component's own
                poll_interval when given
            start_if_running: If the reactor is already running, hand the
                component to the loop thread, which calls start() at the top
                of its next cycle and only then schedules it at
                now + interval

        Raises:
            ConfigurationError: If the component or interval is invalid
        """
        registration = Registration.of(component, interval)
        with self._lock:
            if not self._registry.add(registration):
                return
            if self._state is not ReactorState.RUNNING:
                return

            if start_if_running:
                self._pending_starts[registration.key] = registration
                self._wakeup.notify_all()
                logger.debug("Queued start of %r for the loop thread", component)
            elif isinstance(registration, PollableRegistration):
                self._schedule_from_now(registration)

    def remove(self, component: Any) -> None:
        """Deregister a component.

        Removing a component that was never registered is a no-op. A running
        pollable component is purged from the schedule; it is not polled
        again, even if it sits in the bucket currently being fired. A
        component whose late start is still pending is never started.

        Raises:
            InvariantViolationError: If a running pollable component cannot
                be found anywhere in the schedule
        """
        with self._lock:
            registration = self._registry.remove(component)
            if registration is None:
                return
            if self._pending_starts.pop(registration.key, None) is not None or self._starting is registration:
                return
            if not registration.pollable or self._state is not ReactorState.RUNNING:
                return

            if self._queue.remove(component) is not None:
                return
            if self._in_flight.pop(registration.key, None) is not None:
                return
            if self._polling is registration:
                return

            raise InvariantViolationError("Registered pollable component missing from the deadline queue", component)

    def cancel(self) -> None:
        """
        Request the loop to stop. Takes effect at the top of the next cycle.
        """
        with self._lock:
            self._cancelled.set()
            self._wakeup.notify_all()
        logger.info("Reactor cancellation requested")

    def seed(self) -> None:
        """Leave the NotStarted state.

        Every pollable component is scheduled at now + interval, then every
        registered component's start() hook is invoked. Hook failures
        propagate to the caller.

        Raises:
            ReactorStateError: If the reactor was already started
        """
        with self._lock:
            if self._state is not ReactorState.NOT_STARTED:
                raise ReactorStateError("Reactor has already been started")

            self._state = ReactorState.RUNNING
            now = self._clock.now()
            registrations = list(self._registry)
            for registration in registrations:
                if isinstance(registration, PollableRegistration):
                    self._queue.insert(registration, now + registration.interval)

        logger.info("Reactor starting %d component(s)", len(registrations))
        for registration in registrations:
            with self._lock:
                if self._registry.get(registration.component) is not registration:
                    continue
            registration.component.start()

    def start(self) -> None:
        """Seed the schedule and run cycles until cancelled.

        Blocks the calling thread. Exceptions raised by hooks end the loop
        and propagate.
        """
        self.seed()
        while not self._cancelled.is_set():
            self.step()
        logger.info("Reactor loop stopped")

    def step(self) -> bool:
        """Run one cycle: start components added since the last cycle, then
        extract the earliest bucket, wait for it, poll its components and
        reschedule them.

        Returns:
            True if a bucket was fired, False if the cycle was idle

        Raises:
            ReactorStateError: If the reactor has not been started
        """
        with self._lock:
            if self._state is not ReactorState.RUNNING:
                raise ReactorStateError("Reactor has not been started")

        self._start_pending()

        with self._lock:
            if self._config.idle_policy is IdlePolicy.BLOCK:
                while not self._queue and not self._pending_starts and not self._cancelled.is_set():
                    logger.debug("No pollable component scheduled, waiting")
                    self._wakeup.wait()

            spin = self._config.idle_policy is IdlePolicy.SPIN and not self._pending_starts
            if self._queue:
                deadline, bucket = self._queue.extract_earliest()
                self._in_flight = bucket
                period = min(registration.interval for registration in bucket.values())
            else:
                deadline = None

        if deadline is None:
            if spin:
                self._clock.sleep(seconds_to_ticks(self._config.idle_interval))
            return False

        try:
            wait = deadline - self._clock.now()
            if wait > 0:
                logger.debug("Sleeping %d ticks until deadline %d", wait, deadline)
                self._clock.sleep(wait)
            elif -wait >= period:
                logger.warning("Deadline %d overran by %d ticks, firing once", deadline, -wait)

            self._fire(deadline)
        finally:
            with self._lock:
                # Members not polled because the wait or a hook raised stay due at this deadline.
                for registration in self._in_flight.values():
                    self._queue.insert(registration, deadline)
                self._in_flight = {}
        return True

    def _schedule_from_now(self, registration: PollableRegistration) -> None:
        deadline = self._clock.now() + registration.interval
        self._queue.insert(registration, deadline)
        self._wakeup.notify_all()
        logger.debug("Scheduled %r at %d", registration.component, deadline)

    def _start_pending(self) -> None:
        # Late components are started on the loop thread and only scheduled once start() returned.
        while True:
            with self._lock:
                if not self._pending_starts:
                    return
                key = next(iter(self._pending_starts))
                registration = self._pending_starts.pop(key)
                self._starting = registration

            try:
                registration.component.start()
            finally:
                with self._lock:
                    self._starting = None
                    if (
                        isinstance(registration, PollableRegistration)
                        and self._registry.get(registration.component) is registration
                    ):
                        self._schedule_from_now(registration)

    def _fire(self, deadline: int) -> None:
        while True:
            with self._lock:
                if not self._in_flight:
                    return
                key = next(iter(self._in_flight))
                registration = self._in_flight.pop(key)
                self._polling = registration

            try:
                registration.poll()
            finally:
                with self._lock:
                    self._polling = None
                    if self._registry.get(registration.component) is registration:
                        self._queue.insert(registration, deadline + registration.interval)
