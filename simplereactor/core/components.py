# simplereactor/core/components.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import numbers
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any, Dict, Iterator, Optional, Union

from simplereactor.core.errors import ConfigurationError
from simplereactor.interfaces.protocols import Interval, Service

TICKS_PER_SECOND = 1_000_000_000


def to_ticks(interval: Interval) -> int:
    """
    Convert a polling interval into a positive number of clock ticks.

    :param interval: A timedelta or a number of seconds.
    :return: The interval in nanosecond ticks.
    :raises ConfigurationError: If the interval is not a positive duration.
    """
    if isinstance(interval, timedelta):
        ticks = (interval.days * 86400 + interval.seconds) * TICKS_PER_SECOND + interval.microseconds * 1000
    elif isinstance(interval, numbers.Real) and not isinstance(interval, bool):
        ticks = round(interval * TICKS_PER_SECOND)
    else:
        raise ConfigurationError("Polling interval must be a timedelta or a number of seconds", {"interval": interval})

    if ticks <= 0:
        raise ConfigurationError("Polling interval must be positive", {"interval": interval})
    return int(ticks)


@dataclass(frozen=True, eq=False)
class Registration:
    """
    A component as seen by the reactor. Capabilities are resolved once, when
    the registration is created, and never re-inspected afterwards.
    """

    component: Service

    @property
    def key(self) -> int:
        """Identity of the wrapped component."""
        return id(self.component)

    @property
    def pollable(self) -> bool:
        return False

    @staticmethod
    def of(component: Any, interval: Optional[Interval] = None) -> Union[ServiceRegistration, PollableRegistration]:
        """
        Resolve the capabilities of a component.

        An explicit interval marks the component as pollable; otherwise a
        component implementing Pollable contributes its own poll_interval.

        :param component: The component to register.
        :param interval: Optional polling interval overriding poll_interval.
        :raises ConfigurationError: If the component lacks the required hooks.
        """
        if not (callable(getattr(component, "start", None)) and callable(getattr(component, "stop", None))):
            raise ConfigurationError(
                "Component must implement start() and stop()", {"component": repr(component)}
            )

        if interval is None:
            interval = getattr(component, "poll_interval", None)

        if interval is None:
            return ServiceRegistration(component)

        if not callable(getattr(component, "poll", None)):
            raise ConfigurationError(
                "Component registered with an interval must implement poll()", {"component": repr(component)}
            )
        return PollableRegistration(component, to_ticks(interval))


@dataclass(frozen=True, eq=False)
class ServiceRegistration(Registration):
    """A component carrying only the lifecycle capability."""


@dataclass(frozen=True, eq=False)
class PollableRegistration(Registration):
    """A component carrying the lifecycle and the polling capability."""

    interval: int = field(default=0)

    @property
    def pollable(self) -> bool:
        return True

    def poll(self) -> None:
        self.component.poll()


class ComponentRegistry:
    """
    The set of registered components, keyed by reference identity. Two
    components that compare equal are still distinct entries.

    Not thread-safe on its own; the reactor serializes access.
    """

    def __init__(self) -> None:
        self._entries: Dict[int, Registration] = {}

    def add(self, registration: Registration) -> bool:
        """
        Insert a registration.

        :return: True if the component was not registered before.
        """
        if registration.key in self._entries:
            return False
        self._entries[registration.key] = registration
        return True

    def remove(self, component: Any) -> Optional[Registration]:
        """
        Delete a component, returning its registration or None if it was
        never registered.
        """
        return self._entries.pop(id(component), None)

    def get(self, component: Any) -> Optional[Registration]:
        return self._entries.get(id(component))

    def __contains__(self, component: Any) -> bool:
        return id(component) in self._entries

    def __iter__(self) -> Iterator[Registration]:
        return iter(list(self._entries.values()))

    def __len__(self) -> int:
        return len(self._entries)
