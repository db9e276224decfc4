# tests/utils.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from typing import Callable, List, Optional

MS = 1_000_000


def ms(value: int) -> int:
    """Milliseconds expressed in clock ticks."""
    return value * MS


class ManualClock:
    """
    Logical clock for deterministic tests. sleep() advances time instantly
    instead of blocking.
    """

    def __init__(self, start: int = 0) -> None:
        self._now = start
        self.sleeps: List[int] = []

    def now(self) -> int:
        return self._now

    def sleep(self, ticks: int) -> None:
        self.sleeps.append(ticks)
        if ticks > 0:
            self._now += ticks

    def advance(self, ticks: int) -> None:
        self._now += ticks


class RecordingService:
    """A lifecycle-only component that records its hook calls."""

    def __init__(self, name: str = "service", trace: Optional[List[str]] = None) -> None:
        self.name = name
        self.trace = trace if trace is not None else []
        self.start_calls = 0
        self.stop_calls = 0

    def start(self) -> None:
        self.start_calls += 1
        self.trace.append(f"START:{self.name}")

    def stop(self) -> None:
        self.stop_calls += 1
        self.trace.append(f"STOP:{self.name}")

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name}>"


class RecordingPollable(RecordingService):
    """
    A pollable component recording the clock time of every poll. An optional
    action runs inside poll(), after the time is recorded.
    """

    def __init__(
        self,
        interval,
        clock=None,
        name: str = "pollable",
        trace: Optional[List[str]] = None,
        action: Optional[Callable[["RecordingPollable"], None]] = None,
    ) -> None:
        super().__init__(name, trace)
        self._interval = interval
        self.clock = clock
        self.action = action
        self.poll_times: List[int] = []

    @property
    def poll_interval(self):
        return self._interval

    @property
    def poll_count(self) -> int:
        return len(self.poll_times)

    def poll(self) -> None:
        self.poll_times.append(self.clock.now() if self.clock is not None else 0)
        self.trace.append(f"POLL:{self.name}")
        if self.action is not None:
            self.action(self)
