# simplereactor/runtime/timers.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import time

from simplereactor.core.components import TICKS_PER_SECOND


class MonotonicClock:
    """
    Default time source for the reactor. Ticks are nanoseconds read from the
    system's monotonic clock, so deadlines never move backwards when the wall
    clock is adjusted.
    """

    def now(self) -> int:
        """
        Return the current tick count.
        """
        return time.monotonic_ns()

    def sleep(self, ticks: int) -> None:
        """
        Block the calling thread for the given number of ticks. This is a plain
        timed sleep and is not interrupted by registry changes or cancellation.

        :param ticks: Duration to sleep; non-positive values return immediately.
        """
        if ticks > 0:
            time.sleep(ticks / TICKS_PER_SECOND)


def seconds_to_ticks(seconds: float) -> int:
    return round(seconds * TICKS_PER_SECOND)


def ticks_to_seconds(ticks: int) -> float:
    return ticks / TICKS_PER_SECOND
