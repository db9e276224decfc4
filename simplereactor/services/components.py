# simplereactor/services/components.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import logging
from typing import Callable, Optional

from simplereactor.core.components import to_ticks
from simplereactor.interfaces.protocols import Interval

logger = logging.getLogger(__name__)


class PeriodicCallback:
    """
    Pollable component wrapping a zero-argument callable. The start and stop
    hooks do nothing.
    """

    def __init__(self, callback: Callable[[], None], interval: Interval) -> None:
        """
        :param callback: Function invoked on every poll.
        :param interval: Polling interval as a timedelta or seconds.
        """
        to_ticks(interval)
        self._callback = callback
        self._interval = interval

    @property
    def poll_interval(self) -> Interval:
        return self._interval

    def start(self) -> None:
        pass

    def stop(self) -> None:
        pass

    def poll(self) -> None:
        self._callback()

    def __repr__(self) -> str:
        return f"PeriodicCallback({self._callback!r}, interval={self._interval!r})"


class Heartbeat:
    """
    Pollable component that counts beats and reports each one to a sink.
    Beats are only emitted between start() and stop().
    """

    def __init__(self, interval: Interval, emit: Optional[Callable[[int], None]] = None) -> None:
        to_ticks(interval)
        self._interval = interval
        self._emit = emit or self._log_beat
        self._beats = 0
        self._active = False

    @property
    def poll_interval(self) -> Interval:
        return self._interval

    @property
    def beats(self) -> int:
        return self._beats

    @property
    def active(self) -> bool:
        return self._active

    def start(self) -> None:
        self._active = True
        logger.info("Heartbeat started")

    def stop(self) -> None:
        self._active = False
        logger.info("Heartbeat stopped after %d beat(s)", self._beats)

    def poll(self) -> None:
        if not self._active:
            return
        self._beats += 1
        self._emit(self._beats)

    @staticmethod
    def _log_beat(beat: int) -> None:
        logger.info("Heartbeat %d", beat)
