"""
Runtime package for the scheduling loop.

Architecture:
- DeadlineQueue orders pollable components by their next deadline
- Reactor drives the wait/fire/reschedule cycle
- MonotonicClock supplies nanosecond ticks and the timed sleep

Cross-cutting:
- One lock per reactor serializes registry and queue access
- Hook failures propagate to the caller unchanged
"""

from .deadline_queue import DeadlineQueue
from .reactor import IdlePolicy, Reactor, ReactorConfig, ReactorState
from .timers import MonotonicClock

__all__ = ["DeadlineQueue", "IdlePolicy", "MonotonicClock", "Reactor", "ReactorConfig", "ReactorState"]
