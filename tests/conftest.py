# tests/conftest.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

import threading
from datetime import timedelta
from unittest.mock import MagicMock

import pytest

from simplereactor.runtime.reactor import IdlePolicy, Reactor, ReactorConfig
from tests.utils import ManualClock, RecordingPollable, RecordingService


def pytest_configure(config):
    """Register custom marks."""
    config.addinivalue_line("markers", "property: mark test as a property-based test")
    config.addinivalue_line("markers", "realtime: mark test as depending on wall-clock time")


@pytest.fixture
def clock():
    """A logical clock starting at tick 0."""
    return ManualClock()


@pytest.fixture
def reactor(clock):
    """A reactor driven by the logical clock, spinning when idle."""
    return Reactor(config=ReactorConfig(idle_policy=IdlePolicy.SPIN), clock=clock)


@pytest.fixture
def trace():
    return []


@pytest.fixture
def make_pollable(clock, trace):
    """Factory for recording pollables sharing the logical clock and trace."""

    def _make(interval_ms: int, name: str = "pollable", action=None) -> RecordingPollable:
        return RecordingPollable(timedelta(milliseconds=interval_ms), clock=clock, name=name, trace=trace, action=action)

    return _make


@pytest.fixture
def service(trace):
    return RecordingService("service", trace)


@pytest.fixture
def mock_service():
    """A mock carrying only the lifecycle capability."""
    return MagicMock(spec=["start", "stop"])


@pytest.fixture
def mock_pollable():
    """A mock pollable with a 100ms interval."""
    m = MagicMock(spec=["start", "stop", "poll", "poll_interval"])
    m.poll_interval = timedelta(milliseconds=100)
    return m


@pytest.fixture(autouse=True)
def cleanup_threads():
    yield
    # Cleanup any remaining threads after each test
    for thread in threading.enumerate():
        if thread != threading.current_thread() and thread.is_alive() and not thread.daemon:
            thread.join(timeout=1.0)
