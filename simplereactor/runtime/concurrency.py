# simplereactor/runtime/concurrency.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import threading


def get_lock() -> threading.Lock:
    """
    Provide a new lock instance to be used for synchronization.
    """
    return threading.Lock()


def get_condition(lock: threading.Lock) -> threading.Condition:
    """
    Provide a condition variable sharing the given lock, so waiters and
    mutators are serialized by the same mutual exclusion.
    """
    return threading.Condition(lock)
