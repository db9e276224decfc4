# simplereactor/core/errors.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from typing import Any, Dict, Optional


class ReactorError(Exception):
    """
    Base exception class for errors raised by the reactor core.

    :param message: Human readable description.
    :param details: Optional structured context for the failure.
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details: Dict[str, Any] = dict(details or {})

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} (details: {self.details})"
        return self.message


class ConfigurationError(ReactorError):
    """
    Raised when a polling interval or reactor configuration is invalid.
    """


class ReactorStateError(ReactorError):
    """
    Raised when a reactor operation is not valid in the current lifecycle state.
    """


class QueueEmptyError(ReactorError):
    """
    Raised when the earliest deadline is requested from an empty deadline queue.
    """


class InvariantViolationError(ReactorError):
    """
    Raised when the deadline bookkeeping has diverged from the registry, e.g. a
    running pollable component cannot be found in the queue on removal.
    """

    def __init__(self, message: str, component: Any, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, {"component": repr(component), **(details or {})})
        self.component = component
