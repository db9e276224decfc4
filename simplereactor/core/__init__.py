# simplereactor/core/__init__.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from simplereactor.core.components import ComponentRegistry, PollableRegistration, Registration, ServiceRegistration
from simplereactor.core.errors import (
    ConfigurationError,
    InvariantViolationError,
    QueueEmptyError,
    ReactorError,
    ReactorStateError,
)

__all__ = [
    "ComponentRegistry",
    "ConfigurationError",
    "InvariantViolationError",
    "PollableRegistration",
    "QueueEmptyError",
    "ReactorError",
    "ReactorStateError",
    "Registration",
    "ServiceRegistration",
]
