# simplereactor/services/__init__.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from simplereactor.services.components import Heartbeat, PeriodicCallback

__all__ = ["Heartbeat", "PeriodicCallback"]
