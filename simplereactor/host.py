# simplereactor/host.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import logging
import threading
from typing import Any, Iterable, List, Optional

from simplereactor.core.errors import ReactorStateError
from simplereactor.interfaces.protocols import Clock, Interval
from simplereactor.runtime.reactor import Reactor, ReactorConfig

logger = logging.getLogger(__name__)


class Host:
    """
    Runs a reactor on a background thread and owns the host-side lifecycle
    duties the reactor leaves out: starting components added after the loop
    began, and calling stop() on deregistration and shutdown. Every start()
    and poll() hook runs on the loop thread.
    """

    def __init__(
        self,
        components: Iterable[Any] = (),
        config: Optional[ReactorConfig] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        """
        :param components: Components registered before the loop starts.
        :param config: Reactor settings; join_timeout also bounds shutdown().
        :param clock: Optional time source for the reactor.
        """
        self.reactor = Reactor(config=config, clock=clock)
        self._thread: Optional[threading.Thread] = None
        self._failure: Optional[BaseException] = None
        self._shut_down = False
        self._lock = threading.Lock()
        for component in components:
            self.reactor.add(component)

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    @property
    def failure(self) -> Optional[BaseException]:
        """The exception that terminated the loop thread, if any."""
        return self._failure

    def add(self, component: Any, interval: Optional[Interval] = None) -> None:
        """
        Register a component. If the loop is already running, the loop thread
        calls the component's start() hook before its first poll, since the
        reactor itself only starts components present when it was seeded.
        """
        self.reactor.add(component, interval, start_if_running=True)

    def remove(self, component: Any, stop: bool = True) -> None:
        """
        Deregister a component, calling its stop() hook unless told otherwise.
        """
        registered = component in self.reactor
        self.reactor.remove(component)
        if stop and registered:
            component.stop()

    def start(self) -> None:
        """
        Launch the reactor loop on a daemon thread.

        :raises ReactorStateError: If the host was already started.
        """
        with self._lock:
            if self._thread is not None:
                raise ReactorStateError("Host has already been started")
            self._thread = threading.Thread(target=self._run, daemon=True, name="simplereactor-loop")
            self._thread.start()
        logger.info("Host started reactor thread")

    def shutdown(self) -> None:
        """
        Cancel the loop, wait for its thread, then stop every registered
        component. Every component is given the chance to stop; the first
        stop() failure is re-raised afterwards. Calling shutdown() again is a
        no-op.

        If the loop thread is still inside a hook when join_timeout expires,
        the stop sweep is skipped so that no stop() races a running hook.
        """
        with self._lock:
            if self._shut_down:
                return
            self._shut_down = True

        self.reactor.cancel()
        if self._thread is not None:
            self._thread.join(timeout=self.reactor.config.join_timeout)
            if self._thread.is_alive():
                logger.warning(
                    "Reactor thread did not stop within %.1fs, skipping component stop hooks",
                    self.reactor.config.join_timeout,
                )
                return

        errors: List[Exception] = []
        for component in self.reactor.components:
            try:
                component.stop()
            except Exception as e:
                logger.exception("Failed to stop component %r: %s", component, e)
                errors.append(e)

        logger.info("Host shutdown complete")
        if errors:
            raise errors[0]

    def _run(self) -> None:
        try:
            self.reactor.start()
        except Exception as e:
            self._failure = e
            logger.exception("Reactor loop failed: %s", e)

    def __enter__(self) -> "Host":
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.shutdown()
