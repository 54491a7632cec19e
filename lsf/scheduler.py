from __future__ import annotations

import time
from threading import Thread
from typing import Callable, Mapping

from . import docker_ops
from .dispatcher import Dispatcher, PatchHosts
from .docker_ops import PatchFailure
from .journal import log_event
from .reconciler import Event, Reconciler
from .runtime import RuntimeState
from .settings import StackConfig, settings
from .snapshot import RawContainer

Poll = Callable[[], Mapping[str, RawContainer]]


class Agent:
    """Drives poll -> reconcile -> dispatch at a fixed cadence.

    Ticks never overlap. A patch failure only ends the current tick; any other
    error (a failed poll in particular) stops the loop.
    """

    def __init__(
        self,
        config: StackConfig,
        poll: Poll = docker_ops.poll,
        patch_hosts: PatchHosts = docker_ops.patch_hosts,
        runtime: RuntimeState | None = None,
        interval_s: float | None = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.config = config
        self.poll = poll
        self.reconciler = Reconciler(config)
        self.dispatcher = Dispatcher(config, patch_hosts)
        self.runtime = runtime or RuntimeState()
        self.interval_s = settings.tick_s if interval_s is None else max(0.0, float(interval_s))
        self._sleep = sleep
        self._clock = clock
        self._stop = False
        self._thr: Thread | None = None

    def tick(self) -> list[Event]:
        events = self.reconciler.reconcile(self.poll())
        ok = True
        try:
            self.dispatcher.apply(events)
        except PatchFailure as e:
            ok = False
            log_event("ERROR", f"tick failed: {e}")
        self.runtime.record_tick(list(self.reconciler.tracked.values()), self.dispatcher.target_ip, ok)
        return events

    def run_forever(self) -> None:
        log_event(
            "INFO",
            f"Looking for containers in network {self.config.network} with label {self.config.label_key} "
            f"to be routed via service «{self.config.target}»",
        )
        self.runtime.mark_running()
        try:
            while not self._stop:
                started = self._clock()
                self.tick()
                # Measured from the cycle start; an overrun is not made up for.
                remaining = self.interval_s - (self._clock() - started)
                if remaining > 0 and not self._stop:
                    self._sleep(remaining)
        except Exception as e:
            self.runtime.mark_stopped(f"{type(e).__name__}: {e}")
            raise
        self.runtime.mark_stopped()

    def start(self) -> None:
        if self._thr and self._thr.is_alive():
            return
        self._stop = False
        self._thr = Thread(target=self._loop, daemon=True)
        self._thr.start()

    def stop(self) -> None:
        self._stop = True

    def _loop(self) -> None:
        try:
            self.run_forever()
        except Exception as e:
            log_event("ERROR", f"agent stopped: {type(e).__name__}: {e}")
