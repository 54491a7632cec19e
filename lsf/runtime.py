from __future__ import annotations

from dataclasses import dataclass, field
from threading import Lock

from .journal import utc_now
from .snapshot import TrackedContainer


@dataclass
class TickStatus:
    ticks: int = 0
    failed_ticks: int = 0
    last_tick_at: str | None = None
    target_ip: str | None = None
    containers: list[TrackedContainer] = field(default_factory=list)
    running: bool = False
    fatal_error: str | None = None


class RuntimeState:
    """Status published by the agent loop for readers on other threads."""

    def __init__(self) -> None:
        self.lock = Lock()
        self._status = TickStatus()

    def mark_running(self) -> None:
        with self.lock:
            self._status.running = True
            self._status.fatal_error = None

    def record_tick(self, containers: list[TrackedContainer], target_ip: str | None, ok: bool) -> None:
        with self.lock:
            self._status.ticks += 1
            if not ok:
                self._status.failed_ticks += 1
            self._status.last_tick_at = utc_now()
            self._status.target_ip = target_ip
            self._status.containers = list(containers)

    def mark_stopped(self, error: str | None = None) -> None:
        with self.lock:
            self._status.running = False
            self._status.fatal_error = error

    def snapshot(self) -> TickStatus:
        with self.lock:
            s = self._status
            return TickStatus(
                ticks=s.ticks,
                failed_ticks=s.failed_ticks,
                last_tick_at=s.last_tick_at,
                target_ip=s.target_ip,
                containers=list(s.containers),
                running=s.running,
                fatal_error=s.fatal_error,
            )
