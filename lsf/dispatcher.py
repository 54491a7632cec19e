from __future__ import annotations

from typing import Callable, Iterable, Sequence

from .journal import log_event
from .reconciler import Event, Gone, New, NoFlag, OutsideNetwork, Target
from .settings import StackConfig
from .snapshot import TrackedContainer

PatchHosts = Callable[[TrackedContainer, Sequence[str], str, str, str], None]


class Dispatcher:
    """Applies reconciler events, patching hosts files of dependents.

    ``target_ip`` starts unset and, once a Target event went through, is never
    cleared again (not even when the target container goes away).
    """

    def __init__(self, config: StackConfig, patch_hosts: PatchHosts):
        self.config = config
        self.patch_hosts = patch_hosts
        self.target_ip: str | None = None

    def apply(self, events: Iterable[Event]) -> None:
        for event in events:
            if isinstance(event, Target):
                self._on_target(event)
            elif isinstance(event, New):
                self._on_new(event.container)
            elif isinstance(event, Gone):
                log_event("INFO", f"event container gone: {event.container}", container=event.container.id)
            elif isinstance(event, NoFlag):
                log_event("INFO", f"event container ignored (label): {event.container}", container=event.container.id)
            elif isinstance(event, OutsideNetwork):
                log_event("INFO", f"event container ignored (network): {event.container}", container=event.container.id)

    def _on_target(self, event: Target) -> None:
        log_event(
            "INFO",
            f"event found target: {event.container} applying it to known {len(event.active)} containers",
            container=event.container.id,
        )
        for item in event.active:
            log_event("INFO", f"updating previous container {item.short_id}", container=item.id)
            self._patch(item, event.ip)
        log_event("INFO", f"recording ip for target: {event.ip}")
        self.target_ip = event.ip

    def _on_new(self, container: TrackedContainer) -> None:
        log_event("INFO", f"event container match: {container}", container=container.id)
        if self.target_ip is None:
            log_event(
                "WARN",
                f"could not update /etc/hosts for container {container.short_id} because no target known yet",
                container=container.id,
            )
            return
        log_event("INFO", f"updating /etc/hosts for container {container.short_id}", container=container.id)
        self._patch(container, self.target_ip)

    def _patch(self, container: TrackedContainer, ip: str) -> None:
        self.patch_hosts(container, self.config.dependencies, self.config.network, self.config.target, ip)
