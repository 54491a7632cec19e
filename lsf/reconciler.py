from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Union

from .settings import StackConfig
from .snapshot import RawContainer, TrackedContainer


@dataclass(frozen=True)
class Target:
    """The target service showed up on the network."""

    container: TrackedContainer
    active: list[TrackedContainer]
    ip: str


@dataclass(frozen=True)
class New:
    """A flagged container joined the network."""

    container: TrackedContainer


@dataclass(frozen=True)
class Gone:
    container: TrackedContainer


@dataclass(frozen=True)
class NoFlag:
    container: TrackedContainer


@dataclass(frozen=True)
class OutsideNetwork:
    container: TrackedContainer


Event = Union[Target, New, Gone, NoFlag, OutsideNetwork]


class Reconciler:
    """Turns successive full snapshots into a stream of container events."""

    def __init__(self, config: StackConfig):
        self.config = config
        self.tracked: dict[str, TrackedContainer] = {}

    def reconcile(self, snapshot: Mapping[str, RawContainer]) -> list[Event]:
        events: list[Event] = []
        fresh = dict(snapshot)
        kept: dict[str, TrackedContainer] = {}

        for cid, container in self.tracked.items():
            if cid in fresh:
                del fresh[cid]
                kept[cid] = container
            else:
                events.append(Gone(container))

        # Participants are taken from containers that survived this poll only,
        # not from ones first seen alongside the target.
        active = [c for c in kept.values() if c.participates]

        for cid, raw in fresh.items():
            container = TrackedContainer.derive(raw, self.config.network, self.config.label_key)
            events.append(self._classify(container, active))
            kept[cid] = container

        self.tracked = kept
        return events

    def _classify(self, container: TrackedContainer, active: list[TrackedContainer]) -> Event:
        if container.ip is not None and container.service == self.config.target:
            return Target(container, list(active), container.ip)
        if container.ip is not None and container.flag is not None:
            return New(container)
        if container.ip is not None:
            return NoFlag(container)
        return OutsideNetwork(container)
