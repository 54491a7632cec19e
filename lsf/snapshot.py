from __future__ import annotations

from dataclasses import dataclass, field

COMPOSE_SERVICE_LABEL = "com.docker.compose.service"


@dataclass(frozen=True)
class RawContainer:
    """One container as reported by a single poll."""

    id: str
    name: str | None = None
    networks: dict[str, str] = field(default_factory=dict)  # network name -> ip
    labels: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class TrackedContainer:
    """A container as first seen by the reconciler.

    Derived once from the first RawContainer carrying this id and kept as-is
    until the id disappears from a poll.
    """

    id: str
    name: str | None = None
    service: str | None = None
    ip: str | None = None
    flag: str | None = None

    @classmethod
    def derive(cls, raw: RawContainer, network: str, label_key: str) -> "TrackedContainer":
        return cls(
            id=raw.id,
            name=raw.name,
            service=raw.labels.get(COMPOSE_SERVICE_LABEL),
            ip=raw.networks.get(network),
            flag=raw.labels.get(label_key),
        )

    @property
    def short_id(self) -> str:
        return self.id[:16]

    @property
    def participates(self) -> bool:
        return self.flag is not None and self.ip is not None

    def __str__(self) -> str:
        parts = [f"container {self.short_id}", "flagged" if self.flag is not None else "unflagged"]
        if self.service is not None:
            parts.append(f"service {self.service}")
        parts.append(f"named {self.name}" if self.name is not None else "unnamed")
        parts.append(f"in network at ip {self.ip}" if self.ip is not None else "orphan")
        return " ".join(parts)
