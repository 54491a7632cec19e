from __future__ import annotations

from pydantic import BaseModel, Field

from .runtime import TickStatus
from .settings import StackConfig


class ContainerOut(BaseModel):
    id: str
    name: str | None = None
    service: str | None = None
    ip: str | None = Field(None, description="Address on the monitored network")
    flagged: bool = False


class StatusOut(BaseModel):
    network: str
    label_key: str
    target: str
    dependencies: list[str]
    target_ip: str | None = Field(None, description="Last known target address, sticky once set")
    running: bool
    ticks: int
    failed_ticks: int
    last_tick_at: str | None = None
    fatal_error: str | None = None
    containers: list[ContainerOut] = Field(default_factory=list)

    @classmethod
    def build(cls, config: StackConfig, status: TickStatus) -> "StatusOut":
        return cls(
            network=config.network,
            label_key=config.label_key,
            target=config.target,
            dependencies=list(config.dependencies),
            target_ip=status.target_ip,
            running=status.running,
            ticks=status.ticks,
            failed_ticks=status.failed_ticks,
            last_tick_at=status.last_tick_at,
            fatal_error=status.fatal_error,
            containers=[
                ContainerOut(id=c.id, name=c.name, service=c.service, ip=c.ip, flagged=c.flag is not None)
                for c in status.containers
            ],
        )
