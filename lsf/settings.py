from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass

from pydantic import BaseModel, Field, ValidationError


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    # Core
    config_path: str = os.getenv("LOCAL_STACK_FOCUS", "/local_stack_focus.toml")
    tick_s: float = _env_float("LSF_TICK_S", 1.0)
    event_buffer: int = _env_int("LSF_EVENT_BUFFER", 200)

    # CLI
    api_url: str = os.getenv("LSF_API", "http://localhost:8000")


settings = Settings()


class ConfigError(Exception):
    pass


class StackConfig(BaseModel):
    """Which containers to watch and what they should resolve.

    Example ``local_stack_focus.toml``::

        network = "myproject_default"
        label_key = "local-stack-focus"
        target = "proxy"
        dependencies = ["api.localhost", "web.localhost"]
    """

    network: str = Field(..., min_length=1, description="Docker network to monitor")
    label_key: str = Field(..., min_length=1, description="Label marking dependent containers")
    target: str = Field(..., min_length=1, description="Compose service name of the target")
    dependencies: list[str] = Field(default_factory=list, description="Hostnames routed to the target")


def load_config(path: str | None = None) -> StackConfig:
    path = path or settings.config_path
    try:
        with open(path, "rb") as fh:
            raw = tomllib.load(fh)
    except OSError as e:
        raise ConfigError(f"cannot read config file {path}: {e}") from e
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"invalid TOML in {path}: {e}") from e

    try:
        return StackConfig(**raw)
    except ValidationError as e:
        raise ConfigError(f"invalid config in {path}: {e}") from e
