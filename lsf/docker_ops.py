from __future__ import annotations

import io
import tarfile
from typing import Any, Sequence

import docker
from docker.errors import DockerException
from requests import RequestException

from .hosts import rewrite, unescape
from .journal import log_event
from .snapshot import RawContainer, TrackedContainer

HOSTS_PATH = "/etc/hosts"


class PollFailure(Exception):
    """Listing containers failed; the tracked state can no longer be trusted."""


class PatchFailure(Exception):
    pass


class NoName(PatchFailure):
    def __init__(self, container_id: str):
        super().__init__(f"container {container_id} has no name, cannot fetch from it")
        self.container_id = container_id


class NoHost(PatchFailure):
    def __init__(self, container_id: str):
        super().__init__(f"container {container_id} has no {HOSTS_PATH} file")
        self.container_id = container_id


def _client() -> docker.DockerClient:
    return docker.from_env()


def to_raw(container: Any) -> RawContainer:
    """Map a docker-py Container onto the snapshot model."""
    networks = (container.attrs.get("NetworkSettings") or {}).get("Networks") or {}
    return RawContainer(
        id=container.id,
        name=container.name or None,
        networks={net: (opts or {}).get("IPAddress", "") for net, opts in networks.items()},
        labels=dict(container.labels or {}),
    )


def poll() -> dict[str, RawContainer]:
    """Return every running container keyed by id."""
    try:
        # Containers removed between listing and inspection are left out.
        containers = _client().containers.list(ignore_removed=True)
    except (DockerException, RequestException) as e:
        raise PollFailure(f"cannot list containers: {e}") from e
    out: dict[str, RawContainer] = {}
    for c in containers:
        raw = to_raw(c)
        out[raw.id] = raw
    return out


def read_hosts(container: Any) -> str:
    """Fetch /etc/hosts through the archive endpoint."""
    stream, _stat = container.get_archive(HOSTS_PATH)
    data = b"".join(stream)
    try:
        with tarfile.open(fileobj=io.BytesIO(data)) as tar:
            member = tar.next()
            fh = tar.extractfile(member) if member is not None else None
            if fh is None:
                raise NoHost(container.id)
            return fh.read().decode("utf-8")
    except (tarfile.TarError, UnicodeDecodeError) as e:
        raise NoHost(container.id) from e


def write_hosts(container: Any, content: str) -> None:
    # /etc/hosts is bind-mounted by the engine, so it is overwritten in place.
    result = container.exec_run(
        ["sh", "-c", f'printf "%s" "$1" > {HOSTS_PATH}', "sh", content],
        privileged=True,
        user="root",
    )
    if result.exit_code != 0:
        output = (result.output or b"").decode("utf-8", errors="replace").strip()
        raise PatchFailure(f"writing {HOSTS_PATH} in {container.name} failed ({result.exit_code}): {output}")


def patch_hosts(
    container: TrackedContainer,
    dependencies: Sequence[str],
    network: str,
    target: str,
    ip: str,
) -> None:
    """Point ``dependencies`` at ``ip`` inside ``container``'s hosts file."""
    if not container.name:
        raise NoName(container.id)
    try:
        live = _client().containers.get(container.name)
        content = unescape(read_hosts(live))
        write_hosts(live, rewrite(content, dependencies, network, target, ip))
    except (DockerException, RequestException) as e:
        raise PatchFailure(f"cannot patch {HOSTS_PATH} of {container.name}: {e}") from e
    log_event("INFO", f"patched {HOSTS_PATH} of {container.name} -> {ip}", container=container.id)
