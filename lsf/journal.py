from __future__ import annotations

import sys
from collections import deque
from datetime import datetime, timezone
from threading import Lock
from typing import Any, TextIO

from .settings import settings


def utc_now() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


_lock = Lock()
_sink: TextIO | None = None
_history: deque[dict[str, Any]] = deque(maxlen=max(1, settings.event_buffer))


def set_sink(stream: TextIO | None) -> None:
    """Redirect journal lines. ``None`` means the current ``sys.stdout``."""
    global _sink
    with _lock:
        _sink = stream


def log_event(level: str, message: str, container: str | None = None) -> None:
    """Write one human-readable line and remember it for the status API."""
    entry = {"ts": utc_now(), "level": level.upper(), "container": container, "message": message}
    with _lock:
        _history.append(entry)
        out = _sink if _sink is not None else sys.stdout
        out.write(f"{entry['ts']} {entry['level']} {message}\n")
        out.flush()


def latest_events(limit: int = 100) -> list[dict[str, Any]]:
    with _lock:
        rows = list(_history)
    rows.reverse()
    return rows[: max(0, limit)]


def clear() -> None:
    with _lock:
        _history.clear()
