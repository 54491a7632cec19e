from __future__ import annotations

from typing import Iterable

PRODUCT = "local-stack-focus"


def guard_markers(network: str, target: str, product: str = PRODUCT) -> tuple[str, str]:
    """Return the (open, close) marker lines delimiting a managed block."""
    return (
        f"### open {product} {network} {target}\n",
        f"### close {product} {network} {target}\n",
    )


def strip_block(content: str, open_marker: str, close_marker: str) -> str:
    """Drop the managed block, keeping what precedes the first open marker
    and what follows the first close marker."""
    before = content.split(open_marker, 1)[0]
    parts = content.split(close_marker, 1)
    after = parts[1] if len(parts) > 1 else ""
    return before + after


def rewrite(
    content: str,
    hostnames: Iterable[str],
    network: str,
    target: str,
    host_ip: str,
    product: str = PRODUCT,
) -> str:
    """Replace the (network, target) block of a hosts file.

    The new block is always appended at the end of the file, one
    ``<ip>\\t<hostname>`` line per hostname. Text outside the markers is kept
    byte for byte, so applying the same rewrite twice is a no-op.
    """
    open_marker, close_marker = guard_markers(network, target, product)
    kept = strip_block(content, open_marker, close_marker)
    lines = "".join(f"{host_ip}\t{name}\n" for name in hostnames)
    return f"{kept}{open_marker}{lines}{close_marker}"


def unescape(content: str) -> str:
    # The archive transport may hand back literal "\t" / "\n" sequences.
    return content.replace("\\t", "\t").replace("\\n", "\n")
