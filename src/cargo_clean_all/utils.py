"""Shared utility functions."""

from __future__ import annotations

import re
from datetime import datetime
from pathlib import Path

_SIZE_RE = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*([a-z]*)\s*$", re.IGNORECASE)

# Decimal prefixes count in powers of 1000, binary (``*iB``) ones in powers of 1024.
_SIZE_UNITS = {
    "": 1,
    "b": 1,
    "k": 1000,
    "kb": 1000,
    "m": 1000**2,
    "mb": 1000**2,
    "g": 1000**3,
    "gb": 1000**3,
    "t": 1000**4,
    "tb": 1000**4,
    "p": 1000**5,
    "pb": 1000**5,
    "kib": 1024,
    "mib": 1024**2,
    "gib": 1024**3,
    "tib": 1024**4,
    "pib": 1024**5,
}


def parse_bytes(value: str) -> int:
    """Parse a human-readable size such as ``500MB``, ``1KiB`` or ``1024``.

    Raises:
        ValueError: If the string is not a size.
    """
    match = _SIZE_RE.match(value)
    if match is None:
        raise ValueError(f"Invalid size: {value!r}")
    number, unit = match.groups()
    factor = _SIZE_UNITS.get(unit.lower())
    if factor is None:
        raise ValueError(f"Unknown size unit {unit!r} in {value!r}")
    return int(float(number) * factor)


def bytes_to_human(size_bytes: int) -> str:
    """Convert byte count to a human-readable string.

    Uses decimal units, the same ones :func:`parse_bytes` reads for ``KB``/``MB``/...
    """
    if size_bytes < 0:
        return f"-{bytes_to_human(-size_bytes)}"
    if size_bytes == 0:
        return "0 B"

    units = ("B", "KB", "MB", "GB", "TB")
    value = float(size_bytes)
    for unit in units[:-1]:
        if abs(value) < 1000:
            return f"{value:.1f} {unit}" if unit != "B" else f"{int(value)} B"
        value /= 1000
    return f"{value:.1f} {units[-1]}"


def format_timestamp(timestamp: float) -> str:
    """Format a POSIX timestamp in local time as ``YYYY-MM-DD HH:MM``."""
    return datetime.fromtimestamp(timestamp).strftime("%Y-%m-%d %H:%M")


def pretty_format_path(path: Path | str) -> str:
    """Render a path for display.

    Drops the ``\\\\?\\`` prefix of canonical Windows paths and uses ``/``
    as separator.  The result identifies a project; it is not meant to be
    copied back into a shell.
    """
    return str(path).replace("\\\\?\\", "").replace("\\", "/")
