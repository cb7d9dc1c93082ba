"""Byte-size parsing and formatting for size limits."""

from __future__ import annotations

import re

KIB = 1024
MIB = 1024 * KIB
GIB = 1024 * MIB
TIB = 1024 * GIB

_UNITS: dict[str, int] = {
    "": 1,
    "B": 1,
    "K": KIB,
    "KB": KIB,
    "KIB": KIB,
    "M": MIB,
    "MB": MIB,
    "MIB": MIB,
    "G": GIB,
    "GB": GIB,
    "GIB": GIB,
    "T": TIB,
    "TB": TIB,
    "TIB": TIB,
}

_SIZE_PATTERN = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*([A-Za-z]*)\s*$")


def parse_size(value: str | int) -> int:
    """Parse a human-readable size into bytes.

    Accepts plain integers (``1024``) or a number followed by a binary unit
    suffix (``10K``, ``5MB``, ``2GiB``, ``1.5G``). Units are case-insensitive.

    Args:
        value: Size expression or integer byte count

    Returns:
        Size in bytes

    Raises:
        ValueError: If the expression cannot be parsed or is negative
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid size: {value!r}")
    if isinstance(value, int):
        if value < 0:
            raise ValueError(f"Size must be non-negative: {value}")
        return value

    match = _SIZE_PATTERN.match(value)
    if match is None:
        raise ValueError(f"Invalid size: {value!r}")

    number, unit = match.groups()
    multiplier = _UNITS.get(unit.upper())
    if multiplier is None:
        raise ValueError(f"Unknown size unit {unit!r} in {value!r}")

    return int(float(number) * multiplier)


def format_size(size: int) -> str:
    """Render ``size`` bytes using the largest binary unit that fits."""
    for suffix, multiplier in (("TiB", TIB), ("GiB", GIB), ("MiB", MIB), ("KiB", KIB)):
        if size >= multiplier:
            return f"{size / multiplier:.1f} {suffix}"
    return f"{size} B"
