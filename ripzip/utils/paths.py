"""Path utilities for archive member naming."""

from __future__ import annotations

import os
from pathlib import Path, PurePath


def ensure_dir(path: Path) -> Path:
    """Ensure directory exists, creating if necessary."""
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_relative_path(path: Path, base: Path) -> PurePath:
    """Return ``path`` relative to ``base``.

    Raises:
        ValueError: If ``path`` does not reside under ``base``
    """
    return path.relative_to(base)


def has_parent_segment(relative_path: PurePath) -> bool:
    """Return True when any component of ``relative_path`` is ``..``."""
    return any(part == os.pardir or part == ".." for part in relative_path.parts)


def to_member_name(relative_path: PurePath) -> str:
    """Convert a relative path into a forward-slash archive member name.

    The host separator is never used. Components that cannot be encoded as
    UTF-8 (undecodable bytes surfaced as lone surrogates on POSIX) are
    converted lossily with U+FFFD instead of failing.
    """
    name = "/".join(relative_path.parts)
    try:
        name.encode("utf-8")
    except UnicodeEncodeError:
        name = os.fsencode(name).decode("utf-8", errors="replace")
    return name

