"""Destination planning for directory archives.

Computes a collision-free ``.zip`` path next to the source directory. The
planner only checks for existence; it never creates or removes files.
"""

from __future__ import annotations

import unicodedata
from pathlib import Path

FALLBACK_NAME = "archive"
ARCHIVE_SUFFIX = ".zip"

_RESERVED_CHARACTERS = frozenset('\\/:*?"<>|\x00')


def sanitize_filename(name: str) -> str:
    """Replace characters that are unsafe in file names with ``_``.

    Covers the Windows-reserved set ``\\ / : * ? " < > |``, NUL and every
    control character.
    """
    return "".join(
        "_" if char in _RESERVED_CHARACTERS or unicodedata.category(char) == "Cc" else char
        for char in name
    )


def archive_base_name(source_directory: Path) -> str:
    """Return the sanitized base name used for archives of ``source_directory``."""
    name = Path(source_directory).name
    if not name or name == "..":
        name = FALLBACK_NAME
    return sanitize_filename(name)


def plan_output_path(source_directory: Path, *, output_dir: Path | None = None) -> Path:
    """Return the first unused ``{name}.zip`` / ``{name} (N).zip`` path.

    Args:
        source_directory: Directory that will be archived
        output_dir: Directory to place the archive in (defaults to the
            parent of ``source_directory``, or ``.`` when it has none)

    Returns:
        Destination path that did not exist at the time of the call
    """
    source_directory = Path(source_directory)
    safe_name = archive_base_name(source_directory)

    if output_dir is not None:
        directory = Path(output_dir)
    else:
        directory = source_directory.parent if source_directory.name else Path(".")

    candidate = directory / f"{safe_name}{ARCHIVE_SUFFIX}"
    counter = 1
    while candidate.exists():
        candidate = directory / f"{safe_name} ({counter}){ARCHIVE_SUFFIX}"
        counter += 1

    return candidate
