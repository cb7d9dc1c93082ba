"""Walk port interface for lazy directory traversal."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol


@dataclass(frozen=True, slots=True)
class WalkEntry:
    """One filesystem entry produced by a walk."""

    path: Path
    depth: int
    is_file: bool


class WalkPort(Protocol):
    """Port interface for recursive directory traversal.

    Implementations never follow symbolic links and report ``is_file`` only for
    regular files. Each call to :meth:`walk` starts a fresh traversal.
    """

    def walk(
        self,
        root: Path,
        *,
        max_depth: int,
        same_file_system: bool = True,
    ) -> Iterator[WalkEntry]:
        """Yield entries under ``root`` down to ``max_depth`` levels."""
        ...
