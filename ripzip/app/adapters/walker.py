"""Directory walk adapter built on ``os.scandir``."""

from __future__ import annotations

import logging
import os
import stat
from collections.abc import Iterator
from pathlib import Path

from ripzip.app.ports import WalkEntry, WalkPort

logger = logging.getLogger(__name__)


class ScandirWalker(WalkPort):
    """Depth-first walk that never follows symlinks.

    The root is depth 0 and is always followed (even when it is a link);
    its children are depth 1. Directories at ``max_depth`` are reported but
    not descended into. Siblings are yielded in name order so repeated walks
    over an unchanged tree produce the same sequence.
    """

    def walk(
        self,
        root: Path,
        *,
        max_depth: int,
        same_file_system: bool = True,
    ) -> Iterator[WalkEntry]:
        root = Path(root)
        root_stat = os.stat(root)
        yield WalkEntry(path=root, depth=0, is_file=stat.S_ISREG(root_stat.st_mode))

        if not stat.S_ISDIR(root_stat.st_mode) or max_depth < 1:
            return

        device = root_stat.st_dev if same_file_system else None
        # One sorted listing per open directory; depth of its children.
        pending: list[tuple[Iterator[os.DirEntry[str]], int]] = [(self._listing(root), 1)]
        while pending:
            entries, depth = pending[-1]
            entry = next(entries, None)
            if entry is None:
                pending.pop()
                continue

            path = Path(entry.path)
            if entry.is_symlink():
                logger.debug("Not following symlink %s", path)
                yield WalkEntry(path=path, depth=depth, is_file=False)
                continue

            is_dir = entry.is_dir(follow_symlinks=False)
            yield WalkEntry(
                path=path,
                depth=depth,
                is_file=entry.is_file(follow_symlinks=False),
            )

            if not is_dir:
                continue
            if depth >= max_depth:
                logger.debug("Depth ceiling %d reached; not descending into %s", max_depth, path)
                continue
            if device is not None and entry.stat(follow_symlinks=False).st_dev != device:
                logger.debug("Not crossing filesystem boundary at %s", path)
                continue

            pending.append((self._listing(path), depth + 1))

    @staticmethod
    def _listing(directory: Path) -> Iterator[os.DirEntry[str]]:
        with os.scandir(directory) as it:
            entries = sorted(it, key=lambda entry: entry.name)
        return iter(entries)
