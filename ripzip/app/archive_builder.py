"""Archive builder: walk a directory and stream its files into a ZIP archive.

One builder covers both operating modes. Leaving the size limits unset gives
the unlimited mode (optionally ZIP64 for every member); setting them gives the
size-capped mode where oversized files are skipped and an oversized total
aborts the build.
"""

from __future__ import annotations

import logging
import os
import shutil
from collections.abc import Callable, Iterator
from pathlib import Path
from zipfile import ZIP64_LIMIT

from pydantic import BaseModel, ConfigDict, Field

from ripzip.app.errors import IoFailure, LimitExceeded, NotFound, PathFailure
from ripzip.app.ports import (
    ArchiveWriterFactory,
    ArchiveWriterPort,
    MemberOptions,
    WalkEntry,
    WalkPort,
)
from ripzip.utils.paths import get_relative_path, has_parent_segment, to_member_name
from ripzip.utils.sizes import GIB, format_size

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 100
DEFAULT_MAX_FILE_SIZE = 1 * GIB
DEFAULT_MAX_TOTAL_SIZE = 4 * GIB
DEFAULT_PERMISSIONS = 0o755
COPY_BUFFER_SIZE = 1024 * 1024

# Compressed output can be slightly larger than its input.
ZIP64_THRESHOLD = ZIP64_LIMIT * 95 // 100

ProgressCallback = Callable[[str], None]


def _describe_limit(limit: int | None) -> str:
    return "unlimited" if limit is None else format_size(limit)


class ArchiveOptions(BaseModel):
    """Per-build configuration. ``None`` size limits mean unlimited."""

    model_config = ConfigDict(frozen=True)

    verbose: bool = False
    allow_zip64: bool = False
    max_file_size: int | None = Field(default=None, ge=0)
    max_total_size: int | None = Field(default=None, ge=0)
    max_depth: int = Field(default=DEFAULT_MAX_DEPTH, ge=1)
    same_file_system: bool = True

    @classmethod
    def size_capped(cls, **overrides: object) -> ArchiveOptions:
        """Options with the default per-file and cumulative caps applied."""
        values: dict[str, object] = {
            "max_file_size": DEFAULT_MAX_FILE_SIZE,
            "max_total_size": DEFAULT_MAX_TOTAL_SIZE,
        }
        values.update(overrides)
        return cls.model_validate(values)

    @property
    def is_size_capped(self) -> bool:
        return self.max_file_size is not None or self.max_total_size is not None


class ArchiveEntry(BaseModel):
    """A regular file written to the archive."""

    model_config = ConfigDict(frozen=True)

    source_path: Path
    name: str
    size: int = Field(..., ge=0)


class SkippedEntry(BaseModel):
    """A file that was deliberately left out of the archive."""

    model_config = ConfigDict(frozen=True)

    source_path: Path
    reason: str


class ArchiveResult(BaseModel):
    """Summary of a completed archive build."""

    source: Path
    destination: Path
    entries: list[ArchiveEntry] = Field(default_factory=list)
    skipped: list[SkippedEntry] = Field(default_factory=list)
    total_bytes: int = 0

    @property
    def member_names(self) -> list[str]:
        return [entry.name for entry in self.entries]


class ArchiveBuilder:
    """Build one ZIP archive from one source directory.

    Traversal goes through ``walk_port`` and output through writers created by
    ``writer_factory``; the builder itself only decides what goes in and under
    which name.
    """

    def __init__(
        self,
        *,
        walk_port: WalkPort,
        writer_factory: ArchiveWriterFactory,
        progress: ProgressCallback | None = None,
    ) -> None:
        self.walk_port = walk_port
        self.writer_factory = writer_factory
        self.progress: ProgressCallback = progress or print

    def build(
        self,
        source: Path,
        destination: Path,
        options: ArchiveOptions | None = None,
    ) -> ArchiveResult:
        """Write every qualifying file under ``source`` into ``destination``.

        Args:
            source: Directory to archive
            destination: Archive path; created or overwritten
            options: Build configuration (defaults to unlimited, no ZIP64)

        Returns:
            ArchiveResult listing written and skipped entries

        Raises:
            NotFound: If ``source`` is missing or not a directory
            IoFailure: On create, walk, read, write or finalize errors
            PathFailure: If a walked entry is not under ``source``
            LimitExceeded: If the cumulative size cap is breached
            FormatFailure: If the writer rejects a member or finalization
        """
        options = options or ArchiveOptions()
        source = Path(source)
        destination = Path(destination)

        if not source.exists():
            raise NotFound(f"Source directory does not exist: {source}", path=source)
        if not source.is_dir():
            raise NotFound(f"Source is not a directory: {source}", path=source)

        if options.verbose:
            self.progress(f"Creating ZIP file: {destination}")
        if options.is_size_capped:
            logger.debug(
                "Size caps: per file %s, total %s",
                _describe_limit(options.max_file_size),
                _describe_limit(options.max_total_size),
            )

        result = ArchiveResult(source=source, destination=destination)

        with self.writer_factory(destination) as writer:
            try:
                destination_stat = os.stat(writer.destination)
            except OSError as exc:
                raise IoFailure(
                    f"cannot stat {writer.destination}: {exc}", path=writer.destination
                ) from exc

            written: set[str] = set()
            for walk_entry in self._iter_files(source, options):
                path = walk_entry.path
                try:
                    relative = get_relative_path(path, source)
                except ValueError as exc:
                    raise PathFailure(f"{path} is not under {source}", path=path) from exc

                if has_parent_segment(relative):
                    self._skip(result, path, "path contains a parent-directory segment")
                    continue

                try:
                    file_stat = os.stat(path)
                except OSError as exc:
                    raise IoFailure(f"cannot stat {path}: {exc}", path=path) from exc

                if os.path.samestat(file_stat, destination_stat):
                    logger.debug("Skipping the archive being written: %s", path)
                    result.skipped.append(
                        SkippedEntry(source_path=path, reason="destination archive")
                    )
                    continue

                name = to_member_name(relative)
                if name in written:
                    # Distinct undecodable names can map to the same lossy name.
                    self._skip(result, path, f"duplicate member name {name!r}")
                    continue
                if options.verbose:
                    self.progress(f"Adding file: {name}")

                size = file_stat.st_size
                if options.max_file_size is not None and size > options.max_file_size:
                    self._skip(
                        result,
                        path,
                        f"{format_size(size)} exceeds per-file limit "
                        f"{format_size(options.max_file_size)}",
                    )
                    continue

                result.total_bytes += size
                limit = options.max_total_size
                if limit is not None and result.total_bytes > limit:
                    raise LimitExceeded(
                        f"total size {format_size(result.total_bytes)} exceeds limit "
                        f"{format_size(limit)} at {name}",
                        path=path,
                        total=result.total_bytes,
                        limit=limit,
                    )

                writer.start_file(
                    name,
                    MemberOptions(
                        unix_permissions=DEFAULT_PERMISSIONS,
                        large_file=options.allow_zip64 or size > ZIP64_THRESHOLD,
                        mtime=file_stat.st_mtime,
                    ),
                )
                self._copy(path, writer)
                written.add(name)
                result.entries.append(ArchiveEntry(source_path=path, name=name, size=size))

            writer.finish()

        logger.debug(
            "Wrote %d entries (%s) to %s",
            len(result.entries),
            format_size(result.total_bytes),
            destination,
        )
        return result

    def _iter_files(self, source: Path, options: ArchiveOptions) -> Iterator[WalkEntry]:
        walker = self.walk_port.walk(
            source,
            max_depth=options.max_depth,
            same_file_system=options.same_file_system,
        )
        while True:
            try:
                entry = next(walker)
            except StopIteration:
                return
            except OSError as exc:
                raise IoFailure(f"cannot walk {source}: {exc}", path=source) from exc
            if entry.is_file:
                yield entry

    @staticmethod
    def _copy(path: Path, writer: ArchiveWriterPort) -> None:
        try:
            with path.open("rb") as handle:
                shutil.copyfileobj(handle, writer, COPY_BUFFER_SIZE)
        except OSError as exc:
            raise IoFailure(f"cannot read {path}: {exc}", path=path) from exc

    @staticmethod
    def _skip(result: ArchiveResult, path: Path, reason: str) -> None:
        logger.warning("Skipping %s: %s", path, reason)
        result.skipped.append(SkippedEntry(source_path=path, reason=reason))

