"""Application bootstrap wiring ports, adapters, and services."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from ripzip.app import ArchiveBuilder, ArchiveOptions, ArchiveResult, ZipService
from ripzip.app.adapters import ScandirWalker, ZipFileWriter
from ripzip.app.archive_builder import ProgressCallback
from ripzip.app.ports import ArchiveWriterFactory, WalkPort
from ripzip.config import Settings, get_settings


@dataclass(slots=True)
class ApplicationContainer:
    """Aggregates wired services and adapters for the CLI layer."""

    settings: Settings
    walk_port: WalkPort
    writer_factory: ArchiveWriterFactory
    archive_builder: ArchiveBuilder
    zip_service: ZipService


def bootstrap_application(
    settings: Settings | None = None,
    *,
    progress: ProgressCallback | None = None,
) -> ApplicationContainer:
    """Instantiate adapters and services for CLI consumption."""

    active_settings = settings or get_settings()

    walker = ScandirWalker()
    builder = ArchiveBuilder(
        walk_port=walker,
        writer_factory=ZipFileWriter,
        progress=progress,
    )
    zip_service = ZipService(
        builder,
        output_dir=active_settings.output_dir,
        keep_partial=active_settings.keep_partial,
    )

    return ApplicationContainer(
        settings=active_settings,
        walk_port=walker,
        writer_factory=ZipFileWriter,
        archive_builder=builder,
        zip_service=zip_service,
    )


def build_archive(
    source_directory: Path,
    destination_path: Path,
    verbose: bool = False,
    allow_large_files: bool = False,
    *,
    max_file_size: int | None = None,
    max_total_size: int | None = None,
) -> ArchiveResult:
    """Archive ``source_directory`` into ``destination_path`` with default adapters.

    Raises:
        ArchiveError: Any typed failure from the builder
    """
    builder = ArchiveBuilder(walk_port=ScandirWalker(), writer_factory=ZipFileWriter)
    options = ArchiveOptions(
        verbose=verbose,
        allow_zip64=allow_large_files,
        max_file_size=max_file_size,
        max_total_size=max_total_size,
    )
    return builder.build(Path(source_directory), Path(destination_path), options)
