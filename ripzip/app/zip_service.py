"""Per-directory archive jobs: plan a destination, build, report."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from ripzip.app.archive_builder import ArchiveBuilder, ArchiveOptions, ArchiveResult
from ripzip.app.errors import ArchiveError, IoFailure
from ripzip.app.path_planner import plan_output_path
from ripzip.utils.paths import ensure_dir

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class JobOutcome:
    """Result of archiving one source directory."""

    source: Path
    destination: Path | None = None
    result: ArchiveResult | None = None
    error: ArchiveError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.result is not None


class ZipService:
    """Archive directories one after another, isolating failures per job."""

    def __init__(
        self,
        builder: ArchiveBuilder,
        *,
        output_dir: Path | None = None,
        keep_partial: bool = False,
    ) -> None:
        self.builder = builder
        self.output_dir = output_dir
        self.keep_partial = keep_partial

    def archive_directory(
        self,
        source: Path,
        options: ArchiveOptions | None = None,
    ) -> JobOutcome:
        """Plan a destination for ``source`` and build the archive.

        Failures are captured on the returned outcome rather than raised. A
        partially written archive is removed unless ``keep_partial`` is set.
        """
        source = Path(source)
        outcome = JobOutcome(source=source)

        if self.output_dir is not None:
            try:
                ensure_dir(self.output_dir)
            except OSError as exc:
                outcome.error = IoFailure(
                    f"cannot create output directory {self.output_dir}: {exc}",
                    path=self.output_dir,
                )
                return outcome

        destination = plan_output_path(source, output_dir=self.output_dir)
        outcome.destination = destination

        try:
            outcome.result = self.builder.build(source, destination, options)
        except ArchiveError as exc:
            logger.debug("Archive build for %s failed: %s", source, exc)
            outcome.error = exc
            self._discard_partial(destination)
        return outcome

    def archive_all(
        self,
        sources: Iterable[Path],
        options: ArchiveOptions | None = None,
    ) -> list[JobOutcome]:
        """Archive each source in order; one failure never stops the rest."""
        return [self.archive_directory(source, options) for source in sources]

    def _discard_partial(self, destination: Path) -> None:
        if self.keep_partial or not destination.exists():
            return
        logger.debug("Removing incomplete archive %s", destination)
        try:
            destination.unlink()
        except OSError as exc:
            logger.warning("Could not remove incomplete archive %s: %s", destination, exc)
