"""Application layer for ripzip.

Archive logic lives here; filesystem traversal and ZIP encoding are delegated
to adapters via port interfaces.
"""

__all__ = [
    "ArchiveBuilder",
    "ArchiveOptions",
    "ArchiveResult",
    "JobOutcome",
    "ZipService",
    "plan_output_path",
]

from ripzip.app.archive_builder import ArchiveBuilder, ArchiveOptions, ArchiveResult
from ripzip.app.path_planner import plan_output_path
from ripzip.app.zip_service import JobOutcome, ZipService
