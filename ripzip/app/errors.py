"""Typed failures raised while building an archive."""

from __future__ import annotations

from pathlib import Path


class ArchiveError(Exception):
    """Base class for failures that abort a single archive build."""

    kind = "archive"
    label = "Archive error"

    def __init__(self, message: str, *, path: Path | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.path = path

    def __str__(self) -> str:
        return f"{self.label}: {self.message}"


class NotFound(ArchiveError):
    """Source directory does not exist or is not a directory."""

    kind = "not_found"
    label = "Not found"


class IoFailure(ArchiveError):
    """File creation, read, write, walk or finalize error."""

    kind = "io"
    label = "IO error"


class PathFailure(ArchiveError):
    """An entry could not be expressed relative to the source directory."""

    kind = "path"
    label = "Path error"


class LimitExceeded(ArchiveError):
    """Cumulative size cap breached."""

    kind = "limit"
    label = "Size limit exceeded"

    def __init__(
        self,
        message: str,
        *,
        path: Path | None = None,
        total: int = 0,
        limit: int = 0,
    ) -> None:
        super().__init__(message, path=path)
        self.total = total
        self.limit = limit


class FormatFailure(ArchiveError):
    """Archive writer rejected an operation (bad member name, closed writer)."""

    kind = "format"
    label = "ZIP error"
