"""Archive writer port interface and per-member options."""

from __future__ import annotations

from pathlib import Path
from types import TracebackType
from typing import Literal, Protocol

from pydantic import BaseModel, ConfigDict, Field

CompressionMethod = Literal["deflate", "stored"]


class MemberOptions(BaseModel):
    """Options applied to each archive member when it is started."""

    model_config = ConfigDict(frozen=True)

    compression: CompressionMethod = Field(
        default="deflate", description="Compression method for the member"
    )
    unix_permissions: int = Field(
        default=0o755, ge=0, le=0o7777, description="Unix permission bits stored in the entry"
    )
    unicode_names: bool = Field(
        default=True, description="Set the UTF-8 filename flag on the entry"
    )
    large_file: bool = Field(default=False, description="Write ZIP64 extensions for the entry")
    mtime: float | None = Field(
        default=None, description="Modification timestamp recorded for the entry"
    )


class ArchiveWriterPort(Protocol):
    """Port interface for a streaming archive writer.

    A writer is created over a destination file, accepts members in order and
    is finalized exactly once.
    """

    destination: Path

    def start_file(self, name: str, options: MemberOptions) -> None:
        """Begin a new member; any previously open member is closed."""
        ...

    def write(self, data: bytes) -> int:
        """Append raw bytes to the currently open member."""
        ...

    def finish(self) -> None:
        """Write the central directory; further writes are rejected."""
        ...

    def __enter__(self) -> ArchiveWriterPort: ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None: ...


class ArchiveWriterFactory(Protocol):
    """Callable that opens a writer over ``destination`` (create/overwrite)."""

    def __call__(self, destination: Path) -> ArchiveWriterPort: ...
