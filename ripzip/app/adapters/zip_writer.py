"""ZIP writer adapter backed by the standard library ``zipfile`` module."""

from __future__ import annotations

import logging
import stat
import time
from pathlib import Path
from types import TracebackType
from typing import IO
from zipfile import ZIP_DEFLATED, ZIP_STORED, LargeZipFile, ZipFile, ZipInfo

from ripzip.app.errors import ArchiveError, FormatFailure, IoFailure
from ripzip.app.ports import ArchiveWriterPort, MemberOptions

logger = logging.getLogger(__name__)

UTF8_FILENAME_FLAG = 0x800
CREATE_SYSTEM_UNIX = 3

_COMPRESSION = {
    "deflate": ZIP_DEFLATED,
    "stored": ZIP_STORED,
}

# Earliest and latest timestamps representable in a DOS date field.
_DOS_EPOCH = (1980, 1, 1, 0, 0, 0)
_DOS_MAX = (2107, 12, 31, 23, 59, 58)


def _dos_date_time(mtime: float | None) -> tuple[int, int, int, int, int, int]:
    if mtime is None:
        mtime = time.time()
    stamp = time.localtime(mtime)[:6]
    if stamp < _DOS_EPOCH:
        return _DOS_EPOCH
    if stamp > _DOS_MAX:
        return _DOS_MAX
    return stamp  # type: ignore[return-value]


class ZipFileWriter(ArchiveWriterPort):
    """Stream members into a ZIP file one at a time.

    Opening the writer creates (or truncates) ``destination``. Members are
    written through :meth:`start_file` / :meth:`write` and the central
    directory is written by :meth:`finish`, after which the writer rejects
    further use.
    """

    def __init__(self, destination: Path) -> None:
        self.destination = Path(destination)
        try:
            self._archive = ZipFile(
                self.destination, "w", compression=ZIP_DEFLATED, allowZip64=True
            )
        except OSError as exc:
            raise IoFailure(
                f"cannot create {self.destination}: {exc}", path=self.destination
            ) from exc
        self._member: IO[bytes] | None = None
        self._member_name: str | None = None
        self._finished = False

    @property
    def finished(self) -> bool:
        return self._finished

    def start_file(self, name: str, options: MemberOptions) -> None:
        if self._finished:
            raise FormatFailure(f"archive already finalized; cannot add {name!r}")
        if not name or name.startswith("/") or name.endswith("/") or "\x00" in name:
            raise FormatFailure(f"invalid member name {name!r}")

        self._close_member()

        info = ZipInfo(name, date_time=_dos_date_time(options.mtime))
        info.compress_type = _COMPRESSION[options.compression]
        info.create_system = CREATE_SYSTEM_UNIX
        info.external_attr = (stat.S_IFREG | options.unix_permissions) << 16

        try:
            self._member = self._archive.open(info, "w", force_zip64=options.large_file)
        except OSError as exc:
            raise IoFailure(f"cannot start {name!r}: {exc}", path=self.destination) from exc
        except (ValueError, RuntimeError) as exc:
            raise FormatFailure(f"cannot start {name!r}: {exc}", path=self.destination) from exc
        self._member_name = name

        # zipfile clears flag_bits when opening a member; the local header is
        # rewritten from ``info`` when the member is closed.
        if options.unicode_names:
            info.flag_bits |= UTF8_FILENAME_FLAG

    def write(self, data: bytes) -> int:
        if self._finished:
            raise FormatFailure("archive already finalized")
        if self._member is None:
            raise FormatFailure("no member has been started")
        try:
            return self._member.write(data)
        except OSError as exc:
            raise IoFailure(
                f"cannot write {self._member_name!r}: {exc}", path=self.destination
            ) from exc

    def finish(self) -> None:
        if self._finished:
            raise FormatFailure("archive already finalized")
        try:
            self._close_member()
        except ArchiveError:
            self.abort()
            raise
        self._finished = True
        try:
            self._archive.close()
        except OSError as exc:
            raise IoFailure(
                f"cannot finalize {self.destination}: {exc}", path=self.destination
            ) from exc
        except (LargeZipFile, ValueError, RuntimeError) as exc:
            raise FormatFailure(
                f"cannot finalize {self.destination}: {exc}", path=self.destination
            ) from exc

    def abort(self) -> None:
        """Release the destination file without a successful finish.

        Close errors are logged and dropped; the failure that led here is the
        one callers need to see.
        """
        if self._finished:
            return
        self._finished = True
        member, self._member = self._member, None
        if member is not None:
            try:
                member.close()
            except (OSError, ValueError, RuntimeError, LargeZipFile) as exc:
                logger.debug("Ignoring error closing %r on abort: %s", self._member_name, exc)
        try:
            self._archive.close()
        except (OSError, ValueError, RuntimeError, LargeZipFile) as exc:
            logger.debug("Ignoring error closing %s on abort: %s", self.destination, exc)

    def _close_member(self) -> None:
        member, self._member = self._member, None
        if member is None:
            return
        try:
            member.close()
        except OSError as exc:
            raise IoFailure(
                f"cannot complete {self._member_name!r}: {exc}", path=self.destination
            ) from exc
        except (LargeZipFile, RuntimeError) as exc:
            raise FormatFailure(
                f"cannot complete {self._member_name!r}: {exc}", path=self.destination
            ) from exc

    def __enter__(self) -> ZipFileWriter:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if exc_type is None:
            if not self._finished:
                self.finish()
        else:
            self.abort()
