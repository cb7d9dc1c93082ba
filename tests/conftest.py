"""Pytest configuration and fixtures."""

import gc
import logging
import os
import shutil
import tempfile
import time
import zipfile
from collections.abc import Generator
from pathlib import Path

import pytest

from ripzip.app import ArchiveBuilder
from ripzip.app.adapters import ScandirWalker, ZipFileWriter
from ripzip.config import Settings


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    tmpdir = tempfile.mkdtemp()
    try:
        yield Path(tmpdir)
    finally:
        # Force garbage collection to release any file handles
        gc.collect()
        # Small delay to allow OS to release file locks
        time.sleep(0.1)
        # Retry cleanup with ignore_errors for better cross-platform support
        shutil.rmtree(tmpdir, ignore_errors=True)


@pytest.fixture
def docs_dir(temp_dir: Path) -> Path:
    """Create ``docs/`` with ``a.txt`` (10 bytes) and ``sub/b.txt`` (20 bytes)."""
    docs = temp_dir / "docs"
    (docs / "sub").mkdir(parents=True)
    (docs / "a.txt").write_bytes(b"0123456789")
    (docs / "sub" / "b.txt").write_bytes(b"abcdefghijklmnopqrst")
    return docs


@pytest.fixture
def nested_files(temp_dir: Path) -> Path:
    """Create nested directory structure with files."""
    root = temp_dir / "project"
    sub1 = root / "custodians" / "john_doe"
    sub1.mkdir(parents=True)

    sub2 = root / "custodians" / "jane_smith"
    sub2.mkdir(parents=True)

    (root / "readme.md").write_text("# README\n\nThis is a markdown file.")
    (sub1 / "doc1.txt").write_text("Document from John Doe.")
    (sub1 / "doc2.txt").write_text("Another document from John.")
    (sub2 / "doc1.txt").write_text("Document from Jane Smith.")

    return root


@pytest.fixture
def builder() -> ArchiveBuilder:
    """Archive builder wired with the real adapters and a silent progress sink."""
    return ArchiveBuilder(
        walk_port=ScandirWalker(),
        writer_factory=ZipFileWriter,
        progress=lambda line: None,
    )


@pytest.fixture
def override_settings(temp_dir: Path) -> Generator[Settings, None, None]:
    """Provide isolated ripzip settings scoped to tests."""

    import ripzip.config as config_module

    original_settings = getattr(config_module, "_settings", None)

    settings = config_module.Settings(_env_file=None)
    config_module._settings = settings

    try:
        yield settings
    finally:
        config_module._settings = original_settings


@pytest.fixture(autouse=True)
def reset_ripzip_logger() -> Generator[None, None, None]:
    """Undo logging changes the CLI makes so caplog keeps working."""
    yield
    logger = logging.getLogger("ripzip")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


def read_archive(path: Path) -> dict[str, bytes]:
    """Return ``{member name: content}`` for every member of ``path``."""
    with zipfile.ZipFile(path) as archive:
        return {name: archive.read(name) for name in archive.namelist()}


def can_symlink(directory: Path) -> bool:
    """Return True when the platform allows creating symlinks in ``directory``."""
    link = directory / ".symlink-check"
    try:
        os.symlink(directory, link)
    except (OSError, NotImplementedError):
        return False
    link.unlink()
    return True
