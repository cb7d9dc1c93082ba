"""Concrete adapters wiring application ports to built-in implementations."""

from __future__ import annotations

from .walker import ScandirWalker
from .zip_writer import ZipFileWriter

__all__ = [
    "ScandirWalker",
    "ZipFileWriter",
]
