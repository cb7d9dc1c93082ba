"""Port interfaces for the ripzip application layer.

These protocol interfaces define contracts for adapters.
Archive logic depends on these ports, never on concrete implementations.
"""

__all__ = [
    "ArchiveWriterFactory",
    "ArchiveWriterPort",
    "CompressionMethod",
    "MemberOptions",
    "WalkEntry",
    "WalkPort",
]

from ripzip.app.ports.archive import (
    ArchiveWriterFactory,
    ArchiveWriterPort,
    CompressionMethod,
    MemberOptions,
)
from ripzip.app.ports.walk import WalkEntry, WalkPort
