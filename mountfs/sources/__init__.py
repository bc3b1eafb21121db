"""Data source implementations.

    - OSDir / OSFile: Directories and files on the local disk
    - ZipDir / ZipEntry: Read-only contents of a zip archive
    - MemoryDir / MemoryFile: Writable in-memory tree
"""

from pathlib import Path
from typing import Optional

from mountfs.base import DataSource
from mountfs.sources.archive import ArchiveReadOnlyError, ZipDir, ZipEntry
from mountfs.sources.local import OSDir, OSFile
from mountfs.sources.memory import MemoryDir, MemoryFile

SOURCE_KINDS = ("os", "zip", "memory")


def open_source(kind: str, target: Optional[str] = None) -> DataSource:
    """Create a data source from a kind name and a target location.

    Args:
        kind: One of "os", "zip" or "memory"
        target: Directory (os) or archive file (zip); ignored for memory

    Returns:
        Root item of the source

    Raises:
        ValueError: If the kind is unknown or a target is missing
    """
    if kind == "memory":
        return MemoryDir()

    if kind not in SOURCE_KINDS:
        raise ValueError(f"Unknown source kind: {kind} (expected one of {', '.join(SOURCE_KINDS)})")
    if not target:
        raise ValueError(f"Source kind '{kind}' requires a target")

    location = Path(target).expanduser()
    if kind == "zip":
        return ZipDir.from_file(location)
    return OSDir(location)


__all__ = [
    "open_source",
    "SOURCE_KINDS",
    "OSDir",
    "OSFile",
    "ZipDir",
    "ZipEntry",
    "ArchiveReadOnlyError",
    "MemoryDir",
    "MemoryFile",
]
