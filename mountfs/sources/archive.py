"""Read-only data sources backed by zip archives.

Archives are assumed not to change while mounted, so the whole tree of
directory and file items is built once when the archive is opened. This
makes lookups a dictionary access per path segment.
"""

import io
import logging
import zipfile
from pathlib import Path
from typing import BinaryIO, Dict, List, Optional, Union

from mountfs.base import Container, CreateHint, DataSource, Leaf
from mountfs.errors import BadPathError
from mountfs.path import validate_path

logger = logging.getLogger(__name__)


class ArchiveReadOnlyError(PermissionError):
    """Raised for any attempt to modify a zip archive source."""

    def __init__(self, name: str = ""):
        super().__init__(f"zip archive is read-only: {name}" if name else "zip archive is read-only")


class ZipEntry(Leaf):
    """A file stored in a zip archive."""

    def __init__(self, archive: zipfile.ZipFile, info: zipfile.ZipInfo):
        self.archive = archive
        self.info = info

    def size(self) -> Optional[int]:
        return self.info.file_size

    def open_read(self) -> BinaryIO:
        return self.archive.open(self.info)

    def open_write(self) -> BinaryIO:
        raise ArchiveReadOnlyError(self.info.filename)

    def open_append(self) -> BinaryIO:
        raise ArchiveReadOnlyError(self.info.filename)

    def __repr__(self) -> str:
        return f"ZipEntry('{self.info.filename}')"


class ZipDir(Container):
    """A directory inside a zip archive (or the archive root).

    Usage:
        >>> root = ZipDir.from_file("assets.zip")
        >>> fs.mount("assets", root)
    """

    def __init__(self, archive: zipfile.ZipFile):
        self.archive = archive
        self.items: Dict[str, DataSource] = {}

    @classmethod
    def from_file(cls, file: Union[str, Path, BinaryIO]) -> "ZipDir":
        """Open a zip archive from a path or a seekable binary file.

        Raises:
            zipfile.BadZipFile: If the file is not a zip archive
        """
        return cls._build(zipfile.ZipFile(file))

    @classmethod
    def from_bytes(cls, content: bytes) -> "ZipDir":
        """Open a zip archive that has been read into memory."""
        return cls.from_file(io.BytesIO(content))

    @classmethod
    def _build(cls, archive: zipfile.ZipFile) -> "ZipDir":
        root = cls(archive)
        for info in archive.infolist():
            try:
                parts = validate_path(info.filename)
            except BadPathError:
                logger.debug(f"Skipping zip entry with an unusable name: {info.filename}")
                continue
            if not parts:
                continue

            node = root
            for part in parts[:-1]:
                child = node.items.get(part)
                if child is None:
                    # Directories without their own entry
                    child = cls(archive)
                    node.items[part] = child
                if not isinstance(child, ZipDir):
                    logger.debug(f"Skipping zip entry below a file: {info.filename}")
                    node = None
                    break
                node = child

            if node is None:
                continue
            if info.is_dir():
                node.items.setdefault(parts[-1], cls(archive))
            else:
                node.items[parts[-1]] = ZipEntry(archive, info)
        return root

    def child(self, name: str, create: CreateHint = CreateHint.NONE) -> Optional[DataSource]:
        return self.items.get(name)

    def list(self) -> List[str]:
        return list(self.items)

    def delete(self, name: str) -> None:
        raise ArchiveReadOnlyError(name)

    def close(self) -> None:
        """Close the underlying archive."""
        self.archive.close()

    def __repr__(self) -> str:
        return f"ZipDir('{self.archive.filename or '<memory>'}')"
