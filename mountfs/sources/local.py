"""Data sources backed by the local file system."""

import logging
import os
from pathlib import Path
from typing import BinaryIO, List, Optional, Union

from mountfs.base import Container, CreateHint, DataSource, Leaf

logger = logging.getLogger(__name__)


class OSFile(Leaf):
    """A file in an OS directory.

    The file does not need to exist: writing or appending creates it,
    along with any missing parent directories.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def size(self) -> Optional[int]:
        try:
            return self.path.stat().st_size
        except OSError:
            return None

    def open_read(self) -> BinaryIO:
        return open(self.path, "rb")

    def open_write(self) -> BinaryIO:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        return open(self.path, "wb")

    def open_append(self) -> BinaryIO:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        return open(self.path, "ab")

    def __repr__(self) -> str:
        return f"OSFile('{self.path}')"


class OSDir(Container):
    """An OS directory.

    Missing children are handed out when a creation hint allows it; they
    only appear on disk once a file inside them is written.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def child(self, name: str, create: CreateHint = CreateHint.NONE) -> Optional[DataSource]:
        path = self.path / name
        if path.is_dir():
            return OSDir(path)
        if path.exists():
            return OSFile(path)

        if create is CreateHint.DIR:
            return OSDir(path)
        if create is CreateHint.FILE:
            return OSFile(path)
        return None

    def list(self) -> List[str]:
        try:
            return os.listdir(self.path)
        except OSError as e:
            logger.debug(f"Cannot list {self.path}: {e}")
            return []

    def delete(self, name: str) -> None:
        path = self.path / name
        if path.is_dir() and not path.is_symlink():
            path.rmdir()
        else:
            path.unlink()

    def __repr__(self) -> str:
        return f"OSDir('{self.path}')"
