"""In-memory data sources.

Useful for logical files generated by the program, for overlays that
should not touch the disk, and for tests.
"""

import io
from typing import Any, BinaryIO, Dict, List, Optional, Union

from mountfs.base import Container, CreateHint, DataSource, Leaf


class _MemoryWriter(io.BytesIO):
    """Buffer that stores its content in a MemoryFile when closed."""

    def __init__(self, target: "MemoryFile", initial: bytes = b""):
        super().__init__()
        self._target = target
        self.write(initial)

    def close(self) -> None:
        if not self.closed:
            self._target.data = self.getvalue()
        super().close()


class MemoryFile(Leaf):
    """A file held in memory.

    Attributes:
        data: Current file content
    """

    def __init__(self, content: Union[bytes, str] = b"", parent: Optional["MemoryDir"] = None,
                 name: Optional[str] = None):
        if isinstance(content, str):
            content = content.encode("utf-8")
        self.data = content
        self._parent = parent
        self._name = name

    def size(self) -> Optional[int]:
        return len(self.data)

    def open_read(self) -> BinaryIO:
        return io.BytesIO(self.data)

    def open_write(self) -> BinaryIO:
        self._attach()
        self.data = b""
        return _MemoryWriter(self)

    def open_append(self) -> BinaryIO:
        self._attach()
        return _MemoryWriter(self, self.data)

    def _attach(self) -> None:
        # Placeholders handed out for a creation hint join the tree here
        if self._parent is None:
            return
        directory = self._parent._materialize()
        existing = directory.children.get(self._name)
        if isinstance(existing, MemoryFile) and existing is not self:
            self.data = existing.data
        directory.children[self._name] = self
        self._parent = None

    def __repr__(self) -> str:
        return f"MemoryFile(size={len(self.data)})"


class MemoryDir(Container):
    """A directory held in memory.

    Usage:
        >>> root = MemoryDir.from_dict({
        ...     "config": {"defaults.ini": b"[main]\\n"},
        ...     "motd.txt": "hello",
        ... })
        >>> fs.mount("mem", root, writable=True)
    """

    def __init__(self, parent: Optional["MemoryDir"] = None, name: Optional[str] = None):
        self.children: Dict[str, DataSource] = {}
        self._parent = parent
        self._name = name

    @classmethod
    def from_dict(cls, tree: Dict[str, Any]) -> "MemoryDir":
        """Build a tree from nested dicts; other values become file content."""
        root = cls()
        for name, value in tree.items():
            if isinstance(value, dict):
                root.children[name] = cls.from_dict(value)
            elif isinstance(value, DataSource):
                root.children[name] = value
            else:
                root.children[name] = MemoryFile(value)
        return root

    def child(self, name: str, create: CreateHint = CreateHint.NONE) -> Optional[DataSource]:
        item = self.children.get(name)
        if item is not None:
            return item
        if create is CreateHint.DIR:
            return MemoryDir(parent=self, name=name)
        if create is CreateHint.FILE:
            return MemoryFile(parent=self, name=name)
        return None

    def list(self) -> List[str]:
        return list(self.children)

    def delete(self, name: str) -> None:
        if name not in self.children:
            raise FileNotFoundError(name)
        del self.children[name]

    def _materialize(self) -> "MemoryDir":
        if self._parent is None:
            return self
        directory = self._parent._materialize()
        existing = directory.children.get(self._name)
        if isinstance(existing, MemoryDir):
            return existing
        directory.children[self._name] = self
        self._parent = None
        return self

    def __repr__(self) -> str:
        return f"MemoryDir(children={len(self.children)})"
