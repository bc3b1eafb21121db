"""Capability contracts for items served by data sources.

A data source is any item that implements Container, Leaf, or (more
rarely) both:

    - Container: Can look up, list and delete named children
    - Leaf: Has a size and can be opened for reading, writing or appending

The FileSystem only ever talks to items through these two interfaces.
Items that implement neither cannot be mounted.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import BinaryIO, List, Optional


class CreateHint(Enum):
    """Creation hint passed to Container.child()."""
    NONE = "none"
    DIR = "dir"
    FILE = "file"


class DataSource(ABC):
    """Base class for all items that can be mounted or returned as children."""

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


class Container(DataSource):
    """An item that holds named children (a directory)."""

    @abstractmethod
    def child(self, name: str, create: CreateHint = CreateHint.NONE) -> Optional[DataSource]:
        """Get a child item, possibly allowing it to be created.

        If the child exists it is returned regardless of create. Otherwise
        create is a hint about what kind of item the caller is about to
        write. The container does not need to allocate anything: returning
        an item that materializes when it (or one of its children) is
        opened for writing is enough.

        Args:
            name: Name of the child
            create: Creation hint

        Returns:
            Child item, or None if it does not exist and cannot be created
        """
        pass

    @abstractmethod
    def list(self) -> List[str]:
        """List the names of all children.

        The order is defined by the implementation.
        """
        pass

    @abstractmethod
    def delete(self, name: str) -> None:
        """Delete the named child.

        Raises:
            Exception: Any backend error; the FileSystem wraps it
        """
        pass


class Leaf(DataSource):
    """An item with byte content (a file)."""

    @abstractmethod
    def size(self) -> Optional[int]:
        """Size in bytes, or None if it cannot be determined."""
        pass

    @abstractmethod
    def open_read(self) -> BinaryIO:
        """Open the file for reading."""
        pass

    @abstractmethod
    def open_write(self) -> BinaryIO:
        """Open the file for writing, truncating existing content."""
        pass

    @abstractmethod
    def open_append(self) -> BinaryIO:
        """Open the file for writing with the cursor past existing content."""
        pass


def is_mountable(item: object) -> bool:
    """Check that an item implements at least one capability."""
    return isinstance(item, (Container, Leaf))


def as_container(item: object) -> Optional[Container]:
    """Return item as a Container, or None if it is not one."""
    if isinstance(item, Container):
        return item
    return None


def as_leaf(item: object) -> Optional[Leaf]:
    """Return item as a Leaf, or None if it is not one."""
    if isinstance(item, Leaf):
        return item
    return None
