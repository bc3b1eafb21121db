"""Main FileSystem class - entry point for mounting and file IO."""

import logging
from typing import BinaryIO, Callable, List, Optional

from mountfs.base import DataSource, as_container, as_leaf, is_mountable
from mountfs.errors import BadActionError, NotFoundError, ReadOnlyError, VFSError, wrapped_errors
from mountfs.mounts import MountBinding, MountTable, View
from mountfs.path import join_path, validate_path
from mountfs.resolver import MountResolver

logger = logging.getLogger(__name__)


class FileSystem:
    """A namespace of mounted data sources.

    A FileSystem has two halves: a read half and a write half. Anything
    that changes something (write, append, delete) is carried out on the
    write half, anything that reads existing information on the read
    half. Most sources are mounted on both halves or on the read half
    only.

    If more than one source is mounted at a location they are tried in
    mount order, and the first one that works is used. Listing merges
    all of them.

    Usage:
        >>> fs = FileSystem()
        >>> fs.mount("data", OSDir("/srv/app/data"), writable=True)
        >>> fs.mount("data", ZipDir.from_file("/srv/app/defaults.zip"))
        >>>
        >>> # Reads fall back to the archive, writes go to the directory
        >>> settings = fs.read_all("data/settings.json")
        >>> fs.write_all("data/settings.json", settings)

    A new FileSystem is empty and ready to use. It carries no locks;
    callers sharing one between threads must serialize access.
    """

    def __init__(self):
        self.table = MountTable()
        self.resolver = MountResolver(self.table)

    # ------------------------------------------------------------------
    # Mounting
    # ------------------------------------------------------------------

    def mount(self, path: str, source: DataSource, writable: bool = False) -> None:
        """Mount a data source at path.

        Args:
            path: Mount point
            source: Item implementing Container and/or Leaf
            writable: Also mount the source on the write half

        Raises:
            BadPathError: If the path is invalid
            BadActionError: If source implements neither Container nor Leaf
        """
        segments = validate_path(path)
        if not is_mountable(source):
            raise BadActionError(path)
        self.table.mount(segments, source, writable)

    def unmount(self, path: str, read: bool = True) -> None:
        """Remove every source mounted at exactly path.

        Sources are always removed from the write half; read controls
        whether they are removed from the read half too. Unmounting a
        path with nothing mounted is not an error.
        """
        segments = validate_path(path)
        self.table.unmount(segments, read)

    def swap_mount(self, path: str, source: DataSource, writable: bool = False) -> Optional[DataSource]:
        """Replace the first source mounted at exactly path.

        Returns:
            The replaced source, or None if nothing was mounted at path

        Raises:
            BadPathError: If the path is invalid
            BadActionError: If source implements neither Container nor Leaf
        """
        segments = validate_path(path)
        if not is_mountable(source):
            raise BadActionError(path)
        return self.table.swap(segments, source, writable)

    def mounts(self, writable: bool = False) -> List[MountBinding]:
        """Get the mounted bindings of one half, in mount order."""
        return list(self.table.bindings(View.WRITE if writable else View.READ))

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def resolve(self, path: str, create: bool = False, writable: bool = False) -> DataSource:
        """Get the first item at path.

        If the path is a mount point subset with no source mounted at
        that level this raises BadActionError: something exists at the
        path, it just isn't a data source.
        """
        view = View.WRITE if writable else View.READ
        return self.resolver.resolve(path, create, view)

    def resolve_all(self, path: str, create: bool = False, writable: bool = False) -> List[DataSource]:
        """Get every item at path, in mount order."""
        view = View.WRITE if writable else View.READ
        return self.resolver.resolve_all(path, create, view)

    # ------------------------------------------------------------------
    # Queries (never raise)
    # ------------------------------------------------------------------

    def exists(self, path: str) -> bool:
        """True if path points to an item or a mount point subset.

        A mount point subset exists, but cannot be read or written.
        """
        try:
            self.resolve(path)
        except VFSError:
            return self.is_mount_point(path)
        return True

    def is_dir(self, path: str) -> bool:
        """True if path points to a Container or a mount point subset."""
        try:
            item = self.resolve(path)
        except VFSError:
            return self.is_mount_point(path)
        return as_container(item) is not None

    def is_mount_point(self, path: str) -> bool:
        """True if path is a strict prefix of one or more mount points.

        Always checks the read half; the write half is a subset of it.
        """
        try:
            segments = validate_path(path)
        except VFSError:
            return False
        return self.table.is_subset(segments, View.READ)

    def size(self, path: str) -> Optional[int]:
        """Size of the Leaf at path, or None if unknown or not a Leaf."""
        try:
            item = self.resolve(path)
        except VFSError:
            return None
        leaf = as_leaf(item)
        if leaf is None:
            return None
        try:
            return leaf.size()
        except Exception as e:
            logger.debug(f"Cannot size '{path}': {e}")
            return None

    # ------------------------------------------------------------------
    # Listing
    # ------------------------------------------------------------------

    def list(self, path: str) -> List[str]:
        """Names of all items in the Container(s) at path.

        Items from every source mounted at path are merged; a name is
        reported once. Mount point subsets below path are included. The
        order is defined by the sources.
        """
        return self._list(path)

    def list_dirs(self, path: str) -> List[str]:
        """Names of the Containers and mount point subsets at path."""
        return self._list(path, lambda item: as_container(item) is not None)

    def list_files(self, path: str) -> List[str]:
        """Names of the Leaves in the Container(s) at path.

        Returns an empty list if path is not a Container.
        """
        try:
            items = self.resolve_all(path)
        except VFSError:
            return []
        return self._children(items, lambda item: as_leaf(item) is not None)

    def _list(self, path: str, accept: Optional[Callable[[DataSource], bool]] = None) -> List[str]:
        subset = self._mount_subset(path)
        try:
            items = self.resolve_all(path)
        except VFSError:
            # Treat a mount point subset like a directory of directories
            return subset

        names = self._children(items, accept)
        seen = set(names)
        names.extend(name for name in subset if name not in seen)
        return names

    @staticmethod
    def _children(items: List[DataSource], accept: Optional[Callable[[DataSource], bool]]) -> List[str]:
        names = []
        seen = set()
        for item in items:
            container = as_container(item)
            if container is None:
                continue
            try:
                listing = container.list()
            except Exception as e:
                logger.debug(f"Cannot list {container!r}: {e}")
                continue
            for name in listing:
                if name in seen:
                    continue
                seen.add(name)
                if accept is None:
                    names.append(name)
                    continue
                try:
                    child = container.child(name)
                except Exception as e:
                    logger.debug(f"Cannot probe '{name}' in {container!r}: {e}")
                    continue
                if child is not None and accept(child):
                    names.append(name)
        return names

    def _mount_subset(self, path: str) -> List[str]:
        try:
            segments = validate_path(path)
        except VFSError:
            return []
        return self.table.subset(segments, View.READ)

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def delete(self, path: str) -> None:
        """Delete the item at path.

        Deleting is carried out on the write half; the first source whose
        parent Container has the item deletes it.

        Raises:
            NotFoundError: If no writable source has the item
            ReadOnlyError: If the item only exists on the read half
        """
        segments = validate_path(path)
        if not segments:
            raise BadActionError(path)
        parent, name = join_path(segments[:-1]), segments[-1]

        try:
            parents = self.resolve_all(parent, writable=True)
        except NotFoundError:
            parents = []
        except VFSError as e:
            e.path = path
            raise

        for item in parents:
            container = as_container(item)
            if container is None:
                continue
            try:
                found = container.child(name) is not None
            except Exception as e:
                logger.debug(f"Cannot probe '{name}' in {container!r}: {e}")
                continue
            if not found:
                continue
            logger.debug(f"Deleting '{path}' from {container!r}")
            with wrapped_errors(path):
                container.delete(name)
            return

        if self._readable(path):
            raise ReadOnlyError(path)
        raise NotFoundError(path)

    def open_read(self, path: str) -> BinaryIO:
        """Open the Leaf at path for reading."""
        leaf = as_leaf(self.resolve(path))
        if leaf is None:
            raise BadActionError(path)
        with wrapped_errors(path):
            return leaf.open_read()

    def open_write(self, path: str) -> BinaryIO:
        """Open the Leaf at path for writing, truncating existing content.

        Missing items are created by the first writable source that
        allows it.
        """
        leaf = self._writable_leaf(path)
        with wrapped_errors(path):
            return leaf.open_write()

    def open_append(self, path: str) -> BinaryIO:
        """Open the Leaf at path for writing after its existing content."""
        leaf = self._writable_leaf(path)
        with wrapped_errors(path):
            return leaf.open_append()

    def read_all(self, path: str) -> bytes:
        """Read the whole content of the Leaf at path."""
        stream = self.open_read(path)
        with wrapped_errors(path), stream:
            return stream.read()

    def write_all(self, path: str, content: bytes) -> None:
        """Replace the content of the Leaf at path."""
        self._transfer(self.open_write(path), path, content)

    def append_all(self, path: str, content: bytes) -> None:
        """Add content to the end of the Leaf at path."""
        self._transfer(self.open_append(path), path, content)

    @staticmethod
    def _transfer(stream: BinaryIO, path: str, content: bytes) -> None:
        with wrapped_errors(path), stream:
            stream.write(content)

    def _writable_leaf(self, path: str):
        try:
            item = self.resolve(path, create=True, writable=True)
        except NotFoundError:
            if self._readable(path):
                raise ReadOnlyError(path)
            raise
        leaf = as_leaf(item)
        if leaf is None:
            raise BadActionError(path)
        return leaf

    def _readable(self, path: str) -> bool:
        try:
            self.resolve(path)
        except VFSError:
            return False
        return True
