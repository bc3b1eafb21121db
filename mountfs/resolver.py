"""Resolution of namespace paths to data source items.

Handles walking the mount table and the item trees of the mounted
sources to find what a path points at.
"""

import logging
from typing import List

from mountfs.base import CreateHint, DataSource, as_container
from mountfs.errors import BadActionError, NotFoundError
from mountfs.mounts import MountBinding, MountTable, View
from mountfs.path import validate_path

logger = logging.getLogger(__name__)


class MountResolver:
    """Resolves paths against a MountTable.

    Every binding of the selected view whose mount point is the path or
    one of its ancestors is tried in insertion order. A binding that
    fails partway (a missing child, a non-container on the way, an
    exception from the source) is skipped without affecting the others.
    """

    def __init__(self, table: MountTable):
        """Initialize resolver.

        Args:
            table: Mount table to resolve against
        """
        self.table = table

    def resolve_all(
        self,
        path: str,
        create: bool = False,
        view: View = View.READ,
    ) -> List[DataSource]:
        """Get every item bound to path.

        Args:
            path: Namespace path
            create: Allow containers to create missing items on the way
            view: Half of the mount table to use

        Returns:
            Non-empty list of items, in mount order

        Raises:
            BadPathError: If the path is invalid
            BadActionError: If nothing is bound to the path but it is a
                subset of one or more mount points
            NotFoundError: If nothing exists at the path
        """
        segments = validate_path(path)

        items = []
        for binding in self.table.candidates(segments, view):
            item = self._walk(binding, segments, create)
            if item is not None:
                items.append(item)

        if items:
            return items

        # Something exists here, it just isn't a data source.
        if self.table.is_subset(segments, view):
            raise BadActionError(path)
        raise NotFoundError(path)

    def resolve(
        self,
        path: str,
        create: bool = False,
        view: View = View.READ,
    ) -> DataSource:
        """Get the first item bound to path.

        Raises the same errors as resolve_all().
        """
        return self.resolve_all(path, create, view)[0]

    @staticmethod
    def _walk(binding: MountBinding, segments: List[str], create: bool):
        item = binding.source
        remaining = segments[len(binding.segments):]
        for i, name in enumerate(remaining):
            container = as_container(item)
            if container is None:
                return None

            hint = CreateHint.NONE
            if create:
                hint = CreateHint.FILE if i == len(remaining) - 1 else CreateHint.DIR

            try:
                item = container.child(name, hint)
            except Exception as e:
                logger.debug(f"Skipping mount at '/{'/'.join(binding.segments)}': {e}")
                return None
            if item is None:
                return None
        return item
