"""Mount table: ordered bindings of path segments to data sources.

The table has two views. Anything that reads existing information uses
the read view, anything that changes something uses the write view. A
source mounted for writing is visible in both views through the same
MountBinding, so the write view is always a subset of the read view.

Bindings are kept in insertion order. When several bindings match the
same path they are tried in that order (multiplexing).
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List, Optional

from mountfs.base import DataSource

logger = logging.getLogger(__name__)


class View(Enum):
    """Half of the mount table to operate on."""
    READ = "read"
    WRITE = "write"


@dataclass
class MountBinding:
    """A data source mounted at a sequence of path segments."""
    segments: List[str]
    source: DataSource

    def matches(self, segments: List[str]) -> bool:
        """Exact mount point match."""
        return self.segments == segments

    def is_prefix_of(self, segments: List[str]) -> bool:
        """True if this mount point is segments or one of its ancestors."""
        n = len(self.segments)
        return n <= len(segments) and self.segments == segments[:n]

    def extends(self, segments: List[str]) -> bool:
        """True if segments is a strict prefix of this mount point."""
        n = len(segments)
        return len(self.segments) > n and self.segments[:n] == segments


class MountTable:
    """Read and write views over the mounted data sources.

    The table does no path validation of its own; callers pass segment
    lists produced by validate_path().
    """

    def __init__(self):
        self.read: List[MountBinding] = []
        self.write: List[MountBinding] = []

    def bindings(self, view: View = View.READ) -> List[MountBinding]:
        """Get the bindings of one view, in insertion order."""
        return self.read if view is View.READ else self.write

    def mount(self, segments: List[str], source: DataSource, writable: bool = False) -> MountBinding:
        """Append a binding to the read view, and to the write view if writable."""
        binding = MountBinding(list(segments), source)
        self.read.append(binding)
        if writable:
            self.write.append(binding)
        logger.debug(f"Mounted {source!r} at '/{'/'.join(segments)}' (writable={writable})")
        return binding

    def unmount(self, segments: List[str], read: bool = True) -> int:
        """Remove every binding at exactly segments.

        Bindings are always removed from the write view; read controls
        whether they are also removed from the read view.

        Returns:
            Number of bindings removed from the read view
        """
        self.write = [b for b in self.write if not b.matches(segments)]
        removed = 0
        if read:
            kept = [b for b in self.read if not b.matches(segments)]
            removed = len(self.read) - len(kept)
            self.read = kept
        logger.debug(f"Unmounted '/{'/'.join(segments)}' (read={read}, removed={removed})")
        return removed

    def swap(self, segments: List[str], source: DataSource, writable: bool = False) -> Optional[DataSource]:
        """Replace the source of the first binding at exactly segments.

        Only the first match in insertion order is replaced, unlike
        unmount() which removes all of them.

        Returns:
            The previous source of the first read view match, or None
        """
        previous = self._replace_first(self.read, segments, source)
        if writable:
            self._replace_first(self.write, segments, source)
        logger.debug(f"Swapped mount at '/{'/'.join(segments)}': {previous!r} -> {source!r}")
        return previous

    @staticmethod
    def _replace_first(bindings: List[MountBinding], segments: List[str],
                       source: DataSource) -> Optional[DataSource]:
        for binding in bindings:
            if binding.matches(segments):
                previous = binding.source
                binding.source = source
                return previous
        return None

    def candidates(self, segments: List[str], view: View = View.READ) -> Iterator[MountBinding]:
        """Bindings whose mount point is segments or an ancestor of it."""
        for binding in self.bindings(view):
            if binding.is_prefix_of(segments):
                yield binding

    def subset(self, segments: List[str], view: View = View.READ) -> List[str]:
        """Names of the mount point parts directly below segments.

        These act like directory names even though no data source backs
        them. Duplicates are elided; first-seen order is kept.
        """
        names: List[str] = []
        seen = set()
        depth = len(segments)
        for binding in self.bindings(view):
            if not binding.extends(segments):
                continue
            name = binding.segments[depth]
            if name not in seen:
                seen.add(name)
                names.append(name)
        return names

    def is_subset(self, segments: List[str], view: View = View.READ) -> bool:
        """True if any mount point lies strictly below segments."""
        return any(b.extends(segments) for b in self.bindings(view))

    def __len__(self) -> int:
        return len(self.read)
