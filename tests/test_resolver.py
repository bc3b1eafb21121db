"""
Tests for MountResolver.

Tests focus on:
- Walking from a mount point through the source's item tree
- Skipping bindings that fail partway without aborting the others
- Creation hints passed to containers
- NotFound versus BadAction for mount point subsets
"""

from typing import List, Optional

import pytest

from mountfs.base import Container, CreateHint, DataSource
from mountfs.errors import BadActionError, BadPathError, NotFoundError
from mountfs.mounts import MountTable, View
from mountfs.resolver import MountResolver
from mountfs.sources.memory import MemoryDir, MemoryFile


class RecordingDir(Container):
    """Container that records the creation hints it receives."""

    def __init__(self):
        self.hints: List[tuple] = []

    def child(self, name: str, create: CreateHint = CreateHint.NONE) -> Optional[DataSource]:
        self.hints.append((name, create))
        if create is CreateHint.NONE:
            return None
        # Hand back itself so deeper lookups keep recording
        return self if create is CreateHint.DIR else MemoryFile()

    def list(self) -> List[str]:
        return []

    def delete(self, name: str) -> None:
        raise NotImplementedError


@pytest.fixture
def table():
    return MountTable()


@pytest.fixture
def resolver(table):
    return MountResolver(table)


class TestResolveAll:
    """Test collecting every item bound to a path."""

    def test_resolve_mount_point_itself(self, table, resolver):
        source = MemoryDir()
        table.mount(["base"], source)

        assert resolver.resolve_all("base") == [source]

    def test_resolve_through_source_tree(self, table, resolver):
        leaf = MemoryFile(b"hello")
        table.mount(["base"], MemoryDir.from_dict({"a": {"x.txt": leaf}}))

        assert resolver.resolve("base/a/x.txt") is leaf

    def test_root_mount(self, table, resolver):
        source = MemoryDir.from_dict({"top.txt": b"1"})
        table.mount([], source)

        assert resolver.resolve("") is source
        assert isinstance(resolver.resolve("top.txt"), MemoryFile)

    def test_all_matching_bindings_in_mount_order(self, table, resolver):
        """
        Given: Two sources mounted at the same path, both with the item
        When: Resolving all candidates
        Then: Both items are returned in mount order
        """
        first = MemoryFile(b"first")
        second = MemoryFile(b"second")
        table.mount(["m"], MemoryDir.from_dict({"f": first}))
        table.mount(["m"], MemoryDir.from_dict({"f": second}))

        assert resolver.resolve_all("m/f") == [first, second]
        assert resolver.resolve("m/f") is first

    def test_failing_binding_is_skipped(self, table, resolver):
        """
        Given: A first source missing the item and a second one having it
        When: Resolving the path
        Then: The second source's item is returned
        """
        wanted = MemoryFile(b"found")
        table.mount(["m"], MemoryDir())
        table.mount(["m"], MemoryDir.from_dict({"f": wanted}))

        assert resolver.resolve_all("m/f") == [wanted]

    def test_raising_binding_is_skipped(self, table, resolver):
        """
        Given: A first source that raises on lookup and a second one having the item
        When: Resolving the path
        Then: Only the second source's item is returned
        """
        class RaisingDir(RecordingDir):
            def child(self, name, create=CreateHint.NONE):
                raise PermissionError(13, "Permission denied")

        wanted = MemoryFile(b"found")
        table.mount(["m"], RaisingDir())
        table.mount(["m"], MemoryDir.from_dict({"f": wanted}))

        assert resolver.resolve_all("m/f") == [wanted]

    def test_only_raising_binding_is_not_found(self, table, resolver):
        class RaisingDir(RecordingDir):
            def child(self, name, create=CreateHint.NONE):
                raise RuntimeError("backend down")

        table.mount(["m"], RaisingDir())

        with pytest.raises(NotFoundError):
            resolver.resolve("m/f")

    def test_leaf_in_the_middle_skips_binding(self, table, resolver):
        table.mount(["m"], MemoryDir.from_dict({"f": b"file, not a dir"}))
        table.mount(["m"], MemoryDir.from_dict({"f": {"g": b"deep"}}))

        items = resolver.resolve_all("m/f/g")

        assert len(items) == 1
        assert items[0].data == b"deep"

    def test_leaf_mount_cannot_have_children(self, table, resolver):
        table.mount(["file"], MemoryFile(b"x"))

        with pytest.raises(NotFoundError):
            resolver.resolve("file/child")

    def test_longer_mount_point_does_not_contribute(self, table, resolver):
        table.mount(["a", "b"], MemoryDir())

        with pytest.raises(BadActionError):
            resolver.resolve_all("a")

    def test_equivalent_paths_resolve_identically(self, table, resolver):
        source = MemoryDir.from_dict({"f": b"1"})
        table.mount(["a", "b"], source)

        assert resolver.resolve("a//b/") is resolver.resolve("a/b") is source
        assert resolver.resolve("/a/b//f") is resolver.resolve("a/b/f")


class TestResolutionErrors:
    """Test the errors raised when nothing is found."""

    def test_not_found(self, table, resolver):
        table.mount(["base"], MemoryDir())

        with pytest.raises(NotFoundError) as exc_info:
            resolver.resolve("base/missing")
        assert exc_info.value.path == "base/missing"

    def test_empty_table_not_found(self, resolver):
        with pytest.raises(NotFoundError):
            resolver.resolve("anything")

    def test_mount_point_subset_is_bad_action(self, table, resolver):
        """
        Given: A source mounted at a/b/c
        When: Resolving a/b, which has no source of its own
        Then: BadActionError, since something exists there
        """
        table.mount(["a", "b", "c"], MemoryDir())

        with pytest.raises(BadActionError) as exc_info:
            resolver.resolve("a/b")
        assert exc_info.value.path == "a/b"

    def test_subset_check_uses_selected_view(self, table, resolver):
        table.mount(["a", "b"], MemoryDir())

        with pytest.raises(NotFoundError):
            resolver.resolve("a", view=View.WRITE)

    def test_bad_path(self, resolver):
        with pytest.raises(BadPathError):
            resolver.resolve("a/../b")


class TestCreationHints:
    """Test hints passed to Container.child()."""

    def test_no_creation_hint_by_default(self, table, resolver):
        recorder = RecordingDir()
        table.mount(["r"], recorder)

        with pytest.raises(NotFoundError):
            resolver.resolve("r/x")
        assert recorder.hints == [("x", CreateHint.NONE)]

    def test_dir_hints_then_file_hint(self, table, resolver):
        """
        Given: A container accepting creation
        When: Resolving a three level path with create=True
        Then: Intermediate segments get DIR, the last one FILE
        """
        recorder = RecordingDir()
        table.mount(["r"], recorder, writable=True)

        item = resolver.resolve("r/one/two/file.txt", create=True, view=View.WRITE)

        assert isinstance(item, MemoryFile)
        assert recorder.hints == [
            ("one", CreateHint.DIR),
            ("two", CreateHint.DIR),
            ("file.txt", CreateHint.FILE),
        ]
