"""
Tests for the bundled data sources.

Tests cover:
- OSDir / OSFile against a temporary directory
- ZipDir tree building and read-only behavior
- MemoryDir / MemoryFile placeholders created from hints
- open_source() factory
"""

import io
import zipfile

import pytest

from mountfs import FileSystem
from mountfs.base import CreateHint
from mountfs.errors import BackendError, NotFoundError
from mountfs.sources import open_source
from mountfs.sources.archive import ArchiveReadOnlyError, ZipDir, ZipEntry
from mountfs.sources.local import OSDir, OSFile
from mountfs.sources.memory import MemoryDir, MemoryFile


def make_zip(entries) -> bytes:
    """Build a zip archive in memory from a {name: content} dict.

    Names ending with "/" become explicit directory entries.
    """
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as z:
        for name, content in entries.items():
            z.writestr(name, content)
    return buffer.getvalue()


class TestOSSource:
    """Test OSDir and OSFile."""

    @pytest.fixture
    def tree(self, tmp_path):
        (tmp_path / "docs").mkdir()
        (tmp_path / "docs" / "readme.md").write_text("read me")
        (tmp_path / "empty").mkdir()
        (tmp_path / "top.txt").write_bytes(b"top")
        return tmp_path

    def test_child_kinds(self, tree):
        root = OSDir(tree)

        assert isinstance(root.child("docs"), OSDir)
        assert isinstance(root.child("top.txt"), OSFile)
        assert root.child("missing") is None

    def test_child_creation_hints(self, tree):
        root = OSDir(tree)

        assert isinstance(root.child("newdir", CreateHint.DIR), OSDir)
        assert isinstance(root.child("new.txt", CreateHint.FILE), OSFile)
        # Hints alone do not touch the disk
        assert not (tree / "newdir").exists()
        assert not (tree / "new.txt").exists()

    def test_list(self, tree):
        assert sorted(OSDir(tree).list()) == ["docs", "empty", "top.txt"]

    def test_list_unreadable_directory(self, tmp_path):
        assert OSDir(tmp_path / "does-not-exist").list() == []

    def test_size(self, tree):
        assert OSFile(tree / "top.txt").size() == 3
        assert OSFile(tree / "nope").size() is None

    def test_size_follows_symlinks(self, tree):
        """
        Given: A symlink to a file in a mounted directory
        When: Asking for its size and reading it
        Then: Both describe the target's content
        """
        (tree / "link.md").symlink_to(tree / "docs" / "readme.md")
        fs = FileSystem()
        fs.mount("disk", OSDir(tree))

        assert fs.size("disk/link.md") == len(b"read me")
        assert fs.size("disk/link.md") == len(fs.read_all("disk/link.md"))

    def test_write_creates_parents(self, tree):
        fs = FileSystem()
        fs.mount("disk", OSDir(tree), writable=True)

        fs.write_all("disk/a/b/c.txt", b"deep")

        assert (tree / "a" / "b" / "c.txt").read_bytes() == b"deep"

    def test_append(self, tree):
        fs = FileSystem()
        fs.mount("disk", OSDir(tree), writable=True)

        fs.append_all("disk/top.txt", b"+more")
        fs.append_all("disk/fresh.txt", b"first")

        assert (tree / "top.txt").read_bytes() == b"top+more"
        assert (tree / "fresh.txt").read_bytes() == b"first"

    def test_delete_file_and_empty_dir(self, tree):
        fs = FileSystem()
        fs.mount("disk", OSDir(tree), writable=True)

        fs.delete("disk/top.txt")
        fs.delete("disk/empty")

        assert not (tree / "top.txt").exists()
        assert not (tree / "empty").exists()

    def test_delete_non_empty_dir_is_backend_error(self, tree):
        fs = FileSystem()
        fs.mount("disk", OSDir(tree), writable=True)

        with pytest.raises(BackendError) as exc_info:
            fs.delete("disk/docs")

        assert exc_info.value.path == "disk/docs"
        assert str(tree) not in str(exc_info.value)

    def test_os_not_found_translated(self, tree):
        """
        Given: A file the OS refuses to open because it vanished
        When: Reading it through the FileSystem
        Then: NotFoundError rather than a wrapped backend error
        """
        fs = FileSystem()
        fs.mount("ghost", OSFile(tree / "vanished.txt"))

        with pytest.raises(NotFoundError) as exc_info:
            fs.read_all("ghost")
        assert exc_info.value.path == "ghost"

    def test_read_through_filesystem(self, tree):
        fs = FileSystem()
        fs.mount("disk", OSDir(tree))

        assert fs.read_all("disk/docs/readme.md") == b"read me"
        assert fs.size("disk/top.txt") == 3


class TestZipSource:
    """Test ZipDir and ZipEntry."""

    def test_tree_with_implicit_directories(self):
        root = ZipDir.from_bytes(make_zip({"a/b/c.txt": "c", "top.txt": "t"}))

        a = root.child("a")
        assert isinstance(a, ZipDir)
        assert isinstance(a.child("b").child("c.txt"), ZipEntry)
        assert sorted(root.list()) == ["a", "top.txt"]

    def test_explicit_directory_after_its_files(self):
        """
        Given: An archive listing a directory entry after a file inside it
        When: Building the tree
        Then: The directory keeps its children
        """
        root = ZipDir.from_bytes(make_zip({"d/f.txt": "f", "d/": ""}))

        assert root.child("d").list() == ["f.txt"]

    def test_empty_explicit_directory(self):
        root = ZipDir.from_bytes(make_zip({"empty/": ""}))

        assert isinstance(root.child("empty"), ZipDir)
        assert root.child("empty").list() == []

    def test_entries_with_unusable_names_are_skipped(self):
        """
        Given: An archive with entries no namespace path can reach
        When: Building the tree
        Then: Only the reachable entries are listed
        """
        root = ZipDir.from_bytes(make_zip({
            "a:b.txt": "colon",
            "dir/../up.txt": "dots",
            "dir/ok.txt": "ok",
        }))

        assert root.list() == ["dir"]
        assert root.child("dir").list() == ["ok.txt"]

    def test_child_ignores_creation_hints(self):
        root = ZipDir.from_bytes(make_zip({"x": "1"}))

        assert root.child("new", CreateHint.FILE) is None

    def test_read_and_size(self):
        entry = ZipDir.from_bytes(make_zip({"f.txt": "hello"})).child("f.txt")

        assert entry.size() == 5
        with entry.open_read() as stream:
            assert stream.read() == b"hello"

    def test_read_only(self):
        root = ZipDir.from_bytes(make_zip({"f.txt": "hello"}))

        with pytest.raises(ArchiveReadOnlyError):
            root.delete("f.txt")
        with pytest.raises(ArchiveReadOnlyError):
            root.child("f.txt").open_write()
        with pytest.raises(ArchiveReadOnlyError):
            root.child("f.txt").open_append()

    def test_read_only_error_is_permission_error(self):
        assert issubclass(ArchiveReadOnlyError, PermissionError)

    def test_from_file(self, tmp_path):
        archive = tmp_path / "data.zip"
        archive.write_bytes(make_zip({"inside.txt": "in"}))

        root = ZipDir.from_file(archive)
        try:
            assert root.list() == ["inside.txt"]
        finally:
            root.close()

    def test_invalid_archive(self):
        with pytest.raises(zipfile.BadZipFile):
            ZipDir.from_bytes(b"definitely not a zip")


class TestMemorySource:
    """Test MemoryDir and MemoryFile."""

    def test_from_dict(self):
        root = MemoryDir.from_dict({"d": {"f": "text"}, "b": b"bytes"})

        assert isinstance(root.child("d"), MemoryDir)
        assert root.child("d").child("f").data == b"text"
        assert root.child("b").size() == 5

    def test_hint_placeholders_are_detached(self):
        """
        Given: An empty memory directory
        When: Asking for missing children with creation hints
        Then: Items are returned but nothing is added until written
        """
        root = MemoryDir()

        placeholder_dir = root.child("d", CreateHint.DIR)
        placeholder_file = placeholder_dir.child("f", CreateHint.FILE)

        assert isinstance(placeholder_file, MemoryFile)
        assert root.list() == []

        with placeholder_file.open_write() as stream:
            stream.write(b"now")

        assert root.list() == ["d"]
        assert root.child("d").child("f").data == b"now"

    def test_two_placeholders_for_same_directory_merge(self):
        root = MemoryDir()
        first = root.child("d", CreateHint.DIR).child("a", CreateHint.FILE)
        second = root.child("d", CreateHint.DIR).child("b", CreateHint.FILE)

        first.open_write().close()
        second.open_write().close()

        assert sorted(root.child("d").list()) == ["a", "b"]

    def test_delete(self):
        root = MemoryDir.from_dict({"x": b"1"})

        root.delete("x")

        assert root.list() == []
        with pytest.raises(FileNotFoundError):
            root.delete("x")

    def test_write_replaces_content_on_close(self):
        leaf = MemoryFile(b"old")

        stream = leaf.open_write()
        stream.write(b"new")
        assert leaf.data == b""
        stream.close()

        assert leaf.data == b"new"


class TestOpenSource:
    """Test the open_source() factory."""

    def test_memory(self):
        assert isinstance(open_source("memory"), MemoryDir)

    def test_os(self, tmp_path):
        source = open_source("os", str(tmp_path))

        assert isinstance(source, OSDir)
        assert source.path == tmp_path

    def test_zip(self, tmp_path):
        archive = tmp_path / "a.zip"
        archive.write_bytes(make_zip({"f": "1"}))

        source = open_source("zip", str(archive))

        assert isinstance(source, ZipDir)
        assert source.list() == ["f"]
        source.close()

    def test_unknown_kind(self):
        with pytest.raises(ValueError):
            open_source("ftp", "somewhere")

    def test_missing_target(self):
        with pytest.raises(ValueError):
            open_source("os")
