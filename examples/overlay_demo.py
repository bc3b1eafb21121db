#!/usr/bin/env python3
"""
Demonstration of mountfs multiplexing: user files over shipped defaults.
"""

import io
import tempfile
import zipfile
from pathlib import Path

from mountfs import FileSystem, NotFoundError, ReadOnlyError
from mountfs.sources import MemoryDir, OSDir, ZipDir


def build_defaults() -> bytes:
    """Create a small archive of default settings in memory."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as z:
        z.writestr("settings.ini", "[display]\ntheme = light\n")
        z.writestr("motd.txt", "Welcome!\n")
        z.writestr("levels/1.map", "#####\n#...#\n#####\n")
    return buffer.getvalue()


def print_tree(fs: FileSystem, path: str = "", indent: str = "") -> None:
    # Sources do not guarantee a listing order
    for name in sorted(fs.list_dirs(path)):
        print(f"{indent}{name}/")
        print_tree(fs, f"{path}{name}/", indent + "  ")
    for name in sorted(fs.list_files(path)):
        print(f"{indent}{name}")


def main():
    """Run demo of mounting and multiplexing."""

    with tempfile.TemporaryDirectory() as temp_dir:
        user_dir = Path(temp_dir)

        fs = FileSystem()
        # Mounted first, so it wins for reads, and the only writable one
        fs.mount("config", OSDir(user_dir), writable=True)
        fs.mount("config", ZipDir.from_bytes(build_defaults()))
        fs.mount("runtime/cache", MemoryDir(), writable=True)

        print("File tree:")
        print_tree(fs)

        print("\nBefore override:")
        print(fs.read_all("config/settings.ini").decode())

        fs.write_all("config/settings.ini", b"[display]\ntheme = dark\n")
        print("After override (written to the user directory):")
        print(fs.read_all("config/settings.ini").decode())
        print(f"On disk: {sorted(p.name for p in user_dir.iterdir())}")

        fs.delete("config/settings.ini")
        print("\nAfter deleting the override:")
        print(fs.read_all("config/settings.ini").decode())

        try:
            fs.delete("config/motd.txt")
        except ReadOnlyError as e:
            print(f"Expected: {e}")

        try:
            fs.read_all("config/missing.txt")
        except NotFoundError as e:
            print(f"Expected: {e}")

        print(f"\n'runtime' is a mount point subset: {fs.is_mount_point('runtime')}")


if __name__ == "__main__":
    main()
