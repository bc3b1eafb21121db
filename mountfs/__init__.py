"""mountfs - a simple virtual file system.

mountfs presents a single slash separated path namespace backed by any
number of data sources (OS directories, zip archives, in-memory trees or
custom providers) mounted at arbitrary points. Programs read and write
through the FileSystem and never need to know where their files really
live; changing that is a matter of changing the mounts.

Architecture:

    ```
    FileSystem                  # Facade: exists, list, read, write, delete...
    ├── MountTable              # Ordered bindings, read view + write view
    └── MountResolver           # Path -> item(s) through the mounted trees

    DataSource                  # Anything that can be mounted
    ├── Container               # child(), list(), delete()
    └── Leaf                    # size(), open_read(), open_write(), open_append()
    ```

Multiplexing:

    Several sources may be mounted at the same path. They act like one
    directory: each action is tried on them in mount order until one
    works, and listings merge all of them. For example, mount a user
    settings directory for reading and writing, then a directory of
    defaults for reading only. Settings the user has provided are read
    from their directory, settings the program writes go there, and
    anything else is read from the defaults.

Mount point subsets:

    Prefixes of mount points that have nothing mounted on them (e.g. "a"
    when something is mounted at "a/b") behave like directories: they
    exist and can be listed, but cannot be read or written.

Usage Example:

    ```python
    from mountfs import FileSystem
    from mountfs.sources import OSDir, ZipDir

    fs = FileSystem()
    fs.mount("data", OSDir("/home/me/.app"), writable=True)
    fs.mount("data", ZipDir.from_file("defaults.zip"))

    fs.list_dirs("")                      # ["data"]
    text = fs.read_all("data/motd.txt")   # falls back to the archive
    fs.write_all("data/motd.txt", text)   # always written to the directory
    ```
"""

from mountfs.base import (
    DataSource,
    Container,
    Leaf,
    CreateHint,
    as_container,
    as_leaf,
)
from mountfs.errors import (
    ErrorKind,
    VFSError,
    NotFoundError,
    ReadOnlyError,
    BadActionError,
    BadPathError,
    BackendError,
)
from mountfs.filesystem import FileSystem
from mountfs.mounts import MountBinding, MountTable, View
from mountfs.path import validate_path
from mountfs.resolver import MountResolver

__version__ = "0.1.0"

__all__ = [
    # Main entry point
    "FileSystem",
    # Capability contracts
    "DataSource",
    "Container",
    "Leaf",
    "CreateHint",
    "as_container",
    "as_leaf",
    # Mounting and resolution
    "MountBinding",
    "MountTable",
    "MountResolver",
    "View",
    "validate_path",
    # Errors
    "ErrorKind",
    "VFSError",
    "NotFoundError",
    "ReadOnlyError",
    "BadActionError",
    "BadPathError",
    "BackendError",
]
