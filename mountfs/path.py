"""Namespace path parsing.

Paths are slash separated. Names may not contain any of

    < > ? * | : " \\ /

and "." and ".." are not valid names. Repeated and trailing slashes are
condensed away, so "test/path/to/dir" and "/test///path//to/dir/" are the
same path.
"""

from typing import List

from mountfs.errors import BadPathError

RESERVED_CHARS = frozenset('<>?*|:"\\')


def validate_path(path: str) -> List[str]:
    """Split a namespace path into its segments.

    Args:
        path: Slash separated path ("" is the root)

    Returns:
        List of non-empty segment names

    Raises:
        BadPathError: If the path contains a reserved character or a
            "." or ".." segment
    """
    if path == "":
        return []

    if any(ch in RESERVED_CHARS for ch in path):
        raise BadPathError(path)

    parts = path.split("/")
    if any(part in (".", "..") for part in parts):
        raise BadPathError(path)

    return [part for part in parts if part]


def join_path(segments: List[str]) -> str:
    """Build the canonical path for a list of segments."""
    return "/".join(segments)
