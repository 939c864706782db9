"""Sandbox path-name helpers.

Path names are opaque strings in the host separator convention.
This module splits them into validated components confined to the
sandbox root and builds single-level search patterns.
"""

from __future__ import annotations

import fnmatch
import os

from core.constants import CHILD_WILDCARD
from core.errors import SandboxArgumentError

_SEPARATORS = tuple({"/", os.sep, os.altsep or "/"})


def sandbox_path_parts(path_name: str) -> tuple[str, ...]:
    """Split a sandbox path into normalized components.

    Args:
        path_name: Path relative to the sandbox root; ``""`` is the root.

    Returns:
        Path components with ``.`` segments removed.

    Raises:
        SandboxArgumentError: If the path is absolute or leaves the sandbox.
    """
    if not isinstance(path_name, str):
        raise SandboxArgumentError(f"Invalid sandbox path: {path_name!r}. Paths must be strings.")
    if path_name.startswith(_SEPARATORS) or os.path.splitdrive(path_name)[0]:
        raise SandboxArgumentError(
            f"Invalid sandbox path '{path_name}': absolute paths are not allowed. "
            "Use a path relative to the sandbox root."
        )
    parts: list[str] = []
    for segment in _split(path_name):
        if segment in ("", "."):
            continue
        if segment == "..":
            if not parts:
                raise SandboxArgumentError(
                    f"Invalid sandbox path '{path_name}': it escapes the sandbox root."
                )
            parts.pop()
            continue
        parts.append(segment)
    return tuple(parts)


def child_pattern(dir_name: str) -> str:
    """Build the pattern matching immediate children of ``dir_name``."""
    return os.path.join(dir_name, CHILD_WILDCARD)


def split_search_pattern(search_pattern: str) -> tuple[tuple[str, ...], str]:
    """Split a search pattern into directory parts and a name glob.

    Args:
        search_pattern: Pattern such as ``data/*``.

    Returns:
        Parent directory components and the final-segment glob.
    """
    parts = sandbox_path_parts(search_pattern)
    if not parts:
        return (), CHILD_WILDCARD
    return parts[:-1], parts[-1]


def matches_name(name: str, name_glob: str) -> bool:
    """Return whether a child name matches a single-level glob."""
    return fnmatch.fnmatchcase(name, name_glob)


def display_path(parts: tuple[str, ...]) -> str:
    """Render path components in the host convention."""
    return os.path.join(*parts) if parts else "."


def _split(path_name: str) -> list[str]:
    segments = [path_name]
    for separator in _SEPARATORS:
        segments = [piece for segment in segments for piece in segment.split(separator)]
    return segments
