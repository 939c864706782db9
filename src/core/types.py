"""Shared typed models.

This module defines the closed enumerations and immutable models
exchanged between the persistence manager and storage backends.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class FileMode(Enum):
    """How an output stream relates to existing file content."""

    APPEND = "append"
    CREATE = "create"
    CREATE_NEW = "create_new"
    OPEN = "open"
    OPEN_OR_CREATE = "open_or_create"
    TRUNCATE = "truncate"


class FileAccess(Enum):
    """Access requested by the opener of a stream."""

    READ = "read"
    WRITE = "write"


class FileShare(Enum):
    """Access other openers may hold while a stream is open."""

    READ = "read"
    READ_WRITE = "read_write"

    def permits(self, access: FileAccess) -> bool:
        """Return whether another opener may hold ``access``."""
        if self is FileShare.READ_WRITE:
            return True
        return access is FileAccess.READ


@dataclass(frozen=True)
class OpenSemantics:
    """Backend-neutral translation of a file open request.

    Attributes:
        must_exist: Fail with not-found when the file is absent.
        must_not_exist: Fail with conflict when the file is present.
        create: Create the file when it is absent.
        truncate: Discard existing content on open.
        append: Position every write at the end of the file.
    """

    must_exist: bool = False
    must_not_exist: bool = False
    create: bool = False
    truncate: bool = False
    append: bool = False
