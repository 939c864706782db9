"""isostore exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Sandbox errors also subclass the matching builtin so callers written
against ``FileNotFoundError`` or ``ValueError`` keep working.
"""

from __future__ import annotations


class IsoStoreError(Exception):
    """Base exception for all isostore failures."""


class IsoStoreConfigError(IsoStoreError):
    """Raised for invalid runtime configuration."""


class IsoStoreDependencyError(IsoStoreError):
    """Raised when an optional runtime dependency is missing."""


class IsoStoreInputError(IsoStoreError):
    """Raised when a host file given to the CLI cannot be read."""


class IsoStoreExportError(IsoStoreError):
    """Raised for sandbox export failures."""


class SandboxInitializationError(IsoStoreError):
    """Raised when no sandbox is accessible at construction time."""


class SandboxDisposedError(IsoStoreError, RuntimeError):
    """Raised when a disposed persistence manager is used again."""


class SandboxNotFoundError(IsoStoreError, FileNotFoundError):
    """Raised when a path that must exist is missing."""


class SandboxDirectoryNotEmptyError(SandboxNotFoundError):
    """Raised when a directory still holds subdirectories at delete time."""


class SandboxConflictError(IsoStoreError, FileExistsError):
    """Raised when a path that must be absent already exists."""


class SandboxArgumentError(IsoStoreError, ValueError):
    """Raised for invalid open modes and invalid sandbox paths."""
