"""Public SDK surface for isostore.

This module provides a stable import path for storage engines.
It re-exports the persistence manager, backends, and typed models.
"""

from __future__ import annotations

from core.config import IsoStoreConfig
from core.errors import (
    IsoStoreError,
    SandboxArgumentError,
    SandboxConflictError,
    SandboxDirectoryNotEmptyError,
    SandboxDisposedError,
    SandboxInitializationError,
    SandboxNotFoundError,
)
from core.types import FileMode
from store.directory_sandbox import DirectorySandboxStorage
from store.memory_sandbox import InMemorySandboxStorage
from store.persistence_manager import PersistenceManager
from store.s3_export import export_directory_to_s3
from store.storage_contracts import PersistenceStore, SandboxStorage

__all__ = [
    "DirectorySandboxStorage",
    "FileMode",
    "InMemorySandboxStorage",
    "IsoStoreConfig",
    "IsoStoreError",
    "PersistenceManager",
    "PersistenceStore",
    "SandboxArgumentError",
    "SandboxConflictError",
    "SandboxDirectoryNotEmptyError",
    "SandboxDisposedError",
    "SandboxInitializationError",
    "SandboxNotFoundError",
    "SandboxStorage",
    "export_directory_to_s3",
]
