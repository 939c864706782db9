"""Persistence manager over a sandboxed storage area.

This module exposes file and directory primitives to storage engines.
It owns one storage handle, translates open modes, and releases the
handle exactly once on disposal.
"""

from __future__ import annotations

import io
import os
from types import TracebackType
from typing import BinaryIO

from core.config import IsoStoreConfig
from core.errors import SandboxDisposedError, SandboxNotFoundError
from core.logging_config import get_logger
from core.types import FileAccess, FileMode, FileShare
from store.directory_sandbox import DirectorySandboxStorage
from store.file_modes import INPUT_SEMANTICS, resolve_open_semantics
from store.sandbox_paths import child_pattern
from store.storage_contracts import SandboxStorage

_LOGGER = get_logger(__name__)


class PersistenceManager:
    """File and directory API over one sandbox storage handle.

    Errors from the backend surface unchanged. The two deliberate
    recoveries are ``delete_file`` and ``get_file_length`` on an
    absent file. Calls are blocking and not thread-safe.
    """

    def __init__(
        self,
        storage: SandboxStorage | None = None,
        config: IsoStoreConfig | None = None,
    ) -> None:
        """Acquire the storage handle.

        Args:
            storage: Backend to own; the configured directory sandbox
                for the current application and user when omitted.
            config: Optional runtime configuration for the default backend.

        Raises:
            SandboxInitializationError: If no sandbox is accessible.
        """
        if storage is None:
            storage = DirectorySandboxStorage.acquire(config or IsoStoreConfig.from_env())
        self._storage: SandboxStorage | None = storage
        _LOGGER.debug("sandbox_acquired", location=storage.location)

    def __enter__(self) -> "PersistenceManager":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.dispose()

    @property
    def disposed(self) -> bool:
        """Whether the storage handle has been released."""
        return self._storage is None

    def file_exists(self, path_name: str) -> bool:
        """Return whether ``path_name`` is an existing file."""
        return self._live_storage().file_exists(path_name)

    def create_file(self, path_name: str) -> None:
        """Create an empty file, truncating any existing one.

        Raises:
            SandboxNotFoundError: If the parent directory is missing.
            SandboxArgumentError: If the path is invalid.
        """
        with self.get_output_stream(path_name, FileMode.CREATE):
            pass

    def delete_file(self, path_name: str) -> None:
        """Delete a file; deleting an absent file is a no-op."""
        storage = self._live_storage()
        if storage.file_exists(path_name):
            storage.delete_file(path_name)

    def directory_exists(self, path_name: str) -> bool:
        """Return whether ``path_name`` is an existing directory."""
        return self._live_storage().directory_exists(path_name)

    def create_directory(self, dir_name: str) -> None:
        """Create a directory and any missing intermediate directories.

        Raises:
            SandboxConflictError: If a file already occupies the path.
        """
        self._live_storage().create_directory(dir_name)

    def delete_directory(self, dir_name: str) -> None:
        """Delete the files directly inside a directory, then the directory.

        Nested directories are not removed, so a directory that still
        holds subdirectories fails to delete.

        Args:
            dir_name: Directory to delete.

        Raises:
            SandboxNotFoundError: If the directory is missing.
            SandboxDirectoryNotEmptyError: If subdirectories remain.
        """
        storage = self._live_storage()
        for file_name in storage.file_names(child_pattern(dir_name)):
            self.delete_file(os.path.join(dir_name, file_name))
        storage.delete_directory(dir_name)

    def get_output_stream(self, path_name: str, mode: FileMode) -> BinaryIO:
        """Open a write-only stream that other openers may read.

        Args:
            path_name: File to open.
            mode: How the stream treats existing content.

        Returns:
            Binary stream owned by the caller, who must close it.

        Raises:
            SandboxArgumentError: If ``mode`` is not a ``FileMode``.
            SandboxNotFoundError: For ``OPEN``/``TRUNCATE`` on a missing file.
            SandboxConflictError: For ``CREATE_NEW`` on an existing file.
        """
        semantics = resolve_open_semantics(mode)
        return self._live_storage().open_file(
            path_name, semantics, FileAccess.WRITE, FileShare.READ
        )

    def get_input_stream(self, path_name: str) -> BinaryIO:
        """Open a read-only stream that other openers may read and write.

        Args:
            path_name: File to open.

        Returns:
            Binary stream owned by the caller, who must close it.

        Raises:
            SandboxNotFoundError: If the file does not exist.
        """
        return self._live_storage().open_file(
            path_name, INPUT_SEMANTICS, FileAccess.READ, FileShare.READ_WRITE
        )

    def get_file_length(self, path_name: str) -> int:
        """Return file size in bytes, or 0 when the file is absent."""
        if not self.file_exists(path_name):
            return 0
        with self.get_input_stream(path_name) as stream:
            return stream.seek(0, io.SEEK_END)

    def list_sub_directories(self, dir_name: str) -> list[str]:
        """Return names of the immediate child directories.

        Raises:
            SandboxNotFoundError: If ``dir_name`` does not exist.
        """
        storage = self._require_directory(dir_name)
        return storage.directory_names(child_pattern(dir_name))

    def list_files(self, dir_name: str) -> list[str]:
        """Return names of the files directly inside a directory.

        Raises:
            SandboxNotFoundError: If ``dir_name`` does not exist.
        """
        storage = self._require_directory(dir_name)
        return storage.file_names(child_pattern(dir_name))

    def rename_file(self, source_path: str, destination_path: str) -> None:
        """Move a file within the sandbox.

        Raises:
            SandboxNotFoundError: If the source is missing.
            SandboxConflictError: If the destination exists.
        """
        self._live_storage().move_file(source_path, destination_path)

    def copy_file(self, source_path: str, destination_path: str, overwrite: bool) -> None:
        """Copy file contents to another path.

        Raises:
            SandboxNotFoundError: If the source is missing.
            SandboxConflictError: If the destination exists and
                ``overwrite`` is false.
        """
        self._live_storage().copy_file(source_path, destination_path, overwrite)

    def dispose(self) -> None:
        """Release the storage handle; later calls do nothing.

        Disposal never raises. A backend whose ``close`` fails is still
        treated as released, and the failure is logged as a warning.
        """
        storage = self._storage
        if storage is None:
            return
        self._storage = None
        try:
            storage.close()
        except Exception as error:
            _LOGGER.warning(
                "sandbox_close_failed",
                location=storage.location,
                error_type=type(error).__name__,
                error=str(error),
            )
            return
        _LOGGER.debug("sandbox_disposed", location=storage.location)

    def _live_storage(self) -> SandboxStorage:
        if self._storage is None:
            raise SandboxDisposedError(
                "Persistence manager has been disposed. "
                "Create a new PersistenceManager to access the sandbox."
            )
        return self._storage

    def _require_directory(self, dir_name: str) -> SandboxStorage:
        storage = self._live_storage()
        if not storage.directory_exists(dir_name):
            raise SandboxNotFoundError(f"Cannot find directory '{dir_name}'.")
        return storage
