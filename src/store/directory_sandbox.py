"""Host-directory sandbox backend.

This module confines file operations to a per-application, per-user
directory under the configured data root. Host errors with a sandbox
meaning are translated; all other ``OSError`` values propagate as-is.
"""

from __future__ import annotations

from contextlib import contextmanager
import errno
import os
from pathlib import Path
import shutil
from typing import BinaryIO, Iterator, cast

from core.config import IsoStoreConfig
from core.errors import (
    SandboxArgumentError,
    SandboxConflictError,
    SandboxDirectoryNotEmptyError,
    SandboxInitializationError,
    SandboxNotFoundError,
)
from core.types import FileAccess, FileShare, OpenSemantics
from store.sandbox_paths import matches_name, sandbox_path_parts, split_search_pattern

_BINARY_FLAG = getattr(os, "O_BINARY", 0)
_NOT_EMPTY_ERRNOS = frozenset({errno.ENOTEMPTY, errno.EEXIST})


class DirectorySandboxStorage:
    """Sandbox storage backed by one directory on the host filesystem.

    Share flags are advisory: POSIX hosts do not enforce them.
    """

    def __init__(self, root: Path) -> None:
        """Wrap an existing sandbox root directory.

        Args:
            root: Directory holding the sandbox namespace.
        """
        self._root = root

    @classmethod
    def acquire(cls, config: IsoStoreConfig) -> "DirectorySandboxStorage":
        """Open the sandbox for the configured application and user.

        Args:
            config: Runtime configuration naming the sandbox.

        Returns:
            Storage bound to the sandbox root.

        Raises:
            SandboxInitializationError: If the root is unusable.
        """
        root = config.sandbox_root
        try:
            root.mkdir(parents=True, exist_ok=True)
        except OSError as error:
            raise SandboxInitializationError(
                f"Failed to initialize sandbox at {root}: {error}. "
                "Check ISOSTORE_DATA_ROOT and directory permissions."
            ) from error
        if not os.access(root, os.R_OK | os.W_OK | os.X_OK):
            raise SandboxInitializationError(
                f"Sandbox at {root} is not readable and writable by the current user. "
                "Fix directory permissions or choose another ISOSTORE_DATA_ROOT."
            )
        return cls(root)

    @property
    def location(self) -> str:
        return str(self._root)

    def file_exists(self, path_name: str) -> bool:
        return self._resolve(path_name).is_file()

    def directory_exists(self, path_name: str) -> bool:
        return self._resolve(path_name).is_dir()

    def create_directory(self, dir_name: str) -> None:
        target = self._resolve(dir_name)
        try:
            target.mkdir(parents=True, exist_ok=True)
        except (FileExistsError, NotADirectoryError) as error:
            raise SandboxConflictError(
                f"Cannot create directory '{dir_name}': a file already exists on that path."
            ) from error

    def delete_file(self, path_name: str) -> None:
        with _sandbox_errors(path_name):
            self._resolve(path_name).unlink()

    def delete_directory(self, dir_name: str) -> None:
        if not sandbox_path_parts(dir_name):
            raise SandboxArgumentError("Cannot delete the sandbox root directory.")
        target = self._resolve(dir_name)
        try:
            target.rmdir()
        except (FileNotFoundError, NotADirectoryError) as error:
            raise SandboxNotFoundError(f"Cannot find directory '{dir_name}' in sandbox.") from error
        except OSError as error:
            if error.errno not in _NOT_EMPTY_ERRNOS:
                raise
            raise SandboxDirectoryNotEmptyError(
                f"Cannot delete directory '{dir_name}': it still contains subdirectories. "
                "Delete nested directories first."
            ) from error

    def file_names(self, search_pattern: str) -> list[str]:
        return self._child_names(search_pattern, want_directories=False)

    def directory_names(self, search_pattern: str) -> list[str]:
        return self._child_names(search_pattern, want_directories=True)

    def open_file(
        self,
        path_name: str,
        semantics: OpenSemantics,
        access: FileAccess,
        share: FileShare,
    ) -> BinaryIO:
        target = self._resolve(path_name)
        if target.is_dir():
            raise SandboxConflictError(f"Cannot open '{path_name}': it is a directory in sandbox.")
        flags = _open_flags(semantics, access)
        with _sandbox_errors(path_name):
            descriptor = os.open(target, flags, 0o666)
        try:
            stream = os.fdopen(descriptor, "wb" if access is FileAccess.WRITE else "rb")
        except BaseException:
            os.close(descriptor)
            raise
        return cast(BinaryIO, stream)

    def move_file(self, source_path: str, destination_path: str) -> None:
        source = self._require_file(source_path)
        destination = self._require_absent(destination_path)
        with _sandbox_errors(destination_path):
            os.rename(source, destination)

    def copy_file(self, source_path: str, destination_path: str, overwrite: bool) -> None:
        source = self._require_file(source_path)
        if overwrite:
            destination = self._resolve(destination_path)
            if destination.is_dir():
                raise SandboxConflictError(
                    f"Destination '{destination_path}' is a directory in sandbox."
                )
        else:
            destination = self._require_absent(destination_path)
        with _sandbox_errors(destination_path):
            shutil.copyfile(source, destination)

    def close(self) -> None:
        """Release the sandbox root; the directory itself is kept."""

    def _resolve(self, path_name: str) -> Path:
        return self._root.joinpath(*sandbox_path_parts(path_name))

    def _require_file(self, path_name: str) -> Path:
        path = self._resolve(path_name)
        if not path.is_file():
            raise SandboxNotFoundError(f"Cannot find file '{path_name}' in sandbox.")
        return path

    def _require_absent(self, path_name: str) -> Path:
        path = self._resolve(path_name)
        if path.exists():
            raise SandboxConflictError(f"Destination '{path_name}' already exists in sandbox.")
        return path

    def _child_names(self, search_pattern: str, want_directories: bool) -> list[str]:
        parent_parts, name_glob = split_search_pattern(search_pattern)
        parent = self._root.joinpath(*parent_parts)
        if not parent.is_dir():
            return []
        names = [
            entry.name
            for entry in parent.iterdir()
            if entry.is_dir() == want_directories and matches_name(entry.name, name_glob)
        ]
        return sorted(names)


def _open_flags(semantics: OpenSemantics, access: FileAccess) -> int:
    """Map open semantics onto ``os.open`` flags."""
    flags = (os.O_WRONLY if access is FileAccess.WRITE else os.O_RDONLY) | _BINARY_FLAG
    if semantics.create:
        flags |= os.O_CREAT
    if semantics.must_not_exist:
        flags |= os.O_EXCL
    if semantics.truncate:
        flags |= os.O_TRUNC
    if semantics.append:
        flags |= os.O_APPEND
    return flags


@contextmanager
def _sandbox_errors(path_name: str) -> Iterator[None]:
    """Translate host not-found and already-exists errors."""
    try:
        yield
    except FileNotFoundError as error:
        raise SandboxNotFoundError(
            f"Cannot find '{path_name}' in sandbox: {error.strerror}."
        ) from error
    except FileExistsError as error:
        raise SandboxConflictError(
            f"'{path_name}' already exists in sandbox: {error.strerror}."
        ) from error
