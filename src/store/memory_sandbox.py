"""In-memory sandbox backend.

This module keeps a sandbox namespace in process memory. It follows
the same error taxonomy as the directory backend, enforces share
modes between open streams, and can cap total size with a quota.
"""

from __future__ import annotations

from dataclasses import dataclass
import errno
from functools import partial
import io
from typing import BinaryIO, Callable, Iterable, cast

from core.errors import (
    SandboxArgumentError,
    SandboxConflictError,
    SandboxDirectoryNotEmptyError,
    SandboxNotFoundError,
)
from core.types import FileAccess, FileShare, OpenSemantics
from store.sandbox_paths import display_path, matches_name, sandbox_path_parts, split_search_pattern

PathParts = tuple[str, ...]


@dataclass(frozen=True)
class _OpenHandle:
    access: FileAccess
    share: FileShare


class InMemorySandboxStorage:
    """Sandbox storage held entirely in memory.

    Written bytes become visible to other openers on ``flush()`` or
    ``close()`` of the writing stream.
    """

    def __init__(self, quota_bytes: int | None = None) -> None:
        """Create an empty sandbox.

        Args:
            quota_bytes: Optional cap on the total size of all files.
        """
        self._quota_bytes = quota_bytes
        self._files: dict[PathParts, bytes] = {}
        self._directories: set[PathParts] = {()}
        self._open_handles: dict[PathParts, list[_OpenHandle]] = {}

    @property
    def location(self) -> str:
        return f"memory://{id(self):x}"

    @property
    def used_bytes(self) -> int:
        """Total size of all published file content."""
        return sum(len(content) for content in self._files.values())

    def file_exists(self, path_name: str) -> bool:
        return sandbox_path_parts(path_name) in self._files

    def directory_exists(self, path_name: str) -> bool:
        return sandbox_path_parts(path_name) in self._directories

    def create_directory(self, dir_name: str) -> None:
        parts = sandbox_path_parts(dir_name)
        for depth in range(1, len(parts) + 1):
            if parts[:depth] in self._files:
                raise SandboxConflictError(
                    f"Cannot create directory '{dir_name}': a file already exists on that path."
                )
        for depth in range(1, len(parts) + 1):
            self._directories.add(parts[:depth])

    def delete_file(self, path_name: str) -> None:
        parts = sandbox_path_parts(path_name)
        if parts not in self._files:
            raise SandboxNotFoundError(f"Cannot find '{path_name}' in sandbox.")
        del self._files[parts]

    def delete_directory(self, dir_name: str) -> None:
        parts = sandbox_path_parts(dir_name)
        if not parts:
            raise SandboxArgumentError("Cannot delete the sandbox root directory.")
        if parts not in self._directories:
            raise SandboxNotFoundError(f"Cannot find directory '{dir_name}' in sandbox.")
        if self._has_children(parts):
            raise SandboxDirectoryNotEmptyError(
                f"Cannot delete directory '{dir_name}': it still contains subdirectories. "
                "Delete nested directories first."
            )
        self._directories.remove(parts)

    def file_names(self, search_pattern: str) -> list[str]:
        return self._child_names(search_pattern, self._files)

    def directory_names(self, search_pattern: str) -> list[str]:
        return self._child_names(search_pattern, self._directories)

    def open_file(
        self,
        path_name: str,
        semantics: OpenSemantics,
        access: FileAccess,
        share: FileShare,
    ) -> BinaryIO:
        parts = sandbox_path_parts(path_name)
        if parts in self._directories:
            raise SandboxConflictError(f"Cannot open '{path_name}': it is a directory in sandbox.")
        exists = parts in self._files
        if exists and semantics.must_not_exist:
            raise SandboxConflictError(f"File '{path_name}' already exists in sandbox.")
        if not exists and (semantics.must_exist or not semantics.create):
            raise SandboxNotFoundError(f"Cannot find file '{path_name}' in sandbox.")
        if not exists and parts[:-1] not in self._directories:
            raise SandboxNotFoundError(
                f"Cannot create '{path_name}': parent directory does not exist in sandbox."
            )
        handle = _OpenHandle(access=access, share=share)
        self._acquire_handle(parts, handle)
        release = partial(self._release_handle, parts, handle)
        if access is FileAccess.READ:
            return cast(BinaryIO, _MemoryReadStream(self._files[parts], release))
        content = b"" if semantics.truncate or not exists else self._files[parts]
        self._files[parts] = content
        return cast(BinaryIO, _MemoryWriteStream(self, parts, content, semantics.append, release))

    def move_file(self, source_path: str, destination_path: str) -> None:
        source = self._require_file(source_path)
        destination = self._require_free_destination(destination_path, overwrite=False)
        self._files[destination] = self._files.pop(source)

    def copy_file(self, source_path: str, destination_path: str, overwrite: bool) -> None:
        source = self._require_file(source_path)
        destination = self._require_free_destination(destination_path, overwrite)
        self._reserve(destination, len(self._files[source]))
        self._files[destination] = self._files[source]

    def close(self) -> None:
        """Release the handle; content stays with this object."""

    def _publish(self, parts: PathParts, content: bytes) -> None:
        # A path deleted or moved away while its writer was open stays gone.
        if parts in self._files:
            self._files[parts] = content

    def _reserve(self, parts: PathParts, new_size: int) -> None:
        if self._quota_bytes is None:
            return
        used_elsewhere = self.used_bytes - len(self._files.get(parts, b""))
        if used_elsewhere + new_size > self._quota_bytes:
            raise OSError(errno.ENOSPC, "Sandbox quota exceeded", display_path(parts))

    def _acquire_handle(self, parts: PathParts, handle: _OpenHandle) -> None:
        handles = self._open_handles.setdefault(parts, [])
        for other in handles:
            if not other.share.permits(handle.access) or not handle.share.permits(other.access):
                raise OSError(errno.EBUSY, "Sharing violation", display_path(parts))
        handles.append(handle)

    def _release_handle(self, parts: PathParts, handle: _OpenHandle) -> None:
        handles = self._open_handles.get(parts, [])
        if handle in handles:
            handles.remove(handle)
        if not handles:
            self._open_handles.pop(parts, None)

    def _require_file(self, path_name: str) -> PathParts:
        parts = sandbox_path_parts(path_name)
        if parts not in self._files:
            raise SandboxNotFoundError(f"Cannot find file '{path_name}' in sandbox.")
        return parts

    def _require_free_destination(self, path_name: str, overwrite: bool) -> PathParts:
        parts = sandbox_path_parts(path_name)
        if parts in self._directories:
            raise SandboxConflictError(f"Destination '{path_name}' is a directory in sandbox.")
        if parts in self._files and not overwrite:
            raise SandboxConflictError(f"Destination '{path_name}' already exists in sandbox.")
        if parts[:-1] not in self._directories:
            raise SandboxNotFoundError(
                f"Cannot write '{path_name}': parent directory does not exist in sandbox."
            )
        return parts

    def _has_children(self, parts: PathParts) -> bool:
        return any(
            entry[:-1] == parts for entry in (*self._files, *self._directories) if entry
        )

    def _child_names(self, search_pattern: str, entries: Iterable[PathParts]) -> list[str]:
        parent, name_glob = split_search_pattern(search_pattern)
        if parent not in self._directories:
            return []
        names = [
            entry[-1]
            for entry in entries
            if entry and entry[:-1] == parent and matches_name(entry[-1], name_glob)
        ]
        return sorted(names)


class _MemoryWriteStream(io.BytesIO):
    """Write-only stream that publishes its buffer to the sandbox."""

    def __init__(
        self,
        storage: InMemorySandboxStorage,
        parts: PathParts,
        initial: bytes,
        append: bool,
        release: Callable[[], None],
    ) -> None:
        super().__init__(initial)
        self._storage = storage
        self._parts = parts
        self._append = append
        self._release = release
        if append:
            self.seek(0, io.SEEK_END)

    def readable(self) -> bool:
        return False

    def read(self, size: int | None = -1) -> bytes:
        raise io.UnsupportedOperation("read")

    def write(self, data) -> int:  # type: ignore[no-untyped-def,override]
        if self._append:
            self.seek(0, io.SEEK_END)
        end_position = self.tell() + memoryview(data).nbytes
        self._storage._reserve(self._parts, max(end_position, len(self.getvalue())))
        return super().write(data)

    def flush(self) -> None:
        super().flush()
        if not self.closed:
            self._storage._publish(self._parts, self.getvalue())

    def close(self) -> None:
        if self.closed:
            return
        try:
            self._storage._publish(self._parts, self.getvalue())
        finally:
            self._release()
            super().close()


class _MemoryReadStream(io.BytesIO):
    """Read-only snapshot of a file's published content."""

    def __init__(self, content: bytes, release: Callable[[], None]) -> None:
        super().__init__(content)
        self._release = release

    def writable(self) -> bool:
        return False

    def write(self, data) -> int:  # type: ignore[no-untyped-def,override]
        raise io.UnsupportedOperation("write")

    def close(self) -> None:
        if self.closed:
            return
        self._release()
        super().close()
