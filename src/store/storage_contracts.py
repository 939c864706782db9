"""Contracts between the persistence manager, its callers, and backends.

``SandboxStorage`` is the primitive capability a sandbox backend offers.
``PersistenceStore`` is the manager API that callers program against,
so alternate managers or test doubles can be substituted freely.
"""

from __future__ import annotations

from typing import BinaryIO, Protocol

from core.types import FileAccess, FileMode, FileShare, OpenSemantics


class SandboxStorage(Protocol):
    """Primitive file and directory operations over one sandbox area.

    Paths are relative to the sandbox root. Search patterns are
    ``<dir><sep>*`` style and match immediate children only.
    """

    @property
    def location(self) -> str: ...

    def file_exists(self, path_name: str) -> bool: ...

    def directory_exists(self, path_name: str) -> bool: ...

    def create_directory(self, dir_name: str) -> None: ...

    def delete_file(self, path_name: str) -> None: ...

    def delete_directory(self, dir_name: str) -> None: ...

    def file_names(self, search_pattern: str) -> list[str]: ...

    def directory_names(self, search_pattern: str) -> list[str]: ...

    def open_file(
        self,
        path_name: str,
        semantics: OpenSemantics,
        access: FileAccess,
        share: FileShare,
    ) -> BinaryIO: ...

    def move_file(self, source_path: str, destination_path: str) -> None: ...

    def copy_file(self, source_path: str, destination_path: str, overwrite: bool) -> None: ...

    def close(self) -> None: ...


class PersistenceStore(Protocol):
    """File and directory API exposed to storage engines."""

    def file_exists(self, path_name: str) -> bool: ...

    def create_file(self, path_name: str) -> None: ...

    def delete_file(self, path_name: str) -> None: ...

    def directory_exists(self, path_name: str) -> bool: ...

    def create_directory(self, dir_name: str) -> None: ...

    def delete_directory(self, dir_name: str) -> None: ...

    def get_output_stream(self, path_name: str, mode: FileMode) -> BinaryIO: ...

    def get_input_stream(self, path_name: str) -> BinaryIO: ...

    def get_file_length(self, path_name: str) -> int: ...

    def list_sub_directories(self, dir_name: str) -> list[str]: ...

    def list_files(self, dir_name: str) -> list[str]: ...

    def rename_file(self, source_path: str, destination_path: str) -> None: ...

    def copy_file(self, source_path: str, destination_path: str, overwrite: bool) -> None: ...

    def dispose(self) -> None: ...
