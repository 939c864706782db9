"""S3 export helpers for sandbox directories.

This module encapsulates boto3 client creation and tree upload.
Files are streamed through the persistence manager contract, so any
sandbox backend can be exported.
"""

from __future__ import annotations

import os
from typing import Any

from core.config import IsoStoreConfig
from core.errors import IsoStoreDependencyError, IsoStoreExportError
from core.logging_config import get_logger
from core.s3_uri import S3Location, parse_s3_uri
from store.storage_contracts import PersistenceStore

_LOGGER = get_logger(__name__)


def export_directory_to_s3(
    manager: PersistenceStore,
    dir_name: str,
    output_uri: str,
    config: IsoStoreConfig,
    s3_client: Any | None = None,
) -> int:
    """Upload every file below a sandbox directory to S3.

    Args:
        manager: Persistence manager holding the sandbox.
        dir_name: Sandbox directory to export; ``""`` exports the root.
        output_uri: Destination in format ``s3://bucket/prefix``.
        config: Runtime config with optional session settings.
        s3_client: Optional preconfigured boto3 S3 client.

    Returns:
        Number of uploaded files.

    Raises:
        IsoStoreExportError: If the URI is invalid or an upload fails.
        IsoStoreDependencyError: If boto3 is missing.
        SandboxNotFoundError: If ``dir_name`` does not exist.
    """
    location = parse_s3_uri(output_uri)
    client = s3_client if s3_client is not None else create_s3_client(config)
    uploaded = 0
    for relative_path in _walk_files(manager, dir_name, ()):
        _upload_file(manager, client, location, dir_name, relative_path)
        uploaded += 1
    _LOGGER.info(
        "sandbox_exported",
        dir_name=dir_name,
        output_uri=output_uri,
        file_count=uploaded,
    )
    return uploaded


def create_s3_client(config: IsoStoreConfig) -> Any:
    """Create boto3 S3 client for exports.

    Args:
        config: Runtime config with optional session settings.

    Returns:
        Boto3 S3 client.

    Raises:
        IsoStoreDependencyError: If boto3 is missing.
    """
    try:
        import boto3
    except ImportError as error:
        raise IsoStoreDependencyError(
            "S3 export requires boto3, but it is not installed. "
            "Install isostore[s3] to export sandboxes to s3:// destinations."
        ) from error
    session_kwargs: dict[str, str] = {}
    if config.s3_profile:
        session_kwargs["profile_name"] = config.s3_profile
    if config.s3_region:
        session_kwargs["region_name"] = config.s3_region
    session = boto3.session.Session(**session_kwargs)
    return session.client("s3")


def _walk_files(
    manager: PersistenceStore,
    dir_name: str,
    relative_parts: tuple[str, ...],
) -> list[tuple[str, ...]]:
    """Collect file paths below ``dir_name``, depth first, sorted by name."""
    current_dir = os.path.join(dir_name, *relative_parts)
    collected = [relative_parts + (name,) for name in manager.list_files(current_dir)]
    for child_name in manager.list_sub_directories(current_dir):
        collected.extend(_walk_files(manager, dir_name, relative_parts + (child_name,)))
    return collected


def _upload_file(
    manager: PersistenceStore,
    s3_client: Any,
    location: S3Location,
    dir_name: str,
    relative_parts: tuple[str, ...],
) -> None:
    """Stream one sandbox file to its object key.

    Raises:
        IsoStoreExportError: If upload fails.
    """
    sandbox_path = os.path.join(dir_name, *relative_parts)
    object_key = location.object_key("/".join(relative_parts))
    with manager.get_input_stream(sandbox_path) as stream:
        try:
            s3_client.upload_fileobj(stream, location.bucket, object_key)
        except Exception as error:
            raise IsoStoreExportError(
                f"Failed to export sandbox file {sandbox_path} to "
                f"s3://{location.bucket}/{object_key}: {error}. "
                "Check AWS credentials and retry export."
            ) from error
