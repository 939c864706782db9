"""S3 URI parsing helpers.

This module centralizes S3 URI parsing for sandbox exports.
It keeps URI validation behavior consistent across the codebase.
"""

from __future__ import annotations

from dataclasses import dataclass

from core.constants import S3_URI_SCHEME
from core.errors import IsoStoreExportError


@dataclass(frozen=True)
class S3Location:
    """Parsed S3 location model."""

    bucket: str
    prefix: str

    def object_key(self, relative_path: str) -> str:
        """Return the object key for a path relative to the prefix."""
        return f"{self.prefix.rstrip('/')}/{relative_path}"


def parse_s3_uri(uri: str) -> S3Location:
    """Parse and validate an S3 URI.

    Args:
        uri: URI in format ``s3://bucket/prefix``.

    Returns:
        Parsed bucket and prefix pair.

    Raises:
        IsoStoreExportError: If the URI is not ``s3://bucket/prefix``.
    """
    if not uri.startswith(S3_URI_SCHEME):
        _raise_uri_error(uri)
    stripped_uri = uri.removeprefix(S3_URI_SCHEME)
    if "/" not in stripped_uri:
        _raise_uri_error(uri)
    bucket, prefix = stripped_uri.split("/", 1)
    if not bucket or not prefix.strip("/"):
        _raise_uri_error(uri)
    return S3Location(bucket=bucket, prefix=prefix)


def _raise_uri_error(uri: str) -> None:
    raise IsoStoreExportError(
        f"Invalid S3 URI '{uri}': expected s3://bucket/prefix. "
        "Provide both bucket and prefix."
    )
