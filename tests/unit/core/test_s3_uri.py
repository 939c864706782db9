"""Unit tests for S3 URI parsing."""

from __future__ import annotations

import pytest

from core.errors import IsoStoreExportError
from core.s3_uri import parse_s3_uri


def test_parse_s3_uri_splits_bucket_and_prefix() -> None:
    """Valid URIs should split on the first slash after the bucket."""
    location = parse_s3_uri("s3://backups/sandboxes/app")

    assert (location.bucket, location.prefix) == ("backups", "sandboxes/app")


def test_object_key_joins_prefix_without_double_slash() -> None:
    """Trailing prefix slashes should not produce empty key segments."""
    location = parse_s3_uri("s3://backups/root/")

    assert location.object_key("a/b.txt") == "root/a/b.txt"


@pytest.mark.parametrize("uri", ["backups/root", "s3://backups", "s3:///root", "s3://backups/"])
def test_parse_s3_uri_rejects_malformed_uri(uri: str) -> None:
    """URIs without scheme, bucket, or prefix should fail."""
    with pytest.raises(IsoStoreExportError):
        parse_s3_uri(uri)

    assert True
