"""Core constants used across isostore modules.

This module centralizes non-domain-specific constants.
Keeping values here avoids magic literals in business logic.
"""

from __future__ import annotations

from pathlib import Path

DEFAULT_DATA_ROOT = Path(".isostore")
DEFAULT_APPLICATION_ID = "default"
DEFAULT_LOG_LEVEL = "INFO"
SUPPORTED_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")
SANDBOXES_DIR_NAME = "sandboxes"
CHILD_WILDCARD = "*"
ENV_DATA_ROOT = "ISOSTORE_DATA_ROOT"
ENV_APPLICATION_ID = "ISOSTORE_APPLICATION_ID"
ENV_USER_SCOPE = "ISOSTORE_USER_SCOPE"
ENV_LOG_LEVEL = "ISOSTORE_LOG_LEVEL"
ENV_S3_REGION = "ISOSTORE_S3_REGION"
ENV_S3_PROFILE = "ISOSTORE_S3_PROFILE"
S3_URI_SCHEME = "s3://"
