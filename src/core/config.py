"""Runtime configuration model for isostore.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass
import getpass
import os
from pathlib import Path

from core.constants import (
    DEFAULT_APPLICATION_ID,
    DEFAULT_DATA_ROOT,
    DEFAULT_LOG_LEVEL,
    ENV_APPLICATION_ID,
    ENV_DATA_ROOT,
    ENV_LOG_LEVEL,
    ENV_S3_PROFILE,
    ENV_S3_REGION,
    ENV_USER_SCOPE,
    SANDBOXES_DIR_NAME,
    SUPPORTED_LOG_LEVELS,
)
from core.errors import IsoStoreConfigError


@dataclass(frozen=True)
class IsoStoreConfig:
    """Validated runtime configuration.

    Attributes:
        data_root: Local root directory holding every sandbox.
        application_id: Application namespace of the sandbox.
        user_scope: User namespace of the sandbox within the application.
        log_level: Minimum structured log level.
        s3_region: Optional default AWS region for S3 exports.
        s3_profile: Optional AWS profile for boto3 session initialization.
    """

    data_root: Path
    application_id: str
    user_scope: str
    log_level: str
    s3_region: str | None
    s3_profile: str | None

    @property
    def sandbox_root(self) -> Path:
        """Directory backing the sandbox for this application and user."""
        return self.data_root / SANDBOXES_DIR_NAME / self.application_id / self.user_scope

    @classmethod
    def from_env(cls) -> "IsoStoreConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            IsoStoreConfigError: If environment values are invalid.
        """
        data_root_value = os.getenv(ENV_DATA_ROOT, str(DEFAULT_DATA_ROOT))
        application_id = os.getenv(ENV_APPLICATION_ID, DEFAULT_APPLICATION_ID)
        user_scope = os.getenv(ENV_USER_SCOPE) or _default_user_scope()
        log_level = os.getenv(ENV_LOG_LEVEL, DEFAULT_LOG_LEVEL)
        return cls(
            data_root=Path(data_root_value).expanduser().resolve(),
            application_id=parse_scope_name(application_id, ENV_APPLICATION_ID),
            user_scope=parse_scope_name(user_scope, ENV_USER_SCOPE),
            log_level=parse_log_level(log_level),
            s3_region=os.getenv(ENV_S3_REGION),
            s3_profile=os.getenv(ENV_S3_PROFILE),
        )


def parse_scope_name(raw_value: str, setting_name: str) -> str:
    """Validate an application or user scope name.

    Args:
        raw_value: Raw scope name.
        setting_name: Setting the value came from, for error messages.

    Returns:
        The validated scope name.

    Raises:
        IsoStoreConfigError: If value is not a single path component.
    """
    value = raw_value.strip()
    invalid = (
        not value
        or value in (".", "..")
        or "/" in value
        or os.sep in value
        or (os.altsep is not None and os.altsep in value)
    )
    if invalid:
        raise IsoStoreConfigError(
            f"Invalid {setting_name} value: '{raw_value}'. "
            "Use a single directory name without path separators."
        )
    return value


def parse_log_level(raw_value: str) -> str:
    """Parse the log level environment value.

    Args:
        raw_value: Raw string from environment.

    Returns:
        Upper-case log level name.

    Raises:
        IsoStoreConfigError: If level is not supported.
    """
    level = raw_value.strip().upper()
    if level not in SUPPORTED_LOG_LEVELS:
        raise IsoStoreConfigError(
            f"Invalid {ENV_LOG_LEVEL} value: '{raw_value}'. "
            f"Use one of: {', '.join(SUPPORTED_LOG_LEVELS)}."
        )
    return level


def _default_user_scope() -> str:
    try:
        return getpass.getuser()
    except (KeyError, OSError) as error:
        raise IsoStoreConfigError(
            f"Unable to determine the current user for the sandbox scope: {error}. "
            f"Set {ENV_USER_SCOPE} explicitly."
        ) from error
