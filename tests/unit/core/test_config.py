"""Unit tests for core config parsing."""

from __future__ import annotations

import getpass
import os

import pytest

from core.config import IsoStoreConfig
from core.errors import IsoStoreConfigError


def test_from_env_reads_data_root(monkeypatch: pytest.MonkeyPatch) -> None:
    """Config should resolve data root from environment."""
    monkeypatch.setenv("ISOSTORE_DATA_ROOT", "./.tmp-isostore")
    monkeypatch.setenv("ISOSTORE_USER_SCOPE", "tester")

    config = IsoStoreConfig.from_env()

    assert config.data_root.name == ".tmp-isostore" and config.data_root.is_absolute()


def test_sandbox_root_nests_application_and_user(tmp_path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Sandbox root should be scoped by application and user."""
    monkeypatch.setenv("ISOSTORE_DATA_ROOT", str(tmp_path))
    monkeypatch.setenv("ISOSTORE_APPLICATION_ID", "engine")
    monkeypatch.setenv("ISOSTORE_USER_SCOPE", "alice")

    config = IsoStoreConfig.from_env()

    assert config.sandbox_root == tmp_path.resolve() / "sandboxes" / "engine" / "alice"


def test_user_scope_defaults_to_login_name(monkeypatch: pytest.MonkeyPatch) -> None:
    """Without an override the user scope should be the login name."""
    monkeypatch.delenv("ISOSTORE_USER_SCOPE", raising=False)
    monkeypatch.setattr(getpass, "getuser", lambda: "bob")

    config = IsoStoreConfig.from_env()

    assert config.user_scope == "bob"


@pytest.mark.parametrize("application_id", ["..", "a/b", "  "])
def test_from_env_rejects_invalid_application_id(
    application_id: str, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Application ids must be a single directory name."""
    monkeypatch.setenv("ISOSTORE_APPLICATION_ID", application_id)
    monkeypatch.setenv("ISOSTORE_USER_SCOPE", "tester")

    with pytest.raises(IsoStoreConfigError):
        IsoStoreConfig.from_env()

    assert os.getenv("ISOSTORE_APPLICATION_ID") == application_id


def test_from_env_raises_for_invalid_log_level(monkeypatch: pytest.MonkeyPatch) -> None:
    """Config should fail for an unsupported log level."""
    monkeypatch.setenv("ISOSTORE_LOG_LEVEL", "chatty")
    monkeypatch.setenv("ISOSTORE_USER_SCOPE", "tester")

    with pytest.raises(IsoStoreConfigError):
        IsoStoreConfig.from_env()

    assert os.getenv("ISOSTORE_LOG_LEVEL") == "chatty"


def test_from_env_normalizes_log_level(monkeypatch: pytest.MonkeyPatch) -> None:
    """Log level names should be case-insensitive."""
    monkeypatch.setenv("ISOSTORE_LOG_LEVEL", "debug")
    monkeypatch.setenv("ISOSTORE_USER_SCOPE", "tester")

    config = IsoStoreConfig.from_env()

    assert config.log_level == "DEBUG"
