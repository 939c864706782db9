"""Pytest configuration and shared sandbox fixtures."""

from __future__ import annotations

from pathlib import Path
from typing import Iterator

import pytest

from core.config import IsoStoreConfig
from store.directory_sandbox import DirectorySandboxStorage
from store.memory_sandbox import InMemorySandboxStorage
from store.persistence_manager import PersistenceManager


@pytest.fixture
def sandbox_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> IsoStoreConfig:
    """Config whose sandbox lives under the test's temporary directory."""
    monkeypatch.setenv("ISOSTORE_DATA_ROOT", str(tmp_path / "data"))
    monkeypatch.setenv("ISOSTORE_APPLICATION_ID", "tests")
    monkeypatch.setenv("ISOSTORE_USER_SCOPE", "tester")
    monkeypatch.delenv("ISOSTORE_LOG_LEVEL", raising=False)
    return IsoStoreConfig.from_env()


@pytest.fixture(params=["directory", "memory"])
def manager(
    request: pytest.FixtureRequest,
    sandbox_config: IsoStoreConfig,
) -> Iterator[PersistenceManager]:
    """Live persistence manager over each sandbox backend."""
    if request.param == "directory":
        storage = DirectorySandboxStorage.acquire(sandbox_config)
    else:
        storage = InMemorySandboxStorage()
    with PersistenceManager(storage) as persistence:
        yield persistence
