"""Unit tests for CLI command handling."""

from __future__ import annotations

import io
import os
from pathlib import Path
import sys
from typing import BinaryIO

import pytest

from cli.main import main
from core.config import IsoStoreConfig
from core.types import FileMode
from store.memory_sandbox import InMemorySandboxStorage
from store.persistence_manager import PersistenceManager
from store.s3_export import export_directory_to_s3


@pytest.fixture
def run_cli(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):  # type: ignore[no-untyped-def]
    """Run the CLI against a sandbox under the test directory."""
    monkeypatch.setenv("ISOSTORE_USER_SCOPE", "cli-user")
    monkeypatch.delenv("ISOSTORE_LOG_LEVEL", raising=False)
    monkeypatch.setattr(sys, "stdin", io.TextIOWrapper(io.BytesIO(b"from-stdin")))
    data_root = tmp_path / "data"

    def _run(*args: str) -> int:
        return main(["--data-root", str(data_root), "--application", "cli", *args])

    return _run


def test_cli_put_then_cat_roundtrips_content(run_cli, tmp_path: Path, capsys) -> None:
    """Content written with put should be printed back by cat."""
    source = tmp_path / "source.txt"
    source.write_text("hello sandbox", encoding="utf-8")
    run_cli("mkdir", "docs")
    run_cli("put", "docs/readme.txt", str(source))
    capsys.readouterr()

    exit_code = run_cli("cat", "docs/readme.txt")
    output = capsys.readouterr().out

    assert exit_code == 0 and output == "hello sandbox"


def test_cli_put_reports_length(run_cli, tmp_path: Path, capsys) -> None:
    """Put should print the resulting file length."""
    source = tmp_path / "source.bin"
    source.write_bytes(b"12345")

    exit_code = run_cli("put", "data.bin", str(source), "--mode", "CreateNew")
    output = capsys.readouterr().out.strip()

    assert exit_code == 0 and output == "length=5"


def test_cli_put_rejects_unknown_mode(run_cli, tmp_path: Path, capsys) -> None:
    """Unknown open modes should exit with a sandbox error."""
    source = tmp_path / "source.bin"
    source.write_bytes(b"x")

    exit_code = run_cli("put", "data.bin", str(source), "--mode", "overwrite")
    error_output = capsys.readouterr().err

    assert exit_code == 1 and "sandbox_error=" in error_output


def test_cli_ls_lists_directories_before_files(run_cli, capsys) -> None:
    """ls should mark directories with a trailing slash."""
    run_cli("mkdir", "root/sub")
    run_cli("put", "root/file.txt", "-")
    capsys.readouterr()

    exit_code = run_cli("ls", "root")
    lines = capsys.readouterr().out.splitlines()

    assert exit_code == 0 and lines == ["sub/", "file.txt"]


def test_cli_rmdir_fails_when_subdirectory_remains(run_cli, capsys) -> None:
    """rmdir should not recurse into nested directories."""
    run_cli("mkdir", "outer/inner")

    exit_code = run_cli("rmdir", "outer")
    error_output = capsys.readouterr().err

    assert exit_code == 1 and "subdirectories" in error_output


def test_cli_stat_reports_missing_entry(run_cli, capsys) -> None:
    """stat should exit non-zero for absent paths."""
    exit_code = run_cli("stat", "nothing.bin")
    output = capsys.readouterr().out.strip()

    assert exit_code == 1 and output == "type=missing"


def test_cli_mv_and_cp_manage_files(run_cli, capsys) -> None:
    """mv and cp should leave both destination files in place."""
    run_cli("put", "a.txt", "-")
    run_cli("cp", "a.txt", "b.txt")
    run_cli("mv", "a.txt", "c.txt")
    capsys.readouterr()

    run_cli("ls")
    lines = capsys.readouterr().out.splitlines()

    assert lines == ["b.txt", "c.txt"]


def test_cli_put_with_missing_source_keeps_existing_file(
    run_cli, tmp_path: Path, capsys
) -> None:
    """An unreadable host source should fail before the target is truncated."""
    source = tmp_path / "source.bin"
    source.write_bytes(b"12345678")
    run_cli("put", "data.bin", str(source))
    capsys.readouterr()

    exit_code = run_cli("put", "data.bin", str(tmp_path / "missing.bin"))
    error_output = capsys.readouterr().err
    run_cli("stat", "data.bin")
    lines = capsys.readouterr().out.splitlines()

    assert exit_code == 1 and "sandbox_error=" in error_output
    assert lines == ["type=file", "length=8"]


class _RecordingS3Client:
    def __init__(self) -> None:
        self.keys: list[str] = []

    def upload_fileobj(self, stream: BinaryIO, bucket: str, key: str) -> None:
        self.keys.append(key)


def test_export_after_cli_run_logs_to_current_stderr(
    run_cli, sandbox_config: IsoStoreConfig, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Logging after a CLI run should not reuse the stderr the CLI saw."""
    cli_stderr = io.StringIO()
    monkeypatch.setattr(sys, "stderr", cli_stderr)
    run_cli("mkdir", "docs")
    cli_stderr.close()
    later_stderr = io.StringIO()
    monkeypatch.setattr(sys, "stderr", later_stderr)
    manager = PersistenceManager(InMemorySandboxStorage())
    manager.create_directory("docs")
    with manager.get_output_stream(os.path.join("docs", "a.txt"), FileMode.CREATE) as stream:
        stream.write(b"a")

    uploaded = export_directory_to_s3(
        manager, "docs", "s3://bucket/docs", sandbox_config, s3_client=_RecordingS3Client()
    )

    assert uploaded == 1 and "sandbox_exported" in later_stderr.getvalue()
