"""isostore CLI entry points.

This module exposes commands for inspecting and editing a sandbox.
It maps argparse commands onto persistence manager calls.
"""

from __future__ import annotations

import argparse
from dataclasses import replace
from pathlib import Path
import shutil
import sys
from typing import Any, BinaryIO, Sequence

from core.config import IsoStoreConfig, parse_scope_name
from core.constants import ENV_APPLICATION_ID, ENV_USER_SCOPE
from core.errors import IsoStoreError, IsoStoreInputError
from core.logging_config import configure_logging
from core.types import FileMode
from store.file_modes import parse_file_mode, supported_file_modes
from store.persistence_manager import PersistenceManager
from store.s3_export import export_directory_to_s3


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(prog="isostore", description="Sandboxed storage CLI")
    parser.add_argument("--data-root", help="Override ISOSTORE_DATA_ROOT for this command")
    parser.add_argument("--application", help="Override ISOSTORE_APPLICATION_ID")
    parser.add_argument("--user-scope", help="Override ISOSTORE_USER_SCOPE")
    subparsers = parser.add_subparsers(dest="command", required=True)
    _add_listing_commands(subparsers)
    _add_file_commands(subparsers)
    _add_directory_commands(subparsers)
    _add_export_command(subparsers)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the isostore CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        config = _build_config(args)
        configure_logging(config.log_level)
        with PersistenceManager(config=config) as manager:
            return _dispatch(parser, manager, config, args)
    except IsoStoreError as error:
        print(f"sandbox_error={error}", file=sys.stderr)
        return 1


def _build_config(args: argparse.Namespace) -> IsoStoreConfig:
    """Build config from environment with CLI overrides.

    Args:
        args: Parsed CLI args.

    Returns:
        Runtime configuration.
    """
    config = IsoStoreConfig.from_env()
    if args.data_root:
        config = replace(config, data_root=Path(args.data_root).expanduser().resolve())
    if args.application:
        config = replace(
            config, application_id=parse_scope_name(args.application, ENV_APPLICATION_ID)
        )
    if args.user_scope:
        config = replace(config, user_scope=parse_scope_name(args.user_scope, ENV_USER_SCOPE))
    return config


def _dispatch(
    parser: argparse.ArgumentParser,
    manager: PersistenceManager,
    config: IsoStoreConfig,
    args: argparse.Namespace,
) -> int:
    if args.command == "ls":
        return _run_ls_command(manager, args)
    if args.command == "stat":
        return _run_stat_command(manager, args)
    if args.command == "cat":
        return _run_cat_command(manager, args)
    if args.command == "put":
        return _run_put_command(manager, args)
    if args.command == "rm":
        manager.delete_file(args.path)
        return 0
    if args.command == "mkdir":
        manager.create_directory(args.directory)
        return 0
    if args.command == "rmdir":
        manager.delete_directory(args.directory)
        return 0
    if args.command == "mv":
        manager.rename_file(args.source, args.destination)
        return 0
    if args.command == "cp":
        manager.copy_file(args.source, args.destination, overwrite=args.overwrite)
        return 0
    if args.command == "export":
        return _run_export_command(manager, config, args)
    parser.error(f"Unsupported command: {args.command}")
    return 2


def _run_ls_command(manager: PersistenceManager, args: argparse.Namespace) -> int:
    """Print child directories with a trailing separator, then files."""
    for name in manager.list_sub_directories(args.directory):
        print(f"{name}/")
    for name in manager.list_files(args.directory):
        print(name)
    return 0


def _run_stat_command(manager: PersistenceManager, args: argparse.Namespace) -> int:
    if manager.directory_exists(args.path):
        print("type=directory")
        return 0
    if not manager.file_exists(args.path):
        print("type=missing")
        return 1
    print("type=file")
    print(f"length={manager.get_file_length(args.path)}")
    return 0


def _run_cat_command(manager: PersistenceManager, args: argparse.Namespace) -> int:
    with manager.get_input_stream(args.path) as stream:
        shutil.copyfileobj(stream, sys.stdout.buffer)
    sys.stdout.flush()
    return 0


def _run_put_command(manager: PersistenceManager, args: argparse.Namespace) -> int:
    """Handle put command.

    Args:
        manager: Open persistence manager.
        args: Parsed CLI args.

    Returns:
        Exit code.
    """
    mode = parse_file_mode(args.mode)
    if args.source == "-":
        _copy_into_sandbox(manager, args.path, mode, sys.stdin.buffer)
    else:
        with _open_host_source(args.source) as source:
            _copy_into_sandbox(manager, args.path, mode, source)
    print(f"length={manager.get_file_length(args.path)}")
    return 0


def _open_host_source(source_path: str) -> BinaryIO:
    """Open a host file before the sandbox target is touched."""
    try:
        return open(source_path, "rb")
    except OSError as error:
        raise IsoStoreInputError(
            f"Failed to read source file {source_path}: {error.strerror}. "
            "Check that the host path exists and is readable."
        ) from error


def _copy_into_sandbox(
    manager: PersistenceManager,
    path_name: str,
    mode: FileMode,
    source: BinaryIO,
) -> None:
    with manager.get_output_stream(path_name, mode) as target:
        shutil.copyfileobj(source, target)


def _run_export_command(
    manager: PersistenceManager,
    config: IsoStoreConfig,
    args: argparse.Namespace,
) -> int:
    uploaded = export_directory_to_s3(manager, args.directory, args.output_uri, config)
    print(f"exported={uploaded}")
    return 0


def _add_listing_commands(subparsers: Any) -> None:
    """Register ls and stat subcommands."""
    parser = subparsers.add_parser("ls", help="List a sandbox directory")
    parser.add_argument("directory", nargs="?", default="", help="Directory, default root")
    parser = subparsers.add_parser("stat", help="Show the type and length of an entry")
    parser.add_argument("path", help="Sandbox path")


def _add_file_commands(subparsers: Any) -> None:
    """Register file subcommands."""
    parser = subparsers.add_parser("cat", help="Write a sandbox file to stdout")
    parser.add_argument("path", help="Sandbox file path")
    parser = subparsers.add_parser("put", help="Write a host file into the sandbox")
    parser.add_argument("path", help="Sandbox file path")
    parser.add_argument("source", help="Host file to copy, or - for stdin")
    parser.add_argument(
        "--mode",
        default=FileMode.CREATE.name,
        help=f"Open mode for the sandbox file: {', '.join(supported_file_modes())}",
    )
    parser = subparsers.add_parser("rm", help="Delete a sandbox file if present")
    parser.add_argument("path", help="Sandbox file path")
    parser = subparsers.add_parser("mv", help="Rename a sandbox file")
    parser.add_argument("source", help="Existing sandbox file")
    parser.add_argument("destination", help="New sandbox path")
    parser = subparsers.add_parser("cp", help="Copy a sandbox file")
    parser.add_argument("source", help="Existing sandbox file")
    parser.add_argument("destination", help="Destination sandbox path")
    parser.add_argument("--overwrite", action="store_true", help="Replace an existing file")


def _add_directory_commands(subparsers: Any) -> None:
    """Register directory subcommands."""
    parser = subparsers.add_parser("mkdir", help="Create a sandbox directory")
    parser.add_argument("directory", help="Sandbox directory path")
    parser = subparsers.add_parser(
        "rmdir",
        help="Delete a directory and its direct files; fails if subdirectories remain",
    )
    parser.add_argument("directory", help="Sandbox directory path")


def _add_export_command(subparsers: Any) -> None:
    """Register export subcommand."""
    parser = subparsers.add_parser("export", help="Upload a sandbox directory to S3")
    parser.add_argument("directory", help="Sandbox directory, use '' for the root")
    parser.add_argument("output_uri", help="Destination s3://bucket/prefix")
