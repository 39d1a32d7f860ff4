"""Sheetkeep CLI entry points.
This module exposes upload, dataset listing and preview commands.
It maps argparse commands onto SDK calls.
"""

from __future__ import annotations

import argparse
from dataclasses import replace
from pathlib import Path
from typing import Any, Sequence

from core.config import SheetkeepConfig
from core.errors import SheetkeepError
from core.s3_uri import parse_s3_uri
from core.types import PersistenceOutcome
from serve.preview import render_preview
from store.dataset_sdk import SheetkeepClient


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(prog="sheetkeep", description="Sheetkeep spreadsheet CLI")
    parser.add_argument("--data-root", help="Override SHEETKEEP_DATA_ROOT for this command")
    parser.add_argument("--store-uri", help="Override SHEETKEEP_STORE_URI (s3://bucket/prefix)")
    subparsers = parser.add_subparsers(dest="command", required=True)
    _add_upload_command(subparsers)
    _add_datasets_command(subparsers)
    _add_preview_command(subparsers)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the Sheetkeep CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        client = _build_client(args.data_root, args.store_uri)
        if args.command == "upload":
            return _run_upload_command(client, args)
        if args.command == "datasets":
            return _run_datasets_command(client)
        if args.command == "preview":
            return _run_preview_command(client, args)
    except SheetkeepError as error:
        print(f"error={error}")
        return 1
    parser.error(f"Unsupported command: {args.command}")
    return 2


def _build_client(data_root: str | None, store_uri: str | None) -> SheetkeepClient:
    """Build SDK client with optional config overrides.

    Args:
        data_root: Optional override path.
        store_uri: Optional override store URI.

    Returns:
        Configured SDK client.
    """
    config = SheetkeepConfig.from_env()
    if data_root:
        config = replace(config, data_root=Path(data_root).expanduser().resolve())
    if store_uri:
        parse_s3_uri(store_uri, domain="config")
        config = replace(config, store_uri=store_uri)
    return SheetkeepClient(config)


def _run_upload_command(client: SheetkeepClient, args: argparse.Namespace) -> int:
    """Handle upload command.

    Args:
        client: SDK client.
        args: Parsed CLI args.

    Returns:
        Exit code.
    """
    report = client.upload(args.files)
    for result in report.results:
        if result.dataset is not None:
            print(
                f"ok\t{result.file_name}\t{result.dataset.name}\t"
                f"{len(result.dataset.records)} rows"
            )
        else:
            print(f"error\t{result.file_name}\t{result.error}")
    for outcome in report.outcomes:
        print(_format_outcome(outcome))
    return 0 if report.ok else 1


def _run_datasets_command(client: SheetkeepClient) -> int:
    """Handle datasets command.

    Args:
        client: SDK client.

    Returns:
        Exit code.
    """
    result = client.load()
    for name in sorted(result.datasets):
        dataset = result.datasets[name]
        marker = "*" if name == result.active_name else " "
        print(f"{marker} {name}\t{len(dataset.records)}\t{dataset.file_name}")
    return 0


def _run_preview_command(client: SheetkeepClient, args: argparse.Namespace) -> int:
    """Handle preview command.

    Args:
        client: SDK client.
        args: Parsed CLI args.

    Returns:
        Exit code.
    """
    preview = client.preview(args.dataset, rows=args.rows)
    print(render_preview(preview))
    return 0


def _format_outcome(outcome: PersistenceOutcome) -> str:
    """Render one persistence outcome line."""
    if outcome.status == "persisted":
        verified = "verified" if outcome.headers_verified else "unverified"
        return f"persisted\t{outcome.dataset_name}\t{outcome.record_count}\theaders {verified}"
    return f"{outcome.status}\t{outcome.dataset_name or '-'}\t{outcome.message}"


def _add_upload_command(subparsers: Any) -> None:
    """Register upload subcommand."""
    parser = subparsers.add_parser("upload", help="Upload .xlsx, .xls or .csv files")
    parser.add_argument("files", nargs="+", help="Spreadsheet files to upload")


def _add_datasets_command(subparsers: Any) -> None:
    """Register datasets subcommand."""
    subparsers.add_parser("datasets", help="List stored datasets")


def _add_preview_command(subparsers: Any) -> None:
    """Register preview subcommand."""
    parser = subparsers.add_parser("preview", help="Show the first rows of a dataset")
    parser.add_argument("dataset", help="Dataset name")
    parser.add_argument("--rows", type=int, help="Number of rows to show")
