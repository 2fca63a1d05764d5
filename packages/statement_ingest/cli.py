# ruff: noqa: I001
"""CLI for the ``statement_ingest`` package.

A thin stand-in for the upstream file reader: it loads a CSV export from
disk, hands headers, rows, filename and leading lines to
:func:`statement_ingest.api.prepare_import`, and prints the preview. All
normalization logic lives in the library modules; this is the only place that
touches the filesystem.

Environment variables are loaded from a local ``.env`` using
``python-dotenv`` before any command runs.
"""

from __future__ import annotations

import csv
import json
import sys
from pathlib import Path
from typing import Annotated, Any

import typer
from dotenv import load_dotenv
from pydantic import ValidationError
from typer.models import OptionInfo

from .account_info import HEADER_SCAN_LINES
from .accounts import suggest_account_name
from .api import ImportPreview, prepare_import
from .bank_matching import coerce_known_banks
from .logging_setup import configure_logging
from .models import KnownBank, field_label

EXIT_OK = 0
EXIT_IO_ERROR = 1
EXIT_INVALID_MAPPING = 2


# ---- Small module-level helpers used by CLI commands -------------------------


def _read_csv(
    csv_path: Path, *, skip_lines: int = 0
) -> tuple[list[str], list[dict[str, str]], list[str]]:
    """Return ``(headers, rows, raw_lines)`` for a CSV export.

    ``skip_lines`` drops a preamble (account banners, export notes) before the
    header row. ``raw_lines`` always covers the top of the file, preamble
    included, since that is where banks print account identity.
    """

    text = csv_path.read_text(encoding="utf-8-sig")
    all_lines = text.splitlines()
    raw_lines = all_lines[:HEADER_SCAN_LINES]

    reader = csv.DictReader(all_lines[skip_lines:])
    headers = list(reader.fieldnames or [])
    if not headers:
        raise csv.Error(f"CSV appears to have no header row: {csv_path}")
    rows: list[dict[str, str]] = []
    for row in reader:
        # DictReader collects overflow cells under a None key; drop them.
        normalized = {k: (v if v is not None else "") for k, v in row.items() if k is not None}
        if all(not v.strip() for v in normalized.values()):
            continue
        rows.append(normalized)
    return headers, rows, raw_lines


def _load_known_banks(path: Path | None) -> list[KnownBank]:
    if path is None:
        return []
    data: Any = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, list):
        raise ValueError("known banks file must contain a JSON list")
    return coerce_known_banks(data)


def _print_preview(preview: ImportPreview) -> None:
    typer.echo("Column mappings:")
    for m in preview.mappings:
        target = field_label(m.target_field) if m.target_field else "(unmapped)"
        typer.echo(f"  {m.source_column} -> {target} ({m.confidence.value})")

    for err in preview.validation.errors:
        typer.echo(f"Error: {err}")
    for warn in preview.validation.warnings:
        typer.echo(f"Warning: {warn}")

    typer.echo("Accounts:")
    for match in preview.accounts:
        info = match.account_info
        bank = match.matched_bank_id or "(new)"
        typer.echo(
            f"  {info.raw_label or '(file)'}: {len(info.row_indices)} rows, "
            f"suggested name {suggest_account_name(info)!r}, "
            f"bank {bank} ({match.confidence.value}, score {match.score})"
        )

    if preview.transfer_pairs:
        typer.echo("Transfer pairs:")
        for pair in preview.transfer_pairs:
            typer.echo(
                f"  rows {pair.debit_row_index} -> {pair.credit_row_index}: "
                f"{pair.amount:.2f} on {pair.date} "
                f"({pair.debit_account} -> {pair.credit_account})"
            )

    if preview.staged is not None:
        staged = preview.staged
        typer.echo(
            f"Staged {len(staged.lines)} lines: debits {staged.total_debits:.2f}, "
            f"credits {staged.total_credits:.2f}, {staged.error_count} need correction"
        )


def cmd_inspect(
    csv_path: str,
    *,
    known_banks_path: str | None = None,
    skip_lines: int = 0,
) -> int:
    """Load a CSV, build the import preview and print it. Returns an exit code."""

    path = Path(csv_path)
    try:
        headers, rows, raw_lines = _read_csv(path, skip_lines=skip_lines)
    except FileNotFoundError:
        print(f"Error: File not found: {csv_path}", file=sys.stderr)
        return EXIT_IO_ERROR
    except PermissionError:
        print(f"Error: Permission denied: {csv_path}", file=sys.stderr)
        return EXIT_IO_ERROR
    except (csv.Error, UnicodeDecodeError) as e:
        print(f"Error: Failed to parse CSV: {e}", file=sys.stderr)
        return EXIT_IO_ERROR

    try:
        banks = _load_known_banks(Path(known_banks_path) if known_banks_path else None)
    except FileNotFoundError:
        print(f"Error: File not found: {known_banks_path}", file=sys.stderr)
        return EXIT_IO_ERROR
    except (json.JSONDecodeError, ValidationError, ValueError) as e:
        print(f"Error: Invalid known banks file: {e}", file=sys.stderr)
        return EXIT_IO_ERROR

    preview = prepare_import(
        headers,
        rows,
        filename=path.name,
        raw_lines=raw_lines,
        known_banks=banks,
    )
    _print_preview(preview)
    return EXIT_OK if preview.validation.valid else EXIT_INVALID_MAPPING


# ---- Typer-based console interface -------------------------------------------


app = typer.Typer(
    no_args_is_help=True,
    add_completion=False,
    help="Inspect how a bank or POS CSV export would be mapped and imported.",
)


# Module-level option object to satisfy ruff B008 (no calls in parameter
# defaults). Typer will inspect this when used as a default value below.
CSV_PATH_OPTION: OptionInfo = typer.Option(
    ...,  # required
    "--csv-path",
    help="Path to a bank or POS CSV export",
    dir_okay=False,
    file_okay=True,
    exists=False,  # allow non-existent here; the handler will report nice errors
)


@app.command("inspect")
def inspect_cmd(
    csv_path: Annotated[Path, CSV_PATH_OPTION],
    *,
    known_banks: Path | None = typer.Option(
        None, help="JSON list of known banks: {id, institution_name, balances}."
    ),
    skip_lines: int = typer.Option(
        0, min=0, help="Number of preamble lines before the CSV header row."
    ),
) -> None:
    """Suggest column mappings, match accounts and find transfers in a CSV."""

    code = cmd_inspect(
        str(csv_path),
        known_banks_path=str(known_banks) if known_banks else None,
        skip_lines=skip_lines,
    )
    if code != EXIT_OK:
        raise typer.Exit(code)


@app.callback(invoke_without_command=True)
def _root(ctx: typer.Context) -> None:
    """Root command.

    Loads ``.env`` from the current working directory (without overriding any
    already-set environment variables) and configures package logging.
    """

    load_dotenv(dotenv_path=Path.cwd() / ".env", override=False)
    configure_logging()

    if ctx.invoked_subcommand is None:
        typer.echo("No subcommand provided. Use --help to see available commands.")
        raise typer.Exit(1)


if __name__ == "__main__":  # pragma: no cover - exercised via the console script
    app()
