"""Import preview orchestration shared by the CLI and host applications.

This module composes the normalization steps that run before a human reviews
an import:

1) Column mapping: use the caller's confirmed mappings, else suggest them
2) Validation gate over the mapping set
3) File-level account identity scan (leading lines + filename)
4) Per-account grouping and known-bank matching
5) Transfer pair detection (valid mapping with a source-account column only)
6) Row staging (valid mapping only)

The result is a single frozen :class:`ImportPreview` for review screens and
the import step. Nothing here reads files or persists anything.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from .account_info import scan_file
from .accounts import extract_unique_accounts
from .bank_matching import coerce_known_banks, match_banks
from .column_mapping import suggest_column_mappings
from .logging_setup import get_logger
from .models import (
    AccountBankMatch,
    ColumnMapping,
    DetectedAccountInfo,
    ExtractedAccountInfo,
    KnownBank,
    MappingValidation,
    RawRows,
    StagedStatement,
    TransferPairCandidate,
)
from .statement import build_mapping_lookups, stage_rows
from .transfers import detect_transfer_pairs
from .validation import validate_mappings

_logger = get_logger("statement_ingest.api")


@dataclass(frozen=True, slots=True)
class ImportPreview:
    mappings: tuple[ColumnMapping, ...]
    validation: MappingValidation
    file_account: DetectedAccountInfo
    accounts: tuple[AccountBankMatch, ...]
    transfer_pairs: tuple[TransferPairCandidate, ...] = ()
    staged: StagedStatement | None = None


def _file_level_account(
    detected: DetectedAccountInfo, filename: str, row_count: int
) -> ExtractedAccountInfo:
    return ExtractedAccountInfo(
        raw_label=filename,
        row_indices=tuple(range(row_count)),
        account_mask=detected.account_mask,
        account_type=detected.account_type,
        institution_name=detected.institution_name,
    )


def prepare_import(
    headers: Sequence[str],
    rows: RawRows,
    *,
    filename: str = "",
    raw_lines: Sequence[str] = (),
    known_banks: Iterable[KnownBank | Mapping[str, Any]] = (),
    mappings: Sequence[ColumnMapping] | None = None,
) -> ImportPreview:
    """Compute everything a reviewer needs before importing a parsed file.

    When the mapping names a ``sourceAccount`` column, rows are grouped per
    account and each group is matched against ``known_banks``; otherwise the
    whole file is treated as one account identified from ``raw_lines`` and
    ``filename``.
    """

    resolved = list(mappings) if mappings is not None else suggest_column_mappings(headers, rows)
    validation = validate_mappings(resolved)
    lookups = build_mapping_lookups(resolved)
    banks = coerce_known_banks(known_banks)

    detected = scan_file(raw_lines, filename)

    if lookups.source_account_column is not None:
        extracted = extract_unique_accounts(rows, lookups.source_account_column)
    else:
        extracted = [_file_level_account(detected, filename, len(rows))]
    accounts = match_banks(extracted, banks)

    transfer_pairs: list[TransferPairCandidate] = []
    staged: StagedStatement | None = None
    if validation.valid:
        date_column = lookups.date_column or lookups.posted_date_column
        if lookups.source_account_column is not None and date_column is not None:
            transfer_pairs = detect_transfer_pairs(
                rows,
                lookups.source_account_column,
                date_column,
                amount_column=lookups.amount_column,
                debit_column=lookups.debit_column,
                credit_column=lookups.credit_column,
            )
        staged = stage_rows(rows, resolved)

    _logger.info(
        "prepared import of %d rows: valid=%s accounts=%d transfers=%d",
        len(rows),
        validation.valid,
        len(accounts),
        len(transfer_pairs),
    )

    return ImportPreview(
        mappings=tuple(resolved),
        validation=validation,
        file_account=detected,
        accounts=tuple(accounts),
        transfer_pairs=tuple(transfer_pairs),
        staged=staged,
    )


__all__ = ["ImportPreview", "prepare_import"]
