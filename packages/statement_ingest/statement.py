"""Stage parsed rows as reviewable statement lines using a confirmed mapping.

Each row becomes a :class:`~statement_ingest.models.StagedLine` with a
normalized ISO date, trimmed description and signed amount. Values that fail
to parse are left as ``None`` and recorded in ``validation_errors`` for the
review screen; nothing is silently defaulted.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from datetime import date, datetime

from .amounts import parse_amount, parse_single
from .logging_setup import get_logger
from .models import (
    CanonicalField,
    ColumnMapping,
    MappingLookups,
    RawRow,
    RawRows,
    StagedLine,
    StagedStatement,
)

_logger = get_logger("statement_ingest.statement")

_ISO_RE = re.compile(r"^(\d{4})-(\d{2})-(\d{2})")
_MDY_RE = re.compile(r"^(\d{1,2})[/\-.](\d{1,2})[/\-.](\d{4})$")
_MDY_SHORT_RE = re.compile(r"^(\d{1,2})[/\-.](\d{1,2})[/\-.](\d{2})$")
_TEXT_DATE_FORMATS = ("%b %d, %Y", "%B %d, %Y", "%d %b %Y", "%d %B %Y", "%Y/%m/%d")


def build_mapping_lookups(mappings: Iterable[ColumnMapping]) -> MappingLookups:
    """Return the first source column mapped to each field the stager reads."""

    first: dict[CanonicalField, str] = {}
    for m in mappings:
        if m.target_field is not None and m.target_field not in first:
            first[m.target_field] = m.source_column
    return MappingLookups(
        date_column=first.get(CanonicalField.TRANSACTION_DATE),
        posted_date_column=first.get(CanonicalField.POSTED_DATE),
        description_column=first.get(CanonicalField.DESCRIPTION),
        amount_column=first.get(CanonicalField.AMOUNT),
        debit_column=first.get(CanonicalField.DEBIT_AMOUNT),
        credit_column=first.get(CanonicalField.CREDIT_AMOUNT),
        balance_column=first.get(CanonicalField.BALANCE),
        source_account_column=first.get(CanonicalField.SOURCE_ACCOUNT),
    )


def _safe_date(year: int, month: int, day: int) -> str | None:
    try:
        return date(year, month, day).isoformat()
    except ValueError:
        return None


def parse_date(raw: str | None) -> str | None:
    """Parse common statement date spellings to ``YYYY-MM-DD``.

    Accepts an ISO prefix (time parts ignored), ``M/D/YYYY`` and ``M/D/YY``
    with ``/``, ``-`` or ``.`` separators, and a few textual month formats.
    Two-digit years above 50 are read as 19xx, the rest as 20xx.
    """

    if not raw or not raw.strip():
        return None
    s = raw.strip()

    m = _ISO_RE.match(s)
    if m:
        return _safe_date(int(m.group(1)), int(m.group(2)), int(m.group(3)))

    m = _MDY_RE.match(s)
    if m:
        return _safe_date(int(m.group(3)), int(m.group(1)), int(m.group(2)))

    m = _MDY_SHORT_RE.match(s)
    if m:
        short_year = int(m.group(3))
        year = 1900 + short_year if short_year > 50 else 2000 + short_year
        return _safe_date(year, int(m.group(1)), int(m.group(2)))

    for fmt in _TEXT_DATE_FORMATS:
        try:
            return datetime.strptime(s, fmt).date().isoformat()
        except ValueError:
            continue
    return None


def _cell(row: RawRow, column: str | None) -> str | None:
    if column is None:
        return None
    return row.get(column)


def stage_row(row: RawRow, lookups: MappingLookups, index: int) -> StagedLine:
    errors: dict[str, str] = {}

    raw_date = (
        _cell(row, lookups.date_column) or _cell(row, lookups.posted_date_column) or ""
    )
    parsed_date = parse_date(raw_date)
    if parsed_date is None:
        errors["date"] = f'Could not parse date: "{raw_date}"'

    description = (_cell(row, lookups.description_column) or "").strip() or None
    if description is None:
        errors["description"] = "Missing description"

    amount = parse_amount(
        _cell(row, lookups.amount_column),
        _cell(row, lookups.debit_column),
        _cell(row, lookups.credit_column),
    )
    if amount is None:
        errors["amount"] = "Could not parse amount"

    raw_balance = _cell(row, lookups.balance_column)
    balance = parse_single(raw_balance) if raw_balance else None

    if amount is None:
        transaction_type = "unknown"
    else:
        transaction_type = "debit" if amount < 0 else "credit"

    source_account = (_cell(row, lookups.source_account_column) or "").strip() or None

    return StagedLine(
        line_sequence=index + 1,
        transaction_date=parsed_date,
        description=description,
        amount=amount,
        transaction_type=transaction_type,
        balance=balance,
        source_account=source_account,
        validation_errors=errors,
    )


def stage_rows(rows: RawRows, mappings: Iterable[ColumnMapping]) -> StagedStatement:
    """Stage every row and total the parsed debits and credits."""

    lookups = build_mapping_lookups(mappings)
    lines: list[StagedLine] = []
    total_debits = 0.0
    total_credits = 0.0
    for idx, row in enumerate(rows):
        line = stage_row(row, lookups, idx)
        lines.append(line)
        if line.amount is not None:
            if line.amount < 0:
                total_debits += abs(line.amount)
            else:
                total_credits += line.amount

    staged = StagedStatement(
        lines=tuple(lines),
        total_debits=round(total_debits, 2),
        total_credits=round(total_credits, 2),
    )
    if staged.has_errors:
        _logger.info("staged %d lines, %d need correction", len(lines), staged.error_count)
    return staged


__all__ = ["build_mapping_lookups", "parse_date", "stage_row", "stage_rows"]
