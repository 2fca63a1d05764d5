"""Internal transfer pair detection within one import batch.

A transfer between two accounts the business controls shows up twice in a
multi-account export: a debit on the sending account and a credit of the same
magnitude on the receiving account, on the same day. Importing both as income
and expense would double-count the movement, so candidates are surfaced for
suppression.

Pairing is greedy and first-match: debits are visited in row order and each
takes the first eligible unconsumed credit that comes after it; a credit
listed before its debit is never paired with it. It is not a minimum-cost
matching; a credit that would suit a later debit better is gone once an
earlier debit has taken it. The only guarantees are distinct indices within
a candidate and no index reused across candidates.
"""

from __future__ import annotations

from dataclasses import dataclass

from .amounts import parse_amount
from .logging_setup import get_logger
from .models import RawRow, RawRows, TransferPairCandidate

_logger = get_logger("statement_ingest.transfers")

AMOUNT_TOLERANCE = 0.01


@dataclass(frozen=True, slots=True)
class _ResolvedRow:
    index: int
    account: str
    date: str
    amount: float


def _cell(row: RawRow, column: str | None) -> str | None:
    if column is None:
        return None
    return row.get(column)


def _resolve_rows(
    rows: RawRows,
    source_account_column: str,
    date_column: str,
    amount_column: str | None,
    debit_column: str | None,
    credit_column: str | None,
) -> list[_ResolvedRow]:
    resolved: list[_ResolvedRow] = []
    for idx, row in enumerate(rows):
        account = (row.get(source_account_column) or "").strip()
        date = (row.get(date_column) or "").strip()
        if not account or not date:
            continue
        amount = parse_amount(
            _cell(row, amount_column), _cell(row, debit_column), _cell(row, credit_column)
        )
        if amount is None or amount == 0:
            continue
        resolved.append(_ResolvedRow(idx, account, date, amount))
    return resolved


def detect_transfer_pairs(
    rows: RawRows,
    source_account_column: str,
    date_column: str,
    *,
    amount_column: str | None = None,
    debit_column: str | None = None,
    credit_column: str | None = None,
) -> list[TransferPairCandidate]:
    """Find same-day, opposite-sign, cross-account row pairs.

    Amounts come from ``amount_column`` or the ``debit_column``/``credit_column``
    pair, resolved with :func:`statement_ingest.amounts.parse_amount`. Rows
    without an account, without a date, or with a null/zero amount are never
    paired. Dates are compared as trimmed strings.
    """

    resolved = _resolve_rows(
        rows, source_account_column, date_column, amount_column, debit_column, credit_column
    )
    consumed: set[int] = set()
    pairs: list[TransferPairCandidate] = []

    for pos, debit in enumerate(resolved):
        if pos in consumed or debit.amount >= 0:
            continue
        magnitude = abs(debit.amount)
        for other_pos in range(pos + 1, len(resolved)):
            if other_pos in consumed:
                continue
            credit = resolved[other_pos]
            if credit.amount <= 0 or credit.account == debit.account:
                continue
            if credit.date != debit.date:
                continue
            if abs(credit.amount - magnitude) < AMOUNT_TOLERANCE:
                consumed.update((pos, other_pos))
                pairs.append(
                    TransferPairCandidate(
                        debit_row_index=debit.index,
                        credit_row_index=credit.index,
                        amount=magnitude,
                        date=debit.date,
                        debit_account=debit.account,
                        credit_account=credit.account,
                    )
                )
                break

    _logger.debug("detected %d transfer pairs among %d rows", len(pairs), len(rows))
    return pairs


__all__ = ["AMOUNT_TOLERANCE", "detect_transfer_pairs"]
