"""Heuristic column mapping for bank CSV/Excel exports.

Each source header is scored against the keyword table of every canonical
field that no earlier header has claimed:

- exact keyword match: ``weight * 10``
- header contains a keyword: ``weight * 7``
- every word of some keyword phrase appears in the header: ``weight * 5``

The best unclaimed field wins (ties resolve to registry order) and is claimed
so later headers cannot reuse it. The winning score is bucketed into a
confidence level; a ``none`` bucket leaves the column unmapped for manual
assignment.

Headers are processed in file column order, which makes the result
deterministic for a given header list.
"""

from __future__ import annotations

from collections.abc import Sequence

from .logging_setup import get_logger
from .models import (
    CanonicalField,
    ColumnMapping,
    ConfidenceLevel,
    KeywordPattern,
    RawRows,
)

_logger = get_logger("statement_ingest.column_mapping")

EXACT_MULTIPLIER = 10
CONTAINS_MULTIPLIER = 7
WORDS_MULTIPLIER = 5

# ---------------------------------------------------------------------------
# Keyword table (registry order; ``ignore`` is only ever assigned by a human)
# ---------------------------------------------------------------------------

FIELD_PATTERNS: tuple[KeywordPattern, ...] = (
    KeywordPattern(
        CanonicalField.TRANSACTION_DATE,
        (
            "transaction date",
            "trans date",
            "date",
            "transaction_date",
            "effective date",
            "value date",
        ),
        10,
    ),
    KeywordPattern(
        CanonicalField.POSTED_DATE,
        ("posted date", "posting date", "post date", "posted_date", "posting_date"),
        9,
    ),
    KeywordPattern(
        CanonicalField.DESCRIPTION,
        (
            "description",
            "memo",
            "payee",
            "merchant",
            "details",
            "narrative",
            "transaction description",
            "particulars",
            "name",
        ),
        10,
    ),
    KeywordPattern(
        CanonicalField.AMOUNT,
        ("amount", "transaction amount", "trans amount"),
        8,
    ),
    KeywordPattern(
        CanonicalField.DEBIT_AMOUNT,
        (
            "debit",
            "withdrawal",
            "withdrawals",
            "money out",
            "charges",
            "debit amount",
            "debits",
        ),
        9,
    ),
    KeywordPattern(
        CanonicalField.CREDIT_AMOUNT,
        ("credit", "deposit", "deposits", "money in", "credit amount", "credits"),
        9,
    ),
    KeywordPattern(
        CanonicalField.BALANCE,
        (
            "balance",
            "running balance",
            "available balance",
            "ending balance",
            "ledger balance",
        ),
        7,
    ),
    KeywordPattern(
        CanonicalField.CHECK_NUMBER,
        ("check number", "check #", "check no", "check or slip #", "check", "cheque number"),
        6,
    ),
    KeywordPattern(
        CanonicalField.REFERENCE_NUMBER,
        (
            "reference",
            "ref",
            "reference number",
            "ref #",
            "transaction id",
            "confirmation",
            "trace number",
        ),
        6,
    ),
    KeywordPattern(
        CanonicalField.CATEGORY,
        ("category", "type", "transaction type"),
        5,
    ),
    KeywordPattern(
        CanonicalField.SOURCE_ACCOUNT,
        (
            "account",
            "account name",
            "account number",
            "account #",
            "source account",
            "bank account",
            "acct",
        ),
        7,
    ),
)


def score_to_confidence(score: int) -> ConfidenceLevel:
    if score >= 70:
        return ConfidenceLevel.HIGH
    if score >= 40:
        return ConfidenceLevel.MEDIUM
    if score >= 20:
        return ConfidenceLevel.LOW
    return ConfidenceLevel.NONE


def _normalize_header(header: str) -> str:
    return header.lower().strip()


def score_header(header: str, pattern: KeywordPattern) -> int:
    """Score one header against one field's keywords (0 when nothing matches)."""

    normalized = _normalize_header(header)
    keywords = [kw.lower() for kw in pattern.keywords]

    if any(normalized == kw for kw in keywords):
        return pattern.weight * EXACT_MULTIPLIER
    if any(kw in normalized for kw in keywords):
        return pattern.weight * CONTAINS_MULTIPLIER
    if any(all(word in normalized for word in kw.split(" ")) for kw in keywords):
        return pattern.weight * WORDS_MULTIPLIER
    return 0


def _best_unclaimed(
    header: str, claimed: set[CanonicalField]
) -> tuple[CanonicalField, int] | None:
    best: tuple[CanonicalField, int] | None = None
    for pattern in FIELD_PATTERNS:
        if pattern.field in claimed:
            continue
        score = score_header(header, pattern)
        # Strict comparison keeps the earliest registry entry on ties.
        if score > 0 and (best is None or score > best[1]):
            best = (pattern.field, score)
    return best


def suggest_column_mappings(
    headers: Sequence[str], sample_rows: RawRows = ()
) -> list[ColumnMapping]:
    """Propose a target field and confidence for each header, in column order.

    ``sample_rows`` is accepted for interface parity with the review screen;
    scoring currently uses header text only.

    Post-pass: when nothing was mapped to ``transactionDate`` but a column was
    mapped to ``postedDate``, that column is promoted to ``transactionDate``
    so every import has a primary date.
    """

    claimed: set[CanonicalField] = set()
    mappings: list[ColumnMapping] = []

    for header in headers:
        best = _best_unclaimed(header, claimed)
        confidence = score_to_confidence(best[1]) if best else ConfidenceLevel.NONE
        if best is None or confidence is ConfidenceLevel.NONE:
            mappings.append(ColumnMapping(header, None, ConfidenceLevel.NONE))
            continue
        claimed.add(best[0])
        mappings.append(ColumnMapping(header, best[0], confidence))

    if CanonicalField.TRANSACTION_DATE not in claimed:
        for pos, m in enumerate(mappings):
            if m.target_field is CanonicalField.POSTED_DATE:
                mappings[pos] = ColumnMapping(
                    m.source_column, CanonicalField.TRANSACTION_DATE, m.confidence
                )
                break

    _logger.debug(
        "suggested mappings for %d headers (%d mapped)",
        len(mappings),
        sum(1 for m in mappings if m.target_field is not None),
    )
    return mappings


__all__ = [
    "FIELD_PATTERNS",
    "score_to_confidence",
    "score_header",
    "suggest_column_mappings",
]
