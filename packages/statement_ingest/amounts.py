"""Locale-tolerant monetary parsing for bank and POS exports.

Handles the formats seen in hand-exported statements:

- signed amounts: ``-123.45``, ``123.45``
- currency symbols: ``$123.45``, ``€ 9.99``
- parenthesis negatives: ``(123.45)``, ``($1,050.00)``
- thousands separators: ``1,234.56``
- split debit/credit columns, resolved to one signed value

Unparsable input yields ``None`` rather than raising, so a whole batch can be
normalized and every bad row surfaced together. Callers must flag ``None``
for manual correction; it is never treated as zero.
"""

from __future__ import annotations

import re

from .logging_setup import get_logger

_logger = get_logger("statement_ingest.amounts")

_CURRENCY_AND_SPACE_RE = re.compile(r"[$€£¥₹\s]")
# Plain decimal literal only; rejects "nan", "inf", "12abc" and "1_000".
_NUMBER_RE = re.compile(r"\+?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")


def parse_single(raw: str | None) -> float | None:
    """Parse one monetary cell into a signed float, or ``None``.

    Parenthesis notation is checked first, then currency symbols and
    whitespace are dropped, then a leading ``-`` marks the value negative.
    Both markers are honored; either one makes the result negative.
    """

    if not raw or not isinstance(raw, str):
        return None

    s = raw.strip()
    if s == "" or s == "-":
        return None

    negative = False
    if s.startswith("(") and s.endswith(")"):
        negative = True
        s = s[1:-1]

    s = _CURRENCY_AND_SPACE_RE.sub("", s)

    if s.startswith("-"):
        negative = True
        s = s[1:]

    s = s.replace(",", "")

    if not _NUMBER_RE.fullmatch(s):
        _logger.debug("unparsable amount %r", raw)
        return None

    value = float(s)
    return -value if negative else value


def parse_amount(
    amount: str | None = None,
    debit: str | None = None,
    credit: str | None = None,
) -> float | None:
    """Resolve a row's signed amount from a unified or split column layout.

    Rules
    -----
    - A non-empty unified ``amount`` is authoritative and overrides the split
      columns (even when it fails to parse).
    - A non-zero debit is money out and always negative; it wins when both
      sides are non-zero.
    - Otherwise a non-zero credit is money in and always positive.
    - Sides that parse only to zero give an explicit zero-amount transaction.
    - ``None`` when nothing parsed.
    """

    if amount is not None and amount != "":
        return parse_single(amount)

    debit_value = parse_single(debit) if debit else None
    credit_value = parse_single(credit) if credit else None

    if debit_value is not None and debit_value != 0:
        return -abs(debit_value)
    if credit_value is not None and credit_value != 0:
        return abs(credit_value)

    # Past this point any side that parsed is zero.
    if debit_value is not None or credit_value is not None:
        return 0.0

    return None


__all__ = ["parse_single", "parse_amount"]
