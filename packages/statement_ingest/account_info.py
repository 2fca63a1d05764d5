"""Account identity extraction from statement text.

Three independent scans run over lowercased text: an account mask (last four
digits), the institution name, and the account type. Each scan walks an
ordered rule table and stops at the first hit; precedence is positional, so
earlier entries shadow later ones that would also match (``Citizens Bank``
sits ahead of ``Citibank`` for that reason).

The tables are module-level tuples built once at import and never mutated.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass

from .models import DetectedAccountInfo

HEADER_SCAN_LINES = 10

# ---------------------------------------------------------------------------
# Rule tables
# ---------------------------------------------------------------------------

ACCOUNT_MASK_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"\*{2,}(\d{4})"),
    re.compile(r"\.{3,}(\d{4})"),
    re.compile(r"[xX]{2,}(\d{4})"),
    re.compile(r"ending\s+in\s+(\d{4})", re.IGNORECASE),
    re.compile(r"account\s+#?\s*\*+\s*(\d{4})", re.IGNORECASE),
)


@dataclass(frozen=True, slots=True)
class KeywordRule:
    keywords: tuple[str, ...]
    value: str

    def matches(self, text: str) -> bool:
        return any(kw in text for kw in self.keywords)


INSTITUTION_PATTERNS: tuple[KeywordRule, ...] = (
    KeywordRule(("chase", "jpmorgan"), "Chase"),
    KeywordRule(("bank of america", "bofa", "bankofamerica"), "Bank of America"),
    KeywordRule(("wells fargo", "wellsfargo"), "Wells Fargo"),
    KeywordRule(("citizens bank", "citizensbank"), "Citizens Bank"),
    KeywordRule(("citibank", "citi"), "Citibank"),
    KeywordRule(("capital one", "capitalone"), "Capital One"),
    KeywordRule(("us bank", "usbank", "u.s. bank"), "US Bank"),
    KeywordRule(("pnc",), "PNC Bank"),
    KeywordRule(("td bank", "tdbank"), "TD Bank"),
    KeywordRule(("american express", "amex"), "American Express"),
    KeywordRule(("discover",), "Discover"),
    KeywordRule(("mercury",), "Mercury"),
    KeywordRule(("navy federal", "navyfederal"), "Navy Federal Credit Union"),
    KeywordRule(("ally bank", "allybank"), "Ally Bank"),
    KeywordRule(("schwab",), "Charles Schwab"),
)

ACCOUNT_TYPE_PATTERNS: tuple[KeywordRule, ...] = (
    KeywordRule(("checking", "chk", "dda"), "checking"),
    KeywordRule(("savings",), "savings"),
    KeywordRule(("credit card", "credit_card", "creditcard"), "credit_card"),
    KeywordRule(("money market", "money_market", "moneymarket"), "money_market"),
)


# ---------------------------------------------------------------------------
# Scans
# ---------------------------------------------------------------------------


def _first_rule_value(rules: Sequence[KeywordRule], text: str) -> str | None:
    for rule in rules:
        if rule.matches(text):
            return rule.value
    return None


def find_account_mask(text: str) -> str | None:
    """Return the last-four digits from the first mask pattern that matches."""

    for pattern in ACCOUNT_MASK_PATTERNS:
        match = pattern.search(text)
        if match:
            return match.group(1)
    return None


def find_institution(text: str) -> str | None:
    return _first_rule_value(INSTITUTION_PATTERNS, text.lower())


def find_account_type(text: str) -> str | None:
    return _first_rule_value(ACCOUNT_TYPE_PATTERNS, text.lower())


def scan(text: str) -> DetectedAccountInfo:
    """Run the mask, institution and type scans over one piece of text."""

    lowered = (text or "").lower()
    return DetectedAccountInfo(
        account_mask=find_account_mask(lowered),
        institution_name=find_institution(lowered),
        account_type=find_account_type(lowered),
    )


def scan_file(raw_lines: Sequence[str], filename: str) -> DetectedAccountInfo:
    """Scan the first lines of a file plus its name for account identity.

    The mask is taken from the leading lines when any pattern matches there;
    the filename is consulted only as a fallback. Institution and type scan
    the lines and filename together.
    """

    lines_text = "\n".join(raw_lines[:HEADER_SCAN_LINES]).lower()
    name = (filename or "").lower()

    # Lines win over the filename even when only a later pattern hits the lines.
    mask = find_account_mask(lines_text)
    if mask is None:
        mask = find_account_mask(name)

    combined = f"{lines_text} {name}"
    return DetectedAccountInfo(
        account_mask=mask,
        institution_name=find_institution(combined),
        account_type=find_account_type(combined),
    )


__all__ = [
    "HEADER_SCAN_LINES",
    "ACCOUNT_MASK_PATTERNS",
    "INSTITUTION_PATTERNS",
    "ACCOUNT_TYPE_PATTERNS",
    "KeywordRule",
    "find_account_mask",
    "find_institution",
    "find_account_type",
    "scan",
    "scan_file",
]
