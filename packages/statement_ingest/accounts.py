"""Multi-account grouping for exports that interleave several bank accounts.

Rows are grouped by the trimmed raw value of the designated source-account
column, then each distinct label is scanned for mask, institution and type.
"""

from __future__ import annotations

from .account_info import scan
from .logging_setup import get_logger
from .models import ExtractedAccountInfo, RawRows

_logger = get_logger("statement_ingest.accounts")


def extract_unique_accounts(
    rows: RawRows, source_account_column: str
) -> list[ExtractedAccountInfo]:
    """Group row indices by source-account label, in first-appearance order.

    Rows with an empty label belong to no group. Beyond the generic scan, a
    label that names no account type but contains ``"credit"`` is treated as
    a credit card.
    """

    groups: dict[str, list[int]] = {}
    for idx, row in enumerate(rows):
        label = (row.get(source_account_column) or "").strip()
        if not label:
            continue
        groups.setdefault(label, []).append(idx)

    accounts: list[ExtractedAccountInfo] = []
    for label, indices in groups.items():
        info = scan(label)
        account_type = info.account_type
        if account_type is None and "credit" in label.lower():
            account_type = "credit_card"
        accounts.append(
            ExtractedAccountInfo(
                raw_label=label,
                row_indices=tuple(indices),
                account_mask=info.account_mask,
                account_type=account_type,
                institution_name=info.institution_name,
            )
        )

    _logger.debug(
        "found %d source accounts in column %r across %d rows",
        len(accounts),
        source_account_column,
        len(rows),
    )
    return accounts


def suggest_account_name(info: ExtractedAccountInfo) -> str:
    """Human-friendly default name for creating a bank from extracted parts.

    ``Chase Credit Card ****1234``; falls back to the raw label when nothing
    was extracted.
    """

    parts: list[str] = []
    if info.institution_name:
        parts.append(info.institution_name)
    if info.account_type:
        parts.append(info.account_type.replace("_", " ").title())
    if info.account_mask:
        parts.append(f"****{info.account_mask}")
    return " ".join(parts) if parts else info.raw_label


__all__ = ["extract_unique_accounts", "suggest_account_name"]
