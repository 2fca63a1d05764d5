"""Suggest which known bank an extracted account identity belongs to.

Scoring per known bank (each criterion counts at most once):

- ``+40`` institution: extracted name and a non-empty bank name contain one
  another (case-insensitive).
- ``+50`` mask: equals a registered balance mask; otherwise the bank's display
  name contains the mask.
- ``+10`` type: equals a registered balance type; otherwise the bank's display
  name contains the type label (underscores read as spaces).

The strictly highest-scoring bank is attached (earliest wins ties); a best
score of ``0`` attaches nothing. Confidence is bucketed from the score alone,
so a weak positive score still carries a bank reference with confidence
``none``.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from .logging_setup import get_logger
from .models import AccountBankMatch, ExtractedAccountInfo, KnownBank, MatchConfidence

_logger = get_logger("statement_ingest.bank_matching")

INSTITUTION_SCORE = 40
MASK_SCORE = 50
TYPE_SCORE = 10

HIGH_THRESHOLD = 50
MEDIUM_THRESHOLD = 30


def score_to_match_confidence(score: int) -> MatchConfidence:
    if score >= HIGH_THRESHOLD:
        return MatchConfidence.HIGH
    if score >= MEDIUM_THRESHOLD:
        return MatchConfidence.MEDIUM
    return MatchConfidence.NONE


def coerce_known_banks(known_banks: Iterable[KnownBank | Mapping[str, Any]]) -> list[KnownBank]:
    """Validate caller-supplied bank records (raises ``pydantic.ValidationError``)."""

    return [b if isinstance(b, KnownBank) else KnownBank.model_validate(b) for b in known_banks]


def score_bank(info: ExtractedAccountInfo, bank: KnownBank) -> int:
    score = 0
    bank_name = bank.institution_name.lower()

    # An unnamed bank would contain every extracted name; only balances can match it.
    if info.institution_name and bank_name:
        extracted = info.institution_name.lower()
        if extracted in bank_name or bank_name in extracted:
            score += INSTITUTION_SCORE

    if info.account_mask:
        if any(bal.mask == info.account_mask for bal in bank.balances):
            score += MASK_SCORE
        elif info.account_mask in bank_name:
            score += MASK_SCORE

    if info.account_type:
        if any(bal.account_type == info.account_type for bal in bank.balances):
            score += TYPE_SCORE
        elif info.account_type.replace("_", " ").lower() in bank_name:
            score += TYPE_SCORE

    return score


def match_bank(
    info: ExtractedAccountInfo,
    known_banks: Iterable[KnownBank | Mapping[str, Any]],
) -> AccountBankMatch:
    """Return the best known-bank suggestion for one extracted account."""

    best_bank: KnownBank | None = None
    best_score = 0
    for bank in coerce_known_banks(known_banks):
        score = score_bank(info, bank)
        if score > best_score:
            best_bank, best_score = bank, score

    return AccountBankMatch(
        account_info=info,
        confidence=score_to_match_confidence(best_score),
        score=best_score,
        matched_bank_id=best_bank.id if best_bank is not None else None,
    )


def match_banks(
    accounts: Sequence[ExtractedAccountInfo],
    known_banks: Iterable[KnownBank | Mapping[str, Any]],
) -> list[AccountBankMatch]:
    banks = coerce_known_banks(known_banks)
    matches = [match_bank(info, banks) for info in accounts]
    _logger.debug(
        "matched %d of %d accounts to known banks",
        sum(1 for m in matches if m.matched_bank_id is not None),
        len(matches),
    )
    return matches


__all__ = [
    "INSTITUTION_SCORE",
    "MASK_SCORE",
    "TYPE_SCORE",
    "score_to_match_confidence",
    "coerce_known_banks",
    "score_bank",
    "match_bank",
    "match_banks",
]
