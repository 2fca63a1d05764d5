import pytest

from statement_ingest import (
    FIELD_PATTERNS,
    CanonicalField,
    ConfidenceLevel,
    suggest_column_mappings,
    validate_mappings,
)
from statement_ingest.column_mapping import score_header, score_to_confidence


def _target_of(mappings, column):
    return next(m.target_field for m in mappings if m.source_column == column)


def _column_for(mappings, field):
    return next((m.source_column for m in mappings if m.target_field is field), None)


def _pattern(field):
    return next(p for p in FIELD_PATTERNS if p.field is field)


def test_single_amount_layout_maps_and_validates():
    headers = ["Transaction Date", "Description", "Amount"]
    mappings = suggest_column_mappings(headers, [])

    assert [m.target_field for m in mappings] == [
        CanonicalField.TRANSACTION_DATE,
        CanonicalField.DESCRIPTION,
        CanonicalField.AMOUNT,
    ]
    assert all(m.confidence is not ConfidenceLevel.NONE for m in mappings)
    assert validate_mappings(mappings).valid


def test_split_debit_credit_layout_validates_without_amount():
    headers = ["Date", "Details", "Withdrawal", "Deposit"]
    mappings = suggest_column_mappings(headers, [])

    assert _target_of(mappings, "Withdrawal") is CanonicalField.DEBIT_AMOUNT
    assert _target_of(mappings, "Deposit") is CanonicalField.CREDIT_AMOUNT
    assert _column_for(mappings, CanonicalField.AMOUNT) is None
    result = validate_mappings(mappings)
    assert result.valid
    assert result.errors == ()


def test_chase_checking_headers():
    headers = ["Details", "Posting Date", "Description", "Amount", "Type", "Balance", "Check or Slip #"]
    mappings = suggest_column_mappings(headers, [])

    # Posting Date wins postedDate, then is promoted because no transaction date exists.
    assert _column_for(mappings, CanonicalField.TRANSACTION_DATE) == "Posting Date"
    assert _column_for(mappings, CanonicalField.POSTED_DATE) is None
    # "Details" claims description first; the later "Description" has nothing left.
    assert _column_for(mappings, CanonicalField.DESCRIPTION) == "Details"
    assert _target_of(mappings, "Description") is None
    assert _column_for(mappings, CanonicalField.AMOUNT) == "Amount"
    assert _column_for(mappings, CanonicalField.CATEGORY) == "Type"
    assert _column_for(mappings, CanonicalField.BALANCE) == "Balance"
    assert _column_for(mappings, CanonicalField.CHECK_NUMBER) == "Check or Slip #"


def test_both_dates_present_keeps_both():
    mappings = suggest_column_mappings(["Transaction Date", "Posted Date", "Description", "Amount"])
    assert _column_for(mappings, CanonicalField.TRANSACTION_DATE) == "Transaction Date"
    assert _column_for(mappings, CanonicalField.POSTED_DATE) == "Posted Date"


def test_posted_date_alone_is_promoted():
    mappings = suggest_column_mappings(["Posted Date", "Memo", "Amount"])
    assert _column_for(mappings, CanonicalField.TRANSACTION_DATE) == "Posted Date"
    assert _column_for(mappings, CanonicalField.POSTED_DATE) is None


def test_unknown_header_is_left_unmapped():
    mappings = suggest_column_mappings(["Date", "Description", "Amount", "SomeRandomColumn"])
    unmapped = mappings[-1]
    assert unmapped.source_column == "SomeRandomColumn"
    assert unmapped.target_field is None
    assert unmapped.confidence is ConfidenceLevel.NONE


def test_field_is_claimed_by_earliest_header():
    mappings = suggest_column_mappings(["Date", "Trans Date"])
    assert mappings[0].target_field is CanonicalField.TRANSACTION_DATE
    assert mappings[1].target_field is not CanonicalField.TRANSACTION_DATE


def test_source_account_column_is_detected():
    mappings = suggest_column_mappings(["Date", "Account", "Description", "Amount"])
    assert _target_of(mappings, "Account") is CanonicalField.SOURCE_ACCOUNT


def test_tie_breaks_by_registry_order():
    # "Account Balance" scores the same contains-match for balance and
    # sourceAccount; balance comes first in the registry.
    mappings = suggest_column_mappings(["Account Balance"])
    assert mappings[0].target_field is CanonicalField.BALANCE


def test_suggestions_are_deterministic():
    headers = ["Date", "Account", "Memo", "Debit", "Credit", "Ref #", "Category"]
    assert suggest_column_mappings(headers) == suggest_column_mappings(headers)


def test_score_rules():
    amount = _pattern(CanonicalField.AMOUNT)
    assert score_header("  AMOUNT ", amount) == 80
    assert score_header("Amount (USD)", amount) == 56
    debit = _pattern(CanonicalField.DEBIT_AMOUNT)
    # "money out" is matched word by word.
    assert score_header("out of pocket money", debit) == 45
    assert score_header("Payee", amount) == 0


@pytest.mark.parametrize(
    ("score", "level"),
    [
        (100, ConfidenceLevel.HIGH),
        (70, ConfidenceLevel.HIGH),
        (69, ConfidenceLevel.MEDIUM),
        (40, ConfidenceLevel.MEDIUM),
        (39, ConfidenceLevel.LOW),
        (20, ConfidenceLevel.LOW),
        (19, ConfidenceLevel.NONE),
        (0, ConfidenceLevel.NONE),
    ],
)
def test_confidence_buckets(score, level):
    assert score_to_confidence(score) is level
