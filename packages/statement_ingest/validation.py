"""Completeness and consistency checks for a confirmed column mapping.

Every rule is evaluated; failures accumulate so the reviewer can fix all of
them in one pass. The amount rule mirrors :func:`statement_ingest.amounts.parse_amount`:
a unified ``amount`` column, or both ``debitAmount`` and ``creditAmount``.
"""

from __future__ import annotations

from collections.abc import Iterable

from .logging_setup import get_logger
from .models import CanonicalField, ColumnMapping, MappingValidation

_logger = get_logger("statement_ingest.validation")

MISSING_DATE = "A date column is required (Transaction Date or Posted Date)"
MISSING_DESCRIPTION = "A description column is required"
DEBIT_WITHOUT_CREDIT = "When using Debit column, a Credit column is also required"
CREDIT_WITHOUT_DEBIT = "When using Credit column, a Debit column is also required"
MISSING_AMOUNT = (
    "An amount column is required: either a single Amount column "
    "or separate Debit and Credit columns"
)
AMOUNT_PRECEDENCE = (
    "Both Amount and Debit/Credit columns are mapped. The Amount column will take precedence."
)


def validate_mappings(mappings: Iterable[ColumnMapping]) -> MappingValidation:
    """Validate a set of column mappings; never raises for bad input."""

    items = list(mappings)
    mapped = {m.target_field for m in items if m.target_field is not None}

    errors: list[str] = []
    warnings: list[str] = []

    has_amount = CanonicalField.AMOUNT in mapped
    has_debit = CanonicalField.DEBIT_AMOUNT in mapped
    has_credit = CanonicalField.CREDIT_AMOUNT in mapped

    if not mapped & {CanonicalField.TRANSACTION_DATE, CanonicalField.POSTED_DATE}:
        errors.append(MISSING_DATE)
    if CanonicalField.DESCRIPTION not in mapped:
        errors.append(MISSING_DESCRIPTION)
    if not (has_amount or (has_debit and has_credit)):
        if has_debit:
            errors.append(DEBIT_WITHOUT_CREDIT)
        elif has_credit:
            errors.append(CREDIT_WITHOUT_DEBIT)
        else:
            errors.append(MISSING_AMOUNT)

    if has_amount and (has_debit or has_credit):
        warnings.append(AMOUNT_PRECEDENCE)

    # One error per duplicated field, in first-duplicate order.
    seen: set[CanonicalField] = set()
    reported: set[CanonicalField] = set()
    for m in items:
        target = m.target_field
        if target is None or target is CanonicalField.IGNORE:
            continue
        if target in seen and target not in reported:
            errors.append(f'Duplicate mapping: "{target.value}" is mapped to multiple columns')
            reported.add(target)
        seen.add(target)

    result = MappingValidation(valid=not errors, errors=tuple(errors), warnings=tuple(warnings))
    if not result.valid:
        _logger.warning("column mapping invalid: %s", "; ".join(result.errors))
    return result


__all__ = [
    "MISSING_DATE",
    "MISSING_DESCRIPTION",
    "DEBIT_WITHOUT_CREDIT",
    "CREDIT_WITHOUT_DEBIT",
    "MISSING_AMOUNT",
    "AMOUNT_PRECEDENCE",
    "validate_mappings",
]
