"""Data models and type aliases for ``statement_ingest``.

Rows arrive from the upstream file reader as plain mappings of header name to
raw cell text; nothing here prescribes a column layout. The models below are
the structured outputs handed to review and import collaborators:

- :class:`ColumnMapping` and :class:`MappingValidation` for the mapping
  review screen.
- :class:`ExtractedAccountInfo` and :class:`AccountBankMatch` for the account
  picker.
- :class:`TransferPairCandidate` for transfer suppression during import.
- :class:`StagedLine` / :class:`StagedStatement` for row-level review.

Internal records are frozen ``dataclass`` instances. Known-bank records come
from the persistence side in arbitrary mapping shapes, so they are validated
with Pydantic at the boundary.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

# ---------------------------------------------------------------------------
# Raw input shapes
# ---------------------------------------------------------------------------

type RawRow = Mapping[str, str | None]
"""A single parsed row: header name -> raw cell text (``None`` when absent)."""

type RawRows = Sequence[RawRow]
"""Rows in original file order. Row indices in every result refer to this order."""


# ---------------------------------------------------------------------------
# Canonical field registry
# ---------------------------------------------------------------------------


class CanonicalField(StrEnum):
    """Logical transaction attribute a source column can be mapped onto.

    Declaration order is the registry order used for deterministic
    tie-breaking when scoring headers.
    """

    TRANSACTION_DATE = "transactionDate"
    POSTED_DATE = "postedDate"
    DESCRIPTION = "description"
    AMOUNT = "amount"
    DEBIT_AMOUNT = "debitAmount"
    CREDIT_AMOUNT = "creditAmount"
    BALANCE = "balance"
    CHECK_NUMBER = "checkNumber"
    REFERENCE_NUMBER = "referenceNumber"
    CATEGORY = "category"
    SOURCE_ACCOUNT = "sourceAccount"
    IGNORE = "ignore"


class ConfidenceLevel(StrEnum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    NONE = "none"


class MatchConfidence(StrEnum):
    HIGH = "high"
    MEDIUM = "medium"
    NONE = "none"


@dataclass(frozen=True, slots=True)
class FieldDefinition:
    """Registry entry: the field, its display label and structural requirement."""

    field: CanonicalField
    label: str
    required: bool = False


CANONICAL_FIELDS: tuple[FieldDefinition, ...] = (
    FieldDefinition(CanonicalField.TRANSACTION_DATE, "Transaction Date", required=True),
    FieldDefinition(CanonicalField.POSTED_DATE, "Posted Date"),
    FieldDefinition(CanonicalField.DESCRIPTION, "Description", required=True),
    FieldDefinition(CanonicalField.AMOUNT, "Amount (signed)"),
    FieldDefinition(CanonicalField.DEBIT_AMOUNT, "Debit / Withdrawal"),
    FieldDefinition(CanonicalField.CREDIT_AMOUNT, "Credit / Deposit"),
    FieldDefinition(CanonicalField.BALANCE, "Balance"),
    FieldDefinition(CanonicalField.CHECK_NUMBER, "Check Number"),
    FieldDefinition(CanonicalField.REFERENCE_NUMBER, "Reference Number"),
    FieldDefinition(CanonicalField.CATEGORY, "Category"),
    FieldDefinition(CanonicalField.SOURCE_ACCOUNT, "Source Account"),
    FieldDefinition(CanonicalField.IGNORE, "(Ignore this column)"),
)


def field_label(target: CanonicalField) -> str:
    for definition in CANONICAL_FIELDS:
        if definition.field is target:
            return definition.label
    return target.value


@dataclass(frozen=True, slots=True)
class KeywordPattern:
    """Header keywords for one canonical field and the field's score weight.

    ``keywords`` keeps declaration order; matching only asks whether *some*
    keyword satisfies a rule, so order never changes a score.
    """

    field: CanonicalField
    keywords: tuple[str, ...]
    weight: int


# ---------------------------------------------------------------------------
# Column mapping
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ColumnMapping:
    """Proposed (or human-confirmed) target for one source column."""

    source_column: str
    target_field: CanonicalField | None
    confidence: ConfidenceLevel = ConfidenceLevel.NONE

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> ColumnMapping:
        """Build from a plain mapping as returned by a review screen.

        Accepts ``sourceColumn``/``source_column`` and
        ``targetField``/``target_field`` keys. An unknown target field string
        raises ``ValueError``.
        """

        source = data.get("source_column", data.get("sourceColumn"))
        if not isinstance(source, str):
            raise ValueError("column mapping requires a string source column")
        raw_target = data.get("target_field", data.get("targetField"))
        target = CanonicalField(raw_target) if raw_target not in (None, "") else None
        raw_conf = data.get("confidence") or ConfidenceLevel.NONE
        return cls(source, target, ConfidenceLevel(raw_conf))

    def to_dict(self) -> dict[str, str | None]:
        return {
            "sourceColumn": self.source_column,
            "targetField": self.target_field.value if self.target_field else None,
            "confidence": self.confidence.value,
        }


@dataclass(frozen=True, slots=True)
class MappingValidation:
    valid: bool
    errors: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class MappingLookups:
    """First source column mapped to each field the row stager reads."""

    date_column: str | None = None
    posted_date_column: str | None = None
    description_column: str | None = None
    amount_column: str | None = None
    debit_column: str | None = None
    credit_column: str | None = None
    balance_column: str | None = None
    source_account_column: str | None = None


# ---------------------------------------------------------------------------
# Account identity
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class DetectedAccountInfo:
    """Result of one account-identity scan. Absent parts stay ``None``."""

    account_mask: str | None = None
    institution_name: str | None = None
    account_type: str | None = None

    @property
    def is_empty(self) -> bool:
        return not (self.account_mask or self.institution_name or self.account_type)


@dataclass(frozen=True, slots=True)
class ExtractedAccountInfo:
    """One distinct source-account label and the rows that carry it.

    Transient, built per import batch.
    """

    raw_label: str
    row_indices: tuple[int, ...]
    account_mask: str | None = None
    account_type: str | None = None
    institution_name: str | None = None


class BankBalance(BaseModel):
    """A registered account under a known bank (mask and type are optional)."""

    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True, populate_by_name=True)

    mask: str | None = Field(
        default=None, validation_alias=AliasChoices("mask", "account_mask")
    )
    account_type: str | None = Field(
        default=None, validation_alias=AliasChoices("account_type", "type")
    )

    @field_validator("mask", "account_type")
    @classmethod
    def _blank_to_none(cls, v: str | None) -> str | None:
        if v is None:
            return None
        return v if v else None


class KnownBank(BaseModel):
    """A bank/account already known to the ledger, as loaded by the caller."""

    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True, populate_by_name=True)

    id: str
    institution_name: str = Field(
        default="", validation_alias=AliasChoices("institution_name", "institutionName")
    )
    balances: list[BankBalance] = Field(default_factory=list)


@dataclass(frozen=True, slots=True)
class AccountBankMatch:
    account_info: ExtractedAccountInfo
    confidence: MatchConfidence
    score: int
    matched_bank_id: str | None = None


# ---------------------------------------------------------------------------
# Transfers
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class TransferPairCandidate:
    """Two rows of one batch that look like the legs of an internal transfer.

    ``amount`` is the magnitude of the debit leg (always >= 0).
    """

    debit_row_index: int
    credit_row_index: int
    amount: float
    date: str
    debit_account: str
    credit_account: str


# ---------------------------------------------------------------------------
# Staged statement lines
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class StagedLine:
    """A row normalized for review. Unparsable values stay ``None`` and are flagged."""

    line_sequence: int
    transaction_date: str | None
    description: str | None
    amount: float | None
    transaction_type: str
    balance: float | None = None
    source_account: str | None = None
    validation_errors: Mapping[str, str] = field(default_factory=dict)

    @property
    def has_validation_error(self) -> bool:
        return bool(self.validation_errors)


@dataclass(frozen=True, slots=True)
class StagedStatement:
    lines: tuple[StagedLine, ...]
    total_debits: float
    total_credits: float

    @property
    def error_count(self) -> int:
        return sum(1 for line in self.lines if line.has_validation_error)

    @property
    def has_errors(self) -> bool:
        return self.error_count > 0


__all__ = [
    "RawRow",
    "RawRows",
    "CanonicalField",
    "ConfidenceLevel",
    "MatchConfidence",
    "FieldDefinition",
    "CANONICAL_FIELDS",
    "field_label",
    "KeywordPattern",
    "ColumnMapping",
    "MappingValidation",
    "MappingLookups",
    "DetectedAccountInfo",
    "ExtractedAccountInfo",
    "BankBalance",
    "KnownBank",
    "AccountBankMatch",
    "TransferPairCandidate",
    "StagedLine",
    "StagedStatement",
]
