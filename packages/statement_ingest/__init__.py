"""Public interface for the ``statement_ingest`` package.

Normalization core for human-exported bank and point-of-sale transaction
files that have already been parsed into headers and row mappings. This
module only re-exports the stable import surface; there is no runtime logic
here.
"""

from .account_info import scan, scan_file
from .accounts import extract_unique_accounts, suggest_account_name
from .amounts import parse_amount, parse_single
from .api import ImportPreview, prepare_import
from .bank_matching import match_bank, match_banks
from .column_mapping import FIELD_PATTERNS, suggest_column_mappings
from .models import (
    CANONICAL_FIELDS,
    AccountBankMatch,
    BankBalance,
    CanonicalField,
    ColumnMapping,
    ConfidenceLevel,
    DetectedAccountInfo,
    ExtractedAccountInfo,
    KnownBank,
    MappingValidation,
    MatchConfidence,
    StagedLine,
    StagedStatement,
    TransferPairCandidate,
)
from .statement import parse_date, stage_rows
from .transfers import detect_transfer_pairs
from .validation import validate_mappings

__all__ = [
    # API
    "parse_single",
    "parse_amount",
    "scan",
    "scan_file",
    "suggest_column_mappings",
    "validate_mappings",
    "extract_unique_accounts",
    "suggest_account_name",
    "match_bank",
    "match_banks",
    "detect_transfer_pairs",
    "parse_date",
    "stage_rows",
    "prepare_import",
    # Models / types
    "CanonicalField",
    "CANONICAL_FIELDS",
    "FIELD_PATTERNS",
    "ConfidenceLevel",
    "MatchConfidence",
    "ColumnMapping",
    "MappingValidation",
    "DetectedAccountInfo",
    "ExtractedAccountInfo",
    "BankBalance",
    "KnownBank",
    "AccountBankMatch",
    "TransferPairCandidate",
    "StagedLine",
    "StagedStatement",
    "ImportPreview",
]
