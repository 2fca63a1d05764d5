import pytest

from statement_ingest import scan, scan_file
from statement_ingest.account_info import find_account_mask


@pytest.mark.parametrize(
    ("text", "mask"),
    [
        ("Card ****1234", "1234"),
        ("Account ...5678", "5678"),
        ("xxxx9012", "9012"),
        ("XX3456 statement", "3456"),
        ("Visa ending in 7788", "7788"),
        ("Account # * 4321", "4321"),
    ],
)
def test_mask_notations(text, mask):
    assert scan(text).account_mask == mask


def test_first_mask_pattern_wins_over_later_ones():
    # Both the star notation and "ending in" appear; the star pattern is first.
    assert find_account_mask("ending in 1111 and ****2222") == "2222"


def test_institution_table_order_is_positional():
    assert scan("Citizens Bank checking").institution_name == "Citizens Bank"
    assert scan("CITI DOUBLE CASH").institution_name == "Citibank"
    # Chase precedes American Express in the table.
    assert scan("amex payment from chase").institution_name == "Chase"


def test_account_type_scan():
    assert scan("Mercury Checking ****1234").account_type == "checking"
    assert scan("High yield savings").account_type == "savings"
    assert scan("Sapphire Credit Card").account_type == "credit_card"
    assert scan("Money Market account").account_type == "money_market"


def test_generic_account_word_is_not_a_type():
    assert scan("Business Account").account_type is None


def test_scans_are_independent_and_never_raise():
    info = scan("statement for ****9999")
    assert info.account_mask == "9999"
    assert info.institution_name is None
    assert info.account_type is None
    assert scan("").is_empty


def test_scan_file_prefers_lines_for_mask():
    lines = ["Account Summary", "Account Number: ****1234"]
    info = scan_file(lines, "export_xxxx9999.csv")
    assert info.account_mask == "1234"


def test_scan_file_falls_back_to_filename_for_mask():
    info = scan_file(["Date,Description,Amount"], "chase_checking_ending in 4455.csv")
    assert info.account_mask == "4455"
    assert info.institution_name == "Chase"
    assert info.account_type == "checking"


def test_scan_file_prefers_lines_even_when_filename_has_earlier_pattern():
    info = scan_file(["Statement for account ending in 1111"], "export_****2222.csv")
    assert info.account_mask == "1111"


def test_scan_file_only_reads_leading_lines():
    lines = ["header"] * 10 + ["Wells Fargo ****1234"]
    info = scan_file(lines, "export.csv")
    assert info.account_mask is None
    assert info.institution_name is None


def test_scan_file_combines_lines_and_filename_for_institution_and_type():
    info = scan_file(["Savings statement"], "capitalone_export.csv")
    assert info.institution_name == "Capital One"
    assert info.account_type == "savings"
