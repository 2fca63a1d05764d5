import pytest
from pydantic import ValidationError

from statement_ingest import ExtractedAccountInfo, KnownBank, MatchConfidence, match_bank, match_banks
from statement_ingest.bank_matching import score_bank


def _info(**kw) -> ExtractedAccountInfo:
    return ExtractedAccountInfo(raw_label=kw.pop("raw_label", "label"), row_indices=(0,), **kw)


def test_institution_plus_mask_via_name_fallback():
    known = [{"id": "b1", "institution_name": "Chase Checking ****1234"}]
    result = match_bank(_info(institution_name="Chase", account_mask="1234"), known)

    assert result.score == 90
    assert result.confidence is MatchConfidence.HIGH
    assert result.matched_bank_id == "b1"


def test_registered_balance_mask_and_type():
    bank = KnownBank.model_validate(
        {
            "id": "b2",
            "institutionName": "Mercury",
            "balances": [
                {"mask": "5555", "type": "savings"},
                {"account_mask": "1234", "account_type": "checking"},
            ],
        }
    )
    info = _info(institution_name="Mercury", account_mask="1234", account_type="checking")
    assert score_bank(info, bank) == 100


def test_each_criterion_counts_once_per_bank():
    bank = KnownBank(
        id="b3",
        institution_name="Chase 1234",
        balances=[{"mask": "1234"}, {"mask": "1234"}],
    )
    assert score_bank(_info(account_mask="1234"), bank) == 50


def test_type_falls_back_to_name_with_spaces():
    bank = KnownBank(id="b4", institution_name="Amex Credit Card")
    assert score_bank(_info(account_type="credit_card"), bank) == 10


def test_institution_containment_is_case_insensitive_both_ways():
    bank = KnownBank(id="b5", institution_name="CHASE")
    assert score_bank(_info(institution_name="Chase Bank"), bank) == 40


def test_no_match_attaches_nothing():
    result = match_bank(_info(institution_name="Discover"), [{"id": "b1", "institution_name": "Chase"}])
    assert result.matched_bank_id is None
    assert result.score == 0
    assert result.confidence is MatchConfidence.NONE


def test_low_positive_score_keeps_bank_with_no_confidence():
    result = match_bank(
        _info(account_type="checking"), [{"id": "b1", "institution_name": "Business Checking"}]
    )
    assert result.matched_bank_id == "b1"
    assert result.score == 10
    assert result.confidence is MatchConfidence.NONE


def test_institution_alone_is_medium():
    result = match_bank(_info(institution_name="Chase"), [{"id": "b1", "institution_name": "Chase"}])
    assert result.confidence is MatchConfidence.MEDIUM


def test_highest_score_wins_and_ties_keep_first():
    known = [
        {"id": "a", "institution_name": "Chase"},
        {"id": "b", "institution_name": "Chase"},
        {"id": "c", "institution_name": "Chase", "balances": [{"mask": "1234"}]},
    ]
    assert match_bank(_info(institution_name="Chase"), known).matched_bank_id == "a"
    assert (
        match_bank(_info(institution_name="Chase", account_mask="1234"), known).matched_bank_id
        == "c"
    )


@pytest.mark.parametrize(
    "extra",
    [
        {"institution_name": "Chase"},
        {"account_mask": "1234"},
        {"account_type": "checking"},
    ],
)
def test_adding_a_criterion_never_lowers_score(extra):
    bank = KnownBank(
        id="b1",
        institution_name="Chase Checking ****1234",
        balances=[{"mask": "1234", "type": "checking"}],
    )
    others = [
        {"institution_name": "Chase"},
        {"account_mask": "1234"},
        {"account_type": "checking"},
    ]
    for other in others:
        if other.keys() == extra.keys():
            continue
        without = score_bank(_info(**other), bank)
        with_extra = score_bank(_info(**other, **extra), bank)
        assert with_extra >= without
        assert with_extra > without


def test_match_banks_aligns_with_accounts():
    accounts = [_info(raw_label="one", institution_name="Chase"), _info(raw_label="two")]
    matches = match_banks(accounts, [{"id": "b1", "institution_name": "Chase"}])
    assert [m.account_info.raw_label for m in matches] == ["one", "two"]
    assert [m.matched_bank_id for m in matches] == ["b1", None]


def test_malformed_known_bank_is_rejected():
    with pytest.raises(ValidationError):
        match_bank(_info(), [{"institution_name": "No id"}])


@pytest.mark.parametrize("known", [[{"id": "blank"}], [{"id": "blank", "institution_name": "   "}]])
def test_unnamed_bank_never_matches_on_institution(known):
    result = match_bank(_info(institution_name="Chase"), known)
    assert result.score == 0
    assert result.matched_bank_id is None
    assert result.confidence is MatchConfidence.NONE


def test_unnamed_bank_does_not_outrank_named_bank():
    known = [
        {"id": "blank", "balances": [{"type": "checking"}]},
        {"id": "chase", "institution_name": "Chase"},
    ]
    result = match_bank(_info(institution_name="Chase", account_type="checking"), known)
    assert result.matched_bank_id == "chase"
    assert result.score == 40


def test_unnamed_bank_still_matches_by_balance_mask():
    known = [{"id": "blank", "balances": [{"mask": "1234"}]}]
    result = match_bank(_info(institution_name="Chase", account_mask="1234"), known)
    assert result.matched_bank_id == "blank"
    assert result.score == 50
