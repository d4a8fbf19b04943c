from __future__ import annotations

import pytest
from pydantic import ValidationError

from models import ProposalData
from proposals import DEFAULT_PROPOSAL, get_proposal, list_proposals


def _camel_payload() -> dict:
    return {
        "client": {"name": "王小姐", "age": 38},
        "planName": "传承计划",
        "premium": {"total": 200000, "paymentType": "5年缴"},
        "scenarioA": {
            "year10": {"surrender": 210000, "death": 400000},
            "year20": {"surrender": 330000, "death": 450000},
            "year30": {"surrender": 520000, "death": 600000},
        },
        "scenarioB": {
            "annualWithdrawal": 10000,
            "year10": {"cumulative": 100000, "remaining": 150000},
            "year20": {"cumulative": 200000, "remaining": 160000},
            "year30": {"cumulative": 300000, "remaining": 190000},
            "year40": {"cumulative": 400000, "remaining": 220000},
        },
        "promo": {
            "lumpSum": {"enabled": False, "percent": 0},
            "fiveYear": {"enabled": True, "percent": 8},
            "prepay": {"enabled": True, "rate": 4.0, "deadline": None},
        },
    }


def test_proposal_accepts_camel_case_form_keys():
    p = ProposalData.model_validate(_camel_payload())
    assert p.plan_name == "传承计划"
    assert p.premium.payment_type == "5年缴"
    assert p.scenario_b.annual_withdrawal == 10000
    assert p.promo.five_year.enabled is True
    assert p.promo.prepay.deadline == ""


def test_proposal_accepts_snake_case_and_round_trips_camel_case():
    dumped = DEFAULT_PROPOSAL.model_dump(mode="json")
    assert "plan_name" in dumped
    assert ProposalData.model_validate(dumped) == DEFAULT_PROPOSAL

    camel = DEFAULT_PROPOSAL.model_dump(mode="json", by_alias=True)
    assert camel["planName"] == DEFAULT_PROPOSAL.plan_name
    assert camel["promo"]["lumpSum"]["percent"] == 3.5
    assert ProposalData.model_validate(camel) == DEFAULT_PROPOSAL


def test_proposal_is_immutable():
    with pytest.raises(ValidationError):
        DEFAULT_PROPOSAL.plan_name = "changed"


def test_missing_required_field_is_rejected():
    payload = _camel_payload()
    del payload["scenarioA"]
    with pytest.raises(ValidationError):
        ProposalData.model_validate(payload)


def test_promo_defaults_to_all_disabled():
    payload = _camel_payload()
    del payload["promo"]
    p = ProposalData.model_validate(payload)
    assert not p.promo.lump_sum.enabled
    assert not p.promo.five_year.enabled
    assert not p.promo.prepay.enabled


def test_client_age_is_kept():
    assert DEFAULT_PROPOSAL.client.age == 45
    assert ProposalData.model_validate(_camel_payload()).client.age == 38


def test_seed_registry():
    assert list_proposals() == ["default"]
    assert get_proposal("default") is DEFAULT_PROPOSAL
    assert get_proposal("missing") is None
