"""In-repo seed proposals for the editor form, previews and fixtures."""
from __future__ import annotations

from models import (
    ClientInfo,
    Premium,
    PrepayPromo,
    Promotions,
    ProposalData,
    RebatePromo,
    ScenarioA,
    ScenarioB,
    SurrenderPoint,
    WithdrawalPoint,
)

DEFAULT_PROPOSAL = ProposalData(
    client=ClientInfo(name="陈总 (Mr. Chen)", age=45),
    plan_name="跨境资产保全与合规传承计划",
    premium=Premium(total=500000, payment_type="整付"),
    scenario_a=ScenarioA(
        year10=SurrenderPoint(surrender=580000, death=1200000),
        year20=SurrenderPoint(surrender=950000, death=1200000),
        year30=SurrenderPoint(surrender=1600000, death=1800000),
    ),
    scenario_b=ScenarioB(
        annual_withdrawal=25000,
        year10=WithdrawalPoint(cumulative=250000, remaining=450000),
        year20=WithdrawalPoint(cumulative=500000, remaining=480000),
        year30=WithdrawalPoint(cumulative=750000, remaining=650000),
        year40=WithdrawalPoint(cumulative=1000000, remaining=900000),
    ),
    promo=Promotions(
        lump_sum=RebatePromo(enabled=True, percent=3.5),
        five_year=RebatePromo(enabled=False, percent=10),
        prepay=PrepayPromo(enabled=True, rate=4.2, deadline="2025-03-31"),
    ),
)

PROPOSALS: dict[str, ProposalData] = {
    "default": DEFAULT_PROPOSAL,
}


def get_proposal(proposal_id: str) -> ProposalData | None:
    return PROPOSALS.get(proposal_id)


def list_proposals() -> list[str]:
    return list(PROPOSALS.keys())
