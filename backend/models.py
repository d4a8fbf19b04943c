from __future__ import annotations

from typing import Literal, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


Script = Literal["zh-Hans", "zh-Hant"]


class _Record(BaseModel):
    """Immutable input snapshot; camelCase form keys and snake_case both accepted."""
    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")


class ClientInfo(_Record):
    name: str
    # Accepted and round-tripped for form compatibility; nothing downstream reads it.
    age: int = 0


class Premium(_Record):
    total: float
    payment_type: str = Field(
        default="",
        validation_alias=AliasChoices("payment_type", "paymentType"),
        serialization_alias="paymentType",
    )


class SurrenderPoint(_Record):
    """Scenario A time-point: cash (surrender) value and death benefit."""
    surrender: float
    death: float


class WithdrawalPoint(_Record):
    """Scenario B time-point: withdrawals taken so far and value left in the policy."""
    cumulative: float
    remaining: float


class ScenarioA(_Record):
    year10: SurrenderPoint
    year20: SurrenderPoint
    year30: SurrenderPoint

    def points(self) -> list[tuple[int, SurrenderPoint]]:
        return [(10, self.year10), (20, self.year20), (30, self.year30)]


class ScenarioB(_Record):
    annual_withdrawal: float = Field(
        validation_alias=AliasChoices("annual_withdrawal", "annualWithdrawal"),
        serialization_alias="annualWithdrawal",
    )
    year10: WithdrawalPoint
    year20: WithdrawalPoint
    year30: WithdrawalPoint
    year40: WithdrawalPoint

    def points(self) -> list[tuple[int, WithdrawalPoint]]:
        return [(10, self.year10), (20, self.year20), (30, self.year30), (40, self.year40)]


class RebatePromo(_Record):
    enabled: bool = False
    percent: float = 0.0


class PrepayPromo(_Record):
    enabled: bool = False
    rate: float = 0.0
    deadline: str = ""

    @field_validator("deadline", mode="before")
    @classmethod
    def _normalize_deadline(cls, v: Optional[str]) -> str:
        if v is None:
            return ""
        return str(v)


class Promotions(_Record):
    lump_sum: RebatePromo = Field(
        default_factory=RebatePromo,
        validation_alias=AliasChoices("lump_sum", "lumpSum"),
        serialization_alias="lumpSum",
    )
    five_year: RebatePromo = Field(
        default_factory=RebatePromo,
        validation_alias=AliasChoices("five_year", "fiveYear"),
        serialization_alias="fiveYear",
    )
    prepay: PrepayPromo = Field(default_factory=PrepayPromo)


class ProposalData(_Record):
    """
    One proposal's worth of client, plan, projection and promotion parameters.

    Monetary amounts are non-negative by convention; nothing here enforces it.
    premium.total may be zero, in which case every derived return rate is 0%.
    """

    client: ClientInfo
    plan_name: str = Field(
        validation_alias=AliasChoices("plan_name", "planName"),
        serialization_alias="planName",
    )
    premium: Premium
    scenario_a: ScenarioA = Field(
        validation_alias=AliasChoices("scenario_a", "scenarioA"),
        serialization_alias="scenarioA",
    )
    scenario_b: ScenarioB = Field(
        validation_alias=AliasChoices("scenario_b", "scenarioB"),
        serialization_alias="scenarioB",
    )
    promo: Promotions = Field(default_factory=Promotions)
