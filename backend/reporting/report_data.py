"""
Build the display-ready values for one proposal document.

Everything a template shows that is not a verbatim field echo comes from here:
formatted amounts, return rates over premium, promotion labels and the export
filename. The builders are pure and total; a bad field degrades to fallback
text instead of failing the render.
"""
from __future__ import annotations

from typing import Any

from models import Promotions, ProposalData

from .format_utils import (
    NOT_APPLICABLE,
    compute_return_rate,
    format_money,
    format_plain_number,
    format_short_date,
    sanitize_filename_component,
)
from .locale_text import DEFAULT_SCRIPT, check_script, text

FILENAME_SUFFIX = "Offshore_Asset_Allocation"


def build_rebate_label(promo: Promotions, script: str = DEFAULT_SCRIPT) -> str:
    """Enabled premium rebates, lump sum before five-year, joined by ", "; N/A when none."""
    parts = []
    if promo.lump_sum.enabled:
        parts.append(f"{text('rebate_lump_sum', script)} {format_plain_number(promo.lump_sum.percent)}%")
    if promo.five_year.enabled:
        parts.append(f"{text('rebate_five_year', script)} {format_plain_number(promo.five_year.percent)}%")
    return ", ".join(parts) if parts else NOT_APPLICABLE


def build_prepay_label(promo: Promotions) -> str:
    if not promo.prepay.enabled:
        return NOT_APPLICABLE
    return f"{format_plain_number(promo.prepay.rate)}%"


def build_prepay_deadline_note(promo: Promotions, script: str = DEFAULT_SCRIPT) -> str | None:
    """Parenthesized "until <date>" fragment, or None when the fragment should be omitted."""
    if not promo.prepay.enabled or not promo.prepay.deadline:
        return None
    short = format_short_date(
        promo.prepay.deadline,
        month_unit=text("month_unit", script),
        day_unit=text("day_unit", script),
    )
    return text("deadline_note", script, date=short)


def proposal_filename(proposal: ProposalData, extension: str = "pdf") -> str:
    return f"{sanitize_filename_component(proposal.client.name)}_{FILENAME_SUFFIX}.{extension}"


def build_report_data(proposal: ProposalData, script: str = DEFAULT_SCRIPT) -> dict[str, Any]:
    """
    Project a proposal into the flat set of strings both renderers substitute.

    Scenario A rates are surrender value over premium; scenario B rates are
    cumulative withdrawals plus remaining value over premium.
    """
    check_script(script)
    total = proposal.premium.total

    scenario_a_rows = [
        {
            "year_label": text("year_label", script, year=str(year)),
            "surrender": format_money(point.surrender),
            "death": format_money(point.death),
            "return_rate": compute_return_rate(point.surrender, total),
        }
        for year, point in proposal.scenario_a.points()
    ]
    scenario_b_rows = [
        {
            "year_label": text("year_label", script, year=str(year)),
            "cumulative": format_money(point.cumulative),
            "remaining": format_money(point.remaining),
            "return_rate": compute_return_rate(point.cumulative + point.remaining, total),
        }
        for year, point in proposal.scenario_b.points()
    ]

    return {
        "script": script,
        "client_name": proposal.client.name,
        "plan_name": proposal.plan_name,
        "payment_type": proposal.premium.payment_type,
        "premium_total": format_money(total),
        "annual_withdrawal": format_money(proposal.scenario_b.annual_withdrawal),
        "scenario_a_rows": scenario_a_rows,
        "scenario_b_rows": scenario_b_rows,
        "rebate": build_rebate_label(proposal.promo, script),
        "prepay": build_prepay_label(proposal.promo),
        "prepay_deadline_note": build_prepay_deadline_note(proposal.promo, script),
        "filename": proposal_filename(proposal),
    }
