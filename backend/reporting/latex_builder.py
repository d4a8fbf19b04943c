"""
Build the typesetting (XeLaTeX + xeCJK) source for a proposal.

The output is plain text for an external engine to compile. Every substituted
value is escaped, so any record yields syntactically valid source. The only
non-deterministic content is the \\today directive, which the engine resolves.
"""
from __future__ import annotations

import re
from pathlib import Path
from typing import Any

from models import ProposalData

from .locale_text import DEFAULT_SCRIPT, check_script, text
from .report_builder import fill_template, get_report_data_cached

_TEMPLATE_DIR = Path(__file__).resolve().parent / "templates"
_PROPOSAL_TEX = (_TEMPLATE_DIR / "proposal.tex").read_text(encoding="utf-8")
# A blank line inside a command argument is a paragraph break, which TeX rejects there.
_LINE_BREAK_RUN = re.compile(r"\s*[\r\n]\s*")

_LATEX_SPECIAL = {
    "\\": r"\textbackslash{}",
    "&": r"\&",
    "%": r"\%",
    "$": r"\$",
    "#": r"\#",
    "_": r"\_",
    "{": r"\{",
    "}": r"\}",
    "~": r"\textasciitilde{}",
    "^": r"\textasciicircum{}",
}


def latex_escape(value: Any) -> str:
    """Escape TeX specials and fold line breaks (with surrounding whitespace) into one space."""
    flat = _LINE_BREAK_RUN.sub(" ", str(value))
    return "".join(_LATEX_SPECIAL.get(ch, ch) for ch in flat)


def _t(slot: str, script: str) -> str:
    return latex_escape(text(slot, script))


def _row(cells: list[str]) -> str:
    return " & ".join(latex_escape(c) for c in cells) + r" \\"


def _header_row(slots: tuple[str, ...], script: str) -> str:
    return " & ".join(rf"\textbf{{{_t(s, script)}}}" for s in slots)


def _risk_items(script: str) -> str:
    items = [
        rf"\textbf{{{_t('risk_crs_label', script)}:}} {_t('risk_crs_text', script)}",
        rf"\textbf{{{_t('risk_late_label', script)}:}} {_t('risk_late_before', script)}"
        rf"\textbf{{{_t('risk_late_emphasis', script)}}}{_t('risk_late_after', script)}",
        rf"\textbf{{{_t('risk_identity_label', script)}:}} {_t('risk_identity_text', script)}",
    ]
    return "\n".join(f"    \\item {item}" for item in items)


def _node(top_slot: str, bottom_slot: str, script: str) -> str:
    return rf"{_t(top_slot, script)}\\{_t(bottom_slot, script)}"


def build_proposal_latex(
    proposal: ProposalData,
    script: str = DEFAULT_SCRIPT,
    report_data: dict[str, Any] | None = None,
) -> str:
    """Produce the complete .tex source for a proposal in the given script."""
    check_script(script)
    if report_data is None:
        report_data = get_report_data_cached(proposal, script)

    name = latex_escape(report_data["client_name"])
    salutation = latex_escape(text("salutation", script, name=report_data["client_name"]))
    intro = latex_escape(
        text("intro_context", script) + text("intro_plan", script, plan=report_data["plan_name"])
    )
    prepay = latex_escape(report_data["prepay"])
    if report_data["prepay_deadline_note"] is not None:
        prepay = f"{prepay} {latex_escape(report_data['prepay_deadline_note'])}"

    year_cols = ("col_policy_year",)
    return fill_template(_PROPOSAL_TEX, {
        "CJK_FONT": text("cjk_font", script),
        "TITLE": _t("title", script),
        "OVERVIEW_HEADING": _t("overview_heading", script),
        "CLIENT_NAME": name,
        "SALUTATION": salutation,
        "INTRO": intro,
        "PREMIUM_HEADING": _t("premium_heading", script),
        "PREMIUM_TOTAL_LABEL": _t("premium_total", script),
        "PREMIUM_TOTAL": latex_escape(report_data["premium_total"]),
        "PAYMENT_TYPE_LABEL": _t("payment_type", script),
        "PAYMENT_TYPE": latex_escape(report_data["payment_type"]),
        "RISK_HEADING": _t("risk_heading", script),
        "RISK_ITEMS": _risk_items(script),
        "HUB_TOP": _t("hub_top", script),
        "HUB_BOTTOM": _t("hub_bottom", script),
        "NODE_ISOLATION": _node("node_isolation_top", "node_isolation_bottom", script),
        "NODE_IDENTITY": _node("node_identity_top", "node_identity_bottom", script),
        "NODE_LIQUIDITY": _node("node_liquidity_top", "node_liquidity_bottom", script),
        "SCENARIO_A_HEADING": _t("scenario_a_heading", script),
        "SCENARIO_A_INTRO": _t("scenario_a_intro", script),
        "SCENARIO_A_HEADER_ROW": _header_row(
            year_cols + ("col_surrender", "col_death", "col_return_rate"), script
        ),
        "SCENARIO_A_ROWS": "\n".join(
            _row([r["year_label"], r["surrender"], r["death"], r["return_rate"]])
            for r in report_data["scenario_a_rows"]
        ),
        "SCENARIO_A_CAPTION": _t("scenario_a_caption", script),
        "SCENARIO_B_HEADING": _t("scenario_b_heading", script),
        "SCENARIO_B_INTRO_BEFORE": _t("scenario_b_intro_before", script),
        "ANNUAL_WITHDRAWAL": latex_escape(report_data["annual_withdrawal"]),
        "SCENARIO_B_INTRO_AFTER": _t("scenario_b_intro_after", script),
        "SCENARIO_B_HEADER_ROW": _header_row(
            year_cols + ("col_cumulative", "col_remaining", "col_return_rate"), script
        ),
        "SCENARIO_B_ROWS": "\n".join(
            _row([r["year_label"], r["cumulative"], r["remaining"], r["return_rate"]])
            for r in report_data["scenario_b_rows"]
        ),
        "SCENARIO_B_CAPTION": _t("scenario_b_caption", script),
        "PROMO_HEADING": _t("promo_heading", script),
        "REBATE_LABEL": _t("rebate_label", script),
        "REBATE": latex_escape(report_data["rebate"]),
        "PREPAY_LABEL": _t("prepay_label", script),
        "PREPAY": prepay,
        "DISCLAIMER_LABEL": _t("disclaimer_label", script),
        "DISCLAIMER": _t("disclaimer", script),
    })
