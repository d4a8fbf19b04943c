"""Tests for the XeLaTeX source output."""
from __future__ import annotations

import re

import pytest

from models import ClientInfo, Premium
from proposals import DEFAULT_PROPOSAL
from reporting.latex_builder import build_proposal_latex, latex_escape


def _unescaped_brace_balance(source: str) -> int:
    stripped = source.replace(r"\{", "").replace(r"\}", "")
    return stripped.count("{") - stripped.count("}")


def test_latex_document_skeleton():
    tex = build_proposal_latex(DEFAULT_PROPOSAL, "zh-Hans")
    assert tex.startswith(r"\documentclass[a4paper,12pt]{article}")
    assert r"\usepackage{xeCJK}" in tex
    assert r"\setCJKmainfont{Noto Sans CJK SC}" in tex
    assert r"\date{\today}" in tex
    assert tex.rstrip().endswith(r"\end{document}")
    assert re.search(r"__[A-Z][A-Z0-9_]*__", tex) is None


def test_latex_values_and_escaped_percent():
    tex = build_proposal_latex(DEFAULT_PROPOSAL, "zh-Hans")
    assert r"\section*{合规概览: 陈总 (Mr. Chen)}" in tex
    assert r"USD 500,000" in tex
    assert r"第 10 年 & 580,000 & 1,200,000 & 116\% \\" in tex
    assert r"第 40 年 & 1,000,000 & 900,000 & 380\% \\" in tex
    assert r"\textbf{USD 25,000}" in tex
    assert r"\item[保费回赠:] 一笔过 3.5\%" in tex
    assert r"\item[预缴利率 (锁定美息):] 4.2\% (至 3月31日)" in tex
    assert r"\textbf{总回报率 (\%)}" in tex
    assert r"金税四期 \& CRS" in tex


def test_latex_traditional_variant_uses_tc_font():
    tex = build_proposal_latex(DEFAULT_PROPOSAL, "zh-Hant")
    assert r"\setCJKmainfont{Noto Sans CJK TC}" in tex
    assert "離岸資產配置建議書" in tex
    assert r"一筆過 3.5\%" in tex


def test_latex_is_deterministic_including_date_directive():
    assert build_proposal_latex(DEFAULT_PROPOSAL, "zh-Hans") == build_proposal_latex(DEFAULT_PROPOSAL, "zh-Hans")


@pytest.mark.parametrize(
    "name",
    ["陈总 (Mr. Chen)", "A&B_C 100% {x}", "back\\slash ~ ^ # $", "}{"],
)
def test_latex_braces_stay_balanced_for_any_name(name):
    proposal = DEFAULT_PROPOSAL.model_copy(update={"client": ClientInfo(name=name, age=1)})
    tex = build_proposal_latex(proposal, "zh-Hans")
    assert _unescaped_brace_balance(tex) == 0


def test_latex_escapes_special_characters():
    assert latex_escape("A&B_C 100%") == r"A\&B\_C 100\%"
    assert latex_escape("{x}") == r"\{x\}"
    assert latex_escape("a\\b") == r"a\textbackslash{}b"
    assert latex_escape("~^#$") == r"\textasciitilde{}\textasciicircum{}\#\$"


def test_latex_zero_premium_and_no_promos():
    proposal = DEFAULT_PROPOSAL.model_copy(
        update={
            "premium": Premium(total=0, payment_type="整付"),
            "promo": DEFAULT_PROPOSAL.promo.model_copy(
                update={
                    "lump_sum": DEFAULT_PROPOSAL.promo.lump_sum.model_copy(update={"enabled": False}),
                    "prepay": DEFAULT_PROPOSAL.promo.prepay.model_copy(update={"enabled": False}),
                }
            ),
        }
    )
    tex = build_proposal_latex(proposal, "zh-Hans")
    assert r"& 0\% \\" in tex
    assert r"\item[保费回赠:] N/A" in tex
    assert r"\item[预缴利率 (锁定美息):] N/A" in tex
    assert "至" not in tex.split(r"\item[预缴利率 (锁定美息):]")[1].splitlines()[0]


@pytest.mark.parametrize("name", ["Chen\n\nLtd", "Chen\r\n \r\nLtd", "Chen \n Ltd"])
def test_latex_folds_line_breaks_in_values(name):
    proposal = DEFAULT_PROPOSAL.model_copy(
        update={
            "client": ClientInfo(name=name, age=1),
            "plan_name": "Plan\n\nTwo",
            "premium": Premium(total=500000, payment_type="整付\n\n年缴"),
        }
    )
    tex = build_proposal_latex(proposal, "zh-Hans")
    assert "Chen\n" not in tex and "\nLtd" not in tex
    assert r"\section*{合规概览: Chen Ltd}" in tex
    assert "Plan Two" in tex
    assert "整付 年缴" in tex


def test_latex_escape_folds_whitespace_around_line_breaks():
    assert latex_escape("a \r\n\t\n b") == "a b"
    assert latex_escape("a  b") == "a  b"
