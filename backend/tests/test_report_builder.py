"""Tests for the HTML document view."""
from __future__ import annotations

import re

import pytest

from models import ClientInfo, PrepayPromo
from proposals import DEFAULT_PROPOSAL
from reporting.report_builder import build_proposal_html, fill_template, get_report_data_cached


def _with_client_name(name: str):
    return DEFAULT_PROPOSAL.model_copy(update={"client": ClientInfo(name=name, age=50)})


def test_html_includes_projected_values():
    html = build_proposal_html(DEFAULT_PROPOSAL, "zh-Hans")
    assert "离岸资产配置建议书" in html
    assert "合规概览: 陈总 (Mr. Chen)" in html
    assert "尊贵的 陈总 (Mr. Chen) 阁下" in html
    assert "“跨境资产保全与合规传承计划”" in html
    assert "USD 500,000" in html
    assert "USD 25,000" in html
    for value in ("580,000", "1,200,000", "116%", "190%", "320%", "140%", "380%"):
        assert value in html
    assert "一笔过 3.5%" in html
    assert "4.2%" in html
    assert '<span class="deadline">(至 3月31日)</span>' in html
    assert "Proposal for: <strong>陈总 (Mr. Chen)</strong>" in html


def test_html_sections_in_fixed_order():
    html = build_proposal_html(DEFAULT_PROPOSAL, "zh-Hans")
    markers = [
        'class="doc-header"',
        "合规概览",
        "当前关键风险提示",
        "<svg",
        "情境 A",
        "情境 B",
        "限时推广",
        "合规免责声明",
    ]
    positions = [html.index(m) for m in markers]
    assert positions == sorted(positions)


def test_html_is_deterministic():
    assert build_proposal_html(DEFAULT_PROPOSAL, "zh-Hant") == build_proposal_html(DEFAULT_PROPOSAL, "zh-Hant")


def test_html_traditional_variant():
    html = build_proposal_html(DEFAULT_PROPOSAL, "zh-Hant")
    assert '<html lang="zh-Hant">' in html
    assert "離岸資產配置建議書" in html
    assert "情境 A: 資產隔離與增值" in html
    assert "一筆過 3.5%" in html
    assert "离岸资产配置建议书" not in html


def test_html_leaves_no_template_tokens():
    html = build_proposal_html(DEFAULT_PROPOSAL, "zh-Hans")
    assert re.search(r"__[A-Z][A-Z0-9_]*__", html) is None


def test_html_escapes_client_text():
    html = build_proposal_html(_with_client_name("<b>Li & Co</b>"), "zh-Hans")
    assert "<b>Li" not in html
    assert "&lt;b&gt;Li &amp; Co&lt;/b&gt;" in html


def test_html_does_not_expand_tokens_inside_values():
    html = build_proposal_html(_with_client_name("__RISK_HTML__"), "zh-Hans")
    assert "合规概览: __RISK_HTML__" in html
    assert html.count("当前关键风险提示") == 1


def test_html_omits_deadline_when_absent():
    promo = DEFAULT_PROPOSAL.promo.model_copy(update={"prepay": PrepayPromo(enabled=False, rate=4.2, deadline="2025-03-31")})
    html = build_proposal_html(DEFAULT_PROPOSAL.model_copy(update={"promo": promo}), "zh-Hans")
    assert 'class="deadline"' not in html
    assert ">N/A<" in html


def test_html_has_two_a4_pages():
    html = build_proposal_html(DEFAULT_PROPOSAL, "zh-Hans")
    assert html.count('<div class="page">') == 2
    assert 'class="page-break"' in html
    assert "height: 297mm" in html


def test_html_rejects_unknown_script():
    with pytest.raises(ValueError):
        build_proposal_html(DEFAULT_PROPOSAL, "fr")


def test_fill_template_single_pass():
    assert fill_template("a __X__ b __Y__", {"X": "__Y__", "Y": "y"}) == "a __Y__ b y"
    assert fill_template("__UNKNOWN__", {}) == "__UNKNOWN__"


def test_report_data_cache_keys_on_record_and_script():
    first = get_report_data_cached(DEFAULT_PROPOSAL, "zh-Hans")
    assert get_report_data_cached(DEFAULT_PROPOSAL, "zh-Hans") == first
    other = get_report_data_cached(_with_client_name("王总"), "zh-Hans")
    assert other["client_name"] == "王总"
    assert get_report_data_cached(DEFAULT_PROPOSAL, "zh-Hant")["script"] == "zh-Hant"


def test_report_data_cache_hands_out_independent_copies():
    first = get_report_data_cached(DEFAULT_PROPOSAL, "zh-Hans")
    first["client_name"] = "changed"
    first["scenario_a_rows"][0]["return_rate"] = "999%"

    again = get_report_data_cached(DEFAULT_PROPOSAL, "zh-Hans")
    assert again["client_name"] == "陈总 (Mr. Chen)"
    assert again["scenario_a_rows"][0]["return_rate"] == "116%"
    assert "999%" not in build_proposal_html(DEFAULT_PROPOSAL, "zh-Hans")
