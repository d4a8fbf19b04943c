"""
Build the proposal document view (print-ready HTML) from a proposal record.
Uses report_data for every derived value and locale_text for every literal.
"""
from __future__ import annotations

import copy
import hashlib
import html
import json
import os
import re
from pathlib import Path
from typing import Any

from models import ProposalData

from .locale_text import DEFAULT_SCRIPT, check_script, text
from .report_data import build_report_data

# Template path relative to this file
_TEMPLATE_DIR = Path(__file__).resolve().parent / "templates"
_PROPOSAL_HTML = (_TEMPLATE_DIR / "proposal.html").read_text(encoding="utf-8")
_TOKEN = re.compile(r"__([A-Z][A-Z0-9_]*?)__")

# In-memory cache for report_data (speeds repeated previews). Capped by REPORT_DATA_CACHE_MAX.
_REPORT_DATA_CACHE: dict[str, dict[str, Any]] = {}
_REPORT_DATA_CACHE_ORDER: list[str] = []
_MAX_REPORT_DATA_CACHE = max(1, int(os.getenv("REPORT_DATA_CACHE_MAX", "16")))


def _report_data_cache_key(proposal_dict: dict, script: str) -> str:
    payload = json.dumps(
        {"proposal": proposal_dict, "script": script},
        sort_keys=True,
        default=str,
    )
    return hashlib.sha256(payload.encode()).hexdigest()


def get_report_data_cached(proposal: ProposalData, script: str) -> dict[str, Any]:
    """Build report data with short-lived in-memory cache. Callers get their own copy."""
    key = _report_data_cache_key(proposal.model_dump(mode="json"), script)
    if key in _REPORT_DATA_CACHE:
        return copy.deepcopy(_REPORT_DATA_CACHE[key])
    data = build_report_data(proposal, script)
    if len(_REPORT_DATA_CACHE) >= _MAX_REPORT_DATA_CACHE and _REPORT_DATA_CACHE_ORDER:
        oldest = _REPORT_DATA_CACHE_ORDER.pop(0)
        _REPORT_DATA_CACHE.pop(oldest, None)
    _REPORT_DATA_CACHE[key] = data
    _REPORT_DATA_CACHE_ORDER.append(key)
    return copy.deepcopy(data)


def fill_template(template: str, values: dict[str, str]) -> str:
    """Replace __NAME__ tokens in one pass; substituted text is never rescanned."""
    return _TOKEN.sub(lambda m: values.get(m.group(1), m.group(0)), template)


def _escape(s: str) -> str:
    return html.escape(str(s), quote=True)


def _build_header(script: str) -> str:
    return f"""    <div class="doc-header">
      <div>
        <h1 class="serif">{_escape(text("title", script))}</h1>
        <p class="subtitle">Offshore Asset Allocation</p>
      </div>
      <div class="brand">
        <div class="brand-mark">PB</div>
        <div class="brand-tagline">Risk &amp; Compliance</div>
      </div>
    </div>"""


def _build_overview(data: dict[str, Any], script: str) -> str:
    name = _escape(data["client_name"])
    salutation = text("salutation", script, name=name)
    intro_plan = text("intro_plan", script, plan=_escape(data["plan_name"]))
    return f"""    <section>
      <h2 class="serif">{_escape(text("overview_heading", script))}: {name}</h2>
      <p class="lead"><strong>{salutation}</strong>{_escape(text("intro_context", script))}{intro_plan}</p>
      <div class="summary">
        <ul>
          <li>{_escape(text("premium_total", script))}: USD {_escape(data["premium_total"])}</li>
          <li>{_escape(text("payment_type", script))}: {_escape(data["payment_type"])}</li>
        </ul>
        <div class="status">
          <div>{_escape(text("hedge_label", script))}: <span class="ok">{_escape(text("hedge_value", script))}</span></div>
          <div>{_escape(text("domicile_label", script))}: <span class="where">{_escape(text("domicile_value", script))}</span></div>
        </div>
      </div>
    </section>"""


def _build_risk_alerts(script: str) -> str:
    return f"""    <section>
      <div class="risk">
        <h3>{_escape(text("risk_heading", script))}</h3>
        <ul>
          <li><strong>{_escape(text("risk_crs_label", script))}:</strong> {_escape(text("risk_crs_text", script))}</li>
          <li><strong>{_escape(text("risk_late_label", script))}:</strong> {_escape(text("risk_late_before", script))}<span class="emph">{_escape(text("risk_late_emphasis", script))}</span>{_escape(text("risk_late_after", script))}</li>
          <li><strong>{_escape(text("risk_identity_label", script))}:</strong> {_escape(text("risk_identity_text", script))}</li>
        </ul>
      </div>
    </section>"""


def _svg_node(cx: float, cy: float, top: str, bottom: str) -> str:
    return (
        f'<circle cx="{cx}" cy="{cy}" r="42" fill="#212C3C" />'
        f'<text x="{cx}" y="{cy - 5}" text-anchor="middle" font-size="12" fill="white">{_escape(top)}</text>'
        f'<text x="{cx}" y="{cy + 15}" text-anchor="middle" font-size="12" fill="white">{_escape(bottom)}</text>'
    )


def _build_infographic(script: str) -> str:
    """Hub-and-spoke diagram: compliance at the centre, three planning goals around it."""
    nodes = "".join([
        _svg_node(0, -100, text("node_isolation_top", script), text("node_isolation_bottom", script)),
        _svg_node(-86.6, 50, text("node_identity_top", script), text("node_identity_bottom", script)),
        _svg_node(86.6, 50, text("node_liquidity_top", script), text("node_liquidity_bottom", script)),
    ])
    return f"""      <svg width="400" height="300" viewBox="-200 -150 400 300" xmlns="http://www.w3.org/2000/svg">
        <defs>
          <marker id="arrow" markerWidth="10" markerHeight="10" refX="9" refY="3" orient="auto" markerUnits="strokeWidth">
            <path d="M0,0 L0,6 L9,3 z" fill="#B8860B" />
          </marker>
        </defs>
        <line x1="0" y1="0" x2="0" y2="-100" stroke="#B8860B" stroke-width="2" marker-end="url(#arrow)" />
        <line x1="0" y1="0" x2="-86.6" y2="50" stroke="#B8860B" stroke-width="2" marker-end="url(#arrow)" />
        <line x1="0" y1="0" x2="86.6" y2="50" stroke="#B8860B" stroke-width="2" marker-end="url(#arrow)" />
        <circle cx="0" cy="0" r="55" fill="#FFF8DC" stroke="#B8860B" stroke-width="2" />
        <text x="0" y="-5" text-anchor="middle" font-size="14" font-weight="bold" fill="#333">{_escape(text("hub_top", script))}</text>
        <text x="0" y="15" text-anchor="middle" font-size="14" font-weight="bold" fill="#333">{_escape(text("hub_bottom", script))}</text>
        {nodes}
      </svg>"""


def _build_running_header(data: dict[str, Any]) -> str:
    return f"""    <div class="running-header">
      <div class="for">Proposal for: <strong>{_escape(data["client_name"])}</strong></div>
      <div class="page-no">Financial Projection (Page 2)</div>
    </div>"""


def _build_table(headers: list[str], rows: list[list[str]]) -> str:
    head = "".join(f"<th>{_escape(h)}</th>" for h in headers)
    body = []
    for i, row in enumerate(rows):
        cls = ' class="alt"' if i % 2 else ""
        cells = "".join(f"<td>{_escape(c)}</td>" for c in row[:-1])
        body.append(f'<tr{cls}>{cells}<td class="rate">{_escape(row[-1])}</td></tr>')
    return f'<table class="data"><thead><tr>{head}</tr></thead><tbody>{"".join(body)}</tbody></table>'


def _build_scenario_a(data: dict[str, Any], script: str) -> str:
    table = _build_table(
        [text(k, script) for k in ("col_policy_year", "col_surrender", "col_death", "col_return_rate")],
        [[r["year_label"], r["surrender"], r["death"], r["return_rate"]] for r in data["scenario_a_rows"]],
    )
    return f"""    <section>
      <h2 class="serif">{_escape(text("scenario_a_heading", script))}</h2>
      <p class="note">{_escape(text("scenario_a_intro", script))}</p>
      {table}
    </section>"""


def _build_scenario_b(data: dict[str, Any], script: str) -> str:
    table = _build_table(
        [text(k, script) for k in ("col_policy_year", "col_cumulative", "col_remaining", "col_return_rate")],
        [[r["year_label"], r["cumulative"], r["remaining"], r["return_rate"]] for r in data["scenario_b_rows"]],
    )
    return f"""    <section>
      <h2 class="serif">{_escape(text("scenario_b_heading", script))}</h2>
      <p class="note">{_escape(text("scenario_b_intro_before", script))}<strong>USD {_escape(data["annual_withdrawal"])}</strong>{_escape(text("scenario_b_intro_after", script))}</p>
      {table}
    </section>"""


def _build_promotions(data: dict[str, Any], script: str) -> str:
    note = data["prepay_deadline_note"]
    deadline_html = f' <span class="deadline">{_escape(note)}</span>' if note is not None else ""
    return f"""    <section>
      <h2 class="serif">{_escape(text("promo_heading", script))}</h2>
      <div class="promos">
        <div class="promo">
          <div class="label">{_escape(text("rebate_label", script))}</div>
          <div class="value">{_escape(data["rebate"])}</div>
        </div>
        <div class="promo">
          <div class="label">{_escape(text("prepay_label", script))}</div>
          <div class="value">{_escape(data["prepay"])}{deadline_html}</div>
        </div>
      </div>
    </section>"""


def _build_disclaimer(script: str) -> str:
    return f"""    <div class="disclaimer"><strong>{_escape(text("disclaimer_label", script))}:</strong> {_escape(text("disclaimer", script))}</div>"""


def build_proposal_html(
    proposal: ProposalData,
    script: str = DEFAULT_SCRIPT,
    report_data: dict[str, Any] | None = None,
) -> str:
    """
    Produce the full two-page HTML document for a proposal.
    Output depends only on the record and script, so repeated renders are identical.
    """
    check_script(script)
    if report_data is None:
        report_data = get_report_data_cached(proposal, script)

    return fill_template(_PROPOSAL_HTML, {
        "LANG": script,
        "DOCUMENT_TITLE": _escape(f"{text('title', script)} - {report_data['client_name']}"),
        "HEADER_HTML": _build_header(script),
        "OVERVIEW_HTML": _build_overview(report_data, script),
        "RISK_HTML": _build_risk_alerts(script),
        "INFOGRAPHIC_SVG": _build_infographic(script),
        "RUNNING_HEADER_HTML": _build_running_header(report_data),
        "SCENARIO_A_HTML": _build_scenario_a(report_data, script),
        "SCENARIO_B_HTML": _build_scenario_b(report_data, script),
        "PROMO_HTML": _build_promotions(report_data, script),
        "DISCLAIMER_HTML": _build_disclaimer(script),
    })
