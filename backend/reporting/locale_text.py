"""
Literal proposal copy keyed by (slot, script).

Both renderers look every piece of prose up here, so the simplified and
traditional documents share one substitution path and differ only in data.
"""
from __future__ import annotations

import os

SCRIPTS = ("zh-Hans", "zh-Hant")
DEFAULT_SCRIPT = os.getenv("PROPOSAL_DEFAULT_SCRIPT", "zh-Hans").strip() or "zh-Hans"

# slot -> (zh-Hans, zh-Hant)
_TEXT: dict[str, tuple[str, str]] = {
    "title": ("离岸资产配置建议书", "離岸資產配置建議書"),
    "overview_heading": ("合规概览", "合規概覽"),
    "salutation": ("尊贵的 {name} 阁下", "尊貴的 {name} 閣下"),
    "intro_context": (
        "，鉴于内地“金税四期”大数据监管的全面启动，以及 CRS（共同汇报标准）对海外资产的穿透式交换，传统的资产持有方式已面临挑战。",
        "，鑑於內地「金稅四期」大數據監管的全面啟動，以及 CRS（共同匯報標準）對海外資產的穿透式交換，傳統的資產持有方式已面臨挑戰。",
    ),
    "intro_plan": (
        "本建议书旨在利用“{plan}”搭建合规的资产隔离架构，协助您应对潜在的税务追征风险，并实现资产的合法跨境传承。",
        "本建議書旨在利用「{plan}」搭建合規的資產隔離架構，協助您應對潛在的稅務追徵風險，並實現資產的合法跨境傳承。",
    ),
    "premium_heading": ("保费信息", "保費信息"),
    "premium_total": ("总保费", "總保費"),
    "payment_type": ("缴费方式", "繳費方式"),
    "hedge_label": ("风险对冲", "風險對沖"),
    "hedge_value": ("已配置", "已配置"),
    "domicile_label": ("资产属地", "資產屬地"),
    "domicile_value": ("中国香港 (离岸)", "中國香港 (離岸)"),
    "risk_heading": ("当前关键风险提示 (Key Risk Alerts)", "當前關鍵風險提示 (Key Risk Alerts)"),
    "risk_crs_label": ("金税四期 & CRS", "金稅四期 & CRS"),
    "risk_crs_text": (
        "账户信息自动比对，隐匿资产面临定性风险及 0.5-5 倍罚款。",
        "賬戶信息自動比對，隱匿資產面臨定性風險及 0.5-5 倍罰款。",
    ),
    "risk_late_label": ("滞纳金风险", "滯納金風險"),
    "risk_late_before": ("长期未缴税款将产生", "長期未繳稅款將產生"),
    "risk_late_emphasis": ("每年 18%", "每年 18%"),
    "risk_late_after": (" 的滞纳金，侵蚀资产本金。", " 的滯納金，侵蝕資產本金。"),
    "risk_identity_label": ("身份规划", "身份規劃"),
    "risk_identity_text": (
        "建议尽早配置香港身份 (优才/高才/投资移民)，转换税务居民身份以优化税务空间。",
        "建議盡早配置香港身份 (優才/高才/投資移民)，轉換稅務居民身份以優化稅務空間。",
    ),
    "hub_top": ("税务", "稅務"),
    "hub_bottom": ("合规", "合規"),
    "node_isolation_top": ("资产", "資產"),
    "node_isolation_bottom": ("隔离", "隔離"),
    "node_identity_top": ("身份", "身份"),
    "node_identity_bottom": ("规划", "規劃"),
    "node_liquidity_top": ("流动", "流動"),
    "node_liquidity_bottom": ("储备", "儲備"),
    "scenario_a_heading": ("情境 A: 资产隔离与增值 (Asset Isolation)", "情境 A: 資產隔離與增值 (Asset Isolation)"),
    "scenario_a_intro": (
        "利用保险架构的法律属性，实现资产与个人债务风险的有效隔离。身故赔偿金在一般情况下不纳入内地遗产税（如有）征收范围。",
        "利用保險架構的法律屬性，實現資產與個人債務風險的有效隔離。身故賠償金在一般情況下不納入內地遺產稅（如有）徵收範圍。",
    ),
    "scenario_a_caption": ("资产隔离效益", "資產隔離效益"),
    "col_policy_year": ("保单年度", "保單年度"),
    "col_surrender": ("退保价值 (流动性)", "退保價值 (流動性)"),
    "col_death": ("身故赔偿 (资产传承)", "身故賠償 (資產傳承)"),
    "col_return_rate": ("总回报率 (%)", "總回報率 (%)"),
    "year_label": ("第 {year} 年", "第 {year} 年"),
    "scenario_b_heading": ("情境 B: 税务流动性准备 (Tax Liquidity Reserve)", "情境 B: 稅務流動性準備 (Tax Liquidity Reserve)"),
    "scenario_b_intro_before": (
        "针对潜在的税务补缴需求或突发资金周转，本计划提供每年 ",
        "針對潛在的稅務補繳需求或突發資金周轉，本計劃提供每年 ",
    ),
    "scenario_b_intro_after": (
        " 的稳定现金流，避免因资金冻结而产生的滞纳金风险。",
        " 的穩定現金流，避免因資金凍結而產生的滯納金風險。",
    ),
    "scenario_b_caption": ("流动性储备展示", "流動性儲備展示"),
    "col_cumulative": ("累计流动性提取", "累計流動性提取"),
    "col_remaining": ("剩余储备价值", "剩餘儲備價值"),
    "promo_heading": ("限时推广", "限時推廣"),
    "rebate_label": ("保费回赠", "保費回贈"),
    "prepay_label": ("预缴利率 (锁定美息)", "預繳利率 (鎖定美息)"),
    "rebate_lump_sum": ("一笔过", "一筆過"),
    "rebate_five_year": ("5年缴", "5年繳"),
    "deadline_note": ("(至 {date})", "(至 {date})"),
    "month_unit": ("月", "月"),
    "day_unit": ("日", "日"),
    "disclaimer_label": ("合规免责声明", "合規免責聲明"),
    "disclaimer": (
        "本文件仅供参考，不构成税务法律意见。税务后果取决于客户具体情况及当时法律，建议咨询专业税务顾问。"
        "关于香港身份规划、CRS申报及金税四期应对策略，请参阅银行提供的详细合规指引。投资涉及风险，过往表现不代表将来结果。",
        "本文件僅供參考，不構成稅務法律意見。稅務後果取決於客戶具體情況及當時法律，建議諮詢專業稅務顧問。"
        "關於香港身份規劃、CRS申報及金稅四期應對策略，請參閱銀行提供的詳細合規指引。投資涉及風險，過往表現不代表將來結果。",
    ),
    # Typesetting-only settings
    "cjk_font": ("Noto Sans CJK SC", "Noto Sans CJK TC"),
}


def check_script(script: str) -> str:
    if script not in SCRIPTS:
        raise ValueError(f"Unknown script {script!r}; expected one of {', '.join(SCRIPTS)}")
    return script


def text(slot: str, script: str, **values: str) -> str:
    """Literal for slot in script, with {placeholders} filled from values."""
    template = _TEXT[slot][SCRIPTS.index(check_script(script))]
    return template.format(**values) if values else template


def slots() -> list[str]:
    return list(_TEXT.keys())
