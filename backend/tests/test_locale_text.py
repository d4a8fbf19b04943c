from __future__ import annotations

import pytest

from reporting.locale_text import SCRIPTS, check_script, slots, text


def test_every_slot_has_both_scripts():
    for slot in slots():
        for script in SCRIPTS:
            assert text(slot, script), f"{slot} empty for {script}"


def test_placeholders_are_filled():
    assert text("salutation", "zh-Hans", name="陈总") == "尊贵的 陈总 阁下"
    assert text("salutation", "zh-Hant", name="陳總") == "尊貴的 陳總 閣下"
    assert text("year_label", "zh-Hant", year="40") == "第 40 年"


def test_traditional_variant_differs_where_script_differs():
    assert text("title", "zh-Hans") == "离岸资产配置建议书"
    assert text("title", "zh-Hant") == "離岸資產配置建議書"
    assert text("cjk_font", "zh-Hant") == "Noto Sans CJK TC"


def test_unknown_script_raises():
    with pytest.raises(ValueError):
        check_script("zh-CN")
    with pytest.raises(ValueError):
        text("title", "en")
