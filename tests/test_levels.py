import json

import pytest

from app.levels import (
    DEFAULT_LEVELS,
    level_table_from_dict,
    load_level_table,
    performance_level,
)


@pytest.mark.parametrize("wpm,acc,label", [
    (100, 59, "Below Average"),
    (10, 60, "Beginner"),
    (25, 75, "Improving"),
    (35, 89, "Good"),
    (45, 89, "Great"),
    (55, 89, "Excellent"),
    (95, 89, "Excellent"),
    (10, 90, "Beginner"),
    (25, 95, "Learning"),
    (35, 95, "Improving"),
    (45, 95, "Good"),
    (55, 95, "Great"),
    (70, 95, "Excellent"),
    (80, 100, "Master"),
])
def test_default_ladder(wpm, acc, label):
    assert DEFAULT_LEVELS.tier_for(wpm, acc).label == label


def test_negative_accuracy_gets_lowest_tier():
    assert DEFAULT_LEVELS.tier_for(90, -400).label == "Below Average"


def test_master_needs_high_accuracy():
    assert "Master" in performance_level(120, 90)
    assert "Master" not in performance_level(120, 89)


def test_display_includes_icon():
    assert performance_level(85, 95) == "👑 Master"


def _custom():
    return {
        "low_accuracy": "Slow down",
        "min_accuracy": 50,
        "high_accuracy": 95,
        "standard": [{"min_wpm": 20, "label": "B"}, {"min_wpm": 0, "label": "A"}],
        "high": [{"min_wpm": 0, "label": "C"}, {"min_wpm": 40, "label": "D", "icon": "*"}],
    }


def test_table_from_dict_sorts_ladders():
    table = level_table_from_dict(_custom())
    assert [t.label for t in table.standard] == ["A", "B"]
    assert table.tier_for(30, 70).label == "B"
    assert table.tier_for(45, 96).display == "* D"
    assert table.tier_for(45, 10).label == "Slow down"


@pytest.mark.parametrize("mutate", [
    lambda d: d.pop("high"),
    lambda d: d.update(standard=[]),
    lambda d: d.update(high=[{"min_wpm": 10, "label": "X"}]),
    lambda d: d.update(standard=[{"min_wpm": 0}]),
    lambda d: d.update(min_accuracy=99),
])
def test_table_from_dict_rejects_bad_tables(mutate):
    data = _custom()
    mutate(data)
    with pytest.raises(ValueError):
        level_table_from_dict(data)


def test_load_level_table_from_file(tmp_path):
    path = tmp_path / "levels.json"
    path.write_text(json.dumps(_custom()), encoding="utf-8")
    table = load_level_table(path)
    assert table.tier_for(45, 96).label == "D"


def test_load_level_table_missing_file(tmp_path):
    assert load_level_table(tmp_path / "nope.json") is DEFAULT_LEVELS


def test_load_level_table_malformed_file(tmp_path):
    path = tmp_path / "levels.json"
    path.write_text("{not json", encoding="utf-8")
    assert load_level_table(path) is DEFAULT_LEVELS
