from __future__ import annotations

import pytest

from ziweiengine.chinese.constants import EarthlyBranch, HeavenlyStem
from ziweiengine.chinese.sexagenary import (
    hour_branch_for_clock_hour,
    sexagenary_entry_for_index,
    year_cycle_entry,
)


@pytest.mark.parametrize(
    ("lunar_year", "label"),
    [
        (1984, "Jia-Zi"),
        (1990, "Geng-Wu"),
        (1991, "Xin-Wei"),
        (2013, "Gui-Si"),
        (2026, "Bing-Wu"),
        (1923, "Gui-Hai"),
    ],
)
def test_year_cycle_entry(lunar_year: int, label: str) -> None:
    assert year_cycle_entry(lunar_year).label() == label


def test_year_cycle_entry_chinese_label() -> None:
    entry = year_cycle_entry(1990)
    assert entry.stem is HeavenlyStem.GENG
    assert entry.branch is EarthlyBranch.WU
    assert entry.chinese() == "庚午"


@pytest.mark.parametrize(
    ("hour", "branch"),
    [
        (23, EarthlyBranch.ZI),
        (0, EarthlyBranch.ZI),
        (1, EarthlyBranch.CHOU),
        (2, EarthlyBranch.CHOU),
        (10, EarthlyBranch.SI),
        (11, EarthlyBranch.WU),
        (12, EarthlyBranch.WU),
        (21, EarthlyBranch.HAI),
        (22, EarthlyBranch.HAI),
    ],
)
def test_hour_branch_for_clock_hour(hour: int, branch: EarthlyBranch) -> None:
    assert hour_branch_for_clock_hour(hour) is branch


@pytest.mark.parametrize("hour", [-1, 24])
def test_hour_branch_rejects_invalid_hours(hour: int) -> None:
    with pytest.raises(ValueError):
        hour_branch_for_clock_hour(hour)


def test_entry_for_index_wraps_the_cycle() -> None:
    assert sexagenary_entry_for_index(60) == sexagenary_entry_for_index(0)
    assert sexagenary_entry_for_index(-1).label() == "Gui-Hai"


def test_chinese_exports_resolve() -> None:
    import ziweiengine.chinese as chinese

    assert "sexagenary_index" not in chinese.__all__
    assert all(hasattr(chinese, name) for name in chinese.__all__)
