from __future__ import annotations

from datetime import date

import pytest

from ziweiengine.zi_wei import (
    BirthInput,
    Gender,
    StarName,
    WealthCode,
    ZiWeiChart,
    classify_wealth_codes,
    compute_zi_wei_chart,
    explain_wealth_code_votes,
)
from ziweiengine.zi_wei.wealth_code import (
    STAR_WEALTH_CODES,
    coerce_star,
    wealth_codes_for_chart,
)


@pytest.fixture
def chart(lunar_converter, as_of: date) -> ZiWeiChart:
    birth = BirthInput(year=1990, month=6, day=15, hour=10, gender=Gender.MALE)
    return compute_zi_wei_chart(birth, as_of=as_of, converter=lunar_converter())


def test_every_star_votes() -> None:
    assert set(STAR_WEALTH_CODES) == set(StarName)
    assert all(STAR_WEALTH_CODES.values())


def test_codes_ranked_by_votes() -> None:
    codes = classify_wealth_codes([StarName.PO_JUN, StarName.PO_JUN, StarName.ZI_WEI])
    assert codes == [WealthCode.INVESTMENT_BRAIN, WealthCode.STRATEGY_PLANNER]


@pytest.mark.parametrize(
    ("tie_break", "expected"),
    [
        ("priority", [WealthCode.STRATEGY_PLANNER, WealthCode.COLLABORATOR]),
        ("alpha", [WealthCode.COLLABORATOR, WealthCode.STRATEGY_PLANNER]),
    ],
)
def test_tie_break_order(tie_break: str, expected: list[WealthCode]) -> None:
    stars = [StarName.ZI_WEI, StarName.TIAN_TONG]
    assert classify_wealth_codes(stars, tie_break=tie_break) == expected


def test_unknown_tie_break_rejected() -> None:
    with pytest.raises(ValueError):
        classify_wealth_codes([StarName.ZI_WEI], tie_break="random")


def test_limit_truncates_and_non_positive_limit_is_ignored() -> None:
    stars = [StarName.TIAN_FU]
    assert classify_wealth_codes(stars, limit=1) == [WealthCode.INVESTMENT_BRAIN]
    assert len(classify_wealth_codes(stars, limit=0)) == 2


def test_labels_are_accepted_and_unknown_ignored() -> None:
    codes = classify_wealth_codes(["左辅", "火星", "太阳"])
    assert codes == [
        WealthCode.STRATEGY_PLANNER,
        WealthCode.BRANDING_MAGNET,
        WealthCode.COLLABORATOR,
    ]
    assert coerce_star("左辅") is StarName.ZUO_FU
    assert coerce_star("左輔") is StarName.ZUO_FU
    assert coerce_star("火星") is None


def test_no_known_stars_gives_no_codes() -> None:
    assert classify_wealth_codes([]) == []
    assert explain_wealth_code_votes(["unknown"]) == []


def test_explain_counts_each_star_once() -> None:
    votes = explain_wealth_code_votes([StarName.PO_JUN, StarName.PO_JUN, StarName.ZI_WEI])
    assert [(vote.code, vote.weight) for vote in votes] == [
        (WealthCode.STRATEGY_PLANNER, 1),
        (WealthCode.INVESTMENT_BRAIN, 1),
    ]
    assert votes[1].triggers == (StarName.PO_JUN,)


def test_explain_lists_triggers_in_order() -> None:
    votes = explain_wealth_code_votes([StarName.TIAN_FU, StarName.WU_QU, StarName.TAI_YANG])
    first = votes[0]
    assert first.code is WealthCode.STRATEGY_PLANNER
    assert first.weight == 2
    assert first.triggers == (StarName.TIAN_FU, StarName.WU_QU)


def test_chart_wealth_codes_use_wealth_palace(chart: ZiWeiChart) -> None:
    # Wealth palace is palace 1, holding Tian Liang alone.
    assert wealth_codes_for_chart(chart) == [
        WealthCode.STRATEGY_PLANNER,
        WealthCode.INVESTMENT_BRAIN,
    ]
