from __future__ import annotations

from datetime import date

import pytest

from ziweiengine.zi_wei import (
    BarOptions,
    BirthInput,
    ExecutionType,
    FloorMode,
    Gender,
    StarName,
    ZiWeiChart,
    classify_execution,
    compute_career_bars,
    compute_life_bars,
    compute_wealth_bars,
    compute_zi_wei_chart,
)
from ziweiengine.zi_wei.profile_bars import (
    CAREER_SCORES,
    LIFE_SCORES,
    WEALTH_SCORES,
    CareerAxis,
    LifeAxis,
    WealthAxis,
    career_bars_for_chart,
    execution_style_for_chart,
    life_bars_for_chart,
    wealth_bars_for_chart,
)


@pytest.fixture
def chart(lunar_converter, as_of: date) -> ZiWeiChart:
    birth = BirthInput(year=1990, month=6, day=15, hour=10, gender=Gender.MALE)
    return compute_zi_wei_chart(birth, as_of=as_of, converter=lunar_converter())


@pytest.mark.parametrize("table", [WEALTH_SCORES, CAREER_SCORES, LIFE_SCORES])
def test_score_tables_cover_every_star(table) -> None:
    assert set(table) == set(StarName)


@pytest.mark.parametrize(
    ("compute", "axes"),
    [
        (compute_wealth_bars, WealthAxis),
        (compute_career_bars, CareerAxis),
        (compute_life_bars, LifeAxis),
    ],
)
def test_no_signal_reads_neutral(compute, axes) -> None:
    assert compute([]) == {axis: 70 for axis in axes}


def test_untouched_axis_reads_neutral() -> None:
    bars = compute_wealth_bars([StarName.TIAN_JI])
    assert bars[WealthAxis.EARNING] == 70
    assert bars[WealthAxis.RISK] == 70
    assert bars[WealthAxis.ASSET] == 100


def test_hard_floor_holds_at_sixty() -> None:
    bars = compute_wealth_bars([StarName.PO_JUN])
    # Po Jun scores asset -1 alone, the lowest possible base.
    assert bars[WealthAxis.ASSET] == 60
    assert bars[WealthAxis.EARNING] == 100


def test_rescale_mode_compresses_into_floor_range() -> None:
    options = BarOptions(floor_mode=FloorMode.RESCALE)
    assert compute_wealth_bars([StarName.PO_JUN], options=options)[WealthAxis.ASSET] == 60
    assert compute_wealth_bars([StarName.PO_JUN], options=options)[WealthAxis.EARNING] == 100
    balanced = compute_wealth_bars([StarName.PO_JUN], [StarName.TIAN_FU], options)
    assert balanced[WealthAxis.ASSET] == 80


def test_support_weight_scales_supporting_stars() -> None:
    half = compute_wealth_bars([StarName.PO_JUN], [StarName.TIAN_FU])
    assert half[WealthAxis.ASSET] == 70
    full = compute_wealth_bars(
        [StarName.PO_JUN], [StarName.TIAN_FU], BarOptions(support_weight=1.0)
    )
    assert full[WealthAxis.ASSET] == 87


def test_raw_style_options_allow_low_bars() -> None:
    raw = compute_life_bars([StarName.QI_SHA], options=BarOptions(min_floor=0, neutral_bar=50))
    assert raw[LifeAxis.POISE] == 0
    assert raw[LifeAxis.DRIVE] == 100
    assert raw[LifeAxis.ADAPT] == 100


def test_labels_are_accepted() -> None:
    assert compute_career_bars(["武曲", "七杀"]) == compute_career_bars(
        [StarName.WU_QU, StarName.QI_SHA]
    )


@pytest.mark.parametrize(
    ("stars", "style"),
    [
        ([StarName.WU_QU, StarName.QI_SHA, StarName.WEN_CHANG, StarName.YOU_BI], ExecutionType.COMMANDER),
        ([StarName.TIAN_JI], ExecutionType.ARCHITECT),
        ([StarName.PO_JUN], ExecutionType.CATALYST),
        ([StarName.TIAN_TONG, StarName.LIAN_ZHEN, StarName.TAI_YIN, StarName.PO_JUN], ExecutionType.INTEGRATOR),
    ],
)
def test_execution_quadrants(stars: list[StarName], style: ExecutionType) -> None:
    assert classify_execution(stars).style is style


def test_execution_bars_are_linear_and_clamped() -> None:
    profile = classify_execution([StarName.PO_JUN] * 3)
    assert profile.raw[CareerAxis.RISK] == 9
    assert profile.bars[CareerAxis.RISK] == 100
    assert profile.bars[CareerAxis.STRUCTURE] == 2
    assert profile.bars[CareerAxis.COLLAB] == 26
    assert ExecutionType.CATALYST.chinese == "催化者"


def test_chart_profiles(chart: ZiWeiChart) -> None:
    # Wealth palace 1 holds Tian Liang; career palace 3 is empty and borrows
    # the life palace (Tai Yin, Tai Yang).
    assert wealth_bars_for_chart(chart) == {
        WealthAxis.EARNING: 70,
        WealthAxis.ASSET: 100,
        WealthAxis.RISK: 60,
        WealthAxis.DISCIPLINE: 100,
        WealthAxis.DEALFLOW: 100,
    }
    assert career_bars_for_chart(chart) == {
        CareerAxis.SPEED: 70,
        CareerAxis.STRUCTURE: 100,
        CareerAxis.RISK: 70,
        CareerAxis.COLLAB: 100,
        CareerAxis.CLARITY: 100,
    }
    assert life_bars_for_chart(chart) == {
        LifeAxis.IDENTITY: 100,
        LifeAxis.DRIVE: 87,
        LifeAxis.ADAPT: 100,
        LifeAxis.POISE: 87,
        LifeAxis.CLARITY: 100,
    }
    execution = execution_style_for_chart(chart)
    assert execution is not None
    assert execution.style is ExecutionType.COMMANDER
    assert execution.bars[CareerAxis.COLLAB] == 74


def test_chart_profiles_can_include_auxiliary_stars(chart: ZiWeiChart) -> None:
    # Wen Chang shares palace 1 with Tian Liang and has no risk score.
    with_aux = wealth_bars_for_chart(chart, include_auxiliary=True)
    assert with_aux[WealthAxis.RISK] == 60
    assert with_aux[WealthAxis.EARNING] == 70
