from __future__ import annotations

from datetime import date

import pytest

from ziweiengine.config import Settings, TraceCfg
from ziweiengine.zi_wei import (
    PALACE_NAMES,
    STAGES,
    BirthInput,
    Gender,
    InvalidInput,
    InvariantViolation,
    compute_zi_wei_chart,
)
from ziweiengine.zi_wei.pipeline import run_stages
from ziweiengine.zi_wei.stages import StageContext
from ziweiengine.zi_wei.workspace import ChartWorkspace


def _birth(gender: Gender = Gender.MALE, **overrides: int) -> BirthInput:
    values = {"year": 1990, "month": 6, "day": 15, "hour": 10}
    values.update(overrides)
    return BirthInput(gender=gender, **values)


def test_chart_has_twelve_uniquely_named_palaces(lunar_converter, as_of: date) -> None:
    chart = compute_zi_wei_chart(_birth(), as_of=as_of, converter=lunar_converter())
    assert [palace.position for palace in chart.palaces] == list(range(1, 13))
    assert sorted(palace.name for palace in chart.palaces) == sorted(PALACE_NAMES)
    assert len({palace.branch for palace in chart.palaces}) == 12


@pytest.mark.parametrize("name", PALACE_NAMES)
def test_palace_by_name_round_trip(name, lunar_converter, as_of: date) -> None:
    chart = compute_zi_wei_chart(_birth(), as_of=as_of, converter=lunar_converter())

    palace = chart.palace_by_name(name)
    assert palace.name == name
    assert palace in chart.palaces
    assert chart.palace_by_name(name.english) is palace


def test_palace_by_name_unknown_raises_key_error(lunar_converter, as_of: date) -> None:
    chart = compute_zi_wei_chart(_birth(), as_of=as_of, converter=lunar_converter())
    with pytest.raises(KeyError):
        chart.palace_by_name("Unknown")


def test_same_input_and_as_of_give_identical_charts(lunar_converter, as_of: date) -> None:
    first = compute_zi_wei_chart(_birth(), as_of=as_of, converter=lunar_converter())
    second = compute_zi_wei_chart(_birth(), as_of=as_of, converter=lunar_converter())
    assert first.to_dict() == second.to_dict()


def test_only_annual_flow_depends_on_as_of(lunar_converter) -> None:
    early = compute_zi_wei_chart(_birth(), as_of=date(2020, 1, 1), converter=lunar_converter())
    late = compute_zi_wei_chart(_birth(), as_of=date(2030, 1, 1), converter=lunar_converter())

    early_payload = early.to_dict()
    late_payload = late.to_dict()
    for payload in (early_payload, late_payload):
        payload.pop("as_of")
        payload.pop("provenance")
        payload["trace"].pop("annual_flow")
        for palace in payload["palaces"]:
            palace.pop("annual_flow")
    assert early_payload == late_payload
    assert early.palace_at(1).annual_flow.year == 2013
    assert late.palace_at(1).annual_flow.year == 2025


def test_annual_flow_before_reference_year(lunar_converter) -> None:
    chart = compute_zi_wei_chart(_birth(), as_of=date(2000, 3, 1), converter=lunar_converter())
    assert chart.palace_at(1).annual_flow.year == 1989
    assert chart.palace_at(12).annual_flow.year == 2000
    for palace in chart.palaces:
        assert palace.annual_flow.branch == palace.branch


def test_gender_swap_reverses_only_major_limit_direction(lunar_converter, as_of: date) -> None:
    male = compute_zi_wei_chart(_birth(Gender.MALE), as_of=as_of, converter=lunar_converter())
    female = compute_zi_wei_chart(_birth(Gender.FEMALE), as_of=as_of, converter=lunar_converter())

    assert male.major_limits_clockwise is True
    assert female.major_limits_clockwise is False
    for male_palace, female_palace in zip(male.palaces, female.palaces, strict=True):
        assert male_palace.stem == female_palace.stem
        assert male_palace.name == female_palace.name
        assert male_palace.stars == female_palace.stars
    life = male.life_palace
    assert male.palace_at(life).major_limit == female.palace_at(life).major_limit
    assert male.palace_at(life % 12 + 1).major_limit.start_age == 16
    assert female.palace_at((life - 2) % 12 + 1).major_limit.start_age == 16


def test_polarity_flip_reverses_direction(lunar_converter, as_of: date) -> None:
    yang = compute_zi_wei_chart(_birth(), as_of=as_of, converter=lunar_converter(year=1990))
    yin = compute_zi_wei_chart(_birth(), as_of=as_of, converter=lunar_converter(year=1991))
    assert yang.major_limits_clockwise is True
    assert yin.major_limits_clockwise is False


def test_major_limits_partition_ages(lunar_converter, as_of: date) -> None:
    chart = compute_zi_wei_chart(_birth(), as_of=as_of, converter=lunar_converter())
    bands = sorted((palace.major_limit for palace in chart.palaces), key=lambda band: band.start_age)
    start = chart.five_element.number
    assert bands[0].start_age == start
    for previous, current in zip(bands, bands[1:]):
        assert current.start_age == previous.end_age + 1
        assert current.end_age - current.start_age == 9


def test_leap_month_uses_its_numbered_month(lunar_converter, as_of: date) -> None:
    regular = compute_zi_wei_chart(_birth(), as_of=as_of, converter=lunar_converter(month=5))
    leap = compute_zi_wei_chart(
        _birth(), as_of=as_of, converter=lunar_converter(month=5, is_leap=True)
    )
    assert leap.lunar_date.is_leap is True
    assert leap.life_palace == regular.life_palace


def test_year_outside_configured_range_is_rejected(lunar_converter, as_of: date) -> None:
    converter = lunar_converter()
    with pytest.raises(InvalidInput) as excinfo:
        compute_zi_wei_chart(_birth(year=1899), as_of=as_of, converter=converter)
    assert excinfo.value.stage == "input"
    assert excinfo.value.key == 1899
    assert converter.calls == []


def test_converter_failure_is_invalid_input(failing_converter, as_of: date) -> None:
    with pytest.raises(InvalidInput) as excinfo:
        compute_zi_wei_chart(_birth(), as_of=as_of, converter=failing_converter)
    assert excinfo.value.stage == "year_pillar"
    assert "almanac" in str(excinfo.value)


def test_trace_can_be_disabled(lunar_converter, as_of: date) -> None:
    settings = Settings(trace=TraceCfg(enabled=False))
    chart = compute_zi_wei_chart(_birth(), as_of=as_of, converter=lunar_converter(), settings=settings)
    assert dict(chart.trace) == {}


def test_stages_out_of_order_raise_invariant_violation(lunar_converter, as_of: date) -> None:
    ws = ChartWorkspace.create(_birth(), as_of)
    ctx = StageContext(converter=lunar_converter())
    life_palace_stage = next(stage for stage in STAGES if stage.name == "life_palace")
    with pytest.raises(InvariantViolation) as excinfo:
        run_stages(ws, ctx, (life_palace_stage,))
    assert excinfo.value.stage == "life_palace"
    assert excinfo.value.key == "lunar_date"


def test_star_index_requires_all_placements(lunar_converter, as_of: date) -> None:
    ws = ChartWorkspace.create(_birth(), as_of)
    ctx = StageContext(converter=lunar_converter())
    early = [stage for stage in STAGES if stage.name in {"year_pillar", "palace_stems"}]
    star_index = next(stage for stage in STAGES if stage.name == "star_index")
    with pytest.raises(InvariantViolation) as excinfo:
        run_stages(ws, ctx, [*early, star_index])
    assert excinfo.value.stage == "star_index"
    assert "zi_wei" in excinfo.value.key


def test_workspace_is_not_shared_between_charts(lunar_converter, as_of: date) -> None:
    chart = compute_zi_wei_chart(_birth(), as_of=as_of, converter=lunar_converter())
    again = compute_zi_wei_chart(_birth(), as_of=as_of, converter=lunar_converter())
    assert chart.palaces is not again.palaces
    total = sum(len(palace.stars) for palace in again.palaces)
    assert total == 18
