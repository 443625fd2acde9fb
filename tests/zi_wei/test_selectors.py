from __future__ import annotations

from datetime import date

import pytest

from ziweiengine.zi_wei import (
    BirthInput,
    Gender,
    PalaceName,
    ZiWeiChart,
    career_palace,
    compute_zi_wei_chart,
    current_major_limit_palace,
    major_limit_palace,
    palace_at_offset,
    wealth_palace,
)
from ziweiengine.zi_wei.selectors import age_on


@pytest.fixture
def chart(lunar_converter, as_of: date) -> ZiWeiChart:
    birth = BirthInput(year=1990, month=6, day=15, hour=10, gender=Gender.MALE)
    return compute_zi_wei_chart(birth, as_of=as_of, converter=lunar_converter())


def test_palace_at_offset_wraps(chart: ZiWeiChart) -> None:
    assert palace_at_offset(chart, 0).position == 9
    assert palace_at_offset(chart, 2).position == 11
    assert palace_at_offset(chart, 5, fallback=False).position == 2


def test_wealth_palace_falls_back_to_opposite_when_empty(chart: ZiWeiChart) -> None:
    # Life palace 9 + 4 lands on palace 1 (Tian Liang), which is occupied.
    assert wealth_palace(chart).position == 1
    assert wealth_palace(chart).name is PalaceName.CAREER


def test_career_palace_falls_back_to_opposite_when_empty(chart: ZiWeiChart) -> None:
    # Life palace 9 + 6 lands on palace 3, which holds no primary star.
    assert not chart.palace_at(3).has_primary_stars
    palace = career_palace(chart)
    assert palace.position == 9
    assert palace is chart.opposite_of(chart.palace_at(3))


@pytest.mark.parametrize(
    ("age", "position"),
    [(6, 9), (15, 9), (16, 10), (36, 12), (46, 1), (125, 8)],
)
def test_major_limit_palace(chart: ZiWeiChart, age: int, position: int) -> None:
    palace = major_limit_palace(chart, age)
    assert palace is not None
    assert palace.position == position


@pytest.mark.parametrize("age", [0, 5, 126])
def test_major_limit_palace_outside_bands(chart: ZiWeiChart, age: int) -> None:
    assert major_limit_palace(chart, age) is None


def test_current_major_limit_uses_as_of(chart: ZiWeiChart) -> None:
    assert age_on(date(1990, 6, 15), chart.as_of) == 36
    palace = current_major_limit_palace(chart)
    assert palace is not None
    assert palace.position == 12


def test_age_on_never_negative() -> None:
    assert age_on(date(2000, 1, 1), date(1999, 1, 1)) == 0
    assert age_on(date(2000, 1, 1), date(2000, 12, 31)) == 0
    assert age_on(date(2000, 1, 1), date(2001, 1, 2)) == 1
