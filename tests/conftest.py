from __future__ import annotations

from collections.abc import Callable
from datetime import date
from pathlib import Path

import pytest

from ziweiengine.chinese.lunar import LunarDate
from ziweiengine.zi_wei import BirthInput, Gender

AS_OF = date(2026, 10, 17)


class FixedLunarConverter:
    """Converter returning a canned lunar date regardless of the Gregorian input."""

    name = "fixed"

    def __init__(self, lunar: LunarDate) -> None:
        self.lunar = lunar
        self.calls: list[tuple[int, int, int]] = []

    def to_lunar(self, year: int, month: int, day: int) -> LunarDate:
        self.calls.append((year, month, day))
        return self.lunar


class FailingLunarConverter:
    name = "failing"

    def to_lunar(self, year: int, month: int, day: int) -> LunarDate:
        raise ValueError("date outside almanac range")


@pytest.fixture
def as_of() -> date:
    return AS_OF


@pytest.fixture
def lunar_converter() -> Callable[..., FixedLunarConverter]:
    """Return a factory building converters pinned to a lunar date."""

    def _factory(
        year: int = 1990, month: int = 5, day: int = 23, is_leap: bool = False
    ) -> FixedLunarConverter:
        return FixedLunarConverter(LunarDate(year=year, month=month, day=day, is_leap=is_leap))

    return _factory


@pytest.fixture
def failing_converter() -> FailingLunarConverter:
    return FailingLunarConverter()


@pytest.fixture
def golden_birth() -> BirthInput:
    return BirthInput(year=1990, month=6, day=15, hour=10, gender=Gender.MALE, subject_label="golden")


@pytest.fixture
def config_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.setenv("ZIWEIENGINE_HOME", str(tmp_path))
    return tmp_path
