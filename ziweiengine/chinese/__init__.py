"""Chinese calendar primitives shared by the Zi Wei engine."""

from __future__ import annotations

from .constants import (
    EARTHLY_BRANCHES,
    HEAVENLY_STEMS,
    EarthlyBranch,
    HeavenlyStem,
    Polarity,
    branch_for_index,
    stem_for_index,
)
from .lunar import DEFAULT_CONVERTER, LunarConverter, LunarDate, LunarPythonConverter
from .sexagenary import (
    SexagenaryCycleEntry,
    hour_branch_for_clock_hour,
    sexagenary_entry_for_index,
    year_cycle_entry,
)

__all__ = [
    "EARTHLY_BRANCHES",
    "HEAVENLY_STEMS",
    "HeavenlyStem",
    "EarthlyBranch",
    "Polarity",
    "stem_for_index",
    "branch_for_index",
    "LunarDate",
    "LunarConverter",
    "LunarPythonConverter",
    "DEFAULT_CONVERTER",
    "SexagenaryCycleEntry",
    "sexagenary_entry_for_index",
    "year_cycle_entry",
    "hour_branch_for_clock_hour",
]
