"""The sixty-year stem-branch cycle and the double-hour clock."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from .constants import EarthlyBranch, HeavenlyStem, branch_for_index, stem_for_index

SEXAGENARY_CYCLE_LENGTH: Final[int] = 60

# 4 CE was a Jia-Zi year; lunar years count from that origin.
_JIA_ZI_YEAR: Final[int] = 4


@dataclass(frozen=True)
class SexagenaryCycleEntry:
    """Position in the sixty-step cycle with its stem and branch."""

    index: int

    @property
    def stem(self) -> HeavenlyStem:
        return stem_for_index(self.index)

    @property
    def branch(self) -> EarthlyBranch:
        return branch_for_index(self.index)

    def label(self) -> str:
        """Return a human-readable stem-branch label (e.g., ``Jia-Zi``)."""

        return f"{self.stem.pinyin}-{self.branch.pinyin}"

    def chinese(self) -> str:
        return f"{self.stem.chinese}{self.branch.chinese}"


def sexagenary_entry_for_index(index: int) -> SexagenaryCycleEntry:
    """Return the cycle entry for ``index`` (0-59)."""

    return SexagenaryCycleEntry(index=index % SEXAGENARY_CYCLE_LENGTH)


def year_cycle_entry(lunar_year: int) -> SexagenaryCycleEntry:
    """Return the stem/branch pairing of ``lunar_year``.

    The year is a lunisolar year number, so callers must convert Gregorian
    dates before the Spring Festival to the preceding lunar year first.
    """

    return sexagenary_entry_for_index(lunar_year - _JIA_ZI_YEAR)


def hour_branch_for_clock_hour(hour: int) -> EarthlyBranch:
    """Return the double-hour (時辰) branch containing the clock ``hour``.

    Zi spans 23:00-00:59, so both 23 and 0 map to :attr:`EarthlyBranch.ZI`.
    """

    if not 0 <= hour <= 23:
        raise ValueError(f"Clock hour must be within 0-23, got {hour}")
    return branch_for_index((hour + 1) // 2)


__all__ = [
    "SexagenaryCycleEntry",
    "SEXAGENARY_CYCLE_LENGTH",
    "sexagenary_entry_for_index",
    "year_cycle_entry",
    "hour_branch_for_clock_hour",
]
