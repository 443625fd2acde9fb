"""Lookup tables for Heavenly Stems and Earthly Branches."""

from __future__ import annotations

from enum import IntEnum, StrEnum
from typing import Final


class Polarity(StrEnum):
    """Yin/Yang polarity of a stem or branch."""

    YANG = "Yang"
    YIN = "Yin"


class HeavenlyStem(IntEnum):
    """The ten Heavenly Stems (天干), valued by their position in the cycle."""

    JIA = 0
    YI = 1
    BING = 2
    DING = 3
    WU = 4
    JI = 5
    GENG = 6
    XIN = 7
    REN = 8
    GUI = 9

    @property
    def chinese(self) -> str:
        return _STEM_CHINESE[self]

    @property
    def pinyin(self) -> str:
        return self.name.title()

    @property
    def element(self) -> str:
        return _CYCLE_ELEMENTS[self // 2]

    @property
    def polarity(self) -> Polarity:
        return Polarity.YANG if self % 2 == 0 else Polarity.YIN

    @classmethod
    def from_chinese(cls, value: str) -> HeavenlyStem:
        try:
            return cls(_STEM_CHINESE.index(value))
        except ValueError:
            raise ValueError(f"Unknown Heavenly Stem: {value!r}") from None

    def __str__(self) -> str:
        return self.chinese


class EarthlyBranch(IntEnum):
    """The twelve Earthly Branches (地支), valued by their position in the cycle."""

    ZI = 0
    CHOU = 1
    YIN = 2
    MAO = 3
    CHEN = 4
    SI = 5
    WU = 6
    WEI = 7
    SHEN = 8
    YOU = 9
    XU = 10
    HAI = 11

    @property
    def chinese(self) -> str:
        return _BRANCH_CHINESE[self]

    @property
    def pinyin(self) -> str:
        return self.name.title()

    @property
    def animal(self) -> str:
        return _BRANCH_ANIMALS[self]

    @property
    def element(self) -> str:
        return _BRANCH_ELEMENTS[self]

    @property
    def polarity(self) -> Polarity:
        return Polarity.YANG if self % 2 == 0 else Polarity.YIN

    @classmethod
    def from_chinese(cls, value: str) -> EarthlyBranch:
        try:
            return cls(_BRANCH_CHINESE.index(value))
        except ValueError:
            raise ValueError(f"Unknown Earthly Branch: {value!r}") from None

    def __str__(self) -> str:
        return self.chinese


_STEM_CHINESE: Final[str] = "甲乙丙丁戊己庚辛壬癸"
_BRANCH_CHINESE: Final[str] = "子丑寅卯辰巳午未申酉戌亥"

_CYCLE_ELEMENTS: Final[tuple[str, ...]] = ("Wood", "Fire", "Earth", "Metal", "Water")

_BRANCH_ANIMALS: Final[tuple[str, ...]] = (
    "Rat",
    "Ox",
    "Tiger",
    "Rabbit",
    "Dragon",
    "Snake",
    "Horse",
    "Goat",
    "Monkey",
    "Rooster",
    "Dog",
    "Pig",
)

_BRANCH_ELEMENTS: Final[tuple[str, ...]] = (
    "Water",
    "Earth",
    "Wood",
    "Wood",
    "Earth",
    "Fire",
    "Fire",
    "Earth",
    "Metal",
    "Metal",
    "Earth",
    "Water",
)

HEAVENLY_STEMS: Final[tuple[HeavenlyStem, ...]] = tuple(HeavenlyStem)
EARTHLY_BRANCHES: Final[tuple[EarthlyBranch, ...]] = tuple(EarthlyBranch)


def stem_for_index(index: int) -> HeavenlyStem:
    """Return the Heavenly Stem for ``index``, wrapping around the 10-cycle."""

    return HEAVENLY_STEMS[index % len(HEAVENLY_STEMS)]


def branch_for_index(index: int) -> EarthlyBranch:
    """Return the Earthly Branch for ``index``, wrapping around the 12-cycle."""

    return EARTHLY_BRANCHES[index % len(EARTHLY_BRANCHES)]


__all__ = [
    "Polarity",
    "HeavenlyStem",
    "EarthlyBranch",
    "HEAVENLY_STEMS",
    "EARTHLY_BRANCHES",
    "stem_for_index",
    "branch_for_index",
]
