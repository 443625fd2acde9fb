"""Closed vocabularies and mutable records used while a chart is built."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from datetime import date
from enum import StrEnum
from typing import Final

from ..chinese.constants import EarthlyBranch, HeavenlyStem
from .errors import InvalidInput

__all__ = [
    "PALACE_COUNT",
    "Gender",
    "PalaceName",
    "PALACE_NAMES",
    "StarName",
    "PRIMARY_STARS",
    "AUXILIARY_STARS",
    "Transformation",
    "TRANSFORMATION_ORDER",
    "FiveElement",
    "Brightness",
    "BirthInput",
    "Star",
    "MajorLimit",
    "AnnualFlow",
    "OppositeInfluence",
    "Palace",
]

PALACE_COUNT: Final[int] = 12


class Gender(StrEnum):
    MALE = "male"
    FEMALE = "female"


class PalaceName(StrEnum):
    """The twelve palace roles, in the order they are assigned from the life palace."""

    LIFE = "命宫"
    SIBLINGS = "兄弟"
    SPOUSE = "夫妻"
    CHILDREN = "子女"
    WEALTH = "财帛"
    HEALTH = "疾厄"
    TRAVEL = "迁移"
    FRIENDS = "交友"
    CAREER = "官禄"
    PROPERTY = "田宅"
    MENTAL = "福德"
    PARENTS = "父母"

    @property
    def english(self) -> str:
        return self.name.title()


PALACE_NAMES: Final[tuple[PalaceName, ...]] = tuple(PalaceName)


class StarName(StrEnum):
    """Stars placed by the engine: fourteen primary stars then four auxiliaries."""

    ZI_WEI = "紫微"
    TIAN_JI = "天机"
    TAI_YANG = "太阳"
    WU_QU = "武曲"
    TIAN_TONG = "天同"
    LIAN_ZHEN = "廉贞"
    TIAN_FU = "天府"
    TAI_YIN = "太阴"
    TAN_LANG = "贪狼"
    JU_MEN = "巨门"
    TIAN_XIANG = "天相"
    TIAN_LIANG = "天梁"
    QI_SHA = "七杀"
    PO_JUN = "破军"
    ZUO_FU = "左輔"
    YOU_BI = "右弼"
    WEN_CHANG = "文昌"
    WEN_QU = "文曲"

    @property
    def pinyin(self) -> str:
        return self.name.replace("_", " ").title()

    @property
    def is_primary(self) -> bool:
        return self in PRIMARY_STARS


AUXILIARY_STARS: Final[frozenset[StarName]] = frozenset(
    {StarName.ZUO_FU, StarName.YOU_BI, StarName.WEN_CHANG, StarName.WEN_QU}
)
PRIMARY_STARS: Final[frozenset[StarName]] = frozenset(StarName) - AUXILIARY_STARS


class Transformation(StrEnum):
    """The four transformations (四化)."""

    LU = "化祿"
    QUAN = "化權"
    KE = "化科"
    JI = "化忌"

    @property
    def pinyin(self) -> str:
        return f"Hua {self.name.title()}"


TRANSFORMATION_ORDER: Final[tuple[Transformation, ...]] = tuple(Transformation)


class FiveElement(StrEnum):
    """Five-element bureau (五行局) of a chart."""

    WATER = "水二局"
    WOOD = "木三局"
    METAL = "金四局"
    EARTH = "土五局"
    FIRE = "火六局"

    @property
    def number(self) -> int:
        return _ELEMENT_NUMBERS[self]

    @property
    def english(self) -> str:
        return f"{self.name.title()} {self.number}"


_ELEMENT_NUMBERS: Final[dict[str, int]] = {
    "水二局": 2,
    "木三局": 3,
    "金四局": 4,
    "土五局": 5,
    "火六局": 6,
}


class Brightness(StrEnum):
    BRIGHT = "bright"
    DIM = "dim"


@dataclass(frozen=True)
class BirthInput:
    """Gregorian birth data supplied by the caller.

    Construction validates that the date exists, the hour is a clock hour and
    the gender is one of :class:`Gender`; invalid data raises
    :class:`~ziweiengine.zi_wei.errors.InvalidInput`.
    """

    year: int
    month: int
    day: int
    hour: int
    gender: Gender
    subject_label: str = ""

    def __post_init__(self) -> None:
        for field_name in ("year", "month", "day", "hour"):
            value = getattr(self, field_name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidInput(
                    f"Birth {field_name} must be an integer, got {value!r}", key=field_name
                )
        try:
            date(self.year, self.month, self.day)
        except ValueError as exc:
            raise InvalidInput(
                f"Invalid birth date {self.year}-{self.month}-{self.day}: {exc}",
                key=(self.year, self.month, self.day),
            ) from exc
        if not 0 <= self.hour <= 23:
            raise InvalidInput(f"Birth hour must be within 0-23, got {self.hour}", key=self.hour)
        try:
            gender = Gender(str(self.gender).lower())
        except ValueError:
            raise InvalidInput(
                f"Gender must be 'male' or 'female', got {self.gender!r}", key=self.gender
            ) from None
        object.__setattr__(self, "gender", gender)

    @property
    def birth_date(self) -> date:
        return date(self.year, self.month, self.day)

    def describe(self) -> str:
        return f"{self.year:04d}-{self.month:02d}-{self.day:02d} {self.hour:02d}:00 {self.gender.value}"


@dataclass
class Star:
    """A star placed on the workspace; tags accumulate as stages run."""

    name: StarName
    palace: int
    brightness: Brightness = Brightness.BRIGHT
    transformations: list[Transformation] = field(default_factory=list)
    self_influence: list[Transformation] = field(default_factory=list)

    @property
    def has_self_influence(self) -> bool:
        return bool(self.self_influence)


@dataclass(frozen=True)
class MajorLimit:
    """Ten-year age band (大限) governed by a palace."""

    start_age: int
    end_age: int

    def contains(self, age: int) -> bool:
        return self.start_age <= age <= self.end_age

    def label(self) -> str:
        return f"{self.start_age}-{self.end_age}"


@dataclass(frozen=True)
class AnnualFlow:
    """Calendar year (流年) projected onto a palace."""

    year: int
    stem: HeavenlyStem
    branch: EarthlyBranch

    def label(self) -> str:
        return f"{self.year} {self.stem.chinese}{self.branch.chinese}"


@dataclass(frozen=True)
class OppositeInfluence:
    """A transformation the palace's stem casts onto a star across the chart."""

    star: StarName
    transformation: Transformation
    source_palace: int


@dataclass
class Palace:
    """One of the twelve chart positions.

    ``position`` and ``branch`` are fixed when the workspace is created; every
    other attribute is filled in by a pipeline stage.
    """

    position: int
    branch: EarthlyBranch
    stem: HeavenlyStem | None = None
    name: PalaceName | None = None
    primary_stars: list[Star] = field(default_factory=list)
    auxiliary_stars: list[Star] = field(default_factory=list)
    year_stars: list[Star] = field(default_factory=list)
    month_stars: list[Star] = field(default_factory=list)
    day_stars: list[Star] = field(default_factory=list)
    hour_stars: list[Star] = field(default_factory=list)
    major_limit: MajorLimit | None = None
    annual_flow: AnnualFlow | None = None
    self_influence: list[Transformation] = field(default_factory=list)
    opposite_influence: list[OppositeInfluence] = field(default_factory=list)

    def iter_stars(self) -> Iterator[Star]:
        """Yield every star in the palace, primary stars first."""

        yield from self.primary_stars
        yield from self.auxiliary_stars
        yield from self.year_stars
        yield from self.month_stars
        yield from self.day_stars
        yield from self.hour_stars
