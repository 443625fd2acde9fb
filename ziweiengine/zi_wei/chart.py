"""Immutable Zi Wei chart returned to callers."""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import date
from types import MappingProxyType
from typing import Any

from ..chinese.constants import EarthlyBranch, HeavenlyStem, Polarity
from ..chinese.lunar import LunarDate
from .errors import InvariantViolation
from .models import (
    PALACE_COUNT,
    AnnualFlow,
    BirthInput,
    Brightness,
    FiveElement,
    MajorLimit,
    OppositeInfluence,
    Palace,
    PalaceName,
    Star,
    StarName,
    Transformation,
)
from .tables import opposite_palace_name
from .workspace import ChartWorkspace

__all__ = ["ZiWeiStar", "ZiWeiPalace", "ZiWeiChart", "freeze_workspace"]


@dataclass(frozen=True)
class ZiWeiStar:
    """Star entry in a :class:`ZiWeiPalace`."""

    name: StarName
    palace: int
    brightness: Brightness = Brightness.BRIGHT
    transformations: tuple[Transformation, ...] = ()
    self_influence: tuple[Transformation, ...] = ()

    @property
    def category(self) -> str:
        return "primary" if self.name.is_primary else "auxiliary"

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name.value,
            "pinyin": self.name.pinyin,
            "category": self.category,
            "brightness": self.brightness.value,
            "transformations": [item.value for item in self.transformations],
            "self_influence": [item.value for item in self.self_influence],
        }


@dataclass(frozen=True)
class ZiWeiPalace:
    """Single palace within the Zi Wei chart."""

    position: int
    name: PalaceName
    branch: EarthlyBranch
    stem: HeavenlyStem
    primary_stars: tuple[ZiWeiStar, ...]
    auxiliary_stars: tuple[ZiWeiStar, ...]
    year_stars: tuple[ZiWeiStar, ...]
    month_stars: tuple[ZiWeiStar, ...]
    day_stars: tuple[ZiWeiStar, ...]
    hour_stars: tuple[ZiWeiStar, ...]
    major_limit: MajorLimit
    annual_flow: AnnualFlow
    self_influence: tuple[Transformation, ...] = ()
    opposite_influence: tuple[OppositeInfluence, ...] = ()

    @property
    def stars(self) -> tuple[ZiWeiStar, ...]:
        return (
            self.primary_stars
            + self.auxiliary_stars
            + self.year_stars
            + self.month_stars
            + self.day_stars
            + self.hour_stars
        )

    @property
    def has_primary_stars(self) -> bool:
        return bool(self.primary_stars)

    def to_dict(self) -> dict[str, Any]:
        return {
            "position": self.position,
            "name": self.name.value,
            "english": self.name.english,
            "branch": self.branch.chinese,
            "stem": self.stem.chinese,
            "primary_stars": [star.to_dict() for star in self.primary_stars],
            "auxiliary_stars": [star.to_dict() for star in self.auxiliary_stars],
            "year_stars": [star.to_dict() for star in self.year_stars],
            "month_stars": [star.to_dict() for star in self.month_stars],
            "day_stars": [star.to_dict() for star in self.day_stars],
            "hour_stars": [star.to_dict() for star in self.hour_stars],
            "major_limit": {
                "start_age": self.major_limit.start_age,
                "end_age": self.major_limit.end_age,
            },
            "annual_flow": {
                "year": self.annual_flow.year,
                "stem": self.annual_flow.stem.chinese,
                "branch": self.annual_flow.branch.chinese,
            },
            "self_influence": [item.value for item in self.self_influence],
            "opposite_influence": [
                {
                    "star": item.star.value,
                    "transformation": item.transformation.value,
                    "source_palace": item.source_palace,
                }
                for item in self.opposite_influence
            ],
        }


@dataclass(frozen=True)
class ZiWeiChart:
    """Container for a complete Zi Wei Dou Shu chart."""

    birth: BirthInput
    as_of: date
    lunar_date: LunarDate
    year_stem: HeavenlyStem
    year_branch: EarthlyBranch
    polarity: Polarity
    hour_branch: EarthlyBranch
    life_palace: int
    five_element: FiveElement
    zi_wei_position: int
    major_limits_clockwise: bool
    palaces: tuple[ZiWeiPalace, ...]
    main_star: StarName | None
    trace: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    provenance: Mapping[str, object] = field(default_factory=lambda: MappingProxyType({}))

    def __iter__(self) -> Iterator[ZiWeiPalace]:
        return iter(self.palaces)

    def palace_at(self, position: int) -> ZiWeiPalace:
        """Return the palace at ``position`` (1-12)."""

        if not 1 <= position <= PALACE_COUNT:
            raise KeyError(position)
        return self.palaces[position - 1]

    def palace_by_name(self, name: PalaceName | str) -> ZiWeiPalace:
        """Return the palace named ``name`` (Chinese label or English name)."""

        for palace in self.palaces:
            if name in (palace.name, palace.name.value, palace.name.english):
                return palace
        raise KeyError(name)

    @property
    def life(self) -> ZiWeiPalace:
        return self.palace_at(self.life_palace)

    def opposite_of(self, palace: ZiWeiPalace) -> ZiWeiPalace:
        return self.palace_by_name(opposite_palace_name(palace.name))

    def find_star(self, name: StarName) -> ZiWeiStar | None:
        for palace in self.palaces:
            for star in palace.stars:
                if star.name is name:
                    return star
        return None

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-compatible representation of the chart."""

        return {
            "birth": {
                "year": self.birth.year,
                "month": self.birth.month,
                "day": self.birth.day,
                "hour": self.birth.hour,
                "gender": self.birth.gender.value,
                "subject_label": self.birth.subject_label,
            },
            "as_of": self.as_of.isoformat(),
            "lunar_date": {
                "year": self.lunar_date.year,
                "month": self.lunar_date.month,
                "day": self.lunar_date.day,
                "is_leap": self.lunar_date.is_leap,
            },
            "year_stem": self.year_stem.chinese,
            "year_branch": self.year_branch.chinese,
            "polarity": self.polarity.value,
            "hour_branch": self.hour_branch.chinese,
            "life_palace": self.life_palace,
            "five_element": self.five_element.value,
            "five_element_number": self.five_element.number,
            "zi_wei_position": self.zi_wei_position,
            "major_limits_clockwise": self.major_limits_clockwise,
            "main_star": self.main_star.value if self.main_star else None,
            "palaces": [palace.to_dict() for palace in self.palaces],
            "trace": dict(self.trace),
            "provenance": dict(self.provenance),
        }


def _freeze_stars(stars: Sequence[Star]) -> tuple[ZiWeiStar, ...]:
    return tuple(
        ZiWeiStar(
            name=star.name,
            palace=star.palace,
            brightness=star.brightness,
            transformations=tuple(star.transformations),
            self_influence=tuple(star.self_influence),
        )
        for star in stars
    )


def _freeze_palace(palace: Palace) -> ZiWeiPalace:
    if (
        palace.stem is None
        or palace.name is None
        or palace.major_limit is None
        or palace.annual_flow is None
    ):
        raise InvariantViolation(
            f"Palace {palace.position} is incomplete and cannot be formatted",
            key=palace.position,
        )
    return ZiWeiPalace(
        position=palace.position,
        name=palace.name,
        branch=palace.branch,
        stem=palace.stem,
        primary_stars=_freeze_stars(palace.primary_stars),
        auxiliary_stars=_freeze_stars(palace.auxiliary_stars),
        year_stars=_freeze_stars(palace.year_stars),
        month_stars=_freeze_stars(palace.month_stars),
        day_stars=_freeze_stars(palace.day_stars),
        hour_stars=_freeze_stars(palace.hour_stars),
        major_limit=palace.major_limit,
        annual_flow=palace.annual_flow,
        self_influence=tuple(palace.self_influence),
        opposite_influence=tuple(palace.opposite_influence),
    )


def freeze_workspace(
    ws: ChartWorkspace, *, provenance: Mapping[str, object] | None = None
) -> ZiWeiChart:
    """Copy a fully processed workspace into an immutable :class:`ZiWeiChart`."""

    palaces = tuple(_freeze_palace(palace) for palace in ws.palaces)
    life_palace = ws.require("life_palace")
    life = palaces[life_palace - 1]
    main_star = life.primary_stars[0].name if life.primary_stars else None
    return ZiWeiChart(
        birth=ws.birth,
        as_of=ws.as_of,
        lunar_date=ws.require("lunar_date"),
        year_stem=ws.require("year_stem"),
        year_branch=ws.require("year_branch"),
        polarity=ws.require("polarity"),
        hour_branch=ws.require("hour_branch"),
        life_palace=life_palace,
        five_element=ws.require("five_element"),
        zi_wei_position=ws.require("zi_wei_position"),
        major_limits_clockwise=ws.require("major_limits_clockwise"),
        palaces=palaces,
        main_star=main_star,
        trace=MappingProxyType(dict(ws.trace)),
        provenance=MappingProxyType(dict(provenance or {})),
    )
