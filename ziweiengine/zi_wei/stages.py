"""Placement and timing stages of the Zi Wei pipeline.

Each stage reads what earlier stages wrote to the
:class:`~ziweiengine.zi_wei.workspace.ChartWorkspace`, mutates it in place and
returns a one-line diagnostic message for the calculation trace.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ..chinese.constants import EarthlyBranch, Polarity, stem_for_index
from ..chinese.lunar import LunarConverter, LunarDate
from ..chinese.sexagenary import hour_branch_for_clock_hour, year_cycle_entry
from .errors import InvalidInput, InvariantViolation, LookupMiss
from .models import (
    PALACE_COUNT,
    PALACE_NAMES,
    AnnualFlow,
    FiveElement,
    Gender,
    MajorLimit,
    Star,
    StarName,
)
from .tables import (
    five_element_for,
    life_palace_branch,
    lunar_day_label,
    main_star_layout,
    major_limit_start_age,
    palace_stem_anchor,
    transformation_rules,
    wen_chang_branch,
    wen_qu_branch,
    you_bi_branch,
    zi_wei_branch,
    zuo_fu_branch,
)
from .workspace import ChartWorkspace

LOG = logging.getLogger(__name__)

__all__ = [
    "StageContext",
    "PRIMARY_STAR_COUNT",
    "resolve_year_pillar",
    "assign_palace_stems",
    "locate_life_palace",
    "name_palaces",
    "classify_five_element",
    "place_zi_wei",
    "place_primary_stars",
    "place_auxiliary_stars",
    "apply_birth_year_transformations",
    "assign_major_limits",
    "project_annual_flow",
    "major_limits_run_clockwise",
]

PRIMARY_STAR_COUNT = 14
_MAJOR_LIMIT_SPAN = 10


@dataclass(frozen=True)
class StageContext:
    """Collaborators and settings shared by every stage of one calculation."""

    converter: LunarConverter
    annual_reference_year: int = 2013


def _wrap(position: int) -> int:
    return (position - 1) % PALACE_COUNT + 1


def resolve_year_pillar(ws: ChartWorkspace, ctx: StageContext) -> str:
    """Convert the birth date and derive the year stem, branch and polarity."""

    birth = ws.birth
    try:
        lunar = ctx.converter.to_lunar(birth.year, birth.month, birth.day)
    except ValueError as exc:
        raise InvalidInput(
            f"Cannot convert {birth.birth_date.isoformat()} to the lunar calendar: {exc}",
            key=birth.birth_date,
        ) from exc
    if not isinstance(lunar, LunarDate):
        raise InvariantViolation(
            f"Lunar converter returned {type(lunar).__name__}, expected LunarDate",
            key=type(lunar).__name__,
        )

    entry = year_cycle_entry(lunar.year)
    ws.lunar_date = lunar
    ws.year_stem = entry.stem
    ws.year_branch = entry.branch
    ws.polarity = entry.stem.polarity
    return f"lunar date {lunar.label()}, year {entry.chinese()} ({entry.label()}), {ws.polarity.value}"


def assign_palace_stems(ws: ChartWorkspace, ctx: StageContext) -> str:
    """Rotate the ten stems clockwise from the Yin palace."""

    year_stem = ws.require("year_stem")
    anchor = palace_stem_anchor(year_stem % 5)
    if anchor is None:
        raise InvariantViolation(
            f"No Yin palace stem for year stem {year_stem.chinese}", key=year_stem
        )

    start = ws.palace_for_branch(EarthlyBranch.YIN).position
    for step in range(PALACE_COUNT):
        ws.palace(_wrap(start + step)).stem = stem_for_index(anchor + step)
    return f"Yin palace {start} starts at {anchor.chinese}"


def locate_life_palace(ws: ChartWorkspace, ctx: StageContext) -> str:
    """Find the life palace from the lunar month and the birth double-hour."""

    lunar: LunarDate = ws.require("lunar_date")
    hour_branch = hour_branch_for_clock_hour(ws.birth.hour)
    branch = life_palace_branch(lunar.month, hour_branch)
    palace = ws.palace_for_branch(branch)
    ws.hour_branch = hour_branch
    ws.life_palace = palace.position
    return f"month {lunar.month}, hour {hour_branch.chinese}: life palace {palace.position} ({branch.chinese})"


def name_palaces(ws: ChartWorkspace, ctx: StageContext) -> str:
    """Assign the twelve palace names counter-clockwise from the life palace."""

    life = ws.require("life_palace")
    for offset, name in enumerate(PALACE_NAMES):
        ws.palace(_wrap(life - offset)).name = name
    return f"names assigned counter-clockwise from palace {life}"


def classify_five_element(ws: ChartWorkspace, ctx: StageContext) -> str:
    """Derive the five-element bureau from the life palace stem and branch."""

    life = ws.palace(ws.require("life_palace"))
    if life.stem is None:
        raise InvariantViolation(
            f"Life palace {life.position} has no stem assigned", key=life.position
        )
    element = five_element_for(life.stem, life.branch)
    ws.five_element = element
    return f"life palace {life.stem.chinese}{life.branch.chinese}: {element.value}"


def place_zi_wei(ws: ChartWorkspace, ctx: StageContext) -> str:
    """Locate the anchor star Zi Wei from the lunar day and the bureau."""

    lunar: LunarDate = ws.require("lunar_date")
    element: FiveElement = ws.require("five_element")
    label = lunar_day_label(lunar.day)
    palace = ws.palace_for_branch(zi_wei_branch(label, element))
    palace.primary_stars.append(Star(name=StarName.ZI_WEI, palace=palace.position))
    ws.zi_wei_position = palace.position
    return f"day {label} in {element.value}: Zi Wei at palace {palace.position} ({palace.branch.chinese})"


def place_primary_stars(ws: ChartWorkspace, ctx: StageContext) -> str:
    """Lay out the remaining primary stars around Zi Wei."""

    anchor = ws.palace(ws.require("zi_wei_position"))
    layout = main_star_layout(anchor.branch)
    for branch, names in layout.items():
        palace = ws.palace_for_branch(branch)
        for name in names:
            if name is StarName.ZI_WEI:
                if palace.position != anchor.position:
                    raise InvariantViolation(
                        f"Layout for {anchor.branch.chinese} repeats Zi Wei at {branch.chinese}",
                        key=branch,
                    )
                continue
            palace.primary_stars.append(Star(name=name, palace=palace.position))

    placed = sum(len(palace.primary_stars) for palace in ws.palaces)
    if placed != PRIMARY_STAR_COUNT:
        raise InvariantViolation(
            f"Expected {PRIMARY_STAR_COUNT} primary stars, placed {placed}",
            key=anchor.branch,
        )
    return f"{placed} primary stars placed around {anchor.branch.chinese}"


def place_auxiliary_stars(ws: ChartWorkspace, ctx: StageContext) -> str:
    """Place Zuo Fu and You Bi by lunar month, Wen Chang and Wen Qu by hour."""

    lunar: LunarDate = ws.require("lunar_date")
    hour_branch: EarthlyBranch = ws.require("hour_branch")
    placements = (
        (StarName.ZUO_FU, zuo_fu_branch(lunar.month)),
        (StarName.YOU_BI, you_bi_branch(lunar.month)),
        (StarName.WEN_CHANG, wen_chang_branch(hour_branch)),
        (StarName.WEN_QU, wen_qu_branch(hour_branch)),
    )
    parts = []
    for name, branch in placements:
        palace = ws.palace_for_branch(branch)
        palace.auxiliary_stars.append(Star(name=name, palace=palace.position))
        parts.append(f"{name.value}@{palace.position}")
    return ", ".join(parts)


def _find_star(ws: ChartWorkspace, name: StarName) -> Star | None:
    for palace in ws.palaces:
        for star in palace.iter_stars():
            if star.name is name:
                return star
    return None


def apply_birth_year_transformations(ws: ChartWorkspace, ctx: StageContext) -> str:
    """Tag the four stars transformed by the birth-year stem."""

    year_stem = ws.require("year_stem")
    parts = []
    for kind, target in transformation_rules(year_stem):
        star = _find_star(ws, target)
        if star is None:
            raise LookupMiss(
                f"{year_stem.chinese} year {kind.value} target {target.value} is not on the chart",
                key=target,
            )
        star.transformations.append(kind)
        parts.append(f"{target.value}{kind.value}")
    return ", ".join(parts)


def major_limits_run_clockwise(gender: Gender, polarity: Polarity) -> bool:
    """Yang men and Yin women advance clockwise; everyone else counter-clockwise."""

    return (gender is Gender.MALE) == (polarity is Polarity.YANG)


def assign_major_limits(ws: ChartWorkspace, ctx: StageContext) -> str:
    """Give each palace a ten-year age band, starting at the life palace."""

    life = ws.require("life_palace")
    element: FiveElement = ws.require("five_element")
    polarity: Polarity = ws.require("polarity")
    clockwise = major_limits_run_clockwise(ws.birth.gender, polarity)
    start_age = major_limit_start_age(element)

    for step in range(PALACE_COUNT):
        position = _wrap(life + step if clockwise else life - step)
        first = start_age + _MAJOR_LIMIT_SPAN * step
        ws.palace(position).major_limit = MajorLimit(first, first + _MAJOR_LIMIT_SPAN - 1)
    ws.major_limits_clockwise = clockwise
    direction = "clockwise" if clockwise else "counter-clockwise"
    return f"from age {start_age}, {direction}"


def project_annual_flow(ws: ChartWorkspace, ctx: StageContext) -> str:
    """Project the twelve-year cycle containing ``ws.as_of`` onto the palaces."""

    reference = ctx.annual_reference_year
    cycle_start = reference + PALACE_COUNT * ((ws.as_of.year - reference) // PALACE_COUNT)
    for palace in ws.palaces:
        year = cycle_start + palace.position - 1
        entry = year_cycle_entry(year)
        if entry.branch != palace.branch:
            raise InvariantViolation(
                f"Year {year} ({entry.branch.chinese}) does not fall on palace "
                f"{palace.position} ({palace.branch.chinese})",
                key=year,
            )
        palace.annual_flow = AnnualFlow(year=year, stem=entry.stem, branch=entry.branch)
    return f"cycle {cycle_start}-{cycle_start + PALACE_COUNT - 1} as of {ws.as_of.isoformat()}"
