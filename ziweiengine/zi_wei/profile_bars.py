"""Palace star profiles scored as 0-100 bars.

Each profile scores stars along five axes. Per axis the weighted score sum is
normalised by the weighted magnitude cap, so ``-cap..+cap`` maps to ``0..100``
before the friendly uplift:

* ``hard`` floor mode shifts the midpoint up to ``neutral_bar`` and clamps
  the result to ``[min_floor, 100]``;
* ``rescale`` floor mode compresses ``0..100`` into ``[min_floor, 100]``.

An axis that no star touches reports ``neutral_bar``.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from types import MappingProxyType
from typing import Final, TypeVar

from .chart import ZiWeiChart, ZiWeiPalace
from .models import StarName
from .selectors import career_palace, wealth_palace
from .wealth_code import coerce_star

__all__ = [
    "WealthAxis",
    "CareerAxis",
    "LifeAxis",
    "FloorMode",
    "BarOptions",
    "WEALTH_SCORES",
    "CAREER_SCORES",
    "LIFE_SCORES",
    "ExecutionType",
    "ExecutionProfile",
    "compute_bars",
    "compute_wealth_bars",
    "compute_career_bars",
    "compute_life_bars",
    "classify_execution",
    "wealth_bars_for_chart",
    "career_bars_for_chart",
    "life_bars_for_chart",
    "execution_style_for_chart",
]

AxisT = TypeVar("AxisT", bound=StrEnum)


class WealthAxis(StrEnum):
    EARNING = "earning_drive"
    ASSET = "asset_strategy"
    RISK = "risk_leverage"
    DISCIPLINE = "money_discipline"
    DEALFLOW = "deal_flow_network"


class CareerAxis(StrEnum):
    SPEED = "decision_speed"
    STRUCTURE = "structure_preference"
    RISK = "risk_tolerance"
    COLLAB = "collaboration"
    CLARITY = "clarity_focus"


class LifeAxis(StrEnum):
    IDENTITY = "identity_confidence"
    DRIVE = "drive_initiative"
    ADAPT = "adaptability"
    POISE = "emotional_poise"
    CLARITY = "clarity_judgment"


class FloorMode(StrEnum):
    HARD = "hard"
    RESCALE = "rescale"


@dataclass(frozen=True)
class BarOptions:
    """Weights and uplift applied when turning axis scores into bars."""

    major_weight: float = 1.0
    support_weight: float = 0.5
    min_floor: float = 60.0
    neutral_bar: float = 70.0
    floor_mode: FloorMode = FloorMode.HARD


_DEFAULT_OPTIONS: Final[BarOptions] = BarOptions()


def _scores(axis_type: type[AxisT], **scores: int) -> Mapping[AxisT, int]:
    return MappingProxyType(
        {axis_type[name.upper()]: value for name, value in scores.items() if value}
    )


def _table(
    axis_type: type[AxisT], rows: Mapping[StarName, Mapping[str, int]]
) -> Mapping[StarName, Mapping[AxisT, int]]:
    return MappingProxyType({star: _scores(axis_type, **row) for star, row in rows.items()})


WEALTH_SCORES: Final[Mapping[StarName, Mapping[WealthAxis, int]]] = _table(
    WealthAxis,
    {
        StarName.ZI_WEI: dict(asset=2, discipline=1, dealflow=1),
        StarName.PO_JUN: dict(earning=2, asset=-1, risk=3, discipline=-1),
        StarName.TIAN_FU: dict(asset=2, earning=-1, discipline=1, risk=-1),
        StarName.LIAN_ZHEN: dict(earning=1, asset=-1, risk=1, dealflow=1),
        StarName.TAI_YIN: dict(earning=-1, asset=1, discipline=2, risk=-1),
        StarName.TAN_LANG: dict(earning=2, asset=-1, risk=2, discipline=-2, dealflow=2),
        StarName.JU_MEN: dict(earning=-1, asset=1, discipline=1),
        StarName.TIAN_TONG: dict(earning=-1, discipline=1, risk=-1, dealflow=1),
        StarName.TIAN_XIANG: dict(asset=2, discipline=1, risk=-1),
        StarName.WU_QU: dict(earning=2, asset=1, discipline=1, risk=1),
        StarName.TIAN_LIANG: dict(asset=2, discipline=1, risk=-1, dealflow=1),
        StarName.TAI_YANG: dict(earning=2, dealflow=1, risk=1),
        StarName.QI_SHA: dict(earning=2, risk=2, discipline=-1),
        StarName.TIAN_JI: dict(asset=2, dealflow=1),
        StarName.ZUO_FU: dict(discipline=1, asset=1, dealflow=1),
        StarName.YOU_BI: dict(discipline=1, asset=1, dealflow=1),
        StarName.WEN_CHANG: dict(asset=2, discipline=1),
        StarName.WEN_QU: dict(asset=1, discipline=1, dealflow=1),
    },
)

# Shared by the career bars and the execution-style classifier.
CAREER_SCORES: Final[Mapping[StarName, Mapping[CareerAxis, int]]] = _table(
    CareerAxis,
    {
        StarName.ZI_WEI: dict(structure=2, speed=-1, collab=1, clarity=1),
        StarName.PO_JUN: dict(speed=2, structure=-2, risk=3, collab=-1, clarity=-1),
        StarName.TIAN_FU: dict(structure=2, speed=-1, risk=-1, collab=1),
        StarName.LIAN_ZHEN: dict(speed=1, structure=-1, risk=1),
        StarName.TAI_YIN: dict(speed=-2, structure=1, collab=2, risk=-1, clarity=1),
        StarName.TAN_LANG: dict(speed=2, structure=-2, risk=2, collab=1, clarity=-1),
        StarName.JU_MEN: dict(structure=1, speed=-1, clarity=1),
        StarName.TIAN_TONG: dict(speed=-2, collab=2, risk=-1),
        StarName.TIAN_XIANG: dict(structure=2, speed=-1, collab=1, clarity=1, risk=-1),
        StarName.WU_QU: dict(structure=1, speed=1, risk=1),
        StarName.TIAN_LIANG: dict(structure=2, speed=-1, collab=1, clarity=1, risk=-1),
        StarName.TAI_YANG: dict(speed=2, collab=1, risk=1),
        StarName.QI_SHA: dict(speed=2, risk=2, collab=-1),
        StarName.TIAN_JI: dict(speed=-2, structure=1, clarity=2),
        StarName.ZUO_FU: dict(collab=1, structure=1),
        StarName.YOU_BI: dict(collab=1, structure=1),
        StarName.WEN_CHANG: dict(structure=2, clarity=1),
        StarName.WEN_QU: dict(structure=2, clarity=1),
    },
)

LIFE_SCORES: Final[Mapping[StarName, Mapping[LifeAxis, int]]] = _table(
    LifeAxis,
    {
        StarName.ZI_WEI: dict(identity=2, adapt=-1, poise=1, clarity=1),
        StarName.PO_JUN: dict(identity=1, drive=2, adapt=2, poise=-2, clarity=-1),
        StarName.TIAN_FU: dict(identity=1, drive=-1, adapt=-1, poise=2, clarity=1),
        StarName.LIAN_ZHEN: dict(identity=1, drive=1, adapt=1, poise=-1),
        StarName.TAI_YIN: dict(drive=-1, adapt=1, poise=2, clarity=1),
        StarName.TAN_LANG: dict(identity=1, drive=2, adapt=2, poise=-1, clarity=-1),
        StarName.JU_MEN: dict(drive=-1, poise=-1, clarity=1),
        StarName.TIAN_TONG: dict(drive=-2, adapt=1, poise=2),
        StarName.TIAN_XIANG: dict(identity=1, adapt=1, poise=1, clarity=1),
        StarName.WU_QU: dict(identity=1, drive=2, adapt=-1, clarity=1),
        StarName.TIAN_LIANG: dict(identity=1, drive=-1, poise=2, clarity=1),
        StarName.TAI_YANG: dict(identity=2, drive=2, adapt=1, poise=-1, clarity=1),
        StarName.QI_SHA: dict(identity=1, drive=3, adapt=1, poise=-2, clarity=-1),
        StarName.TIAN_JI: dict(drive=-1, adapt=2, poise=-1, clarity=2),
        StarName.ZUO_FU: dict(adapt=1, poise=1, clarity=1),
        StarName.YOU_BI: dict(adapt=1, poise=1, clarity=1),
        StarName.WEN_CHANG: dict(clarity=2),
        StarName.WEN_QU: dict(identity=1, poise=1, clarity=2),
    },
)


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def _to_bar(total: float, cap: float, options: BarOptions) -> int:
    if not cap:
        return _round_half_up(options.neutral_bar)
    base = 50.0 + (total / cap) * 50.0
    if options.floor_mode is FloorMode.RESCALE:
        lifted = options.min_floor + (100.0 - options.min_floor) * (base / 100.0)
    else:
        lifted = min(100.0, base + options.neutral_bar - 50.0)
        lifted = max(options.min_floor, lifted)
    return _round_half_up(lifted)


def compute_bars(
    table: Mapping[StarName, Mapping[AxisT, int]],
    axes: type[AxisT],
    majors: Iterable[StarName | str],
    supports: Iterable[StarName | str] = (),
    options: BarOptions | None = None,
) -> dict[AxisT, int]:
    """Score ``majors`` and ``supports`` against ``table`` and return one bar per axis."""

    opts = options or _DEFAULT_OPTIONS
    totals: dict[AxisT, float] = {}
    caps: dict[AxisT, float] = {}
    weighted = [(star, opts.major_weight) for star in majors]
    weighted += [(star, opts.support_weight) for star in supports]
    for raw, weight in weighted:
        star = coerce_star(raw)
        if star is None:
            continue
        for axis, score in table.get(star, {}).items():
            totals[axis] = totals.get(axis, 0.0) + score * weight
            caps[axis] = caps.get(axis, 0.0) + abs(score) * weight
    return {axis: _to_bar(totals.get(axis, 0.0), caps.get(axis, 0.0), opts) for axis in axes}


def compute_wealth_bars(
    majors: Iterable[StarName | str],
    supports: Iterable[StarName | str] = (),
    options: BarOptions | None = None,
) -> dict[WealthAxis, int]:
    return compute_bars(WEALTH_SCORES, WealthAxis, majors, supports, options)


def compute_career_bars(
    majors: Iterable[StarName | str],
    supports: Iterable[StarName | str] = (),
    options: BarOptions | None = None,
) -> dict[CareerAxis, int]:
    return compute_bars(CAREER_SCORES, CareerAxis, majors, supports, options)


def compute_life_bars(
    majors: Iterable[StarName | str],
    supports: Iterable[StarName | str] = (),
    options: BarOptions | None = None,
) -> dict[LifeAxis, int]:
    return compute_bars(LIFE_SCORES, LifeAxis, majors, supports, options)


class ExecutionType(StrEnum):
    """Execution style quadrant from decision speed and structure preference."""

    COMMANDER = "Commander"
    ARCHITECT = "Architect"
    CATALYST = "Catalyst"
    INTEGRATOR = "Integrator"

    @property
    def chinese(self) -> str:
        return _EXECUTION_CHINESE[self]


_EXECUTION_CHINESE: Final[Mapping[ExecutionType, str]] = MappingProxyType(
    {
        ExecutionType.COMMANDER: "指挥官",
        ExecutionType.ARCHITECT: "架构师",
        ExecutionType.CATALYST: "催化者",
        ExecutionType.INTEGRATOR: "整合者",
    }
)


@dataclass(frozen=True)
class ExecutionProfile:
    style: ExecutionType
    bars: Mapping[CareerAxis, int] = field(default_factory=dict)
    raw: Mapping[CareerAxis, int] = field(default_factory=dict)


def classify_execution(stars: Iterable[StarName | str]) -> ExecutionProfile:
    """Sum the unweighted career scores of ``stars`` and pick the quadrant.

    Bars here are linear, ``50 + 8 * score`` clamped to ``0..100``, with no
    uplift.
    """

    raw = dict.fromkeys(CareerAxis, 0)
    for value in stars:
        star = coerce_star(value)
        if star is None:
            continue
        for axis, score in CAREER_SCORES[star].items():
            raw[axis] += score

    fast = raw[CareerAxis.SPEED] >= 0
    structured = raw[CareerAxis.STRUCTURE] >= 0
    if fast and structured:
        style = ExecutionType.COMMANDER
    elif structured:
        style = ExecutionType.ARCHITECT
    elif fast:
        style = ExecutionType.CATALYST
    else:
        style = ExecutionType.INTEGRATOR

    bars = {axis: max(0, min(100, 50 + score * 8)) for axis, score in raw.items()}
    return ExecutionProfile(style=style, bars=MappingProxyType(bars), raw=MappingProxyType(raw))


def _palace_stars(
    palace: ZiWeiPalace, include_auxiliary: bool
) -> tuple[list[StarName], list[StarName]]:
    majors = [star.name for star in palace.primary_stars]
    supports = [star.name for star in palace.auxiliary_stars] if include_auxiliary else []
    return majors, supports


def wealth_bars_for_chart(
    chart: ZiWeiChart, *, options: BarOptions | None = None, include_auxiliary: bool = False
) -> dict[WealthAxis, int]:
    """Wealth bars for the wealth palace, borrowing the opposite palace when empty."""

    majors, supports = _palace_stars(wealth_palace(chart), include_auxiliary)
    return compute_wealth_bars(majors, supports, options)


def career_bars_for_chart(
    chart: ZiWeiChart, *, options: BarOptions | None = None, include_auxiliary: bool = False
) -> dict[CareerAxis, int]:
    """Career bars for the career palace, borrowing the opposite palace when empty."""

    majors, supports = _palace_stars(career_palace(chart), include_auxiliary)
    return compute_career_bars(majors, supports, options)


def life_bars_for_chart(
    chart: ZiWeiChart, *, options: BarOptions | None = None, include_auxiliary: bool = False
) -> dict[LifeAxis, int]:
    """Life bars for the life palace itself; an empty life palace reads neutral."""

    majors, supports = _palace_stars(chart.life, include_auxiliary)
    return compute_life_bars(majors, supports, options)


def execution_style_for_chart(chart: ZiWeiChart) -> ExecutionProfile | None:
    """Execution style of the career palace stars, or ``None`` when it has none."""

    stars = [star.name for star in career_palace(chart).primary_stars]
    if not stars:
        return None
    return classify_execution(stars)
