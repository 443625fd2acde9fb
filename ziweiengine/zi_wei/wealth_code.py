"""Wealth code classification by star votes.

Each star placed in the wealth palace votes for one or more wealth codes; the
codes are ranked by vote count. Unknown star labels are ignored.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import StrEnum
from types import MappingProxyType
from typing import Final

from .chart import ZiWeiChart
from .models import StarName
from .selectors import wealth_palace

LOG = logging.getLogger(__name__)

__all__ = [
    "WealthCode",
    "TieBreak",
    "WEALTH_CODE_PRIORITY",
    "STAR_WEALTH_CODES",
    "WealthCodeVote",
    "coerce_star",
    "classify_wealth_codes",
    "explain_wealth_code_votes",
    "wealth_codes_for_chart",
]


class WealthCode(StrEnum):
    STRATEGY_PLANNER = "Strategy Planner"
    INVESTMENT_BRAIN = "Investment Brain"
    BRANDING_MAGNET = "Branding Magnet"
    COLLABORATOR = "Collaborator"


class TieBreak(StrEnum):
    """Ordering applied between codes with equal votes."""

    PRIORITY = "priority"
    ALPHA = "alpha"


WEALTH_CODE_PRIORITY: Final[tuple[WealthCode, ...]] = tuple(WealthCode)

_S, _I, _B, _C = (
    WealthCode.STRATEGY_PLANNER,
    WealthCode.INVESTMENT_BRAIN,
    WealthCode.BRANDING_MAGNET,
    WealthCode.COLLABORATOR,
)

STAR_WEALTH_CODES: Final[Mapping[StarName, tuple[WealthCode, ...]]] = MappingProxyType(
    {
        StarName.ZI_WEI: (_S,),
        StarName.TIAN_FU: (_I, _S),
        StarName.TIAN_LIANG: (_S, _I),
        StarName.TIAN_XIANG: (_C, _S),
        StarName.TIAN_JI: (_S, _I),
        StarName.WU_QU: (_I, _S),
        StarName.LIAN_ZHEN: (_S,),
        StarName.PO_JUN: (_I,),
        StarName.QI_SHA: (_I,),
        StarName.TAI_YANG: (_B,),
        StarName.TAN_LANG: (_B,),
        StarName.WEN_QU: (_B,),
        StarName.WEN_CHANG: (_B, _I),
        StarName.JU_MEN: (_B, _I),
        StarName.TIAN_TONG: (_C,),
        StarName.ZUO_FU: (_C, _S),
        StarName.YOU_BI: (_C,),
        StarName.TAI_YIN: (_C,),
    }
)

# Simplified spellings accepted for stars whose canonical label is traditional.
_STAR_ALIASES: Final[Mapping[str, StarName]] = MappingProxyType({"左辅": StarName.ZUO_FU})


@dataclass(frozen=True)
class WealthCodeVote:
    """Votes for one wealth code and the distinct stars that cast them."""

    code: WealthCode
    weight: int
    triggers: tuple[StarName, ...]


def coerce_star(value: StarName | str) -> StarName | None:
    """Return the :class:`StarName` for ``value`` or ``None`` when unknown."""

    if isinstance(value, StarName):
        return value
    text = str(value).strip()
    alias = _STAR_ALIASES.get(text)
    if alias is not None:
        return alias
    try:
        return StarName(text)
    except ValueError:
        return None


def _known_stars(stars: Iterable[StarName | str]) -> list[StarName]:
    known = []
    for raw in stars:
        star = coerce_star(raw)
        if star is None:
            LOG.debug("Ignoring unknown star %r", raw)
            continue
        known.append(star)
    return known


def _rank_key(tie_break: TieBreak):
    if tie_break is TieBreak.ALPHA:
        return lambda item: (-item[1], item[0].value)
    return lambda item: (-item[1], WEALTH_CODE_PRIORITY.index(item[0]))


def classify_wealth_codes(
    stars: Iterable[StarName | str],
    *,
    limit: int | None = None,
    tie_break: TieBreak | str = TieBreak.PRIORITY,
) -> list[WealthCode]:
    """Rank the wealth codes voted for by ``stars``.

    Every occurrence of a star casts one vote for each of its codes. Codes
    without votes are dropped; ties follow ``tie_break``. A positive
    ``limit`` truncates the result.
    """

    order = TieBreak(tie_break)
    counts = dict.fromkeys(WEALTH_CODE_PRIORITY, 0)
    for star in _known_stars(stars):
        for code in STAR_WEALTH_CODES[star]:
            counts[code] += 1

    ranked = [code for code, votes in sorted(counts.items(), key=_rank_key(order)) if votes > 0]
    if limit is not None and limit > 0:
        ranked = ranked[:limit]
    return ranked


def explain_wealth_code_votes(stars: Iterable[StarName | str]) -> list[WealthCodeVote]:
    """Return the codes with the distinct stars that triggered each one.

    A star listed twice triggers its codes once; the result is ordered by
    weight and then by :data:`WEALTH_CODE_PRIORITY`.
    """

    triggers: dict[WealthCode, list[StarName]] = {code: [] for code in WEALTH_CODE_PRIORITY}
    for star in _known_stars(stars):
        for code in STAR_WEALTH_CODES[star]:
            if star not in triggers[code]:
                triggers[code].append(star)

    votes = [
        WealthCodeVote(code=code, weight=len(names), triggers=tuple(names))
        for code, names in triggers.items()
        if names
    ]
    votes.sort(key=lambda vote: (-vote.weight, WEALTH_CODE_PRIORITY.index(vote.code)))
    return votes


def wealth_codes_for_chart(chart: ZiWeiChart, *, limit: int | None = 4) -> list[WealthCode]:
    """Classify the primary stars of the chart's wealth palace."""

    palace = wealth_palace(chart)
    return classify_wealth_codes((star.name for star in palace.primary_stars), limit=limit)
