"""Palace lookups used by report consumers of a finished chart."""

from __future__ import annotations

from datetime import date

from .chart import ZiWeiChart, ZiWeiPalace
from .models import PALACE_COUNT

__all__ = [
    "WEALTH_OFFSET",
    "CAREER_OFFSET",
    "palace_at_offset",
    "wealth_palace",
    "career_palace",
    "age_on",
    "major_limit_palace",
    "current_major_limit_palace",
]

WEALTH_OFFSET = 4
CAREER_OFFSET = 6


def palace_at_offset(chart: ZiWeiChart, offset: int, *, fallback: bool = True) -> ZiWeiPalace:
    """Return the palace ``offset`` positions clockwise from the life palace.

    With ``fallback`` set, a palace holding no primary stars is replaced by
    its opposite palace, as empty palaces borrow their opposite's stars.
    """

    position = (chart.life_palace - 1 + offset) % PALACE_COUNT + 1
    palace = chart.palace_at(position)
    if fallback and not palace.has_primary_stars:
        return chart.opposite_of(palace)
    return palace


def wealth_palace(chart: ZiWeiChart) -> ZiWeiPalace:
    return palace_at_offset(chart, WEALTH_OFFSET)


def career_palace(chart: ZiWeiChart) -> ZiWeiPalace:
    return palace_at_offset(chart, CAREER_OFFSET)


def age_on(birth: date, today: date) -> int:
    """Return whole years elapsed between ``birth`` and ``today`` (never negative)."""

    return max(0, int((today - birth).days // 365.25))


def major_limit_palace(chart: ZiWeiChart, age: int) -> ZiWeiPalace | None:
    """Return the palace whose ten-year band contains ``age``."""

    for palace in chart.palaces:
        if palace.major_limit.contains(age):
            return palace
    return None


def current_major_limit_palace(chart: ZiWeiChart) -> ZiWeiPalace | None:
    """Return the major-limit palace active on the chart's ``as_of`` date."""

    return major_limit_palace(chart, age_on(chart.birth.birth_date, chart.as_of))
