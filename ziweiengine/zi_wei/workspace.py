"""Per-request mutable state threaded through the pipeline stages."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date
from typing import Any

from ..chinese.constants import EarthlyBranch, HeavenlyStem, Polarity
from ..chinese.lunar import LunarDate
from .errors import InvariantViolation, LookupMiss
from .models import PALACE_COUNT, BirthInput, FiveElement, Palace, PalaceName, Star, StarName
from .tables import palace_branch

__all__ = ["StarLocation", "ChartWorkspace"]


@dataclass(frozen=True)
class StarLocation:
    """Where a star was placed: the star record and its palace position."""

    star: Star
    palace: int


@dataclass
class ChartWorkspace:
    """Scratch record for one chart calculation.

    A workspace is created per request, mutated in place by each stage and
    discarded once the frozen chart has been produced.
    """

    birth: BirthInput
    as_of: date
    palaces: list[Palace]
    lunar_date: LunarDate | None = None
    year_stem: HeavenlyStem | None = None
    year_branch: EarthlyBranch | None = None
    polarity: Polarity | None = None
    hour_branch: EarthlyBranch | None = None
    life_palace: int | None = None
    five_element: FiveElement | None = None
    zi_wei_position: int | None = None
    major_limits_clockwise: bool | None = None
    star_index: Mapping[StarName, StarLocation] | None = None
    completed: list[str] = field(default_factory=list)
    trace: dict[str, str] = field(default_factory=dict)

    @classmethod
    def create(cls, birth: BirthInput, as_of: date) -> ChartWorkspace:
        palaces = [
            Palace(position=position, branch=palace_branch(position))
            for position in range(1, PALACE_COUNT + 1)
        ]
        return cls(birth=birth, as_of=as_of, palaces=palaces)

    def palace(self, position: int) -> Palace:
        """Return the palace at ``position`` (1-12)."""

        if not 1 <= position <= PALACE_COUNT:
            raise LookupMiss(f"Palace position out of range: {position}", key=position)
        return self.palaces[position - 1]

    def palace_for_branch(self, branch: EarthlyBranch) -> Palace:
        for palace in self.palaces:
            if palace.branch == branch:
                return palace
        raise LookupMiss(f"No palace sits on branch {branch}", key=branch)

    def palace_by_name(self, name: PalaceName) -> Palace:
        for palace in self.palaces:
            if palace.name == name:
                return palace
        raise LookupMiss(f"No palace is named {name.value}", key=name)

    def require(self, attribute: str) -> Any:
        """Return ``attribute`` or fail when an earlier stage has not set it."""

        value = getattr(self, attribute)
        if value is None:
            raise InvariantViolation(
                f"{attribute} is not available; an earlier stage did not run",
                key=attribute,
            )
        return value

    def require_stages(self, names: tuple[str, ...]) -> None:
        missing = [name for name in names if name not in self.completed]
        if missing:
            raise InvariantViolation(
                f"requires {', '.join(missing)} to have completed first",
                key=tuple(missing),
            )
