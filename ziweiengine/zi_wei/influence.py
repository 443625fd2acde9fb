"""Star index construction and palace-stem influence resolution."""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

from .errors import InvariantViolation, LookupMiss
from .models import OppositeInfluence, StarName
from .stages import StageContext
from .tables import opposite_palace_name, transformation_rules
from .workspace import ChartWorkspace, StarLocation

__all__ = ["PLACEMENT_STAGES", "build_star_index", "index_stars", "resolve_influences"]

PLACEMENT_STAGES: tuple[str, ...] = ("zi_wei", "primary_stars", "auxiliary_stars")


def build_star_index(ws: ChartWorkspace) -> Mapping[StarName, StarLocation]:
    """Map every placed star name to its record and palace position.

    Raises
    ------
    InvariantViolation
        If the same star was placed twice.
    """

    index: dict[StarName, StarLocation] = {}
    for palace in ws.palaces:
        for star in palace.iter_stars():
            if star.name in index:
                raise InvariantViolation(
                    f"{star.name.value} placed in palaces {index[star.name].palace} "
                    f"and {palace.position}",
                    key=star.name,
                )
            index[star.name] = StarLocation(star=star, palace=palace.position)
    return MappingProxyType(index)


def index_stars(ws: ChartWorkspace, ctx: StageContext) -> str:
    """Build the star index once every placement stage has run."""

    ws.require_stages(PLACEMENT_STAGES)
    ws.star_index = build_star_index(ws)
    return f"{len(ws.star_index)} stars indexed"


def resolve_influences(ws: ChartWorkspace, ctx: StageContext) -> str:
    """Apply each palace stem's transformations to its own and its opposite palace.

    A rule naming a star inside the palace tags that star (and the palace) with
    a self-influence; a rule naming a star in the opposite palace is recorded on
    the palace as an :class:`OppositeInfluence`.
    """

    star_index = ws.require("star_index")
    self_count = 0
    opposite_count = 0
    for palace in ws.palaces:
        if palace.stem is None or palace.name is None:
            raise InvariantViolation(
                f"Palace {palace.position} is missing its stem or name", key=palace.position
            )
        opposite = ws.palace_by_name(opposite_palace_name(palace.name))
        for kind, target in transformation_rules(palace.stem):
            location = star_index.get(target)
            if location is None:
                raise LookupMiss(
                    f"{palace.stem.chinese} palace {kind.value} target {target.value} "
                    "is not on the chart",
                    key=target,
                )
            if location.palace == palace.position:
                location.star.self_influence.append(kind)
                palace.self_influence.append(kind)
                self_count += 1
            elif location.palace == opposite.position:
                palace.opposite_influence.append(
                    OppositeInfluence(
                        star=target, transformation=kind, source_palace=opposite.position
                    )
                )
                opposite_count += 1
    return f"{self_count} self influences, {opposite_count} opposite influences"
