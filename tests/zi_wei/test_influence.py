from __future__ import annotations

from datetime import date

import pytest

from ziweiengine.chinese.constants import HeavenlyStem
from ziweiengine.zi_wei import BirthInput, Gender, InvariantViolation, StarName, Transformation
from ziweiengine.zi_wei.influence import build_star_index, resolve_influences
from ziweiengine.zi_wei.models import PALACE_NAMES, OppositeInfluence, Star
from ziweiengine.zi_wei.pipeline import STAGES, run_stages
from ziweiengine.zi_wei.stages import StageContext
from ziweiengine.zi_wei.workspace import ChartWorkspace


@pytest.fixture
def named_workspace(as_of: date) -> ChartWorkspace:
    """Workspace with all palaces named from life palace 1 and stemmed Gui."""

    birth = BirthInput(year=1990, month=6, day=15, hour=10, gender=Gender.FEMALE)
    ws = ChartWorkspace.create(birth, as_of)
    for offset, name in enumerate(PALACE_NAMES):
        palace = ws.palace((0 - offset) % 12 + 1)
        palace.name = name
        palace.stem = HeavenlyStem.GUI
    return ws


def test_build_star_index_rejects_duplicates(named_workspace: ChartWorkspace) -> None:
    named_workspace.palace(1).primary_stars.append(Star(StarName.ZI_WEI, 1))
    named_workspace.palace(2).primary_stars.append(Star(StarName.ZI_WEI, 2))
    with pytest.raises(InvariantViolation) as excinfo:
        build_star_index(named_workspace)
    assert excinfo.value.key is StarName.ZI_WEI


def test_self_and_opposite_influences(named_workspace: ChartWorkspace, lunar_converter) -> None:
    # Gui: Lu Po Jun, Quan Ju Men, Ke Tai Yin, Ji Tan Lang.
    # Jia: Lu Lian Zhen, Quan Po Jun, Ke Wu Qu, Ji Tai Yang.
    ws = named_workspace
    life = ws.palace(1)
    travel = ws.palace(7)
    travel.stem = HeavenlyStem.JIA
    life.primary_stars.append(Star(StarName.PO_JUN, 1))
    travel.primary_stars.append(Star(StarName.TAI_YIN, 7))
    travel.primary_stars.append(Star(StarName.LIAN_ZHEN, 7))
    placed = {StarName.PO_JUN, StarName.TAI_YIN, StarName.LIAN_ZHEN}
    for star_name in StarName:
        if star_name not in placed:
            ws.palace(4).primary_stars.append(Star(star_name, 4))

    ws.star_index = build_star_index(ws)
    resolve_influences(ws, StageContext(converter=lunar_converter()))

    assert life.primary_stars[0].self_influence == [Transformation.LU]
    assert life.self_influence == [Transformation.LU]
    assert OppositeInfluence(StarName.TAI_YIN, Transformation.KE, 7) in life.opposite_influence
    assert travel.primary_stars[1].self_influence == [Transformation.LU]
    assert travel.opposite_influence == [OppositeInfluence(StarName.PO_JUN, Transformation.QUAN, 1)]


def test_influences_require_star_index(named_workspace: ChartWorkspace, lunar_converter) -> None:
    with pytest.raises(InvariantViolation) as excinfo:
        resolve_influences(named_workspace, StageContext(converter=lunar_converter()))
    assert excinfo.value.key == "star_index"


def test_star_index_points_at_workspace_records(lunar_converter, as_of: date) -> None:
    birth = BirthInput(year=1990, month=6, day=15, hour=10, gender=Gender.MALE)
    ws = run_stages(ChartWorkspace.create(birth, as_of), StageContext(converter=lunar_converter()), STAGES)
    assert ws.star_index is not None
    assert len(ws.star_index) == 18
    for name, location in ws.star_index.items():
        assert location.star.name is name
        assert location.star in ws.palace(location.palace).iter_stars()
