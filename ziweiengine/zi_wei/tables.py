"""Static lookup tables for Zi Wei Dou Shu chart construction.

Every table is built once at import time into read-only mappings keyed by the
enums in :mod:`ziweiengine.zi_wei.models`. The accessor functions are the only
supported way to read them: a missing key raises
:class:`~ziweiengine.zi_wei.errors.LookupMiss` carrying the offending key.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import Final

from ..chinese.constants import EarthlyBranch, HeavenlyStem, branch_for_index
from .errors import LookupMiss
from .models import (
    PALACE_COUNT,
    FiveElement,
    PalaceName,
    StarName,
    Transformation,
)

__all__ = [
    "LIFE_PALACE_BRANCH_OFFSET",
    "palace_branch",
    "palace_stem_anchor",
    "life_palace_branch",
    "five_element_for",
    "lunar_day_label",
    "zi_wei_branch",
    "main_star_layout",
    "zuo_fu_branch",
    "you_bi_branch",
    "wen_chang_branch",
    "wen_qu_branch",
    "transformation_rules",
    "major_limit_start_age",
    "opposite_palace_name",
]


def _branches(chars: str) -> tuple[EarthlyBranch, ...]:
    return tuple(EarthlyBranch.from_chinese(char) for char in chars)


# Palace 1 sits on Si; positions advance clockwise one branch at a time.
LIFE_PALACE_BRANCH_OFFSET: Final[int] = 5

# Five Tigers rule: the year stem group fixes the stem of the Yin (Tiger) palace.
_PALACE_STEM_ANCHOR: Final[Mapping[int, HeavenlyStem]] = MappingProxyType(
    {
        0: HeavenlyStem.BING,  # Jia/Ji years
        1: HeavenlyStem.WU,  # Yi/Geng years
        2: HeavenlyStem.GENG,  # Bing/Xin years
        3: HeavenlyStem.REN,  # Ding/Ren years
        4: HeavenlyStem.JIA,  # Wu/Gui years
    }
)

# Row per lunar month, column per hour branch (Zi..Hai).
_LIFE_PALACE_ROWS: Final[tuple[tuple[EarthlyBranch, ...], ...]] = tuple(
    _branches(row)
    for row in (
        "寅丑子亥戌酉申未午巳辰卯",
        "卯寅丑子亥戌酉申未午巳辰",
        "辰卯寅丑子亥戌酉申未午巳",
        "巳辰卯寅丑子亥戌酉申未午",
        "午巳辰卯寅丑子亥戌酉申未",
        "未午巳辰卯寅丑子亥戌酉申",
        "申未午巳辰卯寅丑子亥戌酉",
        "酉申未午巳辰卯寅丑子亥戌",
        "戌酉申未午巳辰卯寅丑子亥",
        "亥戌酉申未午巳辰卯寅丑子",
        "子亥戌酉申未午巳辰卯寅丑",
        "丑子亥戌酉申未午巳辰卯寅",
    )
)

_ELEMENT_CHARS: Final[Mapping[str, FiveElement]] = MappingProxyType(
    {
        "水": FiveElement.WATER,
        "木": FiveElement.WOOD,
        "金": FiveElement.METAL,
        "土": FiveElement.EARTH,
        "火": FiveElement.FIRE,
    }
)

# Stem of the life palace -> branch/element pairs.
_RAW_FIVE_ELEMENTS: Final[dict[str, str]] = {
    "甲": "子金寅水辰火午金申水戌火",
    "乙": "丑金卯水巳火未金酉水亥火",
    "丙": "子水寅火辰土午水申火戌土",
    "丁": "丑水卯火巳土未水酉火亥土",
    "戊": "子火寅土辰木午火申土戌木",
    "己": "丑火卯土巳木未火酉土亥木",
    "庚": "子土寅木辰金午土申木戌金",
    "辛": "丑土卯木巳金未土酉木亥金",
    "壬": "子木寅金辰水午木申金戌水",
    "癸": "丑木卯金巳水未木酉金亥水",
}


def _build_five_elements() -> Mapping[HeavenlyStem, Mapping[EarthlyBranch, FiveElement]]:
    table: dict[HeavenlyStem, Mapping[EarthlyBranch, FiveElement]] = {}
    for stem_char, pairs in _RAW_FIVE_ELEMENTS.items():
        row = {
            EarthlyBranch.from_chinese(pairs[idx]): _ELEMENT_CHARS[pairs[idx + 1]]
            for idx in range(0, len(pairs), 2)
        }
        table[HeavenlyStem.from_chinese(stem_char)] = MappingProxyType(row)
    return MappingProxyType(table)


FIVE_ELEMENTS_TABLE: Final = _build_five_elements()

_DAY_LABELS: Final[tuple[str, ...]] = (
    "初一", "初二", "初三", "初四", "初五", "初六", "初七", "初八", "初九", "初十",
    "十一", "十二", "十三", "十四", "十五", "十六", "十七", "十八", "十九", "二十",
    "廿一", "廿二", "廿三", "廿四", "廿五", "廿六", "廿七", "廿八", "廿九", "三十",
)

# Zi Wei branch per lunar day; columns are Water 2, Wood 3, Metal 4, Earth 5, Fire 6.
_RAW_ZI_WEI_POSITIONS: Final[tuple[str, ...]] = (
    "丑辰亥午酉",
    "寅丑辰亥午",
    "寅寅丑辰亥",
    "卯巳寅丑辰",
    "卯寅子寅丑",
    "辰卯巳未寅",
    "辰午寅子戌",
    "巳卯卯巳未",
    "巳辰丑寅子",
    "午未午卯巳",
    "午辰卯申寅",
    "未巳辰丑卯",
    "未申寅午亥",
    "申巳未卯申",
    "申午辰辰丑",
    "酉酉巳酉午",
    "酉午卯寅卯",
    "戌未申未辰",
    "戌戌巳辰子",
    "亥未午巳酉",
    "亥申辰戌寅",
    "子亥酉卯未",
    "子申午申辰",
    "丑酉未巳巳",
    "丑子巳午丑",
    "寅酉戌亥戌",
    "寅戌未辰卯",
    "卯丑申酉申",
    "卯戌午午巳",
    "辰亥亥未午",
)

_ELEMENT_COLUMNS: Final[tuple[FiveElement, ...]] = (
    FiveElement.WATER,
    FiveElement.WOOD,
    FiveElement.METAL,
    FiveElement.EARTH,
    FiveElement.FIRE,
)

ZI_WEI_POSITIONS: Final[Mapping[str, Mapping[FiveElement, EarthlyBranch]]] = MappingProxyType(
    {
        label: MappingProxyType(dict(zip(_ELEMENT_COLUMNS, _branches(row), strict=True)))
        for label, row in zip(_DAY_LABELS, _RAW_ZI_WEI_POSITIONS, strict=True)
    }
)

# Zi Wei branch -> stars per palace branch, columns Zi..Hai. Zi Wei itself is
# listed at its own branch in every row.
_RAW_MAIN_STARS: Final[dict[str, tuple[str, ...]]] = {
    "子": ("紫微", "", "破军", "", "天府 廉贞", "太阴", "贪狼", "巨门 天同", "天相 武曲", "天梁 太阳", "七杀", "天机"),
    "丑": ("天机", "破军 紫微", "", "天府", "太阴", "贪狼 廉贞", "巨门", "天相", "天梁 天同", "七杀 武曲", "太阳", ""),
    "寅": ("破军", "天机", "天府 紫微", "太阴", "贪狼", "巨门", "天相 廉贞", "天梁", "七杀", "天同", "武曲", "太阳"),
    "卯": ("太阳", "天府", "太阴 天机", "贪狼 紫微", "巨门", "天相", "天梁", "七杀 廉贞", "", "", "天同", "破军 武曲"),
    "辰": ("天府 武曲", "太阴 太阳", "贪狼", "巨门 天机", "天相 紫微", "天梁", "七杀", "", "廉贞", "", "破军", "天同"),
    "巳": ("太阴 天同", "贪狼 武曲", "巨门 太阳", "天相", "天梁 天机", "七杀 紫微", "", "", "", "破军 廉贞", "", "天府"),
    "午": ("贪狼", "巨门 天同", "天相 武曲", "天梁 太阳", "七杀", "天机", "紫微", "", "破军", "", "天府 廉贞", "太阴"),
    "未": ("巨门", "天相", "天梁 天同", "七杀 武曲", "太阳", "", "天机", "破军 紫微", "", "天府", "太阴", "贪狼 廉贞"),
    "申": ("天相 廉贞", "天梁", "七杀", "天同", "武曲", "太阳", "破军", "天机", "天府 紫微", "太阴", "贪狼", "巨门"),
    "酉": ("天梁", "七杀 廉贞", "", "", "天同", "破军 武曲", "太阳", "天府", "太阴 天机", "贪狼 紫微", "巨门", "天相"),
    "戌": ("七杀", "", "廉贞", "", "破军", "天同", "天府 武曲", "太阴 太阳", "贪狼", "巨门 天机", "天相 紫微", "天梁"),
    "亥": ("", "", "", "破军 廉贞", "", "天府", "太阴 天同", "贪狼 武曲", "巨门 太阳", "天相", "天梁 天机", "七杀 紫微"),
}


def _build_main_stars() -> Mapping[EarthlyBranch, Mapping[EarthlyBranch, tuple[StarName, ...]]]:
    table: dict[EarthlyBranch, Mapping[EarthlyBranch, tuple[StarName, ...]]] = {}
    for anchor_char, columns in _RAW_MAIN_STARS.items():
        layout = {
            branch_for_index(idx): tuple(StarName(name) for name in cell.split())
            for idx, cell in enumerate(columns)
            if cell
        }
        table[EarthlyBranch.from_chinese(anchor_char)] = MappingProxyType(layout)
    return MappingProxyType(table)


MAIN_STARS_TABLE: Final = _build_main_stars()

# Indexed by lunar month - 1.
_ZUO_FU_BY_MONTH: Final = _branches("辰巳午未申酉戌亥子丑寅卯")
_YOU_BI_BY_MONTH: Final = _branches("戌酉申未午巳辰卯寅丑子亥")
# Indexed by hour branch (Zi..Hai).
_WEN_CHANG_BY_HOUR: Final = _branches("戌酉申未午巳辰卯寅丑子亥")
_WEN_QU_BY_HOUR: Final = _branches("辰巳午未申酉戌亥子丑寅卯")

# Year or palace stem -> (Lu, Quan, Ke, Ji) targets.
_RAW_TRANSFORMATIONS: Final[dict[str, tuple[str, str, str, str]]] = {
    "甲": ("廉贞", "破军", "武曲", "太阳"),
    "乙": ("天机", "天梁", "紫微", "太阴"),
    "丙": ("天同", "天机", "文昌", "廉贞"),
    "丁": ("太阴", "天同", "天机", "巨门"),
    "戊": ("贪狼", "太阴", "右弼", "天机"),
    "己": ("武曲", "贪狼", "天梁", "文曲"),
    "庚": ("太阳", "武曲", "太阴", "天同"),
    "辛": ("巨门", "太阳", "文曲", "文昌"),
    "壬": ("天梁", "紫微", "左輔", "武曲"),
    "癸": ("破军", "巨门", "太阴", "贪狼"),
}

FOUR_TRANSFORMATIONS: Final[Mapping[HeavenlyStem, tuple[tuple[Transformation, StarName], ...]]] = (
    MappingProxyType(
        {
            HeavenlyStem.from_chinese(stem): tuple(
                zip(tuple(Transformation), (StarName(name) for name in targets), strict=True)
            )
            for stem, targets in _RAW_TRANSFORMATIONS.items()
        }
    )
)

MAJOR_LIMIT_START_AGES: Final[Mapping[FiveElement, int]] = MappingProxyType(
    {
        FiveElement.WATER: 2,
        FiveElement.WOOD: 3,
        FiveElement.METAL: 4,
        FiveElement.EARTH: 5,
        FiveElement.FIRE: 6,
    }
)

_OPPOSITE_PAIRS: Final[tuple[tuple[PalaceName, PalaceName], ...]] = (
    (PalaceName.LIFE, PalaceName.TRAVEL),
    (PalaceName.PARENTS, PalaceName.HEALTH),
    (PalaceName.MENTAL, PalaceName.WEALTH),
    (PalaceName.PROPERTY, PalaceName.CHILDREN),
    (PalaceName.CAREER, PalaceName.SPOUSE),
    (PalaceName.FRIENDS, PalaceName.SIBLINGS),
)

OPPOSITE_PALACES: Final[Mapping[PalaceName, PalaceName]] = MappingProxyType(
    {**dict(_OPPOSITE_PAIRS), **{b: a for a, b in _OPPOSITE_PAIRS}}
)


def palace_branch(position: int) -> EarthlyBranch:
    """Return the fixed branch of palace ``position`` (1-12)."""

    if not 1 <= position <= PALACE_COUNT:
        raise LookupMiss(f"Palace position out of range: {position}", key=position)
    return branch_for_index(position - 1 + LIFE_PALACE_BRANCH_OFFSET)


def palace_stem_anchor(stem_group: int) -> HeavenlyStem | None:
    """Return the stem of the Yin palace for ``stem_group`` (year stem mod 5)."""

    return _PALACE_STEM_ANCHOR.get(stem_group)


def life_palace_branch(lunar_month: int, hour_branch: EarthlyBranch) -> EarthlyBranch:
    if not 1 <= lunar_month <= len(_LIFE_PALACE_ROWS):
        raise LookupMiss(f"No life palace row for lunar month {lunar_month}", key=lunar_month)
    return _LIFE_PALACE_ROWS[lunar_month - 1][hour_branch]


def five_element_for(stem: HeavenlyStem, branch: EarthlyBranch) -> FiveElement:
    try:
        return FIVE_ELEMENTS_TABLE[stem][branch]
    except KeyError:
        raise LookupMiss(
            f"No five-element entry for {stem.chinese}{branch.chinese}", key=(stem, branch)
        ) from None


def lunar_day_label(day: int) -> str:
    """Return the almanac label of lunar ``day`` (``初一`` .. ``三十``)."""

    if not 1 <= day <= len(_DAY_LABELS):
        raise LookupMiss(f"No label for lunar day {day}", key=day)
    return _DAY_LABELS[day - 1]


def zi_wei_branch(day_label: str, element: FiveElement) -> EarthlyBranch:
    try:
        return ZI_WEI_POSITIONS[day_label][element]
    except KeyError:
        raise LookupMiss(
            f"No Zi Wei position for day {day_label} in {element.value}",
            key=(day_label, element),
        ) from None


def main_star_layout(anchor: EarthlyBranch) -> Mapping[EarthlyBranch, tuple[StarName, ...]]:
    """Return the primary-star layout when Zi Wei sits on ``anchor``."""

    try:
        return MAIN_STARS_TABLE[anchor]
    except KeyError:
        raise LookupMiss(f"No primary star layout for Zi Wei in {anchor}", key=anchor) from None


def _by_month(table: tuple[EarthlyBranch, ...], star: StarName, lunar_month: int) -> EarthlyBranch:
    if not 1 <= lunar_month <= len(table):
        raise LookupMiss(f"No {star.value} entry for lunar month {lunar_month}", key=lunar_month)
    return table[lunar_month - 1]


def zuo_fu_branch(lunar_month: int) -> EarthlyBranch:
    return _by_month(_ZUO_FU_BY_MONTH, StarName.ZUO_FU, lunar_month)


def you_bi_branch(lunar_month: int) -> EarthlyBranch:
    return _by_month(_YOU_BI_BY_MONTH, StarName.YOU_BI, lunar_month)


def wen_chang_branch(hour_branch: EarthlyBranch) -> EarthlyBranch:
    return _WEN_CHANG_BY_HOUR[hour_branch]


def wen_qu_branch(hour_branch: EarthlyBranch) -> EarthlyBranch:
    return _WEN_QU_BY_HOUR[hour_branch]


def transformation_rules(stem: HeavenlyStem) -> tuple[tuple[Transformation, StarName], ...]:
    """Return the ``(transformation, star)`` rules of ``stem`` in Lu, Quan, Ke, Ji order."""

    try:
        return FOUR_TRANSFORMATIONS[stem]
    except KeyError:
        raise LookupMiss(f"No transformation rules for stem {stem}", key=stem) from None


def major_limit_start_age(element: FiveElement) -> int:
    try:
        return MAJOR_LIMIT_START_AGES[element]
    except KeyError:
        raise LookupMiss(f"No major limit start age for {element}", key=element) from None


def opposite_palace_name(name: PalaceName) -> PalaceName:
    try:
        return OPPOSITE_PALACES[name]
    except KeyError:
        raise LookupMiss(f"No opposite palace for {name.value}", key=name) from None
