"""Zi Wei Dou Shu (紫微斗數) natal chart engine."""

from __future__ import annotations

from .chart import ZiWeiChart, ZiWeiPalace, ZiWeiStar
from .errors import InvalidInput, InvariantViolation, LookupMiss, ZiWeiError
from .models import (
    PALACE_NAMES,
    BirthInput,
    Brightness,
    FiveElement,
    Gender,
    PalaceName,
    StarName,
    Transformation,
)
from .pipeline import STAGES, compute_zi_wei_chart
from .selectors import (
    career_palace,
    current_major_limit_palace,
    major_limit_palace,
    palace_at_offset,
    wealth_palace,
)
from .profile_bars import (
    BarOptions,
    ExecutionType,
    FloorMode,
    classify_execution,
    compute_career_bars,
    compute_life_bars,
    compute_wealth_bars,
)
from .service import ChartRequest, ChartResponse, calculate_chart, chart_info
from .wealth_code import WealthCode, classify_wealth_codes, explain_wealth_code_votes

__all__ = [
    "BarOptions",
    "BirthInput",
    "Brightness",
    "ChartRequest",
    "ChartResponse",
    "ExecutionType",
    "FiveElement",
    "FloorMode",
    "Gender",
    "InvalidInput",
    "InvariantViolation",
    "LookupMiss",
    "PALACE_NAMES",
    "PalaceName",
    "STAGES",
    "StarName",
    "Transformation",
    "WealthCode",
    "ZiWeiChart",
    "ZiWeiError",
    "ZiWeiPalace",
    "ZiWeiStar",
    "calculate_chart",
    "career_palace",
    "classify_execution",
    "classify_wealth_codes",
    "compute_career_bars",
    "compute_life_bars",
    "compute_wealth_bars",
    "chart_info",
    "compute_zi_wei_chart",
    "current_major_limit_palace",
    "explain_wealth_code_votes",
    "major_limit_palace",
    "palace_at_offset",
    "wealth_palace",
]
