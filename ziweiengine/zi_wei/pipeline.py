"""Ordered Zi Wei pipeline and the public chart entry point."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import date
from time import perf_counter

from ..chinese.lunar import DEFAULT_CONVERTER, LunarConverter
from ..config.settings import Settings, default_settings
from ..observability.metrics import CHARTS_COMPUTED, COMPUTE_ERRORS, STAGE_COMPUTE_DURATION
from .chart import ZiWeiChart, freeze_workspace
from .errors import InvalidInput, ZiWeiError
from .influence import index_stars, resolve_influences
from .models import BirthInput
from .stages import (
    StageContext,
    apply_birth_year_transformations,
    assign_major_limits,
    assign_palace_stems,
    classify_five_element,
    locate_life_palace,
    name_palaces,
    place_auxiliary_stars,
    place_primary_stars,
    place_zi_wei,
    project_annual_flow,
    resolve_year_pillar,
)
from .workspace import ChartWorkspace

LOG = logging.getLogger(__name__)

__all__ = ["Stage", "STAGES", "INPUT_STAGE", "FORMAT_STAGE", "run_stages", "compute_zi_wei_chart"]

INPUT_STAGE = "input"
FORMAT_STAGE = "format"


@dataclass(frozen=True)
class Stage:
    """Named step of the pipeline."""

    name: str
    run: Callable[[ChartWorkspace, StageContext], str]


STAGES: tuple[Stage, ...] = (
    Stage("year_pillar", resolve_year_pillar),
    Stage("palace_stems", assign_palace_stems),
    Stage("life_palace", locate_life_palace),
    Stage("palace_names", name_palaces),
    Stage("five_element", classify_five_element),
    Stage("zi_wei", place_zi_wei),
    Stage("primary_stars", place_primary_stars),
    Stage("auxiliary_stars", place_auxiliary_stars),
    Stage("birth_year_transformations", apply_birth_year_transformations),
    Stage("major_limits", assign_major_limits),
    Stage("annual_flow", project_annual_flow),
    Stage("star_index", index_stars),
    Stage("influences", resolve_influences),
)


def _record_failure(exc: ZiWeiError, stage: str, *, metrics: bool) -> None:
    if exc.stage is None:
        exc.stage = stage
    if metrics:
        COMPUTE_ERRORS.labels(stage=stage, error=exc.__class__.__name__).inc()
    LOG.warning(
        "Zi Wei chart failed at stage %s (key=%r): %s", stage, exc.key, exc.message
    )


def run_stages(
    ws: ChartWorkspace,
    ctx: StageContext,
    stages: Sequence[Stage] = STAGES,
    *,
    trace: bool = True,
    metrics: bool = True,
) -> ChartWorkspace:
    """Run ``stages`` in order against ``ws`` and return it.

    Any :class:`ZiWeiError` aborts the run; the error is tagged with the name
    of the failing stage before it propagates.
    """

    for stage in stages:
        start = perf_counter()
        try:
            message = stage.run(ws, ctx)
        except ZiWeiError as exc:
            _record_failure(exc, stage.name, metrics=metrics)
            raise
        finally:
            if metrics:
                STAGE_COMPUTE_DURATION.labels(stage=stage.name).observe(perf_counter() - start)
        ws.completed.append(stage.name)
        if trace:
            ws.trace[stage.name] = message
        LOG.debug("stage %s: %s", stage.name, message)
    return ws


def _check_year_range(birth: BirthInput, settings: Settings) -> None:
    calendar = settings.calendar
    if not calendar.min_year <= birth.year <= calendar.max_year:
        raise InvalidInput(
            f"Birth year {birth.year} is outside the supported range "
            f"{calendar.min_year}-{calendar.max_year}",
            stage=INPUT_STAGE,
            key=birth.year,
        )


def compute_zi_wei_chart(
    birth: BirthInput,
    *,
    as_of: date | None = None,
    converter: LunarConverter | None = None,
    settings: Settings | None = None,
) -> ZiWeiChart:
    """Compute a Zi Wei Dou Shu chart for ``birth``.

    Parameters
    ----------
    birth:
        Validated Gregorian birth data.
    as_of:
        Date whose year selects the annual flow cycle. Defaults to today,
        read once; pass an explicit date for reproducible charts.
    converter:
        Lunar calendar converter; defaults to the :mod:`lunar_python` backend.
    settings:
        Engine settings; defaults to :func:`default_settings`.

    Returns
    -------
    ZiWeiChart
        Immutable chart with all twelve palaces populated.
    """

    cfg = settings or default_settings()
    metrics = cfg.observability.metrics_enabled
    try:
        _check_year_range(birth, cfg)
    except InvalidInput as exc:
        _record_failure(exc, INPUT_STAGE, metrics=metrics)
        raise

    moment = as_of or date.today()
    lunar_converter = converter or DEFAULT_CONVERTER
    ctx = StageContext(
        converter=lunar_converter,
        annual_reference_year=cfg.annual_flow.reference_year,
    )
    started = perf_counter()
    ws = run_stages(
        ChartWorkspace.create(birth, moment),
        ctx,
        trace=cfg.trace.enabled,
        metrics=metrics,
    )

    format_start = perf_counter()
    try:
        chart = freeze_workspace(
            ws,
            provenance={
                "converter": getattr(lunar_converter, "name", type(lunar_converter).__name__),
                "annual_flow_reference_year": cfg.annual_flow.reference_year,
                "as_of": moment.isoformat(),
                "schema_version": cfg.schema_version,
            },
        )
    except ZiWeiError as exc:
        _record_failure(exc, FORMAT_STAGE, metrics=metrics)
        raise
    finally:
        if metrics:
            STAGE_COMPUTE_DURATION.labels(stage=FORMAT_STAGE).observe(perf_counter() - format_start)

    if metrics:
        CHARTS_COMPUTED.inc()
    LOG.info(
        "Computed Zi Wei chart for %s: life palace %d, %s, main star %s (%.1f ms)",
        birth.describe(),
        chart.life_palace,
        chart.five_element.english,
        chart.main_star.pinyin if chart.main_star else "none",
        (perf_counter() - started) * 1000.0,
    )
    return chart
