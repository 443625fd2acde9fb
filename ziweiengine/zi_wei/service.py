"""Request validation and response envelopes around the chart pipeline."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import UTC, date, datetime
from time import perf_counter
from typing import Any, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from ..chinese.lunar import LunarConverter
from ..config.settings import Settings
from ..observability.metrics import SERVICE_REQUESTS
from .chart import ZiWeiChart
from .errors import ZiWeiError
from .models import BirthInput, Gender
from .pipeline import compute_zi_wei_chart

LOG = logging.getLogger(__name__)

__all__ = [
    "ChartRequest",
    "ChartResponse",
    "ChartInfo",
    "ChartInfoResponse",
    "calculate_chart",
    "chart_info",
]


def _timestamp() -> str:
    return datetime.now(UTC).isoformat().replace("+00:00", "Z")


class ChartRequest(BaseModel):
    """Raw chart request as submitted by a client."""

    name: str = Field(..., max_length=100)
    year: int
    month: int = Field(..., ge=1, le=12)
    day: int = Field(..., ge=1, le=31)
    hour: int = Field(..., ge=0, le=23)
    gender: Gender

    @field_validator("name", mode="before")
    @classmethod
    def _strip_name(cls, value: object) -> object:
        if isinstance(value, str):
            stripped = value.strip()
            if not stripped:
                raise ValueError("Name is required and must be a non-empty string")
            return stripped
        return value

    @field_validator("gender", mode="before")
    @classmethod
    def _normalise_gender(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @model_validator(mode="after")
    def _check_calendar_date(self) -> "ChartRequest":
        try:
            date(self.year, self.month, self.day)
        except ValueError as exc:
            raise ValueError(f"{self.year}-{self.month}-{self.day} is not a valid date: {exc}") from exc
        return self

    def to_birth_input(self) -> BirthInput:
        return BirthInput(
            year=self.year,
            month=self.month,
            day=self.day,
            hour=self.hour,
            gender=self.gender,
            subject_label=self.name,
        )


class ChartResponse(BaseModel):
    """Envelope returned by :func:`calculate_chart`."""

    success: bool
    data: Optional[dict[str, Any]] = None
    error: Optional[str] = None
    timestamp: str = Field(default_factory=_timestamp)


class ChartInfo(BaseModel):
    name: str
    birth_info: str
    life_palace: int
    five_elements: str
    main_star: str
    calculation_steps: dict[str, str]


class ChartInfoResponse(BaseModel):
    success: bool
    data: Optional[ChartInfo] = None
    error: Optional[str] = None
    timestamp: str = Field(default_factory=_timestamp)


def _describe_validation_error(exc: ValidationError) -> str:
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()))
        message = error.get("msg", "invalid value")
        messages.append(f"{location}: {message}" if location else message)
    return "Validation failed: " + ", ".join(messages)


def _run(
    payload: Mapping[str, Any] | ChartRequest,
    *,
    as_of: date | None,
    converter: LunarConverter | None,
    settings: Settings | None,
) -> tuple[ChartRequest | None, ZiWeiChart | None, str | None]:
    started = perf_counter()
    try:
        request = (
            payload if isinstance(payload, ChartRequest) else ChartRequest.model_validate(payload)
        )
    except ValidationError as exc:
        error = _describe_validation_error(exc)
        LOG.warning("Chart request rejected: %s", error)
        SERVICE_REQUESTS.labels(outcome="invalid").inc()
        return None, None, error

    LOG.info("Starting chart calculation for %s", request.name)
    try:
        chart = compute_zi_wei_chart(
            request.to_birth_input(), as_of=as_of, converter=converter, settings=settings
        )
    except ZiWeiError as exc:
        LOG.error(
            "Chart calculation failed for %s after %.1f ms: %s",
            request.name,
            (perf_counter() - started) * 1000.0,
            exc,
        )
        SERVICE_REQUESTS.labels(outcome="failed").inc()
        return request, None, str(exc)

    LOG.info(
        "Chart calculation completed for %s in %.1f ms",
        request.name,
        (perf_counter() - started) * 1000.0,
    )
    SERVICE_REQUESTS.labels(outcome="success").inc()
    return request, chart, None


def calculate_chart(
    payload: Mapping[str, Any] | ChartRequest,
    *,
    as_of: date | None = None,
    converter: LunarConverter | None = None,
    settings: Settings | None = None,
) -> ChartResponse:
    """Validate ``payload`` and compute its chart.

    Validation and calculation failures are reported through the envelope
    rather than raised.
    """

    _, chart, error = _run(payload, as_of=as_of, converter=converter, settings=settings)
    if chart is None:
        return ChartResponse(success=False, error=error)
    return ChartResponse(success=True, data=chart.to_dict())


def chart_info(
    payload: Mapping[str, Any] | ChartRequest,
    *,
    as_of: date | None = None,
    converter: LunarConverter | None = None,
    settings: Settings | None = None,
) -> ChartInfoResponse:
    """Return a compact summary of the chart for ``payload``."""

    request, chart, error = _run(payload, as_of=as_of, converter=converter, settings=settings)
    if request is None or chart is None:
        return ChartInfoResponse(success=False, error=error or "Failed to calculate chart")
    birth = chart.birth
    info = ChartInfo(
        name=request.name,
        birth_info=f"{birth.year}-{birth.month}-{birth.day} {birth.hour}:00 ({birth.gender.value})",
        life_palace=chart.life_palace,
        five_elements=chart.five_element.value,
        main_star=chart.main_star.value if chart.main_star else "",
        calculation_steps=dict(chart.trace),
    )
    return ChartInfoResponse(success=True, data=info)
