"""Gregorian to lunisolar date conversion."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from lunar_python import Solar

LOG = logging.getLogger(__name__)

__all__ = [
    "LunarDate",
    "LunarConverter",
    "LunarPythonConverter",
    "DEFAULT_CONVERTER",
]


@dataclass(frozen=True)
class LunarDate:
    """A date on the Chinese lunisolar calendar.

    ``month`` is always 1-12; leap months repeat the number of the month they
    follow and are flagged through ``is_leap``.
    """

    year: int
    month: int
    day: int
    is_leap: bool = False

    def __post_init__(self) -> None:
        if not 1 <= self.month <= 12:
            raise ValueError(f"Lunar month must be within 1-12, got {self.month}")
        if not 1 <= self.day <= 30:
            raise ValueError(f"Lunar day must be within 1-30, got {self.day}")

    def label(self) -> str:
        leap = "leap " if self.is_leap else ""
        return f"{self.year}-{leap}{self.month:02d}-{self.day:02d}"


@runtime_checkable
class LunarConverter(Protocol):
    """Anything able to map a Gregorian date onto the lunisolar calendar."""

    def to_lunar(self, year: int, month: int, day: int) -> LunarDate:
        ...


class LunarPythonConverter:
    """Converter backed by the :mod:`lunar_python` almanac tables."""

    name = "lunar_python"

    def to_lunar(self, year: int, month: int, day: int) -> LunarDate:
        lunar = Solar.fromYmd(year, month, day).getLunar()
        raw_month = lunar.getMonth()
        converted = LunarDate(
            year=lunar.getYear(),
            month=abs(raw_month),
            day=lunar.getDay(),
            is_leap=raw_month < 0,
        )
        LOG.debug("Converted %04d-%02d-%02d to lunar %s", year, month, day, converted.label())
        return converted


DEFAULT_CONVERTER: LunarConverter = LunarPythonConverter()
