"""ZiWeiEngine package bootstrap and curated public API surface."""

from __future__ import annotations

import logging
from importlib import import_module
from importlib.metadata import PackageNotFoundError, version as _get_version
from typing import Any

LOG = logging.getLogger(__name__)

try:
    __version__ = _get_version("ziweiengine")
except PackageNotFoundError:  # pragma: no cover - metadata may be unavailable when run from source
    __version__ = "0.0.0"


def get_version() -> str:
    """Return the resolved ZiWeiEngine package version."""

    return __version__


_LAZY_EXPORTS: dict[str, str] = {
    "BirthInput": "ziweiengine.zi_wei",
    "Gender": "ziweiengine.zi_wei",
    "ZiWeiChart": "ziweiengine.zi_wei",
    "ZiWeiError": "ziweiengine.zi_wei",
    "calculate_chart": "ziweiengine.zi_wei",
    "compute_zi_wei_chart": "ziweiengine.zi_wei",
    "Settings": "ziweiengine.config",
    "load_settings": "ziweiengine.config",
}

__all__ = ["__version__", "get_version", *_LAZY_EXPORTS]


def __getattr__(name: str) -> Any:
    target = _LAZY_EXPORTS.get(name)
    if target is None:
        raise AttributeError(f"module 'ziweiengine' has no attribute {name!r}")
    value = getattr(import_module(target), name)
    globals()[name] = value
    return value
