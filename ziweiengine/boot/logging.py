"""Root logger setup shared by the CLI and service entry points."""

from __future__ import annotations

import logging
import os
from typing import Any

__all__ = ["configure_logging", "LEVEL_ENV_VARS"]

_DEFAULT_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
_DEFAULT_DATEFMT = "%Y-%m-%d %H:%M:%S"

# Checked in order; the first non-empty one wins.
LEVEL_ENV_VARS: tuple[str, ...] = ("ZIWEIENGINE_LOG_LEVEL", "LOG_LEVEL")


def _coerce_level(value: str | int | None, *, default: int = logging.INFO) -> int:
    """Translate a level name or number into a numeric level.

    Names are case insensitive; anything unrecognised maps to ``default``.
    """

    if isinstance(value, int):
        return value
    text = (value or "").strip()
    if text.isdigit():
        return int(text)
    return logging.getLevelNamesMapping().get(text.upper(), default)


def _level_from_environment() -> str | None:
    return next((os.environ[name] for name in LEVEL_ENV_VARS if os.environ.get(name)), None)


def configure_logging(*, level: str | int | None = None, **kwargs: Any) -> int:
    """Install the ZiWeiEngine log format on the root logger.

    ``level`` wins when given; otherwise ``ZIWEIENGINE_LOG_LEVEL`` and then
    ``LOG_LEVEL`` are read. Extra ``kwargs`` go to :func:`logging.basicConfig`,
    which replaces existing root handlers unless ``force=False`` is passed.
    Returns the level that was applied.
    """

    effective = _coerce_level(level if level is not None else _level_from_environment())
    kwargs.setdefault("format", _DEFAULT_FORMAT)
    kwargs.setdefault("datefmt", _DEFAULT_DATEFMT)
    kwargs.setdefault("force", True)
    logging.basicConfig(level=effective, **kwargs)
    logging.getLogger("ziweiengine").debug(
        "Logging configured at %s", logging.getLevelName(effective)
    )
    return effective
